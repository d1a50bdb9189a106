"""
担当者・売上レコード・集計結果のデータモデル
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from dateutil.parser import isoparse

from .constants import Direction, Metric, RankingMetric
from .profit_calculator import net_profit_of, to_amount


def _ratio_percent(part: float, whole: float) -> float:
    """part / whole * 100（whole が0の場合は0）"""
    if whole == 0:
        return 0.0
    return part / whole * 100


def _average(total: float, count: int) -> float:
    if count == 0:
        return 0.0
    return total / count


def normalize_month(value: Any) -> str:
    """月コードを2桁の文字列に正規化（'3' -> '03'）"""
    text = str(value).strip() if value is not None else ''
    if text.isdigit():
        return text.zfill(2)
    return text


def normalize_year(value: Any) -> str:
    """年を文字列に正規化（2024 / 2024.0 -> '2024'）"""
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return isoparse(str(value).strip()).date()
    except ValueError:
        return None


@dataclass
class StaffMember:
    """担当者（セトリスタ）"""
    id: str
    name: str
    phone: Optional[str] = None
    hired_on: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        """保存形式の辞書に変換"""
        return {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'hiredOn': self.hired_on.isoformat() if self.hired_on else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StaffMember':
        """保存形式の辞書から生成"""
        return cls(
            id=str(data.get('id', '')),
            name=str(data.get('name') or ''),
            phone=data.get('phone') or None,
            hired_on=_parse_date(data.get('hiredOn'))
        )


@dataclass
class SalesRecord:
    """担当者1名・1か月分の売上レコード"""
    id: str
    staff_id: str
    staff_name: str
    month: str
    year: str
    sales: float = 0.0
    commission: float = 0.0
    bonus: float = 0.0
    expenses: float = 0.0
    net_profit: float = 0.0

    @property
    def period(self) -> Tuple[str, str]:
        """(年, 月) のタプル。時系列ソートのキーに使う"""
        return (self.year, self.month)

    @property
    def period_key(self) -> str:
        return f"{self.year}-{self.month}"

    def value_of(self, metric: Metric) -> float:
        """指標の値を取得（利益は常に再計算）"""
        if metric is Metric.PROFIT:
            return net_profit_of(self)
        return getattr(self, metric.value)

    def to_dict(self) -> Dict[str, Any]:
        """保存形式の辞書に変換"""
        return {
            'id': self.id,
            'staffId': self.staff_id,
            'staffName': self.staff_name,
            'month': self.month,
            'year': self.year,
            'sales': self.sales,
            'commission': self.commission,
            'bonus': self.bonus,
            'expenses': self.expenses,
            'netProfit': self.net_profit
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SalesRecord':
        """保存形式の辞書から生成"""
        return cls(
            id=str(data.get('id', '')),
            staff_id=str(data.get('staffId', '')),
            staff_name=str(data.get('staffName') or ''),
            month=normalize_month(data.get('month')),
            year=normalize_year(data.get('year')),
            sales=to_amount(data.get('sales')),
            commission=to_amount(data.get('commission')),
            bonus=to_amount(data.get('bonus')),
            expenses=to_amount(data.get('expenses')),
            net_profit=to_amount(data.get('netProfit'))
        )


@dataclass
class StaffTotals:
    """担当者別（または任意のレコード集合）の集計結果"""
    key: Any
    label: str
    staff_ids: List[str] = field(default_factory=list)
    total_sales: float = 0.0
    total_commission: float = 0.0
    total_bonus: float = 0.0
    total_expenses: float = 0.0
    total_profit: float = 0.0
    record_count: int = 0
    records: List[SalesRecord] = field(default_factory=list)

    def add(self, record: SalesRecord) -> None:
        """レコードを1件畳み込む"""
        self.total_sales += record.sales
        self.total_commission += record.commission
        self.total_bonus += record.bonus
        self.total_expenses += record.expenses
        self.total_profit += net_profit_of(record)
        self.record_count += 1
        self.records.append(record)
        if record.staff_id not in self.staff_ids:
            self.staff_ids.append(record.staff_id)

    @property
    def staff_id(self) -> Optional[str]:
        return self.staff_ids[0] if self.staff_ids else None

    @property
    def profit_percent_of_sales(self) -> float:
        return _ratio_percent(self.total_profit, self.total_sales)

    @property
    def expense_percent_of_sales(self) -> float:
        return _ratio_percent(self.total_expenses, self.total_sales)

    @property
    def average_sales(self) -> float:
        return _average(self.total_sales, self.record_count)

    @property
    def average_commission(self) -> float:
        return _average(self.total_commission, self.record_count)

    @property
    def average_bonus(self) -> float:
        return _average(self.total_bonus, self.record_count)

    @property
    def average_expenses(self) -> float:
        return _average(self.total_expenses, self.record_count)

    @property
    def average_profit(self) -> float:
        return _average(self.total_profit, self.record_count)

    def total_of(self, metric: Metric) -> float:
        """指標ごとの合計値"""
        return {
            Metric.SALES: self.total_sales,
            Metric.COMMISSION: self.total_commission,
            Metric.BONUS: self.total_bonus,
            Metric.EXPENSES: self.total_expenses,
            Metric.PROFIT: self.total_profit,
        }[metric]

    def average_of(self, metric: Metric) -> float:
        """指標ごとの平均値"""
        return _average(self.total_of(metric), self.record_count)

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return {
            'label': self.label,
            'staff_ids': list(self.staff_ids),
            'total_sales': self.total_sales,
            'total_commission': self.total_commission,
            'total_bonus': self.total_bonus,
            'total_expenses': self.total_expenses,
            'total_profit': self.total_profit,
            'record_count': self.record_count,
            'profit_percent_of_sales': self.profit_percent_of_sales,
            'expense_percent_of_sales': self.expense_percent_of_sales,
            'average_sales': self.average_sales,
            'average_profit': self.average_profit
        }


@dataclass
class VarianceEntry:
    """1期間分の前期比較結果"""
    period: Tuple[str, str]
    metric: Metric
    value: float
    previous_value: Optional[float] = None
    percent_delta: float = 0.0
    direction: Direction = Direction.FLAT
    absolute_delta: float = 0.0
    is_baseline: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return {
            'period': f"{self.period[0]}-{self.period[1]}",
            'metric': self.metric.value,
            'value': self.value,
            'previous_value': self.previous_value,
            'percent_delta': self.percent_delta,
            'direction': self.direction.value,
            'absolute_delta': self.absolute_delta,
            'is_baseline': self.is_baseline
        }


@dataclass
class RankedEntry:
    """ランキングの1行"""
    position: int
    totals: StaffTotals
    metric: RankingMetric
    metric_value: float

    @property
    def label(self) -> str:
        return self.totals.label

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return {
            'position': self.position,
            'metric': self.metric.value,
            'metric_value': self.metric_value,
            **self.totals.to_dict()
        }
