"""
売上ダッシュボードサービス

担当者登録・売上データ入力の検証と、各種レポートの入口をまとめる。
検証に失敗した操作は状態を変更する前に拒否する。
"""
import uuid
from datetime import date
from typing import Any, Dict, List, Optional, Union

from dateutil.parser import isoparse

from common import ConfigManager, ErrorHandler, UnifiedLogger
from common.error_handling.exceptions import (
    DataValidationError,
    DuplicatePeriodError,
    RecordNotFoundError,
    StaffNotFoundError
)

from .aggregator import aggregate_by_month, aggregate_by_staff, filter_by_staff, filter_by_year
from .constants import GroupBy, Metric, MonthConstants, RankingMetric, ReportConstants
from .models import RankedEntry, SalesRecord, StaffMember, StaffTotals, VarianceEntry, normalize_month, normalize_year
from .performance_report import MonthlyPerformanceReport, build_monthly_performance
from .profit_calculator import compute_net_profit, to_amount
from .ranking import leaders, rank
from .record_store import RecordStore
from .statistics import GeneralTableRow, PeriodStatistics, general_table, period_statistics
from .variance import compute_variance_sequence, sort_chronologically


def _new_id() -> str:
    return uuid.uuid4().hex


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class SalesDashboard:
    """
    ダッシュボードの操作をまとめたクラス

    使用例:
        dashboard = SalesDashboard(JsonRecordStore(path))
        staff = dashboard.register_staff("Ana")
        dashboard.add_record(staff.id, "01", "2024", sales=1000)
        ranking = dashboard.ranking("2024", RankingMetric.TOTAL_PROFIT)
    """

    def __init__(self, store: RecordStore, config: Optional[ConfigManager] = None,
                 logger: Optional[UnifiedLogger] = None, group_by: Union[GroupBy, str, None] = None):
        self.store = store
        self.config = config
        self.logger = logger or UnifiedLogger(__name__)
        self.error_handler = ErrorHandler(self.logger.logger)

        if group_by is None:
            group_by = config.get_group_by() if config else GroupBy.STAFF_ID
        self.group_by = group_by if isinstance(group_by, GroupBy) else GroupBy(group_by)

        self.performance_window = ReportConstants.DEFAULT_PERFORMANCE_WINDOW
        if config:
            self.performance_window = config.get_report_settings()['performance_window']

    # ------------------------------------------------------------------
    # 担当者
    # ------------------------------------------------------------------
    def register_staff(self, name: str, phone: Optional[str] = None,
                       hired_on: Union[date, str, None] = None) -> StaffMember:
        """担当者を登録（氏名は必須）"""
        if _is_blank(name):
            self._reject(DataValidationError("氏名は必須です"), "担当者登録")

        member = StaffMember(
            id=_new_id(),
            name=name.strip(),
            phone=phone or None,
            hired_on=self._parse_hired_on(hired_on)
        )
        self.store.staff.upsert(member)
        self.store.commit()
        self.logger.log_record_operation("登録", "担当者", member.id, True)
        return member

    def update_staff(self, staff_id: str, name: Optional[str] = None, phone: Optional[str] = None,
                     hired_on: Union[date, str, None] = None) -> StaffMember:
        """担当者情報を更新（指定した項目のみ）"""
        member = self.get_staff(staff_id)

        if name is not None and _is_blank(name):
            self._reject(DataValidationError("氏名は必須です"), "担当者更新")

        updated = StaffMember(
            id=member.id,
            name=name.strip() if name is not None else member.name,
            phone=phone if phone is not None else member.phone,
            hired_on=self._parse_hired_on(hired_on) if hired_on is not None else member.hired_on
        )
        self.store.staff.upsert(updated)
        self.store.commit()
        self.logger.log_record_operation("更新", "担当者", staff_id, True)
        return updated

    def delete_staff(self, staff_id: str) -> None:
        """担当者を削除（売上レコードは残る）"""
        if not self.store.staff.delete(staff_id):
            self._reject(StaffNotFoundError(f"担当者が見つかりません: {staff_id}"), "担当者削除")
        self.store.commit()
        self.logger.log_record_operation("削除", "担当者", staff_id, True)

    def get_staff(self, staff_id: str) -> StaffMember:
        member = self.store.staff.get_by_id(staff_id)
        if member is None:
            raise StaffNotFoundError(f"担当者が見つかりません: {staff_id}")
        return member

    def list_staff(self) -> List[StaffMember]:
        return self.store.load_staff()

    def _parse_hired_on(self, value: Any) -> Optional[date]:
        if value is None or isinstance(value, date):
            return value
        if _is_blank(value):
            return None
        try:
            return isoparse(str(value).strip()).date()
        except (ValueError, OverflowError):
            self._reject(DataValidationError(f"入社日の形式が無効です (YYYY-MM-DD): {value}"), "担当者登録")

    # ------------------------------------------------------------------
    # 売上レコード
    # ------------------------------------------------------------------
    def add_record(self, staff_id: str, month: Any, year: Any, sales: Any,
                   commission: Any = 0, bonus: Any = 0, expenses: Any = 0) -> SalesRecord:
        """
        売上レコードを追加

        担当者・月・売上は必須で、売上は0以上。同一担当者・同一年月のレコードは1件まで。
        金額は解釈できない入力を0として扱う。
        """
        if _is_blank(staff_id) or _is_blank(month) or _is_blank(sales):
            self._reject(DataValidationError("担当者・月・売上は必須です"), "売上登録")

        month = normalize_month(month)
        year = normalize_year(year)
        if month not in MonthConstants.CODES:
            self._reject(DataValidationError(f"月コードが無効です: {month}"), "売上登録")
        if not (len(year) == 4 and year.isdigit()):
            self._reject(DataValidationError(f"年は4桁で指定してください: {year}"), "売上登録")

        member = self.store.staff.get_by_id(staff_id)
        if member is None:
            self._reject(StaffNotFoundError(f"担当者が見つかりません: {staff_id}"), "売上登録")

        sales = to_amount(sales)
        if sales < 0:
            self._reject(DataValidationError(f"売上は0以上で指定してください: {sales}"), "売上登録")

        if self.find_record(staff_id, month, year) is not None:
            self._reject(DuplicatePeriodError(staff_id, month, year), "売上登録")

        record = SalesRecord(
            id=_new_id(),
            staff_id=member.id,
            staff_name=member.name,
            month=month,
            year=year,
            sales=sales,
            commission=to_amount(commission),
            bonus=to_amount(bonus),
            expenses=to_amount(expenses),
            net_profit=compute_net_profit(sales, commission, bonus, expenses)
        )
        self.store.records.upsert(record)
        self.store.commit()
        self.logger.log_record_operation("登録", "売上", record.id, True)
        return record

    def delete_record(self, record_id: str) -> None:
        """売上レコードを削除"""
        if not self.store.records.delete(record_id):
            self._reject(RecordNotFoundError(f"売上レコードが見つかりません: {record_id}"), "売上削除")
        self.store.commit()
        self.logger.log_record_operation("削除", "売上", record_id, True)

    def find_record(self, staff_id: str, month: Any, year: Any) -> Optional[SalesRecord]:
        """担当者・年月でレコードを検索"""
        month = normalize_month(month)
        year = normalize_year(year)
        for record in self.store.load_records():
            if record.staff_id == staff_id and record.month == month and record.year == year:
                return record
        return None

    def list_records(self, year: Optional[Any] = None, staff_id: Optional[str] = None) -> List[SalesRecord]:
        """レコード一覧（新しい期間から順）"""
        records = filter_by_staff(filter_by_year(self.store.load_records(), year), staff_id)
        return list(reversed(sort_chronologically(records)))

    def available_years(self) -> List[str]:
        """データが存在する年の一覧（昇順）"""
        return sorted({record.year for record in self.store.load_records()})

    # ------------------------------------------------------------------
    # レポート
    # ------------------------------------------------------------------
    def staff_totals(self, year: Optional[Any] = None) -> List[StaffTotals]:
        """担当者別集計（年で絞り込み）"""
        records = filter_by_year(self.store.load_records(), year)
        return list(aggregate_by_staff(records, self.group_by).values())

    def ranking(self, year: Optional[Any] = None,
                metric: Union[RankingMetric, str] = RankingMetric.TOTAL_PROFIT) -> List[RankedEntry]:
        """指定年の担当者ランキング"""
        entries = rank(self.staff_totals(year), metric)
        metric_name = metric.value if isinstance(metric, RankingMetric) else metric
        self.logger.log_ranking(metric_name, year, entries)
        return entries

    def leaders(self, year: Optional[Any] = None) -> Dict[str, Optional[RankedEntry]]:
        """指定年の部門別1位"""
        return leaders(self.staff_totals(year))

    def general_table(self, year: Optional[Any] = None) -> List[GeneralTableRow]:
        """指定年の担当者一覧表"""
        return general_table(self.store.load_records(), year, self.group_by)

    def monthly_performance(self, staff_id: Optional[str] = None,
                            window: Optional[int] = None) -> Optional[MonthlyPerformanceReport]:
        """担当者の月次パフォーマンス（直近 window 期間）"""
        if staff_id is not None:
            self.get_staff(staff_id)
        return build_monthly_performance(
            self.store.load_records(), staff_id,
            window if window is not None else self.performance_window
        )

    def variance(self, staff_id: str, metric: Union[Metric, str] = Metric.SALES) -> List[VarianceEntry]:
        """担当者の全期間について前期比較"""
        metric = metric if isinstance(metric, Metric) else Metric(metric)
        periods = sort_chronologically(filter_by_staff(self.store.load_records(), staff_id))
        return compute_variance_sequence(periods, metric)

    def statistics(self, year: Optional[Any] = None, staff_id: Optional[str] = None) -> Optional[PeriodStatistics]:
        """年・担当者で絞り込んだ統計"""
        records = filter_by_staff(filter_by_year(self.store.load_records(), year), staff_id)
        stats = period_statistics(records)
        if stats is not None:
            self.logger.log_data_statistics(stats.to_dict())
        return stats

    def monthly_series(self, year: Optional[Any] = None, staff_id: Optional[str] = None) -> List[StaffTotals]:
        """月別推移（グラフ用）"""
        records = filter_by_staff(filter_by_year(self.store.load_records(), year), staff_id)
        return aggregate_by_month(records)

    # ------------------------------------------------------------------
    def _reject(self, error: Exception, operation: str) -> None:
        self.error_handler.reject(error, operation)
