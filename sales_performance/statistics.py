"""
期間統計・評価モジュール
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .aggregator import aggregate_by_staff, filter_by_year, summarize
from .constants import GroupBy, RankingMetric, RatingConstants
from .models import SalesRecord, StaffTotals
from .ranking import rank


@dataclass
class PeriodStatistics:
    """レコード集合の統計"""
    totals: StaffTotals
    best_month: SalesRecord
    worst_month: SalesRecord

    @property
    def total_records(self) -> int:
        return self.totals.record_count

    def ratings(self) -> List[Tuple[SalesRecord, str]]:
        """各レコードの売上を平均売上と比べた評価"""
        mean = self.totals.average_sales
        return [(record, performance_rating(record.sales, mean)) for record in self.totals.records]

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return {
            'total_sales': self.totals.total_sales,
            'total_profit': self.totals.total_profit,
            'average_sales': self.totals.average_sales,
            'average_profit': self.totals.average_profit,
            'best_month': self.best_month.period_key,
            'worst_month': self.worst_month.period_key,
            'total_records': self.total_records
        }


@dataclass
class GeneralTableRow:
    """担当者一覧表の1行"""
    position: int
    totals: StaffTotals
    status: str

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return {
            'position': self.position,
            'status': self.status,
            **self.totals.to_dict()
        }


def period_statistics(records: Sequence[SalesRecord]) -> Optional[PeriodStatistics]:
    """合計・平均・売上最大月・売上最小月を求める。空の場合は None"""
    records = list(records)
    if not records:
        return None

    best = records[0]
    worst = records[0]
    for record in records[1:]:
        if record.sales > best.sales:
            best = record
        if record.sales < worst.sales:
            worst = record

    return PeriodStatistics(totals=summarize(records), best_month=best, worst_month=worst)


def performance_rating(value: float, mean: float) -> str:
    """全体平均との乖離率から評価ラベルを返す"""
    if mean == 0:
        return RatingConstants.PERFORMANCE_NEUTRAL

    percent = (value - mean) / mean * 100
    for threshold, label in RatingConstants.PERFORMANCE_THRESHOLDS:
        if percent >= threshold:
            return label
    return RatingConstants.PERFORMANCE_DEFAULT


def profit_status(profit_percent: float) -> str:
    """売上に対する利益率から状態ラベルを返す"""
    for threshold, label in RatingConstants.PROFIT_STATUS_THRESHOLDS:
        if profit_percent >= threshold:
            return label
    return RatingConstants.PROFIT_STATUS_DEFAULT


def general_table(records: Sequence[SalesRecord], year: Optional[Any] = None,
                  group_by: Union[GroupBy, str] = GroupBy.STAFF_ID) -> List[GeneralTableRow]:
    """担当者ごとの合計・利益率・状態を純利益の降順で返す"""
    groups = aggregate_by_staff(filter_by_year(records, year), group_by)
    ranked = rank(groups.values(), RankingMetric.TOTAL_PROFIT)

    return [
        GeneralTableRow(
            position=entry.position,
            totals=entry.totals,
            status=profit_status(entry.totals.profit_percent_of_sales)
        )
        for entry in ranked
    ]
