"""
月次パフォーマンスレポート（印刷用エクスポートのデータ部分）
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .aggregator import filter_by_staff, summarize
from .constants import Metric, ReportConstants
from .models import SalesRecord, StaffTotals, VarianceEntry
from .variance import compute_variance_table, sort_chronologically


def percent_of_sales(value: float, sales: float) -> float:
    """売上に対する割合(%)。売上が0なら0"""
    if sales == 0:
        return 0.0
    return value / sales * 100


@dataclass
class MonthlyPerformanceReport:
    """月次パフォーマンスレポート"""
    staff_label: str
    periods: List[SalesRecord]
    totals: StaffTotals
    variance: Dict[Metric, List[VarianceEntry]] = field(default_factory=dict)

    @property
    def averages(self) -> Dict[Metric, float]:
        return {metric: self.totals.average_of(metric) for metric in Metric}

    def total_percent_of_sales(self, metric: Metric) -> float:
        return percent_of_sales(self.totals.total_of(metric), self.totals.total_sales)

    def average_percent_of_sales(self, metric: Metric) -> float:
        averages = self.averages
        return percent_of_sales(averages[metric], averages[Metric.SALES])

    def rows(self) -> List[Dict[Metric, VarianceEntry]]:
        """期間ごとに各指標の比較結果をまとめた行"""
        return [
            {metric: self.variance[metric][index] for metric in Metric}
            for index in range(len(self.periods))
        ]


def build_monthly_performance(records: Sequence[SalesRecord], staff_id: Optional[str] = None,
                              window: int = ReportConstants.DEFAULT_PERFORMANCE_WINDOW
                              ) -> Optional[MonthlyPerformanceReport]:
    """
    直近 window 期間の月次パフォーマンスを組み立てる

    staff_id を省略した場合は全レコードを対象にする。対象がなければ None。
    """
    selected = filter_by_staff(records, staff_id)
    if not selected:
        return None

    periods = sort_chronologically(selected)
    if window > 0:
        periods = periods[-window:]

    label = periods[0].staff_name if staff_id is not None else ReportConstants.ALL_STAFF_LABEL

    return MonthlyPerformanceReport(
        staff_label=label,
        periods=periods,
        totals=summarize(periods, label=label),
        variance=compute_variance_table(periods)
    )
