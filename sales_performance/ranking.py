"""
ランキングモジュール

集計結果を指標の降順に並べ、1からの連番で順位を付ける。
同値の場合は入力順を保持し、順位は共有しない。
"""
from typing import Dict, Iterable, List, Optional, Union

from .constants import RankingMetric
from .models import RankedEntry, StaffTotals
from .variance import growth_percent


def _resolve_metric(metric: Union[RankingMetric, str]) -> RankingMetric:
    if isinstance(metric, RankingMetric):
        return metric
    return RankingMetric(metric)


def metric_value(totals: StaffTotals, metric: Union[RankingMetric, str]) -> float:
    """ランキング指標の値を取得"""
    metric = _resolve_metric(metric)

    if metric is RankingMetric.TOTAL_PROFIT:
        return totals.total_profit
    if metric is RankingMetric.PROFIT_PERCENT:
        return totals.profit_percent_of_sales
    if metric is RankingMetric.EXPENSE_PERCENT:
        return totals.expense_percent_of_sales
    if metric is RankingMetric.TOTAL_SALES:
        return totals.total_sales
    if metric is RankingMetric.AVERAGE_SALES:
        return totals.average_sales
    return growth_percent(totals.records)


def rank(staff_totals: Iterable[StaffTotals],
         metric: Union[RankingMetric, str] = RankingMetric.TOTAL_PROFIT) -> List[RankedEntry]:
    """指標の降順に並べて順位を付けた新しいリストを返す"""
    metric = _resolve_metric(metric)
    scored = [(metric_value(totals, metric), totals) for totals in staff_totals]

    # sorted は安定ソートのため、同値は入力順のまま残る
    ordered = sorted(scored, key=lambda item: item[0], reverse=True)

    return [
        RankedEntry(position=index + 1, totals=totals, metric=metric, metric_value=value)
        for index, (value, totals) in enumerate(ordered)
    ]


def leaders(staff_totals: Iterable[StaffTotals]) -> Dict[str, Optional[RankedEntry]]:
    """
    表彰ボード用の各部門1位を返す

    - total_profit: 純利益の絶対額が最大
    - profit_percent: 売上に対する利益率が最大
    - expense_percent: 売上に対する経費率が最大
    """
    staff_totals = list(staff_totals)
    boards = {}
    for metric in (RankingMetric.TOTAL_PROFIT, RankingMetric.PROFIT_PERCENT, RankingMetric.EXPENSE_PERCENT):
        ranked = rank(staff_totals, metric)
        boards[metric.value] = ranked[0] if ranked else None
    return boards
