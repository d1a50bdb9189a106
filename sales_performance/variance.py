"""
前期比較（バリアンス）モジュール

担当者1名分の期間列について、指標ごとに前期からの変化率・変化額を求める。
"""
from typing import Dict, Iterable, List, Sequence

from .constants import Direction, Metric
from .models import SalesRecord, VarianceEntry


def sort_chronologically(records: Iterable[SalesRecord]) -> List[SalesRecord]:
    """年・月（ゼロ埋め文字列）の昇順に並べ替えた新しいリストを返す"""
    return sorted(records, key=lambda record: (record.year, record.month.zfill(2)))


def percent_change(current: float, previous: float) -> float:
    """符号付き変化率 (current - previous) / previous * 100。previous が0なら0"""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def direction_of(signed_percent: float) -> Direction:
    if signed_percent > 0:
        return Direction.INCREASE
    if signed_percent < 0:
        return Direction.DECREASE
    return Direction.FLAT


def compute_variance_sequence(periods: Sequence[SalesRecord], metric: Metric) -> List[VarianceEntry]:
    """
    時系列順の期間列から前期比較の列を作る

    先頭の期間は比較対象がないため baseline として返す。
    入力の並び順はそのまま使い、ここでは並べ替えない。
    """
    entries: List[VarianceEntry] = []
    previous = None

    for record in periods:
        value = record.value_of(metric)

        if previous is None:
            entries.append(VarianceEntry(
                period=record.period,
                metric=metric,
                value=value,
                is_baseline=True
            ))
        else:
            previous_value = previous.value_of(metric)
            signed = percent_change(value, previous_value)
            entries.append(VarianceEntry(
                period=record.period,
                metric=metric,
                value=value,
                previous_value=previous_value,
                percent_delta=abs(signed),
                direction=direction_of(signed),
                absolute_delta=value - previous_value
            ))

        previous = record

    return entries


def compute_variance_table(periods: Sequence[SalesRecord]) -> Dict[Metric, List[VarianceEntry]]:
    """5つの指標すべてについて前期比較を行う"""
    return {metric: compute_variance_sequence(periods, metric) for metric in Metric}


def growth_percent(periods: Sequence[SalesRecord], metric: Metric = Metric.SALES) -> float:
    """最初の期間から最後の期間までの符号付き変化率。期間が1つ以下なら0"""
    ordered = sort_chronologically(periods)
    if len(ordered) < 2:
        return 0.0
    return percent_change(ordered[-1].value_of(metric), ordered[0].value_of(metric))
