"""
担当者別・月別集計モジュール

入力のレコード列は変更せず、新しい集計構造を返す。
"""
from typing import Any, Dict, Iterable, List, Optional, Union

from .constants import GroupBy, MonthConstants
from .models import SalesRecord, StaffTotals


def group_key(record: SalesRecord, group_by: GroupBy) -> Any:
    """集計キーを決定する"""
    if group_by is GroupBy.NAME:
        return record.staff_name
    return record.staff_id


def _resolve_group_by(group_by: Union[GroupBy, str]) -> GroupBy:
    if isinstance(group_by, GroupBy):
        return group_by
    return GroupBy(group_by)


def aggregate_by_staff(records: Iterable[SalesRecord],
                       group_by: Union[GroupBy, str] = GroupBy.STAFF_ID) -> Dict[Any, StaffTotals]:
    """
    担当者ごとに売上・コミッション・ボーナス・経費・純利益を合計する

    group_by=NAME の場合は表示名で、STAFF_ID の場合は staff_id でグループ化する。
    STAFF_ID の場合、表示名は最も新しい期間のレコードの氏名を使う（改名後も1行）。
    グループの並びは入力での初出順。
    """
    group_by = _resolve_group_by(group_by)
    groups: Dict[Any, StaffTotals] = {}
    label_periods: Dict[Any, tuple] = {}

    for record in records:
        key = group_key(record, group_by)
        totals = groups.get(key)
        if totals is None:
            totals = StaffTotals(key=key, label=record.staff_name)
            groups[key] = totals

        period = (record.year, record.month.zfill(2))
        if group_by is GroupBy.STAFF_ID and period >= label_periods.get(key, period):
            totals.label = record.staff_name
        label_periods[key] = max(period, label_periods.get(key, period))
        totals.add(record)

    return groups


def aggregate_by_month(records: Iterable[SalesRecord]) -> List[StaffTotals]:
    """月（1〜12月）ごとに全担当者分を合計する。月コード順"""
    groups: Dict[str, StaffTotals] = {}

    for record in records:
        totals = groups.get(record.month)
        if totals is None:
            label = MonthConstants.SHORT_NAMES.get(record.month, record.month)
            totals = StaffTotals(key=record.month, label=label)
            groups[record.month] = totals
        totals.add(record)

    return [groups[month] for month in sorted(groups)]


def summarize(records: Iterable[SalesRecord], label: str = '') -> StaffTotals:
    """任意のレコード集合を1つの集計結果にまとめる"""
    totals = StaffTotals(key=label, label=label)
    for record in records:
        totals.add(record)
    return totals


def filter_by_year(records: Iterable[SalesRecord], year: Optional[Any]) -> List[SalesRecord]:
    """指定年のレコードのみ抽出（year=None の場合は全件）"""
    if year is None:
        return list(records)
    year = str(year)
    return [record for record in records if record.year == year]


def filter_by_staff(records: Iterable[SalesRecord], staff_id: Optional[str]) -> List[SalesRecord]:
    """指定担当者のレコードのみ抽出（staff_id=None の場合は全件）"""
    if staff_id is None:
        return list(records)
    return [record for record in records if record.staff_id == staff_id]
