"""
担当者別・月別集計のテスト
"""
import unittest
from pathlib import Path
import sys

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from sales_performance.aggregator import (
    aggregate_by_month,
    aggregate_by_staff,
    filter_by_staff,
    filter_by_year,
    summarize
)
from sales_performance.constants import GroupBy
from sales_performance.models import SalesRecord
from sales_performance.profit_calculator import compute_net_profit


def make_record(record_id, staff_id, staff_name, month, year, sales,
                commission=0, bonus=0, expenses=0, net_profit=None):
    if net_profit is None:
        net_profit = compute_net_profit(sales, commission, bonus, expenses)
    return SalesRecord(
        id=record_id, staff_id=staff_id, staff_name=staff_name, month=month, year=year,
        sales=sales, commission=commission, bonus=bonus, expenses=expenses, net_profit=net_profit
    )


class TestAggregateByStaff(unittest.TestCase):
    """aggregate_by_staff のテスト"""

    def setUp(self):
        self.records = [
            make_record("r1", "s1", "Ana", "01", "2024", 1000, 100, 50, 200),
            make_record("r2", "s2", "Bruno", "01", "2024", 800, 80, 0, 100),
            make_record("r3", "s1", "Ana", "02", "2024", 1200, 120, 0, 300),
            make_record("r4", "s3", "Ana", "02", "2024", 500, 0, 0, 50),
            make_record("r5", "s2", "Bruno", "03", "2023", 700, 70, 30, 100),
        ]

    def test_profit_is_preserved(self):
        """集計後の純利益合計はレコードごとの純利益合計と一致する"""
        groups = aggregate_by_staff(self.records)
        grouped_total = sum(totals.total_profit for totals in groups.values())
        record_total = sum(
            compute_net_profit(r.sales, r.commission, r.bonus, r.expenses) for r in self.records
        )
        self.assertAlmostEqual(grouped_total, record_total)

    def test_empty_input(self):
        self.assertEqual(aggregate_by_staff([]), {})

    def test_group_by_staff_id_keeps_homonyms_apart(self):
        groups = aggregate_by_staff(self.records, GroupBy.STAFF_ID)
        self.assertEqual(list(groups.keys()), ["s1", "s2", "s3"])

        ana = groups["s1"]
        self.assertEqual(ana.total_sales, 2200)
        self.assertEqual(ana.total_commission, 220)
        self.assertEqual(ana.total_bonus, 50)
        self.assertEqual(ana.total_expenses, 500)
        self.assertEqual(ana.total_profit, 1430)
        self.assertEqual(ana.record_count, 2)
        self.assertEqual(ana.staff_id, "s1")

    def test_renamed_staff_stays_one_group(self):
        """改名前後のレコードは同じ担当者として集計し、表示名は最新期間の氏名"""
        records = [
            make_record("r2", "s1", "Ana Souza", "02", "2024", 1200),
            make_record("r1", "s1", "Ana", "01", "2024", 1000),
        ]
        groups = aggregate_by_staff(records)
        self.assertEqual(list(groups.keys()), ["s1"])
        self.assertEqual(groups["s1"].label, "Ana Souza")
        self.assertEqual(groups["s1"].total_sales, 2200)

    def test_group_by_name_merges_homonyms(self):
        groups = aggregate_by_staff(self.records, "name")
        self.assertEqual(list(groups.keys()), ["Ana", "Bruno"])
        self.assertEqual(groups["Ana"].record_count, 3)
        self.assertEqual(groups["Ana"].staff_ids, ["s1", "s3"])
        self.assertEqual(groups["Ana"].total_sales, 2700)

    def test_default_is_staff_id(self):
        self.assertEqual(
            list(aggregate_by_staff(self.records).keys()),
            list(aggregate_by_staff(self.records, GroupBy.STAFF_ID).keys())
        )

    def test_stored_net_profit_is_ignored(self):
        """保存済みの netProfit が古い計算式でも集計は再計算する"""
        records = [make_record("r1", "s1", "Ana", "01", "2024", 1000, 100, 50, 200, net_profit=950)]
        totals = aggregate_by_staff(records)["s1"]
        self.assertEqual(totals.total_profit, 650)

    def test_input_is_not_modified(self):
        snapshot = [record.to_dict() for record in self.records]
        aggregate_by_staff(self.records)
        self.assertEqual([record.to_dict() for record in self.records], snapshot)

    def test_derived_percentages(self):
        totals = aggregate_by_staff(self.records)["s2"]
        self.assertAlmostEqual(totals.profit_percent_of_sales, totals.total_profit / 1500 * 100)
        self.assertAlmostEqual(totals.expense_percent_of_sales, 200 / 1500 * 100)
        self.assertAlmostEqual(totals.average_sales, 750)

    def test_zero_sales_yields_zero_percentages(self):
        records = [make_record("r1", "s1", "Ana", "01", "2024", 0, 0, 0, 100)]
        totals = aggregate_by_staff(records)["s1"]
        self.assertEqual(totals.profit_percent_of_sales, 0)
        self.assertEqual(totals.expense_percent_of_sales, 0)
        self.assertEqual(totals.total_profit, -100)


class TestOtherAggregations(unittest.TestCase):
    """月別集計・絞り込みのテスト"""

    def setUp(self):
        self.records = [
            make_record("r1", "s1", "Ana", "03", "2024", 300),
            make_record("r2", "s2", "Bruno", "01", "2024", 100),
            make_record("r3", "s1", "Ana", "01", "2023", 50),
        ]

    def test_aggregate_by_month_sorted_by_code(self):
        months = aggregate_by_month(self.records)
        self.assertEqual([totals.key for totals in months], ["01", "03"])
        self.assertEqual([totals.label for totals in months], ["Jan", "Mar"])
        self.assertEqual(months[0].total_sales, 150)

    def test_filter_by_year(self):
        self.assertEqual([r.id for r in filter_by_year(self.records, "2024")], ["r1", "r2"])
        self.assertEqual([r.id for r in filter_by_year(self.records, 2023)], ["r3"])
        self.assertEqual(len(filter_by_year(self.records, None)), 3)

    def test_filter_by_staff(self):
        self.assertEqual([r.id for r in filter_by_staff(self.records, "s1")], ["r1", "r3"])
        self.assertEqual(filter_by_staff(self.records, "missing"), [])

    def test_summarize(self):
        totals = summarize(self.records, label="Todos")
        self.assertEqual(totals.label, "Todos")
        self.assertEqual(totals.total_sales, 450)
        self.assertEqual(totals.record_count, 3)
        self.assertEqual(summarize([]).average_sales, 0)


if __name__ == '__main__':
    unittest.main()
