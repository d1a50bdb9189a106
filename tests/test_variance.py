"""
前期比較（バリアンス）のテスト
"""
import unittest
from pathlib import Path
import sys

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from sales_performance.constants import Direction, Metric
from sales_performance.formatting import variance_label
from sales_performance.models import SalesRecord
from sales_performance.variance import (
    compute_variance_sequence,
    compute_variance_table,
    growth_percent,
    percent_change,
    sort_chronologically
)


def make_period(month, year, sales, commission=0, bonus=0, expenses=0):
    return SalesRecord(
        id=f"{year}{month}", staff_id="s1", staff_name="Ana", month=month, year=year,
        sales=sales, commission=commission, bonus=bonus, expenses=expenses
    )


class TestVarianceSequence(unittest.TestCase):
    """compute_variance_sequence のテスト"""

    def test_empty_sequence(self):
        self.assertEqual(compute_variance_sequence([], Metric.SALES), [])

    def test_single_period_is_baseline_only(self):
        entries = compute_variance_sequence([make_period("01", "2024", 1000)], Metric.SALES)
        self.assertEqual(len(entries), 1)
        self.assertTrue(entries[0].is_baseline)
        self.assertIsNone(entries[0].previous_value)
        self.assertEqual(entries[0].direction, Direction.FLAT)
        self.assertEqual(variance_label(entries[0]), "baseline")

    def test_increase_then_reverse(self):
        """(100, 150) は +50%、逆順 (150, 100) は -33.33%"""
        forward = compute_variance_sequence(
            [make_period("01", "2024", 100), make_period("02", "2024", 150)], Metric.SALES
        )[1]
        self.assertAlmostEqual(forward.percent_delta, 50.0)
        self.assertEqual(forward.direction, Direction.INCREASE)
        self.assertEqual(forward.absolute_delta, 50)

        # 並べ替えを行わないため、与えた順で比較される
        backward = compute_variance_sequence(
            [make_period("02", "2024", 150), make_period("01", "2024", 100)], Metric.SALES
        )[1]
        self.assertAlmostEqual(backward.percent_delta, 33.33, delta=0.01)
        self.assertEqual(backward.direction, Direction.DECREASE)
        self.assertEqual(backward.absolute_delta, -50)

    def test_ana_scenario(self):
        periods = [
            make_period("01", "2024", 1000),
            make_period("02", "2024", 1200),
            make_period("03", "2024", 900),
        ]
        entries = compute_variance_sequence(periods, Metric.SALES)

        self.assertTrue(entries[0].is_baseline)

        self.assertAlmostEqual(entries[1].percent_delta, 20.0)
        self.assertEqual(entries[1].direction, Direction.INCREASE)
        self.assertEqual(entries[1].absolute_delta, 200)
        self.assertEqual(variance_label(entries[1]), "+20.0%")

        self.assertAlmostEqual(entries[2].percent_delta, 25.0)
        self.assertEqual(entries[2].direction, Direction.DECREASE)
        self.assertEqual(entries[2].absolute_delta, -300)
        self.assertEqual(variance_label(entries[2]), "-25.0%")

    def test_zero_previous_is_flat(self):
        entries = compute_variance_sequence(
            [make_period("01", "2024", 0), make_period("02", "2024", 500)], Metric.SALES
        )
        self.assertEqual(entries[1].percent_delta, 0)
        self.assertEqual(entries[1].direction, Direction.FLAT)
        self.assertEqual(entries[1].absolute_delta, 500)
        self.assertEqual(variance_label(entries[1]), "0.0%")

    def test_negative_previous_uses_raw_ratio(self):
        """前期が負の場合も (current - previous) / previous をそのまま使う"""
        periods = [
            make_period("01", "2024", 100, expenses=200),  # 利益 -100
            make_period("02", "2024", 100, expenses=50),   # 利益 50
        ]
        entry = compute_variance_sequence(periods, Metric.PROFIT)[1]
        self.assertAlmostEqual(entry.percent_delta, 150.0)
        self.assertEqual(entry.direction, Direction.DECREASE)
        self.assertEqual(entry.absolute_delta, 150)

    def test_profit_metric_is_recomputed(self):
        period = make_period("01", "2024", 1000, commission=100)
        period.net_profit = 12345
        entries = compute_variance_sequence([period], Metric.PROFIT)
        self.assertEqual(entries[0].value, 900)

    def test_variance_table_covers_all_metrics(self):
        periods = [make_period("01", "2024", 100, 10, 5, 20), make_period("02", "2024", 200, 20, 5, 10)]
        table = compute_variance_table(periods)
        self.assertEqual(set(table.keys()), set(Metric))
        self.assertEqual(table[Metric.BONUS][1].direction, Direction.FLAT)
        self.assertEqual(table[Metric.EXPENSES][1].direction, Direction.DECREASE)
        self.assertAlmostEqual(table[Metric.COMMISSION][1].percent_delta, 100.0)


class TestChronologyAndGrowth(unittest.TestCase):
    """時系列ソートと成長率のテスト"""

    def test_sort_chronologically(self):
        periods = [make_period("02", "2024", 1), make_period("12", "2023", 2), make_period("10", "2024", 3)]
        ordered = sort_chronologically(periods)
        self.assertEqual([p.period for p in ordered], [("2023", "12"), ("2024", "02"), ("2024", "10")])
        # 入力は変更しない
        self.assertEqual(periods[0].month, "02")

    def test_percent_change(self):
        self.assertAlmostEqual(percent_change(150, 100), 50.0)
        self.assertAlmostEqual(percent_change(50, 100), -50.0)
        self.assertEqual(percent_change(10, 0), 0.0)

    def test_growth_percent(self):
        periods = [make_period("03", "2024", 150), make_period("01", "2024", 100), make_period("02", "2024", 500)]
        self.assertAlmostEqual(growth_percent(periods), 50.0)
        self.assertEqual(growth_percent(periods[:1]), 0.0)
        self.assertEqual(growth_percent([]), 0.0)

    def test_growth_from_zero(self):
        periods = [make_period("01", "2024", 0), make_period("02", "2024", 100)]
        self.assertEqual(growth_percent(periods), 0.0)


if __name__ == '__main__':
    unittest.main()
