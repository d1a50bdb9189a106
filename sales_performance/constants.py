"""
定数定義モジュール
月コード・指標・評価しきい値などのハードコード値を集約
"""

from enum import Enum
from typing import Dict, List, Tuple


class Metric(Enum):
    """前月比較の対象となる指標"""
    SALES = "sales"
    COMMISSION = "commission"
    BONUS = "bonus"
    EXPENSES = "expenses"
    PROFIT = "profit"


class RankingMetric(Enum):
    """ランキングの並び替え指標"""
    TOTAL_PROFIT = "total_profit"
    PROFIT_PERCENT = "profit_percent"
    EXPENSE_PERCENT = "expense_percent"
    TOTAL_SALES = "total_sales"
    AVERAGE_SALES = "average_sales"
    GROWTH = "growth"


class GroupBy(Enum):
    """担当者別集計のキー方針"""
    NAME = "name"
    STAFF_ID = "staff_id"


class Direction(Enum):
    """前期比の方向"""
    INCREASE = "increase"
    DECREASE = "decrease"
    FLAT = "flat"


# 月関連定数
class MonthConstants:
    """月コードと表示名"""
    CODES: List[str] = [f"{m:02d}" for m in range(1, 13)]

    NAMES: Dict[str, str] = {
        '01': 'Janeiro', '02': 'Fevereiro', '03': 'Março', '04': 'Abril',
        '05': 'Maio', '06': 'Junho', '07': 'Julho', '08': 'Agosto',
        '09': 'Setembro', '10': 'Outubro', '11': 'Novembro', '12': 'Dezembro'
    }

    SHORT_NAMES: Dict[str, str] = {
        '01': 'Jan', '02': 'Fev', '03': 'Mar', '04': 'Abr',
        '05': 'Mai', '06': 'Jun', '07': 'Jul', '08': 'Ago',
        '09': 'Set', '10': 'Out', '11': 'Nov', '12': 'Dez'
    }


# 評価関連定数
class RatingConstants:
    """評価しきい値（単位: %）"""
    # 売上に対する利益率による状態
    PROFIT_STATUS_THRESHOLDS: List[Tuple[float, str]] = [
        (15.0, 'Ideal'),
        (10.0, 'Na média'),
    ]
    PROFIT_STATUS_DEFAULT = 'Precisa melhorar'

    # 全体平均との乖離率による評価
    PERFORMANCE_THRESHOLDS: List[Tuple[float, str]] = [
        (20.0, 'Excelente'),
        (10.0, 'Bom'),
        (-10.0, 'Regular'),
    ]
    PERFORMANCE_DEFAULT = 'Abaixo da Média'
    PERFORMANCE_NEUTRAL = 'Neutro'


# レポート関連定数
class ReportConstants:
    """レポート出力に関する定数"""
    DEFAULT_PERFORMANCE_WINDOW = 6
    BASELINE_LABEL = "baseline"
    ALL_STAFF_LABEL = "Todos os Setoristas"
    CURRENCY_SYMBOL = "R$"


# 保存形式関連定数
class StoreConstants:
    """レコードストアに関する定数"""
    STAFF_KEY = "staff"
    RECORDS_KEY = "sales_records"
    VERSION_KEY = "schema_version"
    DEFAULT_STORE_FILE = "data/sales_dashboard.json"
