"""
純利益計算モジュール

純利益の算出式はこのモジュールだけが持つ:
    net_profit = sales - (commission + bonus + expenses)
"""
import math
import re
from typing import Any

_NUMERIC_PREFIX = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')


def to_amount(value: Any) -> float:
    """
    入力値を金額(float)に変換する

    フォーム入力と同じ寛容な解釈を行い、解釈できない値は0として扱う。
    例外は発生させない。
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        amount = float(value)
        return amount if math.isfinite(amount) else 0.0

    text = str(value).strip()
    if not text:
        return 0.0

    try:
        amount = float(text)
    except ValueError:
        match = _NUMERIC_PREFIX.match(text)
        if not match:
            return 0.0
        amount = float(match.group(0))

    return amount if math.isfinite(amount) else 0.0


def compute_net_profit(sales: Any = 0, commission: Any = 0, bonus: Any = 0, expenses: Any = 0) -> float:
    """純利益 = 売上 - (コミッション + ボーナス + 経費)"""
    return to_amount(sales) - (to_amount(commission) + to_amount(bonus) + to_amount(expenses))


def net_profit_of(record) -> float:
    """売上レコードの純利益を算出（保存済みのnet_profitは参照しない）"""
    return compute_net_profit(record.sales, record.commission, record.bonus, record.expenses)
