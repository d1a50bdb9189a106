"""
表示用フォーマット関数
"""
from .constants import Direction, MonthConstants, ReportConstants
from .models import VarianceEntry


def format_currency(value: float) -> str:
    """ブラジルレアル表記（R$ 1.234,56）。負数は -R$ 1.234,56"""
    sign = '-' if value < 0 else ''
    text = f"{abs(value):,.2f}"
    # 1,234.56 -> 1.234,56
    text = text.replace(',', '_').replace('.', ',').replace('_', '.')
    return f"{sign}{ReportConstants.CURRENCY_SYMBOL} {text}"


def format_percent(value: float) -> str:
    """小数1桁の百分率"""
    return f"{value:.1f}%"


def variance_label(entry: VarianceEntry) -> str:
    """前期比の表示ラベル。基準期間は 'baseline'"""
    if entry.is_baseline:
        return ReportConstants.BASELINE_LABEL
    if entry.direction is Direction.INCREASE:
        return f"+{entry.percent_delta:.1f}%"
    if entry.direction is Direction.DECREASE:
        return f"-{entry.percent_delta:.1f}%"
    return format_percent(entry.percent_delta)


def month_name(code: str, short: bool = False) -> str:
    """月コードから表示名を取得"""
    code = str(code).zfill(2)
    names = MonthConstants.SHORT_NAMES if short else MonthConstants.NAMES
    return names.get(code, code)
