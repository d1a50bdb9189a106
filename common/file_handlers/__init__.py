"""
ファイルハンドラーパッケージ
"""

from .csv_handler import CSVHandler
from .excel_handler import ExcelHandler

__all__ = ['CSVHandler', 'ExcelHandler']
