"""
共通コンポーネントパッケージ
"""

from .file_handlers.csv_handler import CSVHandler
from .file_handlers.excel_handler import ExcelHandler
from .error_handling.exceptions import (
    SalesDashboardError,
    DataValidationError,
    DuplicatePeriodError,
    StaffNotFoundError,
    RecordNotFoundError,
    RecordStoreError,
    ConfigurationError,
    FileProcessingError,
    EncodingDetectionError
)
from .error_handling.error_handler import ErrorHandler
from .logging.unified_logger import UnifiedLogger
from .config.config_manager import ConfigManager
from .utils.encoding_detector import EncodingDetector
from .data_models import ImportResult

__all__ = [
    'CSVHandler',
    'ExcelHandler',
    'SalesDashboardError',
    'DataValidationError',
    'DuplicatePeriodError',
    'StaffNotFoundError',
    'RecordNotFoundError',
    'RecordStoreError',
    'ConfigurationError',
    'FileProcessingError',
    'EncodingDetectionError',
    'ErrorHandler',
    'UnifiedLogger',
    'ConfigManager',
    'EncodingDetector',
    'ImportResult'
]
