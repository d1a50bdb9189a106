"""
エラーハンドリングパッケージ
"""

from .exceptions import (
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
from .error_handler import ErrorHandler

__all__ = [
    'SalesDashboardError',
    'DataValidationError',
    'DuplicatePeriodError',
    'StaffNotFoundError',
    'RecordNotFoundError',
    'RecordStoreError',
    'ConfigurationError',
    'FileProcessingError',
    'EncodingDetectionError',
    'ErrorHandler'
]
