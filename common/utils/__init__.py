"""
ユーティリティパッケージ
"""

from .encoding_detector import EncodingDetector

__all__ = ['EncodingDetector']
