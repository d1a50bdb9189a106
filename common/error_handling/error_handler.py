"""
統一エラーハンドリングシステム
"""
import logging
import traceback
from pathlib import Path
from typing import Dict, Any, Optional


class ErrorHandler:
    """エラーハンドリングの統一クラス"""

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)

    def handle_validation_error(self, error: Exception, operation: str) -> Dict[str, Any]:
        """入力検証エラーを処理（状態変更前に拒否された操作として記録）"""
        error_context = {
            'error_type': type(error).__name__,
            'operation': operation,
            'error_message': str(error)
        }

        self.logger.warning(f"操作を拒否しました [{operation}]: {str(error)}")
        return error_context

    def reject(self, error: Exception, operation: str) -> None:
        """操作の拒否をログに残して例外を送出"""
        self.handle_validation_error(error, operation)
        raise error

    def handle_file_processing_error(self, error: Exception, file_path: Path) -> None:
        """ファイル処理エラーを処理"""
        error_context = {
            'error_type': type(error).__name__,
            'file_path': str(file_path),
            'file_name': file_path.name if file_path else 'Unknown',
            'error_message': str(error)
        }

        self.log_error_with_context(error, error_context)

    def log_skipped_row(self, file_name: str, row_number: int, reason: str) -> None:
        """取り込みでスキップした行をログ出力して処理を継続"""
        self.logger.warning(f"行スキップ [{file_name} {row_number}行目]: {reason}")

    def log_error_with_context(self, error: Exception, context: Dict[str, Any]) -> None:
        """コンテキスト情報付きでエラーをログ出力"""
        context_str = ", ".join([f"{k}={v}" for k, v in context.items()])
        self.logger.error(f"エラー詳細: {context_str}")
        self.logger.debug(f"スタックトレース: {traceback.format_exc()}")

    def describe(self, error: Optional[Exception]) -> str:
        """ユーザー向けの短いエラー説明を返す"""
        if error is None:
            return ''
        return f"{type(error).__name__}: {str(error)}"
