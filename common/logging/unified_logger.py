"""
統一ロギングシステム
"""
import logging
from pathlib import Path
from typing import Dict, Any, Iterable, Optional


class UnifiedLogger:
    """統一ロギングシステムクラス"""

    def __init__(self, name: str = __name__, level: str = "INFO", log_file: Optional[Path] = None):
        self.logger = self.setup_logger(name, level, log_file)

    def setup_logger(self, name: str, level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
        """ロガーをセットアップ"""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        # 既存のハンドラーをクリア
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger

    def log_record_operation(self, operation: str, entity: str, entity_id: str, success: bool) -> None:
        """担当者・売上レコード操作のログ出力"""
        status = "成功" if success else "拒否"
        message = f"{entity}操作 [{operation}] {status}: {entity_id}"

        if success:
            self.logger.info(message)
        else:
            self.logger.warning(message)

    def log_ranking(self, metric: str, year: Optional[str], entries: Iterable[Any]) -> None:
        """ランキング結果のログ出力"""
        entries = list(entries)
        self.logger.info(f"ランキング算出: 指標={metric}, 年={year or '全期間'}, 件数={len(entries)}")
        for entry in entries[:3]:
            self.logger.debug(f"  {entry.position}. {entry.totals.label}: {entry.metric_value:,.2f}")

    def log_import_summary(self, file_name: str, imported: int, skipped: int, error_count: int) -> None:
        """取り込み結果サマリーのログ出力"""
        total = imported + skipped
        success_rate = (imported / total) * 100 if total > 0 else 0

        self.logger.info("=" * 50)
        self.logger.info(f"取り込み結果サマリー: {file_name}")
        self.logger.info(f"取り込み件数: {imported}")
        self.logger.info(f"スキップ件数: {skipped}")
        self.logger.info(f"エラー数: {error_count}")
        self.logger.info(f"成功率: {success_rate:.1f}%")
        self.logger.info("=" * 50)

    def log_configuration_info(self, config: Dict[str, Any]) -> None:
        """設定情報のログ出力"""
        self.logger.info("設定情報:")
        for key, value in config.items():
            # パスワードや秘密情報をマスク
            if any(secret in key.lower() for secret in ['password', 'secret', 'key', 'token']):
                value = '*' * len(str(value)) if value else 'None'
            self.logger.info(f"  {key}: {value}")

    def log_data_statistics(self, data_stats: Dict[str, Any]) -> None:
        """データ統計のログ出力"""
        self.logger.info("データ統計:")
        for key, value in data_stats.items():
            if isinstance(value, float):
                self.logger.info(f"  {key}: {value:,.2f}")
            else:
                self.logger.info(f"  {key}: {value}")

    # 既存のロガーメソッドのプロキシ
    def info(self, message: str) -> None:
        """情報レベルのログ出力"""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """警告レベルのログ出力"""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """エラーレベルのログ出力"""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """デバッグレベルのログ出力"""
        self.logger.debug(message)
