"""
中央集約設定管理システム
"""
import json
from pathlib import Path
from typing import Dict, Any, Optional

from ..error_handling.exceptions import ConfigurationError


class ConfigManager:
    """設定管理の統一クラス"""

    DEFAULT_CONFIG_FILES = [
        'sales_dashboard_config.json',
        'config.json',
        'settings.json'
    ]

    VALID_GROUP_BY = ('name', 'staff_id')

    def __init__(self, config_path: Optional[Path] = None, logger=None):
        self.logger = logger
        self.config_path = Path(config_path) if config_path else None
        self.config_data = {}
        self.load_config(self.config_path)

    def load_config(self, config_path: Optional[Path] = None) -> Dict[str, Any]:
        """設定ファイルを読み込み（未指定の項目はデフォルト値で補完）"""
        self.config_data = self._get_default_config()

        if config_path:
            self.config_data.update(self._load_single_config(Path(config_path)))
            return self.config_data

        # デフォルトの設定ファイルを順次試行
        for config_file in self.DEFAULT_CONFIG_FILES:
            candidate = Path(config_file)
            if not candidate.exists():
                continue
            try:
                self.config_data.update(self._load_single_config(candidate))
                self.config_path = candidate
                return self.config_data
            except ConfigurationError as e:
                if self.logger:
                    self.logger.debug(f"設定ファイル読み込み失敗: {config_file} - {str(e)}")
                continue

        if self.logger:
            self.logger.warning("設定ファイルが見つかりません。デフォルト設定を使用します。")
        return self.config_data

    def _load_single_config(self, config_path: Path) -> Dict[str, Any]:
        """単一の設定ファイルを読み込み"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"設定ファイルが見つかりません: {config_path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"設定ファイルの形式が無効です: {config_path} - {str(e)}")
        except OSError as e:
            raise ConfigurationError(f"設定ファイル読み込みエラー: {config_path} - {str(e)}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"設定ファイルの形式が無効です: {config_path}")

        if self.logger:
            self.logger.info(f"設定ファイル読み込み成功: {config_path.name}")

        return config_data

    def _get_default_config(self) -> Dict[str, Any]:
        """デフォルト設定を取得"""
        return {
            'store_path': 'data/sales_dashboard.json',
            'group_by': 'staff_id',
            'encoding': 'utf-8',
            'log_level': 'INFO',
            'log_file': 'logs/sales_dashboard.log',
            'export_dir': 'exports',
            'performance_window': 6
        }

    def get(self, key: str, default: Any = None) -> Any:
        """設定値を取得"""
        return self.config_data.get(key, default)

    def get_storage_settings(self) -> Dict[str, Any]:
        """ストレージ関連の設定を取得"""
        return {
            'store_path': Path(self.get('store_path', 'data/sales_dashboard.json')),
            'encoding': self.get('encoding', 'utf-8')
        }

    def get_logging_settings(self) -> Dict[str, Any]:
        """ログ関連の設定を取得"""
        log_file = self.get('log_file')
        return {
            'log_level': self.get('log_level', 'INFO'),
            'log_file': Path(log_file) if log_file else None
        }

    def get_report_settings(self) -> Dict[str, Any]:
        """レポート関連の設定を取得"""
        return {
            'export_dir': Path(self.get('export_dir', 'exports')),
            'performance_window': int(self.get('performance_window', 6)),
            'group_by': self.get_group_by()
        }

    def get_group_by(self) -> str:
        """集計キーの方針を取得（'name' または 'staff_id'）"""
        return self.get('group_by', 'staff_id')

    def validate_configuration(self) -> bool:
        """設定の妥当性を検証"""
        group_by = self.get_group_by()
        if group_by not in self.VALID_GROUP_BY:
            error_msg = f"group_byの値が無効です: {group_by} (有効値: {', '.join(self.VALID_GROUP_BY)})"
            if self.logger:
                self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        try:
            window = int(self.get('performance_window', 6))
        except (TypeError, ValueError):
            window = 0
        if window <= 0:
            error_msg = f"performance_windowは正の整数である必要があります: {self.get('performance_window')}"
            if self.logger:
                self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        if not self.get('store_path'):
            error_msg = "必須設定項目が不足: ['store_path']"
            if self.logger:
                self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        if self.logger:
            self.logger.info("設定の妥当性検証完了")

        return True

    def save_config(self, config_path: Optional[Path] = None) -> Path:
        """設定をファイルに保存し、保存先を返す"""
        if config_path is None:
            config_path = self.config_path or Path(self.DEFAULT_CONFIG_FILES[0])
        config_path = Path(config_path)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(self.config_data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            error_msg = f"設定ファイル保存エラー: {config_path} - {str(e)}"
            if self.logger:
                self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        if self.logger:
            self.logger.info(f"設定ファイル保存完了: {config_path}")
        return config_path

    def update_config(self, updates: Dict[str, Any]) -> None:
        """設定を更新"""
        self.config_data.update(updates)

        if self.logger:
            self.logger.info(f"設定更新: {list(updates.keys())}")

    def get_all_settings(self) -> Dict[str, Any]:
        """すべての設定を取得"""
        return self.config_data.copy()
