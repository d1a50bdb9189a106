"""
統一例外クラス定義
"""


class SalesDashboardError(Exception):
    """売上ダッシュボードの基本例外クラス"""
    pass


class DataValidationError(SalesDashboardError):
    """入力データ検証関連のエラー"""
    pass


class DuplicatePeriodError(DataValidationError):
    """同一担当者・同一年月のレコードが既に存在する場合のエラー"""

    def __init__(self, staff_id: str, month: str, year: str):
        self.staff_id = staff_id
        self.month = month
        self.year = year
        super().__init__(f"担当者 {staff_id} の {year}-{month} のデータは既に登録されています")


class StaffNotFoundError(SalesDashboardError):
    """担当者が見つからない場合のエラー"""
    pass


class RecordNotFoundError(SalesDashboardError):
    """売上レコードが見つからない場合のエラー"""
    pass


class RecordStoreError(SalesDashboardError):
    """レコードストアの読み書きエラー"""
    pass


class ConfigurationError(SalesDashboardError):
    """設定関連のエラー"""
    pass


class FileProcessingError(SalesDashboardError):
    """ファイル処理関連のエラー"""
    pass


class EncodingDetectionError(SalesDashboardError):
    """エンコーディング検出関連のエラー"""
    pass
