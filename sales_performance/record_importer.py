"""
売上レコードのCSV一括取り込みモジュール
"""
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from common import CSVHandler, ImportResult
from common.error_handling.exceptions import FileProcessingError, SalesDashboardError

from .dashboard_service import SalesDashboard


class RecordImporter:
    """
    CSVファイルから売上レコードを取り込むクラス

    担当者は staff_id 列、なければ staff_name 列（登録済み氏名と完全一致）で特定する。
    検証に失敗した行はスキップし、結果に理由を記録する。
    """

    REQUIRED_COLUMNS = ['month', 'year', 'sales']
    STAFF_COLUMNS = ['staff_id', 'staff_name']
    AMOUNT_COLUMNS = ['commission', 'bonus', 'expenses']

    def __init__(self, dashboard: SalesDashboard, csv_handler: Optional[CSVHandler] = None, logger=None):
        self.dashboard = dashboard
        self.logger = logger or dashboard.logger
        self.csv_handler = csv_handler or CSVHandler(self.logger.logger, dashboard.error_handler)

    def import_file(self, file_path: Path) -> ImportResult:
        """CSVファイルを取り込む"""
        file_path = Path(file_path)
        result = ImportResult(file_name=file_path.name, processing_start=datetime.now())

        try:
            df = self.csv_handler.read_csv_with_encoding_detection(file_path)
        except FileProcessingError as e:
            self.dashboard.error_handler.handle_file_processing_error(e, file_path)
            result.add_error(str(e))
            result.processing_end = datetime.now()
            return result

        df = self.csv_handler.normalize_columns(df)
        if not self.csv_handler.validate_csv_structure(
                df, required_column_names=self.REQUIRED_COLUMNS, any_of_column_names=self.STAFF_COLUMNS):
            result.add_error(f"CSVの列構成が無効です: {list(df.columns)}")
            result.processing_end = datetime.now()
            return result

        staff_by_name = self._staff_name_index()

        # ヘッダー行を1行目として数える
        for row_number, row in enumerate(df.to_dict(orient='records'), start=2):
            staff_id = self._resolve_staff_id(row, staff_by_name)
            if staff_id is None:
                self._skip(result, row_number, f"担当者を特定できません: {row.get('staff_name') or row.get('staff_id')}")
                continue

            try:
                record = self.dashboard.add_record(
                    staff_id=staff_id,
                    month=row.get('month'),
                    year=row.get('year'),
                    sales=row.get('sales'),
                    **{column: row.get(column, 0) for column in self.AMOUNT_COLUMNS}
                )
            except SalesDashboardError as e:
                self._skip(result, row_number, str(e))
                continue

            result.add_imported(record.id)

        result.processing_end = datetime.now()
        self.logger.log_import_summary(result.file_name, result.imported, result.skipped, len(result.errors))
        return result

    def _staff_name_index(self) -> Dict[str, Optional[str]]:
        """氏名 -> 担当者ID。同名の担当者が複数いる場合は None（特定不可）"""
        index: Dict[str, Optional[str]] = {}
        for member in self.dashboard.list_staff():
            if member.name in index:
                index[member.name] = None
            else:
                index[member.name] = member.id
        return index

    def _resolve_staff_id(self, row: Dict[str, str], staff_by_name: Dict[str, Optional[str]]) -> Optional[str]:
        staff_id = (row.get('staff_id') or '').strip()
        if staff_id:
            return staff_id
        name = (row.get('staff_name') or '').strip()
        return staff_by_name.get(name)

    def _skip(self, result: ImportResult, row_number: int, reason: str) -> None:
        result.add_skipped(row_number, reason)
        self.dashboard.error_handler.log_skipped_row(result.file_name, row_number, reason)
