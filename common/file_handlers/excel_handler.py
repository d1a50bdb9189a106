"""
統一Excelハンドラー
"""
import pandas as pd
from openpyxl.styles import Font, Alignment, Border, PatternFill, Side
from openpyxl.utils import get_column_letter
from pathlib import Path
from typing import Dict, Optional

from ..error_handling.exceptions import FileProcessingError


class ExcelHandler:
    """Excelファイルの統一処理クラス"""

    HEADER_FILL = PatternFill(start_color='DDEBF7', end_color='DDEBF7', fill_type='solid')
    HEADER_FONT = Font(bold=True)
    THIN_BORDER = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )
    MAX_COLUMN_WIDTH = 40

    def __init__(self, logger=None, error_handler=None):
        self.logger = logger
        self.error_handler = error_handler

    def write_sheets(self, file_path: Path, sheets: Dict[str, pd.DataFrame],
                     titles: Optional[Dict[str, str]] = None) -> Path:
        """複数シートのExcelファイルを書き出し、ヘッダーを整形"""
        file_path = Path(file_path)
        titles = titles or {}

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with pd.ExcelWriter(file_path, engine='openpyxl') as writer:
                for sheet_name, df in sheets.items():
                    startrow = 2 if sheet_name in titles else 0
                    df.to_excel(writer, sheet_name=sheet_name, index=False, startrow=startrow)
                    worksheet = writer.sheets[sheet_name]
                    if sheet_name in titles:
                        worksheet.cell(row=1, column=1, value=titles[sheet_name]).font = Font(bold=True, size=14)
                    self._style_sheet(worksheet, header_row=startrow + 1, column_count=len(df.columns))
        except (OSError, ValueError) as e:
            raise FileProcessingError(f"Excel書き出しエラー: {file_path.name} - {str(e)}")

        if self.logger:
            self.logger.info(f"Excel書き出し完了: {file_path.name} ({len(sheets)}シート)")
        return file_path

    def _style_sheet(self, worksheet, header_row: int, column_count: int) -> None:
        """ヘッダー行の装飾と列幅の調整"""
        for col_idx in range(1, column_count + 1):
            cell = worksheet.cell(row=header_row, column=col_idx)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.border = self.THIN_BORDER
            cell.alignment = Alignment(horizontal='center', vertical='center')

        for col_idx in range(1, column_count + 1):
            letter = get_column_letter(col_idx)
            width = max(
                (len(str(cell.value)) for cell in worksheet[letter] if cell.value is not None),
                default=8
            )
            worksheet.column_dimensions[letter].width = min(width + 2, self.MAX_COLUMN_WIDTH)
