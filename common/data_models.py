"""
標準化されたデータモデル
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime


@dataclass
class ImportResult:
    """取り込み処理結果の統一データモデル"""
    file_name: str
    success: bool = True
    imported: int = 0
    skipped: int = 0
    record_ids: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    processing_start: Optional[datetime] = None
    processing_end: Optional[datetime] = None

    def add_imported(self, record_id: str) -> None:
        """取り込み成功を記録"""
        self.imported += 1
        self.record_ids.append(record_id)

    def add_skipped(self, row_number: int, reason: str) -> None:
        """スキップした行を記録"""
        self.skipped += 1
        self.errors.append(f"{row_number}行目: {reason}")

    def add_error(self, error: str) -> None:
        """ファイル単位のエラーを追加"""
        self.errors.append(error)
        self.success = False

    @property
    def processing_duration(self) -> Optional[float]:
        """処理時間を計算（秒）"""
        if self.processing_start and self.processing_end:
            return (self.processing_end - self.processing_start).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return {
            'file_name': self.file_name,
            'success': self.success,
            'imported': self.imported,
            'skipped': self.skipped,
            'errors_count': len(self.errors),
            'processing_duration': self.processing_duration
        }
