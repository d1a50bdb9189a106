"""
レコードストアモジュール

担当者一覧と売上レコードの2つのコレクションを保持する。
集計エンジンはここから取得したスナップショットだけを受け取る。
"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from common.error_handling.exceptions import RecordStoreError

from .constants import StoreConstants
from .migrations import CURRENT_SCHEMA_VERSION, detect_version, migrate
from .models import SalesRecord, StaffMember

T = TypeVar('T')


class Repository(ABC, Generic[T]):
    """エンティティ保管の抽象インターフェース"""

    @abstractmethod
    def list(self) -> List[T]:
        """全件を取得（呼び出し側で変更しても保管内容には影響しない）"""
        pass

    @abstractmethod
    def get_by_id(self, entity_id: str) -> Optional[T]:
        """IDで1件取得。存在しなければ None"""
        pass

    @abstractmethod
    def upsert(self, entity: T) -> T:
        """追加または置き換え"""
        pass

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """削除。削除した場合 True"""
        pass


class InMemoryRepository(Repository[T]):
    """挿入順を保持するメモリ上のリポジトリ"""

    def __init__(self, items: Iterable[T] = (), id_of: Callable[[T], str] = lambda entity: entity.id):
        self._id_of = id_of
        self._items: Dict[str, T] = {}
        for item in items:
            self.upsert(item)

    def list(self) -> List[T]:
        return list(self._items.values())

    def get_by_id(self, entity_id: str) -> Optional[T]:
        return self._items.get(entity_id)

    def upsert(self, entity: T) -> T:
        self._items[self._id_of(entity)] = entity
        return entity

    def delete(self, entity_id: str) -> bool:
        return self._items.pop(entity_id, None) is not None

    def replace_all(self, items: Iterable[T]) -> None:
        """全件を入れ替える"""
        self._items = {}
        for item in items:
            self.upsert(item)

    def __len__(self) -> int:
        return len(self._items)


class RecordStore:
    """
    メモリ上のレコードストア

    永続化を伴わないため、テストやフィクスチャからの利用を想定。
    """

    def __init__(self, staff: Iterable[StaffMember] = (), records: Iterable[SalesRecord] = (), logger=None):
        self.logger = logger or logging.getLogger(__name__)
        self.staff: InMemoryRepository[StaffMember] = InMemoryRepository(staff)
        self.records: InMemoryRepository[SalesRecord] = InMemoryRepository(records)

    def load_staff(self) -> List[StaffMember]:
        return self.staff.list()

    def load_records(self) -> List[SalesRecord]:
        return self.records.list()

    def save_staff(self, staff: Iterable[StaffMember]) -> None:
        self.staff.replace_all(staff)
        self.commit()

    def save_records(self, records: Iterable[SalesRecord]) -> None:
        self.records.replace_all(records)
        self.commit()

    def commit(self) -> None:
        """変更を確定する（メモリ版では何もしない）"""
        pass


class JsonRecordStore(RecordStore):
    """
    JSONファイルに永続化するレコードストア

    文書形式:
        {"schema_version": 4, "staff": [...], "sales_records": [...]}
    読み込み時にスキーマ移行を適用し、移行が発生した場合は直ちに書き戻す。
    """

    def __init__(self, path: Path, encoding: str = 'utf-8', logger=None, auto_load: bool = True):
        super().__init__(logger=logger)
        self.path = Path(path)
        self.encoding = encoding
        self.applied_migrations: List[int] = []
        if auto_load:
            self.load()

    def load(self) -> None:
        """ファイルから全件を読み込む（ファイルがなければ空）"""
        document = self._read_document()
        from_version = detect_version(document)

        try:
            migrated, applied = migrate(document)
            self.staff.replace_all(StaffMember.from_dict(item) for item in migrated[StoreConstants.STAFF_KEY])
            self.records.replace_all(SalesRecord.from_dict(item) for item in migrated[StoreConstants.RECORDS_KEY])
        except (AttributeError, TypeError, ValueError) as e:
            raise RecordStoreError(f"保存データの形式が無効です: {self.path} - {str(e)}")
        self.applied_migrations = applied

        if applied and self.path.exists():
            self.logger.info(
                f"スキーマ移行: v{from_version} -> v{CURRENT_SCHEMA_VERSION} "
                f"(レコード {len(self.records)}件)"
            )
            self.commit()

        self.logger.info(f"レコードストア読み込み: 担当者 {len(self.staff)}件, 売上レコード {len(self.records)}件")

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {StoreConstants.VERSION_KEY: CURRENT_SCHEMA_VERSION}

        try:
            with open(self.path, 'r', encoding=self.encoding) as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise RecordStoreError(f"保存データの形式が無効です: {self.path} - {str(e)}")
        except OSError as e:
            raise RecordStoreError(f"保存データ読み込みエラー: {self.path} - {str(e)}")

        if not isinstance(document, dict):
            raise RecordStoreError(f"保存データの形式が無効です: {self.path}")
        return document

    def to_document(self) -> dict:
        """保存形式の文書を作成"""
        return {
            StoreConstants.VERSION_KEY: CURRENT_SCHEMA_VERSION,
            StoreConstants.STAFF_KEY: [member.to_dict() for member in self.staff.list()],
            StoreConstants.RECORDS_KEY: [record.to_dict() for record in self.records.list()],
        }

    def commit(self) -> None:
        """一時ファイルに書き出してから置き換える"""
        document = self.to_document()
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, 'w', encoding=self.encoding) as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(temp_name, self.path)
        except OSError as e:
            if os.path.exists(temp_name):
                os.remove(temp_name)
            raise RecordStoreError(f"保存データ書き込みエラー: {self.path} - {str(e)}")

        self.logger.debug(f"レコードストア保存: {self.path}")
