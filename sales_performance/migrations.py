"""
保存データのスキーマ移行モジュール

レコードストアの読み込み時に一度だけ適用する。移行は番号順に実行され、
適用後の文書には最新の schema_version が記録される。

    v1 -> v2: 旧画面版の項目名（vendedorId, mes, vendas, lucroLiquido など）を正規名に変換
    v2 -> v3: 月コードを2桁、年を文字列に正規化
    v3 -> v4: 全レコードの netProfit を現行の計算式で再計算
"""
import copy
from typing import Any, Callable, Dict, List, Tuple

from common.error_handling.exceptions import RecordStoreError

from .constants import StoreConstants
from .models import normalize_month, normalize_year
from .profit_calculator import compute_net_profit

CURRENT_SCHEMA_VERSION = 4

LEGACY_COLLECTION_KEYS = {
    'vendedores': StoreConstants.STAFF_KEY,
    'setoristas': StoreConstants.STAFF_KEY,
    'dadosVendas': StoreConstants.RECORDS_KEY,
}

LEGACY_STAFF_FIELDS = {
    'nome': 'name',
    'telefone': 'phone',
    'dataContratacao': 'hiredOn',
}

LEGACY_RECORD_FIELDS = {
    'vendedorId': 'staffId',
    'setoristaId': 'staffId',
    'vendedorNome': 'staffName',
    'setoristaName': 'staffName',
    'mes': 'month',
    'ano': 'year',
    'vendas': 'sales',
    'comissao': 'commission',
    'despesas': 'expenses',
    'lucroLiquido': 'netProfit',
}


def _check_collections(document: Dict[str, Any]) -> None:
    """各コレクションがオブジェクトのリストであることを確認（null は空として扱う）"""
    for key in (StoreConstants.STAFF_KEY, StoreConstants.RECORDS_KEY, *LEGACY_COLLECTION_KEYS):
        if key not in document:
            continue
        if document[key] is None:
            document[key] = []
            continue
        items = document[key]
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise RecordStoreError(f"保存データの形式が無効です: {key} はオブジェクトのリストではありません")


def _rename_fields(item: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    renamed = {}
    for key, value in item.items():
        target = mapping.get(key, key)
        # 正規名が既にある場合はそちらを優先
        if target != key and target in item:
            continue
        renamed[target] = value
    return renamed


def _rename_legacy_fields(document: Dict[str, Any]) -> Dict[str, Any]:
    for legacy_key, key in LEGACY_COLLECTION_KEYS.items():
        if legacy_key in document:
            items = document.pop(legacy_key) or []
            document.setdefault(key, [])
            document[key].extend(items)

    document[StoreConstants.STAFF_KEY] = [
        _rename_fields(item, LEGACY_STAFF_FIELDS) for item in document.get(StoreConstants.STAFF_KEY, [])
    ]
    document[StoreConstants.RECORDS_KEY] = [
        _rename_fields(item, LEGACY_RECORD_FIELDS) for item in document.get(StoreConstants.RECORDS_KEY, [])
    ]
    return document


def _normalise_periods(document: Dict[str, Any]) -> Dict[str, Any]:
    for item in document.get(StoreConstants.RECORDS_KEY, []):
        item['month'] = normalize_month(item.get('month'))
        item['year'] = normalize_year(item.get('year'))
    return document


def _recompute_net_profit(document: Dict[str, Any]) -> Dict[str, Any]:
    for item in document.get(StoreConstants.RECORDS_KEY, []):
        item['netProfit'] = compute_net_profit(
            item.get('sales'), item.get('commission'), item.get('bonus'), item.get('expenses')
        )
    return document


MIGRATIONS: List[Tuple[int, Callable[[Dict[str, Any]], Dict[str, Any]]]] = [
    (2, _rename_legacy_fields),
    (3, _normalise_periods),
    (4, _recompute_net_profit),
]


def detect_version(document: Dict[str, Any]) -> int:
    """文書のスキーマバージョン。未記録なら1"""
    try:
        return int(document.get(StoreConstants.VERSION_KEY, 1))
    except (TypeError, ValueError):
        raise RecordStoreError(f"schema_versionが無効です: {document.get(StoreConstants.VERSION_KEY)!r}")


def migrate(document: Dict[str, Any]) -> Tuple[Dict[str, Any], List[int]]:
    """
    文書を最新スキーマに移行する

    Returns:
        (移行後の文書のコピー, 適用したバージョン番号のリスト)
    """
    version = detect_version(document)
    if version > CURRENT_SCHEMA_VERSION:
        raise RecordStoreError(
            f"未対応のスキーマバージョンです: v{version} (対応: v{CURRENT_SCHEMA_VERSION}まで)"
        )

    migrated = copy.deepcopy(document)
    _check_collections(migrated)
    migrated.setdefault(StoreConstants.STAFF_KEY, [])
    migrated.setdefault(StoreConstants.RECORDS_KEY, [])
    applied = []

    for target_version, step in MIGRATIONS:
        if version < target_version:
            migrated = step(migrated)
            applied.append(target_version)

    migrated[StoreConstants.VERSION_KEY] = CURRENT_SCHEMA_VERSION
    return migrated, applied
