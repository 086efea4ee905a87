"""Storage backends providing the per-test rollback boundary."""

from suiterun.storage.backend import (
    DEFAULT_DATASOURCE,
    ResultSet,
    SQLiteBackend,
    SQLiteTransaction,
    StorageBackend,
    Transaction,
    resolve_datasource,
)

__all__ = [
    "DEFAULT_DATASOURCE",
    "ResultSet",
    "SQLiteBackend",
    "SQLiteTransaction",
    "StorageBackend",
    "Transaction",
    "resolve_datasource",
]
