"""Transactional storage backends used as the per-test rollback boundary."""

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from suiterun.errors import DatasourceNotFound

logger = logging.getLogger(__name__)

DEFAULT_DATASOURCE = "default"


def resolve_datasource(explicit: Optional[str] = None, default: Optional[str] = None) -> str:
    """Pick the datasource name for a run.

    An explicit name wins, then the application's configured default,
    then ``DEFAULT_DATASOURCE``.
    """
    return explicit or default or DEFAULT_DATASOURCE


@dataclass
class ResultSet:
    """Rows returned by a query, with their column names."""

    columns: list[str] = field(default_factory=list)
    rows: list[tuple] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def first(self) -> Optional[dict[str, Any]]:
        """Return the first row as a column-to-value mapping, if any."""
        if not self.rows:
            return None
        return dict(zip(self.columns, self.rows[0]))


@runtime_checkable
class Transaction(Protocol):
    """An open transaction on one datasource."""

    datasource: str


@runtime_checkable
class StorageBackend(Protocol):
    """Anything that can open and roll back a transaction on a named datasource."""

    def begin(self, datasource: str) -> Transaction: ...

    def rollback(self, transaction: Transaction) -> None: ...


class SQLiteTransaction:
    """A SQLite connection with an open ``BEGIN`` that is never committed."""

    def __init__(self, datasource: str, connection: sqlite3.Connection):
        self.datasource = datasource
        self.connection = connection
        self.closed = False

    def execute(self, sql: str, params: tuple = ()) -> int:
        """Run a statement and return the number of affected rows."""
        cursor = self.connection.execute(sql, params)
        return cursor.rowcount

    def query(self, sql: str, params: tuple = ()) -> ResultSet:
        """Run a query and return its rows."""
        cursor = self.connection.execute(sql, params)
        columns = [d[0] for d in cursor.description] if cursor.description else []
        return ResultSet(columns=columns, rows=[tuple(row) for row in cursor.fetchall()])


class SQLiteBackend:
    """SQLite storage backend with named datasources.

    Each datasource name maps to a database file. Every ``begin`` opens a
    fresh connection so a test only ever sees committed data plus its own
    uncommitted writes.
    """

    def __init__(self, datasources: dict[str, Path | str]):
        """Initialize the backend.

        Args:
            datasources: Mapping of datasource name to SQLite database path
        """
        self.datasources = {name: str(path) for name, path in datasources.items()}

    def _path_for(self, datasource: str) -> str:
        try:
            return self.datasources[datasource]
        except KeyError:
            available = ", ".join(sorted(self.datasources)) or "(none)"
            raise DatasourceNotFound(
                f"Unknown datasource: {datasource}",
                f"Available datasources: {available}",
            ) from None

    def begin(self, datasource: str) -> SQLiteTransaction:
        """Open a connection and start a transaction on it."""
        path = self._path_for(datasource)
        # isolation_level=None leaves BEGIN/ROLLBACK fully under our control
        connection = sqlite3.connect(path, isolation_level=None)
        connection.execute("BEGIN")
        logger.debug("Began transaction on %s (%s)", datasource, path)
        return SQLiteTransaction(datasource, connection)

    def rollback(self, transaction: SQLiteTransaction) -> None:
        """Discard everything written inside the transaction and close it."""
        if transaction.closed:
            return
        try:
            if transaction.connection.in_transaction:
                transaction.connection.execute("ROLLBACK")
        finally:
            transaction.connection.close()
            transaction.closed = True
        logger.debug("Rolled back transaction on %s", transaction.datasource)
