import logging
import sqlite3
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import StatementError

logger = logging.getLogger(__name__)

ResultSet = Dict[str, List[str]]


@dataclass
class ExecutionResult:
    """Outcome of one statement: column-oriented rows or the failure"""

    columns: ResultSet = field(default_factory=dict)
    error: Optional[StatementError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def to_text(value: Any) -> str:
    """String form of a fetched value"""
    if value is None:
        return "NULL"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class StatementExecutor:
    """Runs statements on the single shared connection, one at a time"""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection
        self._lock = threading.Lock()
        self._closed = False

    def run(self, statement: str, *columns: str) -> ExecutionResult:
        """Execute and commit a statement.

        Without ``columns`` the statement is a mutation and the result holds
        no columns. With ``columns`` every requested name maps to the list of
        its values, one per returned row, even when no rows come back.
        Failures are logged and returned in ``error``, never raised.
        """
        logger.debug(f"SQL =>:\t{statement}")
        with self._lock:
            try:
                cursor = self._connection.cursor()
                try:
                    cursor.execute(statement)
                    result = self._collect(statement, cursor, columns) if columns else {}
                finally:
                    cursor.close()
                self._connection.commit()
            except (sqlite3.Error, sqlite3.Warning, UnicodeError, StatementError) as e:
                error = e if isinstance(e, StatementError) else StatementError(statement, e)
                logger.error(f"Error executing the query: {statement}: {error.cause}")
                self._rollback()
                return ExecutionResult(error=error)
        if columns:
            logger.debug(f"SQL <=:\t{result}")
        return ExecutionResult(columns=result)

    def execute(self, statement: str, *columns: str) -> Optional[ResultSet]:
        """Fail-soft variant of ``run``: ``{}`` for failed queries, ``None`` for mutations"""
        result = self.run(statement, *columns)
        if not columns:
            return None
        return result.columns

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._connection.close()
            self._closed = True

    def _collect(self, statement: str, cursor: sqlite3.Cursor, columns) -> ResultSet:
        names = [d[0].upper() for d in cursor.description or ()]
        positions = []
        for column in columns:
            try:
                positions.append(names.index(column.upper()))
            except ValueError:
                raise StatementError(
                    statement,
                    KeyError(f"Column {column} not found in {names}"),
                )
        result: ResultSet = {column: [] for column in columns}
        for row in cursor.fetchall():
            for column, position in zip(columns, positions):
                result[column].append(to_text(row[position]))
        return result

    def _rollback(self) -> None:
        try:
            self._connection.rollback()
        except sqlite3.Error as e:
            logger.warning(f"Rollback failed: {e}")
