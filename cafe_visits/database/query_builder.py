from enum import Enum
from typing import Optional, Sequence

from ..exceptions import QueryBuildError
from .types import TableSchema

TABLE_NAME_COLUMN = "TABLE_NAME"


class SQLQuery(str, Enum):
    create = "CREATE"
    insert = "INSERT"
    select = "SELECT"
    drop = "DROP"
    show_tables = "SHOW_TABLES"


def build_query(
    command: SQLQuery,
    table: Optional[TableSchema],
    values: Sequence[str] = (),
    *modifiers: str,
) -> str:
    """Build one statement; values and modifiers are pasted verbatim.

    INSERT values must already be SQL literals in column order, SELECT values
    are projection expressions (``name`` or ``expr AS alias``). Modifiers such
    as ``GROUP BY x`` are appended space-separated before the terminator.
    """
    if command is SQLQuery.show_tables:
        query = (
            f"SELECT name AS {TABLE_NAME_COLUMN} FROM sqlite_master "
            "WHERE type = 'table' ORDER BY name"
        )
    else:
        if table is None:
            raise QueryBuildError(f"{command.value} needs a table")
        if command is SQLQuery.create:
            definitions = ", ".join(c.definition for c in table.columns)
            query = f"CREATE TABLE {table.name} ( {definitions} )"
        elif command is SQLQuery.insert:
            if not values:
                raise QueryBuildError(f"INSERT into {table.name} without values")
            query = f"INSERT INTO {table.name} VALUES ( {', '.join(values)} )"
        elif command is SQLQuery.select:
            if not values:
                raise QueryBuildError(f"SELECT from {table.name} without projection")
            query = f"SELECT {', '.join(values)} FROM {table.name}"
        elif command is SQLQuery.drop:
            query = f"DROP TABLE {table.name}"
        else:
            raise QueryBuildError(f"Unsupported command: {command!r}")

    parts = [query, *(m.strip() for m in modifiers if m and m.strip())]
    return " ".join(parts) + ";"
