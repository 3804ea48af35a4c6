from functools import wraps
import logging
import time
from typing import List, Sequence

from ..database.executor import ResultSet
from ..database.table import Table
from ..database.types import Column, TableSchema, ValueType

logger = logging.getLogger(__name__)

CAFE_LIST = TableSchema(
    name="CAFE_LIST",
    columns=(
        Column("ID", ValueType.integer),
        Column("NAME", ValueType.text),
    ),
)

VISIT_DATA = TableSchema(
    name="VISIT_DATA",
    columns=(
        Column("ID", ValueType.integer, ("AUTO_INCREMENT", "NOT NULL")),
        Column("CAFE", ValueType.text),
        Column("DATE", ValueType.date),
        Column("VISIT_COUNT", ValueType.integer, ("NOT NULL",)),
    ),
)

CAFE_COLUMN = "CAFE"
AVERAGE_COLUMN = "AVERAGE"


def query_timer(func):
    """Decorator to log query execution time"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        execution_time = time.time() - start_time
        logger.debug(f"{func.__name__} took {round(execution_time * 1000, 2)} ms")
        return result

    return wrapper


def cafe_names(count: int, prefix: str) -> List[str]:
    return [f"{prefix}_{i}" for i in range(1, count + 1)]


def populate_cafes(table: Table, names: Sequence[str]) -> int:
    """Insert the cafe list once at start-up; returns how many rows were stored"""
    stored = 0
    for cafe_id, name in enumerate(names, start=1):
        if table.insert(table.schema.row(cafe_id, name)).ok:
            stored += 1
    logger.info(f"{stored} cafes written to {table.name}")
    return stored


def fetch_cafe_names(table: Table) -> List[str]:
    result = table.select(["ID", "NAME"], ["NAME"], "ORDER BY ID")
    return result.get("NAME", [])


@query_timer
def get_average_visits(visits: Table) -> ResultSet:
    """Average visit count per cafe, ordered by cafe name"""
    return visits.select(
        [CAFE_COLUMN, f"AVG(VISIT_COUNT) AS {AVERAGE_COLUMN}"],
        [CAFE_COLUMN, AVERAGE_COLUMN],
        f"GROUP BY {CAFE_COLUMN}",
        f"ORDER BY {CAFE_COLUMN}",
    )
