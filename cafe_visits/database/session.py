# session.py
import logging
import sqlite3
from pathlib import Path
from typing import Annotated, List

from fastapi import Depends, Request

from ..config import Settings, StorageMode
from ..context import CafeContext
from ..exceptions import StorageConnectionError
from .executor import StatementExecutor
from .query_builder import TABLE_NAME_COLUMN, SQLQuery, build_query

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


def connect(settings: Settings) -> StatementExecutor:
    """Open the storage connection; failure here is fatal for the process"""
    if settings.STORAGE_MODE == StorageMode.memory:
        database = MEMORY_DATABASE
    else:
        path = Path(settings.DB_PATH).expanduser()
        if settings.DB_RESET_ON_START and path.exists():
            logger.info(f"Deleting existing database file {path}")
            path.unlink()
        database = str(path)

    logger.info(f"Connecting to sqlite database: \"{database}\"")
    try:
        if database != MEMORY_DATABASE:
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        # the executor serialises access, so the connection may cross threads
        connection = sqlite3.connect(database, check_same_thread=False)
    except (sqlite3.Error, OSError) as e:
        raise StorageConnectionError(f"Cannot open database {database}: {e}") from e
    return StatementExecutor(connection)


def list_tables(executor: StatementExecutor) -> List[str]:
    tables = executor.execute(build_query(SQLQuery.show_tables, None), TABLE_NAME_COLUMN)
    return tables.get(TABLE_NAME_COLUMN, [])


def flush_tables(executor: StatementExecutor) -> None:
    """Drop every table so each run starts from an empty database"""
    tables = list_tables(executor)
    if not tables:
        logger.debug("Setup tables for the new database")
        return
    for table in tables:
        executor.execute(f"DROP TABLE {table};")
        logger.debug(f"Table {table} dropped.")


def get_context(request: Request) -> CafeContext:
    return request.app.state.context


ContextDep = Annotated[CafeContext, Depends(get_context)]
