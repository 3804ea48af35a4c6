import sqlite3

import pytest

from cafe_visits.config import Settings
from cafe_visits.database.executor import StatementExecutor
from cafe_visits.database.table import Table
from cafe_visits.utils.services import CAFE_LIST, VISIT_DATA


@pytest.fixture
def memory_settings():
    return Settings(STORAGE_MODE="memory", GENERATOR_ENABLED=False)


@pytest.fixture
def executor():
    executor = StatementExecutor(sqlite3.connect(":memory:", check_same_thread=False))
    yield executor
    executor.close()


@pytest.fixture
def visit_table(executor):
    table = Table(VISIT_DATA, executor)
    assert table.create().ok
    return table


@pytest.fixture
def cafe_table(executor):
    table = Table(CAFE_LIST, executor)
    assert table.create().ok
    return table
