import logging
import time
from datetime import date

import pytest
from fastapi.testclient import TestClient

from cafe_visits.config import Settings
from cafe_visits.exceptions import StorageConnectionError
from cafe_visits.main import bootstrap, create_app
from cafe_visits.utils.services import VISIT_DATA


@pytest.fixture
def app(memory_settings):
    return create_app(memory_settings)


def test_average_endpoint(app):
    with TestClient(app) as client:
        visits = app.state.context.visit_table
        visits.insert(VISIT_DATA.row(0, "A", date(2024, 1, 1), 2))
        visits.insert(VISIT_DATA.row(1, "A", date(2024, 1, 1), 4))
        visits.insert(VISIT_DATA.row(2, "B", date(2024, 1, 1), 10))

        response = client.get("/average")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"CAFE": ["A", "B"], "AVERAGE": ["3", "10"]}


def test_average_endpoint_without_visits(app):
    with TestClient(app) as client:
        response = client.get("/average")
        assert response.status_code == 200
        assert response.json() == {"CAFE": [], "AVERAGE": []}


def test_average_endpoint_is_fail_soft(app):
    with TestClient(app) as client:
        app.state.context.visit_table.drop()
        response = client.get("/average")
        assert response.status_code == 200
        assert response.json() == {}


def test_only_average_route_is_served(app):
    with TestClient(app) as client:
        assert client.get("/").status_code == 404
        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404


def test_generator_feeds_the_endpoint():
    settings = Settings(
        STORAGE_MODE="memory",
        GENERATION_DELAY=0,
        GENERATION_INTERVAL=0.01,
        CAFE_COUNT=3,
    )
    app = create_app(settings)
    with TestClient(app) as client:
        scheduler = app.state.context.scheduler
        deadline = 500
        while scheduler.ticks < 6 and deadline:
            deadline -= 1
            time.sleep(0.01)
        body = client.get("/average").json()

    assert body["CAFE"] == ["Cafe_1", "Cafe_2", "Cafe_3"]
    assert len(body["AVERAGE"]) == 3
    assert all(0 <= float(v) < settings.VISIT_LIMIT for v in body["AVERAGE"])


def test_bootstrap_builds_context(memory_settings):
    context = bootstrap(memory_settings)
    try:
        assert context.cafes == ["Cafe_1", "Cafe_2", "Cafe_3", "Cafe_4", "Cafe_5"]
        assert context.generator.cafes == context.cafes
        assert context.generator.generations_per_day == 20
        assert context.scheduler.interval == 1.0
        assert not context.scheduler.running
        assert context.visit_table.select(["ID"], ["ID"]) == {"ID": []}
    finally:
        context.close()


def test_bootstrap_fails_without_storage(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("")
    settings = Settings(DB_PATH=str(blocker / "db.sqlite3"), GENERATOR_ENABLED=False)
    with pytest.raises(StorageConnectionError):
        bootstrap(settings)


def test_bootstrap_keeps_data_without_reset(tmp_path):
    settings = Settings(
        _env_file=None,
        DB_PATH=str(tmp_path / "cafedb.sqlite3"),
        DB_RESET_ON_START=False,
        GENERATOR_ENABLED=False,
        CAFE_COUNT=2,
    )
    context = bootstrap(settings)
    try:
        context.visit_table.insert(VISIT_DATA.row(0, "Cafe_1", date(2024, 1, 1), 4))
    finally:
        context.close()

    context = bootstrap(settings)
    try:
        assert context.cafes == ["Cafe_1", "Cafe_2"]
        assert context.visit_table.select(["VISIT_COUNT"], ["VISIT_COUNT"]) == {
            "VISIT_COUNT": ["4"]
        }
    finally:
        context.close()


def test_bootstrap_resets_data_by_default(tmp_path):
    settings = Settings(
        _env_file=None,
        DB_PATH=str(tmp_path / "cafedb.sqlite3"),
        GENERATOR_ENABLED=False,
    )
    context = bootstrap(settings)
    try:
        context.visit_table.insert(VISIT_DATA.row(0, "Cafe_1", date(2024, 1, 1), 4))
    finally:
        context.close()

    context = bootstrap(settings)
    try:
        assert len(context.cafes) == 5
        assert context.visit_table.select(["ID"], ["ID"]) == {"ID": []}
    finally:
        context.close()


def test_app_applies_its_log_level():
    root = logging.getLogger()
    previous = root.level
    settings = Settings(
        _env_file=None, STORAGE_MODE="memory", GENERATOR_ENABLED=False, LOG_LEVEL="DEBUG"
    )
    try:
        with TestClient(create_app(settings)):
            assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)
