import pytest
from pydantic import ValidationError

from cafe_visits.config import Settings, StorageMode
from cafe_visits.generator.visits import SelectionMode


def test_defaults(monkeypatch):
    for name in ("STORAGE_MODE", "HTTP_PORT", "GENERATIONS_PER_DAY", "VISIT_LIMIT"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.STORAGE_MODE == StorageMode.file
    assert settings.HTTP_PORT == 4567
    assert settings.GENERATION_DELAY == 5.0
    assert settings.GENERATION_INTERVAL == 1.0
    assert settings.GENERATIONS_PER_DAY == 20
    assert settings.VISIT_LIMIT == 11
    assert settings.CAFE_COUNT == 5
    assert settings.CAFE_NAME_PREFIX == "Cafe"
    assert settings.SELECTION_MODE == SelectionMode.round_robin


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STORAGE_MODE", "memory")
    monkeypatch.setenv("GENERATIONS_PER_DAY", "7")
    monkeypatch.setenv("SELECTION_MODE", "random")
    monkeypatch.setenv("CAFE_NAME_PREFIX", "")
    settings = Settings(_env_file=None)
    assert settings.STORAGE_MODE == StorageMode.memory
    assert settings.GENERATIONS_PER_DAY == 7
    assert settings.SELECTION_MODE == SelectionMode.random
    # empty values are ignored
    assert settings.CAFE_NAME_PREFIX == "Cafe"


@pytest.mark.parametrize(
    "field,value",
    [
        ("GENERATIONS_PER_DAY", 0),
        ("VISIT_LIMIT", -1),
        ("CAFE_COUNT", 0),
        ("GENERATION_INTERVAL", 0),
        ("GENERATION_DELAY", -1),
        ("STORAGE_MODE", "postgres"),
    ],
)
def test_invalid_values(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})
