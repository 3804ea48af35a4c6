from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .generator.visits import SelectionMode


class StorageMode(str, Enum):
    file = "file"
    memory = "memory"


class Settings(BaseSettings):
    STORAGE_MODE: StorageMode = StorageMode.file
    DB_PATH: str = "./cafedb.sqlite3"
    DB_RESET_ON_START: bool = True     # apaga o arquivo do banco a cada start

    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = 4567

    GENERATOR_ENABLED: bool = True
    GENERATION_DELAY: float = Field(5.0, ge=0)       # segundos até o primeiro tick
    GENERATION_INTERVAL: float = Field(1.0, gt=0)    # segundos entre ticks
    GENERATIONS_PER_DAY: int = Field(20, gt=0)
    VISIT_LIMIT: int = Field(11, gt=0)               # limite exclusivo de visitas por tick
    CAFE_COUNT: int = Field(5, gt=0)
    CAFE_NAME_PREFIX: str = "Cafe"
    SELECTION_MODE: SelectionMode = SelectionMode.round_robin

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file="./.env",
        env_ignore_empty=True,
        extra="ignore",
    )

settings = Settings()
