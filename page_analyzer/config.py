# === FILE: page_analyzer/config.py ===
"""
Модуль для загрузки и валидации конфигурации Page Analyzer.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Mapping, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from page_analyzer.normalizer import MAX_URL_LENGTH

__all__ = ["AnalyzerConfig", "load_config", "DEFAULT_CONFIG_PATH"]

#: driver rewrites applied to plain database URLs
_ASYNC_DRIVERS: dict[str, str] = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "postgresql+psycopg2://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}

#: environment variable -> config field
_ENV_OVERRIDES: dict[str, str] = {
    "DATABASE_URL": "database_url",
    "PORT": "port",
}


class AnalyzerConfig(BaseModel):
    """Конфигурация процесса: хранилище, HTTP-клиент и веб-сервер."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    database_url: str = Field(
        "sqlite+aiosqlite:///page_analyzer.db",
        min_length=1,
        description="URL базы данных SQLAlchemy (async-драйвер).",
    )
    pool_size: int = Field(5, ge=1, description="Размер пула соединений.")
    pool_timeout: float = Field(30.0, gt=0, description="Ожидание свободного соединения (секунд).")
    echo_sql: bool = Field(False, description="Логировать SQL-запросы.")

    request_timeout: float = Field(10.0, gt=0, description="Таймаут на проверку страницы (секунд).")
    user_agent: str = Field("PageAnalyzerBot/1.0", min_length=1, description="Заголовок User-Agent.")
    max_url_length: int = Field(
        MAX_URL_LENGTH, ge=1, le=MAX_URL_LENGTH,
        description="Максимальная длина введённого URL (не больше ширины urls.name).",
    )

    host: str = Field("0.0.0.0", min_length=1, description="Адрес веб-сервера.")
    port: int = Field(8000, ge=1, le=65535, description="Порт веб-сервера.")

    @field_validator("database_url", mode="before")
    def _use_async_driver(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            for prefix, replacement in _ASYNC_DRIVERS.items():
                if v.startswith(prefix):
                    return replacement + v[len(prefix):]
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def _apply_env(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = dict(data)
    for var, field in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            merged[field] = value
    return merged


def load_config(
    path: Union[str, Path, None] = None,
    environ: Mapping[str, str] | None = None,
) -> AnalyzerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект AnalyzerConfig.

    Без явного пути используется configs/default.yaml, если он есть, иначе
    значения по умолчанию. Переменные окружения DATABASE_URL и PORT
    перекрывают значения из файла. Явно указанный, но отсутствующий файл
    приводит к FileNotFoundError.
    """
    env = os.environ if environ is None else environ

    if path is None:
        if not DEFAULT_CONFIG_PATH.is_file():
            return AnalyzerConfig(**_apply_env({}, env))
        path_obj = DEFAULT_CONFIG_PATH
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return AnalyzerConfig(**_apply_env(data, env))
