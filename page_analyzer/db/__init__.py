"""page_analyzer.db: модели, пул соединений и репозиторий проверок."""

from .models import Base, Check, Url
from .repository import CheckRepository
from .session import create_engine, create_session_factory, init_schema

__all__ = [
    "Base",
    "Check",
    "CheckRepository",
    "Url",
    "create_engine",
    "create_session_factory",
    "init_schema",
]
