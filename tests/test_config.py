# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from page_analyzer.config import AnalyzerConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("request_timeout: 5\nport: 9000", ".yaml", None),
        (json.dumps({"request_timeout": 5, "port": 9000}), ".json", None),
        ("port: 0", ".yaml", ValidationError),
        ("unknown_key: 1", ".yaml", ValidationError),
        ("::invalid yaml", ".yaml", TypeError),
        ("- a\n- b", ".yaml", TypeError),
        ("{broken", ".json", ValueError),
        ("port = 1", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path, environ={})
    else:
        cfg = load_config(cfg_path, environ={})
        assert isinstance(cfg, AnalyzerConfig)
        assert cfg.request_timeout == 5
        assert cfg.port == 9000


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = load_config(None, environ={})
    assert cfg.database_url == "sqlite+aiosqlite:///page_analyzer.db"
    assert cfg.max_url_length == 255


def test_default_file_is_used(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("user_agent: FromDefault/2.0", encoding="utf-8")
    assert load_config(None, environ={}).user_agent == "FromDefault/2.0"


def test_explicit_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml", environ={})


def test_environment_overrides(tmp_path):
    cfg_path = write_file(tmp_path, "port: 9000", ".yaml")
    cfg = load_config(
        cfg_path,
        environ={"DATABASE_URL": "postgresql://u:p@db:5432/analyzer", "PORT": "7070"},
    )
    assert cfg.port == 7070
    assert cfg.database_url == "postgresql+asyncpg://u:p@db:5432/analyzer"
    assert not cfg.is_sqlite


@pytest.mark.parametrize(
    "given,expected",
    [
        ("postgres://h/db", "postgresql+asyncpg://h/db"),
        ("sqlite:///x.db", "sqlite+aiosqlite:///x.db"),
        ("sqlite+aiosqlite:///x.db", "sqlite+aiosqlite:///x.db"),
        ("postgresql+asyncpg://h/db", "postgresql+asyncpg://h/db"),
    ],
)
def test_database_url_uses_async_driver(given, expected):
    assert AnalyzerConfig(database_url=given).database_url == expected


def test_config_is_frozen():
    cfg = AnalyzerConfig()
    with pytest.raises(ValidationError):
        cfg.port = 1


def test_max_url_length_fits_url_column():
    from page_analyzer.db.models import URL_NAME_LENGTH

    assert AnalyzerConfig().max_url_length == URL_NAME_LENGTH
    assert AnalyzerConfig(max_url_length=100).max_url_length == 100
    with pytest.raises(ValidationError):
        AnalyzerConfig(max_url_length=URL_NAME_LENGTH + 1)
