# page_analyzer/report/json_report.py

"""
JSON-представление URL и проверок для веб-слоя и CLI.

Сериализация списка URL в файл.
"""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from page_analyzer.db.models import Check, Url


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def check_to_dict(check: Check) -> Dict[str, Any]:
    return {
        "id": check.id,
        "url_id": check.url_id,
        "status_code": check.status_code,
        "title": check.title,
        "h1": check.h1,
        "description": check.description,
        "error": check.error,
        "created_at": _iso(check.created_at),
    }


def url_to_dict(url: Url) -> Dict[str, Any]:
    return {"id": url.id, "name": url.name, "created_at": _iso(url.created_at)}


def listing_to_dicts(rows: Iterable[Tuple[Url, Optional[Check]]]) -> List[Dict[str, Any]]:
    """Строки списка URL: сам URL плюс краткая сводка последней проверки."""
    items: List[Dict[str, Any]] = []
    for url, latest in rows:
        item = url_to_dict(url)
        item["last_check"] = (
            {
                "id": latest.id,
                "status_code": latest.status_code,
                "created_at": _iso(latest.created_at),
            }
            if latest is not None
            else None
        )
        items.append(item)
    return items


def detail_to_dict(url: Url, checks: Iterable[Check]) -> Dict[str, Any]:
    data = url_to_dict(url)
    data["checks"] = [check_to_dict(c) for c in checks]
    return data


def render_json(data: Any, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет data в формате JSON по указанному пути.

    :param data: результат listing_to_dicts / detail_to_dict
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
