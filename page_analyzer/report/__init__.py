# File: page_analyzer/report/__init__.py
"""page_analyzer.report: JSON-представление записей, используемое веб-слоем, CLI и тестами."""

from .json_report import (
    check_to_dict,
    detail_to_dict,
    listing_to_dicts,
    render_json,
    url_to_dict,
)

__all__ = ["check_to_dict", "detail_to_dict", "listing_to_dicts", "render_json", "url_to_dict"]
