"""page_analyzer.parser: разбор HTML-страниц."""

from .html_parser import SeoTags, extract_seo, parse_html

__all__ = ["SeoTags", "extract_seo", "parse_html"]
