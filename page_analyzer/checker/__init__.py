"""page_analyzer.checker: загрузка страницы и анализ её SEO-тегов."""

from .fetcher import PageFetcher
from .models import AnalysisResult

__all__ = ["AnalysisResult", "PageFetcher"]
