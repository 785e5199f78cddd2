# page_analyzer/checker/models.py
"""
Data models for the page checker.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Outcome of one fetch-and-analyze attempt, consumed once by the repository.

    ``status_code`` is ``None`` when the request failed at transport level;
    ``error`` then describes the failure.
    """

    status_code: Optional[int] = None
    title: Optional[str] = None
    h1: Optional[str] = None
    description: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status_code is not None

    @classmethod
    def failure(cls, error: str, status_code: Optional[int] = None) -> AnalysisResult:
        return cls(status_code=status_code, error=error)
