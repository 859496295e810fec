"""
Error taxonomy for loading and navigating the sales dataset.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


class DatasetLoadError(RuntimeError):
    """The dataset is unreachable or cannot be read as a table. Fatal to the session."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = source


class DataFormatError(ValueError):
    """A single raw row cannot be turned into a Record."""


class InvalidTransitionError(ValueError):
    """A drill-down was requested from a level that does not allow it."""


@dataclass(frozen=True)
class RowNormalizationWarning:
    """Diagnostic for one skipped row (1-based data row number, header excluded)."""
    row_number: int
    reason: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    def __str__(self) -> str:
        return f"row {self.row_number}: {self.reason}"
