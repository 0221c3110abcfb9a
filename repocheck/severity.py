"""Severity definitions for commit lint problems."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Enumerate the reportable severity levels."""

    ERROR = "ERROR"
    WARNING = "WARNING"

    @classmethod
    def from_level(cls, level: int) -> "Severity | None":
        """Map a numeric rule level (0 off, 1 warning, 2 error) to a severity."""

        ordering = {
            0: None,
            1: cls.WARNING,
            2: cls.ERROR,
        }
        return ordering[level]

    @property
    def marker(self) -> str:
        return "x" if self is Severity.ERROR else "!"
