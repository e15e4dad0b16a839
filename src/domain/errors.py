"""Structured errors raised while reading project documents."""

from __future__ import annotations
from typing import Any


class ProjectFormatError(Exception):
    """Base class for project document problems."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ProjectParseError(ProjectFormatError):
    """Raised when a document is not valid JSON."""


class ProjectValidationError(ProjectFormatError):
    """Raised when parsed JSON does not match the project schema."""

    @property
    def issues(self) -> list[str]:
        return list(self.context.get("issues", []))


class ProjectLoadError(ProjectFormatError):
    """Raised when a document cannot be read from disk."""
