"""
Error taxonomy for diagram ingestion and stub/driver generation.

Parsers raise these internally and convert them into diagnostics at their
public boundary, so none of them reach the host application from a parse
call. Generation wraps failures in GenerationError.
"""

from typing import Any, Dict, Optional


class StubDriverError(Exception):
    """Base exception for all stubdriver errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the error.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class FormatError(StubDriverError):
    """Raised when an input file has the wrong root marker or cannot be parsed."""


class ColumnsNotFoundError(StubDriverError):
    """Raised when the traceability matrix has no id-like or name-like column."""


class UnresolvedReferenceError(StubDriverError):
    """Raised when a REF box cannot be matched to a diagram or class."""


class EmptyResultWarning(StubDriverError):
    """A parse produced no participants, messages or classes."""


class GenerationError(StubDriverError):
    """Raised when stub or driver synthesis fails."""


class StorageError(StubDriverError):
    """Raised when persisted state cannot be read or written."""
