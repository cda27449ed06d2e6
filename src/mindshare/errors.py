"""Mindshare error types.

Typed exceptions shared by the synthetic pipeline, the scorer, the grapher and
the workspace. The core never fails on well-typed input; these errors are
raised only for invalid configuration input and unknown identifiers.
"""

from __future__ import annotations

from typing import Any


class MindshareError(Exception):
    """Base exception for Mindshare operations.

    Attributes:
        message: Human-readable error message.
        details: Optional structured context (field names, offending values).
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        rendered = ", ".join(f"{k}={v!r}" for k, v in sorted(self.details.items()))
        return f"{self.message} ({rendered})"


class MindshareValidationError(MindshareError, ValueError):
    """Raised when a caller supplies input outside the closed configuration space.

    Examples: a topic key outside the six compliance dimensions, a record
    count <= 0, a negative neighbor count, or sampling more items than exist.
    """


class RuleSetNotFoundError(MindshareError):
    """Raised when no rule set is registered under the requested name."""


class BriefNotFoundError(MindshareError):
    """Raised when a workspace action references an unknown brief id."""


class AdvisorNotFoundError(MindshareError):
    """Raised when a workspace action references an unknown advisor id."""
