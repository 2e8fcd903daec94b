"""Exception hierarchy for eps-nsga.

All library-specific exceptions inherit from EpsNSGAError so callers can catch
every failure of a run in one place. Each subclass also derives from the
builtin it refines (ValueError, RuntimeError) so generic handlers keep working.

Example:
    try:
        algorithm.iterate()
    except EvaluationError as e:
        print(f"Generation discarded: {e}")
"""

from typing import Any


class EpsNSGAError(Exception):
    """Base exception for all eps-nsga errors.

    Attributes:
        message: Human-readable error description.
        suggestion: Optional hint for fixing the error.
        details: Additional context about the failure.
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


class ConfigurationError(EpsNSGAError, ValueError):
    """Raised at construction time when a run is configured incorrectly."""


class VariationError(EpsNSGAError, RuntimeError):
    """Raised when a variation operator breaks its contract (e.g. never yields children)."""


class EvaluationError(EpsNSGAError, RuntimeError):
    """Raised when a batch evaluation fails; the batch is discarded."""


class EvaluationTimeout(EvaluationError):
    """Raised when a batch evaluation exceeds its timeout."""


class EvaluationCancelled(EvaluationError):
    """Raised when a batch evaluation is cancelled from outside."""


class SelectionError(EpsNSGAError, RuntimeError):
    """Raised when an external selection strategy returns the wrong number of parents."""
