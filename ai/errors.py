"""
Exception hierarchy for Routewise.

All pipeline exceptions inherit from RoutewiseError and carry:
- message: Human-readable error message
- details: Optional additional context
- stage: Pipeline stage that raised it (classify, search, respond, ...)
- recoverable: Whether the orchestrator may degrade instead of failing the turn

Recovery policy lives in the orchestrator, not here.
"""

from typing import Any, Dict, Optional


class RoutewiseError(Exception):
    """Base exception for all Routewise errors."""

    recoverable: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        stage: Optional[str] = None,
        recoverable: Optional[bool] = None,
    ):
        self.message = message
        self.details = details
        self.stage = stage

        if recoverable is not None:
            self.recoverable = recoverable

        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for logging and UI metadata."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "details": self.details,
            "stage": self.stage,
            "recoverable": self.recoverable,
        }


class GenerationError(RoutewiseError):
    """Generation backend unreachable, errored, timed out or returned nothing."""


class ParseError(RoutewiseError):
    """Backend text could not be mapped onto the declared output fields."""


class ClassificationError(ParseError):
    """Intent label outside the closed Intent enumeration."""

    recoverable = True


class ToolError(RoutewiseError):
    """Query extraction or search backend failure."""

    recoverable = True


class ConfigurationError(RoutewiseError):
    """Required startup configuration is missing or invalid."""
