"""Exception hierarchy for the launch pipeline.

Only action-layer failures are surfaced to operators (as ``token:failed``
events); everything else is converted into a skip or filter outcome at
the component boundary that raised it.
"""

from typing import Any, Optional


class LaunchGateError(Exception):
    """Base class for pipeline errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class UnknownSourceError(LaunchGateError, ValueError):
    """Raised when a payload arrives for a source with no registered adapter."""


class AnalysisError(LaunchGateError):
    """Raised inside the analyzer when the LLM call or its response is unusable."""


class LaunchExecutionError(LaunchGateError):
    """Raised by a launch executor when the external action was rejected."""
