from __future__ import annotations

from typing import Optional


class TagSimError(Exception):
    """Base class for all errors raised by the tag simulation."""


class ConfigurationError(TagSimError):
    """Raised when simulation parameters are invalid or missing."""

    def __init__(self, param_name: Optional[str] = None, reason: Optional[str] = None):
        # raise ConfigurationError("generic message")
        # or raise ConfigurationError("agent_count", "must be positive")
        if param_name and reason:
            message = f"Invalid configuration for '{param_name}': {reason}"
            self.param_name = param_name
        else:
            message = param_name if param_name else "Invalid configuration"
            self.param_name = None
        self.reason = reason
        super().__init__(message)


class SimulationStateError(TagSimError):
    """Raised when shared simulation state is found inconsistent during a step.

    The world cannot continue stepping after this error.
    """
