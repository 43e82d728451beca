"""Errors raised by the turn engine."""
from __future__ import annotations


class GlitchCityError(Exception):
    """Base class for engine errors."""


class SessionOverError(GlitchCityError):
    """The player's health hit zero; only a reset is accepted."""


class SystemCriticalError(GlitchCityError):
    """Glitch level is critical; actions are refused until recovery."""


class TransitionInProgressError(GlitchCityError):
    """A turn is still resolving against the current state."""


class OutcomeValidationError(ValueError):
    """The narrative service returned a payload that breaks the outcome contract."""
