"""Error taxonomy for the signal engine."""

from __future__ import annotations


class SignalEngineError(Exception):
    """Base class for all engine errors."""


class InputFault(SignalEngineError):
    """A metric reading is missing, non-numeric or non-finite.

    Aborts the current evaluation cycle only.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ConfigFault(SignalEngineError):
    """Static configuration is inconsistent (fatal at startup)."""


class StoreFault(SignalEngineError):
    """Persistence backend is unavailable or a write failed.

    Never fatal to a cycle: callers log it and continue.
    """
