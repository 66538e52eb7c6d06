"""Engine configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Time-window parameters for notification and history bookkeeping."""

    # Minimum elapsed time before an unchanged signal may be re-notified
    notify_cooldown_hours: float = Field(default=4.0, gt=0)

    # History log and snapshots keep this many trailing days
    history_retention_days: int = Field(default=90, gt=0)

    @property
    def cooldown_ms(self) -> int:
        return int(self.notify_cooldown_hours * 60 * 60 * 1000)

    @property
    def retention_ms(self) -> int:
        return self.history_retention_days * DAY_MS


DAY_MS = 24 * 60 * 60 * 1000
