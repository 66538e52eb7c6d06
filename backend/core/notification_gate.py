"""Notification dedup and cool-down gate.

The gate answers one question per cycle: should the current primary
signal be pushed to the external channel? It never records anything by
itself; the caller marks a signal as sent once dispatch succeeded (or
was intentionally skipped), via NotificationGate.mark_sent().
"""

from __future__ import annotations

import logging

from core.models.config import EngineConfig
from core.models.signal import NotificationRecord, PrimarySignal, StrategySignal

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_MS = EngineConfig().cooldown_ms


def should_notify(
    current: StrategySignal,
    last: NotificationRecord | None,
    now_ms: int,
    cooldown_ms: int = DEFAULT_COOLDOWN_MS,
) -> bool:
    """Decide whether `current` warrants a new notification.

    Rules, in order:
    1. Nothing sent yet -> notify.
    2. Signal kind changed -> notify.
    3. Strength escalated -> notify.
    4. Same kind and strength within the cool-down -> suppress.
    5. Same kind and strength after the cool-down -> suppress as well;
       only a kind change or an escalation re-opens the gate.
    """
    if last is None:
        return True

    previous = last.signal
    if current.kind != previous.kind:
        return True

    if current.strength.rank > previous.strength.rank:
        return True

    if now_ms - last.sent_at < cooldown_ms:
        return False

    # TODO: confirm with product whether a stable strong signal should be
    # re-sent once the cool-down has elapsed (currently it never is).
    return False


class NotificationGate:
    """Gate bound to the injected "last notified" cell.

    Created at process start with whatever record was persisted, read
    and written once per cycle.
    """

    def __init__(
        self,
        last: NotificationRecord | None = None,
        config: EngineConfig | None = None,
    ):
        self._last = last
        self._config = config or EngineConfig()

    @property
    def last(self) -> NotificationRecord | None:
        return self._last

    def evaluate(self, primary: PrimarySignal, now_ms: int) -> bool:
        """Check a primary signal against the gate.

        MEDIUM and NEUTRAL primaries never notify.
        """
        if not primary.is_notifiable:
            return False

        decision = should_notify(primary, self._last, now_ms, self._config.cooldown_ms)
        logger.debug(
            "Notification gate: %s/%s -> %s",
            primary.kind.value, primary.strength.value,
            "open" if decision else "closed",
        )
        return decision

    def mark_sent(self, signal: StrategySignal, now_ms: int) -> NotificationRecord:
        """Record `signal` as the last notified signal."""
        snapshot = StrategySignal(
            **signal.model_dump(include=set(StrategySignal.model_fields))
        )
        self._last = NotificationRecord(signal=snapshot, sent_at=now_ms)
        return self._last
