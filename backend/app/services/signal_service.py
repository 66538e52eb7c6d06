"""Signal service: runs evaluation cycles and owns the engine's state.

One cycle:
1. Fetch all metrics concurrently (with fallbacks)
2. Validate and evaluate (pure core engine)
3. Save the daily snapshot
4. Gate the primary signal, dispatch, then mark sent and record it in history
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Iterable

from app.services.metric_sources import ResilientSource
from app.services.notifier import DispatchResult, WebhookNotifier
from app.storage import HistoryRepository, notification_state
from core.engine import build_snapshot, evaluate_cycle
from core.errors import InputFault, StoreFault
from core.history import Clock, epoch_ms
from core.models import (
    METRIC_FIELDS,
    CycleResult,
    EngineConfig,
    HistoryEntry,
    Metric,
    MetricSet,
    build_metric_set,
)
from core.notification_gate import NotificationGate

logger = logging.getLogger(__name__)


class SignalService:
    """Runs cycles one at a time and keeps the latest result."""

    def __init__(
        self,
        sources: dict[str, ResilientSource],
        history: HistoryRepository,
        notifier: WebhookNotifier,
        config: EngineConfig | None = None,
        clock: Clock = epoch_ms,
    ):
        self.sources = sources
        self.history = history
        self.notifier = notifier
        self.config = config or EngineConfig()
        self._clock = clock
        self.gate = NotificationGate(config=self.config)

        self._lock = asyncio.Lock()
        self.latest: CycleResult | None = None
        self.last_error: InputFault | None = None
        self.last_run_at: int | None = None
        self.last_dispatch: DispatchResult | None = None
        self.cycle_count = 0

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def load_state(self) -> None:
        """Restore history and the last notified signal from Redis."""
        try:
            await self.history.load()
        except StoreFault as e:
            logger.warning(f"History not restored: {e}")

        try:
            last = await notification_state.load_last_notification()
        except StoreFault as e:
            logger.warning(f"Last notification not restored: {e}")
            last = None

        self.gate = NotificationGate(last=last, config=self.config)
        if last is not None:
            logger.info(
                f"Last notification: {last.signal.kind.value}/"
                f"{last.signal.strength.value} at {last.sent_at}"
            )

    async def close(self) -> None:
        for source in self.sources.values():
            await source.close()
        await self.notifier.close()

    async def reset_notification(self) -> bool:
        """Forget the last notified signal so the next strong one is sent.

        Returns:
            True if the persisted record was cleared as well
        """
        async with self._lock:
            self.gate = NotificationGate(config=self.config)
            cleared = await notification_state.clear_last_notification()
        logger.info(f"Notification gate reset (persisted={cleared})")
        return cleared

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def collect_metrics(self, force: Iterable[str] = ()) -> dict[str, Metric | None]:
        """Fetch every metric concurrently.

        Args:
            force: Metric names to re-fetch even if their cached value is fresh
        """
        forced = set(force)

        async def fetch_one(name: str) -> Metric | None:
            source = self.sources.get(name)
            if source is None:
                return None
            return await source.fetch(force=name in forced)

        readings = await asyncio.gather(*(fetch_one(name) for name in METRIC_FIELDS))
        return dict(zip(METRIC_FIELDS, readings))

    async def run_cycle(self, force: Iterable[str] = ()) -> CycleResult | None:
        """Run one cycle unless another is already in flight.

        Returns:
            The new result, or None if the trigger was coalesced or the
            inputs were rejected (see last_error)
        """
        if self._lock.locked():
            logger.debug("Cycle already in progress, trigger coalesced")
            return None

        async with self._lock:
            return await self._run_cycle(force)

    async def _run_cycle(self, force: Iterable[str]) -> CycleResult | None:
        now_ms = self._clock()
        self.last_run_at = now_ms
        readings = await self.collect_metrics(force)

        try:
            metrics = build_metric_set(readings)
            result = evaluate_cycle(
                metrics, now=datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc)
            )
        except InputFault as e:
            # Previous result stays the displayed state
            self.last_error = e
            logger.error(f"Cycle rejected: {e}")
            return None

        self.latest = result
        self.last_error = None
        self.cycle_count += 1

        primary = result.primary
        logger.info(
            f"Cycle #{self.cycle_count}: trading={result.trading.value} "
            f"macro={result.macro.value} primary={primary.kind.value}/"
            f"{primary.strength.value} ({primary.active_strategies} active)"
        )
        if result.estimated_fields:
            logger.info(f"Estimated inputs: {', '.join(result.estimated_fields)}")

        await self._save_snapshot(metrics, result, now_ms)
        await self._handle_primary(result, now_ms)
        return result

    async def _save_snapshot(self, metrics: MetricSet, result: CycleResult, now_ms: int) -> None:
        try:
            await self.history.save_snapshot(build_snapshot(metrics, result, now_ms))
        except StoreFault as e:
            logger.warning(f"Snapshot not persisted: {e}")

    async def _handle_primary(self, result: CycleResult, now_ms: int) -> None:
        primary = result.primary
        if not self.gate.evaluate(primary, now_ms):
            return

        logger.info(f"Notifiable signal: {primary.kind.value}/{primary.strength.value}")

        dispatch = await self.notifier.send(primary, result.btc_price, now_ms)
        self.last_dispatch = dispatch
        if not dispatch.should_mark_sent:
            # Left unmarked so the next cycle retries
            return

        record = self.gate.mark_sent(primary, now_ms)

        # Only signals that went out (or were intentionally skipped) are logged
        try:
            await self.history.append(
                HistoryEntry.from_signal(primary, result.btc_price, now_ms)
            )
        except StoreFault as e:
            logger.warning(f"History entry not persisted: {e}")

        try:
            await notification_state.save_last_notification(record)
        except StoreFault as e:
            logger.warning(f"Last notification not persisted: {e}")
