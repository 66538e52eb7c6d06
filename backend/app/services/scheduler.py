"""Periodic cycle triggers at the price, sentiment and money-supply cadences."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from app.metrics_config import PRICE_METRICS, SENTIMENT_METRICS
from app.services.signal_service import SignalService
from core.models import METRIC_FIELDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cadence:
    """One refresh loop: how often, and which metrics it re-fetches."""

    name: str
    interval_seconds: float
    metrics: tuple[str, ...]


def default_cadences(
    price_seconds: float,
    sentiment_seconds: float,
    slow_seconds: float,
) -> list[Cadence]:
    slow = tuple(
        name for name in METRIC_FIELDS
        if name not in PRICE_METRICS and name not in SENTIMENT_METRICS
    )
    return [
        Cadence("price", price_seconds, PRICE_METRICS),
        Cadence("sentiment", sentiment_seconds, SENTIMENT_METRICS),
        Cadence("money_supply", slow_seconds, slow),
    ]


class RefreshScheduler:
    """Runs one background loop per cadence.

    Ticks that land while a cycle is in flight are coalesced by the
    service, so overlapping cadences never queue work.
    """

    def __init__(self, service: SignalService, cadences: list[Cadence]):
        self.service = service
        self.cadences = cadences
        self._tasks: list[asyncio.Task] = []

    @property
    def is_running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    async def _loop(self, cadence: Cadence) -> None:
        while True:
            try:
                await asyncio.sleep(cadence.interval_seconds)
                logger.debug(f"{cadence.name} tick")
                await self.service.run_cycle(force=cadence.metrics)
            except asyncio.CancelledError:
                break
            except Exception as e:
                # Keep the loop alive; the next tick retries
                logger.warning(f"{cadence.name} refresh error: {e}")

    def start(self) -> None:
        if self.is_running:
            return
        self._tasks = [
            asyncio.create_task(self._loop(cadence), name=f"refresh-{cadence.name}")
            for cadence in self.cadences
        ]
        logger.info(
            "Refresh scheduler started: "
            + ", ".join(f"{c.name}={c.interval_seconds:g}s" for c in self.cadences)
        )

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tasks = []
        logger.info("Refresh scheduler stopped")
