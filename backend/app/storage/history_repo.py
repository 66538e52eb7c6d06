"""Redis-backed persistence for the signal history log and daily snapshots.

The in-memory HistoryStore is the source of truth during a run; every
write is mirrored to Redis so the log survives restarts. Redis failures
surface as StoreFault and never lose the in-memory state.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from app.storage import cache
from core.errors import StoreFault
from core.history import Clock, HistoryStore, epoch_ms
from core.models import (
    DailySnapshot,
    EngineConfig,
    HistoryEntry,
    HistoryStats,
)

logger = logging.getLogger(__name__)


class HistoryRepository:
    """Repository for history entries and snapshots."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        clock: Clock = epoch_ms,
    ):
        self._config = config or EngineConfig()
        self._clock = clock
        self.store = HistoryStore(config=self._config, clock=clock)

    @property
    def _snapshot_ttl(self) -> int:
        return self._config.history_retention_days * 24 * 60 * 60

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> int:
        """Load the persisted log and snapshots into memory.

        Returns:
            Number of entries loaded (after pruning)

        Raises:
            StoreFault: If the cache is unavailable
        """
        if not cache.is_cache_available():
            raise StoreFault("Redis unavailable, history not loaded")

        raw_entries = await cache.get_json(cache.KEY_HISTORY) or []
        entries = []
        for item in raw_entries:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed history entry: {e}")

        raw_snapshots = await cache.scan_json(f"{cache.KEY_PREFIX_SNAPSHOT}*")
        snapshots = []
        for key, item in raw_snapshots.items():
            try:
                snapshots.append(DailySnapshot.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed snapshot {key}: {e}")

        self.store = HistoryStore(
            entries=entries,
            snapshots=snapshots,
            config=self._config,
            clock=self._clock,
        )
        self.store.prune()
        logger.info(
            f"Loaded {len(self.store)} history entries and "
            f"{len(self.store.snapshots)} snapshots"
        )
        return len(self.store)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _save_entries(self) -> None:
        if not cache.is_cache_available():
            raise StoreFault("Redis unavailable, history not saved")

        ok = await cache.set_json(
            cache.KEY_HISTORY,
            [e.model_dump(mode="json") for e in self.store.entries],
        )
        if not ok:
            raise StoreFault("Failed to save history log")

    async def append(self, entry: HistoryEntry) -> None:
        """Append an entry (in memory first) and persist the pruned log.

        Raises:
            StoreFault: If persistence failed; the entry stays in memory
        """
        self.store.append(entry)
        await self._save_entries()
        logger.info(
            f"Signal saved to history: {entry.kind.value}/{entry.strength.value}"
        )

    async def save_snapshot(self, snapshot: DailySnapshot) -> None:
        """Store the snapshot for its date, replacing an earlier one.

        Raises:
            StoreFault: If persistence failed
        """
        self.store.save_snapshot(snapshot)

        if not cache.is_cache_available():
            raise StoreFault("Redis unavailable, snapshot not saved")

        ok = await cache.set_json(
            f"{cache.KEY_PREFIX_SNAPSHOT}{snapshot.date}",
            snapshot.model_dump(mode="json"),
            ttl=self._snapshot_ttl,
        )
        if not ok:
            raise StoreFault(f"Failed to save snapshot for {snapshot.date}")

    async def import_json(self, data: bytes | str) -> int:
        """Merge an exported log and persist the result.

        Returns:
            Number of entries added

        Raises:
            ValueError: If the payload is not a valid export
            StoreFault: If persistence failed
        """
        added = self.store.import_json(data)
        await self._save_entries()
        logger.info(f"Imported {added} history entries")
        return added

    async def clear(self) -> None:
        """Clear the log and all snapshots, in memory and in Redis."""
        self.store.clear()
        await cache.delete(cache.KEY_HISTORY)
        deleted = await cache.delete_pattern(f"{cache.KEY_PREFIX_SNAPSHOT}*")
        logger.info(f"Signal history cleared ({deleted} snapshots removed)")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def query(self, since_days: float = 30) -> list[HistoryEntry]:
        return self.store.query(since_days)

    def stats(self, since_days: float = 30) -> HistoryStats:
        return self.store.stats(since_days)

    def get_snapshot(self, date: str) -> DailySnapshot | None:
        return self.store.get_snapshot(date)

    def export_json(self) -> bytes:
        return self.store.export_json()
