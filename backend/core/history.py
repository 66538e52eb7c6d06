"""In-memory history log of notified signals and daily snapshots.

The store is time-bounded: every write prunes entries that fall outside
the retention window, so it never grows without bound. Persistence is
handled elsewhere (app.storage.history_repo); this module only holds
the bookkeeping rules.
"""

from __future__ import annotations

import logging
import re
import time
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable

import orjson

from core.models.config import DAY_MS, EngineConfig
from core.models.history import DailySnapshot, HistoryEntry, HistoryStats

logger = logging.getLogger(__name__)

Clock = Callable[[], int]

_PRECISION_RE = re.compile(r"^\s*([+-]?\d+)")


def epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def parse_precision(precision: str | None) -> int | None:
    """Leading integer of a precision label ("73%" -> 73), None if absent."""
    if not precision:
        return None
    match = _PRECISION_RE.match(precision)
    if match is None:
        return None
    return int(match.group(1))


class HistoryStore:
    """Append-only, retention-bounded signal log plus day-keyed snapshots.

    Entries are kept newest first. Snapshots are keyed by ISO date and a
    later write for the same date replaces the earlier one.
    """

    def __init__(
        self,
        entries: Iterable[HistoryEntry] = (),
        snapshots: Iterable[DailySnapshot] = (),
        config: EngineConfig | None = None,
        clock: Clock = epoch_ms,
    ):
        self._config = config or EngineConfig()
        self._clock = clock
        self._entries: list[HistoryEntry] = sorted(
            entries, key=lambda e: e.timestamp, reverse=True
        )
        self._snapshots: dict[str, DailySnapshot] = {s.date: s for s in snapshots}

    # ------------------------------------------------------------------
    # Signal log
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, entry: HistoryEntry) -> None:
        """Prepend a new entry, then prune old ones."""
        self._entries.insert(0, entry)
        self.prune()

    def prune(self) -> int:
        """Drop entries and snapshots outside the retention window.

        Returns:
            Number of entries removed.
        """
        cutoff = self._clock() - self._config.retention_ms
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.timestamp > cutoff]
        self._snapshots = {
            date: snap for date, snap in self._snapshots.items()
            if snap.timestamp > cutoff
        }
        removed = before - len(self._entries)
        if removed:
            logger.debug("Pruned %d history entries older than %d", removed, cutoff)
        return removed

    def query(self, since_days: float = 30) -> list[HistoryEntry]:
        """Entries newer than `since_days` ago, newest first."""
        cutoff = self._clock() - int(since_days * DAY_MS)
        return [e for e in self._entries if e.timestamp > cutoff]

    def stats(self, since_days: float = 30) -> HistoryStats:
        """Counts by kind and strength plus average precision over a window."""
        recent = self.query(since_days)
        if not recent:
            return HistoryStats()

        by_kind = Counter(e.kind.value for e in recent)
        by_strength = Counter(e.strength.value for e in recent)
        precisions = [
            p for p in (parse_precision(e.precision) for e in recent) if p is not None
        ]

        average = 0
        if precisions:
            mean = Decimal(sum(precisions)) / len(precisions)
            average = int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

        return HistoryStats(
            total=len(recent),
            by_kind=dict(by_kind),
            by_strength=dict(by_strength),
            average_precision=average,
        )

    def clear(self) -> None:
        """Forget every entry and snapshot."""
        self._entries.clear()
        self._snapshots.clear()

    # ------------------------------------------------------------------
    # Daily snapshots
    # ------------------------------------------------------------------

    def save_snapshot(self, snapshot: DailySnapshot) -> None:
        """Store the snapshot for its date, replacing any earlier one."""
        self._snapshots[snapshot.date] = snapshot
        self.prune()

    def get_snapshot(self, date: str) -> DailySnapshot | None:
        return self._snapshots.get(date)

    @property
    def snapshots(self) -> list[DailySnapshot]:
        """All snapshots ordered by date."""
        return [self._snapshots[d] for d in sorted(self._snapshots)]

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_json(self) -> bytes:
        """Serialize the signal log (newest first) as indented JSON."""
        return orjson.dumps(
            [e.model_dump(mode="json") for e in self._entries],
            option=orjson.OPT_INDENT_2,
        )

    @staticmethod
    def parse_export(data: bytes | str) -> list[HistoryEntry]:
        """Parse an exported log back into entries."""
        raw = orjson.loads(data)
        if not isinstance(raw, list):
            raise ValueError("History export must be a JSON list")
        return [HistoryEntry.model_validate(item) for item in raw]

    def import_json(self, data: bytes | str) -> int:
        """Merge an exported log into the store.

        Entries already present (same timestamp and kind) are skipped.

        Returns:
            Number of entries added.
        """
        incoming = self.parse_export(data)
        known = {(e.timestamp, e.kind) for e in self._entries}
        added = []
        for entry in incoming:
            key = (entry.timestamp, entry.kind)
            if key not in known:
                known.add(key)
                added.append(entry)

        self._entries = sorted(
            self._entries + added, key=lambda e: e.timestamp, reverse=True
        )
        self.prune()
        return len(added)
