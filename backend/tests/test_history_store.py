"""Tests for the in-memory history log and daily snapshots."""

from decimal import Decimal

import orjson
import pytest

from core.history import HistoryStore, parse_precision
from core.models import (
    DAY_MS,
    DailySnapshot,
    EngineConfig,
    HistoryEntry,
    SignalKind,
    StrategySignal,
    Strength,
)

NOW = 1_750_000_000_000


class FakeClock:
    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now


def entry(
    days_ago: float,
    kind=SignalKind.BUY,
    strength=Strength.STRONG,
    precision: str | None = "73%",
) -> HistoryEntry:
    signal = StrategySignal(
        kind=kind, strength=strength, action="act", reason="why", precision=precision
    )
    return HistoryEntry.from_signal(signal, btc_price=95000.0, timestamp=NOW - int(days_ago * DAY_MS))


def snapshot(date: str, days_ago: float, price: float = 95000.0) -> DailySnapshot:
    return DailySnapshot(
        date=date,
        price=price,
        sentiment=40,
        money_supply_growth=3.9,
        dollar_index_trend=-2.1,
        stablecoin_ratio=18.2,
        etf_flow_score=3,
        trading_score=Decimal("5.8"),
        macro_score=Decimal("5.3"),
        timestamp=NOW - int(days_ago * DAY_MS),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return HistoryStore(clock=clock)


class TestParsePrecision:
    @pytest.mark.parametrize(
        "text, expected",
        [("73%", 73), ("81", 81), (" 70% (2023)", 70), ("n/a", None), ("", None), (None, None)],
    )
    def test_parse(self, text, expected):
        assert parse_precision(text) == expected


class TestHistoryEntry:
    def test_from_signal_formats_date(self):
        e = HistoryEntry.from_signal(
            StrategySignal(kind=SignalKind.SELL, strength=Strength.STRONG, action="a", reason="r"),
            btc_price=100000.0,
            timestamp=0,
        )
        assert e.date == "1970-01-01T00:00:00.000Z"
        assert e.kind == SignalKind.SELL
        assert e.btc_price == 100000.0


class TestAppendAndPrune:
    def test_newest_first(self, store):
        store.append(entry(2))
        store.append(entry(1))
        assert [e.timestamp for e in store.entries] == [NOW - DAY_MS, NOW - 2 * DAY_MS]

    def test_append_prunes_old_entries(self, clock, store):
        store.append(entry(0))
        clock.now += 95 * DAY_MS
        store.append(entry(-95))
        assert len(store) == 1

    def test_daily_appends_stay_within_window(self, clock, store):
        signal = StrategySignal(kind=SignalKind.BUY, strength=Strength.STRONG, action="a", reason="r")
        for _ in range(95):
            store.append(HistoryEntry.from_signal(signal, btc_price=95000.0, timestamp=clock.now))
            clock.now += DAY_MS

        # Clock rests one day after the last append
        clock.now -= DAY_MS
        assert len(store) <= 90
        assert all(e.timestamp > clock.now - 90 * DAY_MS for e in store.entries)

    def test_cutoff_is_exclusive(self, store):
        store.append(entry(90))
        assert len(store) == 0
        store.append(entry(89.999))
        assert len(store) == 1

    def test_prune_is_idempotent(self, clock):
        store = HistoryStore(entries=[entry(100), entry(10), entry(91)], clock=clock)
        assert store.prune() == 2
        assert store.prune() == 0
        assert len(store) == 1

    def test_custom_retention(self, clock):
        store = HistoryStore(config=EngineConfig(history_retention_days=7), clock=clock)
        store.append(entry(8))
        store.append(entry(6))
        assert len(store) == 1

    def test_entries_returns_a_copy(self, store):
        store.append(entry(1))
        store.entries.clear()
        assert len(store) == 1


class TestQueryAndStats:
    def test_query_window(self, store):
        for days in (45, 20, 5, 1):
            store.append(entry(days))
        assert len(store.query(30)) == 3
        assert len(store.query(7)) == 2
        assert len(store.query(90)) == 4

    def test_stats(self, store):
        store.append(entry(10, SignalKind.BUY, Strength.VERY_STRONG, "78%"))
        store.append(entry(5, SignalKind.BUY, Strength.STRONG, "73%"))
        store.append(entry(2, SignalKind.SELL, Strength.STRONG, "76%"))
        store.append(entry(1, SignalKind.SELL, Strength.STRONG, None))

        stats = store.stats(30)
        assert stats.total == 4
        assert stats.by_kind == {"BUY": 2, "SELL": 2}
        assert stats.by_strength == {"VERY_STRONG": 1, "STRONG": 3}
        # (78 + 73 + 76) / 3 = 75.67
        assert stats.average_precision == 76
        assert sum(stats.by_kind.values()) == stats.total
        assert sum(stats.by_strength.values()) == stats.total

    def test_average_precision_rounds_half_up(self, store):
        store.append(entry(2, precision="73%"))
        store.append(entry(1, precision="76%"))
        assert store.stats().average_precision == 75

    def test_empty_stats(self, store):
        stats = store.stats()
        assert stats.total == 0
        assert stats.by_kind == {}
        assert stats.average_precision == 0

    def test_clear(self, store):
        store.append(entry(1))
        store.save_snapshot(snapshot("2025-06-15", 0))
        store.clear()
        assert len(store) == 0
        assert store.snapshots == []


class TestSnapshots:
    def test_overwrite_per_date(self, store):
        store.save_snapshot(snapshot("2025-06-15", 0.5, price=90000))
        store.save_snapshot(snapshot("2025-06-15", 0.1, price=91000))
        assert len(store.snapshots) == 1
        assert store.get_snapshot("2025-06-15").price == 91000

    def test_missing_date(self, store):
        assert store.get_snapshot("2020-01-01") is None

    def test_snapshots_follow_retention(self, clock, store):
        store.save_snapshot(snapshot("2025-03-01", 89))
        store.save_snapshot(snapshot("2025-06-15", 0))
        clock.now += 2 * DAY_MS
        store.prune()
        assert [s.date for s in store.snapshots] == ["2025-06-15"]

    def test_ordered_by_date(self, store):
        store.save_snapshot(snapshot("2025-06-15", 0))
        store.save_snapshot(snapshot("2025-06-10", 5))
        assert [s.date for s in store.snapshots] == ["2025-06-10", "2025-06-15"]


class TestExportImport:
    def test_round_trip(self, clock, store):
        store.append(entry(3, SignalKind.SELL, Strength.VERY_STRONG, "78%"))
        store.append(entry(1))
        exported = store.export_json()

        restored = HistoryStore(clock=clock)
        assert restored.import_json(exported) == 2
        assert restored.entries == store.entries

    def test_export_is_a_json_list(self, store):
        store.append(entry(1))
        data = orjson.loads(store.export_json())
        assert isinstance(data, list)
        assert data[0]["kind"] == "BUY"
        assert data[0]["btc_price"] == 95000.0

    def test_import_skips_duplicates(self, store):
        store.append(entry(1))
        exported = store.export_json()
        assert store.import_json(exported) == 0
        assert len(store) == 1

    def test_import_merges_and_sorts(self, clock, store):
        store.append(entry(1))
        other = HistoryStore(entries=[entry(5), entry(0.5)], clock=clock)
        assert store.import_json(other.export_json()) == 2
        timestamps = [e.timestamp for e in store.entries]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_import_prunes_expired(self, clock, store):
        other = HistoryStore(entries=[entry(5)], clock=clock)
        data = other.export_json()
        clock.now += 100 * DAY_MS
        store.import_json(data)
        assert len(store) == 0

    @pytest.mark.parametrize("payload", [b"{}", b"not json", b'[{"kind": "BUY"}]'])
    def test_invalid_payload(self, store, payload):
        with pytest.raises(ValueError):
            store.import_json(payload)
