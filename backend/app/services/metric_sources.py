"""Metric sources: where each reading of a cycle comes from.

Sources are provider-agnostic. A generic HTTP JSON source covers any
endpoint that exposes the value at a fixed path; metrics without an
endpoint use the manual estimates from metrics.yaml.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Protocol, runtime_checkable

import httpx

from app.metrics_config import MetricsConfig, SourceEntry
from core.models import METRIC_FIELDS, Metric

logger = logging.getLogger(__name__)

MANUAL_SOURCE = "manual"
FALLBACK_SOURCE = "fallback"

# Failures a fetch may end with; anything else is a programming error
FETCH_ERRORS = (
    asyncio.TimeoutError,
    httpx.HTTPError,
    ValueError,
)


@runtime_checkable
class MetricSource(Protocol):
    """Anything that can produce one reading on demand."""

    @property
    def name(self) -> str:
        """Metric name this source produces (one of METRIC_FIELDS)."""
        ...

    async def fetch(self) -> Metric:
        """Fetch a fresh reading.

        Raises:
            httpx.HTTPError, ValueError: If no valid reading could be produced
        """
        ...


def extract_path(body: Any, path: str) -> float:
    """Follow a dotted path ("data.0.value") into a decoded JSON body.

    Raises:
        ValueError: If the path does not exist or the value is not numeric
    """
    node = body
    for part in path.split("."):
        if isinstance(node, list):
            try:
                node = node[int(part)]
            except (ValueError, IndexError):
                raise ValueError(f"path {path!r}: no list item {part!r}") from None
        elif isinstance(node, dict):
            if part not in node:
                raise ValueError(f"path {path!r}: missing key {part!r}")
            node = node[part]
        else:
            raise ValueError(f"path {path!r}: cannot descend into {type(node).__name__}")

    if isinstance(node, bool):
        raise ValueError(f"path {path!r}: boolean is not a reading")
    try:
        return float(node)
    except (TypeError, ValueError):
        raise ValueError(f"path {path!r}: non-numeric value {node!r}") from None


class StaticSource:
    """Manually entered value, always flagged as an estimate."""

    def __init__(self, name: str, value: float):
        self._name = name
        self.value = value

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self) -> Metric:
        return Metric(value=self.value, is_estimate=True, source=MANUAL_SOURCE)


class HttpJsonSource:
    """Generic HTTP GET returning JSON with the reading at a dotted path."""

    def __init__(self, name: str, entry: SourceEntry, timeout: float = 30.0):
        self._name = name
        self.entry = entry
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return self._name

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch(self) -> Metric:
        client = await self._get_client()
        # An empty params dict would drop a query string embedded in the url
        response = await client.get(self.entry.url, params=self.entry.query_params() or None)
        response.raise_for_status()

        value = extract_path(response.json(), self.entry.path) * self.entry.scale
        return Metric(value=value, source=self.entry.url)


class ResilientSource:
    """Wraps a source with a timeout, a refresh cache and substitutions.

    A reading younger than `refresh_seconds` is served from cache. When a
    fetch fails or times out, the last good reading is served again,
    flagged as an estimate; without one the configured fallback constant
    is used. With neither, fetch() returns None and the cycle is rejected.
    """

    def __init__(
        self,
        source: MetricSource,
        timeout: float,
        refresh_seconds: float,
        fallback: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.timeout = timeout
        self.refresh_seconds = refresh_seconds
        self.fallback = fallback
        self._clock = clock
        self._last: Metric | None = None
        self._fetched_at: float | None = None

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def last(self) -> Metric | None:
        return self._last

    def is_fresh(self) -> bool:
        if self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self.refresh_seconds

    def invalidate(self) -> None:
        """Force the next fetch() to hit the wrapped source."""
        self._fetched_at = None

    async def fetch(self, force: bool = False) -> Metric | None:
        if not force and self.is_fresh():
            return self._last

        try:
            metric = await asyncio.wait_for(self.source.fetch(), timeout=self.timeout)
        except FETCH_ERRORS as e:
            return self._substitute(e)

        self._last = metric
        self._fetched_at = self._clock()
        return metric

    def _substitute(self, error: Exception) -> Metric | None:
        reason = str(error) or type(error).__name__
        if self._last is not None:
            logger.warning(f"{self.name}: fetch failed ({reason}), using last known value")
            return self._last.as_estimate()

        if self.fallback is not None:
            logger.warning(f"{self.name}: fetch failed ({reason}), using fallback {self.fallback}")
            return Metric(value=self.fallback, is_estimate=True, source=FALLBACK_SOURCE)

        logger.warning(f"{self.name}: fetch failed ({reason}), no substitute available")
        return None

    async def close(self) -> None:
        close = getattr(self.source, "close", None)
        if close is not None:
            await close()


def build_sources(
    config: MetricsConfig,
    fetch_timeout: float,
    price_seconds: float,
    sentiment_seconds: float,
    slow_seconds: float,
) -> dict[str, ResilientSource]:
    """Build one resilient source per configured metric.

    Metrics with an HTTP source fall back to their manual value; metrics
    with only a manual value use it directly. Metrics with neither are
    left out and reported as missing at evaluation time.
    """
    sources: dict[str, ResilientSource] = {}

    for name in METRIC_FIELDS:
        entry = config.sources.get(name)
        fallback = config.fallback_for(name)

        if entry is not None:
            inner: MetricSource = HttpJsonSource(name, entry, timeout=fetch_timeout)
        elif fallback is not None:
            inner = StaticSource(name, fallback)
        else:
            logger.warning(f"No source or fallback configured for {name}")
            continue

        sources[name] = ResilientSource(
            inner,
            timeout=fetch_timeout,
            refresh_seconds=config.refresh_seconds_for(
                name, price_seconds, sentiment_seconds, slow_seconds
            ),
            fallback=fallback,
        )

    return sources
