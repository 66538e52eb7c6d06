"""Business logic services."""

from app.services.metric_sources import (
    HttpJsonSource,
    MetricSource,
    ResilientSource,
    StaticSource,
    build_sources,
)
from app.services.notifier import DispatchResult, NotifyRequest, WebhookNotifier
from app.services.scheduler import Cadence, RefreshScheduler, default_cadences
from app.services.signal_service import SignalService

__all__ = [
    "HttpJsonSource",
    "MetricSource",
    "ResilientSource",
    "StaticSource",
    "build_sources",
    "DispatchResult",
    "NotifyRequest",
    "WebhookNotifier",
    "Cadence",
    "RefreshScheduler",
    "default_cadences",
    "SignalService",
]
