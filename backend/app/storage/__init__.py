"""Data storage layer."""

from app.storage import cache
from app.storage import notification_state
from app.storage.history_repo import HistoryRepository

__all__ = [
    "cache",
    "notification_state",
    "HistoryRepository",
]
