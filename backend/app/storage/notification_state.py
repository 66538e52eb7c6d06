"""Last notified signal, persisted in Redis.

Data structure:
- notify:last -> JSON {signal: {...}, sent_at: epoch_ms}
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from app.storage import cache
from core.errors import StoreFault
from core.models import NotificationRecord

logger = logging.getLogger(__name__)


async def load_last_notification() -> NotificationRecord | None:
    """Load the last notified signal.

    Returns:
        NotificationRecord or None if nothing was sent yet

    Raises:
        StoreFault: If the cache is unavailable
    """
    if not cache.is_cache_available():
        raise StoreFault("Redis unavailable, cannot load last notification")

    data = await cache.get_json(cache.KEY_LAST_NOTIFICATION)
    if data is None:
        return None

    try:
        return NotificationRecord.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Discarding malformed last notification record: {e}")
        return None


async def save_last_notification(record: NotificationRecord) -> None:
    """Persist the last notified signal.

    Raises:
        StoreFault: If the write failed
    """
    if not cache.is_cache_available():
        raise StoreFault("Redis unavailable, last notification not saved")

    ok = await cache.set_json(
        cache.KEY_LAST_NOTIFICATION, record.model_dump(mode="json")
    )
    if not ok:
        raise StoreFault("Failed to save last notification")


async def clear_last_notification() -> bool:
    """Forget the last notified signal.

    Returns:
        True if cleared successfully
    """
    if not cache.is_cache_available():
        return False

    return await cache.delete(cache.KEY_LAST_NOTIFICATION)
