"""REST API routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import BaseModel

from app.services import SignalService
from app.storage import cache
from core.errors import StoreFault
from core.models import (
    METRIC_FIELDS,
    CycleResult,
    DailySnapshot,
    HistoryEntry,
    HistoryStats,
    NotificationRecord,
)
from core.strategy import default_strategies

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "0.1.0"


# Response models
class StrategyInfo(BaseModel):
    name: str
    title: str
    precision: str


class SystemStatus(BaseModel):
    """System status response."""

    status: str
    version: str
    cycle_running: bool
    cycle_count: int
    last_run_at: Optional[int] = None
    last_error: Optional[str] = None
    has_result: bool
    history_entries: int
    persistence: bool
    notifier_configured: bool
    last_notification: Optional[NotificationRecord] = None
    strategies: list[StrategyInfo] = []


class RefreshResponse(BaseModel):
    """Outcome of a manual refresh."""

    status: str  # "completed" or "coalesced"
    result: Optional[CycleResult] = None


class ImportResponse(BaseModel):
    added: int
    total: int


def _retryable_error(field: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={
            "error": message,
            "field": field,
            "retry": "/api/refresh",
        },
    )


# Dependency for the signal service (set on app.state at startup)
def get_signal_service(request: Request) -> SignalService:
    service = getattr(request.app.state, "signal_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Signal service not started")
    return service


@router.get("/status", response_model=SystemStatus)
async def get_status(service: SignalService = Depends(get_signal_service)):
    """Get system status."""
    return SystemStatus(
        status="degraded" if service.last_error else "running",
        version=VERSION,
        cycle_running=service.is_running,
        cycle_count=service.cycle_count,
        last_run_at=service.last_run_at,
        last_error=str(service.last_error) if service.last_error else None,
        has_result=service.latest is not None,
        history_entries=len(service.history.store),
        persistence=cache.is_cache_available(),
        notifier_configured=service.notifier.is_configured,
        last_notification=service.gate.last,
        strategies=[
            StrategyInfo(name=s.name, title=s.title, precision=s.precision)
            for s in default_strategies()
        ],
    )


@router.get("/cycle", response_model=CycleResult)
async def get_cycle(service: SignalService = Depends(get_signal_service)):
    """Get the latest cycle result.

    Serves the previous result while the most recent cycle was rejected;
    without any result the rejection is reported as a retryable error.
    """
    if service.latest is not None:
        return service.latest

    if service.last_error is not None:
        raise _retryable_error(service.last_error.field, service.last_error.message)

    raise _retryable_error("", "No cycle has completed yet")


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(service: SignalService = Depends(get_signal_service)):
    """Re-fetch every metric and run a cycle now."""
    if service.is_running:
        return RefreshResponse(status="coalesced")

    result = await service.run_cycle(force=METRIC_FIELDS)
    if result is None:
        if service.last_error is not None:
            raise _retryable_error(service.last_error.field, service.last_error.message)
        return RefreshResponse(status="coalesced")

    return RefreshResponse(status="completed", result=result)


@router.get("/history", response_model=list[HistoryEntry])
async def get_history(
    days: float = Query(30, gt=0, le=3650, description="Look-back window in days"),
    service: SignalService = Depends(get_signal_service),
):
    """Get notified signals from the last `days` days, newest first."""
    return service.history.query(days)


@router.get("/history/stats", response_model=HistoryStats)
async def get_history_stats(
    days: float = Query(30, gt=0, le=3650, description="Look-back window in days"),
    service: SignalService = Depends(get_signal_service),
):
    """Get counts by kind and strength plus average precision."""
    return service.history.stats(days)


@router.get("/history/export")
async def export_history(service: SignalService = Depends(get_signal_service)):
    """Download the whole history log as JSON."""
    return Response(
        content=service.history.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="signal-history.json"'},
    )


@router.post("/history/import", response_model=ImportResponse)
async def import_history(
    request: Request,
    service: SignalService = Depends(get_signal_service),
):
    """Merge a previously exported history log."""
    body = await request.body()
    try:
        added = await service.history.import_json(body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid history export: {e}")
    except StoreFault as e:
        raise HTTPException(status_code=503, detail=str(e))

    return ImportResponse(added=added, total=len(service.history.store))


@router.delete("/history")
async def clear_history(service: SignalService = Depends(get_signal_service)):
    """Delete the history log and all snapshots."""
    await service.history.clear()
    return {"status": "cleared"}


@router.get("/snapshots/{date}", response_model=DailySnapshot)
async def get_snapshot(date: str, service: SignalService = Depends(get_signal_service)):
    """Get the metrics and scores recorded for a day (YYYY-MM-DD)."""
    snapshot = service.history.get_snapshot(date)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Snapshot not found")
    return snapshot


@router.delete("/notifications/last")
async def reset_last_notification(service: SignalService = Depends(get_signal_service)):
    """Forget the last notified signal (the next strong primary is sent)."""
    cleared = await service.reset_notification()
    return {"status": "reset", "persisted": cleared}
