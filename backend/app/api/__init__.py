"""API endpoints."""

from app.api.routes import router, get_signal_service

__all__ = [
    "router",
    "get_signal_service",
]
