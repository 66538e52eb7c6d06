"""Core scoring and signal logic.

This package contains pure business logic with no I/O dependencies
(no Redis, HTTP or filesystem access). The service layer (app/) feeds
it metric readings and persists what it decides.
"""
