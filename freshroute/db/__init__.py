"""
Database module for FreshRoute Dispatch.
"""
from freshroute.db.database import (
    Base,
    engine,
    async_session_maker,
    sync_engine,
    sync_session_maker,
    get_async_session,
    get_sync_session,
    planning_session,
)

__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "sync_engine",
    "sync_session_maker",
    "get_async_session",
    "get_sync_session",
    "planning_session",
]
