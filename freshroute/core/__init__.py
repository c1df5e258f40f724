"""
Core package for FreshRoute Dispatch.
"""
from freshroute.core.config import settings, get_settings
from freshroute.core.celery_app import celery_app

__all__ = ["settings", "get_settings", "celery_app"]
