"""
Per-date fleet locks.

A planning pass reads the free fleet and then books vehicles. Two passes
for the same date must not interleave there, or both could book the same
truck. The local backend only guards threads of one process; the Redis
backend guards the API and every Celery worker.
"""
import logging
import threading
from contextlib import contextmanager
from datetime import date
from typing import Callable, ContextManager, Iterator, Optional

import redis

from freshroute.core.config import Settings, get_settings
from freshroute.services.dispatch.exceptions import CollaboratorError

logger = logging.getLogger(__name__)

FleetLockFactory = Callable[[date], ContextManager[None]]

_registry_guard = threading.Lock()
# plan_date -> (lock, passes using it); an entry goes once no pass needs it
_local_locks: dict[date, tuple[threading.Lock, int]] = {}


@contextmanager
def _local_lock_for(plan_date: date) -> Iterator[threading.Lock]:
    with _registry_guard:
        lock, users = _local_locks.get(plan_date, (None, 0))
        if lock is None:
            lock = threading.Lock()
        _local_locks[plan_date] = (lock, users + 1)
    try:
        yield lock
    finally:
        with _registry_guard:
            lock, users = _local_locks[plan_date]
            if users == 1:
                del _local_locks[plan_date]
            else:
                _local_locks[plan_date] = (lock, users - 1)


def local_fleet_lock(wait_seconds: float = 60.0) -> FleetLockFactory:
    """Lock factory backed by a process-local lock per date."""

    @contextmanager
    def acquire(plan_date: date) -> Iterator[None]:
        with _local_lock_for(plan_date) as lock:
            if not lock.acquire(timeout=wait_seconds):
                raise CollaboratorError(f"Timed out waiting for fleet lock on {plan_date}")
            try:
                yield
            finally:
                lock.release()

    return acquire


def redis_fleet_lock(
    client: redis.Redis,
    timeout_seconds: int = 900,
    wait_seconds: float = 60.0,
) -> FleetLockFactory:
    """Lock factory backed by a redis-py Lock per date."""

    @contextmanager
    def acquire(plan_date: date) -> Iterator[None]:
        lock = client.lock(
            f"freshroute:fleet:{plan_date.isoformat()}",
            timeout=timeout_seconds,
            blocking_timeout=wait_seconds,
        )
        try:
            acquired = lock.acquire()
        except redis.RedisError as e:
            raise CollaboratorError(f"Fleet lock unavailable: {e}") from e
        if not acquired:
            raise CollaboratorError(f"Timed out waiting for fleet lock on {plan_date}")
        try:
            yield
        finally:
            try:
                lock.release()
            except redis.exceptions.LockError:
                # Expired while held; the pass is already done
                logger.warning(f"Fleet lock for {plan_date} expired before release")

    return acquire


def get_fleet_lock_factory(settings: Optional[Settings] = None) -> FleetLockFactory:
    """Build the lock factory selected by settings.fleet_lock_backend."""
    settings = settings or get_settings()

    if settings.fleet_lock_backend == "redis":
        client = redis.Redis.from_url(settings.redis_url)
        return redis_fleet_lock(
            client,
            timeout_seconds=settings.fleet_lock_timeout_seconds,
            wait_seconds=settings.fleet_lock_wait_seconds,
        )

    return local_fleet_lock(wait_seconds=settings.fleet_lock_wait_seconds)
