"""
Wiring for DispatchPlanner in the API and Celery workers.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from freshroute.core.config import Settings, get_settings
from freshroute.services.dispatch.geocoding import HubGeocoder
from freshroute.services.dispatch.locking import FleetLockFactory, get_fleet_lock_factory
from freshroute.services.dispatch.planner import DispatchPlanner
from freshroute.services.dispatch.store import SqlAlchemyPlanningStore
from freshroute.services.dispatch.weather import WeatherProvider, get_weather_provider

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Process-wide collaborators (cached)
# ---------------------------------------------------------------------------

_cached_weather: Optional[WeatherProvider] = None
_cached_lock_factory: Optional[FleetLockFactory] = None


def get_shared_collaborators() -> tuple[WeatherProvider, FleetLockFactory]:
    """Return the weather provider and fleet lock shared by every planner.

    Built once per process from the current settings, so HTTP and Redis
    connection pools are reused across requests and tasks.
    """
    global _cached_weather, _cached_lock_factory
    if _cached_weather is None or _cached_lock_factory is None:
        settings = get_settings()
        _cached_weather = get_weather_provider(settings)
        _cached_lock_factory = get_fleet_lock_factory(settings)
        logger.info(
            f"Planner collaborators: weather={_cached_weather.provider_name}, "
            f"fleet lock={settings.fleet_lock_backend}"
        )
    return _cached_weather, _cached_lock_factory


def reset_shared_collaborators() -> None:
    """Clear the cached collaborators (for testing)."""
    global _cached_weather, _cached_lock_factory
    _cached_weather = None
    _cached_lock_factory = None


def build_planner(session: Session, settings: Optional[Settings] = None) -> DispatchPlanner:
    """Planner over a SQL store bound to *session*.

    Without explicit *settings* the process-wide collaborators are used;
    with them, fresh ones are built from those settings.
    """
    if settings is None:
        settings = get_settings()
        weather, lock_factory = get_shared_collaborators()
    else:
        weather = get_weather_provider(settings)
        lock_factory = get_fleet_lock_factory(settings)

    return DispatchPlanner(
        store=SqlAlchemyPlanningStore(session),
        weather=weather,
        geocoder=HubGeocoder(),
        settings=settings,
        lock_factory=lock_factory,
    )
