"""Tests for planner wiring."""
from unittest.mock import MagicMock

import pytest

from freshroute.core.config import Settings
from freshroute.services.dispatch.factory import (
    build_planner,
    get_shared_collaborators,
    reset_shared_collaborators,
)
from freshroute.services.dispatch.planner import DispatchPlanner
from freshroute.services.dispatch.store import SqlAlchemyPlanningStore


@pytest.fixture(autouse=True)
def _reset_collaborators():
    reset_shared_collaborators()
    yield
    reset_shared_collaborators()


class TestBuildPlanner:

    def test_uses_sql_store_over_session(self):
        session = MagicMock()

        planner = build_planner(session, Settings(fleet_lock_backend="local"))

        assert isinstance(planner, DispatchPlanner)
        assert isinstance(planner.store, SqlAlchemyPlanningStore)
        assert planner.store.session is session

    def test_explicit_settings_are_applied(self):
        settings = Settings(
            fleet_lock_backend="local",
            openweather_api_key=None,
            allow_partial_fulfillment=True,
        )

        planner = build_planner(MagicMock(), settings)

        assert planner.settings is settings
        assert planner.weather.provider_name == "fixed"

    def test_default_planners_share_collaborators(self):
        first = build_planner(MagicMock())
        second = build_planner(MagicMock())

        assert first.weather is second.weather
        assert first.lock_factory is second.lock_factory
        assert first.store is not second.store

    def test_reset_rebuilds_collaborators(self):
        weather, _ = get_shared_collaborators()
        reset_shared_collaborators()

        assert get_shared_collaborators()[0] is not weather
