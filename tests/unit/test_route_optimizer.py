"""
Tests for nearest-neighbor pickup/drop sequencing.
"""
import random
from uuid import uuid4

import pytest

from freshroute.models.enums import StopType
from freshroute.services.dispatch.geodesy import Coordinate, distance_km
from freshroute.services.dispatch.route_optimizer import (
    RouteOrder,
    plan_route,
    total_distance_km,
)


def _order(pickup, drop, load_kg=100):
    return RouteOrder(
        order_id=uuid4(),
        pickup=Coordinate(*pickup),
        drop=Coordinate(*drop),
        load_kg=load_kg,
    )


class TestPlanRoute:

    def test_interleaves_nearby_order(self):
        a = _order((0, 0), (0, 10))
        b = _order((0, 1), (0, 2))

        stops = plan_route(Coordinate(0, 0), [a, b])

        assert [(s.stop_type, s.order_id) for s in stops] == [
            (StopType.PICKUP, a.order_id),
            (StopType.PICKUP, b.order_id),
            (StopType.DROP, b.order_id),
            (StopType.DROP, a.order_id),
        ]
        assert [s.sequence for s in stops] == [1, 2, 3, 4]
        assert stops[0].distance_from_last_km == 0.0

    def test_single_order(self):
        o = _order((7.8731, 80.7718), (6.9271, 79.8612), load_kg=750)
        start = Coordinate(7.2906, 80.6337)

        stops = plan_route(start, [o])

        assert [s.stop_type for s in stops] == [StopType.PICKUP, StopType.DROP]
        assert stops[0].distance_from_last_km == distance_km(start, o.pickup)
        assert stops[1].distance_from_last_km == distance_km(o.pickup, o.drop)
        assert all(s.load_kg == 750 for s in stops)

    def test_empty(self):
        assert plan_route(Coordinate(0, 0), []) == []

    def test_drop_waits_for_pickup(self):
        # The drop is right at the start, but the pickup is far away
        o = _order((0, 5), (0, 0))
        stops = plan_route(Coordinate(0, 0), [o])
        assert stops[0].stop_type == StopType.PICKUP
        assert stops[0].distance_from_last_km == distance_km(Coordinate(0, 0), Coordinate(0, 5))

    def test_ties_go_to_earliest_candidate(self):
        a = _order((0, 1), (0, 3))
        b = _order((0, -1), (0, -3))
        stops = plan_route(Coordinate(0, 0), [a, b])
        assert stops[0].order_id == a.order_id

    def test_pickups_beat_drops_on_tie(self):
        # After picking up a at (0,1), b's pickup and a's drop are equidistant
        a = _order((0, 1), (0, 2))
        b = _order((0, 2), (0, 5))
        stops = plan_route(Coordinate(0, 0), [a, b])
        assert [(s.stop_type, s.order_id) for s in stops[:2]] == [
            (StopType.PICKUP, a.order_id),
            (StopType.PICKUP, b.order_id),
        ]

    def test_duplicate_order_raises(self):
        o = _order((0, 0), (0, 1))
        with pytest.raises(ValueError):
            plan_route(Coordinate(0, 0), [o, o])

    def test_invariants_on_random_orders(self):
        rng = random.Random(1234)
        for _ in range(100):
            orders = [
                _order(
                    (rng.uniform(5.9, 9.8), rng.uniform(79.6, 81.9)),
                    (rng.uniform(5.9, 9.8), rng.uniform(79.6, 81.9)),
                )
                for _ in range(rng.randint(1, 7))
            ]
            start = Coordinate(rng.uniform(5.9, 9.8), rng.uniform(79.6, 81.9))

            stops = plan_route(start, orders)

            assert len(stops) == 2 * len(orders)
            assert [s.sequence for s in stops] == list(range(1, len(stops) + 1))

            position = {(s.stop_type, s.order_id): s.sequence for s in stops}
            for o in orders:
                assert position[(StopType.PICKUP, o.order_id)] < position[(StopType.DROP, o.order_id)]

            recomputed = 0.0
            current = start
            for s in stops:
                recomputed += distance_km(current, s.location)
                current = s.location
            assert sum(s.distance_from_last_km for s in stops) == pytest.approx(recomputed)


class TestTotalDistance:

    def test_sum_of_legs(self):
        a = _order((0, 0), (0, 1))
        stops = plan_route(Coordinate(0, 0), [a])
        assert total_distance_km(stops) == 111.2

    def test_empty(self):
        assert total_distance_km([]) == 0.0
