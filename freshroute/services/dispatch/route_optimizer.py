"""
Nearest-neighbor route construction with pickup/drop precedence.

A drop becomes eligible only once its order is onboard. At each step the
vehicle drives to the closest eligible stop; ties go to the earliest
candidate, pickups (in input order) before drops (in input order).
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence
from uuid import UUID

from freshroute.models.enums import StopType
from freshroute.services.dispatch.geodesy import Coordinate, distance_km

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteOrder:
    """An order's two endpoints as seen by the optimizer."""
    order_id: UUID
    pickup: Coordinate
    drop: Coordinate
    load_kg: int = 0


@dataclass(frozen=True)
class PlannedStop:
    """One stop of a planned manifest."""
    sequence: int
    stop_type: StopType
    location: Coordinate
    distance_from_last_km: float
    order_id: UUID
    load_kg: int = 0


@dataclass(frozen=True)
class _Candidate:
    stop_type: StopType
    order: RouteOrder

    @property
    def location(self) -> Coordinate:
        return self.order.pickup if self.stop_type == StopType.PICKUP else self.order.drop


def plan_route(start: Coordinate, orders: Sequence[RouteOrder]) -> list[PlannedStop]:
    """
    Sequence the pickups and drops of *orders* starting from *start*.

    Returns 2 stops per order with 1-based sequence numbers.
    """
    seen: set[UUID] = set()
    for order in orders:
        if order.order_id in seen:
            raise ValueError(f"Order {order.order_id} appears twice in one route")
        seen.add(order.order_id)

    candidates = [_Candidate(StopType.PICKUP, o) for o in orders]
    candidates += [_Candidate(StopType.DROP, o) for o in orders]

    onboard: set[UUID] = set()
    stops: list[PlannedStop] = []
    current = start

    while candidates:
        best_index: Optional[int] = None
        best_distance = 0.0

        for index, candidate in enumerate(candidates):
            if candidate.stop_type == StopType.DROP and candidate.order.order_id not in onboard:
                continue
            d = distance_km(current, candidate.location)
            if best_index is None or d < best_distance:
                best_index = index
                best_distance = d

        if best_index is None:
            # Unreachable with well-formed input; bail out instead of spinning
            logger.error(f"No eligible stop left with {len(candidates)} candidates remaining")
            break

        chosen = candidates.pop(best_index)
        if chosen.stop_type == StopType.PICKUP:
            onboard.add(chosen.order.order_id)
        else:
            onboard.discard(chosen.order.order_id)

        stops.append(
            PlannedStop(
                sequence=len(stops) + 1,
                stop_type=chosen.stop_type,
                location=chosen.location,
                distance_from_last_km=best_distance,
                order_id=chosen.order.order_id,
                load_kg=chosen.order.load_kg,
            )
        )
        current = chosen.location

    return stops


def total_distance_km(stops: Sequence[PlannedStop]) -> float:
    """Sum of leg distances, rounded to one decimal."""
    return round(sum(stop.distance_from_last_km for stop in stops), 1)
