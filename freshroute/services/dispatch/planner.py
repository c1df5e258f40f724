"""
Dispatch planning orchestrators.

DispatchPlanner runs two kinds of planning pass against a PlanningStore:

- plan_daily_batch: every pending order for a date, grouped by product
  variant; each group is allocated from one shared fleet pool.
- plan_single_order: one order, assigned immediately from the live fleet.

Pipeline per order:
    resolve coordinates → weather at pickup → risk rules → required class

Pipeline per group:
    strictest class → allocate(total) → pack orders into vehicles
    → route each vehicle → save job, book vehicle, update orders, commit
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional
from uuid import UUID

from freshroute.core.config import Settings, get_settings
from freshroute.models.enums import OrderStatus
from freshroute.services.dispatch.allocator import (
    Assignment,
    FleetPool,
    allocate,
)
from freshroute.services.dispatch.exceptions import (
    InsufficientCapacityError,
    UnknownVariantError,
    WeatherUnavailableError,
)
from freshroute.services.dispatch.geocoding import HubGeocoder
from freshroute.services.dispatch.geodesy import Coordinate, distance_km
from freshroute.services.dispatch.locking import FleetLockFactory, local_fleet_lock
from freshroute.services.dispatch.risk import (
    ClassRequirement,
    ProductSpecData,
    WeatherSnapshot,
    required_vehicle_class,
    strictest,
)
from freshroute.services.dispatch.route_optimizer import RouteOrder, plan_route
from freshroute.services.dispatch.store import OrderRecord, PlannedJob, PlanningStore
from freshroute.services.dispatch.weather import WeatherProvider, default_snapshot

logger = logging.getLogger(__name__)


class PlanningError(str, Enum):
    """Why an order was not (fully) assigned."""
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_NOT_PENDING = "ORDER_NOT_PENDING"
    UNKNOWN_VARIANT = "UNKNOWN_VARIANT"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"


@dataclass
class UnallocatedOrder:
    """An order a batch pass could not fully place."""
    order_id: UUID
    reason: PlanningError
    shortage_kg: int = 0
    detail: str = ""


@dataclass
class BatchPlanResult:
    """Outcome of plan_daily_batch."""
    plan_date: date
    jobs: list[PlannedJob] = field(default_factory=list)
    unallocated: list[UnallocatedOrder] = field(default_factory=list)
    log: list[str] = field(default_factory=list)


@dataclass
class SingleOrderResult:
    """Outcome of plan_single_order."""
    order_id: UUID
    jobs: list[PlannedJob] = field(default_factory=list)
    error: Optional[PlanningError] = None
    shortage_kg: int = 0
    log: list[str] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def job(self) -> Optional[PlannedJob]:
        """First job created for the order."""
        return self.jobs[0] if self.jobs else None


@dataclass
class _EvaluatedOrder:
    record: OrderRecord
    pickup: Coordinate
    drop: Coordinate
    distance_km: float
    weather: WeatherSnapshot
    requirement: ClassRequirement


class DispatchPlanner:
    """
    Runs planning passes.

    Each pass reads the fleet once and books vehicles under a per-date
    fleet lock. Jobs are committed one at a time in batch mode, so a
    failure part way through keeps the jobs already committed.
    """

    def __init__(
        self,
        store: PlanningStore,
        weather: WeatherProvider,
        geocoder: Optional[HubGeocoder] = None,
        settings: Optional[Settings] = None,
        lock_factory: Optional[FleetLockFactory] = None,
    ):
        self.store = store
        self.weather = weather
        self.geocoder = geocoder or HubGeocoder()
        self.settings = settings or get_settings()
        self.lock_factory = lock_factory or local_fleet_lock(
            wait_seconds=self.settings.fleet_lock_wait_seconds
        )
        self.hub = Coordinate(
            float(self.settings.default_hub_latitude),
            float(self.settings.default_hub_longitude),
        )

    # =========================================================================
    # Daily batch
    # =========================================================================

    def plan_daily_batch(self, plan_date: date) -> BatchPlanResult:
        """Plan every pending order picked up on *plan_date*."""
        result = BatchPlanResult(plan_date=plan_date)
        log = result.log

        orders = self.store.get_pending_orders(plan_date)
        if not orders:
            self._note(log, f"No pending orders for {plan_date}")
            return result

        self._note(log, f"Planning {len(orders)} pending orders for {plan_date}")

        specs: dict[str, Optional[ProductSpecData]] = {}
        for order in orders:
            if order.product_variant not in specs:
                try:
                    specs[order.product_variant] = self._require_spec(order.product_variant)
                except UnknownVariantError:
                    specs[order.product_variant] = None

        weather_cache: dict[tuple[date, Coordinate], WeatherSnapshot] = {}
        groups: dict[str, list[_EvaluatedOrder]] = {}

        for order in orders:
            spec = specs[order.product_variant]
            if spec is None:
                self._note(log, f"Order {order.order_number}: unknown variant '{order.product_variant}'")
                result.unallocated.append(
                    UnallocatedOrder(
                        order_id=order.order_id,
                        reason=PlanningError.UNKNOWN_VARIANT,
                        detail=f"No product spec for '{order.product_variant}'",
                    )
                )
                continue
            if order.quantity_kg <= 0:
                self._note(log, f"Order {order.order_number}: invalid quantity {order.quantity_kg}")
                result.unallocated.append(
                    UnallocatedOrder(
                        order_id=order.order_id,
                        reason=PlanningError.INVALID_QUANTITY,
                        detail=f"Quantity {order.quantity_kg} kg",
                    )
                )
                continue

            evaluated = self._evaluate(order, spec, plan_date, weather_cache, log)
            groups.setdefault(order.product_variant, []).append(evaluated)

        if not groups:
            return result

        with self.lock_factory(plan_date):
            # Orders planned by another pass since the first read drop out here
            still_pending = {o.order_id for o in self.store.get_pending_orders(plan_date)}
            pool = FleetPool(self.store.get_available_fleet(plan_date))
            self._note(log, f"{len(pool)} vehicles available on {plan_date}")

            for variant, members in groups.items():
                current = []
                for m in members:
                    if m.record.order_id in still_pending:
                        current.append(m)
                    else:
                        self._note(log, f"Order {m.record.order_number}: no longer pending, skipped")
                if current:
                    self._plan_group(plan_date, variant, current, pool, result)

        self._note(
            log,
            f"Batch for {plan_date} done: {len(result.jobs)} jobs, "
            f"{len(result.unallocated)} orders not fully placed",
        )
        return result

    def _plan_group(
        self,
        plan_date: date,
        variant: str,
        members: list[_EvaluatedOrder],
        pool: FleetPool,
        result: BatchPlanResult,
    ) -> None:
        log = result.log
        requirement = strictest(m.requirement for m in members)
        total_kg = sum(m.record.quantity_kg for m in members)

        escalated = [
            m for m in members
            if m.requirement.vehicle_class != requirement.vehicle_class
        ]
        if escalated:
            self._note(
                log,
                f"Group {variant}: {len(escalated)} orders escalated to "
                f"{requirement.vehicle_class.value} ({requirement.reason})",
            )

        allocation = allocate(requirement.vehicle_class, pool, total_kg, requirement.reason)
        self._note(
            log,
            f"Group {variant}: {total_kg} kg needs {requirement.vehicle_class.value}, "
            f"{len(allocation.assignments)} vehicles, shortage {allocation.shortage_kg} kg",
        )

        placed, short = self._pack_orders(
            members, allocation.assignments, self.settings.allow_partial_fulfillment
        )

        statuses: dict[UUID, OrderStatus] = {}
        for m in members:
            got = placed[m.record.order_id]
            if got >= m.record.quantity_kg:
                statuses[m.record.order_id] = OrderStatus.ASSIGNED
            elif got > 0:
                statuses[m.record.order_id] = OrderStatus.ASSIGNED_PARTIAL
            else:
                statuses[m.record.order_id] = OrderStatus.FAILED_NO_CAPACITY

        used = []
        for assignment in allocation.assignments:
            assignment.load_kg = assignment.loaded_kg
            if assignment.orders:
                used.append(assignment)
            else:
                pool.release(assignment.vehicle.vehicle_id)
                self._note(log, f"Vehicle {assignment.vehicle.license_plate} released unused")

        by_id = {m.record.order_id: m for m in members}
        last_job_index: dict[UUID, int] = {}
        for index, assignment in enumerate(used):
            for order_id, _ in assignment.orders:
                last_job_index[order_id] = index

        first_job: dict[UUID, UUID] = {}
        for index, assignment in enumerate(used):
            job = self._build_job(plan_date, variant, assignment, by_id)
            job.job_id = self.store.save_job(job)
            self.store.mark_vehicle_booked(assignment.vehicle.vehicle_id, plan_date)
            result.jobs.append(job)

            for order_id, _ in assignment.orders:
                first_job.setdefault(order_id, job.job_id)
                if last_job_index[order_id] == index:
                    self.store.update_order_status(order_id, statuses[order_id], first_job[order_id])

            self.store.commit()
            self._note(
                log,
                f"Job {job.route_name} on {assignment.vehicle.license_plate}: "
                f"{job.total_weight_kg} kg, {len(job.stops)} stops, {job.total_distance_km} km",
            )

        failed = False
        for m in members:
            order_id = m.record.order_id
            status = statuses[order_id]
            if status == OrderStatus.ASSIGNED:
                continue
            shortage = short[order_id]
            if status == OrderStatus.FAILED_NO_CAPACITY:
                self.store.update_order_status(order_id, status)
                failed = True
                detail = f"Fleet short by {shortage} kg for {requirement.vehicle_class.value}"
            else:
                detail = f"Partially assigned, {shortage} kg left"
            result.unallocated.append(
                UnallocatedOrder(
                    order_id=order_id,
                    reason=PlanningError.INSUFFICIENT_CAPACITY,
                    shortage_kg=shortage,
                    detail=detail,
                )
            )
            self._note(log, f"Order {m.record.order_number}: {detail}")

        if failed:
            self.store.commit()

    @staticmethod
    def _pack_orders(
        members: list[_EvaluatedOrder],
        assignments: list[Assignment],
        allow_partial: bool,
    ) -> tuple[dict[UUID, int], dict[UUID, int]]:
        """
        Place orders, in group order, into the room allocated on each vehicle.

        An order goes whole onto the first vehicle with room for it, and is
        split over several vehicles only when none has. An order the
        remaining room cannot carry is skipped, so smaller orders behind it
        still get on. With *allow_partial*, skipped orders then share
        whatever room is left.

        Returns (kg placed, kg short) per order.
        """
        room = [a.load_kg for a in assignments]
        placed = {m.record.order_id: 0 for m in members}
        short = {m.record.order_id: 0 for m in members}

        def load(order_id: UUID, kg: int) -> None:
            whole = next((slot for slot, free in enumerate(room) if free >= kg), None)
            slots = [whole] if whole is not None else range(len(room))
            for slot in slots:
                take = min(kg, room[slot])
                if take == 0:
                    continue
                assignments[slot].orders.append((order_id, take))
                room[slot] -= take
                placed[order_id] += take
                kg -= take
                if kg == 0:
                    break

        skipped = []
        for m in members:
            need = m.record.quantity_kg
            free = sum(room)
            if need <= free:
                load(m.record.order_id, need)
            else:
                short[m.record.order_id] = need - free
                skipped.append(m)

        if allow_partial:
            for m in skipped:
                free = sum(room)
                if free == 0:
                    break
                load(m.record.order_id, min(m.record.quantity_kg, free))
                short[m.record.order_id] = m.record.quantity_kg - placed[m.record.order_id]

        return placed, short

    # =========================================================================
    # Single order
    # =========================================================================

    def plan_single_order(self, order_id: UUID) -> SingleOrderResult:
        """Assign one pending order right away."""
        result = SingleOrderResult(order_id=order_id)
        log = result.log

        order = self.store.get_order(order_id)
        if order is None:
            self._note(log, f"Order {order_id} not found")
            result.error = PlanningError.ORDER_NOT_FOUND
            return result

        if order.status != OrderStatus.PENDING:
            self._note(log, f"Order {order.order_number} is {order.status.value}, not PENDING")
            result.error = PlanningError.ORDER_NOT_PENDING
            return result

        try:
            spec = self._require_spec(order.product_variant)
        except UnknownVariantError as e:
            self._note(log, f"Order {order.order_number}: {e}")
            result.error = PlanningError.UNKNOWN_VARIANT
            return result

        if order.quantity_kg <= 0:
            self._note(log, f"Order {order.order_number}: invalid quantity {order.quantity_kg}")
            result.error = PlanningError.INVALID_QUANTITY
            return result

        plan_date = order.pickup_date
        evaluated = self._evaluate(order, spec, plan_date, {}, log)
        requirement = evaluated.requirement

        try:
            with self.lock_factory(plan_date):
                current = self.store.get_order(order.order_id)
                if current is None or current.status != OrderStatus.PENDING:
                    self._note(log, f"Order {order.order_number} was planned by another pass")
                    result.error = PlanningError.ORDER_NOT_PENDING
                    return result

                pool = FleetPool(self.store.get_available_fleet(plan_date))
                allocation = allocate(
                    requirement.vehicle_class, pool, order.quantity_kg, requirement.reason
                )

                if allocation.shortage_kg > 0:
                    for assignment in allocation.assignments:
                        pool.release(assignment.vehicle.vehicle_id)
                    raise InsufficientCapacityError(
                        allocation.shortage_kg,
                        f"Fleet short by {allocation.shortage_kg} kg "
                        f"for {requirement.vehicle_class.value}",
                    )

                by_id = {order.order_id: evaluated}
                for assignment in allocation.assignments:
                    assignment.orders = [(order.order_id, assignment.load_kg)]
                    job = self._build_job(plan_date, order.product_variant, assignment, by_id)
                    job.job_id = self.store.save_job(job)
                    self.store.mark_vehicle_booked(assignment.vehicle.vehicle_id, plan_date)
                    result.jobs.append(job)

                self.store.update_order_status(
                    order.order_id, OrderStatus.ASSIGNED, result.jobs[0].job_id
                )
                self.store.commit()
        except InsufficientCapacityError as e:
            self._note(log, f"Order {order.order_number}: {e}")
            result.error = PlanningError.INSUFFICIENT_CAPACITY
            result.shortage_kg = e.shortage_kg
            return result

        self._note(
            log,
            f"Order {order.order_number}: {len(result.jobs)} vehicles, "
            f"{requirement.vehicle_class.value} ({requirement.reason})",
        )
        return result

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_spec(self, variant: str) -> ProductSpecData:
        spec = self.store.get_product_spec(variant)
        if spec is None:
            raise UnknownVariantError(variant)
        return spec

    def _evaluate(
        self,
        order: OrderRecord,
        spec: ProductSpecData,
        plan_date: date,
        weather_cache: dict[tuple[date, Coordinate], WeatherSnapshot],
        log: list[str],
    ) -> _EvaluatedOrder:
        pickup = order.pickup or self.geocoder.resolve(order.pickup_location)
        drop = order.drop or self.geocoder.resolve(order.drop_location)

        if pickup is not None and drop is not None:
            trip_km = distance_km(pickup, drop)
        else:
            trip_km = self.settings.fallback_distance_km
            missing = "pickup" if pickup is None else "drop"
            if pickup is None and drop is None:
                missing = "pickup and drop"
            self._note(
                log,
                f"Order {order.order_number}: no coordinates for {missing}, "
                f"assuming {trip_km} km and routing via {self.settings.default_hub_name}",
            )

        pickup = pickup or self.hub
        drop = drop or self.hub

        weather = self._weather(plan_date, pickup, weather_cache, log)
        requirement = required_vehicle_class(spec, trip_km, weather)

        return _EvaluatedOrder(
            record=order,
            pickup=pickup,
            drop=drop,
            distance_km=trip_km,
            weather=weather,
            requirement=requirement,
        )

    def _weather(
        self,
        plan_date: date,
        location: Coordinate,
        cache: dict[tuple[date, Coordinate], WeatherSnapshot],
        log: list[str],
    ) -> WeatherSnapshot:
        key = (plan_date, location)
        if key not in cache:
            try:
                cache[key] = self.weather.get_weather(plan_date, location)
            except WeatherUnavailableError as e:
                snapshot = default_snapshot(self.settings)
                self._note(
                    log,
                    f"Weather unavailable at ({location.latitude}, {location.longitude}): {e}; "
                    f"assuming {snapshot.temperature_c}°C and dry",
                )
                cache[key] = snapshot
        return cache[key]

    def _build_job(
        self,
        plan_date: date,
        variant: str,
        assignment: Assignment,
        orders: dict[UUID, _EvaluatedOrder],
    ) -> PlannedJob:
        route_orders = [
            RouteOrder(
                order_id=order_id,
                pickup=orders[order_id].pickup,
                drop=orders[order_id].drop,
                load_kg=kg,
            )
            for order_id, kg in assignment.orders
        ]
        start = assignment.vehicle.location or self.hub
        stops = plan_route(start, route_orders)

        return PlannedJob(
            job_date=plan_date,
            vehicle=assignment.vehicle,
            required_class=assignment.required_class,
            reason=assignment.reason,
            route_name=f"{variant} - {assignment.required_class.value} Run",
            total_weight_kg=assignment.loaded_kg,
            stops=stops,
        )

    @staticmethod
    def _note(log: list[str], message: str) -> None:
        logger.info(message)
        log.append(message)
