"""
Persistence boundary for dispatch planning.

The planner talks to a PlanningStore; SqlAlchemyPlanningStore is the
production implementation over the ORM models and a synchronous session.
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterator, Optional
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from freshroute.models import (
    JobStatus,
    Order,
    OrderStatus,
    ProductSpec,
    RouteStop,
    StopType,
    TransportJob,
    Vehicle,
    VehicleClass,
    VehicleStatus,
)
from freshroute.services.dispatch.allocator import FleetVehicle
from freshroute.services.dispatch.exceptions import CollaboratorError
from freshroute.services.dispatch.geodesy import Coordinate
from freshroute.services.dispatch.risk import ProductSpecData
from freshroute.services.dispatch.route_optimizer import PlannedStop, total_distance_km

logger = logging.getLogger(__name__)


# =============================================================================
# Records exchanged with the planner
# =============================================================================

@dataclass(frozen=True)
class OrderRecord:
    """An order as read for one planning pass."""
    order_id: UUID
    order_number: str
    product_variant: str
    quantity_kg: int
    pickup_date: date
    status: OrderStatus = OrderStatus.PENDING
    pickup_location: Optional[str] = None
    drop_location: Optional[str] = None
    pickup: Optional[Coordinate] = None
    drop: Optional[Coordinate] = None


@dataclass
class PlannedJob:
    """A transport job ready to persist (job_id is set once saved)."""
    job_date: date
    vehicle: FleetVehicle
    required_class: VehicleClass
    reason: str
    route_name: str
    total_weight_kg: int
    stops: list[PlannedStop] = field(default_factory=list)
    status: JobStatus = JobStatus.SCHEDULED
    job_id: Optional[UUID] = None

    @property
    def vehicle_class(self) -> VehicleClass:
        return self.vehicle.vehicle_class

    @property
    def total_distance_km(self) -> float:
        return total_distance_km(self.stops)

    @property
    def order_ids(self) -> list[UUID]:
        """Orders on this job, in pickup order."""
        return [s.order_id for s in self.stops if s.stop_type == StopType.PICKUP]


# =============================================================================
# Store interface
# =============================================================================

class PlanningStore(ABC):
    """Synchronous row store used by the planner."""

    @abstractmethod
    def get_pending_orders(self, plan_date: date) -> list[OrderRecord]:
        """PENDING orders picked up on *plan_date*, oldest first."""

    @abstractmethod
    def get_order(self, order_id: UUID) -> Optional[OrderRecord]:
        """Look up one order, or None."""

    @abstractmethod
    def get_available_fleet(self, plan_date: date) -> list[FleetVehicle]:
        """Vehicles free to take a job on *plan_date*."""

    @abstractmethod
    def get_product_spec(self, variant: str) -> Optional[ProductSpecData]:
        """Handling rules for *variant*, or None if unknown."""

    @abstractmethod
    def save_job(self, job: PlannedJob) -> UUID:
        """Persist a job with its stops and return its id."""

    @abstractmethod
    def update_order_status(
        self,
        order_id: UUID,
        status: OrderStatus,
        job_id: Optional[UUID] = None,
    ) -> None:
        """Set an order's status and, if given, its assigned job."""

    @abstractmethod
    def mark_vehicle_booked(self, vehicle_id: UUID, plan_date: date) -> None:
        """Book a vehicle for *plan_date*."""

    @abstractmethod
    def commit(self) -> None:
        """Make everything written so far durable."""


# =============================================================================
# SQLAlchemy implementation
# =============================================================================

class SqlAlchemyPlanningStore(PlanningStore):
    """PlanningStore over a synchronous SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Store operation '{operation}' failed: {e}")
            raise CollaboratorError(f"Store operation '{operation}' failed: {e}") from e

    def get_pending_orders(self, plan_date: date) -> list[OrderRecord]:
        with self._guard("get_pending_orders"):
            stmt = (
                select(Order)
                .where(
                    Order.pickup_date == plan_date,
                    Order.status == OrderStatus.PENDING,
                )
                .order_by(Order.created_at, Order.order_number)
                .execution_options(populate_existing=True)
            )
            orders = self.session.execute(stmt).scalars().all()
            return [order.to_record() for order in orders]

    def get_order(self, order_id: UUID) -> Optional[OrderRecord]:
        with self._guard("get_order"):
            # Refresh from the row so a re-check under the fleet lock sees other commits
            order = self.session.get(Order, order_id, populate_existing=True)
            return order.to_record() if order is not None else None

    def get_available_fleet(self, plan_date: date) -> list[FleetVehicle]:
        with self._guard("get_available_fleet"):
            busy = select(TransportJob.vehicle_id).where(TransportJob.job_date == plan_date)
            stmt = (
                select(Vehicle)
                .where(
                    or_(
                        Vehicle.status == VehicleStatus.AVAILABLE,
                        and_(
                            Vehicle.status == VehicleStatus.BOOKED,
                            or_(
                                Vehicle.booked_date.is_(None),
                                Vehicle.booked_date != plan_date,
                            ),
                        ),
                    ),
                    Vehicle.id.not_in(busy),
                )
                .order_by(Vehicle.license_plate)
                .with_for_update()
            )
            vehicles = self.session.execute(stmt).scalars().all()
            return [vehicle.to_fleet_vehicle() for vehicle in vehicles]

    def get_product_spec(self, variant: str) -> Optional[ProductSpecData]:
        with self._guard("get_product_spec"):
            stmt = select(ProductSpec).where(ProductSpec.variant_name == variant)
            spec = self.session.execute(stmt).scalar_one_or_none()
            return spec.to_spec_data() if spec is not None else None

    def save_job(self, job: PlannedJob) -> UUID:
        with self._guard("save_job"):
            db_job = TransportJob(
                job_date=job.job_date,
                vehicle_id=job.vehicle.vehicle_id,
                vehicle_class_used=job.vehicle_class,
                required_class=job.required_class,
                route_name=job.route_name,
                assignment_reason=job.reason,
                total_weight_kg=job.total_weight_kg,
                total_distance_km=Decimal(str(job.total_distance_km)),
                status=job.status,
            )
            db_job.stops = [
                RouteStop(
                    sequence_number=stop.sequence,
                    stop_type=stop.stop_type,
                    order_id=stop.order_id,
                    latitude=Decimal(str(stop.location.latitude)),
                    longitude=Decimal(str(stop.location.longitude)),
                    distance_from_last_km=Decimal(str(stop.distance_from_last_km)),
                    load_kg=stop.load_kg,
                )
                for stop in job.stops
            ]
            self.session.add(db_job)
            self.session.flush()
            logger.debug(f"Saved job {db_job.id} ({job.route_name}) with {len(job.stops)} stops")
            return db_job.id

    def update_order_status(
        self,
        order_id: UUID,
        status: OrderStatus,
        job_id: Optional[UUID] = None,
    ) -> None:
        with self._guard("update_order_status"):
            order = self.session.get(Order, order_id)
            if order is None:
                raise CollaboratorError(f"Order {order_id} vanished during planning")
            order.status = status
            if job_id is not None:
                order.assigned_job_id = job_id
            self.session.flush()

    def mark_vehicle_booked(self, vehicle_id: UUID, plan_date: date) -> None:
        with self._guard("mark_vehicle_booked"):
            vehicle = self.session.get(Vehicle, vehicle_id)
            if vehicle is None:
                raise CollaboratorError(f"Vehicle {vehicle_id} vanished during planning")
            vehicle.status = VehicleStatus.BOOKED
            vehicle.booked_date = plan_date
            self.session.flush()

    def commit(self) -> None:
        with self._guard("commit"):
            self.session.commit()
