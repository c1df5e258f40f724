"""
Greedy fleet allocation.

Loads a quantity onto vehicles of acceptable classes, preferring the
cheapest acceptable class and, within a class, the largest truck first.
This is first-fit-decreasing bin packing; it is not optimal and is not
meant to be.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional
from uuid import UUID

from freshroute.models.enums import VehicleClass
from freshroute.services.dispatch.geodesy import Coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FleetVehicle:
    """A vehicle as seen by one planning pass."""
    vehicle_id: UUID
    license_plate: str
    vehicle_class: VehicleClass
    capacity_kg: int
    location: Optional[Coordinate] = None


@dataclass
class Assignment:
    """
    Load placed on one vehicle.

    `orders` holds (order_id, kg) pairs once the orchestrator has spread
    orders across the vehicle's load.
    """
    vehicle: FleetVehicle
    load_kg: int
    required_class: VehicleClass
    reason: str = ""
    orders: list[tuple[UUID, int]] = field(default_factory=list)

    @property
    def loaded_kg(self) -> int:
        return sum(kg for _, kg in self.orders)


@dataclass
class AllocationResult:
    """Assignments made by one allocate() call."""
    assignments: list[Assignment]
    shortage_kg: int

    @property
    def allocated_kg(self) -> int:
        return sum(a.load_kg for a in self.assignments)

    @property
    def is_complete(self) -> bool:
        return self.shortage_kg == 0


class FleetPool:
    """
    Vehicles still free during one planning pass.

    `take` is the only way a vehicle leaves the pool. `release` puts an
    unused vehicle back where it originally sat, so later groups see the
    same ordering they would have seen had it never been taken.
    """

    def __init__(self, vehicles: Iterable[FleetVehicle]):
        self._position: dict[UUID, int] = {}
        self._vehicles: dict[UUID, FleetVehicle] = {}
        for index, vehicle in enumerate(vehicles):
            if vehicle.vehicle_id in self._position:
                raise ValueError(f"Duplicate vehicle {vehicle.vehicle_id} in fleet")
            self._position[vehicle.vehicle_id] = index
            self._vehicles[vehicle.vehicle_id] = vehicle
        self._free: set[UUID] = set(self._vehicles)

    def __len__(self) -> int:
        return len(self._free)

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._free

    def __iter__(self) -> Iterator[FleetVehicle]:
        for vehicle_id in sorted(self._free, key=self._position.__getitem__):
            yield self._vehicles[vehicle_id]

    def take(self, vehicle_id: UUID) -> FleetVehicle:
        """Remove a vehicle from the pool."""
        if vehicle_id not in self._free:
            raise KeyError(f"Vehicle {vehicle_id} is not in the pool")
        self._free.remove(vehicle_id)
        return self._vehicles[vehicle_id]

    def release(self, vehicle_id: UUID) -> None:
        """Return a taken vehicle to its original position."""
        if vehicle_id not in self._vehicles:
            raise KeyError(f"Vehicle {vehicle_id} never belonged to this pool")
        self._free.add(vehicle_id)

    def candidates(self, classes: tuple[VehicleClass, ...]) -> list[FleetVehicle]:
        """Free vehicles of the given classes, by class preference then capacity."""
        rank = {vehicle_class: i for i, vehicle_class in enumerate(classes)}
        eligible = [v for v in self if v.vehicle_class in rank]
        # sorted() is stable, so equal keys keep pool order
        return sorted(eligible, key=lambda v: (rank[v.vehicle_class], -v.capacity_kg))


def acceptable_classes(required: VehicleClass) -> tuple[VehicleClass, ...]:
    """
    Classes that may carry a load requiring *required*, cheapest first.
    """
    required = VehicleClass(required)
    return tuple(
        vehicle_class
        for vehicle_class in (
            VehicleClass.UNCOVERED,
            VehicleClass.COVERED,
            VehicleClass.REFRIGERATED,
        )
        if vehicle_class.can_carry(required)
    )


def allocate(
    required_class: VehicleClass,
    pool: FleetPool,
    quantity_kg: int,
    reason: str = "",
) -> AllocationResult:
    """
    Load *quantity_kg* onto vehicles taken from *pool*.

    Every vehicle that receives load is removed from the pool. The sum of
    the loads plus the returned shortage always equals *quantity_kg*.
    """
    if quantity_kg < 0:
        raise ValueError(f"Quantity must be non-negative, got {quantity_kg}")

    assignments: list[Assignment] = []
    remaining = quantity_kg

    for vehicle in pool.candidates(acceptable_classes(required_class)):
        if remaining <= 0:
            break
        if vehicle.capacity_kg <= 0:
            continue
        load = min(vehicle.capacity_kg, remaining)
        pool.take(vehicle.vehicle_id)
        assignments.append(
            Assignment(
                vehicle=vehicle,
                load_kg=load,
                required_class=VehicleClass(required_class),
                reason=reason,
            )
        )
        remaining -= load

    if remaining > 0:
        logger.info(
            f"Allocation for {required_class} short by {remaining} kg "
            f"({quantity_kg - remaining}/{quantity_kg} kg placed)"
        )

    return AllocationResult(assignments=assignments, shortage_kg=remaining)
