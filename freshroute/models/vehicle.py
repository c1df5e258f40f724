"""
Vehicle model for FreshRoute Dispatch.

A vehicle is a truck of one protective class with a fixed weight capacity.
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Enum, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from freshroute.models.base import BaseModel
from freshroute.models.enums import VehicleClass, VehicleStatus


class Vehicle(BaseModel):
    """
    Fleet vehicle.

    A BOOKED vehicle is committed only for its booked_date; on any other
    date it is treated as available unless it already carries a job there.
    """
    __tablename__ = "vehicles"
    _repr_fields = ("license_plate", "vehicle_class", "status")

    license_plate: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
    )

    # Denormalized for display
    driver_name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    vehicle_class: Mapped[VehicleClass] = mapped_column(
        Enum(VehicleClass, name="vehicle_class"),
        nullable=False,
        index=True,
    )

    capacity_kg: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Maximum load in kg",
    )

    # Last known position, used as the route start
    current_latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 7), nullable=True)
    current_longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 7), nullable=True)

    status: Mapped[VehicleStatus] = mapped_column(
        Enum(VehicleStatus, name="vehicle_status"),
        nullable=False,
        default=VehicleStatus.AVAILABLE,
        index=True,
    )

    booked_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )

    def to_fleet_vehicle(self):
        """Convert to the allocator's FleetVehicle."""
        from freshroute.services.dispatch.allocator import FleetVehicle
        from freshroute.services.dispatch.geodesy import Coordinate

        location = None
        if self.current_latitude is not None and self.current_longitude is not None:
            location = Coordinate(float(self.current_latitude), float(self.current_longitude))

        return FleetVehicle(
            vehicle_id=self.id,
            license_plate=self.license_plate,
            vehicle_class=VehicleClass(self.vehicle_class),
            capacity_kg=int(self.capacity_kg),
            location=location,
        )
