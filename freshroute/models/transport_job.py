"""
Transport job and route stop models for FreshRoute Dispatch.

A transport job is one vehicle's run for one date; its stops form the
ordered pickup/drop manifest.
"""
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    Date, Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freshroute.models.base import BaseModel
from freshroute.models.enums import JobStatus, StopType, VehicleClass
from freshroute.models.vehicle import Vehicle


class TransportJob(BaseModel):
    """
    One vehicle's scheduled run.

    Status Flow:
        SCHEDULED → IN_PROGRESS → COMPLETED
    """
    __tablename__ = "transport_jobs"
    _repr_fields = ("job_date", "route_name")

    job_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )

    vehicle_id: Mapped[UUID] = mapped_column(
        ForeignKey("vehicles.id"),
        nullable=False,
        index=True,
    )

    vehicle_class_used: Mapped[VehicleClass] = mapped_column(
        Enum(VehicleClass, name="vehicle_class"),
        nullable=False,
    )

    # Class the load demanded; may be lower than the class used
    required_class: Mapped[VehicleClass] = mapped_column(
        Enum(VehicleClass, name="vehicle_class"),
        nullable=False,
    )

    route_name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
    )

    assignment_reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    total_weight_kg: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    total_distance_km: Mapped[Decimal] = mapped_column(
        Numeric(10, 1),
        nullable=False,
        default=Decimal("0"),
    )

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, name="job_status"),
        nullable=False,
        default=JobStatus.SCHEDULED,
        index=True,
    )

    # =========================================================================
    # Relationships
    # =========================================================================
    vehicle: Mapped[Vehicle] = relationship("Vehicle", lazy="selectin")

    stops: Mapped[list["RouteStop"]] = relationship(
        "RouteStop",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="RouteStop.sequence_number",
        lazy="selectin",
    )

    @property
    def vehicle_license_plate(self) -> Optional[str]:
        return self.vehicle.license_plate if self.vehicle is not None else None


class RouteStop(BaseModel):
    """
    One stop in a job's manifest.

    Sequence numbers start at 1 and are unique within a job.
    """
    __tablename__ = "route_stops"
    _repr_fields = ("job_id", "sequence_number", "stop_type")
    __table_args__ = (
        UniqueConstraint("job_id", "sequence_number", name="uq_route_stops_job_sequence"),
    )

    job_id: Mapped[UUID] = mapped_column(
        ForeignKey("transport_jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sequence_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    stop_type: Mapped[StopType] = mapped_column(
        Enum(StopType, name="stop_type"),
        nullable=False,
    )

    order_id: Mapped[UUID] = mapped_column(
        ForeignKey("orders.id"),
        nullable=False,
        index=True,
    )

    latitude: Mapped[Decimal] = mapped_column(Numeric(10, 7), nullable=False)
    longitude: Mapped[Decimal] = mapped_column(Numeric(10, 7), nullable=False)

    distance_from_last_km: Mapped[Decimal] = mapped_column(
        Numeric(10, 1),
        nullable=False,
        default=Decimal("0"),
    )

    # Quantity of the order picked up or dropped on this job
    load_kg: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    job: Mapped[TransportJob] = relationship("TransportJob", back_populates="stops")
