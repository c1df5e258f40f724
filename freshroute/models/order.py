"""
Order model for FreshRoute Dispatch.

An order is a request to move a quantity of one product variant from a
pickup point to a drop point on a given date.
"""
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import Date, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freshroute.models.base import BaseModel
from freshroute.models.enums import OrderStatus

if TYPE_CHECKING:
    from freshroute.models.transport_job import TransportJob


class Order(BaseModel):
    """
    Pickup-and-drop order for a single product variant.

    Locations are stored as names plus optional coordinates. Coordinates
    missing on either end are resolved through the hub geocoder at
    planning time.
    """
    __tablename__ = "orders"
    _repr_fields = ("order_number", "product_variant", "status")

    # =========================================================================
    # Identification
    # =========================================================================
    order_number: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )

    product_variant: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
    )

    quantity_kg: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # =========================================================================
    # Locations
    # =========================================================================
    pickup_location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    pickup_latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 7), nullable=True)
    pickup_longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 7), nullable=True)

    drop_location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    drop_latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 7), nullable=True)
    drop_longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 7), nullable=True)

    # =========================================================================
    # Scheduling
    # =========================================================================
    pickup_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )

    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, name="order_status"),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )

    # First job carrying this order (split orders appear on several)
    assigned_job_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("transport_jobs.id"),
        nullable=True,
    )

    assigned_job: Mapped[Optional["TransportJob"]] = relationship(
        "TransportJob",
        foreign_keys=[assigned_job_id],
    )

    def to_record(self):
        """Convert to the planner's OrderRecord."""
        from freshroute.services.dispatch.geodesy import Coordinate
        from freshroute.services.dispatch.store import OrderRecord

        def _coord(lat, lng) -> Optional[Coordinate]:
            if lat is None or lng is None:
                return None
            return Coordinate(float(lat), float(lng))

        return OrderRecord(
            order_id=self.id,
            order_number=self.order_number,
            product_variant=self.product_variant,
            quantity_kg=int(self.quantity_kg),
            pickup_date=self.pickup_date,
            status=OrderStatus(self.status),
            pickup_location=self.pickup_location,
            drop_location=self.drop_location,
            pickup=_coord(self.pickup_latitude, self.pickup_longitude),
            drop=_coord(self.drop_latitude, self.drop_longitude),
        )
