"""
SQLAlchemy ORM models for FreshRoute Dispatch.
"""
from freshroute.models.base import BaseModel
from freshroute.models.enums import (
    VehicleClass,
    OrderStatus,
    VehicleStatus,
    JobStatus,
    StopType,
)
from freshroute.models.product_spec import ProductSpec
from freshroute.models.order import Order
from freshroute.models.vehicle import Vehicle
from freshroute.models.transport_job import TransportJob, RouteStop

__all__ = [
    # Base
    "BaseModel",
    # Enums
    "VehicleClass",
    "OrderStatus",
    "VehicleStatus",
    "JobStatus",
    "StopType",
    # Models
    "ProductSpec",
    "Order",
    "Vehicle",
    "TransportJob",
    "RouteStop",
]
