"""
Pydantic schemas for FreshRoute Dispatch API.
"""
from freshroute.schemas.base import BaseSchema
from freshroute.schemas.dispatch import (
    DailyBatchRequest,
    RouteStopResponse,
    TransportJobResponse,
    TransportJobListResponse,
    UnallocatedOrderResponse,
    BatchPlanResponse,
    SingleOrderResponse,
    BatchTaskResponse,
    BatchTaskStatusResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    # Dispatch
    "DailyBatchRequest",
    "RouteStopResponse",
    "TransportJobResponse",
    "TransportJobListResponse",
    "UnallocatedOrderResponse",
    "BatchPlanResponse",
    "SingleOrderResponse",
    "BatchTaskResponse",
    "BatchTaskStatusResponse",
]
