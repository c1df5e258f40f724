"""
Dispatch planning Pydantic schemas.
"""
from datetime import date
from typing import Any, Optional
from uuid import UUID

from pydantic import Field

from freshroute.models.enums import JobStatus, StopType, VehicleClass
from freshroute.schemas.base import BaseSchema
from freshroute.services.dispatch.planner import (
    BatchPlanResult,
    PlanningError,
    SingleOrderResult,
)
from freshroute.services.dispatch.store import PlannedJob


# =============================================================================
# Requests
# =============================================================================

class DailyBatchRequest(BaseSchema):
    """
    Request to plan the daily batch.

    The API returns a task_id immediately; planning runs in Celery.
    """
    plan_date: date = Field(
        ...,
        description="Pickup date to plan",
    )


# =============================================================================
# Jobs
# =============================================================================

class RouteStopResponse(BaseSchema):
    """One stop of a job manifest."""
    sequence_number: int
    stop_type: StopType
    order_id: UUID
    latitude: float
    longitude: float
    distance_from_last_km: float
    load_kg: int


class TransportJobResponse(BaseSchema):
    """
    A vehicle's run with its manifest.

    Built from a TransportJob row or from a freshly planned job.
    """
    id: Optional[UUID] = None
    job_date: date
    vehicle_id: UUID
    vehicle_license_plate: Optional[str] = None
    vehicle_class_used: VehicleClass
    required_class: VehicleClass
    route_name: str
    assignment_reason: Optional[str] = None
    total_weight_kg: int
    total_distance_km: float
    status: JobStatus
    stops: list[RouteStopResponse] = Field(default_factory=list)

    @classmethod
    def from_planned(cls, job: PlannedJob) -> "TransportJobResponse":
        return cls(
            id=job.job_id,
            job_date=job.job_date,
            vehicle_id=job.vehicle.vehicle_id,
            vehicle_license_plate=job.vehicle.license_plate,
            vehicle_class_used=job.vehicle_class,
            required_class=job.required_class,
            route_name=job.route_name,
            assignment_reason=job.reason,
            total_weight_kg=job.total_weight_kg,
            total_distance_km=job.total_distance_km,
            status=job.status,
            stops=[
                RouteStopResponse(
                    sequence_number=stop.sequence,
                    stop_type=stop.stop_type,
                    order_id=stop.order_id,
                    latitude=stop.location.latitude,
                    longitude=stop.location.longitude,
                    distance_from_last_km=stop.distance_from_last_km,
                    load_kg=stop.load_kg,
                )
                for stop in job.stops
            ],
        )


class TransportJobListResponse(BaseSchema):
    """List of jobs with total count."""
    items: list[TransportJobResponse]
    total: int


# =============================================================================
# Planning results
# =============================================================================

class UnallocatedOrderResponse(BaseSchema):
    """An order a batch could not fully place."""
    order_id: UUID
    reason: PlanningError
    shortage_kg: int = 0
    detail: str = ""


class BatchPlanResponse(BaseSchema):
    """Outcome of a daily batch."""
    plan_date: date
    jobs: list[TransportJobResponse]
    unallocated: list[UnallocatedOrderResponse]
    log: list[str]

    @classmethod
    def from_result(cls, result: BatchPlanResult) -> "BatchPlanResponse":
        return cls(
            plan_date=result.plan_date,
            jobs=[TransportJobResponse.from_planned(job) for job in result.jobs],
            unallocated=[
                UnallocatedOrderResponse(
                    order_id=u.order_id,
                    reason=u.reason,
                    shortage_kg=u.shortage_kg,
                    detail=u.detail,
                )
                for u in result.unallocated
            ],
            log=list(result.log),
        )


class SingleOrderResponse(BaseSchema):
    """Outcome of an immediate assignment."""
    order_id: UUID
    jobs: list[TransportJobResponse]
    log: list[str]

    @classmethod
    def from_result(cls, result: SingleOrderResult) -> "SingleOrderResponse":
        return cls(
            order_id=result.order_id,
            jobs=[TransportJobResponse.from_planned(job) for job in result.jobs],
            log=list(result.log),
        )


# =============================================================================
# Background batch tasks
# =============================================================================

class BatchTaskResponse(BaseSchema):
    """Response after queueing a daily batch."""
    task_id: str
    plan_date: date
    status: str = "QUEUED"
    message: str = "Daily batch queued"


class BatchTaskStatusResponse(BaseSchema):
    """State of a queued daily batch."""
    task_id: str
    state: str
    result: Optional[dict[str, Any]] = None
    error: Optional[str] = None
