"""
Dispatch API endpoints.

Daily batches run asynchronously via Celery; single orders are assigned
in the request.
"""
from typing import Annotated
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, HTTPException

from freshroute.core.celery_app import celery_app
from freshroute.core.dependencies import get_dispatch_planner
from freshroute.schemas.dispatch import (
    BatchTaskResponse,
    BatchTaskStatusResponse,
    DailyBatchRequest,
    SingleOrderResponse,
)
from freshroute.services.dispatch.exceptions import CollaboratorError
from freshroute.services.dispatch.planner import DispatchPlanner, PlanningError
from freshroute.services.tasks import run_daily_batch

logger = logging.getLogger(__name__)

router = APIRouter()

# Planning errors → HTTP status
_ERROR_STATUS = {
    PlanningError.ORDER_NOT_FOUND: 404,
    PlanningError.ORDER_NOT_PENDING: 409,
    PlanningError.INSUFFICIENT_CAPACITY: 409,
    PlanningError.UNKNOWN_VARIANT: 422,
    PlanningError.INVALID_QUANTITY: 422,
}


@router.post("/daily-batch", response_model=BatchTaskResponse, status_code=202)
async def queue_daily_batch(request: DailyBatchRequest):
    """
    Queue the daily batch for a pickup date.

    Returns immediately with a task_id. Use
    `GET /dispatch/daily-batch/{task_id}` to poll for the result.
    """
    task = run_daily_batch.delay(request.plan_date.isoformat())
    logger.info(f"Queued daily batch for {request.plan_date} as task {task.id}")

    return BatchTaskResponse(
        task_id=task.id,
        plan_date=request.plan_date,
        message=f"Daily batch for {request.plan_date} queued",
    )


@router.get("/daily-batch/{task_id}", response_model=BatchTaskStatusResponse)
async def get_daily_batch_status(task_id: str):
    """
    Get the state of a queued daily batch.

    ## States

    - **PENDING**: Queued, or unknown task id
    - **STARTED**: A worker is planning
    - **SUCCESS**: Done; `result` holds the batch outcome
    - **FAILURE**: Planning failed; `error` holds the reason
    """
    task = celery_app.AsyncResult(task_id)
    state = task.state

    response = BatchTaskStatusResponse(task_id=task_id, state=state)
    if state == "SUCCESS":
        response.result = task.result
    elif state == "FAILURE":
        response.error = str(task.result)

    return response


@router.post("/orders/{order_id}/assign", response_model=SingleOrderResponse)
def assign_order(
    order_id: UUID,
    planner: Annotated[DispatchPlanner, Depends(get_dispatch_planner)],
):
    """
    Assign one pending order to vehicles right away.

    ## Errors

    - **404**: Order not found
    - **409**: Order not pending, or the fleet is short (detail has shortage_kg)
    - **422**: Unknown product variant or invalid quantity
    - **503**: Database, weather or lock backend failure
    """
    try:
        result = planner.plan_single_order(order_id)
    except CollaboratorError as e:
        logger.error(f"Assignment of order {order_id} failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    if not result.is_success:
        raise HTTPException(
            status_code=_ERROR_STATUS[result.error],
            detail={
                "error": result.error.value,
                "shortage_kg": result.shortage_kg,
                "log": result.log,
            },
        )

    return SingleOrderResponse.from_result(result)
