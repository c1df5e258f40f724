"""
Transport job API endpoints.
"""
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from freshroute.db.database import get_async_session
from freshroute.models import TransportJob, JobStatus
from freshroute.schemas.dispatch import TransportJobListResponse, TransportJobResponse

router = APIRouter()


@router.get("", response_model=TransportJobListResponse)
async def list_jobs(
    job_date: Optional[date] = None,
    status: Optional[JobStatus] = None,
    vehicle_id: Optional[UUID] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    session: AsyncSession = Depends(get_async_session),
):
    """
    List transport jobs with their manifests.

    - **job_date**: Filter by run date
    - **status**: Filter by job status
    - **vehicle_id**: Filter by vehicle
    """
    query = select(TransportJob)

    if job_date:
        query = query.where(TransportJob.job_date == job_date)
    if status:
        query = query.where(TransportJob.status == status)
    if vehicle_id:
        query = query.where(TransportJob.vehicle_id == vehicle_id)

    query = query.order_by(TransportJob.job_date.desc(), TransportJob.route_name)
    query = query.offset(skip).limit(limit)

    result = await session.execute(query)
    jobs = result.scalars().all()

    count_query = select(func.count(TransportJob.id))
    if job_date:
        count_query = count_query.where(TransportJob.job_date == job_date)
    if status:
        count_query = count_query.where(TransportJob.status == status)
    if vehicle_id:
        count_query = count_query.where(TransportJob.vehicle_id == vehicle_id)
    total = await session.scalar(count_query)

    return TransportJobListResponse(
        items=[TransportJobResponse.model_validate(j) for j in jobs],
        total=total or 0,
    )


@router.get("/{job_id}", response_model=TransportJobResponse)
async def get_job(
    job_id: UUID,
    session: AsyncSession = Depends(get_async_session),
):
    """Get a transport job with its manifest."""
    result = await session.execute(
        select(TransportJob).where(TransportJob.id == job_id)
    )
    job = result.scalar_one_or_none()

    if not job:
        raise HTTPException(status_code=404, detail="Transport job not found")

    return TransportJobResponse.model_validate(job)
