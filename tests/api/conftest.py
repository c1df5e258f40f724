"""API test fixtures -- helpers for configuring mock session returns."""
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

from freshroute.models.enums import JobStatus, StopType, VehicleClass


def make_mock_result(scalar_value=None, scalars_list=None):
    """Create a mock SQLAlchemy Result object."""
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=scalar_value)

    scalars_mock = MagicMock()
    scalars_mock.all = MagicMock(return_value=scalars_list or [])
    scalars_mock.unique = MagicMock(return_value=scalars_mock)
    result.scalars = MagicMock(return_value=scalars_mock)

    return result


def make_mock_stop(sequence_number=1, stop_type=StopType.PICKUP, order_id=None, load_kg=500):
    """Create a mock RouteStop ORM object."""
    stop = MagicMock()
    stop.id = uuid4()
    stop.sequence_number = sequence_number
    stop.stop_type = stop_type
    stop.order_id = order_id or uuid4()
    stop.latitude = Decimal("7.8731000")
    stop.longitude = Decimal("80.7718000")
    stop.distance_from_last_km = Decimal("0.0")
    stop.load_kg = load_kg
    return stop


def make_mock_job(
    job_id=None,
    route_name="red_onion - UNCOVERED Run",
    vehicle_class=VehicleClass.UNCOVERED,
    status=JobStatus.SCHEDULED,
):
    """Create a mock TransportJob ORM object with a two-stop manifest."""
    order_id = uuid4()

    job = MagicMock()
    job.id = job_id or uuid4()
    job.job_date = date(2026, 10, 20)
    job.vehicle_id = uuid4()
    job.vehicle_license_plate = "WP-1001"
    job.vehicle_class_used = vehicle_class
    job.required_class = vehicle_class
    job.route_name = route_name
    job.assignment_reason = "no elevated risk detected"
    job.total_weight_kg = 500
    job.total_distance_km = Decimal("147.6")
    job.status = status
    job.stops = [
        make_mock_stop(1, StopType.PICKUP, order_id),
        make_mock_stop(2, StopType.DROP, order_id),
    ]
    job.created_at = datetime.now()
    job.updated_at = datetime.now()
    return job
