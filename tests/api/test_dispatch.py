"""Tests for Dispatch endpoints."""
from datetime import date
from unittest.mock import MagicMock, patch
from uuid import uuid4

from freshroute.models.enums import StopType, VehicleClass
from freshroute.services.dispatch.allocator import FleetVehicle
from freshroute.services.dispatch.exceptions import CollaboratorError
from freshroute.services.dispatch.geodesy import Coordinate
from freshroute.services.dispatch.planner import PlanningError, SingleOrderResult
from freshroute.services.dispatch.route_optimizer import PlannedStop
from freshroute.services.dispatch.store import PlannedJob

PLAN_DATE = date(2026, 10, 20)


def _planned_job(order_id, load_kg=400) -> PlannedJob:
    vehicle = FleetVehicle(
        vehicle_id=uuid4(),
        license_plate="WP-2002",
        vehicle_class=VehicleClass.REFRIGERATED,
        capacity_kg=1000,
    )
    return PlannedJob(
        job_date=PLAN_DATE,
        vehicle=vehicle,
        required_class=VehicleClass.COVERED,
        reason="precipitation protection",
        route_name="red_onion - COVERED Run",
        total_weight_kg=load_kg,
        stops=[
            PlannedStop(1, StopType.PICKUP, Coordinate(7.8731, 80.7718), 0.0, order_id, load_kg),
            PlannedStop(2, StopType.DROP, Coordinate(6.9271, 79.8612), 147.6, order_id, load_kg),
        ],
        job_id=uuid4(),
    )


class TestQueueDailyBatch:

    async def test_queue_returns_202(self, client):
        with patch("freshroute.api.v1.endpoints.dispatch.run_daily_batch") as task:
            task.delay.return_value = MagicMock(id="task-123")

            response = await client.post(
                "/api/v1/dispatch/daily-batch", json={"plan_date": "2026-10-20"}
            )

        assert response.status_code == 202
        data = response.json()
        assert data["task_id"] == "task-123"
        assert data["plan_date"] == "2026-10-20"
        assert data["status"] == "QUEUED"
        task.delay.assert_called_once_with("2026-10-20")

    async def test_missing_date_returns_422(self, client):
        response = await client.post("/api/v1/dispatch/daily-batch", json={})
        assert response.status_code == 422

    async def test_bad_date_returns_422(self, client):
        response = await client.post(
            "/api/v1/dispatch/daily-batch", json={"plan_date": "tomorrow"}
        )
        assert response.status_code == 422


class TestDailyBatchStatus:

    async def test_pending(self, client):
        with patch("freshroute.api.v1.endpoints.dispatch.celery_app") as app:
            app.AsyncResult.return_value = MagicMock(state="PENDING")

            response = await client.get("/api/v1/dispatch/daily-batch/task-123")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "PENDING"
        assert data["result"] is None
        assert data["error"] is None
        app.AsyncResult.assert_called_once_with("task-123")

    async def test_success_includes_result(self, client):
        outcome = {"plan_date": "2026-10-20", "jobs": [], "unallocated": [], "log": []}
        with patch("freshroute.api.v1.endpoints.dispatch.celery_app") as app:
            app.AsyncResult.return_value = MagicMock(state="SUCCESS", result=outcome)

            response = await client.get("/api/v1/dispatch/daily-batch/task-123")

        assert response.json()["result"] == outcome

    async def test_failure_includes_error(self, client):
        with patch("freshroute.api.v1.endpoints.dispatch.celery_app") as app:
            app.AsyncResult.return_value = MagicMock(
                state="FAILURE", result=CollaboratorError("database unreachable")
            )

            response = await client.get("/api/v1/dispatch/daily-batch/task-123")

        data = response.json()
        assert data["state"] == "FAILURE"
        assert data["error"] == "database unreachable"
        assert data["result"] is None


class TestAssignOrder:

    async def test_success_returns_jobs(self, client, mock_planner):
        order_id = uuid4()
        job = _planned_job(order_id)
        mock_planner.plan_single_order.return_value = SingleOrderResult(
            order_id=order_id, jobs=[job], log=["Order ORD-0001: 1 vehicles"]
        )

        response = await client.post(f"/api/v1/dispatch/orders/{order_id}/assign")

        assert response.status_code == 200
        data = response.json()
        assert data["order_id"] == str(order_id)
        [returned] = data["jobs"]
        assert returned["id"] == str(job.job_id)
        assert returned["vehicle_class_used"] == "REFRIGERATED"
        assert returned["required_class"] == "COVERED"
        assert returned["total_distance_km"] == 147.6
        assert [s["stop_type"] for s in returned["stops"]] == ["PICKUP", "DROP"]
        mock_planner.plan_single_order.assert_called_once_with(order_id)

    async def test_not_found_returns_404(self, client, mock_planner):
        order_id = uuid4()
        mock_planner.plan_single_order.return_value = SingleOrderResult(
            order_id=order_id, error=PlanningError.ORDER_NOT_FOUND
        )

        response = await client.post(f"/api/v1/dispatch/orders/{order_id}/assign")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "ORDER_NOT_FOUND"

    async def test_not_pending_returns_409(self, client, mock_planner):
        order_id = uuid4()
        mock_planner.plan_single_order.return_value = SingleOrderResult(
            order_id=order_id, error=PlanningError.ORDER_NOT_PENDING
        )

        response = await client.post(f"/api/v1/dispatch/orders/{order_id}/assign")

        assert response.status_code == 409

    async def test_shortage_returns_409_with_amount(self, client, mock_planner):
        order_id = uuid4()
        mock_planner.plan_single_order.return_value = SingleOrderResult(
            order_id=order_id,
            error=PlanningError.INSUFFICIENT_CAPACITY,
            shortage_kg=100,
            log=["Order ORD-0001: Fleet short by 100 kg for UNCOVERED"],
        )

        response = await client.post(f"/api/v1/dispatch/orders/{order_id}/assign")

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["error"] == "INSUFFICIENT_CAPACITY"
        assert detail["shortage_kg"] == 100
        assert detail["log"] == ["Order ORD-0001: Fleet short by 100 kg for UNCOVERED"]

    async def test_unknown_variant_returns_422(self, client, mock_planner):
        order_id = uuid4()
        mock_planner.plan_single_order.return_value = SingleOrderResult(
            order_id=order_id, error=PlanningError.UNKNOWN_VARIANT
        )

        response = await client.post(f"/api/v1/dispatch/orders/{order_id}/assign")

        assert response.status_code == 422

    async def test_collaborator_failure_returns_503(self, client, mock_planner):
        mock_planner.plan_single_order.side_effect = CollaboratorError("Fleet lock unavailable")

        response = await client.post(f"/api/v1/dispatch/orders/{uuid4()}/assign")

        assert response.status_code == 503
        assert response.json()["detail"] == "Fleet lock unavailable"

    async def test_invalid_id_returns_422(self, client):
        response = await client.post("/api/v1/dispatch/orders/not-a-uuid/assign")
        assert response.status_code == 422
