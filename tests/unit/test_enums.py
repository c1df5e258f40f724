"""Tests for enum helpers."""
import pytest

from freshroute.models.enums import (
    JobStatus,
    OrderStatus,
    StopType,
    VehicleClass,
    VehicleStatus,
)


class TestVehicleClass:

    def test_protection_levels_are_ordered(self):
        assert (
            VehicleClass.UNCOVERED.protection_level
            < VehicleClass.COVERED.protection_level
            < VehicleClass.REFRIGERATED.protection_level
        )

    @pytest.mark.parametrize(
        "vehicle,required,expected",
        [
            (VehicleClass.REFRIGERATED, VehicleClass.UNCOVERED, True),
            (VehicleClass.REFRIGERATED, VehicleClass.COVERED, True),
            (VehicleClass.COVERED, VehicleClass.UNCOVERED, True),
            (VehicleClass.COVERED, VehicleClass.REFRIGERATED, False),
            (VehicleClass.UNCOVERED, VehicleClass.COVERED, False),
            (VehicleClass.UNCOVERED, VehicleClass.UNCOVERED, True),
        ],
    )
    def test_can_carry(self, vehicle, required, expected):
        assert vehicle.can_carry(required) is expected

    def test_string_values(self):
        assert VehicleClass("REFRIGERATED") is VehicleClass.REFRIGERATED
        assert VehicleClass.COVERED == "COVERED"


class TestStatusEnums:

    def test_order_statuses(self):
        assert {s.value for s in OrderStatus} == {
            "PENDING", "ASSIGNED", "ASSIGNED_PARTIAL", "FAILED_NO_CAPACITY",
        }

    def test_vehicle_statuses(self):
        assert {s.value for s in VehicleStatus} == {
            "AVAILABLE", "BOOKED", "MAINTENANCE", "OFFLINE",
        }

    def test_job_statuses(self):
        assert [s.value for s in JobStatus] == ["SCHEDULED", "IN_PROGRESS", "COMPLETED"]

    def test_stop_types(self):
        assert [s.value for s in StopType] == ["PICKUP", "DROP"]
