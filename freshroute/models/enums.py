"""
Enum type definitions for FreshRoute Dispatch.

These enums map directly to PostgreSQL ENUM types created by the
baseline migration.
"""
from enum import Enum


class VehicleClass(str, Enum):
    """
    Vehicle body class, ordered by protective capability.

    REFRIGERATED ⊇ COVERED ⊇ UNCOVERED: a more protective class may always
    carry a load that requires a less protective one, never the reverse.

    Protection level:
    - UNCOVERED: 0 (open truck, cheapest)
    - COVERED: 1 (closed body, rain protection)
    - REFRIGERATED: 2 (active cooling)
    """
    UNCOVERED = "UNCOVERED"
    COVERED = "COVERED"
    REFRIGERATED = "REFRIGERATED"

    @property
    def protection_level(self) -> int:
        """Get the protection rank for this class."""
        return {
            VehicleClass.UNCOVERED: 0,
            VehicleClass.COVERED: 1,
            VehicleClass.REFRIGERATED: 2,
        }[self]

    def can_carry(self, required: "VehicleClass") -> bool:
        """Check if this class satisfies a *required* class."""
        return self.protection_level >= required.protection_level


class OrderStatus(str, Enum):
    """Order lifecycle status as seen by the dispatch core."""
    PENDING = "PENDING"                        # Waiting for a vehicle
    ASSIGNED = "ASSIGNED"                      # Fully loaded on one or more jobs
    ASSIGNED_PARTIAL = "ASSIGNED_PARTIAL"      # Only part of the quantity loaded
    FAILED_NO_CAPACITY = "FAILED_NO_CAPACITY"  # Fleet could not cover it


class VehicleStatus(str, Enum):
    """Vehicle availability status."""
    AVAILABLE = "AVAILABLE"      # Ready for dispatch
    BOOKED = "BOOKED"            # Committed for its booked_date
    MAINTENANCE = "MAINTENANCE"  # Under maintenance
    OFFLINE = "OFFLINE"          # Not available


class JobStatus(str, Enum):
    """Transport job lifecycle status."""
    SCHEDULED = "SCHEDULED"      # Planned, vehicle booked
    IN_PROGRESS = "IN_PROGRESS"  # Vehicle on the road
    COMPLETED = "COMPLETED"      # All stops done


class StopType(str, Enum):
    """Kind of stop in a route manifest."""
    PICKUP = "PICKUP"
    DROP = "DROP"
