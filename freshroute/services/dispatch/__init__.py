"""
Dispatch planning: risk rules, fleet allocation and route construction.
"""
from freshroute.services.dispatch.allocator import (
    AllocationResult,
    Assignment,
    FleetPool,
    FleetVehicle,
    acceptable_classes,
    allocate,
)
from freshroute.services.dispatch.exceptions import (
    CollaboratorError,
    DispatchError,
    InsufficientCapacityError,
    UnknownVariantError,
    WeatherUnavailableError,
)
from freshroute.services.dispatch.geodesy import Coordinate, distance_km
from freshroute.services.dispatch.planner import (
    BatchPlanResult,
    DispatchPlanner,
    PlanningError,
    SingleOrderResult,
    UnallocatedOrder,
)
from freshroute.services.dispatch.risk import (
    ClassRequirement,
    ProductSpecData,
    WeatherSnapshot,
    required_vehicle_class,
    strictest,
)
from freshroute.services.dispatch.route_optimizer import PlannedStop, RouteOrder, plan_route
from freshroute.services.dispatch.store import (
    OrderRecord,
    PlannedJob,
    PlanningStore,
    SqlAlchemyPlanningStore,
)

__all__ = [
    "AllocationResult",
    "Assignment",
    "FleetPool",
    "FleetVehicle",
    "acceptable_classes",
    "allocate",
    "CollaboratorError",
    "DispatchError",
    "InsufficientCapacityError",
    "UnknownVariantError",
    "WeatherUnavailableError",
    "Coordinate",
    "distance_km",
    "BatchPlanResult",
    "DispatchPlanner",
    "PlanningError",
    "SingleOrderResult",
    "UnallocatedOrder",
    "ClassRequirement",
    "ProductSpecData",
    "WeatherSnapshot",
    "required_vehicle_class",
    "strictest",
    "PlannedStop",
    "RouteOrder",
    "plan_route",
    "OrderRecord",
    "PlannedJob",
    "PlanningStore",
    "SqlAlchemyPlanningStore",
]
