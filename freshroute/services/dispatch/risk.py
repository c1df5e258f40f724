"""
Environmental risk evaluation.

Decides the least protective vehicle class that still keeps a load safe,
given the product's handling rules, the trip distance and the weather at
pickup.

Rules (first match wins):
1. Product forces refrigeration        → REFRIGERATED
2. Ambient temp above max safe temp    → REFRIGERATED
3. Distance above max uncooled range   → REFRIGERATED
4. Raining                             → COVERED
5. Otherwise                           → UNCOVERED
"""
from dataclasses import dataclass
from typing import Iterable

from freshroute.models.enums import VehicleClass

REASON_STRICT_PRODUCT = "strict product requirement"
REASON_AMBIENT_HEAT = "ambient heat exceeds safe threshold"
REASON_DISTANCE = "distance exceeds spoilage-safe range"
REASON_RAIN = "precipitation protection"
REASON_NO_RISK = "no elevated risk detected"


@dataclass(frozen=True)
class ProductSpecData:
    """Handling rules for one product variant."""
    variant_name: str
    optimal_temp_c: float
    max_safe_temp_c: float
    max_distance_uncooled_km: float
    force_refrigeration: bool = False


@dataclass(frozen=True)
class WeatherSnapshot:
    """Conditions at a pickup point on a given day."""
    temperature_c: float
    is_raining: bool
    condition: str = "Unknown"


@dataclass(frozen=True)
class ClassRequirement:
    """The vehicle class a load needs, and why."""
    vehicle_class: VehicleClass
    reason: str


def required_vehicle_class(
    spec: ProductSpecData,
    distance_km: float,
    weather: WeatherSnapshot,
) -> ClassRequirement:
    """Evaluate the risk rules for one load."""
    if spec.force_refrigeration:
        return ClassRequirement(VehicleClass.REFRIGERATED, REASON_STRICT_PRODUCT)
    if weather.temperature_c > spec.max_safe_temp_c:
        return ClassRequirement(VehicleClass.REFRIGERATED, REASON_AMBIENT_HEAT)
    if distance_km > spec.max_distance_uncooled_km:
        return ClassRequirement(VehicleClass.REFRIGERATED, REASON_DISTANCE)
    if weather.is_raining:
        return ClassRequirement(VehicleClass.COVERED, REASON_RAIN)
    return ClassRequirement(VehicleClass.UNCOVERED, REASON_NO_RISK)


def strictest(requirements: Iterable[ClassRequirement]) -> ClassRequirement:
    """
    Pick the most protective requirement.

    Ties keep the first one seen, so a group's reason comes from its
    earliest strictest order.
    """
    best = None
    for requirement in requirements:
        if best is None or (
            requirement.vehicle_class.protection_level
            > best.vehicle_class.protection_level
        ):
            best = requirement
    if best is None:
        raise ValueError("strictest() needs at least one requirement")
    return best
