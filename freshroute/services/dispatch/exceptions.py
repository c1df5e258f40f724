"""
Dispatch planning exceptions.
"""


class DispatchError(Exception):
    """Base class for dispatch planning errors."""
    pass


class UnknownVariantError(DispatchError):
    """Raised when an order names a product variant with no ProductSpec."""

    def __init__(self, variant: str):
        self.variant = variant
        super().__init__(f"No product spec for variant '{variant}'")


class InsufficientCapacityError(DispatchError):
    """Raised when the fleet cannot cover an order's quantity."""

    def __init__(self, shortage_kg: int, message: str = ""):
        self.shortage_kg = shortage_kg
        super().__init__(message or f"Fleet short by {shortage_kg} kg")


class CollaboratorError(DispatchError):
    """Raised when a persistence, weather or geocoding collaborator fails."""
    pass


class WeatherUnavailableError(CollaboratorError):
    """Raised when the weather provider cannot return conditions."""
    pass
