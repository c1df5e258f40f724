"""
Static hub-city geocoder.

Orders normally carry explicit coordinates. When they do not, the
location name is looked up in a small table of known logistics hubs.
"""
from typing import Mapping, Optional

from freshroute.services.dispatch.geodesy import Coordinate

SRI_LANKA_HUBS: dict[str, Coordinate] = {
    "colombo": Coordinate(6.9271, 79.8612),
    "dambulla": Coordinate(7.8731, 80.7718),
    "kandy": Coordinate(7.2906, 80.6337),
    "embilipitiya": Coordinate(6.2929, 80.8562),
    "nuwara_eliya": Coordinate(6.9497, 80.7891),
    "jaffna": Coordinate(9.6615, 80.0255),
    "hambantota": Coordinate(6.1429, 81.1212),
}


def normalize_hub_name(name: str) -> str:
    """'Nuwara Eliya ' -> 'nuwara_eliya'"""
    return "_".join(name.strip().lower().split())


class HubGeocoder:
    """Resolves hub names to coordinates."""

    def __init__(self, hubs: Optional[Mapping[str, Coordinate]] = None):
        source = SRI_LANKA_HUBS if hubs is None else hubs
        self.hubs = {normalize_hub_name(k): v for k, v in source.items()}

    def resolve(self, name: Optional[str]) -> Optional[Coordinate]:
        """Coordinate for *name*, or None when it is not a known hub."""
        if not name or not name.strip():
            return None
        return self.hubs.get(normalize_hub_name(name))
