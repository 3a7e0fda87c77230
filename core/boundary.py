"""
Study-area boundary checks.

Points are screened here before any factor extraction happens. Two boundary
shapes exist: a simplified mainland ring of Davao City (authoritative) and the
looser latitude/longitude rectangle the API layer used to accept.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Sequence, Tuple

from core.errors import OutOfBoundsError
from core.models import Location

log = logging.getLogger(__name__)


@dataclass
class BoundingBox:
    """
    Geographic bounding box.

    All coordinates are in decimal degrees (WGS84).
    """
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    @property
    def center_latitude(self) -> float:
        return (self.min_latitude + self.max_latitude) / 2

    @property
    def center_longitude(self) -> float:
        return (self.min_longitude + self.max_longitude) / 2

    def contains(self, lat: float, lon: float) -> bool:
        """Check if a point is inside this bounding box (edges included)."""
        return (self.min_latitude <= lat <= self.max_latitude and
                self.min_longitude <= lon <= self.max_longitude)

    def to_dict(self) -> Dict:
        return asdict(self)


DAVAO_BOUNDING_BOX = BoundingBox(
    min_latitude=6.8,
    max_latitude=7.6,
    min_longitude=125.2,
    max_longitude=125.8,
)

# Simplified mainland outline as (lat, lon) vertices, clockwise from the
# south-west corner near Mt. Apo. Samal Island is excluded.
DAVAO_MAINLAND_RING: List[Tuple[float, float]] = [
    (7.00, 125.22),
    (7.10, 125.21),
    (7.25, 125.23),
    (7.40, 125.25),
    (7.52, 125.30),
    (7.58, 125.38),
    (7.55, 125.50),
    (7.45, 125.58),
    (7.33, 125.65),
    (7.26, 125.68),
    (7.17, 125.66),
    (7.10, 125.64),
    (7.06, 125.62),
    (7.03, 125.57),
    (7.01, 125.52),
    (6.98, 125.46),
    (6.96, 125.40),
    (6.97, 125.30),
]


def point_in_polygon(lat: float, lon: float, ring: Sequence[Tuple[float, float]]) -> bool:
    """
    Ray-casting containment test.

    The ring is a sequence of (lat, lon) vertices; closing the ring is
    implicit. Points exactly on an edge may fall either way.
    """
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        yi, xi = ring[i]
        yj, xj = ring[j]
        if (yi > lat) != (yj > lat):
            cross_lon = (xj - xi) * (lat - yi) / (yj - yi) + xi
            if lon < cross_lon:
                inside = not inside
        j = i
    return inside


class BoundaryValidator:
    """Screens locations against the configured study-area boundary."""

    def __init__(self, mode: str = "polygon"):
        if mode not in ("polygon", "rectangle", "none"):
            raise ValueError(f"Unknown boundary mode: {mode!r}")
        self.mode = mode
        self.ring = DAVAO_MAINLAND_RING
        self.box = DAVAO_BOUNDING_BOX

    def contains(self, location: Location) -> bool:
        if self.mode == "none":
            return True
        if self.mode == "rectangle":
            return self.box.contains(location.latitude, location.longitude)
        return point_in_polygon(location.latitude, location.longitude, self.ring)

    def check(self, location: Location) -> None:
        """Raise OutOfBoundsError when the location is outside the boundary."""
        if not self.contains(location):
            log.info(
                f"Rejected ({location.latitude:.5f}, {location.longitude:.5f}) "
                f"outside {self.mode} boundary"
            )
            raise OutOfBoundsError(location.latitude, location.longitude, self.mode)
