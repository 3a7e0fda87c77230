"""
Geo Factor Extractor - derive the eight conditioning factors for a point.

No GIS rasters are queried. Each factor is simulated from the location and a
seeded random generator, following terrain patterns reported for Davao City:
low coastal plains around the city centre, rising toward Mt. Apo inland, with
more rainfall on the Pacific (eastern) side.
"""

import logging
import math
from typing import Callable, Optional

import numpy as np

from core import config
from core.models import FactorSet, Location

log = logging.getLogger(__name__)

FACTOR_NAMES = (
    "elevation",
    "slope",
    "aspect",
    "profileCurvature",
    "distanceToRiver",
    "rainfall",
    "landUseClass",
    "lithology",
)


RngFactory = Callable[[Location], np.random.Generator]


def location_rng(seed: int, location: Location) -> np.random.Generator:
    """Generator keyed on the seed and the exact bits of both coordinates."""
    coords = np.array([location.latitude, location.longitude], dtype=np.float64).view(np.uint64)
    return np.random.default_rng(np.random.SeedSequence([seed, *(int(c) for c in coords)]))


def _degree_distance(lat: float, lon: float, ref_lat: float, ref_lon: float) -> float:
    return math.sqrt((lat - ref_lat) ** 2 + (lon - ref_lon) ** 2)


class FactorExtractor:
    """
    Derives a FactorSet from a Location.

    Factors are computed in dependency order: elevation drives slope, land use
    and lithology; slope drives curvature.

    With ``rng_factory`` set, every ``extract`` call draws from a fresh
    generator built for that location, so repeated calls for one point agree.
    Otherwise all draws come from ``rng`` (unseeded when omitted).
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        rng_factory: Optional[RngFactory] = None,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.rng_factory = rng_factory

    def _uniform(self, low: float, high: float) -> float:
        return float(self.rng.uniform(low, high))

    def distance_from_coast_km(self, location: Location) -> float:
        ref_lat, ref_lon = config.COAST_REFERENCE
        return _degree_distance(location.latitude, location.longitude, ref_lat, ref_lon) * config.KM_PER_DEGREE

    def elevation(self, location: Location) -> float:
        return max(0.0, min(500.0, self.distance_from_coast_km(location) * 50))

    def slope(self, elevation: float) -> float:
        if elevation < 50:
            return self._uniform(0, 5)
        if elevation < 200:
            return self._uniform(5, 20)
        return self._uniform(20, 50)

    def aspect(self) -> float:
        return self._uniform(0, 360)

    def profile_curvature(self, slope: float) -> float:
        # Flat ground tends to be concave
        if slope < 5:
            return self._uniform(-5, -2)
        return self._uniform(-3, 3)

    def is_near_known_river(self, location: Location) -> bool:
        return any(
            _degree_distance(location.latitude, location.longitude, lat, lon) < config.FLOOD_PRONE_RADIUS_DEG
            for lat, lon in config.RIVER_PROXIMITY_POINTS
        )

    def distance_to_river(self, location: Location) -> float:
        if self.is_near_known_river(location):
            return self._uniform(0, 100)
        return self._uniform(100, 2100)

    def rainfall(self, location: Location) -> float:
        if location.longitude > config.EASTERN_LONGITUDE:
            base = config.EASTERN_BASE_RAINFALL
        else:
            base = config.WESTERN_BASE_RAINFALL
        return base + self._uniform(-config.RAINFALL_JITTER, config.RAINFALL_JITTER)

    def is_urban(self, location: Location) -> bool:
        lat, lon = config.CITY_CENTER
        return _degree_distance(location.latitude, location.longitude, lat, lon) < config.URBAN_RADIUS_DEG

    def land_use_class(self, location: Location, elevation: float) -> str:
        if self.is_urban(location):
            return "Urban Built-Up"
        if elevation < 100:
            return "Agricultural Land"
        if elevation < 300:
            return "Mixed Vegetation"
        return "Forest"

    @staticmethod
    def lithology(elevation: float) -> str:
        if elevation < 50:
            return "Alluvial Deposits"
        if elevation < 200:
            return "Sedimentary Rock"
        if elevation < 500:
            return "Volcanic Rock"
        return "Metamorphic Rock"

    def extract(self, location: Location) -> FactorSet:
        """Extract all eight conditioning factors for a location."""
        if self.rng_factory is not None:
            return FactorExtractor(rng=self.rng_factory(location))._derive(location)
        return self._derive(location)

    def _derive(self, location: Location) -> FactorSet:
        elevation = self.elevation(location)
        slope = self.slope(elevation)
        aspect = self.aspect()
        curvature = self.profile_curvature(slope)
        distance = self.distance_to_river(location)
        rainfall = self.rainfall(location)

        factors = FactorSet(
            elevation=elevation,
            slope=slope,
            aspect=aspect,
            profile_curvature=curvature,
            distance_to_river=distance,
            rainfall=rainfall,
            land_use_class=self.land_use_class(location, elevation),
            lithology=self.lithology(elevation),
        )
        log.debug(
            f"Factors at ({location.latitude:.4f}, {location.longitude:.4f}): "
            f"elev={elevation:.1f}m slope={slope:.1f}° river={distance:.0f}m"
        )
        return factors
