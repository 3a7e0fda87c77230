"""
Core data models for FloodSense.

Every record here is created per request and serialized with ``to_dict()``
using the camelCase field names consumed by the presentation layer.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from core.errors import UnreachableFactorError


class RiskLevel(Enum):
    """Susceptibility band derived from a probability."""
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    VERY_HIGH = "Very High"


class FactorRisk(Enum):
    """Severity of a single conditioning factor in an explanation."""
    CRITICAL = "Critical"
    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]


SEVERITY_RANK = {
    FactorRisk.CRITICAL: 0,
    FactorRisk.HIGH: 1,
    FactorRisk.MODERATE: 2,
    FactorRisk.LOW: 3,
}


def risk_level_for(probability: float) -> RiskLevel:
    """Map a probability onto its risk band."""
    if probability < 0.25:
        return RiskLevel.LOW
    if probability < 0.5:
        return RiskLevel.MODERATE
    if probability < 0.75:
        return RiskLevel.HIGH
    return RiskLevel.VERY_HIGH


# Accepted labels, including the short forms used by the prototype router
LAND_USE_CLASSES = (
    "Urban Built-Up",
    "Agricultural Land",
    "Mixed Vegetation",
    "Forest",
    "Urban",
    "Agricultural",
    "Grassland",
)

LITHOLOGY_CLASSES = (
    "Alluvial Deposits",
    "Sedimentary Rock",
    "Volcanic Rock",
    "Metamorphic Rock",
    "Alluvium",
    "Volcanic",
    "Sedimentary",
)


@dataclass(frozen=True)
class Location:
    """A WGS84 point in decimal degrees."""
    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class FactorSet:
    """
    The eight conditioning factors for one location.

    Negative profile curvature is concave (water accumulates), positive is
    convex (water disperses).
    """
    elevation: float           # metres above sea level
    slope: float               # degrees
    aspect: float              # degrees from north
    profile_curvature: float
    distance_to_river: float   # metres
    rainfall: float            # mm/year
    land_use_class: str
    lithology: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elevation": self.elevation,
            "slope": self.slope,
            "aspect": self.aspect,
            "profileCurvature": self.profile_curvature,
            "distanceToRiver": self.distance_to_river,
            "rainfall": self.rainfall,
            "landUseClass": self.land_use_class,
            "lithology": self.lithology,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FactorSet":
        """Build from either camelCase or snake_case keys."""
        def pick(camel: str, snake: str):
            return data[camel] if camel in data else data[snake]

        return cls(
            elevation=float(data["elevation"]),
            slope=float(data["slope"]),
            aspect=float(data["aspect"]),
            profile_curvature=float(pick("profileCurvature", "profile_curvature")),
            distance_to_river=float(pick("distanceToRiver", "distance_to_river")),
            rainfall=float(data["rainfall"]),
            land_use_class=str(pick("landUseClass", "land_use_class")),
            lithology=str(data["lithology"]),
        )

    def check_ranges(self) -> None:
        """
        Raise UnreachableFactorError for values no extractor can produce.

        Only curvature and rainfall are unbounded here; their documented
        ranges are approximate.
        """
        numeric = {
            "elevation": self.elevation,
            "slope": self.slope,
            "aspect": self.aspect,
            "profileCurvature": self.profile_curvature,
            "distanceToRiver": self.distance_to_river,
            "rainfall": self.rainfall,
        }
        for name, value in numeric.items():
            if not math.isfinite(value):
                raise UnreachableFactorError(name, value, "a finite number")

        if self.elevation < 0:
            raise UnreachableFactorError("elevation", self.elevation, ">= 0")
        if not 0 <= self.slope <= 90:
            raise UnreachableFactorError("slope", self.slope, "0-90")
        if not 0 <= self.aspect <= 360:
            raise UnreachableFactorError("aspect", self.aspect, "0-360")
        if self.distance_to_river < 0:
            raise UnreachableFactorError("distanceToRiver", self.distance_to_river, ">= 0")
        if self.land_use_class not in LAND_USE_CLASSES:
            raise UnreachableFactorError("landUseClass", self.land_use_class, "a known class")
        if self.lithology not in LITHOLOGY_CLASSES:
            raise UnreachableFactorError("lithology", self.lithology, "a known class")


@dataclass(frozen=True)
class ModelPrediction:
    """Output of a single scorer."""
    probability: float
    confidence: float

    @property
    def risk_level(self) -> RiskLevel:
        return risk_level_for(self.probability)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "probability": self.probability,
            "confidence": self.confidence,
            "riskLevel": self.risk_level.value,
        }


@dataclass(frozen=True)
class EnsembleWeight:
    rf: float
    xgb: float

    def to_dict(self) -> Dict[str, float]:
        return {"rf": self.rf, "xgb": self.xgb}


@dataclass(frozen=True)
class EnsemblePrediction:
    """Stacked prediction with its two component probabilities."""
    probability: float
    confidence: float
    rf_probability: float
    xgb_probability: float
    ensemble_weight: EnsembleWeight

    @property
    def risk_level(self) -> RiskLevel:
        return risk_level_for(self.probability)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "probability": self.probability,
            "confidence": self.confidence,
            "riskLevel": self.risk_level.value,
            "rfProbability": self.rf_probability,
            "xgbProbability": self.xgb_probability,
            "ensembleWeight": self.ensemble_weight.to_dict(),
        }


@dataclass(frozen=True)
class FactorImportanceItem:
    """One line of the factor explanation."""
    factor: str
    value: float
    risk: FactorRisk
    message: str
    icon: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "factor": self.factor,
            "value": self.value,
            "risk": self.risk.value,
            "message": self.message,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class TrainingPoint:
    factors: FactorSet
    flooded: bool


@dataclass
class AnalysisRecord:
    """Full result of analysing one location."""
    location: Location
    factors: FactorSet
    prediction: EnsemblePrediction
    factor_importance: List[FactorImportanceItem] = field(default_factory=list)
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "factors": self.factors.to_dict(),
            "prediction": self.prediction.to_dict(),
            "factorImportance": [item.to_dict() for item in self.factor_importance],
            "timestamp": self.timestamp,
        }
