"""
Core module for FloodSense.
Contains data models, configuration, errors and the study-area boundary.
"""

from core.models import (
    Location,
    FactorSet,
    ModelPrediction,
    EnsemblePrediction,
    EnsembleWeight,
    FactorImportanceItem,
    TrainingPoint,
    AnalysisRecord,
    RiskLevel,
    FactorRisk,
    risk_level_for,
)
from core.errors import FloodSenseError, NotReadyError, OutOfBoundsError, UnreachableFactorError
from core.config import Settings
from core.boundary import BoundingBox, BoundaryValidator, point_in_polygon

__all__ = [
    # Models
    "Location",
    "FactorSet",
    "ModelPrediction",
    "EnsemblePrediction",
    "EnsembleWeight",
    "FactorImportanceItem",
    "TrainingPoint",
    "AnalysisRecord",
    "RiskLevel",
    "FactorRisk",
    "risk_level_for",
    # Errors
    "FloodSenseError",
    "NotReadyError",
    "OutOfBoundsError",
    "UnreachableFactorError",
    # Config and boundary
    "Settings",
    "BoundingBox",
    "BoundaryValidator",
    "point_in_polygon",
]
