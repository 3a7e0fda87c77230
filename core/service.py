"""
Flood Analysis Service - the request-facing entry into the pipeline.

Construct one service at process start (``create_service``) and hand it to
whatever serves requests. The service owns the combiner, so scorer readiness
is shared across requests through it and nowhere else.
"""

import logging
from datetime import datetime, timezone
from functools import partial
from typing import Any, Dict, List, Optional

import numpy as np

from core import config
from core.boundary import BoundaryValidator
from core.config import Settings
from core.models import AnalysisRecord, Location
from inference.bagging import BaggedScorer
from inference.boosting import BoostedScorer
from inference.ensemble import StackingCombiner
from loaders.geo_factors import FACTOR_NAMES, FactorExtractor, location_rng

log = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class FloodAnalysisService:
    """Boundary check, factor extraction, ensemble scoring and explanation."""

    def __init__(
        self,
        extractor: FactorExtractor,
        predictor: StackingCombiner,
        boundary: BoundaryValidator,
        settings: Optional[Settings] = None,
    ):
        self.extractor = extractor
        self.predictor = predictor
        self.boundary = boundary
        self.settings = settings or Settings()

    def analyze_location(self, latitude: float, longitude: float) -> AnalysisRecord:
        """
        Analyze flood susceptibility for one point.

        Raises:
            OutOfBoundsError: if the point is outside the study area.
            UnreachableFactorError: only with strict factor ranges enabled.
        """
        location = Location(latitude=latitude, longitude=longitude)
        self.boundary.check(location)

        factors = self.extractor.extract(location)
        if self.settings.strict_factor_ranges:
            factors.check_ranges()

        prediction = self.predictor.predict(factors)
        importance = self.predictor.analyze_factors(factors)

        log.info(
            f"Analyzed ({latitude:.5f}, {longitude:.5f}): "
            f"{prediction.risk_level.value} (p={prediction.probability:.3f}, "
            f"conf={prediction.confidence:.3f}, {len(importance)} factors flagged)"
        )

        return AnalysisRecord(
            location=location,
            factors=factors,
            prediction=prediction,
            factor_importance=importance,
            timestamp=_utc_timestamp(),
        )

    def get_factor_details(self, latitude: float, longitude: float, factor: str) -> Dict[str, Any]:
        """Extract factors for a point and return the one named."""
        if factor not in FACTOR_NAMES:
            raise ValueError(f"Unknown factor {factor!r}; expected one of {FACTOR_NAMES}")

        location = Location(latitude=latitude, longitude=longitude)
        factors = self.extractor.extract(location).to_dict()
        return {
            "location": location.to_dict(),
            "factor": factor,
            "value": factors[factor],
            "timestamp": _utc_timestamp(),
        }

    def get_model_info(self) -> Dict[str, Any]:
        """Static model metadata plus current readiness."""
        return {
            "modelType": config.MODEL_TYPE,
            "algorithm": config.ALGORITHM,
            "trained": self.predictor.is_trained(),
            "accuracy": dict(config.ACCURACY),
            "studyReference": config.STUDY_REFERENCE,
            "factorsUsed": config.FACTORS_USED,
            "trainingArea": config.TRAINING_AREA,
        }

    @staticmethod
    def get_flood_prone_areas() -> Dict[str, List[Dict[str, Any]]]:
        return {
            "areas": [
                {
                    "name": name,
                    "latitude": lat,
                    "longitude": lon,
                    "description": description,
                    "riskLevel": risk_level,
                }
                for name, lat, lon, description, risk_level in config.FLOOD_PRONE_AREAS
            ]
        }

    @staticmethod
    def health_check() -> str:
        return "OK"


def create_service(settings: Optional[Settings] = None) -> FloodAnalysisService:
    """
    Wire a service from settings (environment when omitted).

    With a seed, extraction is keyed on seed and location so the same point
    always yields the same factors for the lifetime of the service.
    """
    settings = settings or Settings.from_env()
    if settings.seed is None:
        extractor = FactorExtractor()
    else:
        extractor = FactorExtractor(rng_factory=partial(location_rng, settings.seed))

    predictor = StackingCombiner(
        rf_model=BaggedScorer(num_trees=settings.num_trees),
        xgb_model=BoostedScorer(
            num_rounds=settings.num_rounds,
            learning_rate=settings.learning_rate,
        ),
        rng=np.random.default_rng(settings.seed),
    )
    log.info(
        f"FloodAnalysisService ready (boundary={settings.boundary_mode}, "
        f"seed={settings.seed})"
    )
    return FloodAnalysisService(
        extractor=extractor,
        predictor=predictor,
        boundary=BoundaryValidator(settings.boundary_mode),
        settings=settings,
    )
