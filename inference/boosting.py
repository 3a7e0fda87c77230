"""
Boosted Scorer - sequential-correction heuristic simulating gradient boosting.

Starting from 0.5, each round pulls the running prediction toward the risk
of one focus factor (rotating through distance, slope, rainfall, land use)
plus elevation and curvature, which are corrected for every round.
Confidence rises as the round-to-round changes shrink.
"""

import logging
from typing import List, Sequence

import numpy as np

from core.errors import NotReadyError
from core.models import FactorSet, ModelPrediction, TrainingPoint

log = logging.getLogger(__name__)

ELEVATION_GRADIENT_WEIGHT = 0.8
CURVATURE_GRADIENT_WEIGHT = 0.7


def distance_risk(distance: float) -> float:
    if distance < 50:
        return 0.95
    if distance < 100:
        return 0.85
    if distance < 200:
        return 0.70
    if distance < 500:
        return 0.50
    if distance < 1000:
        return 0.30
    return 0.15


def slope_risk(slope: float) -> float:
    if slope < 2:
        return 0.90  # flat ground accumulates water
    if slope < 5:
        return 0.75
    if slope < 10:
        return 0.55
    if slope < 20:
        return 0.35
    if slope < 35:
        return 0.20
    return 0.10


def rainfall_risk(rainfall: float) -> float:
    if rainfall > 2400:
        return 0.85
    if rainfall > 2200:
        return 0.70
    if rainfall > 2000:
        return 0.60
    if rainfall > 1800:
        return 0.50
    return 0.40


LAND_USE_RISK = {
    "Urban Built-Up": 0.80,
    "Agricultural Land": 0.60,
    "Mixed Vegetation": 0.40,
    "Forest": 0.25,
}


def land_use_risk(land_use: str) -> float:
    return LAND_USE_RISK.get(land_use, 0.50)


def elevation_risk(elevation: float) -> float:
    if elevation < 20:
        return 0.85
    if elevation < 50:
        return 0.70
    if elevation < 100:
        return 0.55
    if elevation < 200:
        return 0.40
    return 0.25


def curvature_risk(curvature: float) -> float:
    if curvature < -3:
        return 0.80
    if curvature < -1:
        return 0.65
    if curvature < 0:
        return 0.55
    if curvature < 2:
        return 0.45
    return 0.35


# Focus factor per round, indexed by round % 4: (risk lookup, attribute, weight)
FOCUS_SCHEDULE = (
    (distance_risk, "distance_to_river", 1.5),
    (slope_risk, "slope", 1.2),
    (rainfall_risk, "rainfall", 1.0),
    (land_use_risk, "land_use_class", 1.1),
)


def convergence(predictions: Sequence[float]) -> float:
    """1 minus five times the mean absolute step change, floored at 0."""
    if len(predictions) < 2:
        return 0.0
    mean_change = float(np.mean(np.abs(np.diff(predictions))))
    return 1 - min(1.0, mean_change * 5)


class BoostedScorer:
    """Sequential-correction flood scorer."""

    name = "XGBoost"

    def __init__(self, num_rounds: int = 50, learning_rate: float = 0.1):
        if num_rounds < 1:
            raise ValueError(f"num_rounds must be >= 1, got {num_rounds}")
        self.num_rounds = num_rounds
        self.learning_rate = learning_rate
        self.trained = False
        self.training_data: List[TrainingPoint] = []

    def train(self, points: Sequence[TrainingPoint]) -> None:
        """Store the points and mark the scorer ready. No weights are fitted."""
        self.training_data = list(points)
        self.trained = True
        log.info(f"{self.name} trained with {len(self.training_data)} points")

    def is_trained(self) -> bool:
        return self.trained

    @staticmethod
    def gradient(factors: FactorSet, prediction: float, round_index: int) -> float:
        lookup, attribute, weight = FOCUS_SCHEDULE[round_index % 4]
        gradient = weight * (lookup(getattr(factors, attribute)) - prediction)
        gradient += ELEVATION_GRADIENT_WEIGHT * (elevation_risk(factors.elevation) - prediction)
        gradient += CURVATURE_GRADIENT_WEIGHT * (curvature_risk(factors.profile_curvature) - prediction)
        return gradient

    def trajectory(self, factors: FactorSet) -> List[float]:
        """Run all boosting rounds; returns the initial 0.5 plus one value per round."""
        prediction = 0.5
        predictions = [prediction]
        for round_index in range(self.num_rounds):
            prediction += self.learning_rate * self.gradient(factors, prediction, round_index)
            prediction = max(0.0, min(1.0, prediction))
            predictions.append(prediction)
        return predictions

    def predict(self, factors: FactorSet) -> ModelPrediction:
        """
        Predict flood susceptibility as the final boosted value.

        Raises:
            NotReadyError: if ``train`` has not been called.
        """
        if not self.trained:
            raise NotReadyError(self.name)

        predictions = self.trajectory(factors)
        probability = predictions[-1]
        confidence = min(0.95, 0.7 + convergence(predictions) * 0.25)

        log.debug(f"{self.name}: p={probability:.4f} after {self.num_rounds} rounds")
        return ModelPrediction(probability=probability, confidence=confidence)
