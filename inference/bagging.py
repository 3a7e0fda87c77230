"""
Bagged Scorer - averaged-vote heuristic simulating a random forest.

Each simulated tree scores the same fixed rule table but drops some feature
groups depending on its index, which stands in for bootstrap feature
sampling. The forest probability is the mean vote; confidence falls with
vote variance.
"""

import logging
from typing import List, Sequence

import numpy as np

from core.errors import NotReadyError
from core.models import FactorSet, ModelPrediction, TrainingPoint

log = logging.getLogger(__name__)

# Term weights
DISTANCE_WEIGHT = 1.5
SLOPE_WEIGHT = 1.2
RAINFALL_WEIGHT = 1.0
LAND_USE_WEIGHT = 1.0
CURVATURE_WEIGHT = 0.8
ELEVATION_WEIGHT = 0.8


def distance_score(distance: float) -> float:
    if distance < 50:
        return 0.9
    if distance < 200:
        return 0.6
    if distance < 500:
        return 0.4
    return 0.2


def slope_score(slope: float) -> float:
    if slope < 5:
        return 0.8
    if slope < 15:
        return 0.5
    if slope < 30:
        return 0.3
    return 0.1


def rainfall_score(rainfall: float) -> float:
    if rainfall > 2200:
        return 0.7
    if rainfall > 1900:
        return 0.5
    return 0.3


def land_use_score(land_use: str) -> float:
    if land_use == "Urban Built-Up":
        return 0.7
    if land_use == "Agricultural Land":
        return 0.5
    return 0.3


def curvature_score(curvature: float) -> float:
    if curvature < -2:
        return 0.6
    if curvature < 0:
        return 0.4
    return 0.0


def elevation_score(elevation: float) -> float:
    if elevation < 50:
        return 0.7
    if elevation < 150:
        return 0.4
    return 0.0


class BaggedScorer:
    """
    Averaged-vote flood scorer.

    Feature groups are toggled per tree index ``i``:

    - distance to river dropped when ``i % 5 == 0``
    - slope dropped when ``i % 3 == 0``
    - rainfall dropped when ``i % 7 == 0``
    - land use dropped when ``i % 2 == 1``

    Elevation and curvature are always scored.
    """

    name = "Random Forest"

    def __init__(self, num_trees: int = 100):
        if num_trees < 1:
            raise ValueError(f"num_trees must be >= 1, got {num_trees}")
        self.num_trees = num_trees
        self.trained = False
        self.training_data: List[TrainingPoint] = []

    def train(self, points: Sequence[TrainingPoint]) -> None:
        """Store the points and mark the scorer ready. No weights are fitted."""
        self.training_data = list(points)
        self.trained = True
        log.info(f"{self.name} trained with {len(self.training_data)} points")

    def is_trained(self) -> bool:
        return self.trained

    def tree_vote(self, factors: FactorSet, tree_index: int) -> float:
        """Score one simulated tree."""
        score = 0.0
        weight = 0.0

        if tree_index % 5 != 0:
            score += distance_score(factors.distance_to_river)
            weight += DISTANCE_WEIGHT

        if tree_index % 3 != 0:
            score += slope_score(factors.slope)
            weight += SLOPE_WEIGHT

        if tree_index % 7 != 0:
            score += rainfall_score(factors.rainfall)
            weight += RAINFALL_WEIGHT

        if tree_index % 2 == 0:
            score += land_use_score(factors.land_use_class)
            weight += LAND_USE_WEIGHT

        score += curvature_score(factors.profile_curvature)
        weight += CURVATURE_WEIGHT

        score += elevation_score(factors.elevation)
        weight += ELEVATION_WEIGHT

        return score / weight if weight > 0 else 0.5

    def votes(self, factors: FactorSet) -> np.ndarray:
        return np.array([self.tree_vote(factors, i) for i in range(self.num_trees)])

    def predict(self, factors: FactorSet) -> ModelPrediction:
        """
        Predict flood susceptibility as the mean tree vote.

        Raises:
            NotReadyError: if ``train`` has not been called.
        """
        if not self.trained:
            raise NotReadyError(self.name)

        votes = self.votes(factors)
        probability = float(np.mean(votes))
        variance = float(np.var(votes))
        confidence = max(0.5, 1 - variance)

        log.debug(f"{self.name}: p={probability:.4f} var={variance:.5f}")
        return ModelPrediction(probability=probability, confidence=confidence)
