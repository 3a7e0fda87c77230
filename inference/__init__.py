"""
Inference module for FloodSense.
Provides the bagged and boosted scorers, the stacking combiner and the
factor explainer.
"""

from inference.base import Scorer
from inference.bagging import BaggedScorer
from inference.boosting import BoostedScorer
from inference.ensemble import StackingCombiner, generate_synthetic_training_data
from inference.explainer import analyze_factors

__all__ = [
    "Scorer",
    "BaggedScorer",
    "BoostedScorer",
    "StackingCombiner",
    "generate_synthetic_training_data",
    "analyze_factors",
]
