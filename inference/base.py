"""
Scorer contract shared by the bagged and boosted scorers.
"""

from typing import Protocol, Sequence, runtime_checkable

from core.models import FactorSet, ModelPrediction, TrainingPoint


@runtime_checkable
class Scorer(Protocol):
    """Anything that can be trained and then score a FactorSet."""

    name: str

    def train(self, points: Sequence[TrainingPoint]) -> None:
        ...

    def predict(self, factors: FactorSet) -> ModelPrediction:
        ...

    def is_trained(self) -> bool:
        ...
