"""
Error types raised by the flood susceptibility pipeline.
"""

from typing import Optional


class FloodSenseError(Exception):
    """Base class for all FloodSense errors."""


class NotReadyError(FloodSenseError):
    """A scorer was asked to predict before it was trained."""

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(f"{model_name} must be trained before prediction")


class OutOfBoundsError(FloodSenseError):
    """A location falls outside the supported study area."""

    def __init__(self, latitude: float, longitude: float, mode: str = "polygon"):
        self.latitude = latitude
        self.longitude = longitude
        self.mode = mode
        super().__init__(
            f"Location ({latitude:.5f}, {longitude:.5f}) is outside Davao City "
            f"({mode} boundary)"
        )


class UnreachableFactorError(FloodSenseError):
    """A conditioning factor holds a value outside its physical range."""

    def __init__(self, factor: str, value, expected: Optional[str] = None):
        self.factor = factor
        self.value = value
        message = f"Factor '{factor}' has unreachable value {value!r}"
        if expected:
            message += f" (expected {expected})"
        super().__init__(message)
