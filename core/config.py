"""
Configuration for FloodSense.

Fixed reference geography and model metadata live here as module constants.
Runtime settings come from ``Settings``, which reads FLOODSENSE_* environment
variables on top of its defaults.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# REFERENCE GEOGRAPHY (Davao City)
# ═══════════════════════════════════════════════════════════════════════════
COAST_REFERENCE = (7.07, 125.61)
CITY_CENTER = (7.07, 125.61)
URBAN_RADIUS_DEG = 0.05
FLOOD_PRONE_RADIUS_DEG = 0.02
KM_PER_DEGREE = 111

# (name, lat, lon, description, risk level)
FLOOD_PRONE_AREAS = [
    ("Matina Pangi", 7.06, 125.61, "Known flood-prone area with urban development", "Very High"),
    ("Talomo", 7.05, 125.59, "Low-lying area near Talomo River", "High"),
    ("Buhangin", 7.08, 125.62, "Flood-prone coastal area", "High"),
    ("Davao River Basin", 7.07, 125.61, "Areas along Davao River", "High"),
]

# Only the first three drive the distance-to-river derivation
RIVER_PROXIMITY_POINTS = [(lat, lon) for _, lat, lon, _, _ in FLOOD_PRONE_AREAS[:3]]

EASTERN_LONGITUDE = 125.6
EASTERN_BASE_RAINFALL = 2200.0
WESTERN_BASE_RAINFALL = 1800.0
RAINFALL_JITTER = 200.0

# ═══════════════════════════════════════════════════════════════════════════
# MODEL METADATA
# ═══════════════════════════════════════════════════════════════════════════
RF_WEIGHT = 0.45
XGB_WEIGHT = 0.55

MODEL_TYPE = "Ensemble (Random Forest + XGBoost)"
ALGORITHM = "Stacking"
ACCURACY = {
    "randomForest": 0.85,
    "xgboost": 0.86,
    "ensemble": 0.87,
}
STUDY_REFERENCE = "Davao City Flood Susceptibility Mapping"
TRAINING_AREA = "Davao City, Mindanao, Philippines"
FACTORS_USED = 8

SYNTHETIC_POINTS_PER_CLASS = 50

BOUNDARY_MODES = ("polygon", "rectangle", "none")


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime settings for the analysis service."""
    seed: Optional[int] = None
    num_trees: int = 100
    num_rounds: int = 50
    learning_rate: float = 0.1
    boundary_mode: str = "polygon"
    strict_factor_ranges: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be >= 0, got {self.seed}")
        if self.num_trees < 1:
            raise ValueError(f"num_trees must be >= 1, got {self.num_trees}")
        if self.num_rounds < 1:
            raise ValueError(f"num_rounds must be >= 1, got {self.num_rounds}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be > 0, got {self.learning_rate}")
        if self.boundary_mode not in BOUNDARY_MODES:
            raise ValueError(
                f"boundary_mode must be one of {BOUNDARY_MODES}, got {self.boundary_mode!r}"
            )
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from FLOODSENSE_* environment variables."""
        settings = cls(
            seed=_env_int("FLOODSENSE_SEED", None),
            num_trees=_env_int("FLOODSENSE_NUM_TREES", 100),
            num_rounds=_env_int("FLOODSENSE_NUM_ROUNDS", 50),
            learning_rate=_env_float("FLOODSENSE_LEARNING_RATE", 0.1),
            boundary_mode=os.getenv("FLOODSENSE_BOUNDARY_MODE", "polygon"),
            strict_factor_ranges=_env_bool("FLOODSENSE_STRICT_FACTORS", False),
            log_level=os.getenv("FLOODSENSE_LOG_LEVEL", "INFO"),
        )
        log.debug(f"Loaded settings: {settings}")
        return settings
