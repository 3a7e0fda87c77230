"""
Factor importance explainer.

Evaluates a fixed checklist against a FactorSet, independently of either
scorer, and returns the triggered items ordered by severity. Items with the
same severity keep checklist order.
"""

import math
from typing import List

from core.models import FactorImportanceItem, FactorRisk, FactorSet


def _whole(value: float) -> int:
    """Round half up for display."""
    return int(math.floor(value + 0.5))


def analyze_factors(factors: FactorSet) -> List[FactorImportanceItem]:
    """Explain which conditioning factors raise flood risk at this point."""
    items: List[FactorImportanceItem] = []

    distance = factors.distance_to_river
    if distance < 50:
        items.append(FactorImportanceItem(
            factor="Distance to River",
            value=distance,
            risk=FactorRisk.CRITICAL,
            message=f"Extremely close to river ({_whole(distance)}m). High flood risk zone.",
            icon="🌊",
        ))
    elif distance < 200:
        items.append(FactorImportanceItem(
            factor="Distance to River",
            value=distance,
            risk=FactorRisk.HIGH,
            message=f"Near river ({_whole(distance)}m). Significant flood risk.",
            icon="💧",
        ))

    if factors.slope < 5:
        items.append(FactorImportanceItem(
            factor="Slope Gradient",
            value=factors.slope,
            risk=FactorRisk.CRITICAL if factors.slope < 2 else FactorRisk.HIGH,
            message=f"Very flat terrain ({factors.slope:.1f}°). Water accumulation likely.",
            icon="📐",
        ))

    rainfall = factors.rainfall
    if rainfall > 2200:
        items.append(FactorImportanceItem(
            factor="Regional Rainfall",
            value=rainfall,
            risk=FactorRisk.HIGH,
            message=(
                f"High rainfall zone ({_whole(rainfall)}mm/year). "
                "Located in Mindanao high-precipitation area."
            ),
            icon="🌧️",
        ))
    elif rainfall > 2000:
        items.append(FactorImportanceItem(
            factor="Regional Rainfall",
            value=rainfall,
            risk=FactorRisk.MODERATE,
            message=f"Moderate-high rainfall ({_whole(rainfall)}mm/year).",
            icon="☔",
        ))

    if factors.land_use_class == "Urban Built-Up":
        items.append(FactorImportanceItem(
            factor="Land Use",
            value=0,
            risk=FactorRisk.HIGH,
            message="Urban built-up area. Increased surface runoff and reduced water absorption.",
            icon="🏢",
        ))

    if factors.elevation < 50:
        items.append(FactorImportanceItem(
            factor="Elevation",
            value=factors.elevation,
            risk=FactorRisk.HIGH,
            message=f"Low elevation ({_whole(factors.elevation)}m). Vulnerable to flooding.",
            icon="⬇️",
        ))

    if factors.profile_curvature < -2:
        items.append(FactorImportanceItem(
            factor="Terrain Curvature",
            value=factors.profile_curvature,
            risk=FactorRisk.MODERATE,
            message="Concave terrain. Natural water accumulation point.",
            icon="🏞️",
        ))

    if factors.lithology == "Alluvial Deposits":
        items.append(FactorImportanceItem(
            factor="Lithology",
            value=0,
            risk=FactorRisk.MODERATE,
            message="Alluvial deposits. Permeable soil but prone to saturation.",
            icon="🪨",
        ))

    # sorted() is stable
    return sorted(items, key=lambda item: item.risk.rank)
