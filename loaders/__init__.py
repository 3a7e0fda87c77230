"""
Data loaders for FloodSense.

Includes:
- Conditioning factor extraction (simulated from Davao City terrain patterns)
"""

from loaders.geo_factors import FactorExtractor, FACTOR_NAMES

__all__ = [
    "FactorExtractor",
    "FACTOR_NAMES",
]
