"""Analysis layer - Low-level signal analysis.

This layer turns raw frames into measurements:
- Fundamental frequency estimation (autocorrelation)
"""

from .pitch import PitchEstimator, EstimatorConfig

__all__ = [
    "PitchEstimator",
    "EstimatorConfig",
]
