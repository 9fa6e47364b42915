"""Landmark-based particle filter localization.

This package estimates a planar vehicle pose from odometry and noisy
observations of landmarks in a known map:
- types: particles, observations, landmarks and the landmark map
- config: filter configuration
- estimators: the particle filter
- models: motion and measurement models
- utils: angle helpers
- eval: visualization of the particle population
"""

from landmark_pf.config import ParticleFilterConfig
from landmark_pf.estimators import ParticleFilter
from landmark_pf.types import (
    UNASSIGNED_ID,
    LandmarkMap,
    LandmarkObservation,
    MapLandmark,
    NoiseStd,
    Particle,
)

__version__ = "0.1.0"

__all__ = [
    "ParticleFilter",
    "ParticleFilterConfig",
    "Particle",
    "LandmarkObservation",
    "MapLandmark",
    "LandmarkMap",
    "NoiseStd",
    "UNASSIGNED_ID",
]
