"""
State estimation algorithms for landmark-based localization.

Available estimators:
    - Particle Filter (PF) with nearest-neighbor landmark association
"""

from landmark_pf.estimators.base import StateEstimator
from landmark_pf.estimators.particle_filter import ParticleFilter

__all__ = [
    "StateEstimator",
    "ParticleFilter",
]
