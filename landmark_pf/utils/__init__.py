"""
Utility functions for the landmark particle filter.
"""

from .angles import wrap_angle, weighted_circular_mean

__all__ = [
    'wrap_angle',
    'weighted_circular_mean',
]
