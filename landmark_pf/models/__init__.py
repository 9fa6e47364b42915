"""
Motion and measurement models for landmark particle filter localization.
"""

from .motion_models import UnicycleMotionModel

from .measurement_models import (
    transform_to_world,
    bivariate_gaussian_pdf,
)

__all__ = [
    # Motion models
    'UnicycleMotionModel',

    # Measurement models
    'transform_to_world',
    'bivariate_gaussian_pdf',
]
