"""
Angle wrapping and averaging utilities.

Headings are integrated without wrapping by the motion model, so any
summary of particle headings has to be computed on the circle.
"""

from typing import Optional, Union

import numpy as np


def wrap_angle(angle: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Wrap angle(s) to [-π, π] range.

    Args:
        angle: Angle in radians, scalar or array.

    Returns:
        Wrapped angle(s) in range [-π, π].

    Example:
        >>> wrap_angle(3.5 * np.pi)  # 630° -> -90°
        -1.5707963267948966
    """
    return np.arctan2(np.sin(angle), np.cos(angle))


def weighted_circular_mean(
    angles: np.ndarray, weights: Optional[np.ndarray] = None
) -> float:
    """
    Weighted mean direction of a set of angles.

    Computed as atan2(Σ wᵢ sin θᵢ, Σ wᵢ cos θᵢ), so headings that differ by
    multiples of 2π contribute identically.

    Args:
        angles: Angles in radians, shape (N,).
        weights: Non-negative weights, shape (N,). Uniform if None or if
            all weights are zero.

    Returns:
        Mean angle in [-π, π].

    Example:
        >>> weighted_circular_mean(np.array([np.pi - 0.1, -np.pi + 0.1]))  # ±π
    """
    angles = np.asarray(angles, dtype=float)
    if angles.size == 0:
        raise ValueError("Cannot average an empty set of angles")

    if weights is None:
        weights = np.ones_like(angles)
    else:
        weights = np.asarray(weights, dtype=float)
        if weights.shape != angles.shape:
            raise ValueError(
                f"weights shape {weights.shape} must match angles shape {angles.shape}"
            )
        if not np.any(weights > 0):
            weights = np.ones_like(angles)

    s = np.sum(weights * np.sin(angles))
    c = np.sum(weights * np.cos(angles))
    return float(wrap_angle(np.arctan2(s, c)))
