"""
Landmark measurement models.

Provides the pieces of the landmark observation likelihood:
- Rigid 2D transform of observations from the vehicle frame to the world frame
- Axis-independent bivariate Gaussian density of an observation about a landmark

All models include input validation.
"""

from typing import Union

import numpy as np

from landmark_pf.types import NoiseStd


def transform_to_world(pose: np.ndarray, obs_xy: np.ndarray) -> np.ndarray:
    """
    Transform observations from a vehicle frame to the world frame.

    With the vehicle at (px, py) and heading theta:
        world_x = cos(theta) * obs_x - sin(theta) * obs_y + px
        world_y = sin(theta) * obs_x + cos(theta) * obs_y + py

    Args:
        pose: Vehicle pose [px, py, theta], shape (3,).
        obs_xy: Observations in the vehicle frame, shape (M, 2) or (2,).

    Returns:
        World-frame observations, same shape as obs_xy.

    Example:
        >>> transform_to_world(np.array([4.0, 5.0, -np.pi / 2]), np.array([2.0, 2.0]))
        array([6., 3.])
    """
    pose = np.asarray(pose, dtype=np.float64)
    if pose.shape != (3,):
        raise ValueError(f"pose must have shape (3,), got {pose.shape}")

    obs_xy = np.asarray(obs_xy, dtype=np.float64)
    single = obs_xy.shape == (2,)
    O = obs_xy.reshape(-1, 2) if single or obs_xy.size == 0 else obs_xy
    if O.ndim != 2 or O.shape[1] != 2:
        raise ValueError(f"obs_xy must have shape (M, 2) or (2,), got {obs_xy.shape}")

    px, py, theta = pose
    c, s = np.cos(theta), np.sin(theta)
    world = np.column_stack([
        c * O[:, 0] - s * O[:, 1] + px,
        s * O[:, 0] + c * O[:, 1] + py,
    ])
    return world[0] if single else world


def bivariate_gaussian_pdf(
    dx: Union[float, np.ndarray],
    dy: Union[float, np.ndarray],
    std: NoiseStd,
) -> Union[float, np.ndarray]:
    """
    Density of an axis-independent 2D Gaussian.

        p = 1 / (2π σx σy) * exp(-0.5 * ((dx/σx)² + (dy/σy)²))

    Args:
        dx: Observation minus landmark, x-axis (meters).
        dy: Observation minus landmark, y-axis (meters).
        std: Measurement standard deviations; only std.x and std.y are used.

    Returns:
        Density value(s). The peak, at dx = dy = 0, is 1 / (2π σx σy).

    Raises:
        ValueError: If σx or σy is not strictly positive.
    """
    sig_x, sig_y = float(std[0]), float(std[1])
    if sig_x <= 0 or sig_y <= 0:
        raise ValueError(
            f"Landmark std must be positive, got sigma_x={sig_x}, sigma_y={sig_y}"
        )

    norm = 1.0 / (2.0 * np.pi * sig_x * sig_y)
    exponent = -0.5 * ((np.asarray(dx) / sig_x) ** 2 + (np.asarray(dy) / sig_y) ** 2)
    density = norm * np.exp(exponent)
    if np.ndim(density) == 0:
        return float(density)
    return density
