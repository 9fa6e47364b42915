"""
Motion models (process models) for particle propagation.

Provides the unicycle / bicycle kinematic model driven by a linear velocity
and a yaw rate, in two regimes:
- Straight-line motion when the yaw rate is (numerically) zero
- Exact arc integration otherwise

The deterministic part is vectorized over an (N, 3) array of poses so the
estimator can propagate the whole population in one call.
"""

from typing import Optional

import numpy as np

from landmark_pf.config import DEFAULT_YAW_RATE_EPSILON
from landmark_pf.types import NoiseStd


class UnicycleMotionModel:
    """
    Velocity / yaw-rate motion model for planar vehicles.

    State: x = [px, py, theta]
    Control: u = [v, omega]

    Dynamics, |omega| >= eps (arc):
        px' = px + v/omega * (sin(theta + omega*dt) - sin(theta))
        py' = py + v/omega * (cos(theta) - cos(theta + omega*dt))
        theta' = theta + omega*dt

    Dynamics, |omega| < eps (straight line):
        px' = px + v*cos(theta)*dt
        py' = py + v*sin(theta)*dt
        theta' = theta

    The closed-form arc divides by omega, so it is numerically unstable as
    omega -> 0; the threshold eps selects the straight-line limit instead.

    Example:
        >>> model = UnicycleMotionModel()
        >>> model.f(np.array([0.0, 0.0, 0.0]), v=1.0, yaw_rate=np.pi / 2, dt=1.0)
        array([0.63661977, 0.63661977, 1.57079633])
    """

    def __init__(self, yaw_rate_epsilon: float = DEFAULT_YAW_RATE_EPSILON):
        if yaw_rate_epsilon <= 0:
            raise ValueError(
                f"yaw_rate_epsilon must be positive, got {yaw_rate_epsilon}"
            )
        self.yaw_rate_epsilon = yaw_rate_epsilon

    def is_straight(self, yaw_rate: float) -> bool:
        """True if the straight-line regime applies to this yaw rate."""
        return abs(yaw_rate) < self.yaw_rate_epsilon

    def f(self, poses: np.ndarray, v: float, yaw_rate: float, dt: float) -> np.ndarray:
        """
        Noise-free propagation of one or more poses.

        Args:
            poses: Pose [x, y, theta] of shape (3,), or poses of shape (N, 3).
            v: Linear velocity (m/s).
            yaw_rate: Yaw rate (rad/s).
            dt: Time step (s).

        Returns:
            Propagated poses, same shape as the input.
        """
        poses = np.asarray(poses, dtype=np.float64)
        single = poses.ndim == 1
        P = np.atleast_2d(poses)
        if P.ndim != 2 or P.shape[1] != 3:
            raise ValueError(f"poses must have shape (3,) or (N, 3), got {poses.shape}")

        theta = P[:, 2]
        out = P.copy()
        if self.is_straight(yaw_rate):
            out[:, 0] += v * np.cos(theta) * dt
            out[:, 1] += v * np.sin(theta) * dt
        else:
            theta_next = theta + yaw_rate * dt
            out[:, 0] += v / yaw_rate * (np.sin(theta_next) - np.sin(theta))
            out[:, 1] += v / yaw_rate * (np.cos(theta) - np.cos(theta_next))
            out[:, 2] = theta_next

        return out[0] if single else out

    def sample(
        self,
        poses: np.ndarray,
        v: float,
        yaw_rate: float,
        dt: float,
        std: NoiseStd,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        """
        Propagate poses and add zero-mean Gaussian noise per axis.

        Noise is drawn independently for every pose and every axis from
        N(0, std.x), N(0, std.y), N(0, std.theta).

        Args:
            poses: Poses of shape (N, 3).
            v: Linear velocity (m/s).
            yaw_rate: Yaw rate (rad/s).
            dt: Time step (s).
            std: Process noise standard deviations.
            rng: Random generator. If None, uses np.random.default_rng().

        Returns:
            Noisy propagated poses, shape (N, 3).
        """
        if rng is None:
            rng = np.random.default_rng()

        std = NoiseStd.from_sequence(std)
        propagated = np.atleast_2d(self.f(poses, v, yaw_rate, dt))
        noise = rng.normal(0.0, np.asarray(std, dtype=np.float64), size=propagated.shape)
        return propagated + noise
