"""
Particle Filter for landmark-based pose localization.

The filter tracks a planar pose [x, y, theta] with a fixed-size population of
weighted particles. Each cycle runs:

    1. prediction()      - propagate particles through the velocity/yaw-rate
                           motion model with Gaussian process noise
    2. update_weights()  - associate observations with map landmarks
                           (nearest neighbor) and weight each particle by the
                           product of bivariate Gaussian likelihoods
    3. resample()        - draw a new population proportionally to weight
                           with the resampling wheel

Implements:
    - Recursive Bayes update p(x_k | z_1:k) ∝ p(z_k | x_k) p(x_k | z_1:k-1)
    - Particle propagation x_k^(i) ~ p(x_k | x_{k-1}^(i), u_k)
    - Weight update w_k^(i) = p(z_k | x_k^(i))
"""

import warnings
from typing import List, Optional, Sequence, Tuple

import numpy as np

from landmark_pf.config import ParticleFilterConfig
from landmark_pf.estimators.base import StateEstimator
from landmark_pf.models.measurement_models import bivariate_gaussian_pdf, transform_to_world
from landmark_pf.models.motion_models import UnicycleMotionModel
from landmark_pf.types import (
    UNASSIGNED_ID,
    LandmarkMap,
    LandmarkObservation,
    NoiseStd,
    Particle,
)
from landmark_pf.utils.angles import weighted_circular_mean, wrap_angle


class ParticleFilter(StateEstimator):
    """
    Particle Filter (Monte Carlo localization) with a known landmark map.

    Each particle is a pose hypothesis with an unnormalized importance
    weight. The population size is fixed by the configuration and never
    changes after init().

    All random draws use the generator owned by the instance, either
    injected through `rng` or created from `config.seed`.

    Attributes:
        config: Filter configuration.
        rng: Random generator used for every sampling call.
        motion_model: Velocity/yaw-rate kinematics.
        particles: Current population (list of Particle).
        is_initialized: True once init() has completed.

    Example:
        >>> pf = ParticleFilter(ParticleFilterConfig(n_particles=100, seed=0))
        >>> pf.init(6.0, 2.0, 0.0, NoiseStd(0.3, 0.3, 0.01))
        >>> pf.prediction(0.1, NoiseStd(0.3, 0.3, 0.01), velocity=5.0, yaw_rate=0.1)
        >>> pf.update_weights(50.0, NoiseStd(0.3, 0.3), observations, landmark_map)
        >>> pf.resample()
        >>> best = pf.best_particle()
    """

    def __init__(
        self,
        config: Optional[ParticleFilterConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Create an uninitialized particle filter.

        Args:
            config: Filter configuration. Defaults to ParticleFilterConfig().
            rng: Random generator. If None, one is created from config.seed.
        """
        super().__init__(state_dim=3)

        self.config = config if config is not None else ParticleFilterConfig()
        self.rng = rng if rng is not None else self.config.make_rng()
        self.motion_model = UnicycleMotionModel(self.config.yaw_rate_epsilon)
        self.particles: List[Particle] = []

    @property
    def num_particles(self) -> int:
        return self.config.n_particles

    def init(self, x: float, y: float, theta: float, std: Sequence[float]) -> None:
        """
        Sample the initial population around a pose estimate.

        Each particle's pose is drawn independently per axis from
        N(x, σx), N(y, σy), N(theta, σθ); every weight starts at 1.

        Args:
            x: Initial x estimate (meters), e.g. from GPS.
            y: Initial y estimate (meters).
            theta: Initial heading estimate (radians).
            std: Standard deviations (σx, σy, σθ).

        Raises:
            RuntimeError: If the filter is already initialized.
            ValueError: If the pose is not finite or std is invalid.
        """
        if self.is_initialized:
            raise RuntimeError("ParticleFilter.init() must be called exactly once")

        mean = np.array([x, y, theta], dtype=np.float64)
        _check_finite(mean, "initial pose")
        std = NoiseStd.from_sequence(std)

        n = self.num_particles
        poses = mean + self.rng.normal(0.0, np.asarray(std), size=(n, 3))
        self.particles = [
            Particle(id=i, x=float(p[0]), y=float(p[1]), theta=float(p[2]), weight=1.0)
            for i, p in enumerate(poses)
        ]

        self.is_initialized = True

    def prediction(
        self,
        delta_t: float,
        std_pos: Sequence[float],
        velocity: float,
        yaw_rate: float,
    ) -> None:
        """
        Propagate every particle through the motion model.

        Uses the straight-line model when |yaw_rate| is below
        config.yaw_rate_epsilon and the exact arc model otherwise, then adds
        independent zero-mean Gaussian noise per particle and axis. Weights
        are not changed.

        Args:
            delta_t: Time elapsed since the previous cycle (s).
            std_pos: Process noise standard deviations (σx, σy, σθ).
            velocity: Linear velocity (m/s).
            yaw_rate: Yaw rate (rad/s).

        Raises:
            RuntimeError: If called before init().
            ValueError: If a propagated pose is not finite.
        """
        self._require_initialized("prediction")
        std_pos = NoiseStd.from_sequence(std_pos)

        poses = np.array([[p.x, p.y, p.theta] for p in self.particles])
        poses = self.motion_model.sample(
            poses, velocity, yaw_rate, delta_t, std_pos, rng=self.rng
        )
        _check_finite(poses, "predicted pose")

        for particle, pose in zip(self.particles, poses):
            particle.x, particle.y, particle.theta = (float(v) for v in pose)

    def data_association(
        self,
        predicted: Sequence[LandmarkObservation],
        observations: List[LandmarkObservation],
    ) -> None:
        """
        Assign each observation the id of its nearest candidate landmark.

        Candidates are scanned in the given order and only a strictly closer
        candidate replaces the current match, so ties go to the candidate
        seen first. update_weights() passes candidates in map order.
        With no candidates, observations get UNASSIGNED_ID.

        Works only on its arguments and never reads the population, so it
        may be called before init(). The same holds for set_associations()
        and the get_associations/get_sense_x/get_sense_y formatters.

        Args:
            predicted: Candidate landmarks (world frame), not modified.
            observations: World-frame observations; ids are set in place.
        """
        for obs in observations:
            min_dist = np.inf
            assign_id = UNASSIGNED_ID

            for landmark in predicted:
                cur_dist = np.hypot(obs.x - landmark.x, obs.y - landmark.y)
                if cur_dist < min_dist:
                    min_dist = cur_dist
                    assign_id = landmark.id

            obs.id = assign_id

    def update_weights(
        self,
        sensor_range: float,
        std_landmark: Sequence[float],
        observations: Sequence[LandmarkObservation],
        landmark_map: LandmarkMap,
    ) -> None:
        """
        Recompute every particle's weight from the latest observations.

        For each particle:
            1. Collect map landmarks within sensor_range of the particle.
            2. Transform observations from the particle frame to the world.
            3. Associate each observation with its nearest landmark.
            4. Multiply the bivariate Gaussian densities of matched
               observations about their landmarks.

        Observations with no landmark in range are left out of the product.
        With no observations every weight becomes 1. The matched ids and
        world coordinates are stored on each particle for diagnostics.

        Args:
            sensor_range: Maximum landmark distance from the particle (m).
            std_landmark: Measurement standard deviations (σx, σy).
            observations: Observations in the vehicle frame.
            landmark_map: Map of known landmarks.

        Raises:
            RuntimeError: If called before init().
            ValueError: If sensor_range or std_landmark is invalid, an
                observation is not finite, or a resulting weight is not
                finite. Weights are left unchanged when this is raised.
        """
        self._require_initialized("update_weights")

        if not np.isfinite(sensor_range) or sensor_range < 0:
            raise ValueError(f"sensor_range must be finite and >= 0, got {sensor_range}")
        std_landmark = NoiseStd.from_sequence(std_landmark)
        if std_landmark.x <= 0 or std_landmark.y <= 0:
            raise ValueError(
                f"Landmark std must be positive, got ({std_landmark.x}, {std_landmark.y})"
            )

        obs_xy = np.array([[obs.x, obs.y] for obs in observations], dtype=np.float64)
        _check_finite(obs_xy, "observation")

        # Validate the whole cycle before touching the population
        updates = []
        for particle in self.particles:
            predicted = [
                LandmarkObservation(x=lm.x, y=lm.y, id=lm.id)
                for lm in landmark_map.within_range(particle.x, particle.y, sensor_range)
            ]

            world_xy = transform_to_world(particle.pose(), obs_xy)
            trans_obs = [LandmarkObservation(x=float(wx), y=float(wy)) for wx, wy in world_xy]

            self.data_association(predicted, trans_obs)

            weight = 1.0
            associations, sense_x, sense_y = [], [], []
            for obs in trans_obs:
                if not obs.is_associated:
                    continue
                landmark = landmark_map.get(obs.id)
                if landmark is None:
                    raise ValueError(f"Observation matched to unknown landmark id {obs.id}")

                weight *= bivariate_gaussian_pdf(
                    obs.x - landmark.x, obs.y - landmark.y, std_landmark
                )
                associations.append(obs.id)
                sense_x.append(obs.x)
                sense_y.append(obs.y)

            if not np.isfinite(weight):
                raise ValueError(f"Non-finite weight {weight} for particle {particle.id}")
            updates.append((weight, associations, sense_x, sense_y))

        for particle, (weight, associations, sense_x, sense_y) in zip(self.particles, updates):
            particle.weight = weight
            self.set_associations(particle, associations, sense_x, sense_y)

    def resample(self) -> None:
        """
        Draw a new population with probability proportional to weight.

        Resampling wheel: starting from a uniformly random index, advance a
        pointer by U[0, 2·w_max) per draw, stepping over particles (wrapping
        modulo N) until the pointer falls inside the current particle's
        weight. Each selected particle is copied into the new population and
        keeps its weight; ids are relabelled 0..N-1.

        If every weight is zero, a RuntimeWarning is issued and particles are
        drawn uniformly instead.

        Raises:
            RuntimeError: If called before init().
            ValueError: If any weight is negative or not finite.
        """
        self._require_initialized("resample")

        weights = np.array([p.weight for p in self.particles], dtype=np.float64)
        _check_finite(weights, "particle weight")
        if np.any(weights < 0):
            raise ValueError("Particle weights must be non-negative")

        n = len(self.particles)
        max_w = weights.max()

        if max_w <= 0:
            warnings.warn(
                "All particle weights are zero; falling back to uniform resampling.",
                RuntimeWarning,
                stacklevel=2,
            )
            indices = self.rng.integers(0, n, size=n)
        else:
            indices = np.empty(n, dtype=int)
            index = int(self.rng.integers(0, n))
            beta = 0.0
            for i in range(n):
                beta += self.rng.uniform(0.0, 2.0 * max_w)
                # >= so that zero-weight particles are never selected
                while beta >= weights[index]:
                    beta -= weights[index]
                    index = (index + 1) % n
                indices[i] = index

        new_particles = []
        for new_id, index in enumerate(indices):
            particle = self.particles[index].copy()
            particle.id = new_id
            new_particles.append(particle)

        self.particles = new_particles

    def set_associations(
        self,
        particle: Particle,
        associations: Sequence[int],
        sense_x: Sequence[float],
        sense_y: Sequence[float],
    ) -> Particle:
        """
        Attach diagnostic associations to a particle.

        Args:
            particle: Particle to annotate (modified in place).
            associations: Landmark id of each association.
            sense_x: World-frame x of each associated observation.
            sense_y: World-frame y of each associated observation.

        Returns:
            The annotated particle.

        Raises:
            ValueError: If the three lists differ in length.
        """
        if not (len(associations) == len(sense_x) == len(sense_y)):
            raise ValueError(
                f"associations, sense_x and sense_y must have equal lengths, got "
                f"{len(associations)}, {len(sense_x)}, {len(sense_y)}"
            )
        particle.associations = [int(a) for a in associations]
        particle.sense_x = [float(v) for v in sense_x]
        particle.sense_y = [float(v) for v in sense_y]
        return particle

    def get_associations(self, particle: Particle) -> str:
        """Associated landmark ids as a space-separated string."""
        return _format_sequence(particle.associations, "d")

    def get_sense_x(self, particle: Particle) -> str:
        """World-frame x of associated observations as a space-separated string."""
        return _format_sequence(particle.sense_x, "g")

    def get_sense_y(self, particle: Particle) -> str:
        """World-frame y of associated observations as a space-separated string."""
        return _format_sequence(particle.sense_y, "g")

    def get_particles(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get current particles and weights.

        Returns:
            Tuple of (poses, weights).
                - poses: (n_particles, 3) array of [x, y, theta]
                - weights: (n_particles,)
        """
        self._require_initialized("get_particles")
        poses = np.array([[p.x, p.y, p.theta] for p in self.particles])
        weights = np.array([p.weight for p in self.particles])
        return poses, weights

    def best_particle(self) -> Particle:
        """Copy of the highest-weight particle (first one on ties)."""
        self._require_initialized("best_particle")
        _, weights = self.get_particles()
        return self.particles[int(np.argmax(weights))].copy()

    def weighted_mean(self) -> np.ndarray:
        """
        Weighted mean pose [x, y, theta].

        The heading is a weighted circular mean. If all weights are zero the
        unweighted mean is returned.
        """
        self._require_initialized("weighted_mean")
        poses, weights = self.get_particles()
        w = _normalized(weights)

        return np.array([
            np.sum(w * poses[:, 0]),
            np.sum(w * poses[:, 1]),
            weighted_circular_mean(poses[:, 2], w),
        ])

    def get_state(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Weighted mean pose and weighted covariance of the population.

        Heading deviations are wrapped to [-π, π] about the mean heading.

        Returns:
            Tuple of (mean (3,), covariance (3, 3)).
        """
        mean = self.weighted_mean()
        poses, weights = self.get_particles()
        w = _normalized(weights)

        diff = poses - mean
        diff[:, 2] = wrap_angle(diff[:, 2])
        covariance = (w[:, np.newaxis] * diff).T @ diff
        return mean, covariance

    def effective_sample_size(self) -> float:
        """
        Effective sample size of the current weights.

        N_eff = (Σ wᵢ)² / Σ wᵢ², which equals 1 / Σ w̃ᵢ² for normalized
        weights w̃. Returns 0.0 if all weights are zero.
        """
        self._require_initialized("effective_sample_size")
        _, weights = self.get_particles()
        sum_sq = np.sum(weights**2)
        if sum_sq == 0:
            return 0.0
        return float(np.sum(weights) ** 2 / sum_sq)


def _check_finite(values: np.ndarray, what: str) -> None:
    if not np.all(np.isfinite(values)):
        raise ValueError(f"Non-finite {what} encountered: {values[~np.isfinite(values)]}")


def _normalized(weights: np.ndarray) -> np.ndarray:
    total = np.sum(weights)
    if total <= 0:
        return np.full(len(weights), 1.0 / len(weights))
    return weights / total


def _format_sequence(values: Sequence, spec: str) -> str:
    # Empty sequences join to "" without any separator to strip
    return " ".join(format(v, spec) for v in values)
