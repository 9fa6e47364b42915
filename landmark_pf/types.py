"""Data types for landmark-based particle filter localization.

This module defines the data structures shared by the estimator, the
motion/measurement models, and the plotting helpers.

Key types:
    - Particle: weighted pose hypothesis [x, y, theta] with diagnostics
    - LandmarkObservation: sensed point (vehicle or world frame)
    - MapLandmark: static landmark with a unique id
    - LandmarkMap: immutable, ordered landmark collection with range queries
    - NoiseStd: per-axis standard deviation triple (x, y, theta)
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence

import numpy as np
from scipy.spatial import KDTree


# Observation id before association, or when no landmark is in range
UNASSIGNED_ID = -1


class NoiseStd(NamedTuple):
    """
    Per-axis Gaussian standard deviations.

    Used for the initial pose spread, the process noise of the motion
    model (x, y, theta), and the landmark measurement noise (x, y only,
    theta unused).

    Attributes:
        x: Standard deviation along x (meters).
        y: Standard deviation along y (meters).
        theta: Standard deviation of heading (radians).

    Examples:
        >>> std_pos = NoiseStd(0.3, 0.3, 0.01)
        >>> std_landmark = NoiseStd.from_sequence([0.3, 0.3])
        >>> std_landmark.theta
        0.0
    """

    x: float
    y: float
    theta: float = 0.0

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "NoiseStd":
        """
        Build from a 2- or 3-element sequence.

        Args:
            values: (σx, σy) or (σx, σy, σθ).

        Returns:
            Validated NoiseStd.

        Raises:
            ValueError: If the length is not 2 or 3, or any value is
                negative or non-finite.
        """
        if isinstance(values, NoiseStd):
            return values.validated()
        values = [float(v) for v in values]
        if len(values) not in (2, 3):
            raise ValueError(
                f"Standard deviations must have 2 or 3 elements, got {len(values)}"
            )
        return cls(*values).validated()

    def validated(self) -> "NoiseStd":
        """Return self after checking all entries are finite and >= 0."""
        for name, value in zip(self._fields, self):
            if not np.isfinite(value):
                raise ValueError(f"std {name} must be finite, got {value}")
            if value < 0:
                raise ValueError(f"std {name} must be non-negative, got {value}")
        return self


@dataclass
class LandmarkObservation:
    """
    A single sensed landmark point.

    Coordinates are in the vehicle frame when coming from the sensor and in
    the world frame after transformation by a particle's pose.

    Attributes:
        x: x-coordinate (meters).
        y: y-coordinate (meters).
        id: Associated map landmark id, UNASSIGNED_ID until associated.
    """

    x: float
    y: float
    id: int = UNASSIGNED_ID

    @property
    def is_associated(self) -> bool:
        return self.id != UNASSIGNED_ID


@dataclass(frozen=True)
class MapLandmark:
    """
    Static landmark from the prior map.

    Attributes:
        id: Globally unique integer id within the map.
        x: World-frame x-coordinate (meters).
        y: World-frame y-coordinate (meters).
    """

    id: int
    x: float
    y: float

    def __post_init__(self) -> None:
        if not (np.isfinite(self.x) and np.isfinite(self.y)):
            raise ValueError(
                f"Landmark {self.id} coordinates must be finite, got ({self.x}, {self.y})"
            )


class LandmarkMap:
    """
    Immutable, ordered collection of map landmarks.

    The id lookup and a KD-tree over landmark positions are built once at
    construction; the map never changes afterwards.

    Args:
        landmarks: Landmarks in map order. Ids must be unique.

    Raises:
        ValueError: If two landmarks share an id.

    Examples:
        >>> landmark_map = LandmarkMap([MapLandmark(1, 0.0, 0.0),
        ...                             MapLandmark(2, 10.0, 10.0)])
        >>> [lm.id for lm in landmark_map.within_range(0.0, 0.0, 5.0)]
        [1]
    """

    def __init__(self, landmarks: Sequence[MapLandmark]):
        self._landmarks = tuple(landmarks)

        self._by_id: Dict[int, MapLandmark] = {}
        for landmark in self._landmarks:
            if landmark.id in self._by_id:
                raise ValueError(f"Duplicate landmark id {landmark.id} in map")
            self._by_id[landmark.id] = landmark

        self._xy = np.array(
            [[lm.x, lm.y] for lm in self._landmarks], dtype=np.float64
        ).reshape(-1, 2)
        self._tree = KDTree(self._xy) if len(self._landmarks) > 0 else None

    @classmethod
    def from_array(
        cls, xy: np.ndarray, ids: Optional[Sequence[int]] = None
    ) -> "LandmarkMap":
        """
        Build a map from an (M, 2) coordinate array.

        Args:
            xy: Landmark positions, shape (M, 2).
            ids: Landmark ids; defaults to 1..M.

        Returns:
            LandmarkMap in array row order.
        """
        xy = np.asarray(xy, dtype=np.float64)
        if xy.ndim != 2 or xy.shape[1] != 2:
            raise ValueError(f"xy must have shape (M, 2), got {xy.shape}")
        if ids is None:
            ids = range(1, len(xy) + 1)
        ids = list(ids)
        if len(ids) != len(xy):
            raise ValueError(f"Got {len(ids)} ids for {len(xy)} landmarks")
        return cls(
            [MapLandmark(int(i), float(p[0]), float(p[1])) for i, p in zip(ids, xy)]
        )

    def __len__(self) -> int:
        return len(self._landmarks)

    def __iter__(self) -> Iterator[MapLandmark]:
        return iter(self._landmarks)

    def __contains__(self, landmark_id: int) -> bool:
        return landmark_id in self._by_id

    def get(self, landmark_id: int) -> Optional[MapLandmark]:
        return self._by_id.get(landmark_id)

    @property
    def xy(self) -> np.ndarray:
        """Landmark positions as an (M, 2) array, in map order."""
        return self._xy.copy()

    def within_range(self, x: float, y: float, radius: float) -> List[MapLandmark]:
        """
        Landmarks within Euclidean distance `radius` (inclusive) of (x, y).

        Results are returned in map order, which fixes the tie-breaking
        order used by nearest-neighbor association.

        Args:
            x: Query x-coordinate (meters).
            y: Query y-coordinate (meters).
            radius: Search radius (meters), e.g. the sensor range.

        Returns:
            List of MapLandmark, in the order they appear in the map.
        """
        if self._tree is None or radius < 0:
            return []
        indices = self._tree.query_ball_point([x, y], r=radius)
        return [self._landmarks[i] for i in sorted(indices)]

    def __repr__(self) -> str:
        return f"LandmarkMap(n_landmarks={len(self)})"


@dataclass
class Particle:
    """
    Weighted pose hypothesis.

    Attributes:
        id: Label unique within the current population.
        x: Position x (meters, world frame).
        y: Position y (meters, world frame).
        theta: Heading (radians), counter-clockwise from +x. Not wrapped.
        weight: Non-negative, unnormalized importance weight.
        associations: Landmark ids matched in the last weight update.
        sense_x: World-frame x of each associated observation.
        sense_y: World-frame y of each associated observation.

    Notes:
        The three diagnostic lists are index-aligned and are only used for
        visualization/debugging; they do not affect the filter.
    """

    id: int
    x: float
    y: float
    theta: float
    weight: float = 1.0
    associations: List[int] = field(default_factory=list)
    sense_x: List[float] = field(default_factory=list)
    sense_y: List[float] = field(default_factory=list)

    def pose(self) -> np.ndarray:
        """Pose as array [x, y, theta]."""
        return np.array([self.x, self.y, self.theta], dtype=np.float64)

    def copy(self) -> "Particle":
        return Particle(
            id=self.id,
            x=self.x,
            y=self.y,
            theta=self.theta,
            weight=self.weight,
            associations=list(self.associations),
            sense_x=list(self.sense_x),
            sense_y=list(self.sense_y),
        )

    def __repr__(self) -> str:
        return (
            f"Particle(id={self.id}, x={self.x:.4f}, y={self.y:.4f}, "
            f"theta={self.theta:.4f}, weight={self.weight:.4g})"
        )
