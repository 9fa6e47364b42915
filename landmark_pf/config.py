"""Configuration for the landmark particle filter.

The estimator is tuned through a small frozen dataclass. Configurations can
be built in code, from a dictionary, or from a JSON file such as::

    {
        "n_particles": 500,
        "yaw_rate_epsilon": 0.001,
        "seed": 42
    }
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np


DEFAULT_N_PARTICLES = 1000
DEFAULT_YAW_RATE_EPSILON = 1e-3


@dataclass(frozen=True)
class ParticleFilterConfig:
    """
    Particle filter settings.

    Attributes:
        n_particles: Population size N, fixed for the filter lifetime.
        yaw_rate_epsilon: |yaw_rate| below this uses the straight-line
            motion model instead of the arc model (rad/s).
        seed: Seed for the estimator's random generator. None draws fresh
            entropy from the OS.

    Example:
        >>> config = ParticleFilterConfig(n_particles=200, seed=7)
        >>> config.to_dict()
        {'n_particles': 200, 'yaw_rate_epsilon': 0.001, 'seed': 7}
    """

    n_particles: int = DEFAULT_N_PARTICLES
    yaw_rate_epsilon: float = DEFAULT_YAW_RATE_EPSILON
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if isinstance(self.n_particles, bool) or not isinstance(
            self.n_particles, (int, np.integer)
        ):
            raise TypeError(
                f"n_particles must be an integer, got {type(self.n_particles)}"
            )
        if self.n_particles < 1:
            raise ValueError(f"n_particles must be >= 1, got {self.n_particles}")

        if not np.isfinite(self.yaw_rate_epsilon) or self.yaw_rate_epsilon <= 0:
            raise ValueError(
                f"yaw_rate_epsilon must be a positive finite number, "
                f"got {self.yaw_rate_epsilon}"
            )

        if self.seed is not None:
            if isinstance(self.seed, bool) or not isinstance(self.seed, (int, np.integer)):
                raise TypeError(f"seed must be an integer or None, got {type(self.seed)}")
            if self.seed < 0:
                raise ValueError(f"seed must be non-negative, got {self.seed}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParticleFilterConfig":
        """
        Create a configuration from a dictionary.

        Missing keys take their default values.

        Raises:
            ValueError: If the dictionary has unknown keys.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(
                f"Unknown configuration keys: {sorted(unknown)}. "
                f"Valid keys: {sorted(known)}"
            )
        return cls(**data)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "ParticleFilterConfig":
        """
        Load a configuration from a JSON file containing one object.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file does not hold a JSON object or has
                invalid values.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(
                f"Config file must contain a JSON object, got {type(data).__name__}"
            )
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def make_rng(self) -> np.random.Generator:
        """Random generator seeded from this configuration."""
        return np.random.default_rng(self.seed)
