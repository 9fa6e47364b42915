"""Unit tests for landmark_pf.config."""

import json

import numpy as np
import pytest

from landmark_pf.config import ParticleFilterConfig


class TestParticleFilterConfig:
    """Test suite for ParticleFilterConfig."""

    def test_defaults(self):
        config = ParticleFilterConfig()
        assert config.n_particles == 1000
        assert config.yaw_rate_epsilon == 1e-3
        assert config.seed is None

    @pytest.mark.parametrize("n", [0, -5])
    def test_invalid_population_size_raises(self, n):
        with pytest.raises(ValueError, match="n_particles"):
            ParticleFilterConfig(n_particles=n)

    def test_non_integer_population_size_raises(self):
        with pytest.raises(TypeError):
            ParticleFilterConfig(n_particles=10.5)

    @pytest.mark.parametrize("eps", [0.0, -1e-3, np.inf])
    def test_invalid_epsilon_raises(self, eps):
        with pytest.raises(ValueError, match="yaw_rate_epsilon"):
            ParticleFilterConfig(yaw_rate_epsilon=eps)

    def test_negative_seed_raises(self):
        with pytest.raises(ValueError):
            ParticleFilterConfig(seed=-1)

    def test_frozen(self):
        config = ParticleFilterConfig()
        with pytest.raises(AttributeError):
            config.n_particles = 5

    def test_dict_round_trip(self):
        config = ParticleFilterConfig(n_particles=200, yaw_rate_epsilon=1e-4, seed=3)
        assert ParticleFilterConfig.from_dict(config.to_dict()) == config

    def test_from_dict_partial(self):
        config = ParticleFilterConfig.from_dict({"n_particles": 50})
        assert config.n_particles == 50
        assert config.yaw_rate_epsilon == 1e-3

    def test_from_dict_unknown_key_raises(self):
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            ParticleFilterConfig.from_dict({"num_particles": 50})

    def test_from_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"n_particles": 25, "seed": 9}), encoding="utf-8")
        config = ParticleFilterConfig.from_json(path)
        assert config == ParticleFilterConfig(n_particles=25, seed=9)

    def test_from_json_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ParticleFilterConfig.from_json(tmp_path / "missing.json")

    def test_from_json_non_object_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ValueError, match="JSON object"):
            ParticleFilterConfig.from_json(path)

    def test_make_rng_reproducible(self):
        config = ParticleFilterConfig(seed=42)
        assert config.make_rng().random() == config.make_rng().random()
