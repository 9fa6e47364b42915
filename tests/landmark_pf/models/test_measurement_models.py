"""
Unit tests for landmark_pf.models.measurement_models.

Tests cover:
    - Vehicle-to-world frame transform
    - Bivariate Gaussian density (peak value, agreement with scipy)
"""

import unittest

import numpy as np
from numpy.testing import assert_allclose
from scipy import stats

from landmark_pf.models.measurement_models import bivariate_gaussian_pdf, transform_to_world
from landmark_pf.types import NoiseStd


class TestTransformToWorld(unittest.TestCase):
    """Test suite for transform_to_world."""

    def test_identity_pose(self):
        obs = np.array([[1.0, 2.0], [-3.0, 0.5]])
        assert_allclose(transform_to_world(np.zeros(3), obs), obs)

    def test_translation_only(self):
        result = transform_to_world(np.array([4.0, 5.0, 0.0]), np.array([[1.0, -2.0]]))
        assert_allclose(result, [[5.0, 3.0]])

    def test_rotation_and_translation(self):
        """Observation (2, 2) from (4, 5) heading -90° lands at (6, 3)."""
        result = transform_to_world(np.array([4.0, 5.0, -np.pi / 2]), np.array([2.0, 2.0]))
        assert_allclose(result, [6.0, 3.0], atol=1e-12)

    def test_quarter_turn(self):
        result = transform_to_world(np.array([0.0, 0.0, np.pi / 2]), np.array([1.0, 0.0]))
        assert_allclose(result, [0.0, 1.0], atol=1e-12)

    def test_empty_observations(self):
        result = transform_to_world(np.array([1.0, 1.0, 0.3]), np.zeros((0, 2)))
        self.assertEqual(result.shape, (0, 2))

    def test_preserves_distances(self):
        obs = np.array([[1.0, 2.0], [4.0, -1.0]])
        world = transform_to_world(np.array([7.0, -3.0, 1.1]), obs)
        self.assertAlmostEqual(
            np.linalg.norm(world[0] - world[1]), np.linalg.norm(obs[0] - obs[1]), places=12
        )

    def test_invalid_pose_shape_raises(self):
        with self.assertRaises(ValueError):
            transform_to_world(np.zeros(2), np.zeros((1, 2)))

    def test_invalid_obs_shape_raises(self):
        with self.assertRaises(ValueError):
            transform_to_world(np.zeros(3), np.zeros((2, 3)))


class TestBivariateGaussianPdf(unittest.TestCase):
    """Test suite for bivariate_gaussian_pdf."""

    def test_peak_value(self):
        std = NoiseStd(0.3, 0.3)
        self.assertAlmostEqual(
            bivariate_gaussian_pdf(0.0, 0.0, std), 1.0 / (2 * np.pi * 0.09), places=12
        )

    def test_peak_is_maximum(self):
        std = NoiseStd(0.3, 0.5)
        peak = bivariate_gaussian_pdf(0.0, 0.0, std)
        for dx, dy in [(0.01, 0.0), (0.0, -0.01), (0.2, 0.3), (-1.0, 1.0)]:
            self.assertLess(bivariate_gaussian_pdf(dx, dy, std), peak)

    def test_matches_scipy_multivariate_normal(self):
        std = NoiseStd(0.3, 0.7)
        rv = stats.multivariate_normal(mean=[0.0, 0.0], cov=np.diag([0.3**2, 0.7**2]))
        for dx, dy in [(0.0, 0.0), (0.1, -0.4), (0.5, 1.2), (-0.9, 0.05)]:
            self.assertAlmostEqual(
                bivariate_gaussian_pdf(dx, dy, std), rv.pdf([dx, dy]), places=10
            )

    def test_symmetric_in_sign(self):
        std = NoiseStd(0.2, 0.4)
        self.assertAlmostEqual(
            bivariate_gaussian_pdf(0.3, -0.1, std), bivariate_gaussian_pdf(-0.3, 0.1, std)
        )

    def test_vectorized(self):
        std = NoiseStd(0.3, 0.3)
        dx = np.array([0.0, 0.1, 0.2])
        dy = np.array([0.0, 0.0, 0.1])
        result = bivariate_gaussian_pdf(dx, dy, std)
        self.assertEqual(result.shape, (3,))
        self.assertAlmostEqual(result[1], bivariate_gaussian_pdf(0.1, 0.0, std))

    def test_accepts_plain_tuple(self):
        self.assertAlmostEqual(
            bivariate_gaussian_pdf(0.0, 0.0, (1.0, 1.0)), 1.0 / (2 * np.pi), places=12
        )

    def test_zero_std_raises(self):
        with self.assertRaises(ValueError):
            bivariate_gaussian_pdf(0.0, 0.0, NoiseStd(0.0, 0.3))


if __name__ == "__main__":
    unittest.main()
