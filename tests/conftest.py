"""Pytest fixtures for blobline tests."""

import numpy as np
import pytest

from blobline.ransac import RansacLineConfig


class ScriptedRng:
    """Stands in for numpy.random.Generator, replaying fixed index pairs."""

    def __init__(self, pairs):
        self._pairs = list(pairs)
        self.calls = 0

    def integers(self, low, high=None, size=None):
        pair = self._pairs[self.calls % len(self._pairs)]
        self.calls += 1
        return np.array(pair, dtype=np.int64)


@pytest.fixture
def scripted_rng():
    """Factory for a generator that returns the given index pairs in order."""
    return ScriptedRng


@pytest.fixture
def diagonal_points():
    """Four collinear points on y = x plus one far outlier."""
    return np.array(
        [[0.0, 0.0], [1.0, 1.0], [2.0, 2.0], [3.0, 3.0], [100.0, -50.0]],
        dtype=np.float64,
    )


@pytest.fixture
def diagonal_config():
    """Threshold 1, 50 iterations, no inlier fraction requirement."""
    return RansacLineConfig(distance_threshold=1.0, max_iterations=50, min_inlier_fraction=0.0)


@pytest.fixture
def noisy_line_points():
    """40 points near y = 0.5 x + 10 plus 15 uniform outliers, fixed seed."""
    rng = np.random.default_rng(7)
    xs = rng.uniform(0, 200, size=40)
    ys = 0.5 * xs + 10 + rng.normal(0.0, 0.5, size=40)
    inliers = np.column_stack([xs, ys])
    outliers = rng.uniform([0, 0], [200, 200], size=(15, 2))
    return np.vstack([inliers, outliers]).astype(np.float64)
