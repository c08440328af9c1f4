"""Tests for the RANSAC line search loop."""

import numpy as np
import pytest

from blobline.ransac import (
    LineModel, RansacLineConfig, perpendicular_distances, ransac_line, suggest_max_iterations,
)
from blobline.ransac.core import _sample_pair


def _coords(line):
    return [line.x1, line.y1, line.x2, line.y2]


class TestRansacLine:
    """End-to-end behaviour of ransac_line."""

    def test_collinear_with_one_outlier(self, diagonal_points, diagonal_config):
        """Four points on y = x are inliers, (100, -50) is the outlier."""
        result = ransac_line(diagonal_points, diagonal_config, seed=0)

        assert result.num_inliers == 4
        assert result.num_outliers == 1
        assert result.inliers.tolist() == [True, True, True, True, False]
        assert result.refined
        # Refit evaluated at the x of the first two input points
        assert _coords(result.model) == pytest.approx([0.0, 0.0, 1.0, 1.0], abs=1e-9)
        assert result.model.angle() == pytest.approx(45.0)
        assert result.score == pytest.approx(1.0)
        assert result.iterations == 50

    def test_noisy_line(self, noisy_line_points):
        """Refined slope recovers 0.5 from noisy inliers with outliers present."""
        cfg = RansacLineConfig(distance_threshold=2.0, max_iterations=200, min_inlier_fraction=0.5)

        result = ransac_line(noisy_line_points, cfg, seed=3)

        slope = (result.model.y2 - result.model.y1) / (result.model.x2 - result.model.x1)
        assert slope == pytest.approx(0.5, abs=0.05)
        assert result.num_inliers >= 35

    def test_count_invariant(self):
        """Inliers + outliers always covers every input point."""
        for seed in range(5):
            pts = np.random.default_rng(seed).uniform(0, 100, size=(30, 2))
            result = ransac_line(pts, RansacLineConfig(5.0, 40, 0.0), seed=seed)
            assert result.num_inliers + result.num_outliers == 30
            assert result.inliers.shape == (30,)

    def test_inliers_within_threshold_of_sampled_line(self, noisy_line_points):
        """Every inlier was within threshold of the candidate that classified it."""
        cfg = RansacLineConfig(distance_threshold=2.0, max_iterations=100, min_inlier_fraction=0.0)

        result = ransac_line(noisy_line_points, cfg, seed=11)

        dist = perpendicular_distances(result.sampled_model, noisy_line_points[result.inliers])
        assert np.all(dist <= cfg.distance_threshold)

    @pytest.mark.parametrize("n", [0, 1])
    def test_fewer_than_two_points(self, n):
        """0 or 1 points: zero line, no classification, threshold echoed."""
        pts = np.zeros((n, 2))

        result = ransac_line(pts, RansacLineConfig(7.0, 50, 0.0), seed=0)

        assert result.model == LineModel.zero()
        assert result.num_inliers == 0
        assert result.num_outliers == 0
        assert result.threshold == 7.0
        assert not result.refined

    def test_zero_iterations(self, diagonal_points):
        """No iterations: zero line and every point counted as an outlier."""
        result = ransac_line(diagonal_points, RansacLineConfig(1.0, 0, 0.0), seed=0)

        assert result.model == LineModel.zero()
        assert result.num_inliers == 0
        assert result.num_outliers == 5
        assert result.score == float("inf")
        assert result.iterations == 0

    def test_all_points_identical(self):
        """Every candidate is degenerate; nothing throws, nothing is NaN."""
        pts = np.full((5, 2), 5.0)

        result = ransac_line(pts, RansacLineConfig(1.0, 20, 0.0), seed=0)

        assert result.num_inliers + result.num_outliers == 5
        assert np.isfinite(result.score)
        assert result.score == pytest.approx(5.0)
        assert np.all(np.isfinite(_coords(result.model)))

    def test_min_inlier_fraction_rejects_everything(self, diagonal_points):
        """No candidate reaches 100 % inliers, so nothing is accepted."""
        cfg = RansacLineConfig(distance_threshold=1.0, max_iterations=50, min_inlier_fraction=1.0)

        result = ransac_line(diagonal_points, cfg, seed=0)

        assert result.model == LineModel.zero()
        assert result.num_inliers == 0
        assert result.num_outliers == 5

    def test_min_inlier_fraction_boundary_is_inclusive(self, diagonal_points):
        """4/5 inliers satisfies a 0.8 requirement."""
        cfg = RansacLineConfig(distance_threshold=1.0, max_iterations=50, min_inlier_fraction=0.8)
        result = ransac_line(diagonal_points, cfg, seed=0)
        assert result.num_inliers == 4

    def test_seed_reproducible(self, noisy_line_points):
        """Same seed, same result."""
        cfg = RansacLineConfig(2.0, 60, 0.0)
        a = ransac_line(noisy_line_points, cfg, seed=5)
        b = ransac_line(noisy_line_points, cfg, seed=5)
        assert a.model == b.model
        assert a.inliers.tolist() == b.inliers.tolist()

    def test_input_not_modified(self, diagonal_points, diagonal_config):
        """Input points are borrowed read-only."""
        before = diagonal_points.copy()
        ransac_line(diagonal_points, diagonal_config, seed=0)
        np.testing.assert_array_equal(diagonal_points, before)

    def test_accepts_point_lists(self, diagonal_config):
        """Plain lists of (x, y) work."""
        pts = [(0, 0), (1, 1), (2, 2), (3, 3), (100, -50)]
        assert ransac_line(pts, diagonal_config, seed=1).num_inliers == 4

    def test_bad_shape(self):
        """Points must be (N, 2)."""
        with pytest.raises(ValueError):
            ransac_line(np.zeros((4, 3)), RansacLineConfig())


class TestInjectedSampling:
    """Tests driven by a scripted random source."""

    def test_ties_keep_first_candidate(self, diagonal_points, scripted_rng):
        """(2,3) scores the same as (0,1), so (0,1) stays the sampled line."""
        rng = scripted_rng([(0, 1), (0, 4), (2, 3)])
        cfg = RansacLineConfig(1.0, 3, 0.0)

        result = ransac_line(diagonal_points, cfg, rng=rng)

        assert result.sampled_model == LineModel(0.0, 0.0, 1.0, 1.0)
        assert rng.calls == 3

    def test_scripted_pairs_are_deterministic(self, noisy_line_points, scripted_rng):
        """Same scripted pairs, same best line."""
        pairs = [(0, 5), (3, 44), (10, 20), (7, 50), (1, 2)]
        cfg = RansacLineConfig(2.0, 5, 0.0)

        a = ransac_line(noisy_line_points, cfg, rng=scripted_rng(pairs))
        b = ransac_line(noisy_line_points, cfg, rng=scripted_rng(pairs))

        assert a.sampled_model == b.sampled_model
        assert a.model == b.model

    def test_collision_advances_second_index(self, diagonal_points, scripted_rng):
        """(2,2) is sampled as (2,3)."""
        result = ransac_line(diagonal_points, RansacLineConfig(1.0, 1, 0.0), rng=scripted_rng([(2, 2)]))
        assert result.sampled_model == LineModel(2.0, 2.0, 3.0, 3.0)

    def test_collision_wraps_around(self, diagonal_points, scripted_rng):
        """(4,4) is sampled as (4,0)."""
        result = ransac_line(diagonal_points, RansacLineConfig(200.0, 1, 0.0), rng=scripted_rng([(4, 4)]))
        assert result.sampled_model == LineModel(100.0, -50.0, 0.0, 0.0)

    def test_vertical_inliers_keep_sampled_line(self, scripted_rng):
        """Singular refit on a vertical cluster falls back to the sampled line."""
        pts = np.array([[3.0, 0.0], [3.0, 1.0], [3.0, 2.0], [3.0, 3.0], [10.0, 0.0]])

        result = ransac_line(pts, RansacLineConfig(0.5, 1, 0.0), rng=scripted_rng([(0, 1)]))

        assert result.num_inliers == 4
        assert not result.refined
        assert result.model == LineModel(3.0, 0.0, 3.0, 1.0)
        assert result.model.extended_line(20, 20) == LineModel(3.0, 0.0, 3.0, 20.0)

    def test_worse_candidate_not_accepted(self, diagonal_points, scripted_rng):
        """A later, higher-score candidate never replaces the best."""
        rng = scripted_rng([(1, 3), (0, 4)])
        result = ransac_line(diagonal_points, RansacLineConfig(1.0, 2, 0.0), rng=rng)
        assert result.sampled_model == LineModel(1.0, 1.0, 3.0, 3.0)


class TestConfigClamping:
    """Out-of-range configuration is clamped, not rejected."""

    def test_negative_iterations(self, diagonal_points):
        """Negative iteration count runs zero iterations."""
        result = ransac_line(diagonal_points, RansacLineConfig(1.0, -5, 0.0), seed=0)
        assert result.iterations == 0
        assert result.num_inliers == 0

    def test_non_positive_threshold(self, diagonal_points):
        """A threshold <= 0 is raised to the bottom of the slider range."""
        result = ransac_line(diagonal_points, RansacLineConfig(-3.0, 10, 0.0), seed=0)
        assert result.threshold == 1.0

    def test_fraction_above_one(self, diagonal_points):
        """A fraction above 1 behaves like 1."""
        result = ransac_line(diagonal_points, RansacLineConfig(1.0, 30, 4.0), seed=0)
        assert result.num_inliers == 0


class TestSamplePair:
    """Tests for the two-index sampler."""

    def test_always_distinct(self):
        """Real generator never yields a colliding pair, even with n = 2."""
        rng = np.random.default_rng(0)
        for _ in range(200):
            i, j = _sample_pair(rng, 2)
            assert i != j
            assert {i, j} == {0, 1}

    def test_in_range(self):
        """Indices stay in [0, n)."""
        rng = np.random.default_rng(1)
        for _ in range(200):
            i, j = _sample_pair(rng, 7)
            assert 0 <= i < 7 and 0 <= j < 7


class TestSuggestMaxIterations:
    """Tests for the iteration budget helper."""

    def test_all_inliers(self):
        """w = 1 needs a single iteration."""
        assert suggest_max_iterations(1.0) == 1

    def test_no_inliers(self):
        """w = 0 can never succeed, so the cap is returned."""
        assert suggest_max_iterations(0.0) == 200

    def test_half_inliers(self):
        """w = 0.5, s = 2, p = 0.99 -> ceil(log(0.01) / log(0.75)) = 17."""
        assert suggest_max_iterations(0.5) == 17

    def test_capped(self):
        """Result never exceeds cap."""
        assert suggest_max_iterations(0.05, cap=10) == 10

    def test_invalid_sample_size(self):
        """Sample size must be positive."""
        with pytest.raises(ValueError):
            suggest_max_iterations(0.5, sample_size=0)
