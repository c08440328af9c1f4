# Andy Zhao
"""
Consensus scoring for a candidate model.

Plain RANSAC counts inliers. Here every point adds a capped penalty instead:

    inlier  (d <= tau): adds d
    outlier (d >  tau): adds tau

    score = sum_i min(d_i, tau)      (lower is better)

One outlier adds at most tau, however far away it is.
"""

from __future__ import annotations

from typing import TypeVar

import numpy as np

from .types import Points2D, FloatArray, ModelFitter, ScoreResult

M = TypeVar("M")


def clamped_score(distances: FloatArray, threshold: float) -> ScoreResult:
    """
    Turn per-point distances into a ScoreResult.

    +inf distances (degenerate candidate) become outliers that add exactly
    threshold, so the score never becomes NaN/Inf.
    """
    tau = float(threshold)
    inliers = distances <= tau

    # np.where picks tau for outliers before summing, inf never reaches the sum
    contributions = np.where(inliers, distances, tau)
    score = float(np.sum(contributions)) if contributions.size else 0.0

    return ScoreResult(score=score, inliers=inliers, distances=distances)


def score_candidate(
        model_fitter: ModelFitter[M],
        candidate: M,
        points: Points2D,
        threshold: float,
) -> ScoreResult:
    """
    Score a candidate against the full point set (sample points included).

    Pure: no state is touched, same inputs give the same ScoreResult.
    """
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"Expected points shape (N,2), got {points.shape}")

    distances = model_fitter.residuals(candidate, points)
    return clamped_score(distances, threshold)
