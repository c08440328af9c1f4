# Andy Zhao
"""
RANSAC loop for the blob line fit.

RANSAC overview:
- Randomly sample 2 distinct points
- Build the candidate line through them
- Score all points with the clamped consensus score (see scoring.py)
- Keep the lowest-score candidate that has enough inliers
- Refit using all inliers (least squares) to get the final line

The model math lives behind the ModelFitter Protocol (LineFitter by default),
the loop itself only deals with indices, masks and scores.
"""
from __future__ import annotations

from typing import Optional, Protocol
import os

import numpy as np

from .types import (
    RansacLineConfig, RansacResult, ScoreResult, ModelFitter,
    ITERATIONS_RANGE, as_points2d,
)
from .line import LineModel
from .line_fitter import LineFitter
from .scoring import score_candidate

_RANSAC_DEBUG = os.environ.get("BLOBLINE_RANSAC_DEBUG", "0") == "1"


class RandomSource(Protocol):
    """
    Anything with numpy.random.Generator.integers semantics:
    uniform ints in [low, high).
    """

    def integers(self, low, high=None, size=None): ...


def suggest_max_iterations(
        inlier_ratio: float,
        *,
        confidence: float = 0.99,
        sample_size: int = 2,
        cap: int = ITERATIONS_RANGE[1],
) -> int:
    """
    Number of iterations needed so that the probability of drawing at least
    ONE all-inlier sample is >= confidence.

    inlier ratio w = (# inliers) / N, minimal sample s (2 for a line),
    - P(all-inliers) = w^s
    - P(not-all-inlier-for-k-times) = (1 - w^s)^k
    - P(at-least-once-all-inliers) = 1 - (1 - w^s)^k >= p

    Formula:
       k >= log(1 - p) / log(1 - w^s)

    Edge cases:
     - w == 0  -> impossible, return cap
     - w == 1  -> 1 iteration is enough
    The result is clipped to [1, cap].
    """
    # Clamp inputs to avoid log(0)
    p = float(np.clip(confidence, 1e-12, 1.0 - 1e-12))
    w = float(np.clip(inlier_ratio, 0.0, 1.0))
    s = int(sample_size)

    if s <= 0:
        raise ValueError("sample_size must be >= 1")
    if cap < 1:
        raise ValueError("cap must be >= 1")

    if w >= 1.0:
        return 1
    if w <= 0.0:
        return int(cap)

    # If w^s is extremely tiny, log(1 - w^s) close to 0
    w_to_s = float(np.clip(w ** s, 1e-12, 1.0 - 1e-12))

    k = int(np.ceil(np.log(1 - p) / np.log(1 - w_to_s)))
    return int(min(max(1, k), cap))


def _sample_pair(rng: RandomSource, n: int) -> tuple[int, int]:
    """
    Draw two indices in [0, n). On collision the second one moves to the
    next index (mod n), so the pair is always distinct when n >= 2.
    """
    i, j = (int(v) for v in rng.integers(0, n, size=2))
    if i == j:
        j = (j + 1) % n
    return i, j


def ransac_line(
        points,
        config: Optional[RansacLineConfig] = None,
        *,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None,
        model_fitter: ModelFitter[LineModel] = LineFitter(),
) -> RansacResult[LineModel]:
    """
    Run RANSAC to find the best line through a blob point set.

    Inputs:
    - points: (N,2) array-like of blob centroids
    - config: threshold / iterations / inlier fraction (clamped to valid ranges)
    - rng: random source used for the whole call (takes precedence over seed)
    - seed: RNG seed for reproducibility; None draws fresh OS entropy
    - model_fitter: provides fit_minimal, fit_least_squares, residuals

    Returns:
    - RansacResult. Never None: fewer than 2 points, 0 iterations, or no
      candidate meeting min_inlier_fraction all give the zero line.
    """
    pts = as_points2d(points)
    cfg = (config if config is not None else RansacLineConfig()).clamped()
    tau = cfg.distance_threshold
    n = pts.shape[0]

    zero = LineModel.zero()
    if n < 2:
        # Not enough points for a line: no classification at all
        return RansacResult(
            model=zero,
            sampled_model=zero,
            inliers=np.zeros((0,), dtype=bool),
            num_inliers=0,
            score=float("inf"),
            iterations=0,
            threshold=tau,
            refined=False,
        )

    # One random source for the whole fit
    if rng is None:
        rng = np.random.default_rng(seed)

    # Track the best hypothesis; until one is accepted every point is an outlier
    best_model: LineModel = zero
    best = ScoreResult(
        score=float("inf"),
        inliers=np.zeros((n,), dtype=bool),
        distances=np.full((n,), np.inf, dtype=np.float64),
    )

    # ---------- Main RANSAC Loop ----------
    for i in range(cfg.max_iterations):
        a, b = _sample_pair(rng, n)

        candidate = model_fitter.fit_minimal(pts[[a, b]])
        if candidate is None:
            continue

        scored = score_candidate(model_fitter, candidate, pts, tau)

        # Strictly lower score AND enough inliers; ties keep the earlier one
        inlier_fraction = scored.num_inliers / float(n)
        if scored.score < best.score and inlier_fraction >= cfg.min_inlier_fraction:
            best_model = candidate
            best = scored
            if _RANSAC_DEBUG:
                print(f"[RANSAC] iter {i}: better line, score={best.score:.3f}, "
                      f"inliers={best.num_inliers}/{n}, pair=({a},{b})")

    # ---------- Refinement ----------
    # Refit on all inliers, evaluated at the x of the first two input points
    refit: Optional[LineModel] = None
    if best.num_inliers >= 2:
        refit = model_fitter.fit_least_squares(pts[best.inliers], pts[:2])
        if refit is None and _RANSAC_DEBUG:
            print(f"[RANSAC] least squares refit failed on {best.num_inliers} inliers, keeping sampled line")

    # If least squares refit fails, fall back to the best sampled line
    final_model = refit if refit is not None else best_model

    return RansacResult(
        model=final_model,
        sampled_model=best_model,
        inliers=best.inliers,
        num_inliers=best.num_inliers,
        score=best.score,
        iterations=cfg.max_iterations,
        threshold=tau,
        refined=refit is not None,
    )
