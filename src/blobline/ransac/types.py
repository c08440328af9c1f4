# Andy Zhao

"""
Shared typed primitives for the blob line-fitting pipeline.

Defines:
- Typed NumPy aliases for geometry
    - Points are (N,2) float arrays
    - Masks are (N,) bool arrays
- Generic model protocol for RANSAC
- RANSAC configuration (threshold / iterations / inlier fraction)
- Structured result containers (score + inlier mask + stats)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol, TypeVar, Generic, Optional, TypeAlias

import numpy as np
import numpy.typing as npt

# ---------- Numpy typing aliases ----------
# float64 for geometry (more stable for least squares)
# bool_ for masks

FloatArray: TypeAlias = npt.NDArray[np.float64]
BoolArray: TypeAlias = npt.NDArray[np.bool_]

# Blob centroids in image pixel coordinates.
Points2D: TypeAlias = FloatArray      # shape: (N, 2)

# Boolean inlier mask: True as inlier, False as outlier
Mask1D: TypeAlias = BoolArray         # shape: (N,)

# ---------- User-tunable ranges ----------
# Slider ranges exposed to whoever builds the UI around the fit.
THRESHOLD_RANGE: tuple[float, float] = (1.0, 400.0)      # pixels
ITERATIONS_RANGE: tuple[int, int] = (0, 200)
INLIER_PERCENT_RANGE: tuple[float, float] = (0.0, 100.0)

# ---------- Generic model typing ----------
# For the line fit this is LineModel.
M = TypeVar("M")


class ModelFitter(Protocol[M]):
    """
    Interface a model must implement to be usable by the RANSAC loop.

    RANSAC steps:
    1) Build a candidate model from a minimal sample (2 points for a line)
    2) Score all points with a per-point residual (perpendicular distance)
    3) Refit a steadier model from all inliers (least squares)
    """

    def fit_minimal(self, sample: Points2D) -> Optional[M]:
        """
        Build a candidate from the minimal sample.
        Return None only if no model can be represented at all.
        """
        ...

    def fit_least_squares(self, inliers: Points2D, reference: Points2D) -> Optional[M]:
        """
        Refit the model using all inliers.

        reference holds the first two points of the original input; the refit
        line is evaluated at their x-coordinates.
        Return None if the set is degenerate or the solve fails.
        """
        ...

    def residuals(self, model: M, points: Points2D) -> FloatArray:
        """
        Return one non-negative residual per point, shape (N,).
        Degenerate models report +inf rather than NaN.
        """
        ...


# ---------- Configuration ----------
@dataclass(frozen=True)
class RansacLineConfig:
    """
    Per-call tunables for the line RANSAC.

    distance_threshold:
      - Max perpendicular distance (pixels) for a point to count as an inlier.
      - Also the penalty an outlier adds to the consensus score.

    max_iterations:
      - Exact number of candidate lines sampled. 0 is legal and returns the
        initial degenerate best.

    min_inlier_fraction:
      - A candidate is only accepted if inliers / N >= this value, in [0, 1].
    """
    distance_threshold: float = 10.0
    max_iterations: int = 100
    min_inlier_fraction: float = 0.0

    @classmethod
    def from_percent(
            cls,
            distance_threshold: float,
            max_iterations: int,
            inlier_percent: float,
    ) -> "RansacLineConfig":
        """
        Build a config from slider-style values (inlier fraction given in %).
        """
        return cls(
            distance_threshold=float(distance_threshold),
            max_iterations=int(max_iterations),
            min_inlier_fraction=float(inlier_percent) / 100.0,
        )

    def validate(self) -> None:
        """
        Raise ValueError naming the first out-of-range field.
        """
        if not self.distance_threshold > 0.0:
            raise ValueError(f"distance_threshold must be > 0, got {self.distance_threshold}")
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")
        if not (0.0 <= self.min_inlier_fraction <= 1.0):
            raise ValueError(f"min_inlier_fraction must be in [0, 1], got {self.min_inlier_fraction}")

    def clamped(self) -> "RansacLineConfig":
        """
        Return a copy with every field clamped to its nearest valid value.

        A non-positive (or NaN) threshold becomes the lower end of
        THRESHOLD_RANGE so the scorer still has a penalty to add.
        """
        tau = float(self.distance_threshold)
        if not tau > 0.0:
            tau = THRESHOLD_RANGE[0]

        frac = float(self.min_inlier_fraction)
        frac = 0.0 if np.isnan(frac) else float(np.clip(frac, 0.0, 1.0))

        return replace(
            self,
            distance_threshold=tau,
            max_iterations=max(0, int(self.max_iterations)),
            min_inlier_fraction=frac,
        )


# ---------- Result containers ----------
# frozen=True means "immutable" after construction
@dataclass(frozen=True)
class ScoreResult:
    score: float            # threshold-clamped distance sum, lower is better
    inliers: Mask1D         # distance <= threshold
    distances: FloatArray   # perpendicular distance per point (+inf if degenerate)

    @property
    def num_inliers(self) -> int:
        return int(np.count_nonzero(self.inliers))

    @property
    def outliers(self) -> Mask1D:
        return ~self.inliers


@dataclass(frozen=True)
class RansacResult(Generic[M]):
    model: M                 # final model (refined if refinement succeeded)
    sampled_model: M         # best two-point candidate before refinement
    inliers: Mask1D          # inlier mask under the sampled candidate
    num_inliers: int         # count of True values in inliers
    score: float             # consensus score of the sampled candidate (inf if none accepted)
    iterations: int          # how many RANSAC iterations were run
    threshold: float         # the inlier threshold used
    refined: bool            # True if least squares replaced the sampled model

    @property
    def outliers(self) -> Mask1D:
        return ~self.inliers

    @property
    def num_outliers(self) -> int:
        return int(self.inliers.shape[0]) - self.num_inliers


# ---------- Helper Function ----------
def as_points2d(pts) -> Points2D:
    """
    Convert any array-like of (x, y) pairs into a float64 (N,2) array.
    An empty input becomes shape (0, 2).
    """
    arr = np.asarray(pts, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.float64)

    # Validate shape
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected points shape (N, 2) but got {arr.shape}")

    # Copy so the caller's array is never aliased
    return arr.copy()
