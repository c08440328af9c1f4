# Andy Zhao
"""
Line model utilities.

A line is stored as two reference points (x1, y1) and (x2, y2). The model is the
INFINITE line through them; the points are not segment boundaries.

Perpendicular distance from p = (px, py) to that line:

    d = |(y2 - y1) * px - (x2 - x1) * py + (x2 * y1 - y2 * x1)|
        / sqrt((y2 - y1)^2 + (x2 - x1)^2)

Least-squares refit (after RANSAC picks inliers) regresses y on x:

    y ≈ m * x + b
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .types import Points2D, FloatArray, as_points2d


# ---------- Line Model ----------
@dataclass(frozen=True)
class LineModel:
    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def zero(cls) -> "LineModel":
        """
        Canonical degenerate line, used when no fit exists.
        """
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def through(cls, p0, p1) -> "LineModel":
        return cls(float(p0[0]), float(p0[1]), float(p1[0]), float(p1[1]))

    def as_array(self) -> Points2D:
        """
        Return the two reference points as a (2,2) array.
        """
        return np.array([[self.x1, self.y1], [self.x2, self.y2]], dtype=np.float64)

    def is_degenerate(self) -> bool:
        """
        True when both reference points coincide (direction undefined).
        """
        return self.x1 == self.x2 and self.y1 == self.y2

    def is_vertical(self) -> bool:
        return self.x1 == self.x2

    def angle(self) -> float:
        """
        Direction in degrees: atan2(dy, dx), range (-180, 180].
        """
        return math.degrees(math.atan2(self.y2 - self.y1, self.x2 - self.x1))

    def height(self) -> float:
        """
        Mean of the two y-values (vertical position in the image).
        """
        return (self.y1 + self.y2) / 2.0

    def length(self) -> float:
        """
        Distance between the reference points.
        """
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    def extended_line(self, max_x: float, max_y: float) -> Optional["LineModel"]:
        """
        Clip the infinite line to the image rectangle [0, max_x] x [0, max_y].

        - Vertical line: segment (x1, 0) -> (x1, max_y).
        - Otherwise: y = m*x + b evaluated at x = 0 and x = max_x, then
          clipped against the rectangle.

        Returns None when there is nothing to draw: the line misses the
        rectangle, or the line is degenerate.
        """
        max_x = float(max_x)
        max_y = float(max_y)
        if not (np.isfinite(max_x) and np.isfinite(max_y)) or max_x < 0.0 or max_y < 0.0:
            raise ValueError(f"Expected finite non-negative bounds, got ({max_x}, {max_y})")

        if self.is_degenerate():
            return None

        # Special case: infinite slope
        if self.is_vertical():
            if not (0.0 <= self.x1 <= max_x):
                return None
            return LineModel(self.x1, 0.0, self.x1, max_y)

        # General case: y = m*x + b
        m = (self.y1 - self.y2) / (self.x1 - self.x2)
        b = self.y1 - m * self.x1
        return _clip_segment(0.0, b, max_x, m * max_x + b, max_x, max_y)

    def offset_line(self, d: float) -> "LineModel":
        """
        Parallel line at perpendicular distance d. The sign of d picks the side.

        - Vertical line: shift both x by d.
        - Otherwise: a perpendicular offset d is a vertical shift of
          d / cos(angle), applied to both y.
        """
        d = float(d)
        if self.is_vertical():
            return LineModel(self.x1 + d, self.y1, self.x2 + d, self.y2)

        # cos(atan2(dy, dx)) == dx / length
        dy = d * self.length() / (self.x2 - self.x1)
        return LineModel(self.x1, self.y1 + dy, self.x2, self.y2 + dy)


# ---------- Clipping Helper ----------
def _clip_segment(
        x0: float, y0: float, x1: float, y1: float,
        max_x: float, max_y: float,
) -> Optional[LineModel]:
    """
    Liang-Barsky clip of the segment (x0, y0) -> (x1, y1) to [0, max_x] x [0, max_y].

    The segment is P(t) = P0 + t * (P1 - P0), t in [0, 1].
    Each rectangle edge gives one inequality p * t <= q; t0/t1 shrink
    until the visible part remains, or t0 > t1 means it is fully outside.
    """
    dx = x1 - x0
    dy = y1 - y0

    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0), (dx, max_x - x0), (-dy, y0), (dy, max_y - y0)):
        if p == 0.0:
            # Parallel to this edge: either fully inside it or fully outside
            if q < 0.0:
                return None
            continue
        r = q / p
        if p < 0.0:
            t0 = max(t0, r)
        else:
            t1 = min(t1, r)
        if t0 > t1:
            return None

    return LineModel(x0 + t0 * dx, y0 + t0 * dy, x0 + t1 * dx, y0 + t1 * dy)


# ---------- Distances ----------
def perpendicular_distances(line: LineModel, pts: Points2D) -> FloatArray:
    """
    Perpendicular distance from every point to the infinite line.

    Returns shape (N,). If the line is degenerate (both reference points coincide)
    the distance is undefined, so every entry is +inf.
    """
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {pts.shape}")

    dx = line.x2 - line.x1
    dy = line.y2 - line.y1
    denominator = math.hypot(dx, dy)
    if denominator == 0.0:
        return np.full((pts.shape[0],), np.inf, dtype=np.float64)

    numerator = np.abs(dy * pts[:, 0] - dx * pts[:, 1] + (line.x2 * line.y1 - line.y2 * line.x1))
    return (numerator / denominator).astype(np.float64)


# ---------- Line Fitting ----------
def fit_line_minimal(sample: Points2D) -> LineModel:
    """
    Candidate line from exactly 2 points.

    Coincident points still produce a (degenerate) LineModel; the scorer
    turns that into maximal-distance outliers instead of NaN.
    """
    if sample.shape != (2, 2):
        raise ValueError(f"fit_line_minimal expects a (2,2) sample, got {sample.shape}")
    return LineModel.through(sample[0], sample[1])


def fit_line_least_squares(
        inliers: Points2D,
        x_eval: tuple[float, float],
) -> Optional[LineModel]:
    """
    Fit y = m*x + b over all inliers and evaluate it at two x-coordinates.

    x_eval:
      - Conventionally the x of the first two points of the original input.
      - If both are equal the refit would collapse to one point, so the
        inliers' min / max x are used instead.

    Uses np.linalg.lstsq(A, y) with A = [x, 1].

    Returns None if:
      - fewer than 2 inliers
      - all inliers share one x (rank < 2, vertical cluster)
      - the evaluated coordinates are not finite
    """
    inliers = as_points2d(inliers)
    if inliers.shape[0] < 2:
        return None

    x = inliers[:, 0]
    y = inliers[:, 1]

    # Vertical cluster: slope undefined
    if np.ptp(x) == 0.0:
        return None

    x_a, x_b = float(x_eval[0]), float(x_eval[1])
    if x_a == x_b:
        x_a, x_b = float(np.min(x)), float(np.max(x))

    A = np.column_stack([x, np.ones_like(x)])
    try:
        theta, residuals, rank, singular_vals = np.linalg.lstsq(A, y, rcond=None)
    except np.linalg.LinAlgError:
        return None

    # 2 unknowns (m, b); anything less is numerically vertical
    if rank < 2:
        return None

    m, b = float(theta[0]), float(theta[1])
    refit = LineModel(x_a, m * x_a + b, x_b, m * x_b + b)
    if not is_valid_line(refit):
        return None
    return refit


def is_valid_line(line: LineModel) -> bool:
    """
    Verify all four coordinates are finite.
    Used for rejecting failed fits.
    """
    return bool(np.isfinite([line.x1, line.y1, line.x2, line.y2]).all())
