# Andy Zhao
"""
Adapter: makes the line functions conform to the ModelFitter Protocol.

This keeps ransac/core.py free of line-specific math.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .types import Points2D, FloatArray, ModelFitter
from .line import (
    LineModel, fit_line_minimal, fit_line_least_squares, perpendicular_distances,
)


@dataclass(frozen=True)
class LineFitter(ModelFitter[LineModel]):
    """
    Two-point line model for RANSAC.
    """

    def fit_minimal(self, sample: Points2D) -> Optional[LineModel]:
        return fit_line_minimal(sample)

    def fit_least_squares(self, inliers: Points2D, reference: Points2D) -> Optional[LineModel]:
        """
        Refit with all inliers, evaluated at the x of the reference points.
        """
        return fit_line_least_squares(inliers, (float(reference[0, 0]), float(reference[1, 0])))

    def residuals(self, model: LineModel, points: Points2D) -> FloatArray:
        return perpendicular_distances(model, points)
