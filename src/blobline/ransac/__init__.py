# Andy Zhao
"""
RANSAC package

This module provides:
- A RANSAC line fit with a threshold-clamped consensus score
- Typed geometry primitives and the LineModel
- Model interface definitions (ModelFitter)
- Least-squares refinement over the final inliers
"""

from .types import (
    FloatArray, BoolArray, Points2D, Mask1D,
    THRESHOLD_RANGE, ITERATIONS_RANGE, INLIER_PERCENT_RANGE,
    ModelFitter, RansacLineConfig, ScoreResult, RansacResult, as_points2d,
)

from .line import (
    LineModel, perpendicular_distances, fit_line_minimal, fit_line_least_squares, is_valid_line,
)

from .line_fitter import LineFitter

from .scoring import clamped_score, score_candidate

from .core import RandomSource, ransac_line, suggest_max_iterations

__all__ = [
    "FloatArray", "BoolArray", "Points2D", "Mask1D",
    "THRESHOLD_RANGE", "ITERATIONS_RANGE", "INLIER_PERCENT_RANGE",
    "ModelFitter", "RansacLineConfig", "ScoreResult", "RansacResult", "as_points2d",
    "LineModel", "perpendicular_distances", "fit_line_minimal", "fit_line_least_squares", "is_valid_line",
    "LineFitter",
    "clamped_score", "score_candidate",
    "RandomSource", "ransac_line", "suggest_max_iterations",
]
