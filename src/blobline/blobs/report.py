# Andy Zhao
"""
Result of fitting a line through a set of blobs.

LineFitReport is built once per fit and never mutated. It keeps a reference to
the input (image + blobs), the threshold, the inlier / outlier blobs and the
fitted line, and exposes the scalars meant for publishing:

    x1, y1, x2, y2, angle, height   (+ inlier / outlier counts)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..ransac.types import Mask1D, RansacResult
from ..ransac.line import LineModel
from .types import Blob, BlobsReport

# Publishing order
PUBLISH_KEYS: tuple[str, ...] = ("x1", "y1", "x2", "y2", "angle", "height")


@dataclass(frozen=True, eq=False)
class LineFitReport:
    source: BlobsReport                 # blobs + image the fit ran on
    threshold: float                    # inlier distance threshold used
    inliers: tuple[Blob, ...]           # distance <= threshold
    outliers: tuple[Blob, ...]          # distance > threshold
    line: LineModel                     # best line (least-squares refined when possible)
    inlier_mask: Mask1D = field(default_factory=lambda: np.zeros((0,), dtype=bool), repr=False)
    score: float = float("inf")         # consensus score of the winning candidate
    iterations: int = 0                 # RANSAC iterations run

    @classmethod
    def empty(cls, source: Optional[BlobsReport] = None, threshold: float = 0.0) -> "LineFitReport":
        """
        Canonical report for "no fit": no inliers, no outliers, zero line.
        """
        return cls(
            source=source if source is not None else BlobsReport(),
            threshold=float(threshold),
            inliers=(),
            outliers=(),
            line=LineModel.zero(),
        )

    @classmethod
    def from_result(cls, source: BlobsReport, result: RansacResult[LineModel]) -> "LineFitReport":
        """
        Split the source blobs by the RANSAC inlier mask.
        """
        if len(source) < 2:
            return cls.empty(source, result.threshold)

        mask = result.inliers
        if mask.shape != (len(source),):
            raise ValueError(f"Inlier mask shape {mask.shape} does not match {len(source)} blobs")

        inliers = tuple(b for b, keep in zip(source.blobs, mask) if keep)
        outliers = tuple(b for b, keep in zip(source.blobs, mask) if not keep)
        return cls(
            source=source,
            threshold=result.threshold,
            inliers=inliers,
            outliers=outliers,
            line=result.model,
            inlier_mask=mask,
            score=result.score,
            iterations=result.iterations,
        )

    # ---------- Counts ----------
    @property
    def num_inliers(self) -> int:
        return len(self.inliers)

    @property
    def num_outliers(self) -> int:
        return len(self.outliers)

    # ---------- Publishable scalars ----------
    @property
    def x1(self) -> float:
        return self.line.x1

    @property
    def y1(self) -> float:
        return self.line.y1

    @property
    def x2(self) -> float:
        return self.line.x2

    @property
    def y2(self) -> float:
        return self.line.y2

    @property
    def angle(self) -> float:
        return self.line.angle()

    @property
    def height(self) -> float:
        return self.line.height()

    def publish_values(self) -> dict[str, float]:
        """
        Scalars for structured export, keyed and ordered by PUBLISH_KEYS.
        """
        return {key: float(getattr(self, key)) for key in PUBLISH_KEYS}

    def summary(self) -> dict[str, float | int]:
        """
        publish_values() plus inlier / outlier counts.
        """
        values: dict[str, float | int] = dict(self.publish_values())
        values["num_inliers"] = self.num_inliers
        values["num_outliers"] = self.num_outliers
        return values

    # ---------- Geometry ----------
    def extended_line(self) -> Optional[LineModel]:
        """
        The fitted line clipped to the source image, or None if nothing to draw.
        """
        width, height = self.source.image_size
        return self.line.extended_line(width, height)

    def __str__(self) -> str:
        return str(self.line)
