# Andy Zhao
"""
Input side of the line fit: blobs found by an upstream detector.

A blob is a centroid (x, y) in image pixels plus its diameter. Only (x, y)
matter to the fit; size rides along so inliers / outliers can be handed back
as the caller's own blobs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

import numpy as np

from ..ransac.types import Points2D, as_points2d


@dataclass(frozen=True)
class Blob:
    x: float
    y: float
    size: float = 0.0


@dataclass(frozen=True, eq=False)
class BlobsReport:
    """
    Ordered blobs plus the image they were detected in.

    image_size:
      - (width, height) in pixels, used to clip lines for drawing.
      - Taken from image.shape when an image is given and size is left at (0, 0).

    image:
      - Optional source image (H,W) or (H,W,C). Only referenced, never read by the fit.
    """
    blobs: tuple[Blob, ...] = ()
    image_size: tuple[float, float] = (0.0, 0.0)
    image: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        # frozen: go through object.__setattr__ for normalisation
        object.__setattr__(self, "blobs", tuple(self.blobs))

        width, height = (float(v) for v in self.image_size)
        if (width, height) == (0.0, 0.0) and self.image is not None:
            height, width = (float(v) for v in self.image.shape[:2])

        if not (np.isfinite(width) and np.isfinite(height)) or width < 0.0 or height < 0.0:
            raise ValueError(f"image_size must be finite and non-negative, got {self.image_size}")
        object.__setattr__(self, "image_size", (width, height))

    def __len__(self) -> int:
        return len(self.blobs)

    @property
    def points(self) -> Points2D:
        """
        Blob centroids as a (N,2) float64 array, same order as blobs.
        """
        return as_points2d([(b.x, b.y) for b in self.blobs])

    @classmethod
    def from_points(
            cls,
            points,
            *,
            image_size: tuple[float, float] = (0.0, 0.0),
            image: Optional[np.ndarray] = None,
    ) -> "BlobsReport":
        """
        Wrap bare (N,2) coordinates as zero-size blobs.
        """
        pts = as_points2d(points)
        blobs = tuple(Blob(float(x), float(y)) for x, y in pts)
        return cls(blobs=blobs, image_size=image_size, image=image)

    @classmethod
    def from_keypoints(
            cls,
            keypoints: Iterable,
            *,
            image: Optional[np.ndarray] = None,
            image_size: tuple[float, float] = (0.0, 0.0),
    ) -> "BlobsReport":
        """
        Build from detector keypoints, e.g. cv2.SimpleBlobDetector.detect output.
        Anything with .pt (x, y) and .size works.
        """
        blobs = tuple(Blob(float(kp.pt[0]), float(kp.pt[1]), float(kp.size)) for kp in keypoints)
        return cls(blobs=blobs, image_size=image_size, image=image)


def as_blobs_report(
        blobs,
        *,
        image_size: tuple[float, float] = (0.0, 0.0),
        image: Optional[np.ndarray] = None,
) -> BlobsReport:
    """
    Accept a BlobsReport, a sequence of Blob, or (N,2) coordinates.
    """
    if isinstance(blobs, BlobsReport):
        return blobs

    if isinstance(blobs, Sequence) and len(blobs) > 0 and all(isinstance(b, Blob) for b in blobs):
        return BlobsReport(blobs=tuple(blobs), image_size=image_size, image=image)

    return BlobsReport.from_points(blobs, image_size=image_size, image=image)
