# Andy Zhao
"""
Find Line In Blobs: best-fit line through a set of blobs, ignoring outliers.

This class is STATEFUL only in its random source:
  - one generator is created (or injected) per operation
  - every perform() call advances it, nothing else carries over between calls
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..ransac.types import RansacLineConfig
from ..ransac.core import RandomSource, ransac_line
from .types import BlobsReport, as_blobs_report
from .report import LineFitReport


@dataclass
class FindLineInBlobs:
    """
    Blobs in, LineFitReport out.

    - config: threshold / iterations / inlier fraction
    - seed: seed for the internal generator (None -> OS entropy)
    - rng: inject a generator instead (tests, or to share one across operations)

    Usage:
        op = FindLineInBlobs(RansacLineConfig(distance_threshold=5, max_iterations=100))
        report = op.perform(blobs_report)
    """
    config: RansacLineConfig = field(default_factory=RansacLineConfig)
    seed: Optional[int] = None
    rng: Optional[RandomSource] = None

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = np.random.default_rng(self.seed)

    def perform(self, blobs: BlobsReport) -> LineFitReport:
        """
        Run the fit on one blob set. Always returns a report; fewer than two
        blobs give LineFitReport.empty with the configured threshold.
        """
        result = ransac_line(blobs.points, self.config, rng=self.rng)
        return LineFitReport.from_result(blobs, result)


def find_line_in_blobs(
        blobs,
        config: Optional[RansacLineConfig] = None,
        *,
        image_size: tuple[float, float] = (0.0, 0.0),
        image: Optional[np.ndarray] = None,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None,
) -> LineFitReport:
    """
    One-shot helper around FindLineInBlobs.

    blobs may be a BlobsReport, a sequence of Blob, or (N,2) coordinates.
    image_size / image are only used when blobs is not already a BlobsReport.
    """
    report = as_blobs_report(blobs, image_size=image_size, image=image)
    op = FindLineInBlobs(
        config=config if config is not None else RansacLineConfig(),
        seed=seed,
        rng=rng,
    )
    return op.perform(report)
