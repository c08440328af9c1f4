"""
Geometry for previewing a line fit over its source image.

Nothing here draws. It computes what a renderer needs:
  - the fitted line (its two reference points)
  - the same line clipped to the image edges
  - the threshold band: two parallel lines at +/- threshold, also clipped
  - a one-line info text
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..ransac.line import LineModel
from ..blobs.report import LineFitReport

PixelSegment = tuple[tuple[int, int], tuple[int, int]]


@dataclass(frozen=True)
class PreviewGeometry:
    line: LineModel
    extended: Optional[LineModel]                                   # None: line misses the image
    band: tuple[Optional[LineModel], Optional[LineModel]]           # (-threshold side, +threshold side)
    drawable: bool
    info_text: str


def threshold_band(
        line: LineModel,
        threshold: float,
        image_size: tuple[float, float],
) -> tuple[Optional[LineModel], Optional[LineModel]]:
    """
    Offset the line by -threshold and +threshold, then clip both to the image.

    Either side is None if it falls outside the image (or the line is degenerate).
    """
    if line.is_degenerate():
        return None, None

    width, height = image_size
    lower = line.offset_line(-float(threshold)).extended_line(width, height)
    upper = line.offset_line(float(threshold)).extended_line(width, height)
    return lower, upper


def build_preview_geometry(report: LineFitReport) -> PreviewGeometry:
    """
    Everything needed to preview a LineFitReport.

    drawable is True only when more than one inlier was found and the line
    actually crosses the image.
    """
    extended = report.extended_line()
    band = threshold_band(report.line, report.threshold, report.source.image_size)

    return PreviewGeometry(
        line=report.line,
        extended=extended,
        band=band,
        drawable=report.num_inliers > 1 and extended is not None,
        info_text=f"Found {report.num_inliers} inliers and {report.num_outliers} outliers",
    )


def to_pixel_segment(line: LineModel) -> PixelSegment:
    """
    Integer endpoints for raster drawing APIs (e.g. cv2.line). Rounds to nearest.
    """
    return (
        (int(round(line.x1)), int(round(line.y1))),
        (int(round(line.x2)), int(round(line.y2))),
    )
