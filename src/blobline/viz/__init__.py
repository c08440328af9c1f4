from .overlay import (
    PreviewGeometry, PixelSegment,
    build_preview_geometry, threshold_band, to_pixel_segment,
)

__all__ = [
    "PreviewGeometry", "PixelSegment",
    "build_preview_geometry", "threshold_band", "to_pixel_segment",
]
