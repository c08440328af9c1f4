"""
blobline: robust RANSAC line fitting over detected blobs.
"""

from .ransac import LineModel, RansacLineConfig, ransac_line, suggest_max_iterations
from .blobs import Blob, BlobsReport, LineFitReport, FindLineInBlobs, find_line_in_blobs

__version__ = "0.1.0"

__all__ = [
    "LineModel", "RansacLineConfig", "ransac_line", "suggest_max_iterations",
    "Blob", "BlobsReport", "LineFitReport", "FindLineInBlobs", "find_line_in_blobs",
]
