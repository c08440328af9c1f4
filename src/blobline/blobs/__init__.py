"""
Blobs package
"""
from .types import Blob, BlobsReport, as_blobs_report
from .report import LineFitReport, PUBLISH_KEYS
from .operation import FindLineInBlobs, find_line_in_blobs

__all__ = [
    "Blob", "BlobsReport", "as_blobs_report",
    "LineFitReport", "PUBLISH_KEYS",
    "FindLineInBlobs", "find_line_in_blobs",
]
