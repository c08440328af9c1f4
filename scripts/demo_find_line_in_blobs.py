from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from blobline.blobs import BlobsReport, FindLineInBlobs, LineFitReport
from blobline.ransac import RansacLineConfig
from blobline.viz import build_preview_geometry, to_pixel_segment


def make_blob_image(
        rng: np.random.Generator,
        *,
        width: int = 640,
        height: int = 480,
        n_in: int = 14,
        n_out: int = 6,
        noise_px: float = 2.0,
) -> np.ndarray:
    """
    White canvas with dark dots: n_in along a slanted line (+ noise), n_out scattered.
    """
    img = np.full((height, width, 3), 255, dtype=np.uint8)

    # Inliers on y = 0.35 x + 120
    xs = np.linspace(40, width - 40, n_in)
    ys = 0.35 * xs + 120 + rng.normal(0.0, noise_px, size=n_in)

    # Outliers anywhere
    ox = rng.uniform(20, width - 20, size=n_out)
    oy = rng.uniform(20, height - 20, size=n_out)

    for x, y in zip(np.concatenate([xs, ox]), np.concatenate([ys, oy])):
        cv2.circle(img, (int(round(x)), int(round(y))), 6, (0, 0, 0), -1, cv2.LINE_AA)
    return img


def detect_blobs(img_bgr: np.ndarray) -> BlobsReport:
    """
    SimpleBlobDetector with area filtering only (dark blobs on white).
    """
    params = cv2.SimpleBlobDetector_Params()
    params.filterByArea = True
    params.minArea = 20
    params.maxArea = 500
    params.filterByCircularity = False
    params.filterByConvexity = False
    params.filterByInertia = False

    detector = cv2.SimpleBlobDetector_create(params)
    gray = cv2.cvtColor(img_bgr, cv2.COLOR_BGR2GRAY)
    keypoints = detector.detect(gray)
    return BlobsReport.from_keypoints(keypoints, image=img_bgr)


def draw_report(report: LineFitReport, *, show_input_image: bool = True) -> Optional[np.ndarray]:
    """
    Inliers green, outliers red, fitted points white, clipped line green,
    threshold band yellow. Returns None if there is no image to draw on.
    """
    img = report.source.image
    if img is None or img.size == 0:
        return None

    vis = img.copy() if img.ndim == 3 else cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    if not show_input_image:
        vis[:] = 0

    for blob in report.inliers:
        cv2.circle(vis, (int(round(blob.x)), int(round(blob.y))), 9, (0, 200, 0), 2)
    for blob in report.outliers:
        cv2.circle(vis, (int(round(blob.x)), int(round(blob.y))), 9, (0, 0, 230), 2)

    geometry = build_preview_geometry(report)
    if geometry.drawable:
        p1, p2 = to_pixel_segment(geometry.line)
        cv2.circle(vis, p1, 2, (255, 255, 255), 2)
        cv2.circle(vis, p2, 2, (255, 255, 255), 2)

        for side in geometry.band:
            if side is not None:
                q1, q2 = to_pixel_segment(side)
                cv2.line(vis, q1, q2, (0, 215, 255), 1, cv2.LINE_AA)

        e1, e2 = to_pixel_segment(geometry.extended)
        cv2.line(vis, e1, e2, (0, 255, 0), 2, cv2.LINE_AA)

    cv2.putText(vis, geometry.info_text, (10, 25),
                cv2.FONT_HERSHEY_SIMPLEX, 0.6, (40, 40, 40), 2, cv2.LINE_AA)
    return vis


def main() -> None:
    rng = np.random.default_rng(0)

    img = make_blob_image(rng)
    blobs = detect_blobs(img)
    print(f"detected blobs: {len(blobs)}")

    op = FindLineInBlobs(
        config=RansacLineConfig.from_percent(
            distance_threshold=8.0,
            max_iterations=100,
            inlier_percent=50.0,
        ),
        seed=42,
    )
    report = op.perform(blobs)

    print("line:", report)
    print("published:", report.publish_values())
    print("inliers:", report.num_inliers, "/", len(blobs), "outliers:", report.num_outliers)

    vis = draw_report(report)
    if vis is None:
        return

    out_path = Path("outputs") / "find_line_in_blobs.png"
    out_path.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(out_path), vis)
    print(f"[saved] {out_path}")

    cv2.imshow("Find Line In Blobs", vis)
    cv2.waitKey(0)
    cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
