"""Dominant color extraction by k-means over RGB pixels.

Small samples (fewer pixels than clusters) skip clustering and use the
arithmetic mean. Clustering failures are logged and also fall back to
the mean; they never reach the caller.
"""

from __future__ import annotations

import logging
from typing import Optional

import cv2
import numpy as np

from facetint.output import ColorCluster, DominantColor

logger = logging.getLogger(__name__)

# cv2.kmeans termination: 20 iterations or centroid shift below 0.5
_CRITERIA = (cv2.TERM_CRITERIA_EPS + cv2.TERM_CRITERIA_MAX_ITER, 20, 0.5)
_ATTEMPTS = 3


def _mean_color(pixels: np.ndarray) -> DominantColor:
    mean = pixels.mean(axis=0)
    return DominantColor(r=float(mean[0]), g=float(mean[1]), b=float(mean[2]))


def get_dominant_color(
    pixels, k: int = 3, seed: Optional[int] = None
) -> Optional[DominantColor]:
    """Reduce a pixel sample to its dominant color.

    Args:
        pixels: (N, 3) RGB values (any numeric dtype) or a list of triples.
        k: Number of clusters.
        seed: Seed for OpenCV's RNG. None leaves initialization random,
            so centroids may vary slightly between runs.

    Returns:
        DominantColor, or None for an empty sample.
    """
    data = np.asarray(pixels, dtype=np.float32)
    if data.size == 0:
        return None
    data = data.reshape(-1, 3)
    if data.shape[0] < k:
        return _mean_color(data.astype(np.float64))

    if seed is not None:
        cv2.setRNGSeed(int(seed))

    try:
        _, labels, centers = cv2.kmeans(
            data, k, None, _CRITERIA, _ATTEMPTS, cv2.KMEANS_PP_CENTERS
        )
    except cv2.error as e:
        logger.warning("k-means failed on %d pixels (k=%d): %s", data.shape[0], k, e)
        return _mean_color(data.astype(np.float64))

    if not np.all(np.isfinite(centers)):
        logger.warning("k-means produced non-finite centroids; using mean color")
        return _mean_color(data.astype(np.float64))

    sizes = np.bincount(labels.ravel(), minlength=k)
    total = data.shape[0]
    dominant_idx = int(np.argmax(sizes))
    rounded = np.floor(centers + 0.5).astype(int)

    clusters = tuple(
        ColorCluster(
            r=int(c[0]), g=int(c[1]), b=int(c[2]),
            size=int(sizes[i]),
            percentage=int(np.floor(sizes[i] / total * 100 + 0.5)),
        )
        for i, c in enumerate(rounded)
    )
    r, g, b = rounded[dominant_idx]
    return DominantColor(r=int(r), g=int(g), b=int(b), clusters=clusters)


__all__ = ["get_dominant_color"]
