"""Eye color from the iris ring.

Pixels are read along arcs between an inner and outer fraction of the
iris radius, skipping the pupil and dark pixels. The left
iris is preferred; the right one takes over when the left yields too
few pixels and the right yields more.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

import numpy as np

from facetint.color.space import brightness
from facetint.config import EyeSamplerConfig
from facetint.geometry import estimate_ring_radius, round_half_up
from facetint.output import EYE, ColorClassification, UnknownAttribute
from facetint.samplers.base import CropSink, classify_sample, empty_pixels
from facetint.types import FaceDetection, LandmarkGroup, PixelBuffer

logger = logging.getLogger(__name__)

# Radius assumed for the debug crop when the ring has no boundary point
_DEBUG_RADIUS = 15.0


def _ring_offsets(radius: float, config: EyeSamplerConfig) -> Tuple[np.ndarray, np.ndarray]:
    inner = radius * config.inner_ratio
    outer = radius * config.outer_ratio
    if outer < inner:
        return np.empty(0), np.empty(0)
    n_radii = int(math.floor((outer - inner) / config.radial_step_px)) + 1
    radii = inner + config.radial_step_px * np.arange(n_radii)
    angles = np.radians(np.arange(0.0, 360.0, config.angle_step_deg))
    a, r = np.meshgrid(angles, radii, indexing="ij")
    return (r * np.cos(a)).ravel(), (r * np.sin(a)).ravel()


def extract_iris_ring_pixels(
    ring: Optional[np.ndarray], pixels: PixelBuffer, config: EyeSamplerConfig
) -> np.ndarray:
    """Collect (N, 3) RGB samples from an iris ring.

    Duplicated pixel positions are sampled once per hit. Rings with
    fewer than two points give an empty sample.
    """
    if ring is None or len(ring) < 2:
        return empty_pixels()

    cx, cy = ring[0, 0], ring[0, 1]
    dx, dy = _ring_offsets(estimate_ring_radius(ring), config)
    px = round_half_up(cx + dx)
    py = round_half_up(cy + dy)

    inside = (px >= 0) & (px < pixels.width) & (py >= 0) & (py < pixels.height)
    samples = pixels.rgb[py[inside], px[inside]]
    return samples[brightness(samples) > config.min_brightness]


def _save_eye_crop(
    ring: np.ndarray, pixels: PixelBuffer, debug: CropSink, person_index: int
) -> None:
    cx, cy = ring[0, 0], ring[0, 1]
    radius = _DEBUG_RADIUS
    if len(ring) > 1:
        radius = float(math.hypot(ring[1, 0] - cx, ring[1, 1] - cy))
    x = max(0.0, cx - radius * 2)
    y = max(0.0, cy - radius * 2)
    w = min(radius * 4, pixels.width - x)
    h = min(radius * 4, pixels.height - y)
    if w > 0 and h > 0:
        crop = pixels.crop(int(round(x)), int(round(y)), int(round(w)), int(round(h)))
        debug.save(person_index, EYE, crop)


def sample_eye_color(
    face: FaceDetection,
    pixels: PixelBuffer,
    config: Optional[EyeSamplerConfig] = None,
    debug: Optional[CropSink] = None,
    person_index: int = 0,
    seed: Optional[int] = None,
) -> ColorClassification:
    """Classify the eye color of one face.

    Args:
        face: Detection in the coordinate frame of ``pixels``.
        pixels: Image (or person crop) to sample from.
        config: Sampling thresholds.
        debug: Optional sink for the iris crop.
        person_index: Used to name debug output.
        seed: Optional k-means seed.
    """
    config = config or EyeSamplerConfig()
    left = face.points(LandmarkGroup.LEFT_EYE_IRIS)
    right = face.points(LandmarkGroup.RIGHT_EYE_IRIS)

    usable_left = left is not None and len(left) > 1
    usable_right = right is not None and len(right) > 1
    if not usable_left and not usable_right:
        return UnknownAttribute(kind=EYE, reason="missing iris landmarks")

    best = empty_pixels()
    used = None
    if usable_left:
        best = extract_iris_ring_pixels(left, pixels, config)
        used = left
    if len(best) < config.fallback_below and usable_right:
        right_pixels = extract_iris_ring_pixels(right, pixels, config)
        if len(right_pixels) > len(best):
            best = right_pixels
            used = right
            logger.debug("Face %s: using right iris (%d px)", face.face_id, len(best))

    if debug is not None and used is not None:
        _save_eye_crop(used, pixels, debug, person_index)

    if len(best) < config.min_pixels:
        return UnknownAttribute(kind=EYE, reason="insufficient iris pixels")

    return classify_sample(EYE, best, config.clusters, config.expected_pixels, seed=seed)


__all__ = ["extract_iris_ring_pixels", "sample_eye_color"]
