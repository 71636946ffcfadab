"""Skin tone from the face polygon with the eyes cut out."""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from facetint.color.space import brightness
from facetint.config import SkinSamplerConfig
from facetint.geometry import (
    circle_polygon,
    ellipse_polygon,
    eyelid_polygon,
    points_in_polygon,
    polygon_bounds,
    scale_polygon,
)
from facetint.output import SKIN, ColorClassification, UnknownAttribute
from facetint.samplers.base import CropSink, classify_sample
from facetint.types import FaceDetection, LandmarkGroup, PixelBuffer

logger = logging.getLogger(__name__)


def face_polygon(face: FaceDetection, config: SkinSamplerConfig) -> np.ndarray:
    """Silhouette pulled slightly inward, or an ellipse inside the box."""
    silhouette = face.points(LandmarkGroup.SILHOUETTE)
    if silhouette is not None and len(silhouette) > config.min_silhouette_points:
        return scale_polygon(silhouette, config.face_scale)

    fx, fy, fw, fh = face.box
    return ellipse_polygon(
        fx + fw / 2,
        fy + fh / 2,
        fw / 2 * config.ellipse_rx_ratio,
        fh / 2 * config.ellipse_ry_ratio,
        config.ellipse_step_deg,
    )


def eye_polygon(
    face: FaceDetection,
    upper_group: LandmarkGroup,
    lower_group: LandmarkGroup,
    iris_group: LandmarkGroup,
    config: SkinSamplerConfig,
) -> Optional[np.ndarray]:
    """Eye outline from eyelid contours, else a circle around the iris."""
    upper = face.points(upper_group)
    lower = face.points(lower_group)
    if upper is not None and lower is not None:
        return eyelid_polygon(upper, lower)

    iris = face.points(iris_group)
    if iris is None:
        return None
    cx, cy = iris[0, 0], iris[0, 1]
    if len(iris) > 1:
        radius = math.hypot(iris[1, 0] - cx, iris[1, 1] - cy) * config.eye_circle_ratio
    else:
        radius = face.box[2] * config.eye_fallback_radius_ratio
    return circle_polygon(cx, cy, radius, config.eye_circle_step_deg)


def sample_skin_tone(
    face: FaceDetection,
    pixels: PixelBuffer,
    config: Optional[SkinSamplerConfig] = None,
    debug: Optional[CropSink] = None,
    person_index: int = 0,
    seed: Optional[int] = None,
) -> ColorClassification:
    """Classify skin tone, undertone and Fitzpatrick type of one face.

    Every pixel inside the face polygon and outside both eye polygons
    is a candidate; very dark and blown-out pixels are dropped before
    clustering.
    """
    config = config or SkinSamplerConfig()
    polygon = face_polygon(face, config)
    left_eye = eye_polygon(
        face, LandmarkGroup.LEFT_EYE_UPPER, LandmarkGroup.LEFT_EYE_LOWER,
        LandmarkGroup.LEFT_EYE_IRIS, config,
    )
    right_eye = eye_polygon(
        face, LandmarkGroup.RIGHT_EYE_UPPER, LandmarkGroup.RIGHT_EYE_LOWER,
        LandmarkGroup.RIGHT_EYE_IRIS, config,
    )

    bounds = polygon_bounds(polygon, pixels.width, pixels.height)
    if bounds is None or bounds[2] < bounds[0] or bounds[3] < bounds[1]:
        return UnknownAttribute(kind=SKIN, reason="insufficient pixels")
    min_x, min_y, max_x, max_y = bounds

    ys, xs = np.mgrid[min_y:max_y + 1, min_x:max_x + 1]
    region = points_in_polygon(xs, ys, polygon)
    region &= ~points_in_polygon(xs, ys, left_eye)
    region &= ~points_in_polygon(xs, ys, right_eye)

    window = pixels.rgb[min_y:max_y + 1, min_x:max_x + 1]
    lum = brightness(window)
    keep = region & (lum > config.min_brightness) & (lum < config.max_brightness)
    samples = window[keep]

    if debug is not None:
        out = np.zeros(window.shape[:2] + (4,), dtype=np.uint8)
        out[region, :3] = window[region]
        out[region, 3] = 255
        debug.save(person_index, SKIN, PixelBuffer(out))

    logger.debug(
        "Face %s: %d skin pixels of %d in region", face.face_id, len(samples), int(region.sum())
    )
    if len(samples) < config.min_pixels:
        return UnknownAttribute(kind=SKIN, reason="insufficient pixels")

    return classify_sample(SKIN, samples, config.clusters, config.expected_pixels, seed=seed)


__all__ = ["face_polygon", "eye_polygon", "sample_skin_tone"]
