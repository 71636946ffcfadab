"""Hair color from the region around and above the face.

There is no hair landmark, so the sampler works by elimination: it
crops a generous window around the face, then removes everything that
looks like background, highlight, eye, face or skin. What survives is
treated as hair.

Exclusion cascade, applied per pixel of the crop:

1. Background: close to one of the corner-patch colors (looser near
   the crop edge), very light, or pale and unsaturated.
2. Eyes: discs around the iris centers.
3. Face: inside the (slightly shrunk) face polygon.
4. Skin: close to the forehead skin estimate, with a looser threshold
   in the forehead band.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from facetint.color.dominant import get_dominant_color
from facetint.color.space import color_distances, rgb_to_hsl_array
from facetint.config import HairSamplerConfig
from facetint.geometry import ellipse_polygon, points_in_polygon, scale_polygon
from facetint.output import HAIR, ColorClassification, HairMaskStats, UnknownAttribute
from facetint.samplers.base import CropSink, classify_sample
from facetint.types import FaceDetection, LandmarkGroup, PixelBuffer

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def _face_polygon(
    face: FaceDetection, offset_x: float, offset_y: float, config: HairSamplerConfig
) -> np.ndarray:
    silhouette = face.points(LandmarkGroup.SILHOUETTE)
    if silhouette is not None and len(silhouette) > config.min_silhouette_points:
        return scale_polygon(silhouette, config.face_scale) - (offset_x, offset_y)

    fx, fy, fw, fh = face.box
    return ellipse_polygon(
        fx + fw / 2 - offset_x,
        fy + fh / 2 - offset_y,
        fw / 2 * config.ellipse_ratio,
        fh / 2 * config.ellipse_ratio,
        config.ellipse_step_deg,
    )


def _forehead_bottom(face: FaceDetection, config: HairSamplerConfig) -> float:
    left = face.points(LandmarkGroup.LEFT_EYEBROW_UPPER)
    right = face.points(LandmarkGroup.RIGHT_EYEBROW_UPPER)
    if left is not None and right is not None:
        return float(min(left[:, 1].min(), right[:, 1].min()))
    _, fy, _, fh = face.box
    return fy + fh * config.forehead_fallback_ratio


def _estimate_skin(
    rgb: np.ndarray, xs: np.ndarray, ys: np.ndarray,
    top: float, bottom: float, left: float, right: float,
    config: HairSamplerConfig,
) -> RGB:
    inset = config.forehead_inset_px
    strip = (ys >= top + inset) & (ys < bottom - inset) & (xs >= left) & (xs < right)
    samples = rgb[strip]
    if len(samples) <= config.min_skin_samples:
        return tuple(config.default_skin)
    mean = samples.astype(np.float64).mean(axis=0)
    return (_round(mean[0]), _round(mean[1]), _round(mean[2]))


def _background_colors(rgb: np.ndarray, corner: int, config: HairSamplerConfig, seed) -> List[RGB]:
    patches = np.concatenate([
        rgb[:corner, :corner].reshape(-1, 3),
        rgb[:corner, -corner:].reshape(-1, 3),
        rgb[-corner:, :corner].reshape(-1, 3),
        rgb[-corner:, -corner:].reshape(-1, 3),
    ])
    colors: List[RGB] = []
    if len(patches) > config.min_background_samples:
        result = get_dominant_color(patches, k=config.background_clusters, seed=seed)
        if result is not None:
            colors = [(c.r, c.g, c.b) for c in result.clusters]
    if not colors:
        colors = [tuple(config.default_background)]
    return colors


def sample_hair_color(
    face: FaceDetection,
    pixels: PixelBuffer,
    config: Optional[HairSamplerConfig] = None,
    debug: Optional[CropSink] = None,
    person_index: int = 0,
    seed: Optional[int] = None,
) -> ColorClassification:
    """Classify the hair color of one face.

    Returns an unknown result with the surviving pixel count when too
    little of the crop is left after exclusion (short hair, bald, or a
    background close to the hair color).
    """
    config = config or HairSamplerConfig()
    fx, fy, fw, fh = face.box

    # ── Crop window ──
    top = max(0.0, fy - fh * config.top_pad_ratio)
    bottom = min(float(pixels.height), fy + fh * config.bottom_ratio)
    left = max(0.0, fx - fw * config.side_pad_ratio)
    right = min(float(pixels.width), fx + fw + fw * config.side_pad_ratio)
    crop_w = _round(right - left)
    crop_h = _round(bottom - top)
    if crop_w <= config.min_crop_px or crop_h <= config.min_crop_px:
        return UnknownAttribute(kind=HAIR, reason="invalid crop region")

    crop = pixels.crop(_round(left), _round(top), crop_w, crop_h)
    rgb = crop.rgb
    ys, xs = np.mgrid[0:crop_h, 0:crop_w]

    # ── Reference regions in crop coordinates ──
    polygon = _face_polygon(face, left, top, config)
    fh_top = fy - top
    fh_bottom = _forehead_bottom(face, config) - top
    fh_left = fx - left + fw * config.forehead_inset_ratio
    fh_right = fx - left + fw * (1 - config.forehead_inset_ratio)

    skin = _estimate_skin(rgb, xs, ys, fh_top, fh_bottom, fh_left, fh_right, config)
    corner = max(config.min_corner_px, int(math.floor(min(crop_w, crop_h) * config.corner_ratio)))
    backgrounds = _background_colors(rgb, corner, config, seed)

    # ── Background ──
    bg_dist = np.min(np.stack([color_distances(rgb, c) for c in backgrounds]), axis=0)
    hsl = rgb_to_hsl_array(rgb)
    edge = np.minimum(np.minimum(xs, ys), np.minimum(crop_w - 1 - xs, crop_h - 1 - ys))
    background = (
        (bg_dist < config.background_distance)
        | (hsl[..., 2] > config.white_min_lightness)
        | ((hsl[..., 1] < config.pale_max_saturation) & (hsl[..., 2] > config.pale_min_lightness))
        | ((edge < corner) & (bg_dist < config.edge_background_distance))
    )

    # ── Eyes ──
    eyes = np.zeros(background.shape, dtype=bool)
    eye_radius = fw * config.eye_radius_ratio
    for group in (LandmarkGroup.LEFT_EYE_IRIS, LandmarkGroup.RIGHT_EYE_IRIS):
        iris = face.points(group)
        if iris is not None:
            cx, cy = iris[0, 0] - left, iris[0, 1] - top
            eyes |= np.hypot(xs - cx, ys - cy) < eye_radius

    # ── Face and skin ──
    margin = config.forehead_margin_px
    in_face = points_in_polygon(xs, ys, polygon)
    skin_dist = color_distances(rgb, skin)
    forehead_band = (
        (ys >= fh_top) & (ys <= fh_bottom + margin)
        & (xs >= fh_left - margin) & (xs <= fh_right + margin)
    )
    skin_like = (skin_dist < config.skin_distance) | (
        forehead_band & (skin_dist < config.forehead_skin_distance)
    )

    # Pixels outside the source image arrive transparent and never count
    hair = (crop.data[..., 3] > 0) & ~background & ~eyes & ~in_face & ~skin_like
    samples = rgb[hair]

    if debug is not None:
        out = crop.data.copy()
        out[~hair, 3] = 0
        debug.save(person_index, HAIR, PixelBuffer(out))

    logger.debug(
        "Face %s: hair crop %dx%d, %d px kept, skin=%s, %d background colors",
        face.face_id, crop_w, crop_h, len(samples), skin, len(backgrounds),
    )
    if len(samples) < config.min_pixels:
        return UnknownAttribute(
            kind=HAIR, reason="insufficient hair pixels or bald", pixel_count=int(len(samples))
        )

    stats = HairMaskStats(
        crop_size=(crop_w, crop_h),
        background_colors=tuple(tuple(int(v) for v in c) for c in backgrounds),
        skin_color=tuple(int(v) for v in skin),
    )
    return classify_sample(
        HAIR, samples, config.clusters, config.expected_pixels, seed=seed, hair_stats=stats
    )


__all__ = ["sample_hair_color"]
