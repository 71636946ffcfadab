"""Shared pieces of the region samplers.

Every sampler ends the same way: reduce the collected pixels to a
dominant color, convert to HSL, classify, and look up a name. That
step lives here together with the confidence formula.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Protocol

import numpy as np

from facetint.color.classify import classify_eye_color, classify_hair_color, classify_skin_tone
from facetint.color.dominant import get_dominant_color
from facetint.color.naming import nearest_named_color
from facetint.color.space import rgb_to_hex, rgb_to_hsl
from facetint.output import (
    EYE,
    HAIR,
    SKIN,
    ColorAttribute,
    ColorClassification,
    HairMaskStats,
    UnknownAttribute,
)
from facetint.types import PixelBuffer

logger = logging.getLogger(__name__)


class CropSink(Protocol):
    """Receives intermediate region images for diagnostics."""

    def save(self, person_index: int, region: str, crop: PixelBuffer) -> None:
        ...


def sample_confidence(count: int, expected: int) -> int:
    """Sample-sufficiency score: min(100, round(count / expected * 100))."""
    if expected <= 0:
        return 100
    return min(100, int(math.floor(count / expected * 100 + 0.5)))


def empty_pixels() -> np.ndarray:
    return np.empty((0, 3), dtype=np.uint8)


_CATEGORY: dict[str, Callable[[float, float, float], str]] = {
    EYE: classify_eye_color,
    HAIR: classify_hair_color,
}


def classify_sample(
    kind: str,
    pixels: np.ndarray,
    k: int,
    expected_pixels: int,
    seed: Optional[int] = None,
    hair_stats: Optional[HairMaskStats] = None,
) -> ColorClassification:
    """Turn a pixel sample into a classified attribute.

    Args:
        kind: EYE, HAIR or SKIN.
        pixels: (N, 3) RGB sample, already filtered by the sampler.
        k: Cluster count for the dominant color.
        expected_pixels: Pixel count that earns full confidence.
        seed: Optional k-means seed.
        hair_stats: Mask context attached to hair results.
    """
    dominant = get_dominant_color(pixels, k=k, seed=seed)
    count = int(len(pixels))
    if dominant is None:
        return UnknownAttribute(kind=kind, reason="no dominant color", pixel_count=count)

    r, g, b = dominant.rgb
    h, s, l = rgb_to_hsl(r, g, b)
    named = nearest_named_color(r, g, b)

    undertone = fitzpatrick = None
    if kind == SKIN:
        label = classify_skin_tone(h, s, l)
        category, undertone, fitzpatrick = label.tone, label.undertone, label.fitzpatrick
    else:
        category = _CATEGORY[kind](h, s, l)

    logger.debug(
        "%s: %d px -> rgb(%.0f, %.0f, %.0f) hsl(%.1f, %.1f, %.1f) = %s",
        kind, count, r, g, b, h, s, l, category,
    )
    return ColorAttribute(
        kind=kind,
        category=category,
        color_name=named.detailed_name,
        simple_color_name=named.simple_name,
        rgb=(r, g, b),
        hex=rgb_to_hex(r, g, b),
        hsl=(h, s, l),
        confidence=sample_confidence(count, expected_pixels),
        pixel_count=count,
        clusters=dominant.clusters,
        undertone=undertone,
        fitzpatrick=fitzpatrick,
        hair_stats=hair_stats,
    )


__all__ = [
    "CropSink",
    "sample_confidence",
    "empty_pixels",
    "classify_sample",
]
