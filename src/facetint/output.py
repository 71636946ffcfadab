"""Attribute records produced by the samplers.

A sampler returns either a :class:`ColorAttribute` (a classified color)
or an :class:`UnknownAttribute` carrying the reason nothing could be
classified. Both serialize to the report's camelCase wire shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

# Attribute kinds; skin serializes its category under "tone"
EYE = "eye"
HAIR = "hair"
SKIN = "skin"


def _category_key(kind: str) -> str:
    return "tone" if kind == SKIN else "color"


def _num(value: float):
    """Integers stay integers in JSON, fractional means keep two decimals."""
    rounded = round(float(value), 2)
    return int(rounded) if rounded.is_integer() else rounded


@dataclass(frozen=True)
class ColorCluster:
    """One k-means centroid with its share of the sample."""

    r: int
    g: int
    b: int
    size: int
    percentage: int

    def to_dict(self) -> Dict[str, int]:
        return {"r": self.r, "g": self.g, "b": self.b, "size": self.size, "percentage": self.percentage}


@dataclass(frozen=True)
class DominantColor:
    """Representative color of a pixel sample.

    Attributes:
        r, g, b: Chosen centroid (rounded) or exact mean (fallback).
        clusters: All centroids; empty when the mean fallback was used.
    """

    r: float
    g: float
    b: float
    clusters: Tuple[ColorCluster, ...] = ()

    @property
    def rgb(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class HairMaskStats:
    """Context the hair mask was built from."""

    crop_size: Tuple[int, int]  # width, height
    background_colors: Tuple[Tuple[int, int, int], ...]
    skin_color: Tuple[int, int, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cropSize": {"width": self.crop_size[0], "height": self.crop_size[1]},
            "backgroundColors": [{"r": r, "g": g, "b": b} for r, g, b in self.background_colors],
            "skinColor": {"r": self.skin_color[0], "g": self.skin_color[1], "b": self.skin_color[2]},
        }


@dataclass(frozen=True)
class ColorAttribute:
    """A classified color attribute.

    Attributes:
        kind: "eye", "hair" or "skin".
        category: Perceptual category (eye/hair color, or skin tone).
        color_name: Closest detailed reference color name.
        simple_color_name: Basic color word.
        rgb: Dominant color.
        hex: Hex code of ``rgb``.
        hsl: (h, s, l) of ``rgb``.
        confidence: 0-100 sample-sufficiency score.
        pixel_count: Number of pixels sampled.
        clusters: Centroids from the dominant-color step.
        undertone, fitzpatrick: Skin only.
        hair_stats: Hair only.
    """

    kind: str
    category: str
    color_name: str
    simple_color_name: str
    rgb: Tuple[float, float, float]
    hex: str
    hsl: Tuple[float, float, float]
    confidence: int
    pixel_count: int
    clusters: Tuple[ColorCluster, ...] = ()
    undertone: Optional[str] = None
    fitzpatrick: Optional[str] = None
    hair_stats: Optional[HairMaskStats] = None

    @property
    def is_known(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {_category_key(self.kind): self.category}
        if self.kind == SKIN:
            out["undertone"] = self.undertone
            out["fitzpatrick"] = self.fitzpatrick
        r, g, b = self.rgb
        h, s, l = self.hsl
        out.update({
            "colorName": self.color_name,
            "simpleColorName": self.simple_color_name,
            "rgb": {"r": _num(r), "g": _num(g), "b": _num(b)},
            "hex": self.hex,
            "hsl": {"h": h, "s": s, "l": l},
            "confidence": self.confidence,
            "pixelCount": self.pixel_count,
        })
        if self.hair_stats is not None:
            out.update(self.hair_stats.to_dict())
        out["clusters"] = [c.to_dict() for c in self.clusters] if self.clusters else None
        return out


@dataclass(frozen=True)
class UnknownAttribute:
    """Degenerate-input result: nothing to classify, with the reason why."""

    kind: str
    reason: str
    pixel_count: Optional[int] = None
    confidence: int = 0

    @property
    def is_known(self) -> bool:
        return False

    @property
    def category(self) -> str:
        return "unknown"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            _category_key(self.kind): "unknown",
            "confidence": 0,
            "reason": self.reason,
        }
        if self.pixel_count is not None:
            out["pixelCount"] = self.pixel_count
        return out


ColorClassification = Union[ColorAttribute, UnknownAttribute]


@dataclass
class FaceAttributes:
    """The three color attributes of one face."""

    eye_color: ColorClassification
    hair_color: ColorClassification
    skin_tone: ColorClassification

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eyeColor": self.eye_color.to_dict(),
            "hairColor": self.hair_color.to_dict(),
            "skinTone": self.skin_tone.to_dict(),
        }


__all__ = [
    "EYE",
    "HAIR",
    "SKIN",
    "ColorCluster",
    "DominantColor",
    "HairMaskStats",
    "ColorAttribute",
    "UnknownAttribute",
    "ColorClassification",
    "FaceAttributes",
]
