"""Color space conversion, naming, classification and dominant color."""

from facetint.color.space import (
    rgb_to_hsl,
    rgb_to_hsl_array,
    hsl_to_rgb,
    rgb_to_hex,
    color_distance,
)
from facetint.color.naming import NamedColor, nearest_named_color, simple_color_name
from facetint.color.classify import (
    SkinToneLabel,
    classify_eye_color,
    classify_hair_color,
    classify_skin_tone,
)
from facetint.color.dominant import get_dominant_color

__all__ = [
    "rgb_to_hsl",
    "rgb_to_hsl_array",
    "hsl_to_rgb",
    "rgb_to_hex",
    "color_distance",
    "NamedColor",
    "nearest_named_color",
    "simple_color_name",
    "SkinToneLabel",
    "classify_eye_color",
    "classify_hair_color",
    "classify_skin_tone",
    "get_dominant_color",
]
