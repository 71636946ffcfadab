"""Perceptual category classifiers for eye, hair and skin colors.

Each classifier is a fixed decision tree over HSL bands (h in degrees,
s and l in percent). The numeric thresholds are empirical and can be
retuned; the category vocabularies are part of the output contract.
"""

from __future__ import annotations

from dataclasses import dataclass

# ── Eye ──
EYE_BLACK_MAX_L = 20
EYE_GRAY_MIN_L = 70
EYE_GRAY_MAX_S = 20
EYE_MUTED_GRAY_MAX_S = 15
EYE_MUTED_GRAY_MIN_L = 40
EYE_BROWN_MAX_S = 30
EYE_DARK_MAX_L = 40
EYE_LIGHT_BLUE_MIN_L = 60
EYE_BLUE_HUE = (180, 250)
EYE_GREEN_HUE = (70, 170)
EYE_HAZEL_MAX_S = 40
EYE_AMBER_HUE = (30, 70)

EYE_CATEGORIES = (
    "black", "gray", "dark brown", "light brown", "dark blue", "light blue",
    "blue", "hazel", "green", "amber/hazel", "brown",
)

# ── Hair ──
HAIR_BLACK_MAX_L = 15
HAIR_WHITE_MIN_L = 80
HAIR_WHITE_MAX_S = 20
HAIR_GRAY_MIN_L = 65
HAIR_GRAY_MAX_S = 30
HAIR_LIGHT_MIN_L = 55
HAIR_BLONDE_HUE = (30, 60)
HAIR_STRAWBERRY_HUE = (20, 40)
HAIR_RED_HUE_LOW = (0, 30)
HAIR_RED_HUE_HIGH = (350, 360)
HAIR_RED_MIN_S = 30
HAIR_DARK_BROWN_MAX_L = 25
HAIR_BROWN_MAX_L = 40

HAIR_CATEGORIES = (
    "black", "white/gray", "gray", "blonde", "strawberry blonde",
    "light brown", "red/auburn", "dark brown", "brown",
)

# ── Skin ──
# (minimum exclusive lightness, tone, fitzpatrick) from lightest down
SKIN_TONE_BANDS = (
    (80, "very fair", "Type I"),
    (70, "fair", "Type II"),
    (55, "medium", "Type III"),
    (40, "olive/tan", "Type IV"),
    (25, "brown", "Type V"),
)
SKIN_DARKEST = ("dark brown", "Type VI")
SKIN_WARM_HUE = (0, 20)
SKIN_NEUTRAL_WARM_HUE = (20, 40)
SKIN_COOL_HUE = (330, 360)

SKIN_TONES = ("very fair", "fair", "medium", "olive/tan", "brown", "dark brown")
SKIN_UNDERTONES = ("warm", "neutral-warm", "cool", "neutral")
FITZPATRICK_TYPES = ("Type I", "Type II", "Type III", "Type IV", "Type V", "Type VI")


def _in(value: float, band) -> bool:
    return band[0] <= value <= band[1]


def classify_eye_color(h: float, s: float, l: float) -> str:
    if l < EYE_BLACK_MAX_L:
        return "black"
    if l > EYE_GRAY_MIN_L and s < EYE_GRAY_MAX_S:
        return "gray"
    if s < EYE_MUTED_GRAY_MAX_S and l > EYE_MUTED_GRAY_MIN_L:
        return "gray"

    if s < EYE_BROWN_MAX_S:
        return "dark brown" if l < EYE_DARK_MAX_L else "light brown"

    if _in(h, EYE_BLUE_HUE):
        if l < EYE_DARK_MAX_L:
            return "dark blue"
        if l > EYE_LIGHT_BLUE_MIN_L:
            return "light blue"
        return "blue"

    if _in(h, EYE_GREEN_HUE):
        return "hazel" if s < EYE_HAZEL_MAX_S else "green"

    if _in(h, EYE_AMBER_HUE):
        return "amber/hazel"

    return "brown"


def classify_hair_color(h: float, s: float, l: float) -> str:
    if l < HAIR_BLACK_MAX_L:
        return "black"
    if l > HAIR_WHITE_MIN_L and s < HAIR_WHITE_MAX_S:
        return "white/gray"
    if l > HAIR_GRAY_MIN_L and s < HAIR_GRAY_MAX_S:
        return "gray"

    if l > HAIR_LIGHT_MIN_L:
        if _in(h, HAIR_BLONDE_HUE):
            return "blonde"
        if _in(h, HAIR_STRAWBERRY_HUE):
            return "strawberry blonde"
        return "light brown"

    if s > HAIR_RED_MIN_S and (_in(h, HAIR_RED_HUE_LOW) or _in(h, HAIR_RED_HUE_HIGH)):
        return "red/auburn"

    if l < HAIR_DARK_BROWN_MAX_L:
        return "dark brown"
    if l < HAIR_BROWN_MAX_L:
        return "brown"
    return "light brown"


@dataclass(frozen=True)
class SkinToneLabel:
    tone: str
    undertone: str
    fitzpatrick: str


def classify_skin_tone(h: float, s: float, l: float) -> SkinToneLabel:
    """Tone and Fitzpatrick label from lightness, undertone from hue.

    ``s`` is accepted for signature symmetry with the other classifiers.
    """
    tone, fitzpatrick = SKIN_DARKEST
    for min_l, band_tone, band_type in SKIN_TONE_BANDS:
        if l > min_l:
            tone, fitzpatrick = band_tone, band_type
            break

    if _in(h, SKIN_WARM_HUE):
        undertone = "warm"
    elif _in(h, SKIN_NEUTRAL_WARM_HUE):
        undertone = "neutral-warm"
    elif _in(h, SKIN_COOL_HUE):
        undertone = "cool"
    else:
        undertone = "neutral"

    return SkinToneLabel(tone=tone, undertone=undertone, fitzpatrick=fitzpatrick)


__all__ = [
    "EYE_CATEGORIES",
    "HAIR_CATEGORIES",
    "SKIN_TONES",
    "SKIN_UNDERTONES",
    "FITZPATRICK_TYPES",
    "SkinToneLabel",
    "classify_eye_color",
    "classify_hair_color",
    "classify_skin_tone",
]
