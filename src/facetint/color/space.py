"""RGB / HSL conversions and color distance.

HSL follows the usual hexcone definition: hue in [0, 360), saturation
and lightness in [0, 100]. Array variants work on (N, 3) inputs and
match the scalar functions element for element.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def rgb_to_hsl(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """Convert 0-255 RGB to (h, s, l)."""
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    mx, mn = max(r, g, b), min(r, g, b)
    lightness = (mx + mn) / 2

    if mx == mn:
        return 0.0, 0.0, lightness * 100

    d = mx - mn
    s = d / (2 - mx - mn) if lightness > 0.5 else d / (mx + mn)
    if mx == r:
        h = (g - b) / d + (6 if g < b else 0)
    elif mx == g:
        h = (b - r) / d + 2
    else:
        h = (r - g) / d + 4
    return (h / 6) * 360 % 360, s * 100, lightness * 100


def rgb_to_hsl_array(rgb: np.ndarray) -> np.ndarray:
    """Vectorized :func:`rgb_to_hsl` for an (..., 3) array. Returns float64."""
    arr = np.asarray(rgb, dtype=np.float64) / 255.0
    r, g, b = arr[..., 0], arr[..., 1], arr[..., 2]
    mx = arr.max(axis=-1)
    mn = arr.min(axis=-1)
    lightness = (mx + mn) / 2
    d = mx - mn
    chromatic = d > 0

    with np.errstate(divide="ignore", invalid="ignore"):
        s = np.where(lightness > 0.5, d / (2 - mx - mn), d / (mx + mn))
        h_r = (g - b) / d + np.where(g < b, 6.0, 0.0)
        h_g = (b - r) / d + 2
        h_b = (r - g) / d + 4
    h = np.where(mx == r, h_r, np.where(mx == g, h_g, h_b))

    out = np.empty(arr.shape, dtype=np.float64)
    out[..., 0] = np.where(chromatic, (h / 6) * 360 % 360, 0.0)
    out[..., 1] = np.where(chromatic, s * 100, 0.0)
    out[..., 2] = lightness * 100
    return out


def hsl_to_rgb(h: float, s: float, lightness: float) -> Tuple[int, int, int]:
    """Inverse of :func:`rgb_to_hsl`, rounded to 0-255 integers."""
    s /= 100.0
    lightness /= 100.0
    if s == 0:
        v = int(round(lightness * 255))
        return v, v, v

    q = lightness * (1 + s) if lightness < 0.5 else lightness + s - lightness * s
    p = 2 * lightness - q
    hk = (h % 360) / 360.0

    def channel(t: float) -> float:
        t %= 1.0
        if t < 1 / 6:
            return p + (q - p) * 6 * t
        if t < 1 / 2:
            return q
        if t < 2 / 3:
            return p + (q - p) * (2 / 3 - t) * 6
        return p

    return (
        int(round(channel(hk + 1 / 3) * 255)),
        int(round(channel(hk) * 255)),
        int(round(channel(hk - 1 / 3) * 255)),
    )


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Hex code of an RGB triple; fractional channels round half up."""
    return "#" + "".join(f"{int(np.floor(c + 0.5)):02x}" for c in (r, g, b))


def hex_to_rgb(hex_str: str) -> Tuple[int, int, int]:
    h = hex_str.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def color_distance(c1, c2) -> float:
    """Euclidean distance between two RGB triples."""
    return float(np.linalg.norm(np.asarray(c1, dtype=np.float64) - np.asarray(c2, dtype=np.float64)))


def color_distances(pixels: np.ndarray, color) -> np.ndarray:
    """Distance from every pixel in an (..., 3) array to one RGB color."""
    diff = np.asarray(pixels, dtype=np.float64) - np.asarray(color, dtype=np.float64)
    return np.sqrt((diff ** 2).sum(axis=-1))


def brightness(pixels: np.ndarray) -> np.ndarray:
    """Mean of the three channels."""
    return np.asarray(pixels, dtype=np.float64)[..., :3].mean(axis=-1)


__all__ = [
    "rgb_to_hsl",
    "rgb_to_hsl_array",
    "hsl_to_rgb",
    "rgb_to_hex",
    "hex_to_rgb",
    "color_distance",
    "color_distances",
    "brightness",
]
