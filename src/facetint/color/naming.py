"""Nearest named color lookup.

The detailed reference table is the XKCD color survey followed by the
CSS4 named colors, both shipped with matplotlib. Lookup is a linear
scan by RGB Euclidean distance; the first minimum in table order wins.

The simple name comes from a separate, much coarser palette of basic
color words so that callers get both "burnt sienna" and "brown".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

import numpy as np
from matplotlib import colors as mcolors

from facetint.color.space import hex_to_rgb

logger = logging.getLogger(__name__)

# Basic color words used for the coarse name, in tie-break order.
SIMPLE_PALETTE: Tuple[Tuple[str, str], ...] = (
    ("black", "#000000"),
    ("gray", "#808080"),
    ("silver", "#c0c0c0"),
    ("white", "#ffffff"),
    ("red", "#d21f1f"),
    ("maroon", "#800000"),
    ("orange", "#f28c28"),
    ("brown", "#8b4513"),
    ("tan", "#d2b48c"),
    ("beige", "#f5e6c8"),
    ("yellow", "#f2e03c"),
    ("olive", "#808000"),
    ("green", "#2e8b2e"),
    ("teal", "#008080"),
    ("cyan", "#3cd2e6"),
    ("blue", "#1e50d2"),
    ("navy", "#000080"),
    ("purple", "#800080"),
    ("pink", "#f5a0be"),
)


@dataclass(frozen=True)
class NamedColor:
    """Result of a nearest-name lookup.

    Attributes:
        detailed_name: Closest entry of the reference table.
        simple_name: Basic color word from the coarse palette.
        hex: Hex code of the detailed entry.
        distance: RGB distance to the detailed entry.
    """

    detailed_name: str
    simple_name: str
    hex: str
    distance: float


@dataclass(frozen=True)
class _ColorTable:
    names: Tuple[str, ...]
    hexes: Tuple[str, ...]
    rgb: np.ndarray  # (N, 3) float64


def _build_table(entries) -> _ColorTable:
    names, hexes, rgb = [], [], []
    for name, hex_code in entries:
        if not name or not hex_code:
            continue
        names.append(name)
        hexes.append(hex_code.lower())
        rgb.append(hex_to_rgb(hex_code))
    return _ColorTable(tuple(names), tuple(hexes), np.asarray(rgb, dtype=np.float64))


@lru_cache(maxsize=1)
def reference_table() -> _ColorTable:
    """Detailed reference table (XKCD then CSS4), built once."""
    entries = [
        (name.split(":", 1)[1], hex_code) for name, hex_code in mcolors.XKCD_COLORS.items()
    ]
    entries.extend(mcolors.CSS4_COLORS.items())
    table = _build_table(entries)
    logger.debug("Loaded %d reference colors", len(table.names))
    return table


@lru_cache(maxsize=1)
def _simple_table() -> _ColorTable:
    return _build_table(SIMPLE_PALETTE)


def _nearest(table: _ColorTable, r: float, g: float, b: float) -> Tuple[int, float]:
    diff = table.rgb - np.array([r, g, b], dtype=np.float64)
    dists = np.sqrt((diff ** 2).sum(axis=1))
    idx = int(np.argmin(dists))  # first minimum
    return idx, float(dists[idx])


def simple_color_name(r: float, g: float, b: float) -> str:
    """Basic color word for an RGB triple."""
    table = _simple_table()
    idx, _ = _nearest(table, r, g, b)
    return table.names[idx]


def nearest_named_color(r: float, g: float, b: float) -> NamedColor:
    """Closest reference color plus the coarse name."""
    table = reference_table()
    idx, dist = _nearest(table, r, g, b)
    return NamedColor(
        detailed_name=table.names[idx],
        simple_name=simple_color_name(r, g, b),
        hex=table.hexes[idx],
        distance=dist,
    )


__all__ = [
    "SIMPLE_PALETTE",
    "NamedColor",
    "reference_table",
    "simple_color_name",
    "nearest_named_color",
]
