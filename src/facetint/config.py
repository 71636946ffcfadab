"""Configuration dataclasses for facetint.

All thresholds used by the region samplers live here so they can be
tuned from a YAML file without touching code.

Example:
    >>> from facetint.config import AnalyzerConfig
    >>> config = AnalyzerConfig.from_dict({"hair": {"min_pixels": 80}, "seed": 7})
    >>> config.hair.min_pixels
    80
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


@dataclass
class EyeSamplerConfig:
    """Iris ring sampling.

    Attributes:
        inner_ratio: Inner sampling radius as a fraction of the iris radius.
        outer_ratio: Outer sampling radius as a fraction of the iris radius.
        angle_step_deg: Angular step around the ring.
        radial_step_px: Radial step between arcs.
        min_brightness: Pixels at or below this mean channel value are
            treated as pupil / shadow.
        fallback_below: Try the right iris when the left yields fewer pixels.
        min_pixels: Minimum pixels for a classification.
        clusters: k for the dominant color.
        expected_pixels: Pixel count that earns confidence 100.
    """

    inner_ratio: float = 0.5
    outer_ratio: float = 0.95
    angle_step_deg: float = 5.0
    radial_step_px: float = 2.0
    min_brightness: float = 30.0
    fallback_below: int = 50
    min_pixels: int = 20
    clusters: int = 4
    expected_pixels: int = 100


@dataclass
class SkinSamplerConfig:
    """Face polygon sampling minus the eyes."""

    min_silhouette_points: int = 10  # silhouette used only above this
    face_scale: float = 0.95
    ellipse_rx_ratio: float = 0.9
    ellipse_ry_ratio: float = 0.95
    ellipse_step_deg: float = 10.0
    eye_circle_step_deg: float = 20.0
    eye_circle_ratio: float = 2.0
    eye_fallback_radius_ratio: float = 0.08
    min_brightness: float = 40.0
    max_brightness: float = 240.0
    min_pixels: int = 100
    clusters: int = 4
    expected_pixels: int = 500


@dataclass
class HairSamplerConfig:
    """Hair crop geometry and the exclusion cascade thresholds."""

    top_pad_ratio: float = 0.6
    side_pad_ratio: float = 0.3
    bottom_ratio: float = 0.5
    min_crop_px: int = 10
    min_silhouette_points: int = 10
    face_scale: float = 0.95
    ellipse_ratio: float = 0.9
    ellipse_step_deg: float = 10.0
    forehead_fallback_ratio: float = 0.3
    forehead_inset_ratio: float = 0.1
    forehead_inset_px: int = 5
    forehead_margin_px: int = 10
    min_skin_samples: int = 20
    default_skin: Tuple[int, int, int] = (200, 160, 140)
    corner_ratio: float = 0.12
    min_corner_px: int = 8
    min_background_samples: int = 30
    background_clusters: int = 3
    default_background: Tuple[int, int, int] = (200, 200, 200)
    background_distance: float = 40.0
    edge_background_distance: float = 60.0
    white_min_lightness: float = 90.0
    pale_max_saturation: float = 10.0
    pale_min_lightness: float = 65.0
    eye_radius_ratio: float = 0.08
    skin_distance: float = 35.0
    forehead_skin_distance: float = 50.0
    min_pixels: int = 50
    clusters: int = 5
    expected_pixels: int = 500


@dataclass
class CropConfig:
    """Per-face crops taken before sampling.

    Attributes:
        person_side_ratio: Padding left/right of the face box (x width).
        person_top_ratio: Padding above the face box (x height).
        person_bottom_ratio: Padding below the face box (x height).
        face_padding_ratio: Tight face crop padding (x max(w, h)).
    """

    person_side_ratio: float = 0.4
    person_top_ratio: float = 0.8
    person_bottom_ratio: float = 0.15
    face_padding_ratio: float = 0.2


def _plain(value):
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    return value


def _section(cls, data: Optional[Dict[str, Any]]):
    if not data:
        return cls()
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        logger.warning("Ignoring unknown %s keys: %s", cls.__name__, sorted(unknown))
    kwargs = {}
    for key in known & set(data):
        value = data[key]
        if isinstance(value, list):
            value = tuple(value)
        kwargs[key] = value
    return cls(**kwargs)


@dataclass
class AnalyzerConfig:
    """Complete facetint configuration.

    Attributes:
        eye, skin, hair: Sampler settings.
        crop: Per-face crop settings.
        seed: Seed for k-means initialization. None keeps it random.
        device: Device string handed to the detector backend.
        debug_dir: If set, per-person eye/skin/hair crops are written here.
    """

    eye: EyeSamplerConfig = field(default_factory=EyeSamplerConfig)
    skin: SkinSamplerConfig = field(default_factory=SkinSamplerConfig)
    hair: HairSamplerConfig = field(default_factory=HairSamplerConfig)
    crop: CropConfig = field(default_factory=CropConfig)
    seed: Optional[int] = None
    device: str = "cpu"
    debug_dir: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyzerConfig":
        """Create a config from a (possibly partial) dictionary."""
        return cls(
            eye=_section(EyeSamplerConfig, data.get("eye")),
            skin=_section(SkinSamplerConfig, data.get("skin")),
            hair=_section(HairSamplerConfig, data.get("hair")),
            crop=_section(CropConfig, data.get("crop")),
            seed=data.get("seed"),
            device=data.get("device", "cpu"),
            debug_dir=data.get("debug_dir"),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "AnalyzerConfig":
        """Load a YAML (or JSON, which YAML accepts) config file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested dict with tuples as lists, safe for YAML and JSON."""
        return _plain(asdict(self))


__all__ = [
    "EyeSamplerConfig",
    "SkinSamplerConfig",
    "HairSamplerConfig",
    "CropConfig",
    "AnalyzerConfig",
]
