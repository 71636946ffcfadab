"""Diagnostic output of the intermediate region crops.

When enabled, each sampler hands its region image (iris window, masked
skin region, hair mask) to a :class:`DebugCropWriter`, which stores it as
``person_{index}_{region}.png``. Excluded pixels are transparent.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import cv2

from facetint.types import PixelBuffer

logger = logging.getLogger(__name__)


class DebugCropWriter:
    """Writes region crops as RGBA PNG files into one directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.written: List[Path] = []

    def path_for(self, person_index: int, region: str) -> Path:
        return self.directory / f"person_{person_index}_{region}.png"

    def save(self, person_index: int, region: str, crop: PixelBuffer) -> None:
        if crop.width == 0 or crop.height == 0:
            logger.debug("Skipping empty %s crop for person %d", region, person_index)
            return
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(person_index, region)
        if not cv2.imwrite(str(path), crop.to_bgra()):
            logger.warning("Failed to write debug crop %s", path)
            return
        self.written.append(path)
        logger.debug("Wrote %s (%dx%d)", path, crop.width, crop.height)


__all__ = ["DebugCropWriter"]
