"""Report and face-crop persistence.

JSON save/load for the analysis report plus PNG export of the tight
face crops.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping

import cv2

from facetint import __version__
from facetint.types import PixelBuffer


def save_report(report: Any, path: str | Path) -> Path:
    """Save an AnalysisReport (or its dict form) to JSON.

    Includes _version metadata.

    Args:
        report: AnalysisReport instance or the dict from ``to_dict()``.
        path: Output JSON file path.

    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = report.to_dict() if hasattr(report, "to_dict") else dict(report)
    data["_version"] = {
        "app": "facetint",
        "app_version": __version__,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


def load_report_dict(path: str | Path) -> Dict[str, Any]:
    """Load a saved report as a plain dict (``_version`` removed).

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Report file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    data.pop("_version", None)
    return data


def save_face_crops(crops: Mapping[int, PixelBuffer], directory: str | Path) -> List[Path]:
    """Write each tight face crop as ``face_{index}.png``.

    Returns:
        Paths written, in index order.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    written = []
    for index in sorted(crops):
        crop = crops[index]
        if crop.width == 0 or crop.height == 0:
            continue
        path = directory / f"face_{index}.png"
        if cv2.imwrite(str(path), crop.to_bgra()):
            written.append(path)
    return written


__all__ = ["save_report", "load_report_dict", "save_face_crops"]
