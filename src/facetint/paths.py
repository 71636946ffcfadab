"""Where facetint keeps downloaded models and default reports.

``FACETINT_HOME`` (default ``~/.facetint``) holds ``models/`` and
``output/``; ``FACETINT_MODELS_DIR`` points the models somewhere else.
"""

import os
import re
from pathlib import Path


def _env_dir(name: str, default: Path) -> Path:
    value = os.environ.get(name)
    path = Path(value).expanduser().resolve() if value else default
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_home_dir() -> Path:
    return _env_dir("FACETINT_HOME", Path.home() / ".facetint")


def get_models_dir() -> Path:
    """Directory the detector model files are cached in (created on demand)."""
    return _env_dir("FACETINT_MODELS_DIR", get_home_dir() / "models")


def get_output_dir(image_path) -> Path:
    """Fresh report directory for an image: ``{home}/output/{stem}[_N]``.

    The stem keeps word characters, dots and dashes; anything else turns
    into ``_``. The directory itself is not created.
    """
    stem = re.sub(r"[^\w.\-]+", "_", Path(image_path).stem).strip("_.") or "untitled"
    parent = get_home_dir() / "output"
    candidate, n = parent / stem, 2
    while candidate.exists():
        candidate, n = parent / f"{stem}_{n}", n + 1
    return candidate


__all__ = ["get_home_dir", "get_models_dir", "get_output_dir"]
