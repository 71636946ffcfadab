"""Shared test fixtures for facetint tests.

All images are synthetic; NO detector models needed.
"""

import importlib.util
import sys
from pathlib import Path

import numpy as np
import pytest

# Load helpers module from the tests directory using importlib to avoid
# polluting sys.path.
_helpers_path = Path(__file__).resolve().parent / "helpers.py"
_spec = importlib.util.spec_from_file_location("helpers", _helpers_path)
_helpers = importlib.util.module_from_spec(_spec)
sys.modules["helpers"] = _helpers
_spec.loader.exec_module(_helpers)

from helpers import make_face, make_synthetic  # noqa: E402

from facetint.config import AnalyzerConfig  # noqa: E402


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def synthetic():
    """(PixelBuffer, FaceDetection) for the synthetic portrait."""
    return make_synthetic(seed=0)


@pytest.fixture
def face():
    return make_face()


@pytest.fixture
def seeded_config():
    return AnalyzerConfig(seed=7)
