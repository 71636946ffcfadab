"""Detector backends.

The MediaPipe backend is imported lazily so that the core package works
without the ``mediapipe`` extra installed.
"""

from facetint.backends.base import DetectorBackend

__all__ = ["DetectorBackend"]
