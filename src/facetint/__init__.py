"""facetint - eye color, hair color and skin tone from face landmarks.

Given face detections with landmark groups (iris rings, eyelids,
eyebrows, silhouette) and the image pixels, facetint samples the iris,
skin and hair regions, reduces each sample to a dominant color and
classifies it into a named category.

Quick Start:
    >>> from facetint import analyze_detections, PixelBuffer
    >>> result = analyze_detections(detections, PixelBuffer.from_bgr(image))
    >>> result.report.to_dict()["people"][0]["face"]["skinTone"]["tone"]
    'medium'

With the bundled MediaPipe detector (``pip install facetint[mediapipe]``):
    >>> from facetint import FaceColorAnalyzer, load_image
    >>> with FaceColorAnalyzer() as analyzer:
    ...     result = analyzer.analyze(load_image("photo.jpg"))
"""

__version__ = "0.1.0"

from facetint.types import (
    BodyDetection,
    BodyKeypoint,
    DetectionResult,
    Emotion,
    FaceDetection,
    FaceRotation,
    Gesture,
    HandDetection,
    LandmarkGroup,
    PixelBuffer,
)
from facetint.errors import FacetintError, MalformedDetectionError
from facetint.output import ColorAttribute, FaceAttributes, UnknownAttribute
from facetint.config import AnalyzerConfig
from facetint.samplers import sample_eye_color, sample_hair_color, sample_skin_tone
from facetint.analyzer import (
    AnalysisResult,
    FaceColorAnalyzer,
    analyze_detections,
    load_image,
)

__all__ = [
    "__version__",
    "AnalysisResult",
    "AnalyzerConfig",
    "BodyDetection",
    "BodyKeypoint",
    "ColorAttribute",
    "DetectionResult",
    "Emotion",
    "FaceAttributes",
    "FaceColorAnalyzer",
    "FaceDetection",
    "FaceRotation",
    "FacetintError",
    "Gesture",
    "HandDetection",
    "LandmarkGroup",
    "MalformedDetectionError",
    "PixelBuffer",
    "UnknownAttribute",
    "analyze_detections",
    "load_image",
    "sample_eye_color",
    "sample_hair_color",
    "sample_skin_tone",
]
