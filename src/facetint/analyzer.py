"""Analyzer entry points.

:func:`analyze_detections` is the pure core: detections and pixels in,
report out. :class:`FaceColorAnalyzer` owns a detector backend with an
explicit initialize/cleanup lifecycle and runs detection plus analysis
for an image.

Example:
    >>> from facetint import FaceColorAnalyzer, load_image
    >>> with FaceColorAnalyzer() as analyzer:
    ...     result = analyzer.analyze(load_image("photo.jpg"))
    ...     print(result.report.to_dict()["people"][0]["face"]["eyeColor"])
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import cv2
import numpy as np

from facetint.assembly import (
    AnalysisReport,
    PersonRecord,
    attach_bodies,
    attach_hands,
    build_face_record,
)
from facetint.backends.base import DetectorBackend
from facetint.config import AnalyzerConfig, CropConfig
from facetint.debug import DebugCropWriter
from facetint.describe import face_gestures
from facetint.errors import MalformedDetectionError
from facetint.output import FaceAttributes
from facetint.samplers import CropSink, sample_eye_color, sample_hair_color, sample_skin_tone
from facetint.types import DetectionResult, FaceDetection, PixelBuffer, validate_detection

logger = logging.getLogger(__name__)

CropBox = Tuple[int, int, int, int]


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def person_crop_box(face: FaceDetection, width: int, height: int, config: CropConfig) -> CropBox:
    """Region around a face that covers the hair above and the cheeks beside it."""
    fx, fy, fw, fh = face.box
    side = fw * config.person_side_ratio
    top = fh * config.person_top_ratio
    bottom = fh * config.person_bottom_ratio
    x = max(0, _round(fx - side))
    y = max(0, _round(fy - top))
    w = min(_round(fw + side * 2), width - x)
    h = min(_round(fh + top + bottom), height - y)
    return x, y, w, h


def face_crop_box(face: FaceDetection, width: int, height: int, config: CropConfig) -> CropBox:
    """Tight face crop padded by a fraction of the larger box side."""
    fx, fy, fw, fh = face.box
    pad = max(fw, fh) * config.face_padding_ratio
    x = max(0, _round(fx - pad))
    y = max(0, _round(fy - pad))
    w = min(_round(fw + pad * 2), width - x)
    h = min(_round(fh + pad * 2), height - y)
    return x, y, w, h


def analyze_face(
    face: FaceDetection,
    pixels: PixelBuffer,
    config: AnalyzerConfig,
    debug: Optional[CropSink] = None,
    person_index: int = 0,
) -> FaceAttributes:
    """Eye, hair and skin attributes of one face.

    The samplers run on the person-region crop with the detection
    translated into crop coordinates.

    Raises:
        MalformedDetectionError: If the detection has no usable box.
    """
    validate_detection(face)
    x, y, w, h = person_crop_box(face, pixels.width, pixels.height, config.crop)
    region = pixels.crop(x, y, w, h)
    local = face.translated(-x, -y)

    kwargs = dict(debug=debug, person_index=person_index, seed=config.seed)
    return FaceAttributes(
        eye_color=sample_eye_color(local, region, config.eye, **kwargs),
        hair_color=sample_hair_color(local, region, config.hair, **kwargs),
        skin_tone=sample_skin_tone(local, region, config.skin, **kwargs),
    )


@dataclass
class AnalysisResult:
    """Report plus the tight face crops keyed by person index."""

    report: AnalysisReport
    face_crops: Dict[int, PixelBuffer] = field(default_factory=dict)


def analyze_detections(
    detections: DetectionResult,
    pixels: PixelBuffer,
    config: Optional[AnalyzerConfig] = None,
    debug: Optional[CropSink] = None,
) -> AnalysisResult:
    """Build the full report for one image from detector output.

    A face that violates the detector contract is logged and reported
    with an ``error`` field; the remaining faces are still analyzed.
    """
    config = config or AnalyzerConfig()
    if debug is None and config.debug_dir:
        debug = DebugCropWriter(config.debug_dir)

    gestures = detections.gestures
    people: List[PersonRecord] = []
    crops: Dict[int, PixelBuffer] = {}

    for index, face in enumerate(detections.faces):
        own_gestures = [g.gesture for g in face_gestures(gestures, index)]
        try:
            attributes = analyze_face(face, pixels, config, debug=debug, person_index=index)
        except MalformedDetectionError as e:
            logger.warning("Skipping face %d: %s", index, e)
            people.append(PersonRecord(person_index=index, face_gestures=own_gestures, error=str(e)))
            continue

        crops[index] = pixels.crop(*face_crop_box(face, pixels.width, pixels.height, config.crop))
        people.append(
            PersonRecord(
                person_index=index,
                face=build_face_record(face, attributes, gestures, index),
                face_gestures=own_gestures,
            )
        )
        logger.debug(
            "Person %d: eye=%s hair=%s skin=%s",
            index,
            attributes.eye_color.category,
            attributes.hair_color.category,
            attributes.skin_tone.category,
        )

    attach_bodies(people, detections.faces, detections.bodies, gestures)
    attach_hands(people, detections.hands, gestures)

    report = AnalysisReport(
        width=pixels.width,
        height=pixels.height,
        people=people,
        detections=detections,
    )
    return AnalysisResult(report=report, face_crops=crops)


def load_image(path: Union[str, Path]) -> PixelBuffer:
    """Read an image file into an RGBA buffer.

    Raises:
        FileNotFoundError: If the file is missing or cannot be decoded.
    """
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise FileNotFoundError(f"Cannot read image: {path}")
    return PixelBuffer.from_bgr(image)


class FaceColorAnalyzer:
    """Detector handle plus the color analysis pipeline.

    The backend is loaded by :meth:`initialize` and released by
    :meth:`cleanup`; the analyzer is also a context manager. Detection
    calls are serialized on an internal lock so one analyzer can be
    shared between threads. The samplers themselves hold no state.

    Args:
        backend: Detector backend. Defaults to the MediaPipe backend.
        config: Analysis configuration.
    """

    def __init__(
        self,
        backend: Optional[DetectorBackend] = None,
        config: Optional[AnalyzerConfig] = None,
    ):
        self._backend = backend
        self._config = config or AnalyzerConfig()
        self._lock = threading.Lock()
        self._initialized = False

    @property
    def config(self) -> AnalyzerConfig:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return
            if self._backend is None:
                from facetint.backends.mediapipe import MediaPipeFaceBackend
                self._backend = MediaPipeFaceBackend()
                logger.info("FaceColorAnalyzer using MediaPipeFaceBackend")
            self._backend.initialize(self._config.device)
            self._initialized = True

    def cleanup(self) -> None:
        with self._lock:
            if self._backend is not None:
                self._backend.cleanup()
            self._initialized = False
        logger.info("FaceColorAnalyzer cleaned up")

    def __enter__(self) -> "FaceColorAnalyzer":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()

    def detect(self, pixels: PixelBuffer) -> DetectionResult:
        if not self._initialized or self._backend is None:
            raise RuntimeError("Analyzer not initialized. Call initialize() first.")
        with self._lock:
            return self._backend.detect(pixels)

    def analyze(
        self,
        image: Union[PixelBuffer, np.ndarray],
        debug: Optional[CropSink] = None,
    ) -> AnalysisResult:
        """Detect and analyze every face in an image.

        Args:
            image: RGBA PixelBuffer, or an OpenCV BGR array.
            debug: Optional sink for region crops (overrides ``debug_dir``).
        """
        pixels = image if isinstance(image, PixelBuffer) else PixelBuffer.from_bgr(image)
        detections = self.detect(pixels)
        logger.info(
            "Detected %d face(s), %d body(ies), %d hand(s)",
            len(detections.faces), len(detections.bodies), len(detections.hands),
        )
        return analyze_detections(detections, pixels, self._config, debug=debug)


__all__ = [
    "AnalysisResult",
    "FaceColorAnalyzer",
    "analyze_detections",
    "analyze_face",
    "face_crop_box",
    "load_image",
    "person_crop_box",
]
