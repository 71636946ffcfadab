"""Detection domain types.

Everything here is produced by an external detector (see
:mod:`facetint.backends`) and treated as read-only input by the samplers.
Coordinates are image pixels unless stated otherwise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

import cv2
import numpy as np

from facetint.errors import MalformedDetectionError

Box = Tuple[float, float, float, float]  # x, y, w, h


class LandmarkGroup(str, Enum):
    """Named landmark groups a face detection may carry.

    Iris rings are ordered with the iris center first, followed by
    points on the iris boundary.
    """

    LEFT_EYE_IRIS = "left_eye_iris"
    RIGHT_EYE_IRIS = "right_eye_iris"
    LEFT_EYE_UPPER = "left_eye_upper"
    LEFT_EYE_LOWER = "left_eye_lower"
    RIGHT_EYE_UPPER = "right_eye_upper"
    RIGHT_EYE_LOWER = "right_eye_lower"
    LEFT_EYEBROW_UPPER = "left_eyebrow_upper"
    RIGHT_EYEBROW_UPPER = "right_eyebrow_upper"
    SILHOUETTE = "silhouette"


@dataclass(frozen=True)
class FaceRotation:
    """Head pose and gaze for one face.

    All angles in degrees. yaw: left(+)/right(-) turn as seen by the
    camera, pitch: down(+)/up(-), roll: in-plane rotation.
    Gaze bearing is measured counter-clockwise from image right.
    """

    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    gaze_bearing: float = 0.0
    gaze_strength: float = 0.0


@dataclass(frozen=True)
class Emotion:
    emotion: str
    score: float


@dataclass(frozen=True)
class FaceDetection:
    """One detected face.

    Attributes:
        face_id: Detector-assigned identifier.
        box: Bounding box (x, y, w, h) in pixels.
        landmarks: Landmark groups keyed by :class:`LandmarkGroup` value,
            each an (N, 2) or (N, 3) array of pixel coordinates.
        rotation: Head pose / gaze, if the detector estimated it.
        score: Detection confidence [0, 1].
        age, gender, gender_score, emotions, distance, real, live:
            Optional descriptive outputs passed through to the report.
    """

    face_id: int
    box: Box
    landmarks: Mapping[str, np.ndarray] = field(default_factory=dict)
    rotation: Optional[FaceRotation] = None
    score: float = 0.0
    age: Optional[float] = None
    gender: Optional[str] = None
    gender_score: Optional[float] = None
    emotions: Tuple[Emotion, ...] = ()
    distance: Optional[float] = None
    real: Optional[float] = None
    live: Optional[float] = None

    def points(self, group) -> Optional[np.ndarray]:
        """Return the landmark array for ``group`` or None if absent/empty."""
        key = group.value if isinstance(group, LandmarkGroup) else group
        pts = self.landmarks.get(key)
        if pts is None:
            return None
        pts = np.asarray(pts, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[0] == 0:
            return None
        return pts

    def translated(self, dx: float, dy: float) -> "FaceDetection":
        """Return a copy with box and landmarks shifted by (dx, dy)."""
        x, y, w, h = self.box
        moved: Dict[str, np.ndarray] = {}
        for key, pts in self.landmarks.items():
            arr = np.array(pts, dtype=np.float64)
            if arr.ndim == 2 and arr.shape[0] > 0:
                arr[:, 0] += dx
                arr[:, 1] += dy
            moved[key] = arr
        return replace(self, box=(x + dx, y + dy, w, h), landmarks=moved)


def validate_detection(face: FaceDetection) -> None:
    """Check the parts of the detector contract the samplers rely on.

    Empty landmark groups count as absent. Any other group must be an
    (N, 2) or (N, 3) array of finite numbers.

    Raises:
        MalformedDetectionError: If the box is missing, not four finite
            numbers, or has a non-positive size, or if a landmark group
            has the wrong shape or non-finite points.
    """
    face_id = getattr(face, "face_id", None)
    box = getattr(face, "box", None)
    if box is None:
        raise MalformedDetectionError(face_id, "missing bounding box")
    try:
        x, y, w, h = (float(v) for v in box)
    except (TypeError, ValueError):
        raise MalformedDetectionError(face_id, f"bounding box is not (x, y, w, h): {box!r}")
    if not all(math.isfinite(v) for v in (x, y, w, h)):
        raise MalformedDetectionError(face_id, f"non-finite bounding box {box!r}")
    if w <= 0 or h <= 0:
        raise MalformedDetectionError(face_id, f"empty bounding box {box!r}")
    landmarks = getattr(face, "landmarks", None)
    if landmarks is None:
        raise MalformedDetectionError(face_id, "missing landmark annotations")
    if not isinstance(landmarks, Mapping):
        raise MalformedDetectionError(face_id, "landmark annotations are not a mapping")

    for name, pts in landmarks.items():
        if pts is None:
            continue
        try:
            arr = np.asarray(pts, dtype=np.float64)
        except (TypeError, ValueError):
            raise MalformedDetectionError(face_id, f"landmark group {name!r} is not numeric")
        if arr.size == 0:
            continue
        if arr.ndim != 2 or arr.shape[1] < 2:
            raise MalformedDetectionError(
                face_id, f"landmark group {name!r} has shape {arr.shape}, expected (N, 2) or (N, 3)"
            )
        if not np.isfinite(arr).all():
            raise MalformedDetectionError(face_id, f"non-finite points in landmark group {name!r}")


@dataclass(frozen=True)
class BodyKeypoint:
    part: str
    position: Tuple[float, float]
    score: float = 0.0


@dataclass(frozen=True)
class BodyDetection:
    body_id: int
    box: Box
    score: float = 0.0
    keypoints: Tuple[BodyKeypoint, ...] = ()

    def keypoint(self, part: str) -> Optional[BodyKeypoint]:
        for kp in self.keypoints:
            if kp.part == part:
                return kp
        return None


@dataclass(frozen=True)
class HandDetection:
    hand_id: int
    box: Box
    score: float = 0.0
    label: str = ""


@dataclass(frozen=True)
class Gesture:
    """A detector gesture tagged with the part and index it refers to.

    Attributes:
        part: "face", "iris", "body" or "hand".
        index: Index of the detection within its part list.
        gesture: Free text, e.g. "blink left eye" or "mouth 40% open".
    """

    part: str
    index: int
    gesture: str

    def to_dict(self) -> dict:
        return {self.part: self.index, "gesture": self.gesture}


@dataclass
class DetectionResult:
    """Everything one detector pass produced for an image."""

    faces: List[FaceDetection] = field(default_factory=list)
    bodies: List[BodyDetection] = field(default_factory=list)
    hands: List[HandDetection] = field(default_factory=list)
    gestures: List[Gesture] = field(default_factory=list)


@dataclass
class PixelBuffer:
    """RGBA image owned by the caller.

    Attributes:
        data: (H, W, 4) uint8 array in RGBA channel order.
    """

    data: np.ndarray

    def __post_init__(self) -> None:
        if self.data.ndim != 3 or self.data.shape[2] != 4:
            raise ValueError(f"PixelBuffer expects (H, W, 4), got {self.data.shape}")
        if self.data.dtype != np.uint8:
            self.data = self.data.astype(np.uint8)

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def rgb(self) -> np.ndarray:
        """(H, W, 3) read-only view of the color channels."""
        view = self.data[:, :, :3]
        view.flags.writeable = False
        return view

    @classmethod
    def from_bgr(cls, image: np.ndarray) -> "PixelBuffer":
        """Build from an OpenCV BGR (or BGRA / grayscale) image."""
        if image.ndim == 2:
            rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
        elif image.shape[2] == 4:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        else:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        return cls(rgba)

    @classmethod
    def from_rgb(cls, image: np.ndarray) -> "PixelBuffer":
        rgba = np.full(image.shape[:2] + (4,), 255, dtype=np.uint8)
        rgba[:, :, :3] = image[:, :, :3]
        return cls(rgba)

    def crop(self, x: int, y: int, w: int, h: int) -> "PixelBuffer":
        """Copy a (w, h) window starting at (x, y) into a new buffer.

        Parts of the window outside the source stay transparent black.
        """
        out = np.zeros((max(0, h), max(0, w), 4), dtype=np.uint8)
        sx1, sy1 = max(0, x), max(0, y)
        sx2, sy2 = min(self.width, x + w), min(self.height, y + h)
        if sx2 > sx1 and sy2 > sy1:
            out[sy1 - y:sy2 - y, sx1 - x:sx2 - x] = self.data[sy1:sy2, sx1:sx2]
        return PixelBuffer(out)

    def to_bgra(self) -> np.ndarray:
        return cv2.cvtColor(self.data, cv2.COLOR_RGBA2BGRA)


__all__ = [
    "Box",
    "LandmarkGroup",
    "FaceRotation",
    "Emotion",
    "FaceDetection",
    "validate_detection",
    "BodyKeypoint",
    "BodyDetection",
    "HandDetection",
    "Gesture",
    "DetectionResult",
    "PixelBuffer",
]
