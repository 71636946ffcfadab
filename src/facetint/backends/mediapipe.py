"""MediaPipe FaceLandmarker backend.

Uses the MediaPipe Tasks API (0.10.x+). The 478-point face mesh includes
iris points, from which the landmark groups the samplers need are
picked by index. Head pose comes from the facial transformation matrix.

Requires the ``mediapipe`` extra: ``pip install facetint[mediapipe]``.
"""

from __future__ import annotations

import logging
import math
import urllib.request
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np

from facetint.paths import get_models_dir
from facetint.types import (
    DetectionResult,
    FaceDetection,
    FaceRotation,
    LandmarkGroup,
    PixelBuffer,
)

logger = logging.getLogger(__name__)

FACE_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
    "face_landmarker/float16/1/face_landmarker.task"
)
FACE_LANDMARKER_MODEL_NAME = "face_landmarker.task"

# Face mesh indices per landmark group. Iris groups start at the center.
MESH_GROUPS: Dict[str, Sequence[int]] = {
    LandmarkGroup.SILHOUETTE.value: (
        10, 338, 297, 332, 284, 251, 389, 356, 454, 323, 361, 288,
        397, 365, 379, 378, 400, 377, 152, 148, 176, 149, 150, 136,
        172, 58, 132, 93, 234, 127, 162, 21, 54, 103, 67, 109,
    ),
    LandmarkGroup.RIGHT_EYE_UPPER.value: (246, 161, 160, 159, 158, 157, 173),
    LandmarkGroup.RIGHT_EYE_LOWER.value: (33, 7, 163, 144, 145, 153, 154, 155, 133),
    LandmarkGroup.LEFT_EYE_UPPER.value: (466, 388, 387, 386, 385, 384, 398),
    LandmarkGroup.LEFT_EYE_LOWER.value: (263, 249, 390, 373, 374, 380, 381, 382, 362),
    LandmarkGroup.RIGHT_EYEBROW_UPPER.value: (156, 70, 63, 105, 66, 107, 55, 193),
    LandmarkGroup.LEFT_EYEBROW_UPPER.value: (383, 300, 293, 334, 296, 336, 285, 417),
    LandmarkGroup.LEFT_EYE_IRIS.value: (468, 469, 470, 471, 472),
    LandmarkGroup.RIGHT_EYE_IRIS.value: (473, 474, 475, 476, 477),
}
IRIS_MESH_SIZE = 478


def _get_model_path(models_dir: Optional[Path] = None) -> Path:
    """Get path to the face landmarker model, downloading if necessary."""
    model_path = (models_dir or get_models_dir()) / FACE_LANDMARKER_MODEL_NAME
    if not model_path.exists():
        model_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading face landmarker model to %s...", model_path)
        try:
            urllib.request.urlretrieve(FACE_LANDMARKER_MODEL_URL, model_path)
            logger.info("Download complete.")
        except OSError as e:
            raise RuntimeError(
                f"Failed to download face landmarker model: {e}\n"
                f"You can manually download from: {FACE_LANDMARKER_MODEL_URL}\n"
                f"And save to: {model_path}"
            ) from e
    return model_path


def rotation_matrix_to_euler(R: np.ndarray) -> tuple[float, float, float]:
    """Convert a 3x3 rotation matrix to (yaw, pitch, roll) in degrees.

    Uses the convention: R = Rz(roll) @ Ry(yaw) @ Rx(pitch).
    """
    sy = math.sqrt(R[0, 0] ** 2 + R[1, 0] ** 2)

    if sy > 1e-6:
        pitch = math.atan2(R[2, 1], R[2, 2])
        yaw = math.atan2(-R[2, 0], sy)
        roll = math.atan2(R[1, 0], R[0, 0])
    else:
        pitch = math.atan2(-R[1, 2], R[1, 1])
        yaw = math.atan2(-R[2, 0], sy)
        roll = 0.0

    return math.degrees(yaw), math.degrees(pitch), math.degrees(roll)


def mesh_to_landmarks(mesh: np.ndarray) -> Dict[str, np.ndarray]:
    """Pick landmark groups out of an (N, 3) pixel-space face mesh.

    Groups whose indices exceed the mesh (no iris refinement) are left out.
    """
    groups = {}
    for name, indices in MESH_GROUPS.items():
        if max(indices) < len(mesh):
            groups[name] = mesh[list(indices)]
    return groups


def _iris_gaze(mesh: np.ndarray) -> tuple[float, float]:
    """Gaze bearing (degrees, counter-clockwise from image right) and strength.

    Strength is the iris offset from the eye-corner midpoint relative to
    the eye width, averaged over both eyes.
    """
    if len(mesh) < IRIS_MESH_SIZE:
        return 0.0, 0.0
    offsets, widths = [], []
    for iris, corner_a, corner_b in ((468, 33, 133), (473, 362, 263)):
        mid = (mesh[corner_a, :2] + mesh[corner_b, :2]) / 2
        offsets.append(mesh[iris, :2] - mid)
        widths.append(np.linalg.norm(mesh[corner_a, :2] - mesh[corner_b, :2]))
    offset = np.mean(offsets, axis=0)
    width = float(np.mean(widths))
    if width <= 0:
        return 0.0, 0.0
    # image y grows downward
    bearing = math.degrees(math.atan2(-offset[1], offset[0])) % 360
    strength = min(1.0, float(np.linalg.norm(offset)) / (width / 2))
    return bearing, strength


class MediaPipeFaceBackend:
    """MediaPipe FaceLandmarker backend for face landmarks and head pose.

    Args:
        max_num_faces: Maximum number of faces to detect.
        min_detection_confidence: Minimum confidence for detection.
        models_dir: Where the model file is stored (default: models dir).
    """

    def __init__(
        self,
        max_num_faces: int = 20,
        min_detection_confidence: float = 0.3,
        models_dir: Optional[Path] = None,
    ):
        self._max_num_faces = max_num_faces
        self._min_detection_confidence = min_detection_confidence
        self._models_dir = models_dir
        self._landmarker: Optional[object] = None
        self._initialized = False

    def initialize(self, device: str = "cpu") -> None:
        """Initialize MediaPipe FaceLandmarker.

        Args:
            device: Ignored; MediaPipe runs on CPU here.
        """
        if self._initialized:
            return

        try:
            from mediapipe.tasks import python
            from mediapipe.tasks.python import vision
        except ImportError as e:
            raise ImportError(
                "MediaPipe is required for the face landmark backend. "
                "Install it with: pip install facetint[mediapipe]"
            ) from e

        model_path = _get_model_path(self._models_dir)
        base_options = python.BaseOptions(model_asset_path=str(model_path))
        options = vision.FaceLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.IMAGE,
            num_faces=self._max_num_faces,
            min_face_detection_confidence=self._min_detection_confidence,
            output_facial_transformation_matrixes=True,
        )
        self._landmarker = vision.FaceLandmarker.create_from_options(options)
        self._initialized = True
        logger.info("MediaPipe face backend initialized (Tasks API)")

    def detect(self, pixels: PixelBuffer) -> DetectionResult:
        """Detect faces in an RGBA image.

        Returns:
            DetectionResult with faces only; MediaPipe's face task reports
            no bodies, hands or gestures.
        """
        if not self._initialized or self._landmarker is None:
            raise RuntimeError("Backend not initialized. Call initialize() first.")

        import mediapipe as mp

        rgb = np.ascontiguousarray(pixels.rgb)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        result = self._landmarker.detect(mp_image)

        w, h = pixels.width, pixels.height
        faces: List[FaceDetection] = []
        matrices = result.facial_transformation_matrixes or []
        for idx, face_lms in enumerate(result.face_landmarks or []):
            # normalized -> pixel coordinates
            mesh = np.array([[lm.x * w, lm.y * h, lm.z * w] for lm in face_lms], dtype=np.float64)
            x1, y1 = mesh[:, 0].min(), mesh[:, 1].min()
            x2, y2 = mesh[:, 0].max(), mesh[:, 1].max()

            bearing, strength = _iris_gaze(mesh)
            rotation = None
            if idx < len(matrices):
                yaw, pitch, roll = rotation_matrix_to_euler(np.asarray(matrices[idx])[:3, :3])
                rotation = FaceRotation(
                    yaw=yaw, pitch=pitch, roll=roll,
                    gaze_bearing=bearing, gaze_strength=strength,
                )

            faces.append(
                FaceDetection(
                    face_id=idx,
                    box=(float(x1), float(y1), float(x2 - x1), float(y2 - y1)),
                    landmarks=mesh_to_landmarks(mesh),
                    rotation=rotation,
                    score=1.0,
                )
            )

        logger.debug("MediaPipe detected %d face(s)", len(faces))
        return DetectionResult(faces=faces)

    def cleanup(self) -> None:
        """Release MediaPipe resources."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        self._initialized = False
        logger.info("MediaPipe face backend cleaned up")


__all__ = [
    "MESH_GROUPS",
    "MediaPipeFaceBackend",
    "mesh_to_landmarks",
    "rotation_matrix_to_euler",
]
