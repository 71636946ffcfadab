"""Shared test helpers for facetint tests.

Synthetic images only; no detector model is needed. The synthetic face
is laid out so that every region is unambiguous:

- light blue background everywhere else
- a tan face rectangle filling the face box
- brown iris disks with black pupils
- a black hair band above the face box, clear of the crop corners
"""

from typing import Dict, Optional, Tuple

import numpy as np

from facetint.types import FaceDetection, LandmarkGroup, PixelBuffer

IMAGE_SIZE = (400, 400)  # width, height
BACKGROUND = (170, 200, 230)
SKIN = (200, 150, 110)
IRIS = (100, 50, 40)
PUPIL = (0, 0, 0)
HAIR = (20, 18, 18)

FACE_BOX = (150.0, 150.0, 100.0, 120.0)
LEFT_IRIS_CENTER = (180.0, 200.0)
RIGHT_IRIS_CENTER = (220.0, 200.0)
IRIS_RING_RADIUS = 6.0
IRIS_DISK_RADIUS = 7.0
PUPIL_RADIUS = 2.0
HAIR_RECT = (140, 95, 260, 150)  # x1, y1, x2, y2 (exclusive)
EYEBROW_Y = 185.0


def fill_disk(image: np.ndarray, center, radius: float, color) -> None:
    h, w = image.shape[:2]
    ys, xs = np.mgrid[0:h, 0:w]
    mask = np.hypot(xs - center[0], ys - center[1]) <= radius
    image[mask] = color


def ellipse_points(cx, cy, rx, ry, angles_deg) -> np.ndarray:
    a = np.radians(np.asarray(angles_deg, dtype=np.float64))
    return np.stack([cx + rx * np.cos(a), cy + ry * np.sin(a)], axis=1)


def iris_ring(center, radius: float = IRIS_RING_RADIUS) -> np.ndarray:
    """Center point followed by four boundary points."""
    cx, cy = center
    boundary = ellipse_points(cx, cy, radius, radius, [0, 90, 180, 270])
    return np.vstack([[cx, cy], boundary])


def face_landmarks(
    left_iris=LEFT_IRIS_CENTER, right_iris=RIGHT_IRIS_CENTER
) -> Dict[str, np.ndarray]:
    """Full landmark set matching :func:`make_face_image`."""
    lms = {
        LandmarkGroup.SILHOUETTE.value: ellipse_points(200, 210, 50, 60, np.arange(0, 360, 10)),
        LandmarkGroup.LEFT_EYE_IRIS.value: iris_ring(left_iris),
        LandmarkGroup.RIGHT_EYE_IRIS.value: iris_ring(right_iris),
        LandmarkGroup.LEFT_EYEBROW_UPPER.value: np.array(
            [[165.0, EYEBROW_Y + 2], [180.0, EYEBROW_Y], [195.0, EYEBROW_Y + 2]]
        ),
        LandmarkGroup.RIGHT_EYEBROW_UPPER.value: np.array(
            [[205.0, EYEBROW_Y + 2], [220.0, EYEBROW_Y], [235.0, EYEBROW_Y + 2]]
        ),
    }
    for side, (cx, cy) in (("left", left_iris), ("right", right_iris)):
        lms[f"{side}_eye_upper"] = ellipse_points(cx, cy, 10, 8, np.linspace(180, 360, 7))
        lms[f"{side}_eye_lower"] = ellipse_points(cx, cy, 10, 8, np.linspace(180, 0, 9))
    return lms


def make_face_image(
    seed: int = 0,
    noise: int = 3,
    skin=SKIN,
    iris=IRIS,
    hair: Optional[Tuple[int, int, int]] = HAIR,
    background=BACKGROUND,
) -> np.ndarray:
    """(H, W, 3) RGB uint8 image of the synthetic face."""
    w, h = IMAGE_SIZE
    image = np.empty((h, w, 3), dtype=np.int16)
    image[:] = background

    fx, fy, fw, fh = (int(v) for v in FACE_BOX)
    image[fy:fy + fh, fx:fx + fw] = skin
    if hair is not None:
        x1, y1, x2, y2 = HAIR_RECT
        image[y1:y2, x1:x2] = hair
    for center in (LEFT_IRIS_CENTER, RIGHT_IRIS_CENTER):
        fill_disk(image, center, IRIS_DISK_RADIUS, iris)
        fill_disk(image, center, PUPIL_RADIUS, PUPIL)

    if noise:
        rng = np.random.default_rng(seed)
        image = image + rng.integers(-noise, noise + 1, size=image.shape)
    return np.clip(image, 0, 255).astype(np.uint8)


def make_face(face_id: int = 0, box=FACE_BOX, landmarks=None, **kwargs) -> FaceDetection:
    return FaceDetection(
        face_id=face_id,
        box=box,
        landmarks=face_landmarks() if landmarks is None else landmarks,
        score=0.9,
        **kwargs,
    )


def make_synthetic(seed: int = 0, **image_kwargs) -> Tuple[PixelBuffer, FaceDetection]:
    """Synthetic image plus its matching face detection."""
    return PixelBuffer.from_rgb(make_face_image(seed=seed, **image_kwargs)), make_face()


def solid_pixels(color, size: Tuple[int, int] = (64, 64)) -> PixelBuffer:
    w, h = size
    image = np.empty((h, w, 3), dtype=np.uint8)
    image[:] = color
    return PixelBuffer.from_rgb(image)
