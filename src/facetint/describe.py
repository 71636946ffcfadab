"""Pose, gaze and gesture descriptors for the person report.

Small, threshold-based text labels derived from the detector's rotation
estimates, body keypoints and gesture strings. None of these touch pixels.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from facetint.types import BodyDetection, FaceRotation, Gesture

# ── Thresholds ──
HEAD_TURN_DEG = 15.0
GAZE_MIN_STRENGTH = 0.1
SITTING_MAX_HIP_KNEE_PX = 50.0
LEAN_PX = 20.0
MOUTH_BUCKETS: Tuple[Tuple[int, str], ...] = (
    (10, "closed"),
    (30, "slightly open"),
    (60, "open"),
)
MOUTH_WIDE = "wide open"
DISTANCE_BUCKETS: Tuple[Tuple[float, str], ...] = (
    (0.5, "very close"),
    (1.0, "close"),
    (2.0, "medium"),
)

_MOUTH_RE = re.compile(r"mouth (\d+)% open")


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class HeadDirection:
    """Coarse head orientation; ``direction`` is "unknown" without rotation."""

    direction: str
    vertical: str = "straight"
    horizontal: str = "center"
    pitch: Optional[float] = None
    yaw: Optional[float] = None
    roll: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.pitch is None:
            return {"direction": self.direction, "details": None}
        return {
            "direction": self.direction,
            "pitchDegrees": _round(self.pitch),
            "yawDegrees": _round(self.yaw),
            "rollDegrees": _round(self.roll),
            "vertical": self.vertical,
            "horizontal": self.horizontal,
        }


def head_direction(rotation: Optional[FaceRotation]) -> HeadDirection:
    """Label pitch/yaw beyond +-15 degrees, e.g. "facing left-up"."""
    if rotation is None:
        return HeadDirection(direction="unknown")

    vertical = "straight"
    if rotation.pitch > HEAD_TURN_DEG:
        vertical = "down"
    elif rotation.pitch < -HEAD_TURN_DEG:
        vertical = "up"

    horizontal = "center"
    if rotation.yaw > HEAD_TURN_DEG:
        horizontal = "left"
    elif rotation.yaw < -HEAD_TURN_DEG:
        horizontal = "right"

    if vertical == "straight" and horizontal == "center":
        direction = "facing center"
    elif vertical != "straight" and horizontal != "center":
        direction = f"facing {horizontal}-{vertical}"
    elif vertical != "straight":
        direction = f"facing {vertical}"
    else:
        direction = f"facing {horizontal}"

    return HeadDirection(
        direction=direction,
        vertical=vertical,
        horizontal=horizontal,
        pitch=rotation.pitch,
        yaw=rotation.yaw,
        roll=rotation.roll,
    )


@dataclass(frozen=True)
class GazeDirection:
    direction: str
    bearing: Optional[float] = None
    strength: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        if self.bearing is None:
            return {"direction": self.direction, "strength": 0}
        return {
            "direction": self.direction,
            "bearingDegrees": _round(self.bearing),
            "strengthPercent": _round(self.strength * 100),
        }


def gaze_direction(rotation: Optional[FaceRotation]) -> GazeDirection:
    """Quantize the gaze bearing into up/left/down/right when it is strong enough."""
    if rotation is None:
        return GazeDirection(direction="unknown")

    bearing, strength = rotation.gaze_bearing, rotation.gaze_strength
    direction = "center"
    if strength > GAZE_MIN_STRENGTH:
        if 45 < bearing <= 135:
            direction = "up"
        elif 135 < bearing <= 225:
            direction = "left"
        elif 225 < bearing <= 315:
            direction = "down"
        else:
            direction = "right"
    return GazeDirection(direction=direction, bearing=bearing, strength=strength)


@dataclass(frozen=True)
class EyeState:
    left: str = "open"
    right: str = "open"

    @property
    def both_open(self) -> bool:
        return self.left == "open" and self.right == "open"

    @property
    def blinking(self) -> bool:
        return self.left == "closed" or self.right == "closed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "left": self.left,
            "right": self.right,
            "bothOpen": self.both_open,
            "blinking": self.blinking,
        }


@dataclass(frozen=True)
class MouthState:
    state: str = "closed"
    open_percent: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state, "openPercent": self.open_percent}


def mouth_state_for(percent: int) -> str:
    for limit, label in MOUTH_BUCKETS:
        if percent < limit:
            return label
    return MOUTH_WIDE


def face_gestures(gestures: Iterable[Gesture], face_index: int) -> List[Gesture]:
    """Gestures that refer to face ``face_index`` (face or iris part)."""
    return [g for g in gestures if g.part in ("face", "iris") and g.index == face_index]


def eye_and_mouth_state(gestures: Iterable[Gesture]) -> Tuple[EyeState, MouthState]:
    """Read eye and mouth state out of a face's gesture strings.

    "blink left eye" closes the left eye; other "left eye ..." gestures
    set the left state to the remainder of the text. The same applies to
    the right eye. "mouth N% open" sets the mouth bucket.
    """
    left, right = "open", "open"
    mouth = MouthState()
    for g in gestures:
        text = g.gesture
        if "blink left eye" in text:
            left = "closed"
        elif "left eye" in text:
            left = text.replace("left eye ", "", 1)

        if "blink right eye" in text:
            right = "closed"
        elif "right eye" in text:
            right = text.replace("right eye ", "", 1)

        if "mouth" in text:
            match = _MOUTH_RE.search(text)
            if match:
                percent = int(match.group(1))
                mouth = MouthState(state=mouth_state_for(percent), open_percent=percent)
    return EyeState(left=left, right=right), mouth


def distance_description(meters: float) -> str:
    for limit, label in DISTANCE_BUCKETS:
        if meters < limit:
            return label
    return "far"


@dataclass(frozen=True)
class BodyPosture:
    posture: str = "unknown"
    lean: str = "none"
    gestures: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {"posture": self.posture, "lean": self.lean, "gesturesDetected": list(self.gestures)}


def _mean(body: BodyDetection, a: str, b: str, axis: int) -> Optional[float]:
    ka, kb = body.keypoint(a), body.keypoint(b)
    if ka is None or kb is None:
        return None
    return (ka.position[axis] + kb.position[axis]) / 2


def body_posture(body: BodyDetection, gestures: Iterable[Gesture] = ()) -> BodyPosture:
    """Sitting/standing from hip-knee spacing, lean from shoulders over hips."""
    posture = "unknown"
    hip_y = _mean(body, "leftHip", "rightHip", 1)
    knee_y = _mean(body, "leftKnee", "rightKnee", 1)
    if hip_y is not None and knee_y is not None:
        posture = "sitting" if abs(knee_y - hip_y) < SITTING_MAX_HIP_KNEE_PX else "standing"

    lean = "none"
    shoulder_x = _mean(body, "leftShoulder", "rightShoulder", 0)
    hip_x = _mean(body, "leftHip", "rightHip", 0)
    if shoulder_x is not None and hip_x is not None:
        amount = shoulder_x - hip_x
        if amount > LEAN_PX:
            lean = "leaning right"
        elif amount < -LEAN_PX:
            lean = "leaning left"
        else:
            lean = "upright"

    return BodyPosture(
        posture=posture,
        lean=lean,
        gestures=tuple(g.gesture for g in gestures if g.part == "body"),
    )


__all__ = [
    "HeadDirection",
    "GazeDirection",
    "EyeState",
    "MouthState",
    "BodyPosture",
    "head_direction",
    "gaze_direction",
    "face_gestures",
    "eye_and_mouth_state",
    "mouth_state_for",
    "distance_description",
    "body_posture",
]
