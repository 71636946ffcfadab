"""Person records and the analysis report.

One :class:`PersonRecord` per detected face, in detector order. Bodies
are attached to the nearest face (or become records of their own) and
hands are attached by index. :meth:`AnalysisReport.to_dict` produces the
JSON-ready output document.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from facetint.describe import (
    BodyPosture,
    EyeState,
    GazeDirection,
    HeadDirection,
    MouthState,
    body_posture,
    distance_description,
    eye_and_mouth_state,
    face_gestures,
    gaze_direction,
    head_direction,
)
from facetint.output import FaceAttributes
from facetint.types import (
    Box,
    BodyDetection,
    DetectionResult,
    FaceDetection,
    Gesture,
    HandDetection,
)

logger = logging.getLogger(__name__)

UNMATCHED_BODY_NOTE = "Body detected without matching face"
# A body matches a face only if the face center is this close (x body height)
BODY_MATCH_RATIO = 0.5
HANDS_PER_PERSON = 2


def _pct(value: Optional[float]) -> Optional[int]:
    if not value:
        return None
    return int(math.floor(value * 100 + 0.5))


def _box(box: Box) -> List[float]:
    return [float(v) for v in box]


@dataclass
class FaceRecord:
    """Everything reported about one face."""

    detection: FaceDetection
    attributes: FaceAttributes
    head: HeadDirection
    gaze: GazeDirection
    eyes: EyeState
    mouth: MouthState

    def to_dict(self) -> Dict[str, Any]:
        face = self.detection
        emotions = None
        primary = None
        if face.emotions:
            emotions = [{"emotion": e.emotion, "score": _pct(e.score) or 0} for e in face.emotions]
            primary = emotions[0]
        distance = None
        if face.distance:
            distance = {
                "meters": round(face.distance, 2),
                "description": distance_description(face.distance),
            }
        out = {
            "id": face.face_id,
            "score": _pct(face.score) or 0,
            "box": _box(face.box),
            "age": round(face.age, 1) if face.age else None,
            "gender": face.gender,
            "genderScore": _pct(face.gender_score),
            "emotion": emotions,
            "primaryEmotion": primary,
            "headDirection": self.head.to_dict(),
            "gazeDirection": self.gaze.to_dict(),
            "eyes": self.eyes.to_dict(),
            "mouth": self.mouth.to_dict(),
            "distance": distance,
            "real": _pct(face.real),
            "live": _pct(face.live),
        }
        out.update(self.attributes.to_dict())
        return out


@dataclass
class BodyRecord:
    detection: BodyDetection
    posture: BodyPosture

    def to_dict(self) -> Dict[str, Any]:
        body = self.detection
        return {
            "id": body.body_id,
            "score": _pct(body.score) or 0,
            "box": _box(body.box),
            "posture": self.posture.to_dict(),
            "keypoints": [
                {"part": kp.part, "position": list(kp.position), "score": _pct(kp.score) or 0}
                for kp in body.keypoints
            ] or None,
        }


@dataclass
class HandRecord:
    detection: HandDetection
    gestures: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        hand = self.detection
        return {
            "id": hand.hand_id,
            "score": _pct(hand.score) or 0,
            "box": _box(hand.box),
            "label": hand.label,
            "gestures": list(self.gestures),
        }


@dataclass
class PersonRecord:
    """One person in the report.

    Attributes:
        person_index: Position in the report; equals the face index for
            face-backed records.
        face: Face record, None for body-only or malformed entries.
        face_gestures: Gesture texts that refer to this face.
        body: Matched body, if any.
        hands: Hands attached by index.
        note: Free-text remark (body without face).
        error: Set when the face detection could not be analyzed.
    """

    person_index: int
    face: Optional[FaceRecord] = None
    face_gestures: List[str] = field(default_factory=list)
    body: Optional[BodyRecord] = None
    hands: List[HandRecord] = field(default_factory=list)
    note: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"personIndex": self.person_index}
        if self.face is not None:
            out["face"] = self.face.to_dict()
        if self.face is not None or self.error is not None:
            out["faceGestures"] = list(self.face_gestures)
        if self.body is not None:
            out["body"] = self.body.to_dict()
        if self.hands:
            out["hands"] = [h.to_dict() for h in self.hands]
        if self.note is not None:
            out["note"] = self.note
        if self.error is not None:
            out["error"] = self.error
        return out


def build_face_record(
    face: FaceDetection, attributes: FaceAttributes, gestures: Sequence[Gesture], index: int
) -> FaceRecord:
    eyes, mouth = eye_and_mouth_state(face_gestures(gestures, index))
    return FaceRecord(
        detection=face,
        attributes=attributes,
        head=head_direction(face.rotation),
        gaze=gaze_direction(face.rotation),
        eyes=eyes,
        mouth=mouth,
    )


def match_body_to_face(body: BodyDetection, faces: Sequence[FaceDetection]) -> Optional[int]:
    """Index of the face closest to the body's head point, or None.

    The head point is (body center x, nose y), falling back to the top of
    the body box without a nose keypoint.
    """
    bx, by, bw, bh = body.box
    center_x = bx + bw / 2
    head_y = by
    nose = body.keypoint("nose")
    if nose is not None:
        head_y = nose.position[1]

    best, best_dist = None, math.inf
    for i, face in enumerate(faces):
        try:
            fx, fy, fw, fh = (float(v) for v in face.box)
        except (TypeError, ValueError):
            continue
        dist = math.hypot(fx + fw / 2 - center_x, fy + fh / 2 - head_y)
        if dist < best_dist and dist < bh * BODY_MATCH_RATIO:
            best, best_dist = i, dist
    return best


def attach_bodies(
    people: List[PersonRecord],
    faces: Sequence[FaceDetection],
    bodies: Sequence[BodyDetection],
    gestures: Sequence[Gesture],
) -> None:
    for body_index, body in enumerate(bodies):
        own = [g for g in gestures if g.part == "body" and g.index == body_index]
        record = BodyRecord(detection=body, posture=body_posture(body, own))
        match = match_body_to_face(body, faces)
        if match is not None and match < len(people):
            people[match].body = record
        else:
            logger.debug("Body %d has no matching face", body_index)
            people.append(
                PersonRecord(person_index=len(people), body=record, note=UNMATCHED_BODY_NOTE)
            )


def attach_hands(
    people: List[PersonRecord], hands: Sequence[HandDetection], gestures: Sequence[Gesture]
) -> None:
    for hand_index, hand in enumerate(hands):
        person = hand_index // HANDS_PER_PERSON
        if person >= len(people):
            continue
        own = [g.gesture for g in gestures if g.part == "hand" and g.index == hand_index]
        people[person].hands.append(HandRecord(detection=hand, gestures=own))


@dataclass
class AnalysisReport:
    """The output document for one image."""

    width: int
    height: int
    people: List[PersonRecord]
    detections: DetectionResult
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        d = self.detections
        return {
            "timestamp": self.timestamp,
            "imageInfo": {"width": self.width, "height": self.height},
            "summary": {
                "totalFaces": len(d.faces),
                "totalBodies": len(d.bodies),
                "totalHands": len(d.hands),
                "totalGestures": len(d.gestures),
            },
            "people": [p.to_dict() for p in self.people],
            "allGestures": [g.to_dict() for g in d.gestures],
        }


__all__ = [
    "UNMATCHED_BODY_NOTE",
    "FaceRecord",
    "BodyRecord",
    "HandRecord",
    "PersonRecord",
    "AnalysisReport",
    "build_face_record",
    "match_body_to_face",
    "attach_bodies",
    "attach_hands",
]
