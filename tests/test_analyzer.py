"""Tests for analyze_detections and FaceColorAnalyzer."""

import threading
import time

import cv2
import numpy as np
import pytest

from helpers import FACE_BOX, face_landmarks, make_face, make_face_image

from facetint.analyzer import (
    FaceColorAnalyzer,
    analyze_detections,
    face_crop_box,
    load_image,
    person_crop_box,
)
from facetint.config import AnalyzerConfig, CropConfig
from facetint.types import (
    BodyDetection,
    BodyKeypoint,
    DetectionResult,
    Gesture,
    HandDetection,
    LandmarkGroup,
    PixelBuffer,
)


# ── Mocks ──

class MockDetectorBackend:
    """Returns a fixed DetectionResult and records lifecycle calls."""

    def __init__(self, detections=None):
        self.detections = detections or DetectionResult(faces=[make_face()])
        self.initialized = False
        self.device = None
        self.call_count = 0
        self.cleaned_up = False

    def initialize(self, device="cpu"):
        self.initialized = True
        self.device = device

    def detect(self, pixels):
        self.call_count += 1
        return self.detections

    def cleanup(self):
        self.initialized = False
        self.cleaned_up = True


class RecordingSink:
    def __init__(self):
        self.saved = []

    def save(self, person_index, region, crop):
        self.saved.append((person_index, region))


def _face_dict(result, index=0):
    return result.report.to_dict()["people"][index]["face"]


# ── Crop boxes ──

class TestCropBoxes:
    def test_person_crop(self, face):
        assert person_crop_box(face, 400, 400, CropConfig()) == (110, 54, 180, 234)

    def test_person_crop_clamped(self):
        face = make_face(box=(10.0, 20.0, 100.0, 100.0))
        x, y, w, h = person_crop_box(face, 150, 130, CropConfig())
        assert (x, y) == (0, 0)
        assert w == 150
        assert h == 130

    def test_face_crop(self, face):
        assert face_crop_box(face, 400, 400, CropConfig()) == (126, 126, 148, 168)


# ── analyze_detections ──

class TestAnalyzeDetections:
    def test_synthetic_portrait(self, synthetic, seeded_config):
        pixels, face = synthetic
        result = analyze_detections(DetectionResult(faces=[face]), pixels, seeded_config)
        d = _face_dict(result)
        assert d["eyeColor"]["color"] == "brown"
        assert d["hairColor"]["color"] == "black"
        assert d["skinTone"]["tone"] == "medium"
        assert d["skinTone"]["undertone"] == "neutral-warm"
        assert d["skinTone"]["fitzpatrick"] == "Type III"
        assert d["hairColor"]["cropSize"] == {"width": 160, "height": 132}

    def test_face_crops(self, synthetic, seeded_config):
        pixels, face = synthetic
        result = analyze_detections(DetectionResult(faces=[face]), pixels, seeded_config)
        crop = result.face_crops[0]
        assert (crop.width, crop.height) == (148, 168)

    def test_malformed_face_is_isolated(self, synthetic, seeded_config):
        pixels, face = synthetic
        broken = make_face(1, box=(10.0, 10.0, 0.0, 10.0))
        gestures = [Gesture("face", 1, "blink left eye")]
        result = analyze_detections(
            DetectionResult(faces=[face, broken], gestures=gestures), pixels, seeded_config
        )
        people = result.report.to_dict()["people"]
        assert len(people) == 2
        assert people[0]["face"]["eyeColor"]["color"] == "brown"
        assert "face" not in people[1]
        assert "empty bounding box" in people[1]["error"]
        assert people[1]["faceGestures"] == ["blink left eye"]
        assert 1 not in result.face_crops

    @pytest.mark.parametrize("group, points", [
        (LandmarkGroup.SILHOUETTE, np.full((36, 2), np.nan)),
        (LandmarkGroup.LEFT_EYE_IRIS, np.zeros((3, 1))),
        (LandmarkGroup.RIGHT_EYE_IRIS, np.array([1.0, 2.0, 3.0])),
        (LandmarkGroup.LEFT_EYE_UPPER, np.array([[0.0, np.inf], [1.0, 1.0]])),
        (LandmarkGroup.LEFT_EYEBROW_UPPER, np.array([["a", "b"]])),
    ])
    def test_bad_landmarks_are_isolated(self, synthetic, seeded_config, group, points):
        pixels, face = synthetic
        lms = face_landmarks()
        lms[group.value] = points
        bad = make_face(0, landmarks=lms)
        result = analyze_detections(
            DetectionResult(faces=[bad, make_face(1)]), pixels, seeded_config
        )
        people = result.report.to_dict()["people"]
        assert len(people) == 2
        assert "face" not in people[0]
        assert group.value in people[0]["error"]
        assert people[1]["face"]["eyeColor"]["color"] == "brown"
        assert people[1]["face"]["skinTone"]["tone"] == "medium"
        assert list(result.face_crops) == [1]

    def test_empty_landmark_groups_mean_absent(self, synthetic, seeded_config):
        pixels, face = synthetic
        empty = {name: np.empty((0, 2)) for name in face_landmarks()}
        result = analyze_detections(
            DetectionResult(faces=[make_face(0, landmarks=empty), face]), pixels, seeded_config
        )
        people = result.report.to_dict()["people"]
        assert "error" not in people[0]
        assert people[0]["face"]["eyeColor"]["reason"] == "missing iris landmarks"
        assert people[1]["face"]["eyeColor"]["color"] == "brown"

    def test_missing_box(self, synthetic):
        pixels, _ = synthetic
        result = analyze_detections(DetectionResult(faces=[make_face(box=None)]), pixels)
        assert "missing bounding box" in result.report.people[0].error

    def test_no_faces(self, synthetic):
        pixels, _ = synthetic
        d = analyze_detections(DetectionResult(), pixels).report.to_dict()
        assert d["people"] == []
        assert d["summary"]["totalFaces"] == 0

    def test_body_and_hands(self, synthetic, seeded_config):
        pixels, face = synthetic
        fx, fy, fw, fh = FACE_BOX
        body = BodyDetection(
            body_id=0, box=(fx - 20, fy - 10, fw + 40, 250.0), score=0.8,
            keypoints=(BodyKeypoint("nose", (fx + fw / 2, fy + fh / 2), 0.9),),
        )
        hands = [HandDetection(0, (100, 300, 30, 30), 0.7, "left")]
        detections = DetectionResult(faces=[face], bodies=[body], hands=hands)
        person = analyze_detections(detections, pixels, seeded_config).report.to_dict()["people"][0]
        assert person["body"]["id"] == 0
        assert person["hands"][0]["label"] == "left"

    def test_debug_sink_gets_every_region(self, synthetic, seeded_config):
        pixels, face = synthetic
        sink = RecordingSink()
        analyze_detections(DetectionResult(faces=[face]), pixels, seeded_config, debug=sink)
        assert sorted(sink.saved) == [(0, "eye"), (0, "hair"), (0, "skin")]

    def test_debug_dir_from_config(self, synthetic, tmp_path):
        pixels, face = synthetic
        config = AnalyzerConfig(seed=7, debug_dir=str(tmp_path / "debug"))
        analyze_detections(DetectionResult(faces=[face]), pixels, config)
        written = sorted(p.name for p in (tmp_path / "debug").iterdir())
        assert written == ["person_0_eye.png", "person_0_hair.png", "person_0_skin.png"]


# ── FaceColorAnalyzer ──

class TestFaceColorAnalyzer:
    def test_lifecycle(self):
        backend = MockDetectorBackend()
        analyzer = FaceColorAnalyzer(backend=backend, config=AnalyzerConfig(device="cuda:0"))
        assert not analyzer.is_initialized

        analyzer.initialize()
        assert analyzer.is_initialized
        assert backend.device == "cuda:0"

        analyzer.cleanup()
        assert not analyzer.is_initialized
        assert backend.cleaned_up

    def test_concurrent_initialize_loads_backend_once(self):
        class SlowBackend(MockDetectorBackend):
            def __init__(self):
                super().__init__()
                self.init_calls = 0

            def initialize(self, device="cpu"):
                self.init_calls += 1
                time.sleep(0.02)
                super().initialize(device)

        backend = SlowBackend()
        analyzer = FaceColorAnalyzer(backend=backend)
        start = threading.Barrier(6)

        def run():
            start.wait()
            analyzer.initialize()

        threads = [threading.Thread(target=run) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert backend.init_calls == 1
        assert analyzer.is_initialized

    def test_detect_requires_initialize(self, synthetic):
        pixels, _ = synthetic
        analyzer = FaceColorAnalyzer(backend=MockDetectorBackend())
        with pytest.raises(RuntimeError, match="not initialized"):
            analyzer.analyze(pixels)

    def test_context_manager(self, synthetic, seeded_config):
        pixels, face = synthetic
        backend = MockDetectorBackend(DetectionResult(faces=[face]))
        with FaceColorAnalyzer(backend=backend, config=seeded_config) as analyzer:
            result = analyzer.analyze(pixels)
        assert backend.call_count == 1
        assert backend.cleaned_up
        assert _face_dict(result)["eyeColor"]["color"] == "brown"

    def test_accepts_bgr_array(self, seeded_config):
        bgr = cv2.cvtColor(make_face_image(seed=0), cv2.COLOR_RGB2BGR)
        with FaceColorAnalyzer(backend=MockDetectorBackend(), config=seeded_config) as analyzer:
            result = analyzer.analyze(bgr)
        assert _face_dict(result)["hairColor"]["color"] == "black"

    def test_shared_between_threads(self, synthetic, seeded_config):
        pixels, _ = synthetic
        backend = MockDetectorBackend()
        results = []
        with FaceColorAnalyzer(backend=backend, config=seeded_config) as analyzer:
            threads = [
                threading.Thread(target=lambda: results.append(analyzer.analyze(pixels)))
                for _ in range(4)
            ]
            for t in threads:
                t.start()
            for t in threads:
                t.join()
        assert backend.call_count == 4
        assert {_face_dict(r)["skinTone"]["tone"] for r in results} == {"medium"}


class TestLoadImage:
    def test_round_trip(self, tmp_path):
        rgb = make_face_image(seed=0, noise=0)
        path = tmp_path / "face.png"
        cv2.imwrite(str(path), cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
        pixels = load_image(path)
        assert isinstance(pixels, PixelBuffer)
        np.testing.assert_array_equal(pixels.rgb, rgb)
        assert (pixels.data[..., 3] == 255).all()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "nope.jpg")
