"""Tests for the facetint command-line interface."""

import json

import cv2
import pytest

from helpers import make_face, make_face_image

import facetint.analyzer
from facetint.analyzer import FaceColorAnalyzer
from facetint.cli import main
from facetint.cli.utils import format_attribute
from facetint.types import DetectionResult


# ── Mocks ──

class MockDetectorBackend:
    def initialize(self, device="cpu"):
        pass

    def detect(self, pixels):
        return DetectionResult(faces=[make_face()])

    def cleanup(self):
        pass


class MockAnalyzer(FaceColorAnalyzer):
    def __init__(self, backend=None, config=None):
        super().__init__(backend=MockDetectorBackend(), config=config)


@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "portrait.png"
    cv2.imwrite(str(path), cv2.cvtColor(make_face_image(seed=0), cv2.COLOR_RGB2BGR))
    return path


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("FACETINT_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("FACETINT_MODELS_DIR", raising=False)
    monkeypatch.setattr(facetint.analyzer, "FaceColorAnalyzer", MockAnalyzer)


# ── Tests ──

class TestAnalyzeCommand:
    def test_writes_report(self, image_path, tmp_path, capsys):
        output = tmp_path / "report.json"
        code = main(["analyze", str(image_path), "-o", str(output), "--seed", "7"])
        assert code == 0

        data = json.loads(output.read_text())
        face = data["people"][0]["face"]
        assert face["eyeColor"]["color"] == "brown"
        assert face["hairColor"]["color"] == "black"
        assert face["skinTone"]["tone"] == "medium"

        out = capsys.readouterr().out
        assert "Person 0" in out
        assert "brown" in out

    def test_default_output_dir(self, image_path, tmp_path):
        assert main(["analyze", str(image_path), "--seed", "7"]) == 0
        assert (tmp_path / "home" / "output" / "portrait" / "report.json").exists()

    def test_faces_and_debug_dirs(self, image_path, tmp_path):
        faces_dir = tmp_path / "faces"
        debug_dir = tmp_path / "debug"
        main([
            "analyze", str(image_path), "-o", str(tmp_path / "r.json"),
            "--faces-dir", str(faces_dir), "--debug-dir", str(debug_dir), "--seed", "7",
        ])
        assert (faces_dir / "face_0.png").exists()
        assert sorted(p.name for p in debug_dir.iterdir()) == [
            "person_0_eye.png", "person_0_hair.png", "person_0_skin.png",
        ]

    def test_print_json(self, image_path, tmp_path, capsys):
        main(["analyze", str(image_path), "-o", str(tmp_path / "r.json"), "--print", "--seed", "7"])
        out = capsys.readouterr().out
        assert '"imageInfo"' in out

    def test_config_file(self, image_path, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("hair:\n  min_pixels: 1000000\n")
        output = tmp_path / "r.json"
        main(["analyze", str(image_path), "-o", str(output), "--config", str(config), "--seed", "7"])
        hair = json.loads(output.read_text())["people"][0]["face"]["hairColor"]
        assert hair["reason"] == "insufficient hair pixels or bald"

    def test_missing_image_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["analyze", str(tmp_path / "missing.png")])
        assert exc.value.code == 1


class TestInfoCommand:
    def test_info(self, capsys):
        assert main(["info"]) == 0
        out = capsys.readouterr().out
        assert "facetint" in out
        assert "min_pixels" in out

    def test_info_with_config(self, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("seed: 42\n")
        main(["info", "--config", str(config)])
        assert "seed: 42" in capsys.readouterr().out


class TestNoCommand:
    def test_help_and_exit(self):
        with pytest.raises(SystemExit):
            main([])


class TestFormatAttribute:
    def test_unknown(self):
        line = format_attribute("eyes", {"color": "unknown", "confidence": 0, "reason": "missing iris landmarks"})
        assert "missing iris landmarks" in line

    def test_skin(self):
        line = format_attribute("skin", {
            "tone": "medium", "undertone": "neutral-warm", "fitzpatrick": "Type III",
            "colorName": "tan", "hex": "#c8966e", "confidence": 100,
        })
        assert "medium" in line
        assert "Type III" in line
