"""Region samplers: landmark geometry in, classified color out."""

from facetint.samplers.base import CropSink, classify_sample, sample_confidence
from facetint.samplers.eye import extract_iris_ring_pixels, sample_eye_color
from facetint.samplers.hair import sample_hair_color
from facetint.samplers.skin import sample_skin_tone

__all__ = [
    "CropSink",
    "classify_sample",
    "sample_confidence",
    "extract_iris_ring_pixels",
    "sample_eye_color",
    "sample_hair_color",
    "sample_skin_tone",
]
