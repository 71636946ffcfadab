"""Tests for k-means dominant color extraction."""

import cv2
import numpy as np
import pytest

from facetint.color import dominant
from facetint.color.dominant import get_dominant_color


class TestDominantColor:
    def test_empty_sample(self):
        assert get_dominant_color(np.empty((0, 3))) is None
        assert get_dominant_color([]) is None

    def test_fewer_pixels_than_clusters_uses_mean(self):
        result = get_dominant_color([[10, 20, 30], [20, 30, 41]], k=3)
        assert result.rgb == pytest.approx((15.0, 25.0, 35.5))
        assert result.clusters == ()

    def test_majority_cluster_wins(self):
        pixels = np.array([[200, 40, 40]] * 70 + [[20, 20, 200]] * 30, dtype=np.uint8)
        result = get_dominant_color(pixels, k=2, seed=1)
        assert result.rgb == (200, 40, 40)
        assert sorted(c.percentage for c in result.clusters) == [30, 70]
        assert sum(c.size for c in result.clusters) == 100

    def test_centroids_are_integers(self, rng):
        pixels = rng.integers(0, 256, size=(500, 3))
        result = get_dominant_color(pixels, k=4, seed=3)
        assert len(result.clusters) == 4
        for value in result.rgb:
            assert isinstance(value, int)

    def test_seed_is_repeatable(self, rng):
        pixels = rng.integers(0, 256, size=(400, 3))
        a = get_dominant_color(pixels, k=4, seed=11)
        b = get_dominant_color(pixels, k=4, seed=11)
        assert a == b

    def test_kmeans_failure_falls_back_to_mean(self, monkeypatch):
        def boom(*args, **kwargs):
            raise cv2.error("kmeans exploded")

        monkeypatch.setattr(dominant.cv2, "kmeans", boom)
        pixels = np.array([[0, 0, 0], [10, 10, 10], [20, 20, 20], [30, 30, 30]])
        result = get_dominant_color(pixels, k=2)
        assert result.rgb == pytest.approx((15.0, 15.0, 15.0))
        assert result.clusters == ()
