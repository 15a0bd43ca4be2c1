"""Tests for vector similarity utilities."""

import math

import pytest

from .similarity import cosine, cosine_preview, dot, magnitude


class TestDot:
    def test_sum_of_products(self):
        assert dot([1, 2, 3], [4, 5, 6]) == 32

    def test_empty(self):
        assert dot([], []) == 0

    def test_single_element(self):
        assert dot([5], [3]) == 15


class TestMagnitude:
    def test_pythagorean(self):
        assert magnitude([3, 4]) == 5

    def test_zero_vector(self):
        assert magnitude([0, 0, 0]) == 0

    def test_empty(self):
        assert magnitude([]) == 0


class TestCosine:
    def test_identical(self):
        assert cosine([1, 0], [1, 0]) == 1

    def test_orthogonal_is_exactly_zero(self):
        assert cosine([1, 0], [0, 1]) == 0

    def test_opposite(self):
        assert cosine([1, 0], [-1, 0]) == -1

    @pytest.mark.parametrize("a,b", [([0, 0], [1, 0]), ([1, 0], [0, 0]), ([0, 0], [0, 0]), ([], [])])
    def test_zero_magnitude_gives_zero(self, a, b):
        result = cosine(a, b)
        assert result == 0
        assert not math.isnan(result)

    def test_non_unit_vectors(self):
        assert cosine([3, 4], [4, 3]) == pytest.approx(24 / 25)

    def test_symmetric(self):
        a, b = [0.3, -1.2, 4.0], [2.5, 0.1, -0.7]
        assert cosine(a, b) == cosine(b, a)

    def test_self_similarity(self):
        a = [0.3, -1.2, 4.0]
        assert cosine(a, a) == pytest.approx(1.0)


class TestCosinePreview:
    def test_ignores_dimensions_past_30(self):
        a = [1.0] * 30 + [5.0] * 10
        b = [1.0] * 30 + [-5.0] * 10
        assert cosine_preview(a, b) == pytest.approx(1.0)
        assert cosine(a, b) < 0

    def test_short_vectors_use_full_length(self):
        assert cosine_preview([1, 0], [0, 1]) == 0
        assert cosine_preview([3, 4], [4, 3]) == pytest.approx(24 / 25)

    def test_empty(self):
        assert cosine_preview([], []) == 0
