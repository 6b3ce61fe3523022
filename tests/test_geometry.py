"""Tests for geometry helpers — directions, reflection, projection, clamping."""

import math

import pytest

from optibench.core.geometry import (
    advance,
    chebyshev_within,
    clamp_to_grid,
    direction_from_rotation,
    normalize,
    project,
    reflect,
)
from optibench.models.components import Point2D


class TestDirectionFromRotation:

    @pytest.mark.parametrize("deg, expected", [
        (0, (1.0, 0.0)),
        (90, (0.0, 1.0)),
        (180, (-1.0, 0.0)),
        (270, (0.0, -1.0)),
        (-90, (0.0, -1.0)),
        (450, (0.0, 1.0)),
    ])
    def test_cardinal_directions(self, deg, expected):
        dx, dy = direction_from_rotation(deg)
        assert dx == pytest.approx(expected[0], abs=1e-12)
        assert dy == pytest.approx(expected[1], abs=1e-12)

    @pytest.mark.parametrize("deg", [0, 17.5, 45, 123.4, 300, -33])
    def test_unit_length(self, deg):
        assert math.hypot(*direction_from_rotation(deg)) == pytest.approx(1.0)


class TestReflect:

    def test_head_on_reverses(self):
        """Normal anti-parallel to the beam → beam comes straight back."""
        out = reflect((1.0, 0.0), direction_from_rotation(180))
        assert out[0] == pytest.approx(-1.0)
        assert out[1] == pytest.approx(0.0, abs=1e-12)

    def test_45_degree_turns_right_angle(self):
        out = reflect((1.0, 0.0), direction_from_rotation(45))
        assert out[0] == pytest.approx(0.0, abs=1e-12)
        assert out[1] == pytest.approx(-1.0)

    def test_parallel_to_surface_unchanged(self):
        """Beam perpendicular to the normal grazes past unchanged."""
        out = reflect((1.0, 0.0), direction_from_rotation(90))
        assert out[0] == pytest.approx(1.0)
        assert out[1] == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("d_deg", [0, 30, 77, 190, 265])
    @pytest.mark.parametrize("n_deg", [0, 45, 90, 135, 222.2, 315])
    def test_reflection_preserves_unit_length(self, d_deg, n_deg):
        out = reflect(direction_from_rotation(d_deg), direction_from_rotation(n_deg))
        assert math.hypot(*out) == pytest.approx(1.0, abs=1e-12)

    def test_normal_sign_irrelevant(self):
        d = direction_from_rotation(20)
        a = reflect(d, direction_from_rotation(60))
        b = reflect(d, direction_from_rotation(240))
        assert a == pytest.approx(b)


class TestProjection:

    def test_point_ahead_on_line(self):
        t, miss = project(Point2D(0, 0), (1.0, 0.0), Point2D(5, 0))
        assert t == pytest.approx(5.0)
        assert miss == pytest.approx(0.0)

    def test_point_behind(self):
        t, _ = project(Point2D(0, 0), (1.0, 0.0), Point2D(-3, 0))
        assert t == pytest.approx(-3.0)

    def test_perpendicular_offset(self):
        t, miss = project(Point2D(0, 0), (0.0, 1.0), Point2D(0.5, 4))
        assert t == pytest.approx(4.0)
        assert miss == pytest.approx(0.5)


class TestHelpers:

    def test_advance(self):
        p = advance(Point2D(1, 1), (0.0, 1.0), 4)
        assert p == Point2D(1, 5)

    def test_normalize_zero_vector(self):
        assert normalize((0.0, 0.0)) == (0.0, 0.0)

    def test_clamp_inside_untouched(self):
        assert clamp_to_grid(Point2D(3.5, 7.25), 40, 25) == Point2D(3.5, 7.25)

    def test_clamp_to_last_cell(self):
        """Upper bound is width-1 / height-1."""
        assert clamp_to_grid(Point2D(100, -5), 40, 25) == Point2D(39.0, 0.0)
        assert clamp_to_grid(Point2D(-1, 30), 40, 25) == Point2D(0.0, 24.0)

    def test_chebyshev_tolerance_is_strict(self):
        assert chebyshev_within(Point2D(0, 0), Point2D(0.4, -0.4), 0.5)
        assert not chebyshev_within(Point2D(0, 0), Point2D(0.5, 0), 0.5)
