"""Tests for unit conversions."""

import math

import pytest

from optibench.core.units import (
    deg_to_rad,
    fraction_to_pct,
    grid_to_mm,
    loss_pct,
    nm_to_mm,
    normalize_deg,
)


class TestLength:

    def test_grid_to_mm_uses_cell_size(self):
        assert grid_to_mm(7.0, 30.0) == pytest.approx(210.0)

    def test_helium_neon_wavelength(self):
        assert nm_to_mm(632.8) == pytest.approx(6.328e-4)


class TestAngle:

    def test_deg_to_rad(self):
        assert deg_to_rad(180.0) == pytest.approx(math.pi)

    @pytest.mark.parametrize("deg, expected", [
        (0.0, 0.0), (360.0, 0.0), (405.0, 45.0), (-90.0, 270.0),
    ])
    def test_normalize_deg(self, deg, expected):
        assert normalize_deg(deg) == pytest.approx(expected)


class TestPower:

    def test_fraction_to_pct(self):
        assert fraction_to_pct(0.05) == pytest.approx(5.0)

    def test_loss_pct(self):
        assert loss_pct(2.0, 0.5) == pytest.approx(75.0)

    def test_loss_pct_without_initial_power(self):
        assert loss_pct(0.0, 0.0) == 0.0
