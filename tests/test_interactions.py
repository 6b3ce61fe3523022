"""Tests for the interaction resolver and property defaults/clamping."""

import math

import pytest

from optibench.core.geometry import direction_from_rotation
from optibench.core.interactions import (
    clamp_fraction,
    interaction_loss,
    laser_power,
    laser_wavelength,
    mirror_reflectivity,
    resolve_interaction,
    splitter_ratios,
)
from optibench.models.components import (
    ComponentProperties,
    ComponentType,
    OpticalComponent,
)


# ── Helpers ──


def _comp(ctype: ComponentType, rotation: float = 0.0, **props) -> OpticalComponent:
    return OpticalComponent(
        id=ctype.value, type=ctype, x=10, y=10, rotation=rotation,
        properties=ComponentProperties(**props),
    )


RIGHT = (1.0, 0.0)


# ── Property access ──


class TestClampFraction:

    def test_none_uses_default(self):
        assert clamp_fraction(None, 0.5) == 0.5

    def test_explicit_zero_kept(self):
        assert clamp_fraction(0.0, 0.5) == 0.0

    def test_above_one_clamped(self):
        assert clamp_fraction(99.0, 0.5) == 1.0

    def test_negative_clamped(self):
        assert clamp_fraction(-0.2, 0.5) == 0.0

    def test_nan_uses_default(self):
        assert clamp_fraction(math.nan, 0.7) == 0.7


class TestDefaults:

    def test_mirror_reflectivity_default(self):
        assert mirror_reflectivity(_comp(ComponentType.MIRROR)) == 1.0

    def test_splitter_default_is_50_50(self):
        assert splitter_ratios(_comp(ComponentType.BEAMSPLITTER)) == (0.5, 0.5)

    def test_laser_defaults(self):
        laser = _comp(ComponentType.LASER)
        assert laser_power(laser) == 1.0
        assert laser_wavelength(laser) == pytest.approx(632.8)

    def test_negative_power_floored(self):
        assert laser_power(_comp(ComponentType.LASER, power=-3.0)) == 0.0

    def test_zero_wavelength_falls_back(self):
        assert laser_wavelength(_comp(ComponentType.LASER, wavelength=0.0)) == pytest.approx(632.8)


class TestInteractionLoss:

    def test_mirror_loss(self):
        assert interaction_loss(_comp(ComponentType.MIRROR, reflectivity=0.9)) == pytest.approx(0.1)

    def test_perfect_mirror_by_default(self):
        assert interaction_loss(_comp(ComponentType.MIRROR)) == 0.0

    def test_splitter_loss_is_reflected_share(self):
        comp = _comp(ComponentType.BEAMSPLITTER, reflectivity=0.3, transmitivity=0.7)
        assert interaction_loss(comp) == pytest.approx(0.7)

    def test_lens_loss(self):
        assert interaction_loss(_comp(ComponentType.LENS)) == pytest.approx(0.05)

    def test_detector_and_laser_lossless(self):
        assert interaction_loss(_comp(ComponentType.DETECTOR)) == 0.0
        assert interaction_loss(_comp(ComponentType.LASER)) == 0.0


# ── Resolver ──


class TestMirror:

    def test_attenuates_by_reflectivity(self):
        out = resolve_interaction(_comp(ComponentType.MIRROR, 180, reflectivity=0.8), RIGHT, 2.0)
        assert out.intensity == pytest.approx(1.6)
        assert not out.terminated
        assert out.split is None

    def test_reflects_about_rotation_normal(self):
        out = resolve_interaction(_comp(ComponentType.MIRROR, 135), RIGHT, 1.0)
        assert out.direction[0] == pytest.approx(0.0, abs=1e-12)
        assert out.direction[1] == pytest.approx(1.0)

    def test_percentage_reflectivity_clamped(self):
        """A value typed as a percentage never amplifies the beam."""
        out = resolve_interaction(_comp(ComponentType.MIRROR, 180, reflectivity=99.0), RIGHT, 1.0)
        assert out.intensity == pytest.approx(1.0)

    @pytest.mark.parametrize("rotation", [0, 30, 45, 90, 135, 200, 315])
    def test_direction_stays_unit_length(self, rotation):
        d = direction_from_rotation(17)
        out = resolve_interaction(_comp(ComponentType.MIRROR, rotation), d, 1.0)
        assert math.hypot(*out.direction) == pytest.approx(1.0, abs=1e-12)


class TestLens:

    def test_fixed_transmission(self):
        out = resolve_interaction(_comp(ComponentType.LENS, 90), RIGHT, 1.0)
        assert out.intensity == pytest.approx(0.95)
        assert out.direction == RIGHT


class TestBeamsplitter:

    def test_branch_intensities(self):
        comp = _comp(ComponentType.BEAMSPLITTER, 45, reflectivity=0.3, transmitivity=0.6)
        out = resolve_interaction(comp, RIGHT, 2.0)
        assert out.split.intensity == pytest.approx(0.6)
        assert out.intensity == pytest.approx(1.2)
        assert out.split.intensity <= 2.0 and out.intensity <= 2.0

    def test_transmitted_direction_unchanged(self):
        out = resolve_interaction(_comp(ComponentType.BEAMSPLITTER, 45), RIGHT, 1.0)
        assert out.direction == RIGHT

    def test_reflected_direction_right_angle(self):
        out = resolve_interaction(_comp(ComponentType.BEAMSPLITTER, 45), RIGHT, 1.0)
        assert out.split.direction[0] == pytest.approx(0.0, abs=1e-12)
        assert out.split.direction[1] == pytest.approx(-1.0)

    def test_out_of_range_ratios_clamped(self):
        comp = _comp(ComponentType.BEAMSPLITTER, 45, reflectivity=50.0, transmitivity=-1.0)
        out = resolve_interaction(comp, RIGHT, 1.0)
        assert out.split.intensity == pytest.approx(1.0)
        assert out.intensity == 0.0


class TestDetector:

    def test_absorbs(self):
        out = resolve_interaction(_comp(ComponentType.DETECTOR), RIGHT, 0.7)
        assert out.terminated
        assert out.intensity == pytest.approx(0.7)


class TestLaser:

    def test_laser_is_not_a_target(self):
        with pytest.raises(ValueError):
            resolve_interaction(_comp(ComponentType.LASER), RIGHT, 1.0)
