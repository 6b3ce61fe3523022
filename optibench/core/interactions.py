"""Interaction resolver — per-component effect on a ray.

Dispatches on ComponentType:

    mirror        intensity × R, direction reflected about the rotation normal
    lens          intensity × 0.95, direction unchanged
    beamsplitter  reflected sub-beam I × R, transmitted beam I × T
    detector      absorbs the ray (branch terminates)
    laser         source only, never resolved

Missing properties fall back to defaults; fractions outside [0, 1]
are clamped before use.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from optibench.constants import (
    DEFAULT_LASER_POWER,
    DEFAULT_MIRROR_REFLECTIVITY,
    DEFAULT_SPLITTER_REFLECTIVITY,
    DEFAULT_SPLITTER_TRANSMITIVITY,
    DEFAULT_WAVELENGTH_NM,
    LENS_TRANSMISSION,
)
from optibench.core.geometry import Vector, direction_from_rotation, reflect
from optibench.models.components import ComponentType, OpticalComponent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitBeam:
    """Reflected sub-beam spawned by a beamsplitter."""
    direction: Vector
    intensity: float


@dataclass(frozen=True)
class InteractionOutcome:
    """Effect of one component on the travelling beam.

    Attributes:
        intensity: Intensity of the continuing beam.
        direction: Direction of the continuing beam.
        terminated: True if the beam was absorbed.
        split: Reflected sub-beam (beamsplitters only).
    """
    intensity: float
    direction: Vector
    terminated: bool = False
    split: SplitBeam | None = None


# ── Property access ──


def clamp_fraction(value: float | None, default: float, name: str = "fraction") -> float:
    """Resolve an optional 0-1 property.

    None (or a non-finite value) yields ``default``; anything outside
    [0, 1] is clamped.
    """
    if value is None or not math.isfinite(value):
        return default
    if value < 0.0 or value > 1.0:
        clamped = min(max(value, 0.0), 1.0)
        logger.warning("%s %.4g out of range, clamped to %.4g", name, value, clamped)
        return clamped
    return float(value)


def mirror_reflectivity(comp: OpticalComponent) -> float:
    return clamp_fraction(
        comp.properties.reflectivity, DEFAULT_MIRROR_REFLECTIVITY, "reflectivity",
    )


def splitter_ratios(comp: OpticalComponent) -> tuple[float, float]:
    """(reflectivity, transmitivity) of a beamsplitter."""
    props = comp.properties
    r = clamp_fraction(props.reflectivity, DEFAULT_SPLITTER_REFLECTIVITY, "reflectivity")
    t = clamp_fraction(props.transmitivity, DEFAULT_SPLITTER_TRANSMITIVITY, "transmitivity")
    return r, t


def laser_power(comp: OpticalComponent) -> float:
    power = comp.properties.power
    if power is None or not math.isfinite(power):
        return DEFAULT_LASER_POWER
    return max(float(power), 0.0)


def laser_wavelength(comp: OpticalComponent) -> float:
    """Wavelength [nm]; non-positive values fall back to the default."""
    wavelength = comp.properties.wavelength
    if wavelength is None or not math.isfinite(wavelength) or wavelength <= 0:
        return DEFAULT_WAVELENGTH_NM
    return float(wavelength)


def interaction_loss(comp: OpticalComponent) -> float:
    """Fractional power loss recorded for a component on a ray path.

    Beamsplitters count the reflected share as the loss of the beam
    that arrives at them.
    """
    match comp.type:
        case ComponentType.MIRROR:
            return 1.0 - mirror_reflectivity(comp)
        case ComponentType.BEAMSPLITTER:
            return 1.0 - splitter_ratios(comp)[0]
        case ComponentType.LENS:
            return 1.0 - LENS_TRANSMISSION
        case ComponentType.LASER | ComponentType.DETECTOR:
            return 0.0


# ── Resolver ──


def resolve_interaction(
    comp: OpticalComponent,
    direction: Vector,
    intensity: float,
) -> InteractionOutcome:
    """Apply a component's physical effect to an incoming beam.

    Args:
        comp: Component hit.
        direction: Incoming unit direction.
        intensity: Incoming intensity.
    Returns:
        InteractionOutcome for the continuing beam.
    Raises:
        ValueError: If ``comp`` is a laser.
    """
    match comp.type:
        case ComponentType.MIRROR:
            normal = direction_from_rotation(comp.rotation)
            return InteractionOutcome(
                intensity=intensity * mirror_reflectivity(comp),
                direction=reflect(direction, normal),
            )

        case ComponentType.LENS:
            return InteractionOutcome(
                intensity=intensity * LENS_TRANSMISSION,
                direction=direction,
            )

        case ComponentType.BEAMSPLITTER:
            r, t = splitter_ratios(comp)
            normal = direction_from_rotation(comp.rotation)
            return InteractionOutcome(
                intensity=intensity * t,
                direction=direction,
                split=SplitBeam(
                    direction=reflect(direction, normal),
                    intensity=intensity * r,
                ),
            )

        case ComponentType.DETECTOR:
            return InteractionOutcome(
                intensity=intensity, direction=direction, terminated=True,
            )

        case ComponentType.LASER:
            raise ValueError(f"Laser {comp.id!r} is a source, not a hit target")
