"""Optical component data models.

A setup is an ordered list of components placed on a 2D grid. Each
component carries a type tag and an optional-field property block;
only the fields relevant to its type are read.

Positions are real-valued grid units, rotations in degrees
(0 = +x axis). Physical lengths are derived via ``Setup.cell_size``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Optional
import uuid

from optibench.constants import (
    DEFAULT_CELL_SIZE,
    DEFAULT_GRID_HEIGHT,
    DEFAULT_GRID_WIDTH,
)

if TYPE_CHECKING:
    from optibench.models.simulation import Ray


class ComponentType(Enum):
    LASER = "laser"
    MIRROR = "mirror"
    LENS = "lens"
    BEAMSPLITTER = "beamsplitter"
    DETECTOR = "detector"


@dataclass(frozen=True)
class Point2D:
    """2D point in grid coordinates."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class ComponentProperties:
    """Type-specific numeric properties.

    Only relevant fields are used depending on ComponentType.
    ``None`` means "not set"; the engine falls back to its defaults.

    Attributes:
        power: Laser output power [mW, relative].
        wavelength: Laser wavelength [nm].
        reflectivity: Mirror / beamsplitter reflectivity [0-1].
        transmitivity: Beamsplitter transmitivity [0-1].
        focal_length: Lens focal length [mm].
        roc: Mirror radius of curvature [mm].
        sensitivity: Detector sensitivity [0-1].
    """
    power: Optional[float] = None
    wavelength: Optional[float] = None
    reflectivity: Optional[float] = None
    transmitivity: Optional[float] = None
    focal_length: Optional[float] = None
    roc: Optional[float] = None
    sensitivity: Optional[float] = None


@dataclass
class OpticalComponent:
    """Single component on the optical bench.

    Attributes:
        id: Unique component identifier.
        type: Component type tag.
        x: Grid X position.
        y: Grid Y position.
        rotation: Orientation [degree]. Emission direction for lasers,
            surface normal for mirrors and beamsplitters.
        properties: Type-specific properties.
        label: Optional display label.
    """
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    type: ComponentType = ComponentType.MIRROR
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    properties: ComponentProperties = field(default_factory=ComponentProperties)
    label: str | None = None

    @property
    def position(self) -> Point2D:
        return Point2D(self.x, self.y)


@dataclass
class Setup:
    """Snapshot of an optical bench.

    Attributes:
        components: Ordered component list.
        rays: Rays from the last trace (empty until traced).
        grid_width: Grid width [grid units].
        grid_height: Grid height [grid units].
        cell_size: Physical size of one grid unit [mm].
    """
    components: list[OpticalComponent] = field(default_factory=list)
    rays: list[Ray] = field(default_factory=list)
    grid_width: int = DEFAULT_GRID_WIDTH
    grid_height: int = DEFAULT_GRID_HEIGHT
    cell_size: float = DEFAULT_CELL_SIZE

    @property
    def lasers(self) -> list[OpticalComponent]:
        """Light sources in component-list order."""
        return [c for c in self.components if c.type == ComponentType.LASER]

    @property
    def detectors(self) -> list[OpticalComponent]:
        return [c for c in self.components if c.type == ComponentType.DETECTOR]

    def get_component(self, component_id: str) -> OpticalComponent:
        for component in self.components:
            if component.id == component_id:
                return component
        raise KeyError(f"Component not found: {component_id}")


_DEFAULT_PROPERTIES: dict[ComponentType, ComponentProperties] = {
    ComponentType.LASER: ComponentProperties(power=1.0, wavelength=632.8),
    ComponentType.MIRROR: ComponentProperties(reflectivity=0.99, roc=1000.0),
    ComponentType.LENS: ComponentProperties(focal_length=100.0),
    ComponentType.BEAMSPLITTER: ComponentProperties(
        reflectivity=0.5, transmitivity=0.5,
    ),
    ComponentType.DETECTOR: ComponentProperties(sensitivity=1.0),
}

COMPONENT_LABELS: dict[ComponentType, str] = {
    ComponentType.LASER: "Laser",
    ComponentType.MIRROR: "Mirror",
    ComponentType.LENS: "Lens",
    ComponentType.BEAMSPLITTER: "Beam Splitter",
    ComponentType.DETECTOR: "Photodetector",
}


def default_properties(ctype: ComponentType) -> ComponentProperties:
    """Fresh property block a newly placed component starts with."""
    return replace(_DEFAULT_PROPERTIES[ctype])
