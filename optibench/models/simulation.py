"""Ray-trace configuration and result data models.

Path points are grid units; lengths in reports are mm; powers are in
the laser's power units; percentages are 0-100.
"""

from dataclasses import dataclass, field
from enum import Enum

from optibench.constants import (
    DETECTOR_CONVERGENCE_TOLERANCE,
    DIRECTION_KEY_DECIMALS,
    FORWARD_DEAD_ZONE,
    HIT_RADIUS,
    INTENSITY_FLOOR,
    MAX_BOUNCES,
    MAX_BRANCHES,
    POSITION_MATCH_TOLERANCE,
    SPLIT_INTENSITY_FLOOR,
)
from optibench.models.components import ComponentType, Point2D


@dataclass
class TraceConfig:
    """Ray-tracing and analysis parameters.

    Attributes:
        max_bounces: Interaction cap per branch (fresh for every branch).
        forward_dead_zone: Minimum forward projection for a hit [grid].
        hit_radius: Maximum perpendicular miss distance for a hit [grid].
        intensity_floor: Branch stops once intensity drops below this.
        split_intensity_floor: Reflected sub-branch is traced only above this.
        max_branches: Branch cap per trace.
        track_arrival_direction: Key the visited set by component and
            arrival direction instead of component alone.
        direction_key_decimals: Rounding used for the direction key.
        position_match_tolerance: Path point ↔ component match [grid].
        detector_tolerance: Ray end ↔ detector convergence [grid].
    """
    max_bounces: int = MAX_BOUNCES
    forward_dead_zone: float = FORWARD_DEAD_ZONE
    hit_radius: float = HIT_RADIUS
    intensity_floor: float = INTENSITY_FLOOR
    split_intensity_floor: float = SPLIT_INTENSITY_FLOOR
    max_branches: int = MAX_BRANCHES
    track_arrival_direction: bool = True
    direction_key_decimals: int = DIRECTION_KEY_DECIMALS
    position_match_tolerance: float = POSITION_MATCH_TOLERANCE
    detector_tolerance: float = DETECTOR_CONVERGENCE_TOLERANCE


@dataclass(frozen=True)
class Ray:
    """One completed branch of light.

    Attributes:
        id: Deterministic ray identifier (``ray-<laser>[-r<bounce>...]``).
        path: Ordered path points [grid], at least two.
        intensity: Initial power of the branch (not the attenuated value).
        wavelength: Wavelength [nm].
    """
    id: str
    path: tuple[Point2D, ...]
    intensity: float
    wavelength: float

    @property
    def end(self) -> Point2D:
        return self.path[-1]


@dataclass
class Interaction:
    """Power change at one component along a ray.

    Attributes:
        component_id: Component hit.
        component_type: Its type.
        distance_mm: Cumulative path length at the component [mm].
        power_before: Power arriving at the component.
        power_after: Power leaving the component.
        loss_pct: Fractional loss at this component [%].
    """
    component_id: str = ""
    component_type: ComponentType = ComponentType.MIRROR
    distance_mm: float = 0.0
    power_before: float = 0.0
    power_after: float = 0.0
    loss_pct: float = 0.0


@dataclass
class RayReport:
    """Per-ray power-loss report.

    Attributes:
        ray_id: Source ray id.
        wavelength: Wavelength [nm].
        total_path_length_mm: Summed path length [mm].
        final_power: Power after the last interaction.
        power_loss_pct: (1 - final / initial) × 100 [%].
        interactions: Ordered interactions along the path.
    """
    ray_id: str = ""
    wavelength: float = 0.0
    total_path_length_mm: float = 0.0
    final_power: float = 0.0
    power_loss_pct: float = 0.0
    interactions: list[Interaction] = field(default_factory=list)


class InterferenceType(Enum):
    NONE = "none"
    CONSTRUCTIVE = "constructive"
    DESTRUCTIVE = "destructive"


@dataclass
class InterferencePattern:
    """Two-ray interference at a detector.

    ``path_difference_mm`` and ``order_of_interference`` are None when
    fewer than two rays reach the detector.
    """
    detector_id: str = ""
    interference_type: InterferenceType = InterferenceType.NONE
    visibility: float = 0.0
    path_difference_mm: float | None = None
    order_of_interference: float | None = None


@dataclass
class SimulationSummary:
    """Aggregate figures over all ray reports.

    Averages are NaN when no rays were traced.
    """
    total_components: int = 0
    total_rays: int = 0
    average_path_length_mm: float = 0.0
    average_power_loss_pct: float = 0.0


@dataclass
class SimulationResult:
    """Complete simulation result.

    Attributes:
        timestamp: ISO 8601 creation time.
        ray_reports: Per-ray reports, in ray order.
        interference_patterns: One entry per detector, in component order.
        summary: Aggregates.
        elapsed_seconds: Wall-clock time [s].
    """
    timestamp: str = ""
    ray_reports: list[RayReport] = field(default_factory=list)
    interference_patterns: list[InterferencePattern] = field(default_factory=list)
    summary: SimulationSummary = field(default_factory=SimulationSummary)
    elapsed_seconds: float = 0.0
