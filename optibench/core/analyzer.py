"""Loss & interference analyzer.

Post-processes traced rays:
  1. Per-ray power-loss report: walks the path, converts segment
     lengths to mm via the cell size, and applies the per-type loss
     at every component the path passes through.
  2. Per-detector two-ray interference: path difference, order of
     interference, fringe visibility and a constructive/destructive
     classification from the fractional order.

Only the first two rays converging on a detector are combined.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

import numpy as np

from optibench.constants import (
    CONSTRUCTIVE_HIGH_FRACTION,
    CONSTRUCTIVE_LOW_FRACTION,
    DETECTOR_CONVERGENCE_TOLERANCE,
    POSITION_MATCH_TOLERANCE,
)
from optibench.core.geometry import chebyshev_within
from optibench.core.interactions import interaction_loss
from optibench.core.units import fraction_to_pct, grid_to_mm, loss_pct, nm_to_mm
from optibench.models.components import OpticalComponent, Point2D, Setup
from optibench.models.simulation import (
    Interaction,
    InterferencePattern,
    InterferenceType,
    Ray,
    RayReport,
    SimulationSummary,
)

logger = logging.getLogger(__name__)


def segment_lengths(path: Sequence[Point2D]) -> np.ndarray:
    """Euclidean length of each path segment [grid]."""
    pts = np.array([(p.x, p.y) for p in path], dtype=np.float64)
    if len(pts) < 2:
        return np.zeros(0, dtype=np.float64)
    return np.hypot(*np.diff(pts, axis=0).T)


def classify_order(order: float) -> InterferenceType:
    """Constructive when the fractional order is < 0.25 or > 0.75."""
    frac = order % 1.0
    if frac < CONSTRUCTIVE_LOW_FRACTION or frac > CONSTRUCTIVE_HIGH_FRACTION:
        return InterferenceType.CONSTRUCTIVE
    return InterferenceType.DESTRUCTIVE


def fringe_visibility(i1: float, i2: float) -> float:
    """2√(I1·I2) / (I1 + I2); 0 when there is no power."""
    total = i1 + i2
    if total <= 0.0:
        return 0.0
    return 2.0 * math.sqrt(max(i1 * i2, 0.0)) / total


class LossAnalyzer:
    """Power-loss and interference analysis over traced rays.

    Args:
        position_tolerance: Path point ↔ component match [grid].
        detector_tolerance: Ray end ↔ detector convergence [grid].
    """

    def __init__(
        self,
        position_tolerance: float = POSITION_MATCH_TOLERANCE,
        detector_tolerance: float = DETECTOR_CONVERGENCE_TOLERANCE,
    ) -> None:
        self._position_tol = position_tolerance
        self._detector_tol = detector_tolerance

    # ── Loss ──

    def analyze_ray(self, ray: Ray, setup: Setup) -> RayReport:
        """Build the power-loss report of one ray.

        Args:
            ray: Traced ray (intensity = initial power).
            setup: Setup the ray was traced through.
        Returns:
            RayReport with cumulative distances in mm.
        """
        lengths_mm = grid_to_mm(segment_lengths(ray.path), setup.cell_size)
        cumulative_mm = np.cumsum(lengths_mm)

        power = ray.intensity
        interactions: list[Interaction] = []

        for point, distance_mm in zip(ray.path[1:], cumulative_mm):
            comp = self._component_at(point, setup.components)
            if comp is None:
                continue

            loss = interaction_loss(comp)
            before = power
            power *= 1.0 - loss
            interactions.append(Interaction(
                component_id=comp.id,
                component_type=comp.type,
                distance_mm=float(distance_mm),
                power_before=before,
                power_after=power,
                loss_pct=fraction_to_pct(loss),
            ))

        total_mm = float(cumulative_mm[-1]) if len(cumulative_mm) else 0.0
        return RayReport(
            ray_id=ray.id,
            wavelength=ray.wavelength,
            total_path_length_mm=total_mm,
            final_power=power,
            power_loss_pct=loss_pct(ray.intensity, power),
            interactions=interactions,
        )

    def _component_at(
        self,
        point: Point2D,
        components: Sequence[OpticalComponent],
    ) -> OpticalComponent | None:
        for comp in components:
            if chebyshev_within(comp.position, point, self._position_tol):
                return comp
        return None

    # ── Interference ──

    def converging_rays(
        self,
        detector: OpticalComponent,
        rays: Sequence[Ray],
    ) -> list[int]:
        """Indices of rays whose final point lies on the detector."""
        return [
            i for i, ray in enumerate(rays)
            if chebyshev_within(ray.end, detector.position, self._detector_tol)
        ]

    def analyze_detector(
        self,
        detector: OpticalComponent,
        rays: Sequence[Ray],
        reports: Sequence[RayReport],
    ) -> InterferencePattern:
        """Two-ray interference at a detector.

        Args:
            detector: Detector component.
            rays: Traced rays.
            reports: RayReport per ray (same order as ``rays``).
        Returns:
            InterferencePattern; type NONE if fewer than two rays
            converge or the pair carries no power.
        """
        hits = self.converging_rays(detector, rays)
        if len(hits) < 2:
            return InterferencePattern(detector_id=detector.id)

        first, second = reports[hits[0]], reports[hits[1]]
        path_diff_mm = abs(first.total_path_length_mm - second.total_path_length_mm)
        wavelength_mm = nm_to_mm(first.wavelength)
        order = path_diff_mm / wavelength_mm if wavelength_mm > 0 else 0.0
        visibility = fringe_visibility(first.final_power, second.final_power)

        if first.final_power + second.final_power <= 0.0:
            itype = InterferenceType.NONE
        else:
            itype = classify_order(order)

        if len(hits) > 2:
            logger.debug(
                "%d rays converge on %s, combining the first two only",
                len(hits), detector.id,
            )

        return InterferencePattern(
            detector_id=detector.id,
            interference_type=itype,
            visibility=visibility,
            path_difference_mm=path_diff_mm,
            order_of_interference=order,
        )

    # ── Aggregate ──

    def analyze(
        self,
        setup: Setup,
        progress_callback: Callable[[int], None] | None = None,
    ) -> tuple[list[RayReport], list[InterferencePattern], SimulationSummary]:
        """Analyze every ray stored on the setup.

        Args:
            setup: Setup with ``rays`` already traced.
            progress_callback: Called with progress 0-100.
        Returns:
            (ray reports, interference patterns per detector, summary).
        """
        rays = setup.rays
        reports: list[RayReport] = []
        for i, ray in enumerate(rays):
            reports.append(self.analyze_ray(ray, setup))
            if progress_callback:
                progress_callback(int((i + 1) / len(rays) * 100))

        patterns = [
            self.analyze_detector(det, rays, reports) for det in setup.detectors
        ]
        return reports, patterns, self.summarize(setup, reports)

    def summarize(
        self,
        setup: Setup,
        reports: Sequence[RayReport],
    ) -> SimulationSummary:
        """Aggregate figures; averages are NaN when there are no reports."""
        if reports:
            avg_length = float(np.mean([r.total_path_length_mm for r in reports]))
            avg_loss = float(np.mean([r.power_loss_pct for r in reports]))
        else:
            logger.warning("No rays to analyze, averages are undefined")
            avg_length = avg_loss = math.nan

        return SimulationSummary(
            total_components=len(setup.components),
            total_rays=len(setup.rays),
            average_path_length_mm=avg_length,
            average_power_loss_pct=avg_loss,
        )
