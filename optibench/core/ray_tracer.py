"""Geometric ray-tracing engine for the optical bench.

Propagates light from every laser through the component layout,
bounce by bounce, splitting at beamsplitters. Each completed branch
becomes one Ray.

All computations in grid units; no physical lengths here.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from optibench.core.geometry import Vector, direction_from_rotation
from optibench.core.interactions import (
    laser_power,
    laser_wavelength,
    resolve_interaction,
)
from optibench.core.intersection import exit_point, find_nearest_hit
from optibench.models.components import OpticalComponent, Point2D, Setup
from optibench.models.simulation import Ray, TraceConfig

logger = logging.getLogger(__name__)

# Visited-set entry: (component id, rounded arrival direction or None)
VisitKey = tuple[str, tuple[float, float] | None]


# ── Data Structures ──


@dataclass(frozen=True)
class Branch:
    """Pending branch in the work queue.

    Attributes:
        ray_id: Identifier the completed Ray will carry.
        position: Start point [grid].
        direction: Unit start direction.
        intensity: Start intensity.
        wavelength: Wavelength [nm].
        visited: Components already interacted with on this branch.
    """
    ray_id: str
    position: Point2D
    direction: Vector
    intensity: float
    wavelength: float
    visited: frozenset[VisitKey] = frozenset()


# ── RayTracer ──


class RayTracer:
    """Bounce-by-bounce ray propagation with beam splitting.

    Branches are processed from a FIFO queue, so rays come out grouped
    by laser (component-list order) and then in branch-creation order.

    Args:
        config: Tracing parameters.
    """

    def __init__(self, config: TraceConfig | None = None) -> None:
        self._config = config or TraceConfig()

    @property
    def config(self) -> TraceConfig:
        return self._config

    def trace(self, setup: Setup) -> list[Ray]:
        """Trace every laser in a setup.

        Args:
            setup: Setup snapshot (not modified).
        Returns:
            Completed rays; empty if the setup has no laser.
        """
        lasers = setup.lasers
        if not lasers:
            logger.info("No laser in setup, nothing to trace")
            return []

        rays: list[Ray] = []
        for laser in lasers:
            rays.extend(self.trace_laser(laser, setup))

        logger.debug("Traced %d rays from %d lasers", len(rays), len(lasers))
        return rays

    def trace_laser(self, laser: OpticalComponent, setup: Setup) -> list[Ray]:
        """Trace the full branch tree of a single laser.

        Args:
            laser: Source component.
            setup: Setup snapshot.
        Returns:
            Completed rays in branch-creation order.
        """
        root = Branch(
            ray_id=f"ray-{laser.id}",
            position=laser.position,
            direction=direction_from_rotation(laser.rotation),
            intensity=laser_power(laser),
            wavelength=laser_wavelength(laser),
        )

        queue: deque[Branch] = deque([root])
        created = 1
        capped = False
        rays: list[Ray] = []

        while queue:
            branch = queue.popleft()
            ray, children = self._trace_branch(branch, setup)

            for child in children:
                if created >= self._config.max_branches:
                    capped = True
                    break
                queue.append(child)
                created += 1

            if ray is not None:
                rays.append(ray)

        if capped:
            logger.warning(
                "Branch cap of %d reached for laser %s, extra splits dropped",
                self._config.max_branches, laser.id,
            )
        return rays

    def _trace_branch(
        self,
        branch: Branch,
        setup: Setup,
    ) -> tuple[Ray | None, list[Branch]]:
        """Advance one branch until it terminates.

        Terminal states: unobstructed exit, detector absorption,
        intensity below the floor, or the bounce cap.

        Returns:
            (completed ray or None, reflected sub-branches spawned).
        """
        cfg = self._config
        path: list[Point2D] = [branch.position]
        position = branch.position
        direction = branch.direction
        intensity = branch.intensity
        visited = set(branch.visited)
        children: list[Branch] = []

        for bounce in range(cfg.max_bounces):
            hit = find_nearest_hit(
                position,
                direction,
                setup.components,
                excluded_ids=self._excluded_ids(visited, direction),
                dead_zone=cfg.forward_dead_zone,
                hit_radius=cfg.hit_radius,
            )

            if hit is None:
                path.append(exit_point(
                    position, direction, setup.grid_width, setup.grid_height,
                ))
                break

            comp = hit.component
            path.append(comp.position)
            visited.add(self._visit_key(comp.id, direction))

            outcome = resolve_interaction(comp, direction, intensity)
            if outcome.terminated:
                break

            split = outcome.split
            if split is not None and split.intensity > cfg.split_intensity_floor:
                children.append(Branch(
                    ray_id=f"{branch.ray_id}-r{bounce}",
                    position=comp.position,
                    direction=split.direction,
                    intensity=split.intensity,
                    wavelength=branch.wavelength,
                    visited=frozenset(visited),
                ))

            position = comp.position
            direction = outcome.direction
            intensity = outcome.intensity

            if intensity < cfg.intensity_floor:
                logger.debug(
                    "Branch %s dropped below intensity floor at %s",
                    branch.ray_id, comp.id,
                )
                break
        else:
            logger.debug(
                "Branch %s reached the %d-bounce cap", branch.ray_id, cfg.max_bounces,
            )

        if len(path) < 2:
            return None, children

        ray = Ray(
            id=branch.ray_id,
            path=tuple(path),
            intensity=branch.intensity,
            wavelength=branch.wavelength,
        )
        return ray, children

    # ── Visited set ──

    def _visit_key(self, component_id: str, direction: Vector) -> VisitKey:
        if not self._config.track_arrival_direction:
            return (component_id, None)
        return (component_id, self._direction_key(direction))

    def _direction_key(self, direction: Vector) -> tuple[float, float]:
        # + 0.0 folds -0.0 into 0.0
        n = self._config.direction_key_decimals
        return (round(direction[0], n) + 0.0, round(direction[1], n) + 0.0)

    def _excluded_ids(self, visited: set[VisitKey], direction: Vector) -> set[str]:
        """Component ids the branch may not hit travelling along ``direction``."""
        if not self._config.track_arrival_direction:
            return {cid for cid, _ in visited}
        key = self._direction_key(direction)
        return {cid for cid, dkey in visited if dkey == key}
