"""Nearest-component search along a ray.

A component is hit when its centre lies strictly ahead of the ray
(beyond a small dead zone) and within the hit radius of the ray line.
Components are treated as points; there is no surface extent.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass

from optibench.constants import FORWARD_DEAD_ZONE, HIT_RADIUS
from optibench.core.geometry import Vector, advance, clamp_to_grid, project
from optibench.models.components import ComponentType, OpticalComponent, Point2D


@dataclass(frozen=True)
class Hit:
    """Nearest qualifying component.

    Attributes:
        component: The component hit.
        t: Forward distance from the ray origin [grid].
        miss_distance: Perpendicular distance from the ray line [grid].
    """
    component: OpticalComponent
    t: float
    miss_distance: float


def find_nearest_hit(
    position: Point2D,
    direction: Vector,
    components: Sequence[OpticalComponent],
    excluded_ids: Collection[str] = (),
    dead_zone: float = FORWARD_DEAD_ZONE,
    hit_radius: float = HIT_RADIUS,
) -> Hit | None:
    """Find the first component ahead of a ray.

    Lasers are sources only and never returned. Ties on ``t`` keep
    the earlier component in list order.

    Args:
        position: Ray origin [grid].
        direction: Unit ray direction.
        components: Candidate components.
        excluded_ids: Component ids to skip (visited on this branch).
        dead_zone: Minimum forward distance [grid].
        hit_radius: Maximum perpendicular distance [grid].
    Returns:
        Nearest Hit, or None if the ray is unobstructed.
    """
    best: Hit | None = None
    for comp in components:
        if comp.type == ComponentType.LASER or comp.id in excluded_ids:
            continue

        t, miss = project(position, direction, comp.position)
        if t <= dead_zone or miss >= hit_radius:
            continue

        if best is None or t < best.t:
            best = Hit(component=comp, t=t, miss_distance=miss)

    return best


def exit_point(
    position: Point2D,
    direction: Vector,
    grid_width: int,
    grid_height: int,
) -> Point2D:
    """Terminal point of an unobstructed ray.

    The ray travels max(width, height) grid units and is clamped
    into the grid.
    """
    ray_length = max(grid_width, grid_height)
    return clamp_to_grid(
        advance(position, direction, ray_length), grid_width, grid_height,
    )
