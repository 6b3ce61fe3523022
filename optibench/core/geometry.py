"""2D vector helpers for the ray engine.

Directions are plain ``(x, y)`` tuples of unit length; positions are
Point2D in grid units. Screen convention: +y points down, so a
rotation of 90° points down the canvas.
"""

from __future__ import annotations

import math

from optibench.core.units import deg_to_rad
from optibench.models.components import Point2D

Vector = tuple[float, float]


def direction_from_rotation(rotation_deg: float) -> Vector:
    """Unit vector for a rotation angle (0° = +x)."""
    theta = deg_to_rad(rotation_deg)
    return (math.cos(theta), math.sin(theta))


def dot(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1]


def normalize(v: Vector) -> Vector:
    """Scale to unit length. Zero vectors are returned unchanged."""
    length = math.hypot(v[0], v[1])
    if length < 1e-12:
        return v
    return (v[0] / length, v[1] / length)


def reflect(direction: Vector, normal: Vector) -> Vector:
    """Mirror reflection d - 2(d·n)n.

    Args:
        direction: Incoming unit direction.
        normal: Unit surface normal (either side).
    Returns:
        Outgoing unit direction.
    """
    k = 2.0 * dot(direction, normal)
    return normalize((direction[0] - k * normal[0], direction[1] - k * normal[1]))


def project(origin: Point2D, direction: Vector, target: Point2D) -> tuple[float, float]:
    """Project a point onto a ray.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        target: Point to project.
    Returns:
        (t, perpendicular distance) where t is the signed distance
        along the ray to the foot of the perpendicular.
    """
    dx = target.x - origin.x
    dy = target.y - origin.y
    t = dx * direction[0] + dy * direction[1]
    foot_x = origin.x + direction[0] * t
    foot_y = origin.y + direction[1] * t
    return t, math.hypot(target.x - foot_x, target.y - foot_y)


def advance(origin: Point2D, direction: Vector, length: float) -> Point2D:
    return Point2D(origin.x + direction[0] * length, origin.y + direction[1] * length)


def clamp_to_grid(point: Point2D, grid_width: float, grid_height: float) -> Point2D:
    """Clamp into [0, width-1] × [0, height-1]."""
    return Point2D(
        max(0.0, min(float(grid_width - 1), point.x)),
        max(0.0, min(float(grid_height - 1), point.y)),
    )


def chebyshev_within(p: Point2D, q: Point2D, tolerance: float) -> bool:
    """True if both |dx| and |dy| are below ``tolerance``."""
    return abs(p.x - q.x) < tolerance and abs(p.y - q.y) < tolerance
