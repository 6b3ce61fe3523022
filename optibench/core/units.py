"""Unit conversion module — single conversion point between grid and physical units.

All unit conversions MUST go through this module.

Engine units:
    Position : grid unit (real-valued)
    Angle    : radian
    Power    : laser power units (relative)

Report units:
    Length     : mm (grid unit × cell size)
    Wavelength : nm at input, mm for interference orders
"""

import math
from typing import NewType

# Type aliases — zero runtime cost, visible in IDE for unit-error detection
Mm = NewType('Mm', float)
Radian = NewType('Radian', float)


# ---------------------------------------------------------------------------
# Length conversions
# ---------------------------------------------------------------------------

def grid_to_mm(grid: float, cell_size_mm: float) -> Mm:
    """Grid units → mm."""
    return Mm(grid * cell_size_mm)


def nm_to_mm(nm: float) -> Mm:
    """Wavelength nm → mm."""
    return Mm(nm * 1e-6)


# ---------------------------------------------------------------------------
# Angle conversions
# ---------------------------------------------------------------------------

def deg_to_rad(deg: float) -> Radian:
    """Degree → Radian."""
    return Radian(deg * (math.pi / 180.0))


def normalize_deg(deg: float) -> float:
    """Wrap an angle into [0, 360) degrees."""
    return deg % 360.0


# ---------------------------------------------------------------------------
# Power conversions
# ---------------------------------------------------------------------------

def fraction_to_pct(fraction: float) -> float:
    """Fraction (0–1) → percent (0–100)."""
    return fraction * 100.0


def loss_pct(initial: float, final: float) -> float:
    """Relative power loss [%]; 0 when there was no initial power."""
    if initial <= 0.0:
        return 0.0
    return (1.0 - final / initial) * 100.0
