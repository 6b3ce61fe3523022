"""Serialization utilities — dataclass ↔ JSON-safe dict conversion.

Wire format is the camelCase layout the editor and the setup
generator exchange (``gridSize``, ``cellSize``, ``rayTraceResults``...).
Enums are written as their string values; non-finite floats as null.
"""

from __future__ import annotations

import dataclasses
import math
from enum import Enum
from typing import Any

from optibench.constants import (
    DEFAULT_CELL_SIZE,
    DEFAULT_GRID_HEIGHT,
    DEFAULT_GRID_WIDTH,
)
from optibench.models.components import (
    ComponentProperties,
    ComponentType,
    OpticalComponent,
    Point2D,
    Setup,
)
from optibench.models.simulation import (
    Interaction,
    InterferencePattern,
    InterferenceType,
    Ray,
    RayReport,
    SimulationResult,
)

# ComponentProperties field → wire key
PROPERTY_KEYS: dict[str, str] = {
    "power": "power",
    "wavelength": "wavelength",
    "reflectivity": "reflectivity",
    "transmitivity": "transmitivity",
    "focal_length": "focalLength",
    "roc": "roc",
    "sensitivity": "sensitivity",
}


# =====================================================================
# Generic helpers
# =====================================================================


def _serialize_value(val: Any) -> Any:
    """Convert a value to a JSON-safe type."""
    if val is None:
        return None
    if isinstance(val, Enum):
        return val.value
    if isinstance(val, float) and not math.isfinite(val):
        return None
    if isinstance(val, Point2D):
        return {"x": val.x, "y": val.y}
    if isinstance(val, (list, tuple)):
        return [_serialize_value(v) for v in val]
    if isinstance(val, (int, float, str, bool)):
        return val
    return str(val)


# =====================================================================
# Setup serialization
# =====================================================================


def properties_to_dict(props: ComponentProperties) -> dict:
    """Serialize set properties only."""
    return {
        PROPERTY_KEYS[f.name]: _serialize_value(getattr(props, f.name))
        for f in dataclasses.fields(props)
        if getattr(props, f.name) is not None
    }


def dict_to_properties(d: dict | None) -> ComponentProperties:
    """Deserialize a wire property block; unknown keys are ignored."""
    if not d:
        return ComponentProperties()
    values = {
        field_name: float(d[key])
        for field_name, key in PROPERTY_KEYS.items()
        if d.get(key) is not None
    }
    return ComponentProperties(**values)


def component_to_dict(comp: OpticalComponent) -> dict:
    d = {
        "id": comp.id,
        "type": comp.type.value,
        "x": comp.x,
        "y": comp.y,
        "rotation": comp.rotation,
        "properties": properties_to_dict(comp.properties),
    }
    if comp.label is not None:
        d["label"] = comp.label
    return d


def dict_to_component(d: dict) -> OpticalComponent:
    """Deserialize a component.

    Raises:
        ValueError: Unknown component type.
        KeyError: Missing ``type``.
    """
    return OpticalComponent(
        id=str(d.get("id", "")),
        type=ComponentType(d["type"]),
        x=float(d.get("x", 0.0)),
        y=float(d.get("y", 0.0)),
        rotation=float(d.get("rotation", 0.0)),
        properties=dict_to_properties(d.get("properties")),
        label=d.get("label"),
    )


def ray_to_dict(ray: Ray) -> dict:
    return {
        "id": ray.id,
        "path": _serialize_value(ray.path),
        "intensity": ray.intensity,
        "wavelength": ray.wavelength,
    }


def dict_to_ray(d: dict) -> Ray:
    return Ray(
        id=str(d.get("id", "")),
        path=tuple(Point2D(float(p["x"]), float(p["y"])) for p in d.get("path", [])),
        intensity=float(d.get("intensity", 0.0)),
        wavelength=float(d.get("wavelength", 0.0)),
    )


def setup_to_dict(setup: Setup) -> dict:
    """Serialize a Setup to the wire layout."""
    return {
        "components": [component_to_dict(c) for c in setup.components],
        "rays": [ray_to_dict(r) for r in setup.rays],
        "gridSize": {"width": setup.grid_width, "height": setup.grid_height},
        "cellSize": setup.cell_size,
    }


def dict_to_setup(data: dict) -> Setup:
    """Deserialize a Setup; missing grid fields take canvas defaults."""
    grid = data.get("gridSize") or {}
    return Setup(
        components=[dict_to_component(c) for c in data.get("components", [])],
        rays=[dict_to_ray(r) for r in data.get("rays", [])],
        grid_width=int(grid.get("width", DEFAULT_GRID_WIDTH)),
        grid_height=int(grid.get("height", DEFAULT_GRID_HEIGHT)),
        cell_size=float(data.get("cellSize", DEFAULT_CELL_SIZE)),
    )


# =====================================================================
# Simulation serialization
# =====================================================================


def _interaction_to_dict(ix: Interaction) -> dict:
    return {
        "componentId": ix.component_id,
        "componentType": ix.component_type.value,
        "distance": _serialize_value(ix.distance_mm),
        "powerBefore": _serialize_value(ix.power_before),
        "powerAfter": _serialize_value(ix.power_after),
        "loss": _serialize_value(ix.loss_pct),
    }


def ray_report_to_dict(report: RayReport) -> dict:
    return {
        "rayId": report.ray_id,
        "wavelength": report.wavelength,
        "totalPathLength": _serialize_value(report.total_path_length_mm),
        "finalPower": _serialize_value(report.final_power),
        "powerLossPercent": _serialize_value(report.power_loss_pct),
        "interactions": [_interaction_to_dict(ix) for ix in report.interactions],
    }


def interference_to_dict(pattern: InterferencePattern) -> dict:
    """Serialize one detector entry.

    Detectors without a converging pair use the short
    ``{"interferencePattern": "none"}`` form.
    """
    if pattern.path_difference_mm is None:
        return {
            "detectorId": pattern.detector_id,
            "interferencePattern": InterferenceType.NONE.value,
            "visibility": 0,
        }
    return {
        "detectorId": pattern.detector_id,
        "pathDifference": _serialize_value(pattern.path_difference_mm),
        "orderOfInterference": _serialize_value(pattern.order_of_interference),
        "visibility": _serialize_value(pattern.visibility),
        "interferenceType": pattern.interference_type.value,
    }


def simulation_result_to_dict(result: SimulationResult) -> dict:
    """Serialize a SimulationResult to the wire layout."""
    s = result.summary
    return {
        "timestamp": result.timestamp,
        "rayTraceResults": [ray_report_to_dict(r) for r in result.ray_reports],
        "interferencePatterns": [
            interference_to_dict(p) for p in result.interference_patterns
        ],
        "summary": {
            "totalComponents": s.total_components,
            "totalRays": s.total_rays,
            "averagePathLength": _serialize_value(s.average_path_length_mm),
            "averagePowerLoss": _serialize_value(s.average_power_loss_pct),
        },
        "elapsedSeconds": result.elapsed_seconds,
    }
