"""Setup generator — natural-language description → component list.

The language-model call itself is an injected client::

    client(system_prompt: str, description: str) -> str

This module owns everything around it: the prompt, stripping the
Markdown fences models like to add, JSON parsing, and validation of
every generated seed as untrusted input before it reaches the tracer.
"""

from __future__ import annotations

import json
import logging
import math
import re
import uuid
from typing import Any, Callable

from optibench.constants import DEFAULT_GRID_HEIGHT, DEFAULT_GRID_WIDTH
from optibench.core.interactions import clamp_fraction
from optibench.core.serializers import PROPERTY_KEYS
from optibench.core.units import normalize_deg
from optibench.models.components import (
    ComponentType,
    OpticalComponent,
    default_properties,
)

logger = logging.getLogger(__name__)

GenerationClient = Callable[[str, str], str]

# Wire key aliases seen in model output → canonical wire key
_PROPERTY_ALIASES: dict[str, str] = {
    "transmissivity": "transmitivity",
    "transmittance": "transmitivity",
    "focal_length": "focalLength",
}

_FRACTION_FIELDS = ("reflectivity", "transmitivity", "sensitivity")

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?")

SYSTEM_PROMPT = f"""You design 2D optical bench layouts on a \
{DEFAULT_GRID_WIDTH}x{DEFAULT_GRID_HEIGHT} grid.

Coordinates: x in 0-{DEFAULT_GRID_WIDTH - 1}, y in 0-{DEFAULT_GRID_HEIGHT - 1}, \
y grows downward.
Rotation (degrees): 0 = right, 90 = down, 180 = left, 270 = up.
- laser: emits along its rotation.
- mirror: rotation is the surface normal; a mirror whose normal points \
back along the beam retro-reflects it.
- beamsplitter: rotation is the surface normal; at 45 degrees it sends half \
the beam straight through and reflects half at 90 degrees.
- lens: attenuates slightly, does not bend the beam.
- detector: absorbs the beam.

Example Michelson interferometer: laser (8,12,0), beamsplitter (15,12,45), \
mirror (15,5,90), mirror (22,12,180), detector (15,19,270).

Keep components 5-8 units apart on straight or right-angle paths.
Reply with JSON only, no Markdown:
{{"components": [{{"type": "laser|mirror|lens|beamsplitter|detector", \
"x": 0, "y": 0, "rotation": 0, "properties": {{"power": 1, "wavelength": 632.8, \
"reflectivity": 0.99, "roc": 1000, "focalLength": 100, "transmitivity": 0.5, \
"sensitivity": 1}}}}]}}"""


def strip_code_fences(content: str) -> str:
    """Remove Markdown code fences around a JSON payload."""
    return _FENCE_RE.sub("", content).replace("```", "").strip()


def parse_generated_content(content: str) -> list[dict[str, Any]]:
    """Parse raw model output into a list of component seeds.

    Raises:
        ValueError: Output is not JSON or has no ``components`` list.
    """
    try:
        data = json.loads(strip_code_fences(content))
    except json.JSONDecodeError as e:
        raise ValueError(f"Generated setup is not valid JSON: {e}") from e

    seeds = data.get("components") if isinstance(data, dict) else None
    if not isinstance(seeds, list):
        raise ValueError("Generated setup has no 'components' list")
    return seeds


def _finite(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def seed_to_component(
    seed: dict[str, Any],
    index: int,
    grid_width: int = DEFAULT_GRID_WIDTH,
    grid_height: int = DEFAULT_GRID_HEIGHT,
) -> OpticalComponent | None:
    """Validate one generated seed.

    Coordinates are rounded and clamped into the grid, rotation is
    wrapped into [0, 360), properties are merged over the type defaults
    with unknown keys dropped and fractions clamped into [0, 1].

    Returns:
        OpticalComponent, or None if the seed is unusable.
    """
    if not isinstance(seed, dict):
        logger.warning("Seed %d is not an object, skipped", index)
        return None

    try:
        ctype = ComponentType(seed.get("type"))
    except ValueError:
        logger.warning("Seed %d has unknown type %r, skipped", index, seed.get("type"))
        return None

    x, y = _finite(seed.get("x")), _finite(seed.get("y"))
    if x is None or y is None:
        logger.warning("Seed %d (%s) has no usable position, skipped", index, ctype.value)
        return None

    rotation = _finite(seed.get("rotation"))
    props = default_properties(ctype)
    raw_props = seed.get("properties")
    if isinstance(raw_props, dict):
        wire_to_field = {key: name for name, key in PROPERTY_KEYS.items()}
        for key, value in raw_props.items():
            key = _PROPERTY_ALIASES.get(key, key)
            field_name = wire_to_field.get(key)
            number = _finite(value)
            if field_name is None or number is None:
                logger.info("Seed %d: property %r dropped", index, key)
                continue
            if field_name in _FRACTION_FIELDS:
                number = clamp_fraction(number, number, field_name)
            setattr(props, field_name, number)

    return OpticalComponent(
        id=f"{ctype.value}-{uuid.uuid4().hex[:8]}-{index}",
        type=ctype,
        x=float(min(max(round(x), 0), grid_width - 1)),
        y=float(min(max(round(y), 0), grid_height - 1)),
        rotation=normalize_deg(rotation) if rotation is not None else 0.0,
        properties=props,
    )


class SetupGenerator:
    """Generates optical setups from free-text descriptions.

    Args:
        client: Language-model call ``(system_prompt, description) -> text``.
        grid_width: Grid width seeds are clamped into.
        grid_height: Grid height seeds are clamped into.
    """

    def __init__(
        self,
        client: GenerationClient,
        grid_width: int = DEFAULT_GRID_WIDTH,
        grid_height: int = DEFAULT_GRID_HEIGHT,
    ) -> None:
        self._client = client
        self._grid_width = grid_width
        self._grid_height = grid_height

    def generate(self, description: str) -> list[OpticalComponent]:
        """Generate a component list for a description.

        Args:
            description: What the user wants to build.
        Returns:
            Validated components, ready for tracing.
        Raises:
            ValueError: Empty description or unusable model output.
        """
        if not description or not description.strip():
            raise ValueError("Description must not be empty")

        logger.info("Generating optical setup for: %s", description)
        content = self._client(SYSTEM_PROMPT, description)
        seeds = parse_generated_content(content)

        components = []
        for i, seed in enumerate(seeds):
            comp = seed_to_component(seed, i, self._grid_width, self._grid_height)
            if comp is not None:
                components.append(comp)

        logger.info("Generated %d of %d components", len(components), len(seeds))
        return components
