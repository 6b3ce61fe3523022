"""Setup template factories for standard optical layouts.

Each factory returns a fully configured Setup on the default 40×25
grid with default component properties.
"""

from optibench.models.components import (
    ComponentType,
    OpticalComponent,
    Setup,
    default_properties,
)


def _component(
    cid: str, ctype: ComponentType, x: float, y: float, rotation: float,
) -> OpticalComponent:
    return OpticalComponent(
        id=cid, type=ctype, x=x, y=y, rotation=rotation,
        properties=default_properties(ctype),
    )


def create_michelson_template() -> Setup:
    """Michelson interferometer.

    Layout::

        mirror-1 (15,5)
            |
        laser (8,12) → splitter (15,12, 45°) → mirror-2 (22,12)
            |
        detector (15,19)

    Both arms are 7 units long; the two returning beams recombine at
    the splitter and meet on the detector.

    Returns:
        Pre-configured Michelson Setup.
    """
    return Setup(components=[
        _component("laser-1", ComponentType.LASER, 8, 12, 0),
        _component("splitter-1", ComponentType.BEAMSPLITTER, 15, 12, 45),
        _component("mirror-1", ComponentType.MIRROR, 15, 5, 90),
        _component("mirror-2", ComponentType.MIRROR, 22, 12, 180),
        _component("detector-1", ComponentType.DETECTOR, 15, 19, 270),
    ])


def create_periscope_template() -> Setup:
    """Two-mirror periscope.

    The laser fires right, the first mirror (normal 135°) turns the
    beam down, the second (normal 315°) turns it right again onto the
    detector.

    Returns:
        Pre-configured periscope Setup.
    """
    return Setup(components=[
        _component("laser-1", ComponentType.LASER, 5, 5, 0),
        _component("mirror-1", ComponentType.MIRROR, 15, 5, 135),
        _component("mirror-2", ComponentType.MIRROR, 15, 18, 315),
        _component("detector-1", ComponentType.DETECTOR, 30, 18, 180),
    ])


def create_mach_zehnder_template() -> Setup:
    """Mach–Zehnder interferometer.

    Layout::

        laser (5,6) → splitter-1 (12,6) ──────→ mirror-1 (26,6)
                         |                          |
                      mirror-2 (12,18) ──────→ splitter-2 (26,18) → detector-1 (34,18)
                                                    |
                                                detector-2 (26,23)

    Returns:
        Pre-configured Mach–Zehnder Setup.
    """
    return Setup(components=[
        _component("laser-1", ComponentType.LASER, 5, 6, 0),
        _component("splitter-1", ComponentType.BEAMSPLITTER, 12, 6, 315),
        _component("mirror-1", ComponentType.MIRROR, 26, 6, 315),
        _component("mirror-2", ComponentType.MIRROR, 12, 18, 315),
        _component("splitter-2", ComponentType.BEAMSPLITTER, 26, 18, 315),
        _component("detector-1", ComponentType.DETECTOR, 34, 18, 180),
        _component("detector-2", ComponentType.DETECTOR, 26, 23, 270),
    ])


_TEMPLATES = {
    "michelson": create_michelson_template,
    "periscope": create_periscope_template,
    "mach-zehnder": create_mach_zehnder_template,
}

TEMPLATE_NAMES: tuple[str, ...] = tuple(_TEMPLATES)


def create_template(name: str) -> Setup:
    """Factory: create a template setup by name.

    Args:
        name: One of ``TEMPLATE_NAMES``.

    Returns:
        New Setup with default component properties.

    Raises:
        KeyError: If name is not a known template.
    """
    return _TEMPLATES[name]()
