"""Optical simulation — orchestrates tracing and loss/interference analysis.

Two operations are exposed to the application:

    trace(setup)     → list[Ray]
    simulate(setup)  → SimulationResult over ``setup.rays``

``run`` chains both for the editor's "Run simulation" action.
Every call is a pure function of the setup snapshot.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable

from optibench.core.analyzer import LossAnalyzer
from optibench.core.ray_tracer import RayTracer
from optibench.models.components import Setup
from optibench.models.simulation import Ray, SimulationResult, TraceConfig

logger = logging.getLogger(__name__)


class OpticalSimulation:
    """Trace + Simulate pipeline.

    Args:
        config: Tracing and analysis parameters.
        ray_tracer: Ray-tracing engine (built from ``config`` if omitted).
        analyzer: Loss analyzer (built from ``config`` if omitted).
    """

    def __init__(
        self,
        config: TraceConfig | None = None,
        ray_tracer: RayTracer | None = None,
        analyzer: LossAnalyzer | None = None,
    ) -> None:
        self._config = config or TraceConfig()
        self._tracer = ray_tracer or RayTracer(self._config)
        self._analyzer = analyzer or LossAnalyzer(
            position_tolerance=self._config.position_match_tolerance,
            detector_tolerance=self._config.detector_tolerance,
        )

    def trace(self, setup: Setup) -> list[Ray]:
        """Trace rays from every laser in the setup.

        Args:
            setup: Components and grid bounds.
        Returns:
            Completed rays (empty if there is no laser).
        """
        _validate_grid(setup)
        return self._tracer.trace(setup)

    def simulate(
        self,
        setup: Setup,
        progress_callback: Callable[[int], None] | None = None,
    ) -> SimulationResult:
        """Analyze the rays already stored on the setup.

        The caller must trace first. With no rays the summary averages
        are NaN.

        Args:
            setup: Setup with populated ``rays``.
            progress_callback: Called with progress 0-100.
        Returns:
            SimulationResult with per-ray reports, interference per
            detector and summary.
        """
        t0 = time.perf_counter()
        logger.info(
            "Simulating optical setup with %d components, %d rays",
            len(setup.components), len(setup.rays),
        )

        reports, patterns, summary = self._analyzer.analyze(setup, progress_callback)

        result = SimulationResult(
            timestamp=datetime.now(timezone.utc).isoformat(),
            ray_reports=reports,
            interference_patterns=patterns,
            summary=summary,
            elapsed_seconds=time.perf_counter() - t0,
        )
        logger.info(
            "Simulation complete: %d rays, avg path %.2f mm, avg loss %.2f%%",
            summary.total_rays,
            summary.average_path_length_mm,
            summary.average_power_loss_pct,
        )
        return result

    def run(
        self,
        setup: Setup,
        progress_callback: Callable[[int], None] | None = None,
    ) -> tuple[list[Ray], SimulationResult]:
        """Trace, then simulate on a copy of the setup carrying the new rays.

        Returns:
            (rays, simulation result). ``setup`` itself is not modified.
        """
        rays = self.trace(setup)
        if progress_callback:
            progress_callback(0)
        result = self.simulate(replace(setup, rays=rays), progress_callback)
        return rays, result


def _validate_grid(setup: Setup) -> None:
    if setup.grid_width <= 0 or setup.grid_height <= 0:
        raise ValueError(
            f"Grid size must be positive, got {setup.grid_width}x{setup.grid_height}"
        )
