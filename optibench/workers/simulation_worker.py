"""Simulation worker — background thread for trace + simulate.

Runs OpticalSimulation.run off the UI thread so large branching
layouts do not block the editor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from PyQt6.QtCore import QThread, pyqtSignal

if TYPE_CHECKING:
    from optibench.core.simulation import OpticalSimulation
    from optibench.models.components import Setup


class SimulationWorker(QThread):
    """Background thread for optical simulation.

    Emits progress (0-100), rays_ready with the traced rays,
    result_ready with the SimulationResult, error_occurred on failure.

    Usage:
        worker = SimulationWorker(simulation)
        worker.setup(optical_setup)
        worker.rays_ready.connect(on_rays)
        worker.result_ready.connect(on_result)
        worker.error_occurred.connect(on_error)
        worker.start()
    """

    progress = pyqtSignal(int)            # 0-100%
    rays_ready = pyqtSignal(object)       # list[Ray]
    result_ready = pyqtSignal(object)     # SimulationResult
    error_occurred = pyqtSignal(str)

    def __init__(
        self,
        simulation: OpticalSimulation,
        parent=None,
    ):
        super().__init__(parent)
        self._simulation = simulation
        self._setup: Setup | None = None
        self._cancelled = False

    def setup(self, optical_setup: Setup) -> None:
        """Set the snapshot to simulate. Must be called before start()."""
        self._setup = optical_setup
        self._cancelled = False

    def cancel(self) -> None:
        """Request cancellation of the running simulation."""
        self._cancelled = True

    def run(self) -> None:
        """Execute trace + simulate in background thread."""
        try:
            if self._setup is None:
                self.error_occurred.emit("No optical setup configured.")
                return
            if not self._setup.lasers:
                self.error_occurred.emit("Add at least one laser to trace rays.")
                return

            def _progress_callback(pct: int) -> None:
                if self._cancelled:
                    raise InterruptedError("Simulation cancelled.")
                self.progress.emit(pct)

            rays, result = self._simulation.run(
                self._setup, progress_callback=_progress_callback,
            )

            if self._cancelled:
                return

            self.rays_ready.emit(rays)
            self.result_ready.emit(result)

        except InterruptedError:
            pass  # cancelled silently
        except Exception as e:
            self.error_occurred.emit(str(e))
