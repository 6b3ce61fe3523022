"""Tests for the background simulation worker.

``run()`` is called directly on the test thread; signals emitted from
it are delivered synchronously to connected slots.
"""

import sys

import pytest

pytest.importorskip("PyQt6")

from PyQt6.QtCore import QCoreApplication  # noqa: E402

from optibench.core.simulation import OpticalSimulation  # noqa: E402
from optibench.core.templates import create_michelson_template  # noqa: E402
from optibench.models.components import Setup  # noqa: E402
from optibench.workers.simulation_worker import SimulationWorker  # noqa: E402

# Application instance needed for QObject / signals
_app = QCoreApplication.instance() or QCoreApplication(sys.argv)


# ── Helpers ──


def _worker(setup=None):
    worker = SimulationWorker(OpticalSimulation())
    received = {"progress": [], "rays": [], "result": [], "error": []}
    worker.progress.connect(received["progress"].append)
    worker.rays_ready.connect(received["rays"].append)
    worker.result_ready.connect(received["result"].append)
    worker.error_occurred.connect(received["error"].append)
    if setup is not None:
        worker.setup(setup)
    return worker, received


class TestSimulationWorker:

    def test_run_emits_rays_and_result(self):
        worker, received = _worker(create_michelson_template())
        worker.run()
        assert received["error"] == []
        assert len(received["rays"][0]) == 4
        assert received["result"][0].summary.total_rays == 4
        assert received["progress"][-1] == 100

    def test_not_configured(self):
        worker, received = _worker()
        worker.run()
        assert received["error"] == ["No optical setup configured."]

    def test_no_laser(self):
        worker, received = _worker(Setup())
        worker.run()
        assert received["error"] == ["Add at least one laser to trace rays."]
        assert received["result"] == []

    def test_cancelled_before_run(self):
        worker, received = _worker(create_michelson_template())
        worker.cancel()
        worker.run()
        assert received["result"] == []
        assert received["error"] == []

    def test_engine_error_reported(self):
        setup = create_michelson_template()
        setup.grid_width = 0
        worker, received = _worker(setup)
        worker.run()
        assert "Grid size" in received["error"][0]
