"""Optical Bench — Entry Point.

Runs a built-in layout through the simulation worker and prints the
result as JSON.

    python main.py michelson
    python main.py mach-zehnder --csv-dir out/
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from optibench.application import create_application, setup_logging
from optibench.core.serializers import simulation_result_to_dict
from optibench.core.simulation import OpticalSimulation
from optibench.core.templates import TEMPLATE_NAMES, create_template
from optibench.export import CsvExporter
from optibench.models.simulation import TraceConfig
from optibench.workers.simulation_worker import SimulationWorker

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="2D optical bench simulation")
    parser.add_argument(
        "template", nargs="?", choices=TEMPLATE_NAMES, default="michelson",
        help="Built-in layout to simulate",
    )
    parser.add_argument("--max-bounces", type=int, default=TraceConfig.max_bounces)
    parser.add_argument("--csv-dir", type=Path, help="Also export CSV reports here")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.verbose)
    app = create_application(sys.argv[:1])

    setup = create_template(args.template)
    worker = SimulationWorker(OpticalSimulation(TraceConfig(max_bounces=args.max_bounces)))
    outcome: dict = {}
    worker.result_ready.connect(lambda result: outcome.update(result=result))
    worker.error_occurred.connect(lambda message: outcome.update(error=message))
    worker.finished.connect(app.quit)

    worker.setup(setup)
    worker.start()
    app.exec()
    worker.wait()

    if "error" in outcome:
        logger.error("Simulation failed: %s", outcome["error"])
        return 1

    result = outcome["result"]
    if args.csv_dir is not None:
        args.csv_dir.mkdir(parents=True, exist_ok=True)
        exporter = CsvExporter()
        exporter.export_ray_reports(result, str(args.csv_dir / "rays.csv"))
        exporter.export_interference(result, str(args.csv_dir / "interference.csv"))
        logger.info("CSV reports written to %s", args.csv_dir)

    print(json.dumps(simulation_result_to_dict(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
