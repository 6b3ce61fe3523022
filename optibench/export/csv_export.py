"""CSV export — ray power-loss reports and interference results.

BOM UTF-8 encoding for Excel compatibility.
"""

from __future__ import annotations

import csv

from optibench.models.simulation import SimulationResult


def _fmt(value: float | None, fmt: str) -> str:
    return "" if value is None else format(value, fmt)


class CsvExporter:
    """CSV file export operations."""

    def export_ray_reports(
        self, result: SimulationResult, output_path: str,
    ) -> None:
        """Export one row per interaction, plus a row per ray without any.

        Columns: Ray, Wavelength (nm), Path Length (mm), Final Power,
        Power Loss (%), Component, Type, Distance (mm), Power Before,
        Power After, Loss (%).

        Args:
            result: Simulation result.
            output_path: Destination file path (.csv).
        """
        headers = [
            "Ray", "Wavelength (nm)", "Path Length (mm)", "Final Power",
            "Power Loss (%)", "Component", "Type", "Distance (mm)",
            "Power Before", "Power After", "Loss (%)",
        ]
        with open(output_path, "w", newline="", encoding="utf-8-sig") as f:
            writer = csv.writer(f)
            writer.writerow(headers)
            for report in result.ray_reports:
                ray_cols = [
                    report.ray_id,
                    f"{report.wavelength:.1f}",
                    f"{report.total_path_length_mm:.2f}",
                    f"{report.final_power:.4f}",
                    f"{report.power_loss_pct:.2f}",
                ]
                if not report.interactions:
                    writer.writerow(ray_cols + [""] * 6)
                    continue
                for ix in report.interactions:
                    writer.writerow(ray_cols + [
                        ix.component_id,
                        ix.component_type.value,
                        f"{ix.distance_mm:.2f}",
                        f"{ix.power_before:.4f}",
                        f"{ix.power_after:.4f}",
                        f"{ix.loss_pct:.2f}",
                    ])

    def export_interference(
        self, result: SimulationResult, output_path: str,
    ) -> None:
        """Export one row per detector.

        Columns: Detector, Type, Path Difference (mm),
        Order of Interference, Visibility.

        Args:
            result: Simulation result.
            output_path: Destination file path (.csv).
        """
        headers = [
            "Detector", "Type", "Path Difference (mm)",
            "Order of Interference", "Visibility",
        ]
        with open(output_path, "w", newline="", encoding="utf-8-sig") as f:
            writer = csv.writer(f)
            writer.writerow(headers)
            for p in result.interference_patterns:
                writer.writerow([
                    p.detector_id,
                    p.interference_type.value,
                    _fmt(p.path_difference_mm, ".4f"),
                    _fmt(p.order_of_interference, ".2f"),
                    f"{p.visibility:.3f}",
                ])
