from __future__ import annotations
from typing import Any, List

from domain.models import GatewayReport, NetworkReport, SensorReport
from domain.ports import ReportSink

from .serialization import histogram_rows, report_kind


class PrintSink(ReportSink):
    def handle(self, report: Any) -> None:
        lines: List[str] = []
        lines.append(
            f"[{report_kind(report)}] {report.code} "
            f"start={report.start_date or '-'} end={report.end_date or '-'} "
            f"measurements={report.number_of_measurements:,}"
        )

        if isinstance(report, NetworkReport):
            lines.append(f"  most_active={sorted(report.most_active_gateways)} "
                         f"least_active={sorted(report.least_active_gateways)}")
            for k, r in sorted(report.gateways_load_ratio.items()):
                lines.append(f"  load {k:>12} | {r:>7.2f}%")
        elif isinstance(report, GatewayReport):
            lines.append(f"  most_active={sorted(report.most_active_sensors)} "
                         f"least_active={sorted(report.least_active_sensors)}")
            lines.append(f"  outlier_sensors={sorted(report.outlier_sensors)} battery={report.battery_charge}")
            for k, r in sorted(report.sensors_load_ratio.items()):
                lines.append(f"  load {k:>12} | {r:>7.2f}%")
        elif isinstance(report, SensorReport):
            lines.append(
                f"  mean={report.mean:.3f} var={report.variance:.3f} std={report.std_dev:.3f} "
                f"min={report.minimum_measured_value:.3f} max={report.maximum_measured_value:.3f} "
                f"outliers={len(report.outliers)}"
            )

        rows = histogram_rows(report.histogram)
        if rows:
            lines.append("  histogram: start | end | count")
            for row in rows:
                close = "]" if row["last"] else ")"
                lines.append(f"    [{row['start']}, {row['end']}{close} | {row['count']:>6}")
        else:
            lines.append("  Empty histogram.")

        print("\n".join(lines) + "\n", flush=True)
