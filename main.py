from __future__ import annotations

import argparse
import logging

from config import load_config
from app.pipeline import ReportPipeline
from app.processor import ParallelReportRunner
from app.report_service import ReportService
from app.threshold_monitor import ThresholdMonitor, ThresholdMonitorConfig
from domain.ports import ReportSink
from infra.csv_source import load_measurements_csv
from infra.http_report_sink import HttpReportSink
from infra.memory_store import InMemoryStore
from infra.sinks import PrintSink
from infra.violations_csv_sink import AsyncCsvViolationWriter


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Relatórios de medidas (rede / gateway / sensor)")
    ap.add_argument("-c", "--config", default="config.yaml", help="arquivo YAML de configuração")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    cfg = load_config(args.config)

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    measurements = load_measurements_csv(cfg.measurements_csv)
    store = InMemoryStore(
        measurements,
        thresholds=cfg.thresholds,
        gateway_params=cfg.gateways,
    )
    print(f"[data] measurements={len(store):,} csv={cfg.measurements_csv}")

    # ---- monitor de violações (opcional) ----
    threshold_monitor = None
    violation_writer = None

    if cfg.threshold_monitor and cfg.threshold_monitor.enabled:
        threshold_monitor = ThresholdMonitor(
            store,
            cfg=ThresholdMonitorConfig(cooldown_sec=cfg.threshold_monitor.cooldown_sec),
        )
        violation_writer = AsyncCsvViolationWriter(
            cfg.threshold_monitor.csv_path,
            queue_max=cfg.threshold_monitor.queue_max,
            drop_on_full=cfg.threshold_monitor.drop_on_full,
            flush_every_n=cfg.threshold_monitor.flush_every_n,
            flush_every_sec=cfg.threshold_monitor.flush_every_sec,
        )
        violation_writer.start()
        print(f"[violations] enabled=True csv={cfg.threshold_monitor.csv_path} "
              f"sensors={sorted(cfg.thresholds)}")
    else:
        print("[violations] enabled=False")

    # ---- sinks ----
    sinks: list[ReportSink] = [PrintSink()]
    http_sink = None
    if cfg.http_sink is not None:
        http_sink = HttpReportSink(
            cfg.http_sink.url,
            workers=cfg.http_sink.workers,
            queue_max=cfg.http_sink.queue_max,
            timeout_sec=cfg.http_sink.timeout_sec,
            max_retries=cfg.http_sink.max_retries,
            drop_on_full=cfg.http_sink.drop_on_full,
        )
        http_sink.start()
        sinks.append(http_sink)
        print(f"[http] url={cfg.http_sink.url}")

    service = ReportService(store, store)
    pipeline = ReportPipeline(
        ParallelReportRunner(service, workers=cfg.workers),
        sinks,
        monitor=threshold_monitor,
        violation_sink=violation_writer,
    )

    failed = 0
    try:
        pipeline.scan_violations(store.measurements)
        outcomes = pipeline.run(cfg.reports)
        for o in outcomes:
            if not o.ok:
                failed += 1
                print(f"[error] {o.request.label()}: {o.error}")
    finally:
        try:
            if http_sink is not None:
                http_sink.stop()
        finally:
            if violation_writer is not None:
                violation_writer.stop()

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
