"""Prometheus metrics for the oracle worker."""

import logging

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

polls_total = Counter(
    "veripass_oracle_polls_total",
    "Poll ticks by outcome",
    ["outcome"],  # ok, fetch_error, sweep_error
)

requests_processed = Counter(
    "veripass_oracle_requests_total",
    "Verification requests processed by final status",
    ["status"],
)

ledger_submissions = Counter(
    "veripass_oracle_ledger_submissions_total",
    "Ledger submissions by outcome",
    ["outcome"],  # confirmed, reverted, error
)

poll_duration_seconds = Histogram(
    "veripass_oracle_poll_duration_seconds",
    "Time spent in one poll tick",
    buckets=(0.1, 0.5, 1, 5, 15, 30, 60, 120, 300),
)


def start_metrics_server(port: int) -> None:
    """Expose /metrics on ``port``; 0 leaves the exporter off."""
    if not port:
        return
    start_http_server(port)
    logger.info(f"Metrics exporter listening on :{port}")
