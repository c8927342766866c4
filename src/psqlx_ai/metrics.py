from __future__ import annotations

from prometheus_client import Counter, Histogram, start_http_server

completions_total = Counter(
    "psqlx_ai_completions_total",
    "Total completion calls",
    labelnames=["provider", "status"],
)

completion_latency_seconds = Histogram(
    "psqlx_ai_completion_latency_seconds",
    "Completion round-trip latency (seconds)",
    buckets=[0.1, 0.3, 0.5, 1, 2, 5, 10, 30, 60, 120],
    labelnames=["provider"],
)


def maybe_start_metrics(*, enable: bool, bind: str, port: int) -> None:
    if not enable:
        return
    start_http_server(port, addr=bind)
