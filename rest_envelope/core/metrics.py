from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest


envelope_responses_total = Counter(
    "envelope_responses_total",
    "Total number of rendered response envelopes.",
    ["kind", "status"],
)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
