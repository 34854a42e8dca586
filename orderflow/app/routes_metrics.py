# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

# Counters
http_requests_total = Counter(
    "http_requests_total", "Total HTTP requests", ["path", "method", "status"]
)

orders_created_total = Counter("orders_created_total", "Total orders created")
orders_created_total.inc(0)

orders_rejected_total = Counter(
    "orders_rejected_total", "Total order submissions rejected", ["code"]
)
orders_rejected_total.labels(code="INVALID_INPUT").inc(0)

coupon_redemptions_total = Counter(
    "coupon_redemptions_total", "Total coupon usages recorded"
)
coupon_redemptions_total.inc(0)

destock_runs_total = Counter(
    "destock_runs_total", "Total inventory depletion runs", ["outcome"]
)
destock_runs_total.labels(outcome="ok").inc(0)

stock_alerts_sent_total = Counter(
    "stock_alerts_sent_total", "Total low-stock digests dispatched"
)
stock_alerts_sent_total.inc(0)

ingress_rate_limited_total = Counter(
    "ingress_rate_limited_total", "Total requests refused by the ingress limiter"
)
ingress_rate_limited_total.inc(0)

router = APIRouter()


@router.get("/metrics")
async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    http_requests_total.labels(path="/metrics", method="GET", status="200").inc(0)
    data = generate_latest()
    return Response(data, media_type=CONTENT_TYPE_LATEST)
