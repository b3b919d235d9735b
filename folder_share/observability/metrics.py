# folder_share/observability/metrics.py
# prometheus counters for the share endpoints

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

router = APIRouter(tags=["Metrics"])

# outcome: created | deduplicated | rejected
PUBLISH_TOTAL = Counter(
    "folder_share_publish_total",
    "Folder publish requests by outcome",
    labelnames=("outcome",),
)

# outcome: ok | not_found | data_missing
FETCH_TOTAL = Counter(
    "folder_share_fetch_total",
    "Folder fetch requests by outcome",
    labelnames=("outcome",),
)


def record_publish(outcome: str) -> None:
    PUBLISH_TOTAL.labels(outcome).inc()


def record_fetch(outcome: str) -> None:
    FETCH_TOTAL.labels(outcome).inc()


@router.get("/metrics", include_in_schema=False)
async def prometheus_metrics() -> Response:
    # // expose /metrics
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
