# filedrop/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

upload_requests_counter = Counter(
    "filedrop_upload_requests_total",
    "Aantal upload requests",
    ["result"],  # OutcomeKind waarde
)

files_saved_counter = Counter(
    "filedrop_files_saved_total",
    "Aantal opgeslagen bestanden",
)

saved_bytes_hist = Histogram(
    "filedrop_saved_bytes",
    "Bestandsgroottes van opgeslagen uploads",
    buckets=(1e3, 1e4, 1e5, 1e6, 1e7, 3e7, 1e8),
)

latency_hist = Histogram(
    "filedrop_upload_latency_seconds",
    "Doorlooptijd van een volledige upload",
    buckets=(0.05, 0.1, 0.5, 1, 5, 15, 60, 300, 900, 3600),
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
