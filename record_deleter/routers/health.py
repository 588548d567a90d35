from datetime import datetime, timezone

from fastapi import APIRouter

from record_deleter.core.constants import SERVICE_NAME, SERVICE_VERSION
from record_deleter.schemas.health import HealthResponse, IndexResponse, VersionResponse

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthResponse)
def healthz() -> HealthResponse:
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return HealthResponse(status="OK", timestamp=timestamp)


@router.get("/version", response_model=VersionResponse)
def version() -> VersionResponse:
    return VersionResponse(service=SERVICE_NAME, version=SERVICE_VERSION)


@router.get("/", response_model=IndexResponse)
def index() -> IndexResponse:
    return IndexResponse(
        message="Airtable Record Deleter Service is running!",
        endpoints={
            "health": "/healthz",
            "version": "/version",
            "deleteSingle": "DELETE /api/records/:id",
            "deleteBatch": "POST /api/records/batch-delete",
        },
    )
