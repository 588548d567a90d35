import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from record_deleter.core.logging import get_logger
from record_deleter.schemas.records import BatchDeleteResponse, SingleDeleteResponse
from record_deleter.services.airtable import AirtableClient, AirtableError, ErrorKind, get_airtable_client

router = APIRouter(tags=["records"])
logger = get_logger(__name__)

INVALID_BATCH_BODY = "Invalid request body: recordIds must be an array of strings."


def _status_for(exc: AirtableError) -> tuple[int, str]:
    if exc.kind is ErrorKind.NOT_FOUND:
        return 404, exc.message
    if exc.kind is ErrorKind.API_ERROR:
        return 500, exc.message
    if exc.kind is ErrorKind.TRANSPORT:
        return 500, f"Failed to delete record: {exc.message}"
    raise AssertionError(f"Unhandled error kind: {exc.kind!r}")


@router.delete("/records/{record_id}", response_model=SingleDeleteResponse)
async def delete_record(
    record_id: str,
    client: AirtableClient = Depends(get_airtable_client),
) -> SingleDeleteResponse:
    if not record_id.strip():
        raise HTTPException(status_code=400, detail="Record ID is required")

    try:
        result = await client.delete_record(record_id)
    except AirtableError as exc:
        status_code, message = _status_for(exc)
        raise HTTPException(status_code=status_code, detail=message) from exc
    except Exception as exc:
        logger.exception("Delete single record error", extra={"record_id": record_id})
        raise HTTPException(status_code=500, detail=f"Failed to delete record: {exc}") from exc

    return SingleDeleteResponse(
        message=f"Record {record_id} successfully deleted.",
        deleted_record=result,
    )


async def _read_record_ids(request: Request) -> list[str]:
    try:
        body: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=400, detail=INVALID_BATCH_BODY) from exc
    record_ids = body.get("recordIds") if isinstance(body, dict) else None
    if not isinstance(record_ids, list) or not all(isinstance(rid, str) for rid in record_ids):
        raise HTTPException(status_code=400, detail=INVALID_BATCH_BODY)
    return record_ids


@router.post("/records/batch-delete", response_model=BatchDeleteResponse)
async def batch_delete_records(
    request: Request,
    client: AirtableClient = Depends(get_airtable_client),
):
    record_ids = await _read_record_ids(request)
    if not record_ids:
        return JSONResponse({"message": "No record IDs provided for batch deletion."})

    try:
        results = await client.delete_records(record_ids)
    except AirtableError as exc:
        raise HTTPException(
            status_code=500, detail=f"Failed to perform batch deletion: {exc}"
        ) from exc
    except Exception as exc:
        logger.exception("Delete batch records error", extra={"record_ids": record_ids})
        raise HTTPException(
            status_code=500, detail=f"Failed to perform batch deletion: {exc}"
        ) from exc

    # Ids Airtable did not recognise are absent from ``results``.
    return BatchDeleteResponse(
        message="Batch deletion request processed.",
        deleted_records=results,
    )
