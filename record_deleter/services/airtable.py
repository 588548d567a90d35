from __future__ import annotations

import enum
from typing import Any, Optional
from urllib.parse import quote

import httpx
from fastapi import Request
from pydantic import ValidationError

from record_deleter.core.config import Settings
from record_deleter.core.constants import AIRTABLE_BATCH_LIMIT
from record_deleter.core.logging import get_logger
from record_deleter.schemas.records import BatchDeletionEnvelope, DeletionOutcome

logger = get_logger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown Airtable API error"


class ErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    API_ERROR = "api_error"
    TRANSPORT = "transport"


class AirtableError(Exception):
    kind: ErrorKind = ErrorKind.API_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RecordNotFoundError(AirtableError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, record_id: str, detail: str) -> None:
        super().__init__(
            f'Record with ID "{record_id}" not found in Airtable. Details: {detail}',
            status_code=404,
        )
        self.record_id = record_id


class AirtableAPIError(AirtableError):
    kind = ErrorKind.API_ERROR

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"Airtable API error ({status_code}): {detail}", status_code=status_code)


class AirtableTransportError(AirtableError):
    kind = ErrorKind.TRANSPORT


def _error_detail(response: httpx.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        return UNKNOWN_ERROR_MESSAGE
    if isinstance(payload, dict):
        error = payload.get("error")
        # Airtable sometimes sends a bare string, e.g. {"error": "NOT_FOUND"}.
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
        elif isinstance(error, str) and error:
            return error
    return UNKNOWN_ERROR_MESSAGE


class AirtableClient:
    """Deletes records from one Airtable table using a personal access token."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient) -> None:
        self.base_url = settings.airtable_api_base_url.rstrip("/")
        self.base_id = settings.airtable_base_id
        self.table_name = settings.airtable_table_name
        self._token = settings.airtable_pat
        self._client = client

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/{self.base_id}/{self.table_name}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    async def _delete(self, url: str, params: Optional[list[tuple[str, str]]] = None) -> httpx.Response:
        try:
            return await self._client.delete(url, params=params, headers=self._headers())
        except httpx.HTTPError as exc:
            message = "Airtable request failed."
            detail = str(exc).strip()
            if detail:
                message = f"Airtable request failed: {detail}"
            raise AirtableTransportError(message) from exc

    async def delete_record(self, record_id: str) -> DeletionOutcome:
        try:
            response = await self._delete(f"{self.table_url}/{quote(record_id, safe='')}")
            if not response.is_success:
                detail = _error_detail(response)
                if response.status_code == 404:
                    raise RecordNotFoundError(record_id, detail)
                raise AirtableAPIError(response.status_code, detail)
            try:
                return DeletionOutcome.model_validate(response.json())
            except (ValueError, ValidationError) as exc:
                raise AirtableTransportError(
                    "Airtable returned an unexpected delete response."
                ) from exc
        except AirtableError as exc:
            logger.error(
                "airtable.delete_failed",
                extra={
                    "event": "airtable.delete_failed",
                    "record_id": record_id,
                    "error_kind": exc.kind.value,
                    "remote_status": exc.status_code,
                    "error": exc.message,
                },
            )
            raise

    async def delete_records(self, record_ids: list[str]) -> list[DeletionOutcome]:
        if not record_ids:
            return []
        if len(record_ids) > AIRTABLE_BATCH_LIMIT:
            logger.warning(
                "Airtable batch delete is limited to %d records per request. "
                "Only the first %d will be processed.",
                AIRTABLE_BATCH_LIMIT,
                AIRTABLE_BATCH_LIMIT,
                extra={"event": "airtable.batch_truncated", "requested": len(record_ids)},
            )
            record_ids = record_ids[:AIRTABLE_BATCH_LIMIT]

        params = [("records[]", record_id) for record_id in record_ids]
        try:
            response = await self._delete(self.table_url, params=params)
            if not response.is_success:
                raise AirtableAPIError(response.status_code, _error_detail(response))
            try:
                envelope = BatchDeletionEnvelope.model_validate(response.json())
            except (ValueError, ValidationError) as exc:
                raise AirtableTransportError(
                    "Airtable returned an unexpected batch delete response."
                ) from exc
            return envelope.records
        except AirtableError as exc:
            logger.error(
                "airtable.batch_delete_failed",
                extra={
                    "event": "airtable.batch_delete_failed",
                    "record_ids": record_ids,
                    "error_kind": exc.kind.value,
                    "remote_status": exc.status_code,
                    "error": exc.message,
                },
            )
            raise


def get_airtable_client(request: Request) -> AirtableClient:
    return AirtableClient(request.app.state.settings, request.app.state.http_client)
