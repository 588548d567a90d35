import os

import httpx
import pytest

# Keep a developer's real .env credentials out of the test run.
os.environ["AIRTABLE_BASE_ID"] = "appTestBase"
os.environ["AIRTABLE_TABLE_NAME"] = "responses"
os.environ["AIRTABLE_PAT"] = "pat-test-token"

from fastapi.testclient import TestClient  # noqa: E402

from record_deleter.core.config import Settings  # noqa: E402
from record_deleter.main import create_app  # noqa: E402

API_ROOT = "https://airtable.test/v0"


class AirtableStub:
    """Records outbound requests and replays queued responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response] = []

    def queue(self, status_code: int, **kwargs) -> None:
        self._responses.append(httpx.Response(status_code, **kwargs))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected Airtable call: {request.method} {request.url}")
        return self._responses.pop(0)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        airtable_base_id="appTestBase",
        airtable_table_name="responses",
        airtable_pat="pat-test-token",
        airtable_api_base_url=API_ROOT,
    )


@pytest.fixture
def airtable() -> AirtableStub:
    return AirtableStub()


@pytest.fixture
def http_client(airtable: AirtableStub) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(airtable.handler))


@pytest.fixture
def client(settings: Settings, http_client: httpx.AsyncClient) -> TestClient:
    return TestClient(create_app(settings, http_client=http_client))
