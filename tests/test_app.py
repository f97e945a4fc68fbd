"""
Application-level tests — health check, diagnostic headers, CORS and the
shape of error responses.
"""
import logging

import pytest
from httpx import AsyncClient

from cards_api.exceptions import (
    CardNotFoundError,
    FileTooLargeError,
    MissingFileError,
    StorageError,
)


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_timing_headers_present(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/cards")
    assert "x-response-time-ms" in resp.headers
    assert float(resp.headers["x-response-time-ms"]) >= 0


@pytest.mark.asyncio
async def test_query_count_header_counts_queries(async_client: AsyncClient):
    """Listing cards issues at least one SELECT, so the count must be > 0."""
    resp = await async_client.get("/api/v1/cards")
    assert int(resp.headers["x-query-count"]) >= 1

    resp = await async_client.get("/health")
    assert resp.headers["x-query-count"] == "0"


@pytest.mark.asyncio
async def test_requests_are_logged(async_client: AsyncClient, caplog):
    with caplog.at_level(logging.INFO, logger="cards_api.access"):
        await async_client.get("/health")
    assert "GET /health -> 200" in caplog.text


@pytest.mark.asyncio
async def test_cors_no_credentials_with_wildcard(async_client: AsyncClient):
    resp = await async_client.get("/health", headers={"Origin": "http://example.com"})
    assert resp.headers.get("access-control-allow-origin") == "*"
    assert resp.headers.get("access-control-allow-credentials") != "true"


def test_exception_status_codes():
    assert CardNotFoundError("x").status_code == 404
    assert MissingFileError().status_code == 400
    assert FileTooLargeError(20, 10).status_code == 413
    assert StorageError("upload", "k", "boom").status_code == 502


def test_exception_to_dict_omits_empty_parts():
    body = MissingFileError().to_dict()
    assert body == {
        "detail": "File is required",
        "code": "FILE_REQUIRED",
        "suggestion": "Send the file as multipart/form-data in the 'file' field",
    }
