import json

import pytest
from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from sqlbridge.errors import (
    ConnectionNotFoundError,
    EngineConnectionError,
    ExternalServiceError,
    InvalidRequest,
    QuerySyntaxError,
    UnsupportedEngineError,
)
from sqlbridge.middleware.error_middleware import ErrorMiddleware


@pytest.fixture
def anyio_backend():
    return 'asyncio'


async def mock_app(scope: Scope, receive: Receive, send: Send):
    pass


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("error", "status_code", "message"),
    [
        (ConnectionNotFoundError("db_1"), 404, "Database connection not found or not connected"),
        (InvalidRequest("Missing required fields: host, database, username"), 400, "Missing required fields: host, database, username"),
        (QuerySyntaxError("near \"SELEC\": syntax error"), 400, "near \"SELEC\": syntax error"),
        (UnsupportedEngineError("Unsupported database type: oracle"), 400, "Unsupported database type: oracle"),
        (EngineConnectionError("Connection refused"), 502, "Connection refused"),
        (ExternalServiceError("AI assistant request failed"), 500, "AI assistant request failed"),
        (ValueError("boom"), 500, "boom"),
    ],
)
async def test_error_middleware_maps_errors(error, status_code, message):
    async def next_mock(request):
        raise error

    middleware = ErrorMiddleware(mock_app)
    request = Request({"type": "http", "method": "POST", "path": "/"})

    response = await middleware.dispatch(request, next_mock)

    assert response.status_code == status_code
    body = json.loads(response.body.decode())
    assert body == {"success": False, "error": message}


@pytest.mark.anyio
async def test_error_middleware_passes_through_responses():
    sentinel = object()

    async def next_mock(request):
        return sentinel

    middleware = ErrorMiddleware(mock_app)
    request = Request({"type": "http", "method": "GET", "path": "/"})

    assert await middleware.dispatch(request, next_mock) is sentinel
