"""Tests for logging context and error handling."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from salestrack.core.errors import (
    AppError,
    DecodeError,
    ErrorDetail,
    ImportInProgressError,
    NotFoundError,
    SizeLimitError,
    StoreCommitError,
    ValidationError,
)
from salestrack.core.exception_handlers import register_exception_handlers
from salestrack.core.logging import get_owner_id, get_request_id, set_owner_id, set_request_id
from salestrack.core.sentry import filter_sensitive_data
from salestrack.middleware.logging import RequestIDMiddleware


class TestErrorClasses:
    """Test custom exception classes."""

    def test_app_error_to_response(self):
        exc = AppError("SOME_CODE", "Something broke", status_code=418)

        response = exc.to_response()

        assert isinstance(response, ErrorDetail)
        assert response.code == "SOME_CODE"
        assert response.details is None

    @pytest.mark.parametrize(
        "exc,code,status_code",
        [
            (DecodeError(), "DECODE_ERROR", 422),
            (SizeLimitError(size=11, limit=10), "FILE_TOO_LARGE", 413),
            (StoreCommitError("failed"), "STORE_COMMIT_ERROR", 500),
            (ImportInProgressError(progress=50), "IMPORT_IN_PROGRESS", 409),
            (NotFoundError("SalesEntry", "abc"), "NOT_FOUND", 404),
            (ValidationError("bad month"), "VALIDATION_ERROR", 422),
        ],
    )
    def test_codes_and_statuses(self, exc, code, status_code):
        """Test every import error maps to its code and HTTP status."""
        assert exc.code == code
        assert exc.status_code == status_code


class TestContextVars:
    """Test request and owner context."""

    def test_set_and_get_request_id(self):
        set_request_id("test-request-123")
        assert get_request_id() == "test-request-123"

    def test_set_and_get_owner_id(self):
        set_owner_id("branch-7")
        assert get_owner_id() == "branch-7"


def _error_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/boom")
    async def boom():
        raise StoreCommitError("Import stopped", details={"committed_count": 500})

    @app.get("/ok")
    async def ok():
        return {"request_id": get_request_id(), "owner_id": get_owner_id()}

    return app


class TestErrorHandling:
    """Test global error handlers and request middleware."""

    async def test_app_error_rendered_as_json(self):
        async with AsyncClient(transport=ASGITransport(app=_error_app()), base_url="http://test") as ac:
            response = await ac.get("/boom")

        assert response.status_code == 500
        assert response.json() == {
            "code": "STORE_COMMIT_ERROR",
            "message": "Import stopped",
            "details": {"committed_count": 500},
        }

    async def test_unknown_route_is_json_404(self):
        async with AsyncClient(transport=ASGITransport(app=_error_app()), base_url="http://test") as ac:
            response = await ac.get("/missing")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}

    async def test_request_and_owner_bound_in_handlers(self):
        """Test X-Request-ID is echoed and both headers reach the context."""
        async with AsyncClient(transport=ASGITransport(app=_error_app()), base_url="http://test") as ac:
            response = await ac.get(
                "/ok", headers={"X-Request-ID": "external-123", "X-Owner-ID": "branch-7"}
            )

        assert response.headers["X-Request-ID"] == "external-123"
        assert response.json() == {"request_id": "external-123", "owner_id": "branch-7"}

    async def test_request_id_generated(self):
        async with AsyncClient(transport=ASGITransport(app=_error_app()), base_url="http://test") as ac:
            response = await ac.get("/ok")

        assert len(response.headers["X-Request-ID"]) == 36


class TestSentryFilter:
    """Test Sentry event scrubbing."""

    def test_drops_sql_and_upload_extras(self):
        event = {
            "extra": {
                "sql": "SELECT * FROM sales_entries",
                "upload_bytes": "PK...",
                "failed_batch": 3,
            },
            "breadcrumbs": {
                "values": [
                    {"category": "query", "message": "INSERT INTO sales_entries"},
                    {"category": "http", "message": "POST /api/sales-entries/import"},
                ]
            },
        }

        filtered = filter_sensitive_data(event, {})

        assert filtered["extra"] == {"failed_batch": 3}
        assert [b["category"] for b in filtered["breadcrumbs"]["values"]] == ["http"]
