"""
Tests for logging middleware.
Tests PII masking, header masking, probe skipping and the JSON formatter.
"""

import pytest
import json
import logging
import sys
from unittest.mock import patch
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.middleware.logging import (
    is_sensitive_field,
    mask_sensitive_data,
    mask_headers,
    should_log_request,
    StructuredLoggingMiddleware,
    StructuredFormatter,
    setup_logging,
)


class TestSensitiveFieldDetection:
    """Test sensitive field name detection."""

    @pytest.mark.parametrize("field_name,expected", [
        ("password", True),
        ("PASSWORD", True),
        ("new_password", True),
        ("access_token", True),
        ("refresh_token", True),
        ("client_secret", True),
        ("Authorization", True),
        ("cookie", True),
        ("reference_number", True),
        ("referenceNumber", True),
        ("email", False),
        ("title", False),
        ("status", False),
        ("job_id", False),
    ])
    def test_is_sensitive_field(self, field_name, expected):
        assert is_sensitive_field(field_name) is expected


class TestMaskSensitiveData:
    """Test recursive masking."""

    def test_login_body(self):
        masked = mask_sensitive_data({"email": "erin@example.com", "password": "hunter22"})
        assert masked == {"email": "[EMAIL]", "password": "[REDACTED]"}

    def test_nested_structures(self):
        data = {
            "payment": {"reference_number": "REF-99", "status": "verified"},
            "tokens": [{"refresh_token": "abc"}],
        }
        masked = mask_sensitive_data(data)

        assert masked["payment"]["reference_number"] == "[REDACTED]"
        assert masked["payment"]["status"] == "verified"
        assert masked["tokens"] == "[REDACTED]"

    def test_phone_numbers_in_text(self):
        masked = mask_sensitive_data("call +44 20 7946 0958 or 555-123-4567")
        assert "7946" not in masked
        assert "4567" not in masked
        assert masked.count("[PHONE]") == 2

    def test_non_string_values_untouched(self):
        assert mask_sensitive_data({"salary_min": 50000, "is_read": False}) == {
            "salary_min": 50000,
            "is_read": False,
        }

    def test_max_depth(self):
        data: dict = {}
        current = data
        for _ in range(15):
            current["child"] = {}
            current = current["child"]

        masked = mask_sensitive_data(data, max_depth=3)
        assert "[MAX_DEPTH_EXCEEDED]" in json.dumps(masked)


class TestMaskHeaders:

    def test_authorization_keeps_scheme(self):
        masked = mask_headers({"Authorization": "Bearer eyJhbGciOi", "accept": "*/*"})
        assert masked == {"Authorization": "Bearer [REDACTED]", "accept": "*/*"}

    def test_cookie_masked(self):
        assert mask_headers({"cookie": "session=1"}) == {"cookie": "[REDACTED]"}


class TestShouldLogRequest:

    @pytest.mark.parametrize("path,expected", [
        ("/health", False),
        ("/ready", False),
        ("/api/v1/jobs", True),
        ("/api/v1/admin/payments/pending", True),
    ])
    def test_probe_paths_skipped(self, path, expected):
        assert should_log_request(path) is expected


class TestStructuredLoggingMiddleware:
    """Test request logging against a small app."""

    @pytest.fixture
    def client(self):
        app = FastAPI()
        app.add_middleware(StructuredLoggingMiddleware, log_request_body=True)

        @app.post("/api/v1/auth/login")
        async def login(body: dict):
            return {"ok": True}

        @app.get("/health")
        async def health():
            return {"status": "healthy"}

        return TestClient(app)

    def test_request_id_echoed(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "a@example.com", "password": "pw"},
            headers={"x-request-id": "req-123"},
        )
        assert response.headers["x-request-id"] == "req-123"

    def test_request_id_generated(self, client):
        response = client.post("/api/v1/auth/login", json={})
        assert response.headers["x-request-id"]

    def test_body_logged_masked(self, client):
        with patch("core.middleware.logging.logger") as mock_logger:
            client.post("/api/v1/auth/login", json={"email": "a@example.com", "password": "pw"})

        started = json.loads(mock_logger.info.call_args_list[0].args[0])
        assert started["event"] == "request_started"
        assert started["body"]["password"] == "[REDACTED]"
        assert "a@example.com" not in json.dumps(started)

    def test_health_not_logged(self, client):
        with patch("core.middleware.logging.logger") as mock_logger:
            response = client.get("/health")

        assert response.status_code == 200
        assert not mock_logger.info.called


class TestStructuredFormatter:

    def test_format_basic_record(self):
        record = logging.LogRecord("api.services.jobs", logging.INFO, __file__, 1, "Job %s approved", (5,), None)
        record.request_id = "req-1"

        data = json.loads(StructuredFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "api.services.jobs"
        assert data["message"] == "Job 5 approved"
        assert data["request_id"] == "req-1"

    def test_format_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        data = json.loads(StructuredFormatter().format(record))
        assert data["exception"]["type"] == "RuntimeError"
        assert data["exception"]["message"] == "boom"


def test_setup_logging_installs_json_formatter():
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    try:
        setup_logging("DEBUG", json_logs=True)
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
