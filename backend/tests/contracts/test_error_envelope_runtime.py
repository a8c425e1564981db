"""Runtime checks for ErrorResponse envelope parity."""

from __future__ import annotations

import os
import time

import jwt
from fastapi.testclient import TestClient

from src.main import app
from src.order_api import router_v1

_JWT_SECRET = os.environ.setdefault("ORDER_API_AUTH_JWT_HS256_SECRET", "test-order-api-secret")

REQUEST_ID = "req-error-envelope-001"


def _headers(agent_id: int = 1) -> dict[str, str]:
    token = jwt.encode({"sub": str(agent_id), "exp": int(time.time()) + 300}, _JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}", "X-Request-Id": REQUEST_ID}


def _assert_error_envelope(payload: dict[str, object]) -> None:
    assert "requestId" in payload
    assert "error" in payload
    error = payload["error"]
    assert isinstance(error, dict)
    assert "code" in error
    assert "message" in error


def test_order_api_error_handler_not_registered_globally() -> None:
    assert Exception not in app.exception_handlers


def test_401_responses_use_error_envelope() -> None:
    client = TestClient(app)

    missing = client.get("/v1/orders/status-counts", headers={"X-Request-Id": REQUEST_ID})
    assert missing.status_code == 401
    payload = missing.json()
    _assert_error_envelope(payload)
    assert payload["error"]["code"] == "AUTH_UNAUTHORIZED"
    assert payload["requestId"] == REQUEST_ID

    garbage = client.get(
        "/v1/orders/status-counts",
        headers={"Authorization": "Bearer not-a-jwt", "X-Request-Id": REQUEST_ID},
    )
    assert garbage.status_code == 401
    _assert_error_envelope(garbage.json())


def test_identity_mismatch_includes_details() -> None:
    client = TestClient(app)
    response = client.get("/v1/orders/status-counts", headers={**_headers(1), "X-Agent-Id": "2"})
    assert response.status_code == 401
    payload = response.json()
    assert payload["error"]["code"] == "AUTH_IDENTITY_MISMATCH"
    assert payload["error"]["details"]["header"] == "X-Agent-Id"


def test_403_and_404_responses_use_error_envelope(monkeypatch) -> None:
    async def _unauthorized(**_: object) -> str:
        return "unauthorized"

    monkeypatch.setattr(router_v1._order_service, "update_status", _unauthorized)
    client = TestClient(app)

    forbidden = client.post("/v1/orders/1/cancel", headers=_headers())
    assert forbidden.status_code == 403
    payload = forbidden.json()
    _assert_error_envelope(payload)
    assert payload["error"]["code"] == "ORDER_OPERATION_FORBIDDEN"
    assert payload["requestId"] == REQUEST_ID
    assert forbidden.headers["x-request-id"] == REQUEST_ID

    missing = client.get("/v1/orders/424242", headers=_headers())
    assert missing.status_code == 404
    _assert_error_envelope(missing.json())


def test_unhandled_errors_use_error_envelope(monkeypatch) -> None:
    async def _raise_unhandled(**_: object) -> object:
        raise RuntimeError("boom")

    monkeypatch.setattr(router_v1._order_service, "get_status_counts", _raise_unhandled)

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/v1/orders/status-counts", headers=_headers())

    assert response.status_code == 500
    payload = response.json()
    _assert_error_envelope(payload)
    assert payload["error"]["code"] == "INTERNAL_ERROR"
    assert payload["requestId"] == REQUEST_ID


def test_missing_request_id_is_generated_and_echoed_in_envelope() -> None:
    client = TestClient(app)
    response = client.get("/v1/orders/status-counts")

    assert response.status_code == 401
    request_id = response.headers["x-request-id"]
    assert request_id.startswith("req-")
    assert response.json()["requestId"] == request_id
