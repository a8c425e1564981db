"""Contract tests for structured observability fields."""

from __future__ import annotations

import logging
import os
import time

import jwt
from fastapi.testclient import TestClient

from src.main import app
from src.order_api import router_v1

_JWT_SECRET = os.environ.setdefault("ORDER_API_AUTH_JWT_HS256_SECRET", "test-order-api-secret")


def _auth_headers(*, request_id: str, agent_id: int) -> dict[str, str]:
    token = jwt.encode({"sub": str(agent_id), "exp": int(time.time()) + 300}, _JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}", "X-Request-Id": request_id}


def _records_by_component(caplog, component: str) -> list[logging.LogRecord]:  # type: ignore[no-untyped-def]
    return [record for record in caplog.records if getattr(record, "component", None) == component]


def _assert_identity_fields(record: logging.LogRecord, *, request_id: str, agent_id: int) -> None:
    assert getattr(record, "requestId", None) == request_id
    assert getattr(record, "agentId", None) == agent_id
    assert isinstance(getattr(record, "operation", None), str)
    assert getattr(record, "operation", None) != ""


def test_structured_fields_for_order_creation_and_transitions(caplog) -> None:
    client = TestClient(app)
    caplog.set_level(logging.INFO)
    router_v1._store.reset()
    try:
        created = client.post(
            "/v1/orders",
            headers=_auth_headers(request_id="req-obs-create-001", agent_id=11),
            json={"transactionType": "Achat", "amount": 100, "currency": "USD", "targetCurrency": "EUR"},
        )
        assert created.status_code == 201
        order_id = created.json()["id"]

        validated = client.post(
            f"/v1/orders/{order_id}/validate",
            headers=_auth_headers(request_id="req-obs-validate-001", agent_id=11),
        )
        assert validated.status_code == 200

        forbidden = client.post(
            f"/v1/orders/{order_id}/cancel",
            headers=_auth_headers(request_id="req-obs-cancel-001", agent_id=12),
        )
        assert forbidden.status_code == 403
    finally:
        router_v1._store.reset()

    order_records = _records_by_component(caplog, "orders")
    operations = [record.operation for record in order_records]  # type: ignore[attr-defined]
    assert operations == ["create_order", "validate_order", "cancel_order"]

    create_record, validate_record, cancel_record = order_records
    _assert_identity_fields(create_record, request_id="req-obs-create-001", agent_id=11)
    assert create_record.resourceType == "order"  # type: ignore[attr-defined]
    assert create_record.resourceId == str(order_id)  # type: ignore[attr-defined]
    assert create_record.statusCode == 201  # type: ignore[attr-defined]

    _assert_identity_fields(validate_record, request_id="req-obs-validate-001", agent_id=11)
    assert validate_record.outcome == "succeeded"  # type: ignore[attr-defined]
    assert validate_record.targetStatus == "Validé"  # type: ignore[attr-defined]
    assert validate_record.levelno == logging.INFO

    _assert_identity_fields(cancel_record, request_id="req-obs-cancel-001", agent_id=12)
    assert cancel_record.outcome == "unauthorized"  # type: ignore[attr-defined]
    assert cancel_record.statusCode == 403  # type: ignore[attr-defined]
    assert cancel_record.levelno == logging.WARNING


def test_request_lifecycle_logs_carry_request_fields(caplog) -> None:
    client = TestClient(app)
    caplog.set_level(logging.INFO)

    response = client.get(
        "/v1/orders/status-counts",
        headers=_auth_headers(request_id="req-obs-request-001", agent_id=21),
    )
    assert response.status_code == 200

    api_records = _records_by_component(caplog, "api")
    operations = [record.operation for record in api_records]  # type: ignore[attr-defined]
    assert "request_started" in operations
    assert "request_completed" in operations
    completed = next(record for record in api_records if record.operation == "request_completed")  # type: ignore[attr-defined]
    assert completed.requestId == "req-obs-request-001"  # type: ignore[attr-defined]
    assert completed.agentId == 21  # type: ignore[attr-defined]
    assert completed.statusCode == 200  # type: ignore[attr-defined]
    assert completed.resourceId == "/v1/orders/status-counts"  # type: ignore[attr-defined]
    assert completed.method == "GET"  # type: ignore[attr-defined]
