"""Runtime contract checks for the registered v1 order routes."""

from __future__ import annotations

import os
import time
from urllib.parse import quote

import jwt
from fastapi.testclient import TestClient

from src.main import app
from src.order_api import router_v1

_JWT_SECRET = os.environ.setdefault("ORDER_API_AUTH_JWT_HS256_SECRET", "test-order-api-secret")

_HTTP_METHODS = {"get", "post", "put", "patch", "delete"}


def _auth_headers(agent_id: int) -> dict[str, str]:
    token = jwt.encode({"sub": str(agent_id), "exp": int(time.time()) + 300}, _JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}", "X-Request-Id": "req-routes-001"}


def test_v1_order_routes_are_registered() -> None:
    expected = {
        ("GET", "/v1/health"),
        ("POST", "/v1/orders"),
        ("GET", "/v1/orders/status-counts"),
        ("GET", "/v1/orders/by-status/{orderStatus}"),
        ("GET", "/v1/orders/{orderId}"),
        ("PUT", "/v1/orders/{orderId}"),
        ("POST", "/v1/orders/{orderId}/cancel"),
        ("POST", "/v1/orders/{orderId}/validate"),
        ("POST", "/v1/orders/{orderId}/refuse"),
        ("GET", "/v1/orders/{orderId}/history"),
    }

    found: set[tuple[str, str]] = set()
    for path, operations in app.openapi()["paths"].items():
        for method in operations:
            if method in _HTTP_METHODS:
                found.add((method.upper(), path))

    missing = expected - found
    assert not missing, f"Missing runtime routes: {missing}"


def test_static_order_routes_are_matched_before_order_id_route() -> None:
    router_v1._store.reset()
    client = TestClient(app)
    headers = _auth_headers(901)

    counts = client.get("/v1/orders/status-counts", headers=headers)
    assert counts.status_code == 200
    assert counts.json() == {"pending": 0, "validated": 0, "cancelled": 0, "toModify": 0}

    by_status = client.get(f"/v1/orders/by-status/{quote('Validé')}", headers=headers)
    assert by_status.status_code == 404
    assert by_status.json() == "Aucun ordre trouvé avec le statut 'Validé'."


def test_openapi_documents_order_routes() -> None:
    schema = app.openapi()
    assert "/v1/orders/{orderId}/validate" in schema["paths"]
    assert "post" in schema["paths"]["/v1/orders"]
