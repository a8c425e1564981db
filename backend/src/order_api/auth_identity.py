"""Authentication and agent identity derivation for order API routes."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Any

import jwt
from jwt.exceptions import InvalidTokenError

from src.order_api.errors import OrderAPIError

_JWT_SECRET_ENV = "ORDER_API_AUTH_JWT_HS256_SECRET"
_JWT_ISSUER_ENV = "ORDER_API_AUTH_JWT_ISSUER"
_JWT_AUDIENCE_ENV = "ORDER_API_AUTH_JWT_AUDIENCE"
_JWT_TIME_LEEWAY_SECONDS = 15

# Tokens from the upstream identity provider carry the agent id under the
# NameIdentifier claim, either short or as the full claim URI.
_NAME_IDENTIFIER_CLAIM = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier"
_AGENT_ID_CLAIM_KEYS = ("agent_id", "agentId", "nameid", _NAME_IDENTIFIER_CLAIM, "sub")


def _non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized if normalized else None


@dataclass(frozen=True)
class AuthenticatedAgent:
    """Agent identity resolved from verified request credentials."""

    agent_id: int


def resolve_agent_identity(
    *,
    authorization: str | None,
    agent_header: str | None,
    request_id: str,
) -> AuthenticatedAgent:
    """Resolve the calling agent from a bearer token, rejecting spoofed headers."""
    token = _parse_bearer_token(authorization)
    if token is None:
        raise OrderAPIError(
            status_code=401,
            code="AUTH_UNAUTHORIZED",
            message="Authentication required for order endpoints.",
            request_id=request_id,
        )

    claims = _decode_verified_claims(token)
    agent_id = _agent_id_from_claims(claims) if claims is not None else None
    if agent_id is None:
        raise OrderAPIError(
            status_code=401,
            code="AUTH_UNAUTHORIZED",
            message="Bearer token is invalid.",
            request_id=request_id,
        )

    _assert_no_identity_spoofing(
        expected_value=agent_id,
        provided_value=agent_header,
        request_id=request_id,
    )
    return AuthenticatedAgent(agent_id=agent_id)


def issue_agent_token(*, agent_id: int, ttl_seconds: int = 3600, now: int | None = None) -> str:
    """Mint an HS256 token for ``agent_id`` signed with the configured secret."""
    secret = _jwt_secret()
    if secret is None:
        raise RuntimeError(f"{_JWT_SECRET_ENV} is not configured.")

    issued_at = int(time.time()) if now is None else now
    claims: dict[str, Any] = {
        "sub": str(agent_id),
        "iat": issued_at,
        "exp": issued_at + ttl_seconds,
    }
    issuer = _jwt_issuer()
    if issuer is not None:
        claims["iss"] = issuer
    audience = _jwt_audience()
    if audience is not None:
        claims["aud"] = audience
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_configuration_summary() -> dict[str, str | None]:
    audience = _jwt_audience()
    return {
        "secret": "configured" if _jwt_secret() is not None else None,
        "issuer": _jwt_issuer(),
        "audience": ",".join(audience) if isinstance(audience, list) else audience,
    }


def _parse_bearer_token(authorization: str | None) -> str | None:
    raw = _non_empty(authorization)
    if raw is None:
        return None
    scheme, _, token = raw.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return _non_empty(token)


def _jwt_secret() -> str | None:
    return _non_empty(os.getenv(_JWT_SECRET_ENV))


def _jwt_issuer() -> str | None:
    return _non_empty(os.getenv(_JWT_ISSUER_ENV))


def _jwt_audience() -> str | list[str] | None:
    raw = _non_empty(os.getenv(_JWT_AUDIENCE_ENV))
    if raw is None:
        return None
    audiences = [value.strip() for value in raw.split(",") if value.strip()]
    if not audiences:
        return None
    if len(audiences) == 1:
        return audiences[0]
    return audiences


def _decode_verified_claims(token: str) -> dict[str, Any] | None:
    secret = _jwt_secret()
    if secret is None:
        return None

    issuer = _jwt_issuer()
    audience = _jwt_audience()
    options = {
        "require": ["exp"],
        "verify_aud": audience is not None,
        "verify_iss": issuer is not None,
    }
    try:
        claims = jwt.decode(
            token,
            key=secret,
            algorithms=["HS256"],
            issuer=issuer,
            audience=audience,
            leeway=_JWT_TIME_LEEWAY_SECONDS,
            options=options,
        )
    except InvalidTokenError:
        return None
    return claims if isinstance(claims, dict) else None


def _claim_value(payload: dict[str, Any], *, keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            normalized = value.strip()
            if normalized:
                return normalized
    return None


def _agent_id_from_claims(claims: dict[str, Any]) -> int | None:
    raw = _claim_value(claims, keys=_AGENT_ID_CLAIM_KEYS)
    if raw is None or not (raw.isascii() and raw.isdigit()):
        return None
    agent_id = int(raw)
    return agent_id if agent_id > 0 else None


def _assert_no_identity_spoofing(
    *,
    expected_value: int,
    provided_value: str | None,
    request_id: str,
) -> None:
    normalized = _non_empty(provided_value)
    if normalized is None:
        return
    if normalized == str(expected_value):
        return
    raise OrderAPIError(
        status_code=401,
        code="AUTH_IDENTITY_MISMATCH",
        message="X-Agent-Id does not match authenticated identity.",
        request_id=request_id,
        details={
            "header": "X-Agent-Id",
            "reason": "identity_header_mismatch",
        },
    )
