"""Structured observability helpers for order API runtime logs.

Every record carries ``requestId``, ``agentId``, ``component`` and
``operation`` as ``extra`` attributes so log shippers can index them.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request

from src.order_api.schemas import RequestContext


def _merge_optional(
    fields: dict[str, object],
    *,
    status_code: int | None,
    details: dict[str, Any],
) -> dict[str, object]:
    if status_code is not None:
        fields["statusCode"] = status_code
    fields.update({key: value for key, value in details.items() if value is not None})
    return fields


def context_log_fields(
    *,
    context: RequestContext,
    component: str,
    operation: str,
    resource_type: str | None = None,
    resource_id: str | int | None = None,
    status_code: int | None = None,
    **details: object,
) -> dict[str, object]:
    fields: dict[str, object] = {
        "requestId": context.request_id,
        "agentId": context.agent_id,
        "component": component,
        "operation": operation,
    }
    if resource_type is not None:
        fields["resourceType"] = resource_type
    if resource_id is not None:
        fields["resourceId"] = str(resource_id)
    return _merge_optional(fields, status_code=status_code, details=details)


def request_log_fields(
    *,
    request: Request,
    component: str,
    operation: str,
    status_code: int | None = None,
    **details: object,
) -> dict[str, object]:
    fields: dict[str, object] = {
        "requestId": getattr(request.state, "request_id", None) or request.headers.get("X-Request-Id") or "req-unknown",
        "agentId": getattr(request.state, "agent_id", None),
        "component": component,
        "operation": operation,
        "resourceType": "request",
        "resourceId": request.url.path,
    }
    return _merge_optional(fields, status_code=status_code, details=details)


def log_context_event(
    logger: logging.Logger,
    *,
    level: int,
    message: str,
    context: RequestContext,
    component: str,
    operation: str,
    **fields: Any,
) -> None:
    logger.log(
        level,
        message,
        extra=context_log_fields(context=context, component=component, operation=operation, **fields),
    )


def log_request_event(
    logger: logging.Logger,
    *,
    level: int,
    message: str,
    request: Request,
    component: str,
    operation: str,
    **fields: Any,
) -> None:
    logger.log(
        level,
        message,
        extra=request_log_fields(request=request, component=component, operation=operation, **fields),
    )
