"""FastAPI router exposing the order controller as the v1 HTTP surface."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated
from uuid import uuid4

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from src.order_api.auth_identity import resolve_agent_identity
from src.order_api.controller import FORBIDDEN_MESSAGE, ActionResult, OrderController
from src.order_api.errors import OrderAPIError
from src.order_api.schemas import (
    CreateOrderRequest,
    HealthResponse,
    ModifyOrderRequest,
    Order,
    OrderHistory,
    OrderStatus,
    OrderStatusCounts,
    RequestContext,
)
from src.order_api.services.in_memory_order_service import InMemoryOrderService
from src.order_api.state_store import InMemoryStateStore

router = APIRouter(prefix="/v1")

_store = InMemoryStateStore()
_order_service = InMemoryOrderService(store=_store)
_controller = OrderController(_order_service, location_prefix="/v1/orders")

_BODILESS_ERRORS: dict[int, tuple[str, str]] = {
    403: ("ORDER_OPERATION_FORBIDDEN", FORBIDDEN_MESSAGE),
    404: ("ORDER_NOT_FOUND", "Ordre introuvable."),
}


def _request_id(request: Request, header_value: str | None) -> str:
    request_id = getattr(request.state, "request_id", None) or header_value or f"req-{uuid4()}"
    request.state.request_id = request_id
    return request_id


async def _request_context(
    request: Request,
    authorization: str | None = Header(default=None),
    x_agent_id: str | None = Header(default=None, alias="X-Agent-Id"),
    x_request_id: str | None = Header(default=None, alias="X-Request-Id"),
) -> RequestContext:
    request_id = _request_id(request, x_request_id)
    identity = resolve_agent_identity(
        authorization=authorization,
        agent_header=x_agent_id,
        request_id=request_id,
    )
    request.state.agent_id = identity.agent_id
    return RequestContext(request_id=request_id, agent_id=identity.agent_id)


ContextDep = Annotated[RequestContext, Depends(_request_context)]


def _render(result: ActionResult, *, context: RequestContext) -> Response:
    headers = {"X-Request-Id": context.request_id}
    if result.value is None and result.status_code in _BODILESS_ERRORS:
        code, message = _BODILESS_ERRORS[result.status_code]
        raise OrderAPIError(
            status_code=result.status_code,
            code=code,
            message=message,
            request_id=context.request_id,
        )
    if result.location is not None:
        headers["Location"] = result.location
    return JSONResponse(
        status_code=result.status_code,
        content=jsonable_encoder(result.value),
        headers=headers,
    )


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def get_health_v1() -> HealthResponse:
    return HealthResponse(
        status="ok",
        service="ordre-change-order-api",
        timestamp=datetime.now(tz=UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
    )


@router.post(
    "/orders",
    response_model=Order,
    status_code=status.HTTP_201_CREATED,
    tags=["Orders"],
)
async def create_order_v1(
    request: CreateOrderRequest,
    context: ContextDep,
) -> Response:
    return _render(await _controller.create_order(request=request, context=context), context=context)


@router.get("/orders/status-counts", response_model=OrderStatusCounts, tags=["Orders"])
async def get_order_status_counts_v1(context: ContextDep) -> Response:
    return _render(await _controller.get_status_counts(context=context), context=context)


@router.get("/orders/by-status/{orderStatus}", response_model=list[Order], tags=["Orders"])
async def list_orders_by_status_v1(
    orderStatus: OrderStatus,
    context: ContextDep,
) -> Response:
    return _render(await _controller.list_by_status(status=orderStatus, context=context), context=context)


@router.get("/orders/{orderId}", response_model=Order, tags=["Orders"])
async def get_order_v1(
    orderId: int,
    context: ContextDep,
) -> Response:
    return _render(await _controller.get_order(order_id=orderId), context=context)


@router.put("/orders/{orderId}", response_model=str, tags=["Orders"])
async def modify_order_v1(
    orderId: int,
    request: ModifyOrderRequest,
    context: ContextDep,
) -> Response:
    return _render(
        await _controller.modify_order(order_id=orderId, request=request, context=context),
        context=context,
    )


@router.post("/orders/{orderId}/cancel", response_model=str, tags=["Order transitions"])
async def cancel_order_v1(
    orderId: int,
    context: ContextDep,
) -> Response:
    return _render(await _controller.cancel_order(order_id=orderId, context=context), context=context)


@router.post("/orders/{orderId}/validate", response_model=str, tags=["Order transitions"])
async def validate_order_v1(
    orderId: int,
    context: ContextDep,
) -> Response:
    return _render(await _controller.validate_order(order_id=orderId, context=context), context=context)


@router.post("/orders/{orderId}/refuse", response_model=str, tags=["Order transitions"])
async def refuse_order_v1(
    orderId: int,
    context: ContextDep,
) -> Response:
    return _render(await _controller.refuse_order(order_id=orderId, context=context), context=context)


@router.get("/orders/{orderId}/history", response_model=OrderHistory, tags=["Orders"])
async def get_order_history_v1(
    orderId: int,
    context: ContextDep,
) -> Response:
    return _render(await _controller.get_history(order_id=orderId, context=context), context=context)
