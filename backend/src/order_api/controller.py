"""Order controller: maps OrderService results onto HTTP-shaped action results.

The controller holds no state and knows nothing about the web framework. Each
operation receives the caller identity explicitly through ``RequestContext``
and returns an :class:`ActionResult` that the router renders.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from src.order_api.observability import log_context_event
from src.order_api.schemas import (
    ORDER_STATUS_CANCELLED,
    ORDER_STATUS_TO_MODIFY,
    ORDER_STATUS_VALIDATED,
    CreateOrderRequest,
    ModifyOrderRequest,
    OrderStatus,
    RequestContext,
    TransitionOutcome,
)
from src.order_api.services.order_service import OrderService

logger = logging.getLogger(__name__)

CANCEL_SUCCEEDED_MESSAGE = "Annulation de l'ordre effectué avec succès"
VALIDATE_SUCCEEDED_MESSAGE = "Ordre validé avec succès."
REFUSE_SUCCEEDED_MESSAGE = "Refus de l'ordre effectué avec succès."
MODIFY_SUCCEEDED_MESSAGE = "Modification de l'ordre effectuée avec succès."
STATUS_CHANGE_REJECTED_MESSAGE = "Le statut de l'ordre ne peut pas être changé."
VALIDATE_REJECTED_MESSAGE = "L'ordre ne peut pas être validé."
MODIFY_REJECTED_MESSAGE = "L'ordre ne peut pas être modifié."
FORBIDDEN_MESSAGE = "Opération non autorisée."


def history_not_found_message(order_id: int) -> str:
    return f"Aucun historique trouvé pour l'ordre {order_id}."


def status_not_found_message(status: str) -> str:
    return f"Aucun ordre trouvé avec le statut '{status}'."


@dataclass(frozen=True)
class ActionResult:
    """Framework-neutral response: status code, optional body, optional location."""

    status_code: int
    value: Any = None
    location: str | None = None


def ok(value: Any) -> ActionResult:
    return ActionResult(status_code=200, value=value)


def created(value: Any, *, location: str) -> ActionResult:
    return ActionResult(status_code=201, value=value, location=location)


def bad_request(message: str) -> ActionResult:
    return ActionResult(status_code=400, value=message)


def forbidden() -> ActionResult:
    return ActionResult(status_code=403)


def not_found(message: str | None = None) -> ActionResult:
    return ActionResult(status_code=404, value=message)


@dataclass(frozen=True)
class _TransitionMessages:
    succeeded: str
    rejected: str


_CANCEL = _TransitionMessages(CANCEL_SUCCEEDED_MESSAGE, STATUS_CHANGE_REJECTED_MESSAGE)
_VALIDATE = _TransitionMessages(VALIDATE_SUCCEEDED_MESSAGE, VALIDATE_REJECTED_MESSAGE)
_REFUSE = _TransitionMessages(REFUSE_SUCCEEDED_MESSAGE, STATUS_CHANGE_REJECTED_MESSAGE)
_MODIFY = _TransitionMessages(MODIFY_SUCCEEDED_MESSAGE, MODIFY_REJECTED_MESSAGE)


class OrderController:
    """Thin adapter between order routes and an injected OrderService."""

    def __init__(self, service: OrderService, *, location_prefix: str = "/v1/orders") -> None:
        self._service = service
        self._location_prefix = location_prefix.rstrip("/")

    async def create_order(self, *, request: CreateOrderRequest, context: RequestContext) -> ActionResult:
        order = await self._service.create_order(
            agent_id=context.agent_id,
            transaction_type=request.transactionType,
            amount=request.amount,
            currency=request.currency,
            target_currency=request.targetCurrency,
        )
        log_context_event(
            logger,
            level=logging.INFO,
            message="Order created.",
            context=context,
            component="orders",
            operation="create_order",
            resource_type="order",
            resource_id=order.id,
            status_code=201,
        )
        return created(order, location=f"{self._location_prefix}/{order.id}")

    async def get_order(self, *, order_id: int) -> ActionResult:
        order = await self._service.get_order(order_id=order_id)
        if order is None:
            return not_found()
        return ok(order)

    async def cancel_order(self, *, order_id: int, context: RequestContext) -> ActionResult:
        return await self._change_status(
            order_id=order_id,
            status=ORDER_STATUS_CANCELLED,
            messages=_CANCEL,
            operation="cancel_order",
            context=context,
        )

    async def validate_order(self, *, order_id: int, context: RequestContext) -> ActionResult:
        return await self._change_status(
            order_id=order_id,
            status=ORDER_STATUS_VALIDATED,
            messages=_VALIDATE,
            operation="validate_order",
            context=context,
        )

    async def refuse_order(self, *, order_id: int, context: RequestContext) -> ActionResult:
        return await self._change_status(
            order_id=order_id,
            status=ORDER_STATUS_TO_MODIFY,
            messages=_REFUSE,
            operation="refuse_order",
            context=context,
        )

    async def modify_order(
        self,
        *,
        order_id: int,
        request: ModifyOrderRequest,
        context: RequestContext,
    ) -> ActionResult:
        outcome = await self._service.modify_order(
            order_id=order_id,
            agent_id=context.agent_id,
            request=request,
        )
        return self._transition_result(
            outcome,
            messages=_MODIFY,
            order_id=order_id,
            operation="modify_order",
            context=context,
        )

    async def get_status_counts(self, *, context: RequestContext) -> ActionResult:
        counts = await self._service.get_status_counts(agent_id=context.agent_id)
        return ok(counts)

    async def get_history(self, *, order_id: int, context: RequestContext) -> ActionResult:
        history = await self._service.get_history(agent_id=context.agent_id, order_id=order_id)
        if history is None or not history.entries:
            return not_found(history_not_found_message(order_id))
        return ok(history)

    async def list_by_status(self, *, status: OrderStatus, context: RequestContext) -> ActionResult:
        orders = await self._service.list_by_status(agent_id=context.agent_id, status=status)
        if not orders:
            return not_found(status_not_found_message(status))
        return ok(orders)

    async def _change_status(
        self,
        *,
        order_id: int,
        status: OrderStatus,
        messages: _TransitionMessages,
        operation: str,
        context: RequestContext,
    ) -> ActionResult:
        outcome = await self._service.update_status(
            order_id=order_id,
            agent_id=context.agent_id,
            status=status,
        )
        return self._transition_result(
            outcome,
            messages=messages,
            order_id=order_id,
            operation=operation,
            context=context,
            targetStatus=status,
        )

    def _transition_result(
        self,
        outcome: TransitionOutcome,
        *,
        messages: _TransitionMessages,
        order_id: int,
        operation: str,
        context: RequestContext,
        **details: object,
    ) -> ActionResult:
        if outcome == "succeeded":
            result, level = ok(messages.succeeded), logging.INFO
        elif outcome == "unauthorized":
            result, level = forbidden(), logging.WARNING
        else:
            result, level = bad_request(messages.rejected), logging.WARNING
        log_context_event(
            logger,
            level=level,
            message=f"Order transition {outcome}.",
            context=context,
            component="orders",
            operation=operation,
            resource_type="order",
            resource_id=order_id,
            status_code=result.status_code,
            outcome=outcome,
            **details,
        )
        return result
