"""Order service contract consumed by the order controller."""

from __future__ import annotations

from typing import Protocol

from src.order_api.schemas import (
    ModifyOrderRequest,
    Order,
    OrderHistory,
    OrderStatus,
    OrderStatusCounts,
    TransactionType,
    TransitionOutcome,
)


class OrderService(Protocol):
    """Business-facing order contract.

    Authorization and transition legality are decided here; callers only see
    the resulting ``TransitionOutcome``.
    """

    async def create_order(
        self,
        *,
        agent_id: int,
        transaction_type: TransactionType,
        amount: float,
        currency: str,
        target_currency: str,
    ) -> Order:
        ...

    async def get_order(self, *, order_id: int) -> Order | None:
        ...

    async def update_status(
        self,
        *,
        order_id: int,
        agent_id: int,
        status: OrderStatus,
    ) -> TransitionOutcome:
        ...

    async def modify_order(
        self,
        *,
        order_id: int,
        agent_id: int,
        request: ModifyOrderRequest,
    ) -> TransitionOutcome:
        ...

    async def get_status_counts(self, *, agent_id: int) -> OrderStatusCounts:
        ...

    async def get_history(self, *, agent_id: int, order_id: int) -> OrderHistory | None:
        ...

    async def list_by_status(self, *, agent_id: int, status: OrderStatus) -> list[Order]:
        ...
