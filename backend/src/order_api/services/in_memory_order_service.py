"""Process-local OrderService baseline backed by the in-memory state store."""

from __future__ import annotations

import logging

from src.order_api.schemas import (
    ORDER_STATUS_CANCELLED,
    ORDER_STATUS_PENDING,
    ORDER_STATUS_TO_MODIFY,
    ORDER_STATUS_VALIDATED,
    ModifyOrderRequest,
    Order,
    OrderHistory,
    OrderHistoryEntry,
    OrderStatus,
    OrderStatusCounts,
    TransactionType,
    TransitionOutcome,
)
from src.order_api.state_store import HistoryRecord, InMemoryStateStore, OrderRecord, utc_now

logger = logging.getLogger(__name__)

_TERMINAL_STATUSES = {ORDER_STATUS_VALIDATED, ORDER_STATUS_CANCELLED}
_MODIFIABLE_STATUSES = {ORDER_STATUS_PENDING, ORDER_STATUS_TO_MODIFY}


def order_to_model(record: OrderRecord) -> Order:
    return Order(
        id=record.id,
        agentId=record.agent_id,
        transactionType=record.transaction_type,
        amount=record.amount,
        currency=record.currency,
        targetCurrency=record.target_currency,
        status=record.status,
        createdAt=record.created_at,
        updatedAt=record.updated_at,
    )


class InMemoryOrderService:
    """Thin-slice OrderService used when no external order backend is wired in."""

    def __init__(self, *, store: InMemoryStateStore) -> None:
        self._store = store

    async def create_order(
        self,
        *,
        agent_id: int,
        transaction_type: TransactionType,
        amount: float,
        currency: str,
        target_currency: str,
    ) -> Order:
        record = OrderRecord(
            id=self._store.next_order_id(),
            agent_id=agent_id,
            transaction_type=transaction_type,
            amount=amount,
            currency=currency,
            target_currency=target_currency,
            status=ORDER_STATUS_PENDING,
        )
        self._store.orders[record.id] = record
        self._store.append_history(
            HistoryRecord(order_id=record.id, status=record.status, agent_id=agent_id, note="created")
        )
        return order_to_model(record)

    async def get_order(self, *, order_id: int) -> Order | None:
        record = self._store.orders.get(order_id)
        return order_to_model(record) if record is not None else None

    async def update_status(
        self,
        *,
        order_id: int,
        agent_id: int,
        status: OrderStatus,
    ) -> TransitionOutcome:
        record = self._store.orders.get(order_id)
        if record is None:
            return "rejected"
        if record.agent_id != agent_id:
            return "unauthorized"
        if record.status in _TERMINAL_STATUSES or record.status == status:
            logger.debug("Order %s cannot move from %s to %s.", order_id, record.status, status)
            return "rejected"

        record.status = status
        record.updated_at = utc_now()
        self._store.append_history(HistoryRecord(order_id=order_id, status=status, agent_id=agent_id))
        return "succeeded"

    async def modify_order(
        self,
        *,
        order_id: int,
        agent_id: int,
        request: ModifyOrderRequest,
    ) -> TransitionOutcome:
        record = self._store.orders.get(order_id)
        if record is None:
            return "rejected"
        if record.agent_id != agent_id:
            return "unauthorized"
        if record.status not in _MODIFIABLE_STATUSES:
            return "rejected"

        record.transaction_type = request.transactionType
        record.amount = request.amount
        record.currency = request.currency
        record.target_currency = request.targetCurrency
        record.status = ORDER_STATUS_PENDING
        record.updated_at = utc_now()
        self._store.append_history(
            HistoryRecord(order_id=order_id, status=record.status, agent_id=agent_id, note="modified")
        )
        return "succeeded"

    async def get_status_counts(self, *, agent_id: int) -> OrderStatusCounts:
        counts = OrderStatusCounts()
        for record in self._store.orders_for_agent(agent_id):
            if record.status == ORDER_STATUS_PENDING:
                counts.pending += 1
            elif record.status == ORDER_STATUS_VALIDATED:
                counts.validated += 1
            elif record.status == ORDER_STATUS_CANCELLED:
                counts.cancelled += 1
            elif record.status == ORDER_STATUS_TO_MODIFY:
                counts.toModify += 1
        return counts

    async def get_history(self, *, agent_id: int, order_id: int) -> OrderHistory | None:
        record = self._store.orders.get(order_id)
        if record is None or record.agent_id != agent_id:
            return None
        entries = self._store.history.get(order_id, [])
        if not entries:
            return None
        return OrderHistory(
            orderId=order_id,
            entries=[
                OrderHistoryEntry(
                    status=entry.status,
                    agentId=entry.agent_id,
                    changedAt=entry.changed_at,
                    note=entry.note,
                )
                for entry in entries
            ],
        )

    async def list_by_status(self, *, agent_id: int, status: OrderStatus) -> list[Order]:
        return [
            order_to_model(record)
            for record in self._store.orders_for_agent(agent_id)
            if record.status == status
        ]
