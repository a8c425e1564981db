"""In-memory state for the thin-slice order API baseline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from itertools import count


def utc_now() -> str:
    return datetime.now(tz=UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass
class OrderRecord:
    id: int
    agent_id: int
    transaction_type: str
    amount: float
    currency: str
    target_currency: str
    status: str
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)


@dataclass
class HistoryRecord:
    order_id: int
    status: str
    agent_id: int
    changed_at: str = field(default_factory=utc_now)
    note: str | None = None


class InMemoryStateStore:
    """Process-local order and history storage."""

    def __init__(self) -> None:
        self.orders: dict[int, OrderRecord] = {}
        self.history: dict[int, list[HistoryRecord]] = {}
        self._order_ids = count(1)

    def next_order_id(self) -> int:
        return next(self._order_ids)

    def append_history(self, record: HistoryRecord) -> None:
        self.history.setdefault(record.order_id, []).append(record)

    def orders_for_agent(self, agent_id: int) -> list[OrderRecord]:
        return [record for record in self.orders.values() if record.agent_id == agent_id]

    def reset(self) -> None:
        self.orders.clear()
        self.history.clear()
        self._order_ids = count(1)
