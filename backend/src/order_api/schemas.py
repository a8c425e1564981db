"""Pydantic models for the Ordre Change order API v1 surface."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


TransactionType = Literal["Achat", "Vente"]
OrderStatus = Literal["En attente", "Validé", "Annulé", "A modifier"]
TransitionOutcome = Literal["succeeded", "rejected", "unauthorized"]

ORDER_STATUS_PENDING: OrderStatus = "En attente"
ORDER_STATUS_VALIDATED: OrderStatus = "Validé"
ORDER_STATUS_CANCELLED: OrderStatus = "Annulé"
ORDER_STATUS_TO_MODIFY: OrderStatus = "A modifier"


class RequestContext(BaseModel):
    """Per-request identity and correlation fields."""

    request_id: str
    agent_id: int = Field(gt=0)


class HealthResponse(BaseModel):
    status: Literal["ok"]
    service: str
    timestamp: str


class Order(BaseModel):
    id: int
    agentId: int
    transactionType: TransactionType
    amount: float
    currency: str
    targetCurrency: str
    status: OrderStatus
    createdAt: str
    updatedAt: str


class _OrderPayload(BaseModel):
    transactionType: TransactionType
    amount: float = Field(gt=0)
    currency: str = Field(min_length=3, max_length=3)
    targetCurrency: str = Field(min_length=3, max_length=3)

    @field_validator("currency", "targetCurrency", mode="before")
    @classmethod
    def _normalize_currency(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("currency", "targetCurrency")
    @classmethod
    def _require_alphabetic(cls, value: str) -> str:
        if not (value.isascii() and value.isalpha()):
            raise ValueError("currency codes must be alphabetic")
        return value


class CreateOrderRequest(_OrderPayload):
    pass


class ModifyOrderRequest(_OrderPayload):
    pass


class OrderHistoryEntry(BaseModel):
    status: OrderStatus
    agentId: int
    changedAt: str
    note: str | None = None


class OrderHistory(BaseModel):
    orderId: int
    entries: list[OrderHistoryEntry] = Field(default_factory=list)


class OrderStatusCounts(BaseModel):
    pending: int = 0
    validated: int = 0
    cancelled: int = 0
    toModify: int = 0
