from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AlertType(str, Enum):
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    RESTOCK_SUGGESTION = "restock_suggestion"
    HIGH_SALES = "high_sales"


class AlertPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Alert(BaseModel):
    id: str
    product_id: Any
    product_name: str

    type: AlertType
    priority: AlertPriority
    message: str

    action_required: bool = False
    suggested_quantity: float | None = Field(default=None, ge=0)
    expiry_date: date | None = None

    is_read: bool = False
    created_at: datetime


class SalesVelocity(BaseModel):
    product_id: Any
    total_sold: float
    active_days: int
    velocity: float


class AlertSummary(BaseModel):
    total: int
    unread: int
    critical: int
    by_type: dict[str, int]


class AlertsResponse(BaseModel):
    restaurant_id: int
    summary: AlertSummary
    items: list[Alert]
