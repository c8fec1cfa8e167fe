from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class NotificationRead(BaseModel):
    id: int
    restaurant_id: int
    alert_id: str

    product_id: str
    product_name: str
    type: str
    priority: str
    message: str
    action_required: bool
    suggested_quantity: float | None = None
    expiry_date: date | None = None

    is_read: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    items: list[NotificationRead]


class NotificationSummary(BaseModel):
    total: int
    unread: int
    critical: int
    by_type: dict[str, int]


class NotificationSyncResult(BaseModel):
    restaurant_id: int
    created: int
    updated: int
    deactivated: int
    active: int


class MarkAllReadResult(BaseModel):
    updated: int
