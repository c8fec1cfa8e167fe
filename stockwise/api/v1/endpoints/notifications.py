from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from stockwise.api.v1.endpoints.restaurant import get_restaurant_or_404
from stockwise.core.db import get_db
from stockwise.schemas.alerts import AlertPriority, AlertType
from stockwise.schemas.notifications import (
    MarkAllReadResult,
    NotificationListResponse,
    NotificationRead,
    NotificationSummary,
    NotificationSyncResult,
)
from stockwise.services.notifications import (
    get_notification_summary,
    list_notifications,
    mark_all_read,
    mark_notification_read,
    sync_notifications,
)


router = APIRouter()


@router.get("/", response_model=NotificationListResponse)
def get_notifications(
    restaurant_id: int,
    unread_only: bool = False,
    priority: AlertPriority | None = None,
    type: AlertType | None = None,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    rows = list_notifications(
        db,
        restaurant_id,
        unread_only=unread_only,
        priority=priority.value if priority else None,
        type=type.value if type else None,
    )
    return NotificationListResponse(
        items=[NotificationRead.model_validate(row, from_attributes=True) for row in rows]
    )


@router.get("/summary", response_model=NotificationSummary)
def get_summary(restaurant_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    return get_notification_summary(db, restaurant_id)


@router.post("/sync", response_model=NotificationSyncResult)
def sync(restaurant_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    return sync_notifications(db, restaurant_id, datetime.now(timezone.utc))


@router.post("/read-all", response_model=MarkAllReadResult)
def read_all(restaurant_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    return MarkAllReadResult(updated=mark_all_read(db, restaurant_id))


@router.post("/{id}/read", response_model=NotificationRead)
def read_one(id: int, db: Session = Depends(get_db)):
    row = mark_notification_read(db, id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return row
