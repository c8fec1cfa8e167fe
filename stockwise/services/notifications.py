from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime

from sqlalchemy.orm import Session

from stockwise.models.models import Notification
from stockwise.schemas.alerts import Alert, AlertPriority
from stockwise.schemas.notifications import NotificationSummary, NotificationSyncResult
from stockwise.services.sales_alerts import build_restaurant_alerts


logger = logging.getLogger(__name__)


def _apply_alert(row: Notification, alert: Alert, now: datetime) -> None:
    row.product_id = str(alert.product_id)
    row.product_name = alert.product_name
    row.type = alert.type.value
    row.priority = alert.priority.value
    row.message = alert.message
    row.action_required = alert.action_required
    row.suggested_quantity = alert.suggested_quantity
    row.expiry_date = alert.expiry_date
    row.updated_at = now


def sync_notifications(db: Session, restaurant_id: int, now: datetime) -> NotificationSyncResult:
    """Merge freshly generated alerts into stored notifications.

    Rows are matched on the alert id. Read-state survives while the alert
    stays active; an alert that disappears is deactivated, and one that comes
    back later is treated as new again.
    """

    alerts = build_restaurant_alerts(db, restaurant_id, now)

    existing = {
        row.alert_id: row
        for row in db.query(Notification).filter(Notification.restaurant_id == restaurant_id).all()
    }

    created = updated = deactivated = 0
    seen: set[str] = set()

    for alert in alerts:
        seen.add(alert.id)
        row = existing.get(alert.id)

        if row is None:
            row = Notification(
                restaurant_id=restaurant_id,
                alert_id=alert.id,
                is_read=False,
                is_active=True,
                created_at=now,
            )
            _apply_alert(row, alert, now)
            db.add(row)
            created += 1
            continue

        if not row.is_active:
            row.is_active = True
            row.is_read = False
            row.created_at = now
        _apply_alert(row, alert, now)
        updated += 1

    for alert_id, row in existing.items():
        if alert_id not in seen and row.is_active:
            row.is_active = False
            row.updated_at = now
            deactivated += 1

    db.commit()

    logger.info(
        "Notification sync for restaurant %s: created=%s updated=%s deactivated=%s",
        restaurant_id,
        created,
        updated,
        deactivated,
    )

    return NotificationSyncResult(
        restaurant_id=restaurant_id,
        created=created,
        updated=updated,
        deactivated=deactivated,
        active=len(seen),
    )


def list_notifications(
    db: Session,
    restaurant_id: int,
    unread_only: bool = False,
    priority: str | None = None,
    type: str | None = None,
    include_inactive: bool = False,
) -> list[Notification]:
    query = db.query(Notification).filter(Notification.restaurant_id == restaurant_id)

    if not include_inactive:
        query = query.filter(Notification.is_active.is_(True))
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    if priority is not None:
        query = query.filter(Notification.priority == priority)
    if type is not None:
        query = query.filter(Notification.type == type)

    return query.order_by(Notification.created_at.desc(), Notification.id).all()


def get_notification_summary(db: Session, restaurant_id: int) -> NotificationSummary:
    rows = list_notifications(db, restaurant_id)
    unread = [row for row in rows if not row.is_read]

    return NotificationSummary(
        total=len(rows),
        unread=len(unread),
        critical=sum(1 for row in unread if row.priority == AlertPriority.CRITICAL.value),
        by_type=dict(Counter(row.type for row in rows)),
    )


def mark_notification_read(db: Session, notification_id: int) -> Notification | None:
    row = db.query(Notification).filter(Notification.id == notification_id).first()
    if row is None:
        return None

    row.is_read = True
    db.commit()
    db.refresh(row)
    return row


def mark_all_read(db: Session, restaurant_id: int) -> int:
    rows = list_notifications(db, restaurant_id, unread_only=True)
    for row in rows:
        row.is_read = True
    db.commit()
    return len(rows)
