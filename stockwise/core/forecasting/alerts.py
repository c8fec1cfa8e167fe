from __future__ import annotations

import math
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Hashable, Iterable, Mapping, Optional

from stockwise.core.forecasting.domain import ConsumptionRecord, ProductState
from stockwise.schemas.alerts import Alert, AlertPriority, AlertSummary, AlertType, SalesVelocity


EXPIRY_URGENT_DAYS = 3
EXPIRY_NOTICE_DAYS = 7

RESTOCK_SUGGESTION_FACTOR = 1.5

HIGH_SALES_STDDEV_FACTOR = 1.5
HIGH_SALES_MIN_VELOCITY = 2.0
STOCKOUT_WARNING_DAYS = 3
URGENT_RESTOCK_DAYS = 2

HIGH_SALES_COVER_DAYS = 7
STOCKOUT_WARNING_COVER_DAYS = 10
URGENT_RESTOCK_COVER_DAYS = 14


def alert_id(kind: str, product_id: Hashable) -> str:
    return f"{kind}_{product_id}"


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _stock_alert(product: ProductState, now: datetime) -> Optional[Alert]:
    if product.current_stock > product.min_stock:
        return None

    target = max(product.max_stock or 0, product.min_stock * 2)
    suggested = max(target - product.current_stock, 0)

    if product.current_stock == 0:
        return Alert(
            id=alert_id("out_of_stock", product.product_id),
            product_id=product.product_id,
            product_name=product.name,
            type=AlertType.OUT_OF_STOCK,
            priority=AlertPriority.CRITICAL,
            message=f"{product.name} is completely out of stock.",
            action_required=True,
            suggested_quantity=suggested,
            created_at=now,
        )

    return Alert(
        id=alert_id("low_stock", product.product_id),
        product_id=product.product_id,
        product_name=product.name,
        type=AlertType.LOW_STOCK,
        priority=AlertPriority.HIGH,
        message=(
            f"Low stock: {product.name} has only {_fmt(product.current_stock)} {product.unit} "
            f"(minimum: {_fmt(product.min_stock)})."
        ),
        action_required=True,
        suggested_quantity=suggested,
        created_at=now,
    )


def _expiry_alert(product: ProductState, now: datetime) -> Optional[Alert]:
    if product.expiry_date is None:
        return None

    days_to_expiry = (product.expiry_date - now.date()).days

    if days_to_expiry < 0:
        return Alert(
            id=alert_id("expired", product.product_id),
            product_id=product.product_id,
            product_name=product.name,
            type=AlertType.EXPIRED,
            priority=AlertPriority.CRITICAL,
            message=f"{product.name} expired {abs(days_to_expiry)} days ago. Remove it from stock.",
            action_required=True,
            expiry_date=product.expiry_date,
            created_at=now,
        )

    if days_to_expiry <= EXPIRY_URGENT_DAYS:
        return Alert(
            id=alert_id("expiring_soon", product.product_id),
            product_id=product.product_id,
            product_name=product.name,
            type=AlertType.EXPIRING_SOON,
            priority=AlertPriority.HIGH,
            message=f"{product.name} expires in {days_to_expiry} days. Use it first or promote it.",
            action_required=True,
            expiry_date=product.expiry_date,
            created_at=now,
        )

    if days_to_expiry <= EXPIRY_NOTICE_DAYS:
        return Alert(
            id=alert_id("expiring_soon", product.product_id),
            product_id=product.product_id,
            product_name=product.name,
            type=AlertType.EXPIRING_SOON,
            priority=AlertPriority.MEDIUM,
            message=f"{product.name} expires in {days_to_expiry} days. Keep an eye on usage.",
            expiry_date=product.expiry_date,
            created_at=now,
        )

    return None


def _restock_suggestion(product: ProductState, now: datetime) -> Optional[Alert]:
    if not (0 < product.current_stock <= product.min_stock * RESTOCK_SUGGESTION_FACTOR):
        return None

    target = product.max_stock or product.min_stock * 3
    suggested = max(target - product.current_stock, 0)

    return Alert(
        id=alert_id("restock_suggestion", product.product_id),
        product_id=product.product_id,
        product_name=product.name,
        type=AlertType.RESTOCK_SUGGESTION,
        priority=AlertPriority.MEDIUM,
        message=(
            f"Consider restocking {product.name}. Current stock: {_fmt(product.current_stock)} "
            f"{product.unit}. Suggested purchase: {_fmt(suggested)} {product.unit}."
        ),
        suggested_quantity=suggested,
        created_at=now,
    )


def _velocity_alerts(
    product: ProductState,
    velocity: float,
    high_sales_threshold: float,
    now: datetime,
) -> list[Alert]:
    alerts: list[Alert] = []
    stock = product.current_stock

    if velocity > high_sales_threshold and velocity > HIGH_SALES_MIN_VELOCITY:
        alerts.append(
            Alert(
                id=alert_id("high_sales", product.product_id),
                product_id=product.product_id,
                product_name=product.name,
                type=AlertType.HIGH_SALES,
                priority=AlertPriority.MEDIUM,
                message=(
                    f"{product.name} is selling unusually fast ({velocity:.1f} units/day). "
                    "Consider increasing stock."
                ),
                action_required=True,
                suggested_quantity=math.ceil(velocity * HIGH_SALES_COVER_DAYS),
                created_at=now,
            )
        )

    if velocity <= 0:
        return alerts

    stockout_days = math.floor(stock / velocity)
    if stock > 0 and 0 < stockout_days <= STOCKOUT_WARNING_DAYS:
        alerts.append(
            Alert(
                id=alert_id("stockout_warning", product.product_id),
                product_id=product.product_id,
                product_name=product.name,
                type=AlertType.OUT_OF_STOCK,
                priority=AlertPriority.CRITICAL if stockout_days <= 1 else AlertPriority.HIGH,
                message=(
                    f"{product.name} may run out in {stockout_days} days at the current "
                    f"sales rate ({velocity:.1f}/day)."
                ),
                action_required=True,
                suggested_quantity=math.ceil(velocity * STOCKOUT_WARNING_COVER_DAYS),
                created_at=now,
            )
        )

    if stock < velocity * URGENT_RESTOCK_DAYS:
        alerts.append(
            Alert(
                id=alert_id("urgent_restock", product.product_id),
                product_id=product.product_id,
                product_name=product.name,
                type=AlertType.RESTOCK_SUGGESTION,
                priority=AlertPriority.HIGH,
                message=(
                    f"Urgent restock needed for {product.name}. Current sales: "
                    f"{velocity:.1f}/day, stock: {_fmt(stock)} {product.unit}."
                ),
                action_required=True,
                suggested_quantity=math.ceil(velocity * URGENT_RESTOCK_COVER_DAYS),
                created_at=now,
            )
        )

    return alerts


def _high_sales_threshold(velocities: Iterable[float]) -> float:
    """Population mean plus 1.5 standard deviations of all velocities."""

    values = list(velocities)
    if not values:
        return math.inf

    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return mean + HIGH_SALES_STDDEV_FACTOR * math.sqrt(variance)


def generate_alerts(
    products: Iterable[ProductState],
    sales_velocity_by_product: Optional[Mapping[Hashable, float]] = None,
    now: Optional[datetime] = None,
) -> list[Alert]:
    """Evaluate every alert rule against the product snapshot.

    ``now`` should always be passed by callers that need reproducible output;
    it defaults to the current UTC time.
    """

    if now is None:
        now = datetime.now(timezone.utc)

    velocities = sales_velocity_by_product or {}
    threshold = _high_sales_threshold(velocities.values())

    alerts: list[Alert] = []

    for product in products:
        for rule in (_stock_alert, _expiry_alert, _restock_suggestion):
            alert = rule(product, now)
            if alert is not None:
                alerts.append(alert)

        velocity = velocities.get(product.product_id)
        if velocity is not None:
            alerts.extend(_velocity_alerts(product, float(velocity), threshold, now))

    return alerts


def compute_sales_velocity(
    records: Iterable[ConsumptionRecord],
    today: date,
    window_days: int = 7,
) -> dict[Hashable, SalesVelocity]:
    """Average quantity per active day over the last ``window_days`` days."""

    start = today - timedelta(days=window_days)
    totals: dict[Hashable, float] = {}
    active_days: dict[Hashable, set[date]] = {}

    for record in records:
        if record.date < start or record.date > today:
            continue
        totals[record.product_id] = totals.get(record.product_id, 0.0) + float(record.quantity)
        active_days.setdefault(record.product_id, set()).add(record.date)

    result: dict[Hashable, SalesVelocity] = {}
    for product_id, total in totals.items():
        days = len(active_days[product_id])
        result[product_id] = SalesVelocity(
            product_id=product_id,
            total_sold=total,
            active_days=days,
            velocity=total / max(days, 1),
        )
    return result


def summarize_alerts(alerts: Iterable[Alert]) -> AlertSummary:
    items = list(alerts)
    unread = [a for a in items if not a.is_read]
    by_type = Counter(a.type.value for a in items)

    return AlertSummary(
        total=len(items),
        unread=len(unread),
        critical=sum(1 for a in unread if a.priority == AlertPriority.CRITICAL),
        by_type=dict(by_type),
    )
