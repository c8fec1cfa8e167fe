from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from stockwise.core.config import VELOCITY_WINDOW_DAYS
from stockwise.core.forecasting.alerts import compute_sales_velocity, generate_alerts
from stockwise.schemas.alerts import Alert
from stockwise.services.inventory_snapshot import load_consumption_records, load_product_states


def build_restaurant_alerts(
    db: Session,
    restaurant_id: int,
    now: datetime,
    velocity_window_days: int = VELOCITY_WINDOW_DAYS,
) -> list[Alert]:
    today = now.date()

    products = load_product_states(db, restaurant_id)
    if not products:
        return []

    records = load_consumption_records(
        db,
        restaurant_id,
        today - timedelta(days=velocity_window_days),
        today,
    )
    velocity = compute_sales_velocity(records, today, window_days=velocity_window_days)

    return generate_alerts(
        products,
        {product_id: v.velocity for product_id, v in velocity.items()},
        now=now,
    )
