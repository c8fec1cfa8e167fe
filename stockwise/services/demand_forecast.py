from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from stockwise.core.config import FORECAST_WINDOW_DAYS
from stockwise.core.forecasting.forecaster import build_demand_trends, compute_forecasts
from stockwise.schemas.forecast import DemandForecast, DemandTrend
from stockwise.services.inventory_snapshot import load_consumption_records, load_product_states


logger = logging.getLogger(__name__)


def build_restaurant_forecasts(
    db: Session,
    restaurant_id: int,
    today: date,
    window_days: int = FORECAST_WINDOW_DAYS,
) -> list[DemandForecast]:
    """Forecast demand for every item of a restaurant with recent consumption."""

    start_date = today - timedelta(days=window_days)
    records = load_consumption_records(db, restaurant_id, start_date, today)
    if not records:
        logger.info(
            "No consumption history for restaurant %s in the last %s days",
            restaurant_id,
            window_days,
        )
        return []

    products = load_product_states(db, restaurant_id)
    current_stock = {p.product_id: p.current_stock for p in products}
    names = {p.product_id: p.name for p in products}

    forecasts = compute_forecasts(records, current_stock, today, product_names=names)
    logger.info(
        "Computed %s forecasts for restaurant %s from %s records",
        len(forecasts),
        restaurant_id,
        len(records),
    )
    return forecasts


def build_restaurant_trends(
    db: Session,
    restaurant_id: int,
    now: datetime,
    window_days: int = FORECAST_WINDOW_DAYS,
) -> list[DemandTrend]:
    today = now.date()
    records = load_consumption_records(db, restaurant_id, today - timedelta(days=window_days), today)
    return build_demand_trends(records, now)
