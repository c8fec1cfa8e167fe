from datetime import date, datetime, time, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stockwise.api.v1.endpoints.restaurant import get_restaurant_or_404
from stockwise.core.config import FORECAST_WINDOW_DAYS
from stockwise.core.db import get_db
from stockwise.core.forecasting.forecaster import get_critical_stock_products, get_high_demand_products
from stockwise.schemas.forecast import DemandTrendResponse, ForecastResponse
from stockwise.services.demand_forecast import build_restaurant_forecasts, build_restaurant_trends


router = APIRouter()


def _resolve_today(as_of: date | None) -> date:
    return as_of or datetime.now(timezone.utc).date()


@router.get("/", response_model=ForecastResponse)
def get_forecasts(
    restaurant_id: int,
    window_days: int = Query(FORECAST_WINDOW_DAYS, ge=1, le=365),
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    today = _resolve_today(as_of)

    items = build_restaurant_forecasts(db, restaurant_id, today, window_days=window_days)
    return ForecastResponse(
        restaurant_id=restaurant_id,
        generated_on=today,
        window_days=window_days,
        items=items,
    )


@router.get("/high-demand", response_model=ForecastResponse)
def get_high_demand(
    restaurant_id: int,
    limit: int = Query(10, ge=1, le=100),
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    today = _resolve_today(as_of)

    forecasts = build_restaurant_forecasts(db, restaurant_id, today)
    return ForecastResponse(
        restaurant_id=restaurant_id,
        generated_on=today,
        window_days=FORECAST_WINDOW_DAYS,
        items=get_high_demand_products(forecasts, limit=limit),
    )


@router.get("/critical", response_model=ForecastResponse)
def get_critical_stock(
    restaurant_id: int,
    days_threshold: int = Query(7, ge=1, le=365),
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    today = _resolve_today(as_of)

    forecasts = build_restaurant_forecasts(db, restaurant_id, today)
    return ForecastResponse(
        restaurant_id=restaurant_id,
        generated_on=today,
        window_days=FORECAST_WINDOW_DAYS,
        items=get_critical_stock_products(forecasts, days_threshold=days_threshold),
    )


@router.get("/trends", response_model=DemandTrendResponse)
def get_trends(
    restaurant_id: int,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    if as_of is None:
        now = datetime.now(timezone.utc)
    else:
        now = datetime.combine(as_of, time.min, tzinfo=timezone.utc)

    return DemandTrendResponse(
        restaurant_id=restaurant_id,
        items=build_restaurant_trends(db, restaurant_id, now),
    )
