from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel


class DemandTrendLevel(str, Enum):
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DemandForecast(BaseModel):
    # opaque identifier, passed through as given (int, str, UUID, ...)
    product_id: Any
    product_name: str

    daily_consumption_avg: float
    weekly_consumption_avg: float
    monthly_consumption_avg: float

    trend: DemandTrendLevel
    confidence_level: ConfidenceLevel
    data_points: int

    current_stock: float
    days_until_stockout: int
    predicted_stockout_date: date | None = None
    suggested_reorder_quantity: int

    seasonality_factor: float = 1.0


class DemandTrend(BaseModel):
    product_id: Any
    product_name: str
    trend_direction: str
    trend_percentage: float
    period: str = "weekly"
    last_updated: datetime


class ForecastResponse(BaseModel):
    restaurant_id: int
    generated_on: date
    window_days: int
    items: list[DemandForecast]


class DemandTrendResponse(BaseModel):
    restaurant_id: int
    items: list[DemandTrend]
