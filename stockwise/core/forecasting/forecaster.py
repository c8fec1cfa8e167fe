"""Demand forecasting over per-product consumption history.

Everything here is a pure function of its arguments: no database access and
no wall-clock reads. Callers pass ``today``/``now`` explicitly so repeated
runs over the same input produce identical forecasts.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Hashable, Iterable, Mapping, Optional

from stockwise.core.forecasting.domain import NO_PROJECTION, ConsumptionRecord
from stockwise.schemas.forecast import (
    ConfidenceLevel,
    DemandForecast,
    DemandTrend,
    DemandTrendLevel,
)


TREND_WINDOW = 30

TREND_UP_FACTOR = 1.10
TREND_DOWN_FACTOR = 0.90

HIGH_CONFIDENCE_POINTS = 60
MEDIUM_CONFIDENCE_POINTS = 30

COVERAGE_DAYS = 14
SAFETY_MARGIN = 1.2


def _mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def _group_daily_quantities(
    records: Iterable[ConsumptionRecord],
) -> tuple[dict[Hashable, list[float]], dict[Hashable, str]]:
    """Collapse records to one quantity per product and day.

    Products keep first-seen order; each product's quantities are returned in
    chronological order. Days without a record are not filled in.
    """

    per_day: dict[Hashable, dict[date, float]] = {}
    names: dict[Hashable, str] = {}

    for record in records:
        days = per_day.setdefault(record.product_id, defaultdict(float))
        days[record.date] += float(record.quantity)
        if record.product_name and record.product_id not in names:
            names[record.product_id] = record.product_name

    series = {
        product_id: [days[d] for d in sorted(days)]
        for product_id, days in per_day.items()
    }
    return series, names


def _split_trend_windows(quantities: list[float]) -> tuple[float, float]:
    recent = quantities[-TREND_WINDOW:]
    previous = quantities[-2 * TREND_WINDOW:-TREND_WINDOW]
    return _mean(recent), _mean(previous)


def classify_trend(quantities: list[float]) -> DemandTrendLevel:
    """Compare the last 30 points with the 30 before them.

    An empty window counts as a mean of 0, so short histories with any
    consumption read as ``increasing``.
    """

    recent_avg, previous_avg = _split_trend_windows(quantities)

    if recent_avg > previous_avg * TREND_UP_FACTOR:
        return DemandTrendLevel.INCREASING
    if recent_avg < previous_avg * TREND_DOWN_FACTOR:
        return DemandTrendLevel.DECREASING
    return DemandTrendLevel.STABLE


def classify_confidence(data_points: int) -> ConfidenceLevel:
    if data_points > HIGH_CONFIDENCE_POINTS:
        return ConfidenceLevel.HIGH
    if data_points > MEDIUM_CONFIDENCE_POINTS:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def project_stockout_days(current_stock: float, daily_avg: float) -> int:
    if daily_avg > 0:
        return int(math.floor(current_stock / daily_avg))
    return NO_PROJECTION


def suggest_reorder_quantity(daily_avg: float) -> int:
    return int(math.ceil(daily_avg * COVERAGE_DAYS * SAFETY_MARGIN))


def compute_forecasts(
    records: Iterable[ConsumptionRecord],
    current_stock_by_product: Mapping[Hashable, float],
    today: date,
    product_names: Optional[Mapping[Hashable, str]] = None,
) -> list[DemandForecast]:
    """Build one forecast per product that has at least one record."""

    series, record_names = _group_daily_quantities(records)
    product_names = product_names or {}

    forecasts: list[DemandForecast] = []

    for product_id, quantities in series.items():
        daily_avg = _mean(quantities)
        current_stock = float(current_stock_by_product.get(product_id, 0) or 0)

        days_until_stockout = project_stockout_days(current_stock, daily_avg)
        if days_until_stockout == NO_PROJECTION:
            stockout_date = None
        else:
            stockout_date = today + timedelta(days=days_until_stockout)

        name = product_names.get(product_id) or record_names.get(product_id) or str(product_id)

        forecasts.append(
            DemandForecast(
                product_id=product_id,
                product_name=name,
                daily_consumption_avg=daily_avg,
                weekly_consumption_avg=daily_avg * 7,
                monthly_consumption_avg=daily_avg * 30,
                trend=classify_trend(quantities),
                confidence_level=classify_confidence(len(quantities)),
                data_points=len(quantities),
                current_stock=current_stock,
                days_until_stockout=days_until_stockout,
                predicted_stockout_date=stockout_date,
                suggested_reorder_quantity=suggest_reorder_quantity(daily_avg),
            )
        )

    return forecasts


def get_high_demand_products(
    forecasts: Iterable[DemandForecast],
    limit: int = 10,
) -> list[DemandForecast]:
    """Top products by daily average; ties keep input order."""

    consuming = [f for f in forecasts if f.daily_consumption_avg > 0]
    ranked = sorted(consuming, key=lambda f: f.daily_consumption_avg, reverse=True)
    return ranked[: max(limit, 0)]


def get_critical_stock_products(
    forecasts: Iterable[DemandForecast],
    days_threshold: int = 7,
) -> list[DemandForecast]:
    at_risk = [
        f
        for f in forecasts
        if 0 < f.days_until_stockout <= days_threshold
    ]
    return sorted(at_risk, key=lambda f: f.days_until_stockout)


def build_demand_trends(
    records: Iterable[ConsumptionRecord],
    now: datetime,
    product_names: Optional[Mapping[Hashable, str]] = None,
) -> list[DemandTrend]:
    series, record_names = _group_daily_quantities(records)
    product_names = product_names or {}

    trends: list[DemandTrend] = []
    for product_id, quantities in series.items():
        recent_avg, previous_avg = _split_trend_windows(quantities)
        level = classify_trend(quantities)

        if previous_avg > 0:
            percentage = (recent_avg - previous_avg) / previous_avg * 100.0
        else:
            percentage = 0.0

        if level == DemandTrendLevel.INCREASING:
            direction = "up"
        elif level == DemandTrendLevel.DECREASING:
            direction = "down"
        else:
            direction = "stable"

        trends.append(
            DemandTrend(
                product_id=product_id,
                product_name=product_names.get(product_id) or record_names.get(product_id) or str(product_id),
                trend_direction=direction,
                trend_percentage=round(percentage, 2),
                last_updated=now,
            )
        )

    return trends
