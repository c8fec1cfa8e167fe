from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from stockwise.core.forecasting.domain import NO_PROJECTION, ConsumptionRecord
from stockwise.core.forecasting.forecaster import (
    build_demand_trends,
    compute_forecasts,
    get_critical_stock_products,
    get_high_demand_products,
)
from stockwise.schemas.forecast import ConfidenceLevel, DemandTrendLevel
from tests.test_utils import daily_records


TODAY = date(2025, 3, 31)


def _forecast_for(forecasts, product_id):
    matches = [f for f in forecasts if f.product_id == product_id]
    assert len(matches) == 1
    return matches[0]


class TestComputeForecasts:
    def test_constant_consumption_over_ninety_days(self):
        records = daily_records("P", TODAY, [10] * 90)

        forecasts = compute_forecasts(records, {"P": 100}, TODAY)
        forecast = _forecast_for(forecasts, "P")

        assert forecast.daily_consumption_avg == 10
        assert forecast.trend == DemandTrendLevel.STABLE
        assert forecast.confidence_level == ConfidenceLevel.HIGH
        assert forecast.days_until_stockout == 10
        assert forecast.predicted_stockout_date == TODAY + timedelta(days=10)
        assert forecast.suggested_reorder_quantity == 168
        assert forecast.current_stock == 100

    def test_weekly_and_monthly_are_exact_multiples(self):
        records = daily_records("A", TODAY, [1.3, 2.7, 0.4, 5.1, 3.3])
        records += daily_records("B", TODAY, [0.1, 0.2, 0.7])

        for forecast in compute_forecasts(records, {}, TODAY):
            assert forecast.weekly_consumption_avg == 7 * forecast.daily_consumption_avg
            assert forecast.monthly_consumption_avg == 30 * forecast.daily_consumption_avg

    def test_is_deterministic(self):
        records = daily_records("A", TODAY, [3, 4, 5, 6] * 20)
        records += daily_records("B", TODAY, [1, 0, 2])
        stock = {"A": 50, "B": 7}

        first = compute_forecasts(records, stock, TODAY)
        second = compute_forecasts(records, stock, TODAY)

        assert [f.model_dump() for f in first] == [f.model_dump() for f in second]

    def test_uuid_product_ids_pass_through(self):
        pid = uuid.UUID("0b3f8e52-7c1a-4d6e-9f20-5a8b1c4d7e93")
        records = [ConsumptionRecord(pid, TODAY - timedelta(days=1), 4, "Flour")]

        forecast = _forecast_for(compute_forecasts(records, {pid: 10}, TODAY), pid)

        assert forecast.product_name == "Flour"
        assert forecast.days_until_stockout == 2
        assert forecast.model_dump(mode="json")["product_id"] == str(pid)
        assert build_demand_trends(records, datetime(2025, 3, 31, tzinfo=timezone.utc))[0].product_id == pid

    def test_average_uses_observed_days_only(self):
        records = [
            ConsumptionRecord("P", TODAY - timedelta(days=80), 12),
            ConsumptionRecord("P", TODAY - timedelta(days=2), 8),
        ]

        forecast = _forecast_for(compute_forecasts(records, {"P": 30}, TODAY), "P")

        assert forecast.daily_consumption_avg == pytest.approx(10.0)
        assert forecast.data_points == 2
        assert forecast.confidence_level == ConfidenceLevel.LOW

    def test_same_day_records_are_summed(self):
        records = [
            ConsumptionRecord("P", TODAY, 3),
            ConsumptionRecord("P", TODAY, 5),
            ConsumptionRecord("P", TODAY - timedelta(days=1), 2),
        ]

        forecast = _forecast_for(compute_forecasts(records, {"P": 10}, TODAY), "P")

        assert forecast.data_points == 2
        assert forecast.daily_consumption_avg == pytest.approx(5.0)

    def test_unsorted_input_is_ordered_chronologically(self):
        older = daily_records("P", TODAY - timedelta(days=30), [5] * 30)
        recent = daily_records("P", TODAY, [8] * 30)

        forecast = _forecast_for(compute_forecasts(recent + older, {}, TODAY), "P")

        assert forecast.trend == DemandTrendLevel.INCREASING

    def test_increasing_trend(self):
        records = daily_records("P", TODAY, [5] * 30 + [8] * 30)

        forecast = _forecast_for(compute_forecasts(records, {}, TODAY), "P")

        assert forecast.trend == DemandTrendLevel.INCREASING
        assert forecast.confidence_level == ConfidenceLevel.MEDIUM

    def test_decreasing_trend(self):
        records = daily_records("P", TODAY, [10] * 30 + [8] * 30)

        forecast = _forecast_for(compute_forecasts(records, {}, TODAY), "P")

        assert forecast.trend == DemandTrendLevel.DECREASING

    def test_change_within_ten_percent_is_stable(self):
        records = daily_records("P", TODAY, [10] * 30 + [10.5] * 30)

        forecast = _forecast_for(compute_forecasts(records, {}, TODAY), "P")

        assert forecast.trend == DemandTrendLevel.STABLE

    def test_short_history_reads_as_increasing(self):
        records = daily_records("P", TODAY, [2, 3, 4])

        forecast = _forecast_for(compute_forecasts(records, {}, TODAY), "P")

        assert forecast.trend == DemandTrendLevel.INCREASING

    def test_zero_consumption_has_no_projection(self):
        records = daily_records("P", TODAY, [0, 0, 0])

        forecast = _forecast_for(compute_forecasts(records, {"P": 40}, TODAY), "P")

        assert forecast.daily_consumption_avg == 0
        assert forecast.days_until_stockout == NO_PROJECTION
        assert forecast.predicted_stockout_date is None
        assert forecast.suggested_reorder_quantity == 0
        assert get_critical_stock_products([forecast], days_threshold=365) == []

    def test_missing_stock_counts_as_zero(self):
        records = daily_records("P", TODAY, [4, 4])

        forecast = _forecast_for(compute_forecasts(records, {}, TODAY), "P")

        assert forecast.current_stock == 0
        assert forecast.days_until_stockout == 0
        assert forecast.predicted_stockout_date == TODAY

    def test_stockout_days_never_decrease_with_more_stock(self):
        records = daily_records("P", TODAY, [3, 7, 2, 9, 4])

        previous = -1
        for stock in range(0, 60, 3):
            forecast = _forecast_for(compute_forecasts(records, {"P": stock}, TODAY), "P")
            assert forecast.days_until_stockout >= previous
            previous = forecast.days_until_stockout

    def test_empty_input_gives_no_forecasts(self):
        assert compute_forecasts([], {"P": 10}, TODAY) == []

    def test_product_names(self):
        records = daily_records(1, TODAY, [1], product_name="Tomato")
        records += daily_records(2, TODAY, [1])
        records += daily_records(3, TODAY, [1], product_name="Onion")

        forecasts = compute_forecasts(records, {}, TODAY, product_names={3: "Red onion"})

        assert [f.product_name for f in forecasts] == ["Tomato", "2", "Red onion"]


class TestForecastQueries:
    def _forecasts(self, averages: dict[str, float]):
        records = []
        for product_id, avg in averages.items():
            records += daily_records(product_id, TODAY, [avg] * 5)
        return compute_forecasts(records, {}, TODAY)

    def test_high_demand_top_three_with_ties_in_input_order(self):
        forecasts = self._forecasts({"A": 7, "B": 9, "C": 7, "D": 7, "E": 1})

        top = get_high_demand_products(forecasts, limit=3)

        assert [f.product_id for f in top] == ["B", "A", "C"]

    def test_high_demand_skips_zero_consumption(self):
        forecasts = self._forecasts({"A": 0, "B": 2})

        assert [f.product_id for f in get_high_demand_products(forecasts)] == ["B"]

    def test_critical_stock_filters_and_sorts(self):
        records = []
        for product_id in ("A", "B", "C", "D"):
            records += daily_records(product_id, TODAY, [10] * 5)
        stock = {"A": 60, "B": 20, "C": 0, "D": 100}

        critical = get_critical_stock_products(compute_forecasts(records, stock, TODAY), days_threshold=7)

        assert [(f.product_id, f.days_until_stockout) for f in critical] == [("B", 2), ("A", 6)]


def test_build_demand_trends():
    records = daily_records("up", TODAY, [5] * 30 + [8] * 30)
    records += daily_records("flat", TODAY, [4] * 60)
    now = datetime(2025, 3, 31, 12, 0, tzinfo=timezone.utc)

    trends = {t.product_id: t for t in build_demand_trends(records, now)}

    assert trends["up"].trend_direction == "up"
    assert trends["up"].trend_percentage == pytest.approx(60.0)
    assert trends["flat"].trend_direction == "stable"
    assert trends["flat"].trend_percentage == 0
    assert trends["flat"].last_updated == now
