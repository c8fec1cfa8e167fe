from __future__ import annotations

from datetime import date, timedelta

from tests.test_utils import add_daily_consumption, create_item, create_restaurant


AS_OF = date(2025, 3, 31)


def _seed(db_session):
    restaurant = create_restaurant(db_session, "Forecast Kitchen")
    tomato = create_item(db_session, restaurant, "Tomato", current_stock=100)
    onion = create_item(db_session, restaurant, "Onion", current_stock=12)
    salt = create_item(db_session, restaurant, "Salt", current_stock=50)
    add_daily_consumption(db_session, tomato, AS_OF, [10] * 90)
    add_daily_consumption(db_session, onion, AS_OF, [4] * 10)
    add_daily_consumption(db_session, salt, AS_OF, [0] * 10)
    return restaurant, tomato, onion, salt


def test_forecast_endpoint(client, db_session):
    restaurant, tomato, onion, salt = _seed(db_session)

    resp = client.get(
        "/api/v1/forecast/",
        params={"restaurant_id": restaurant.id, "as_of": AS_OF.isoformat()},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()

    assert body["restaurant_id"] == restaurant.id
    assert body["generated_on"] == AS_OF.isoformat()
    assert body["window_days"] == 90

    items = {item["product_id"]: item for item in body["items"]}
    assert set(items) == {tomato.id, onion.id, salt.id}

    assert items[tomato.id]["daily_consumption_avg"] == 10
    assert items[tomato.id]["trend"] == "stable"
    assert items[tomato.id]["confidence_level"] == "high"
    assert items[tomato.id]["days_until_stockout"] == 10
    assert items[tomato.id]["predicted_stockout_date"] == (AS_OF + timedelta(days=10)).isoformat()
    assert items[tomato.id]["suggested_reorder_quantity"] == 168

    assert items[salt.id]["days_until_stockout"] == -1
    assert items[salt.id]["predicted_stockout_date"] is None


def test_high_demand_and_critical(client, db_session):
    restaurant, tomato, onion, salt = _seed(db_session)
    params = {"restaurant_id": restaurant.id, "as_of": AS_OF.isoformat()}

    resp = client.get("/api/v1/forecast/high-demand", params={**params, "limit": 1})
    assert resp.status_code == 200, resp.text
    assert [item["product_id"] for item in resp.json()["items"]] == [tomato.id]

    resp = client.get("/api/v1/forecast/critical", params={**params, "days_threshold": 5})
    assert resp.status_code == 200, resp.text
    assert [item["product_id"] for item in resp.json()["items"]] == [onion.id]


def test_trends_endpoint(client, db_session):
    restaurant, tomato, onion, salt = _seed(db_session)

    resp = client.get(
        "/api/v1/forecast/trends",
        params={"restaurant_id": restaurant.id, "as_of": AS_OF.isoformat()},
    )
    assert resp.status_code == 200, resp.text
    directions = {item["product_id"]: item["trend_direction"] for item in resp.json()["items"]}
    assert directions[tomato.id] == "stable"
    assert directions[onion.id] == "up"


def test_forecast_for_restaurant_without_history(client, db_session):
    restaurant = create_restaurant(db_session, "Quiet Kitchen")

    resp = client.get("/api/v1/forecast/", params={"restaurant_id": restaurant.id})
    assert resp.status_code == 200
    assert resp.json()["items"] == []


def test_forecast_validation_and_404(client):
    resp = client.get("/api/v1/forecast/", params={"restaurant_id": 999999})
    assert resp.status_code == 404

    resp = client.get("/api/v1/forecast/", params={"restaurant_id": 1, "window_days": 0})
    assert resp.status_code == 422
