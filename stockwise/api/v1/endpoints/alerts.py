from datetime import date, datetime, time, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stockwise.api.v1.endpoints.restaurant import get_restaurant_or_404
from stockwise.core.db import get_db
from stockwise.core.forecasting.alerts import summarize_alerts
from stockwise.schemas.alerts import AlertsResponse
from stockwise.services.sales_alerts import build_restaurant_alerts


router = APIRouter()


@router.get("/", response_model=AlertsResponse)
def get_alerts(
    restaurant_id: int,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    if as_of is None:
        now = datetime.now(timezone.utc)
    else:
        now = datetime.combine(as_of, time.min, tzinfo=timezone.utc)

    alerts = build_restaurant_alerts(db, restaurant_id, now)
    return AlertsResponse(
        restaurant_id=restaurant_id,
        summary=summarize_alerts(alerts),
        items=alerts,
    )
