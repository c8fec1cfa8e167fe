from fastapi import APIRouter

from stockwise.api.v1.endpoints import (
    alerts,
    forecast,
    inventory,
    notifications,
    restaurant,
)

api_router = APIRouter()

api_router.include_router(restaurant.router, prefix="/restaurant", tags=["restaurant"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(forecast.router, prefix="/forecast", tags=["forecast"])
api_router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
