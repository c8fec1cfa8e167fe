import logging

from fastapi import FastAPI

from stockwise.api.v1.router import api_router
from stockwise.core.config import SYNC_INTERVAL_MINUTES
from stockwise.services.notification_scheduler import NotificationScheduler


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="Stockwise")
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def _startup_event() -> None:
    scheduler = NotificationScheduler(interval_minutes=SYNC_INTERVAL_MINUTES)
    scheduler.start()
    app.state.notification_scheduler = scheduler


@app.on_event("shutdown")
def _shutdown_event() -> None:
    scheduler = getattr(app.state, "notification_scheduler", None)
    if scheduler is not None:
        scheduler.shutdown()


@app.get("/")
def root():
    return {"status": "ok", "message": "Stockwise backend running"}
