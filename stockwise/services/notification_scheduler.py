from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from stockwise.core import config
from stockwise.core.db import SessionLocal
from stockwise.models.models import Restaurant
from stockwise.services.notifications import sync_notifications


logger = logging.getLogger(__name__)


class NotificationScheduler:
    """Background scheduler that keeps stored notifications in sync with alerts.

    Controlled from the FastAPI startup/shutdown events.
    """

    def __init__(self, interval_minutes: int = 30) -> None:
        self._interval_minutes = interval_minutes
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        if not config.SCHEDULER_ENABLED:
            logger.warning("NotificationScheduler disabled via STOCKWISE_SCHEDULER_ENABLED")
            return

        if self.running:
            logger.warning("NotificationScheduler already running, skipping start")
            return

        scheduler = BackgroundScheduler(timezone="UTC")
        scheduler.add_job(
            self.run_sync_job,
            trigger=IntervalTrigger(minutes=self._interval_minutes),
            id="notification_sync_job",
            replace_existing=True,
            max_instances=1,
            next_run_time=datetime.now(timezone.utc),
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("NotificationScheduler started with interval %s minutes", self._interval_minutes)

    def shutdown(self) -> None:
        if self._scheduler is not None:
            try:
                self._scheduler.shutdown(wait=False)
                logger.info("NotificationScheduler stopped")
            finally:
                self._scheduler = None

    @staticmethod
    def run_sync_job(session_factory=SessionLocal) -> int:
        """Sync notifications for every restaurant.

        A failure for one restaurant is logged and does not stop the others.
        Returns the number of restaurants synced successfully.
        """

        db: Session = session_factory()
        synced = 0
        try:
            now = datetime.now(timezone.utc)
            restaurant_ids = [rid for (rid,) in db.query(Restaurant.id).order_by(Restaurant.id).all()]
            for restaurant_id in restaurant_ids:
                try:
                    sync_notifications(db, restaurant_id, now)
                    synced += 1
                except Exception:
                    db.rollback()
                    logger.exception("Notification sync failed for restaurant %s", restaurant_id)
        finally:
            db.close()
        return synced
