"""
Scheduler Service
Records the monthly spending snapshot using APScheduler
"""
import logging
from datetime import date
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from subveris.db.base import StorageError, SubscriptionStore
from subveris.models.spending import SpendingSnapshot
from subveris.utils.analyzer import SubscriptionAnalyzer

logger = logging.getLogger(__name__)

SNAPSHOT_JOB_ID = "monthly_spending_snapshot"

scheduler: Optional[BackgroundScheduler] = None


def record_spending_snapshot(
    store: SubscriptionStore,
    analyzer: SubscriptionAnalyzer,
    today: Optional[date] = None,
) -> Optional[SpendingSnapshot]:
    """Job function: store this month's total monthly spend."""
    month = (today or date.today()).strftime("%Y-%m")
    logger.info(f"Recording spending snapshot for {month}...")
    try:
        total = analyzer.total_monthly_spend(store.list_subscriptions())
        snapshot = store.save_spending_snapshot(SpendingSnapshot(month=month, amount=round(total, 2)))
    except StorageError as e:
        logger.error(f"Spending snapshot for {month} failed: {e}")
        return None
    logger.info(f"Spending snapshot for {month} recorded: {snapshot.amount}")
    return snapshot


def start_scheduler(
    store: SubscriptionStore,
    analyzer: SubscriptionAnalyzer,
    day: str = "last",
    hour: int = 23,
    minute: int = 30,
) -> None:
    """Start the background scheduler with the snapshot job"""
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler is already running")
        return

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        record_spending_snapshot,
        args=[store, analyzer],
        trigger=CronTrigger(day=day, hour=hour, minute=minute),
        id=SNAPSHOT_JOB_ID,
        name="Monthly Spending Snapshot",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started: snapshot on day={day}, hour={hour}, minute={minute}")


def stop_scheduler() -> None:
    """Stop the background scheduler"""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")


def get_scheduler_status() -> dict:
    if scheduler is None:
        return {"running": False}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": str(job.next_run_time) if job.next_run_time else None
        })

    return {
        "running": scheduler.running,
        "jobs": jobs
    }
