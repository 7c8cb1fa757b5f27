from apscheduler.schedulers.asyncio import AsyncIOScheduler
import structlog

logger = structlog.get_logger()

scheduler = AsyncIOScheduler()


def start_scheduler():
    if not scheduler.running:
        scheduler.start()
        logger.info("scheduler_started")


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("scheduler_stopped")


def schedule_interval(func, seconds: int, job_id: str):
    """Register (or replace) an interval job and make sure the scheduler runs."""
    start_scheduler()
    return scheduler.add_job(
        func, "interval", seconds=seconds, id=job_id, replace_existing=True,
        max_instances=1, coalesce=True,
    )
