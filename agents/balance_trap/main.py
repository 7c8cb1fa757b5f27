"""
Balance Trap — FastAPI application (port 8010)

Watches one address's ERC-20 balance and flags significant changes between
consecutive observations. Exposes the collect / shouldRespond / respond
calling convention of the host detection network over HTTP, plus an
optional local dry-run poller.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from shared.utils.logging import setup_logging
from shared.utils.scheduler import schedule_interval, stop_scheduler
from shared.config import settings
from agents.balance_trap.routes.api import router
from agents.balance_trap.services.monitor import DryRunMonitor
from agents.balance_trap.services.trap import BalanceTrap, build_trap
from agents.balance_trap.config import AGENT_NAME, POLL_INTERVAL
import structlog

logger = structlog.get_logger()


def _make_dryrun_job(monitor: DryRunMonitor):
    async def _dryrun_job():
        try:
            monitor.run_cycle()
        except Exception as e:
            logger.error("dryrun_job_failed", error=str(e), cycle=monitor.cycles)
    return _dryrun_job


def create_app(trap: BalanceTrap | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        logger.info("balance_trap_starting", agent=AGENT_NAME, dryrun=settings.DRYRUN_ENABLED)
        if getattr(app.state, "trap", None) is None:
            app.state.trap = build_trap(settings)

        if settings.DRYRUN_ENABLED:
            app.state.monitor = DryRunMonitor(app.state.trap)
            schedule_interval(
                _make_dryrun_job(app.state.monitor),
                seconds=POLL_INTERVAL,
                job_id="balance_trap_dryrun",
            )

        yield

        if settings.DRYRUN_ENABLED:
            stop_scheduler()
        logger.info("balance_trap_stopped")

    app = FastAPI(
        title="Balance Trap",
        description="Monitoring rule that flags significant ERC-20 balance changes of a tracked address "
                    "using absolute and basis-point thresholds.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.trap = trap
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("agents.balance_trap.main:app", host="0.0.0.0", port=8010, reload=True)
