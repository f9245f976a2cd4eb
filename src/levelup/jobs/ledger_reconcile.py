"""Background scheduler for the daily ledger reconciliation."""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from ..core.config import get_settings
from ..core.database import SessionLocal
from ..services.reconcile_service import reconcile_balances

logger = logging.getLogger(__name__)

_scheduler = AsyncIOScheduler(timezone="UTC")


async def _execute_reconcile() -> None:
    session = SessionLocal()
    try:
        summary = reconcile_balances(session)
        logger.info("ledger reconciliation completed: %s", summary)
    except Exception:  # pragma: no cover - safeguard for background job
        logger.exception("ledger reconciliation job failed")
        raise
    finally:
        session.close()


def register_scheduler(app: FastAPI) -> None:
    """Attach APScheduler lifecycle hooks to the FastAPI app."""

    settings = get_settings()
    if not settings.scheduler_enabled:
        return

    if _scheduler.get_job("ledger_reconcile") is None:
        _scheduler.add_job(
            _execute_reconcile,
            "cron",
            hour=settings.reconcile_hour,
            minute=15,
            id="ledger_reconcile",
            misfire_grace_time=3600,
        )

    @app.on_event("startup")
    async def start_scheduler() -> None:
        if not _scheduler.running:
            _scheduler.start()
            logger.info("ledger reconciliation scheduler started")

    @app.on_event("shutdown")
    async def shutdown_scheduler() -> None:
        if _scheduler.running:
            _scheduler.shutdown(wait=False)
            logger.info("ledger reconciliation scheduler stopped")


def run_reconcile_once() -> dict[str, int]:
    """Convenience helper to run the check synchronously for manual testing."""

    session = SessionLocal()
    try:
        return reconcile_balances(session)
    finally:
        session.close()
