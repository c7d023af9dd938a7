"""Periodic integrity sweep runner using APScheduler."""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..workflow.context import WorkflowContext
from .core import JOB_TYPE, run_integrity_sweep

logger = logging.getLogger(__name__)


def start_scheduler(ctx: WorkflowContext, interval_seconds: int = 300) -> BackgroundScheduler:
    """Start the background integrity sweep.

    Args:
        ctx: Workflow context shared with the API
        interval_seconds: Seconds between sweeps (default: 5 minutes)

    Returns:
        The running scheduler; call ``shutdown()`` on exit
    """
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_scheduled_sweep,
        trigger=IntervalTrigger(seconds=interval_seconds),
        kwargs={"ctx": ctx},
        id=JOB_TYPE,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    logger.info("Starting integrity sweep every %ss", interval_seconds)
    scheduler.start()
    return scheduler


def run_scheduled_sweep(ctx: WorkflowContext) -> None:
    """Entry point called by APScheduler; never raises."""
    try:
        result = run_integrity_sweep(ctx)

        if result["status"] == "success":
            logger.info("Scheduled integrity sweep succeeded: %s", result["metrics"])
        else:
            logger.error(
                "Scheduled integrity sweep failed: %s", result.get("error", "Unknown error")
            )
    except Exception as exc:
        logger.exception("Unexpected error in scheduled integrity sweep: %s", exc)
