"""Background jobs."""

from .core import run_integrity_sweep
from .runner import run_scheduled_sweep, start_scheduler

__all__ = ["run_integrity_sweep", "run_scheduled_sweep", "start_scheduler"]
