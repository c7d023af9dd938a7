"""Human-readable public identifiers (prefix + epoch millis + random suffix)."""

from __future__ import annotations

import random
import time
from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

CASE_PREFIX = "CASE"
EVIDENCE_PREFIX = "EVID"
LOG_PREFIX = "LOG"
NOTE_PREFIX = "NOTE"
SUSPECT_PREFIX = "SUSPECT"
WITNESS_PREFIX = "WITNESS"

_MAX_ATTEMPTS = 20


def generate_public_id(prefix: str) -> str:
    """Return e.g. ``CASE_1718000000000_4821``."""
    return f"{prefix}_{int(time.time() * 1000)}_{random.randint(0, 9999)}"


def generate_role_id(role: str) -> str:
    """Return e.g. ``POLI_1718000000000_17`` for a POLICE user."""
    return generate_public_id(role[:4].upper())


def unique_public_id(session: Session, column, factory: Callable[[], str]) -> str:
    """Generate ids until one is not already stored in ``column``."""
    for _ in range(_MAX_ATTEMPTS):
        candidate = factory()
        found = session.execute(select(column).where(column == candidate)).first()
        if found is None:
            return candidate
    raise RuntimeError(f"Could not allocate a unique id for {column}")
