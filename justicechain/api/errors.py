"""Translate workflow failures into HTTP errors."""

from __future__ import annotations

import logging

from fastapi import HTTPException

from ..errors import WorkflowError

logger = logging.getLogger(__name__)


def to_http_error(label: str, exc: Exception) -> HTTPException:
    """Map ``exc`` to an HTTPException; unexpected errors become 500."""
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, WorkflowError):
        logger.warning(f"{label} failed: {exc.message}")
        return HTTPException(status_code=exc.status_code, detail=exc.message)
    logger.exception(f"{label} failed: {exc}")
    return HTTPException(status_code=500, detail=f"{label} failed: {exc}")
