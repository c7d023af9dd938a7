from __future__ import annotations

import contextvars
import json
import logging
import sys
from typing import Any

# record attributes copied into JSON output when set, via ``extra=`` or the request filter
CONTEXT_FIELDS = ("request_id", "actor_id", "actor_role", "case_id", "evidence_id")

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "justicechain_request_id", default=None
)


def actor_fields(actor) -> dict[str, Any]:
    """``extra=`` mapping identifying who acted; system jobs have no actor."""
    if actor is None:
        return {"actor_role": "SYSTEM"}
    return {"actor_id": actor.user_id, "actor_role": actor.role.value}


class RequestContextFilter(logging.Filter):
    """Stamps the id of the HTTP request being served, if any, on each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                base[name] = value
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Initialize logging for the CLI and the API server.

    Args:
        level: Logging level name (e.g., DEBUG, INFO, WARNING).
        json_logs: If True, emit one JSON object per log record, including
            request, actor, case and evidence ids when the record carries them.
    """
    lvl = getattr(logging, level.upper(), logging.INFO)

    if json_logs:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
        logging.root.handlers[:] = [handler]
        logging.root.setLevel(lvl)
    else:
        logging.basicConfig(
            level=lvl,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    for h in logging.root.handlers:
        if not any(isinstance(f, RequestContextFilter) for f in h.filters):
            h.addFilter(RequestContextFilter())
