from __future__ import annotations

import logging
import warnings
from typing import Any, Dict

RESERVED_LOG_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
}

OBSERVABILITY_LOGGER = "asana_mcp.observability"


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k not in RESERVED_LOG_KEYS}


def log_event(
    event: str,
    logger: logging.Logger | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Minimal structured logging helper.
    - Uses logger.log with extra dict so formatters can include keys.
    - Drops reserved LogRecord attributes to avoid collisions.
    """
    log = logger or logging.getLogger(OBSERVABILITY_LOGGER)
    extra = {"event": event, **_clean_fields(fields)}
    log.log(level, event, extra=extra)


def warn_partial(message: str, category: type[Warning], **fields: Any) -> None:
    """Log a swallowed secondary failure and route it through the warnings system."""
    log_event("partial_assembly", level=logging.WARNING, detail=message, **fields)
    # Warnings are captured by logging.captureWarnings in setup_logging.
    try:
        warnings.warn(message, category, stacklevel=2)
    except category:
        # Promoted to an error by a warnings filter; the event above is the record.
        pass


__all__ = ["log_event", "warn_partial", "OBSERVABILITY_LOGGER"]
