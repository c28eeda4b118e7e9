"""
Boundary Error Handler - Captures upstream failures and swaps in safe defaults.

Routes never let a data-store or Sales Engine failure take the dashboard down.
Instead they call log_boundary_error() to record what went wrong, or wrap the
risky call in safe_execute() and get the fallback back.

Usage:
    from platform_shell.error_handler import safe_execute

    payload = safe_execute(
        client.get_json, args=("/attention",),
        route="attention", fallback=mock_attention_items(),
    )
"""

import logging
import traceback
from typing import Any, Callable


logger = logging.getLogger("shell.error_handler")


class StatsUnavailableError(Exception):
    """Raised when campaign contact statistics cannot be read.

    Treat it as a transient read failure, not as a sign the campaign has no data.
    """
    pass


class SalesEngineError(Exception):
    """Raised when the Sales Engine backend is unreachable or returns garbage."""
    pass


def log_boundary_error(
    route: str,
    error: Exception = None,
    error_message: str = None,
    campaign_id: str = None,
    upstream: str = None,
    severity: str = "warning",
):
    """Log a failure that is being absorbed at the API boundary.

    Args:
        route: Route or phase where the error occurred (contact-stats, attention, ...)
        error: The exception object (optional if error_message provided)
        error_message: Human-readable error description
        campaign_id: Associated campaign ID
        upstream: Upstream path or resource that failed
        severity: "warning", "error", or "critical"
    """
    msg = error_message or (str(error) if error else "Unknown error")
    error_type = type(error).__name__ if error else "UnknownError"

    log_extra = {
        "route": route,
        "campaign_id": campaign_id or "",
        "upstream": upstream or "",
    }

    if severity == "critical":
        logger.critical("[%s] %s: %s", route, error_type, msg, extra=log_extra)
    elif severity == "error":
        logger.error("[%s] %s: %s", route, error_type, msg, extra=log_extra)
    else:
        logger.warning("[%s] %s: %s", route, error_type, msg, extra=log_extra)


def safe_execute(
    fn: Callable,
    args: tuple = (),
    kwargs: dict = None,
    route: str = "unknown",
    campaign_id: str = None,
    fallback: Any = None,
    severity: str = "warning",
) -> Any:
    """Execute a function, returning fallback if it raises.

    The error is logged with the tail of its traceback before the fallback
    is handed back.
    """
    kwargs = kwargs or {}
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        log_boundary_error(
            route=route,
            error=e,
            campaign_id=campaign_id,
            upstream=getattr(fn, "__name__", repr(fn)),
            severity=severity,
        )
        logger.debug("Traceback for %s: %s", route, traceback.format_exc()[-500:])
        return fallback
