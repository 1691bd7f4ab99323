"""
Correlation ID context for request tracing.

Uses contextvars to propagate correlation_id across the async call chain.
Every stats request gets an ID that appears in all log lines produced
while its backends fetch, parse and rank, including the worker threads
used for SSH calls (asyncio.to_thread copies the context).

Usage:
    from shared.logging.correlation import get_correlation_id, set_correlation_id

    # HTTP middleware sets it automatically
    cid = get_correlation_id()
"""

import uuid
from contextvars import ContextVar
from typing import Optional

_correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Get current correlation_id (or None if not set)."""
    return _correlation_id_var.get()


def set_correlation_id(cid: Optional[str]) -> None:
    """Set correlation_id for the current async context."""
    _correlation_id_var.set(cid)


def generate_correlation_id(prefix: str = "") -> str:
    """
    Generate a new correlation_id.

    Format: {prefix}{short_uuid}
    Example: api-e5f6g7h8
    """
    short = uuid.uuid4().hex[:8]
    return f"{prefix}{short}" if prefix else short
