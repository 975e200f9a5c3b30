"""
Correlation ID handling for request tracing.

Every request gets a short ID that ends up in log lines, Sentry tags,
error bodies and the X-Correlation-ID response header, so a citizen can
quote it when something goes wrong.
"""

import re
import uuid
from contextvars import ContextVar

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Inbound IDs are echoed back in headers and logs, so only safe tokens pass
_VALID_INBOUND_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def generate_correlation_id() -> str:
    """
    Generate a short correlation ID.

    Returns:
        8 hexadecimal characters, e.g. "3fa2c91b".
    """
    return uuid.uuid4().hex[:8]


def resolve_correlation_id(inbound: str | None) -> str:
    """
    Reuse a client-supplied correlation ID when it is well-formed.

    Args:
        inbound: Value of the X-Correlation-ID request header, if any.

    Returns:
        The inbound ID, or a freshly generated one.
    """
    if inbound and _VALID_INBOUND_ID.match(inbound):
        return inbound
    return generate_correlation_id()


def get_correlation_id() -> str:
    """Correlation ID of the current request, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)
