"""
Sentry SDK configuration.

Sentry stays off unless SENTRY_DSN is set. Events are scrubbed of emails,
tokens and the exact coordinates of citizen reports before they leave the
process.
"""

import os
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.types import Event, Hint

HEALTH_PATHS = ("/api/health", "GET /api/health")

# Request body keys never sent to Sentry
SCRUBBED_FIELDS = ("password", "latitude", "longitude", "address")

# Endpoints that move points or roles get a higher trace rate
SENSITIVE_PREFIXES = ("/api/auth", "/api/admin", "/api/rewards")


def _before_send(event: Event, hint: Hint) -> Event | None:
    """
    Scrub personal data from an error event.

    Keeps only the user id, drops cookies and the Authorization header and
    masks credentials and report locations in the request body.
    """
    user = event.get("user")
    if user:
        user.pop("email", None)
        user.pop("username", None)
        user.pop("ip_address", None)

    request = event.get("request")
    if request and isinstance(request, dict):
        request.pop("cookies", None)
        headers = request.get("headers")
        if isinstance(headers, dict) and "Authorization" in headers:
            headers["Authorization"] = "[Filtered]"
        data = request.get("data")
        if isinstance(data, dict):
            for field in SCRUBBED_FIELDS:
                if field in data:
                    data[field] = "[Filtered]"

    return event


def _before_send_transaction(event: Event, hint: Hint) -> Event | None:
    """Drop health check transactions."""
    if event.get("transaction", "") in HEALTH_PATHS:
        return None
    return event


def _traces_sampler(sampling_context: dict[str, Any]) -> float:
    """
    Sample rate per request path.

    Args:
        sampling_context: Context about the request being sampled.

    Returns:
        Sample rate between 0.0 and 1.0.
    """
    if sampling_context.get("parent_sampled") is True:
        return 1.0

    path = sampling_context.get("asgi_scope", {}).get("path", "")

    if path == "/api/health":
        return 0.0

    if path.startswith(SENSITIVE_PREFIXES):
        return 0.5

    return 0.2


def init_sentry() -> None:
    """
    Initialize Sentry with the FastAPI, SQLAlchemy and Loguru integrations.

    Call this BEFORE creating the FastAPI app instance.
    """
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=os.getenv("SENTRY_RELEASE", "unknown"),
        send_default_pii=False,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoguruIntegration(),
        ],
        traces_sampler=_traces_sampler,
        sample_rate=1.0,
        before_send=_before_send,
        before_send_transaction=_before_send_transaction,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        ignore_errors=[KeyboardInterrupt, SystemExit],
    )
