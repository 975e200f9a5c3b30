"""
Security headers middleware for FastAPI.

Every API response carries a fixed set of hardening headers. The
Permissions-Policy allows geolocation for our own origin only, since the
citizen app reads the device position when filing a report.
"""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from models.config import settings

PERMISSIONS_POLICY = ", ".join(
    [
        "accelerometer=()",
        "camera=(self)",
        "geolocation=(self)",
        "gyroscope=()",
        "magnetometer=()",
        "microphone=()",
        "payment=()",
        "usb=()",
    ]
)

# Map tiles are loaded from https sources, photos may be data URIs
CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self'",
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data: https:",
        "font-src 'self' data:",
        "connect-src 'self'",
        "frame-ancestors 'none'",
    ]
)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": PERMISSIONS_POLICY,
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
}

HSTS_VALUE = "max-age=31536000; includeSubDomains"


def security_headers_for(environment: str) -> dict[str, str]:
    """Headers to add for the given deployment environment."""
    headers = dict(SECURITY_HEADERS)
    if environment == "production":
        headers["Strict-Transport-Security"] = HSTS_VALUE
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses.

    API responses are never cached unless the endpoint set its own
    Cache-Control header.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Add security headers to the response."""
        response = await call_next(request)

        for name, value in security_headers_for(settings.ENVIRONMENT).items():
            response.headers[name] = value

        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store"

        return response
