"""Middleware to append security-related HTTP headers.

Ciphertext and plaintext travel in response bodies, so nothing may be cached.
"""
from __future__ import annotations

from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware

from chaoscrypt.core.config import SECURITY_HEADERS


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Append security headers to every response."""

    async def dispatch(self, request, call_next):  # type: ignore[override]
        response = await call_next(request)

        headers: MutableHeaders = response.headers
        for header, value in SECURITY_HEADERS.items():
            if value:  # Only set if value is not None
                headers[header] = value
        # JSON API: nothing to load from anywhere
        headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        # Remove server information disclosure
        if "server" in headers:
            del headers["server"]
        return response
