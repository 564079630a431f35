# middleware/securityMiddleware.py

import logging
import math
import os
import time
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("security")
logger.setLevel(logging.INFO)

# client id -> {"count", "resetTime"}; resetTime is epoch milliseconds
rate_limit_store = {}

security_headers = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


def get_client_id(request: Request) -> str:
    api_key = request.headers.get("x-api-key")
    if api_key:
        return f"api:{api_key}"

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return f"ip:{forwarded_for.split(',')[0].strip()}"
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return f"ip:{real_ip}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


def check_rate_limit(client_id: str):
    """
    Count one request for client_id in its fixed window.

    Returns None while the client is under the limit, otherwise the 429 response.
    """
    if os.getenv("ENABLE_RATE_LIMITING") == "false":
        return None

    window_ms = int(os.getenv("RATE_LIMIT_WINDOW_MS", "900000"))
    max_requests = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
    now = int(time.time() * 1000)

    for key in [k for k, v in rate_limit_store.items() if now > v["resetTime"]]:
        del rate_limit_store[key]

    entry = rate_limit_store.get(client_id)
    if entry is None:
        entry = {"count": 0, "resetTime": now + window_ms}
        rate_limit_store[client_id] = entry

    entry["count"] += 1
    if entry["count"] <= max_requests:
        return None

    retry_after = math.ceil((entry["resetTime"] - now) / 1000)
    logger.warning(f"Rate limit exceeded for {client_id}")
    return JSONResponse(
        {
            "error": "Rate limit exceeded",
            "message": f"Too many requests. Limit: {max_requests} per {window_ms / 1000:g} seconds",
            "retryAfter": retry_after,
        },
        status_code=429,
        headers={
            "X-RateLimit-Limit": str(max_requests),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(entry["resetTime"]),
            "Retry-After": str(retry_after),
        },
    )


class SecurityMiddleware(BaseHTTPMiddleware):
    """Rate limiting, security headers and a safe 500 for the protected routes."""

    def __init__(self, app, protected_routes=(("POST", "/api/auth/login"),)):
        super().__init__(app)
        self.protected_routes = set(protected_routes)

    async def dispatch(self, request: Request, call_next):
        if (request.method, request.url.path) not in self.protected_routes:
            return await call_next(request)

        limited = check_rate_limit(get_client_id(request))
        if limited is not None:
            return limited

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"Unhandled exception in {request.url.path}")
            response = JSONResponse(
                {"error": "Internal server error", "message": "An unexpected error occurred"},
                status_code=500,
            )

        for key, value in security_headers.items():
            response.headers[key] = value
        return response
