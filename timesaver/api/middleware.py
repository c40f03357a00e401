"""
HTTP middleware: security headers and per-IP rate limiting.
"""

from typing import Callable, Iterable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from timesaver.infrastructure.rate_limiter import SlidingWindowRateLimiter

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "style-src 'self' 'unsafe-inline'",
    "script-src 'self'",
    "img-src 'self' data: https:",
    "connect-src 'self'",
    "font-src 'self'",
    "object-src 'none'",
    "media-src 'self'",
    "frame-src 'none'",
])

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach a fixed set of security headers to every response.

    The interactive API docs load their assets from a CDN, so they skip the
    Content-Security-Policy.
    """

    def __init__(self, app, csp_exempt_paths: Iterable[str] = ("/docs", "/redoc")):
        super().__init__(app)
        self.csp_exempt_paths = frozenset(csp_exempt_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            if header == "Content-Security-Policy" and request.url.path in self.csp_exempt_paths:
                continue
            response.headers.setdefault(header, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-client-IP rate limiting.

    The limiter is looked up on ``app.state.rate_limiter`` for every request,
    so it can be swapped or reset without rebuilding the middleware stack.
    """

    def __init__(self, app, exempt_paths: Iterable[str] = ("/health",)):
        super().__init__(app)
        self.exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        limiter: SlidingWindowRateLimiter = getattr(request.app.state, "rate_limiter", None)
        if limiter is None or request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        retry_after = limiter.hit(client_ip)

        if retry_after is not None:
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"error": RATE_LIMIT_MESSAGE},
                headers={
                    "X-RateLimit-Limit": str(limiter.max_requests),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(retry_after),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(limiter.remaining(client_ip))
        return response
