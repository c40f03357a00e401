"""FastAPI application entrypoint for the Timesaver landing page.

Serves the static landing page, the calculator/analytics/lead API and a
health check. Run with ``python main.py`` or ``uvicorn main:app``.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import time
import uuid

from timesaver.api.middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from timesaver.api.routes import router
from timesaver.core.config import settings
from timesaver.core.errors import register_exception_handlers
from timesaver.core.logging import get_logger, setup_logging, utc_timestamp
from timesaver.infrastructure.rate_limiter import SlidingWindowRateLimiter
from timesaver.infrastructure.sinks import create_event_sink

# Initialize structured logging
setup_logging(level=settings.log_level, json_format=settings.is_production)
logger = get_logger(__name__)

# Application metadata
APP_VERSION = "1.0.0"
APP_NAME = "Timesaver Landing"

PROCESS_STARTED = time.monotonic()

app = FastAPI(
    title=APP_NAME,
    description="Landing page and hours-saved calculator API",
    version=APP_VERSION,
    docs_url="/docs" if not settings.is_production else None,  # Disable in prod
    redoc_url="/redoc" if not settings.is_production else None,
)

# Per-application state; nothing here is shared between app instances
app.state.event_sink = create_event_sink(settings)
app.state.rate_limiter = (
    SlidingWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    if settings.rate_limit_enabled
    else None
)

register_exception_handlers(app)

app.add_middleware(RateLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Middleware to log all requests with timing and status code."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    request_logger = get_logger(
        __name__,
        {"request_id": request_id, "method": request.method, "path": request.url.path},
    )

    start_time = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        request_logger.error(
            f"Request failed: {request.method} {request.url.path}",
            extra={
                "duration_ms": round(duration_ms, 2),
                "error": str(e),
            },
        )
        raise

    duration_ms = (time.perf_counter() - start_time) * 1000
    request_logger.info(
        f"{request.method} {request.url.path} {response.status_code}",
        extra={
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "client": request.client.host if request.client else None,
        }
    )

    response.headers["X-Request-ID"] = request_id
    return response


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info(
        "Application starting up",
        extra={
            "version": APP_VERSION,
            "environment": settings.environment,
            "event_sink": app.state.event_sink.name,
        },
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    app.state.event_sink.close()
    logger.info("Application shutting down")


app.include_router(router)


@app.get("/health")
def health_check():
    """Liveness check: status, current UTC time and process uptime in seconds."""
    return {
        "status": "healthy",
        "timestamp": utc_timestamp(),
        "uptime": round(time.monotonic() - PROCESS_STARTED, 3),
    }


# Static assets last so the API routes above take precedence
if settings.static_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
else:
    logger.warning(f"Static directory not found: {settings.static_dir}")


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Server running on port {settings.port}")
    logger.info(f"Environment: {settings.environment}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
