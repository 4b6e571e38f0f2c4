import logging
import json
import time
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from contact_api.core.client_identity import resolve_client_id
from contact_api.core.config import Settings, settings
from contact_api.core.errors import GENERIC_FAILURE_MESSAGE, ContactClientError, DispatchFailed
from contact_api.core.limiter import configure_search_rate_limit, limiter
from contact_api.routes import contact, health, search
from contact_api.services.dispatchers import build_dispatcher
from contact_api.services.rate_limiter import SubmissionRateLimiter

# Configure structured JSON logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(message)s",
)
logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    EXTRA_FIELDS = (
        "client_id",
        "request_path",
        "status_code",
        "response_time",
        "retry_after",
        "dispatch_mode",
    )

    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }
        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


# Apply JSON formatter to root logger
handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
logging.getLogger().handlers = [handler]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    app_settings: Settings = app.state.settings
    logger.info(
        "Starting Contact API",
        extra={"dispatch_mode": app_settings.DISPATCH_MODE},
    )
    app.state.rate_limiter = SubmissionRateLimiter(
        window_seconds=app_settings.CONTACT_RATE_LIMIT_WINDOW_SECONDS
    )
    app.state.dispatcher = build_dispatcher(app_settings)
    yield
    # Shutdown
    app.state.rate_limiter.close()
    await app.state.dispatcher.aclose()
    logger.info("Shutting down Contact API")


async def client_error_handler(request: Request, exc: ContactClientError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def dispatch_failed_handler(request: Request, exc: DispatchFailed):
    # Full detail stays in the server log; the caller only gets the generic text
    logger.error(
        f"Dispatch failed: {exc.reason}",
        exc_info=exc.__cause__,
        extra={"client_id": resolve_client_id(request)},
    )
    return JSONResponse(status_code=500, content={"error": exc.public_message})


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE_MESSAGE})


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings

    app = FastAPI(
        title="Contact Form API",
        description="Rate-limited contact form endpoint with mail or search dispatch",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.started_at = time.monotonic()

    # Per-client throttle on the search endpoint
    app.state.limiter = limiter
    configure_search_rate_limit(app_settings.SEARCH_RATE_LIMIT)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_exception_handler(ContactClientError, client_error_handler)
    app.add_exception_handler(DispatchFailed, dispatch_failed_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # CORS origins depend on ENVIRONMENT
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time

        log_record = logging.LogRecord(
            name="api",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg=f"{request.method} {request.url.path}",
            args=(),
            exc_info=None,
        )
        log_record.request_path = str(request.url.path)
        log_record.status_code = response.status_code
        log_record.response_time = f"{process_time:.3f}s"
        log_record.client_id = resolve_client_id(request)

        logger.handle(log_record)

        return response

    # Include routers
    app.include_router(contact.router, prefix="/api", tags=["Contact"])
    app.include_router(health.router, prefix="/api", tags=["Health"])
    if app_settings.DISPATCH_MODE == "search":
        app.include_router(search.router, prefix="/api", tags=["Search"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
