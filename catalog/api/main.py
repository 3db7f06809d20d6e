"""
FastAPI app assembly: logging, middleware, error handlers and router wiring.
"""
import logging
import os
import time
from collections import OrderedDict
from datetime import datetime, timezone

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)


from catalog.api.health import router as health_router
from catalog.api.products import router as products_router
from catalog.api.rate_limit import limiter
from catalog.api.reviews import router as reviews_router
from catalog.api.uploads import router as uploads_router
from catalog.api.users import router as users_router
from catalog.services.storage_service import FileTooLargeError
from catalog.utils.runtime import cors_origins

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="Catalog Service",
    description="API for users, products, reviews and file uploads.",
    version=os.getenv("VERSION", "1.0.0"),
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

origins = cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Compress responses of 1 KiB and more
app.add_middleware(GZipMiddleware, minimum_size=1024)

# Rate limiting: only routes decorated with limiter.limit are throttled
app.state.limiter = limiter


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    user_agent = (request.headers.get("user-agent") or "-")[:100]
    client_ip = request.client.host if request.client else "-"
    level = logging.ERROR if response.status_code >= 400 else logging.INFO
    logger.log(
        level,
        "%s %s %s %.1fms ua=%s ip=%s",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        user_agent,
        client_ip,
    )
    return response


# Error handling: every error body is {statusCode, message, timestamp, path[, errors]}

def _error_body(request: Request, status_code: int, message, **extra) -> dict:
    body = {
        "statusCode": status_code,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
    }
    body.update(extra)
    return body


def _log_error(request: Request, status_code: int, message) -> None:
    line = "[%s %s] Status: %s - %s"
    if status_code >= 500:
        logger.error(line, request.method, request.url.path, status_code, message)
    else:
        logger.warning(line, request.method, request.url.path, status_code, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if exc.detail is not None else "An error occurred"
    _log_error(request, exc.status_code, message)
    return JSONResponse(
        _error_body(request, exc.status_code, message),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    grouped: "OrderedDict[str, list]" = OrderedDict()
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "header")]
        field = ".".join(loc) or "body"
        grouped.setdefault(field, []).append(err.get("msg", "Invalid value"))
    errors = [{"field": field, "errors": msgs} for field, msgs in grouped.items()]

    _log_error(request, status.HTTP_400_BAD_REQUEST, "Validation failed")
    return JSONResponse(
        _error_body(request, status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    code = status.HTTP_429_TOO_MANY_REQUESTS
    _log_error(request, code, exc.detail)
    return JSONResponse(_error_body(request, code, "Too many requests, please try again later"), status_code=code)


@app.exception_handler(FileTooLargeError)
async def file_too_large_handler(request: Request, exc: FileTooLargeError):
    code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    _log_error(request, code, str(exc))
    return JSONResponse(_error_body(request, code, str(exc)), status_code=code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(_error_body(request, code, "Internal server error"), status_code=code)


app.include_router(health_router)
app.include_router(users_router)
app.include_router(products_router)
app.include_router(reviews_router)
app.include_router(uploads_router)
