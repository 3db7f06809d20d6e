"""
Health and build information endpoints.
"""

import logging
import os
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.requests import Request
from starlette.responses import JSONResponse

from catalog.api.rate_limit import HEALTH_RATE_LIMIT, limiter
from catalog.db.database import get_db, ping

logger = logging.getLogger(__name__)

router = APIRouter(tags=["support"])


@router.get("/health")
@limiter.limit(HEALTH_RATE_LIMIT)
def health(request: Request, db: Session = Depends(get_db)):
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        ping(db)
    except SQLAlchemyError as e:
        logger.error("Health check database ping failed: %s", e)
        return JSONResponse(
            {"status": "error", "timestamp": timestamp, "database": "unavailable"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return {"status": "ok", "timestamp": timestamp, "database": "connected"}


@router.get("/build-info")
def get_build_info():
    """Return build and deployment information for the running service."""
    build_sha = os.getenv("BUILD_SHA")
    return {
        "build_sha": build_sha if build_sha else None,
        "service_name": "catalog-service",
        "version": os.getenv("VERSION", "unknown"),
    }
