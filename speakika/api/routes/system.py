"""
Liveness check for the persistence store.

``GET /api/db-check`` runs ``select 1`` and reports the round-trip time.
Every other method is answered with 405 and ``Allow: GET``.
"""

import logging
import time
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from speakika.api.dependencies import get_database
from speakika.core.models import DbCheckFailure, DbCheckSuccess
from speakika.services.storage.database import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


def _iso_timestamp() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get(
    "/db-check",
    response_model=DbCheckSuccess,
    responses={500: {"model": DbCheckFailure}},
)
async def db_check(database: Database = Depends(get_database)):
    """Measure a trivial round trip to the database."""
    try:
        started = time.perf_counter()
        await database.ping()
        round_trip_ms = round((time.perf_counter() - started) * 1000)
    except Exception as exc:
        message = str(exc) or "Unknown database connection error"
        logger.warning("Database check failed: %s", message)
        return JSONResponse(status_code=500, content=DbCheckFailure(error=message).model_dump())

    return DbCheckSuccess(timestamp=_iso_timestamp(), round_trip_ms=round_trip_ms)


@router.api_route(
    "/db-check",
    methods=["POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def db_check_method_not_allowed() -> Response:
    return Response(status_code=405, headers={"Allow": "GET"})
