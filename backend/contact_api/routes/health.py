import logging
import time
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from contact_api.core.dependencies import get_dispatcher
from contact_api.core.errors import DispatchUnavailable
from contact_api.schemas.contact import HealthResponse
from contact_api.services.dispatchers import Dispatcher

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health_check(request: Request, dispatcher: Dispatcher = Depends(get_dispatcher)):
    try:
        search_health = await dispatcher.health()
    except DispatchUnavailable as e:
        logger.error(f"Search service health check failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "error": "Search service unavailable"},
        )

    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
        search=search_health,
    )
