import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request

from contact_api.core.client_identity import resolve_client_id
from contact_api.core.dependencies import get_dispatcher
from contact_api.core.errors import DispatchFailed
from contact_api.core.limiter import limiter, search_rate_limit
from contact_api.schemas.contact import ErrorResponse
from contact_api.services.dispatchers import Failed, IndexDispatcher
from contact_api.services.validator import validate_query

router = APIRouter()
logger = logging.getLogger(__name__)

SEARCH_FAILURE_MESSAGE = "Search failed. Please try again later."


# Only mounted when DISPATCH_MODE=search (see main.create_app)
@router.get(
    "/search",
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
@limiter.limit(search_rate_limit)
async def search(
    request: Request,
    query: Optional[str] = None,
    dispatcher: IndexDispatcher = Depends(get_dispatcher),
):
    """Relay a free-text match query to the index service."""
    query = validate_query(query)

    result = await dispatcher.search(query)
    if isinstance(result, Failed):
        raise DispatchFailed(result.reason, public_message=SEARCH_FAILURE_MESSAGE)

    logger.info(
        "Search query relayed", extra={"client_id": resolve_client_id(request)}
    )
    return result.acknowledgment
