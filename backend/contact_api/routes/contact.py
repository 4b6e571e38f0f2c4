import json
import logging
from fastapi import APIRouter, Depends, Request

from contact_api.core.dependencies import get_client_id, get_dispatcher, get_rate_limiter
from contact_api.core.errors import (
    DispatchFailed,
    HoneypotTriggered,
    RateLimited,
    RejectionReason,
    SubmissionRejected,
)
from contact_api.schemas.contact import ContactResponse, ErrorResponse
from contact_api.services.dispatchers import Dispatcher, Failed
from contact_api.services.rate_limiter import RateDecision, SubmissionRateLimiter, Throttled
from contact_api.services.validator import validate_submission

router = APIRouter()
logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Message sent successfully"


async def _read_json_body(request: Request):
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError:
        raise SubmissionRejected(RejectionReason.INVALID_JSON)


def _raise_if_throttled(decision: RateDecision, client_id: str) -> None:
    if isinstance(decision, Throttled):
        logger.warning(
            "Contact submission throttled",
            extra={"client_id": client_id, "retry_after": decision.retry_after_seconds},
        )
        raise RateLimited(decision.retry_after_seconds)


@router.post(
    "/contact",
    response_model=ContactResponse,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def submit_contact(
    request: Request,
    client_id: str = Depends(get_client_id),
    rate_limiter: SubmissionRateLimiter = Depends(get_rate_limiter),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Rate-check, validate and dispatch one contact form submission."""

    _raise_if_throttled(rate_limiter.check(client_id), client_id)

    raw = await _read_json_body(request)

    try:
        submission = validate_submission(raw)
    except HoneypotTriggered:
        # Bots get the same answer as a real delivery
        logger.info("Honeypot field filled, dropping submission", extra={"client_id": client_id})
        return ContactResponse(success=True, message=SUCCESS_MESSAGE)

    # Only accepted submissions start the window; re-checked in case a
    # concurrent request from the same client was recorded meanwhile
    _raise_if_throttled(rate_limiter.check_and_record(client_id), client_id)

    try:
        result = await dispatcher.send(submission, client_id)
    except Exception as e:
        raise DispatchFailed(f"{type(e).__name__}: {e}") from e

    if isinstance(result, Failed):
        raise DispatchFailed(result.reason)

    logger.info(
        f"Contact form submission dispatched from {submission.email}",
        extra={"client_id": client_id, "dispatch_mode": dispatcher.mode},
    )
    return ContactResponse(success=True, message=SUCCESS_MESSAGE)
