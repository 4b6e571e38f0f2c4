from fastapi import Request

from contact_api.core.client_identity import resolve_client_id
from contact_api.services.dispatchers import Dispatcher
from contact_api.services.rate_limiter import SubmissionRateLimiter


def get_client_id(request: Request) -> str:
    return resolve_client_id(request)


def get_rate_limiter(request: Request) -> SubmissionRateLimiter:
    """The limiter created by the application lifespan."""
    return request.app.state.rate_limiter


def get_dispatcher(request: Request) -> Dispatcher:
    """The dispatcher selected at startup from DISPATCH_MODE."""
    return request.app.state.dispatcher
