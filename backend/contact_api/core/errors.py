"""
Exception taxonomy for the contact pipeline.

ContactClientError subclasses carry a message that is safe to show to the
caller. DispatchFailed carries collaborator detail that is only ever logged;
the caller sees GENERIC_FAILURE_MESSAGE. HoneypotTriggered is answered as a
normal success.
"""

from enum import Enum

GENERIC_FAILURE_MESSAGE = "Failed to send your message. Please try again later."


class RejectionReason(str, Enum):
    MISSING_FIELDS = "All fields are required"
    INVALID_FIELD_TYPES = "Invalid field types"
    INVALID_EMAIL_FORMAT = "Invalid email format"
    MISSING_QUERY = "Query parameter is required"
    INVALID_JSON = "Request body must be valid JSON"


class ContactClientError(Exception):
    status_code = 400

    @property
    def message(self) -> str:
        raise NotImplementedError


class SubmissionRejected(ContactClientError):
    def __init__(self, reason: RejectionReason):
        super().__init__(reason.value)
        self.reason = reason

    @property
    def message(self) -> str:
        return self.reason.value


class RateLimited(ContactClientError):
    status_code = 429

    def __init__(self, retry_after_seconds: int):
        super().__init__(f"retry after {retry_after_seconds}s")
        self.retry_after_seconds = retry_after_seconds

    @property
    def message(self) -> str:
        return (
            f"Too many requests. Please wait {self.retry_after_seconds} "
            "seconds before submitting again."
        )


class HoneypotTriggered(Exception):
    """The hidden field was filled in; answer as if delivery succeeded."""


class DispatchFailed(Exception):
    def __init__(self, reason: str, public_message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(reason)
        self.reason = reason
        self.public_message = public_message


class DispatchUnavailable(Exception):
    """The downstream collaborator could not be reached for a health check."""
