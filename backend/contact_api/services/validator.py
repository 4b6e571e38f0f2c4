import re
from typing import Any

from contact_api.core.errors import HoneypotTriggered, RejectionReason, SubmissionRejected
from contact_api.schemas.contact import ValidSubmission

REQUIRED_FIELDS = ("name", "email", "message")
HONEYPOT_FIELD = "website"

# local@domain.tld shape only, not full RFC 5322
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def _is_blank(value: Any) -> bool:
    # null, false, 0 and "" count as absent; [] and {} are present but not text
    return value is None or value == "" or (not isinstance(value, str) and value == 0)


def validate_submission(raw: Any) -> ValidSubmission:
    """
    Validate a decoded request body.

    Checks run in order and stop at the first failure: presence, text type,
    honeypot, email shape. Raises SubmissionRejected for real rejections and
    HoneypotTriggered when the hidden field is filled in.
    """
    if not isinstance(raw, dict):
        raw = {}

    values = [raw.get(field) for field in REQUIRED_FIELDS]

    if any(_is_blank(value) for value in values):
        raise SubmissionRejected(RejectionReason.MISSING_FIELDS)

    if not all(isinstance(value, str) for value in values):
        raise SubmissionRejected(RejectionReason.INVALID_FIELD_TYPES)

    if not _is_blank(raw.get(HONEYPOT_FIELD)):
        raise HoneypotTriggered()

    if not EMAIL_PATTERN.fullmatch(raw["email"]):
        raise SubmissionRejected(RejectionReason.INVALID_EMAIL_FORMAT)

    return ValidSubmission(**dict(zip(REQUIRED_FIELDS, values)))


def validate_query(query: Any) -> str:
    if not query or not isinstance(query, str):
        raise SubmissionRejected(RejectionReason.MISSING_QUERY)
    return query
