"""
Downstream delivery for accepted submissions.

Exactly one dispatcher is built at startup from DISPATCH_MODE:

* MailDispatcher  - renders the notification email and sends it over SMTP.
* IndexDispatcher - indexes the submission into an Elasticsearch-compatible
  service and relays free-text match queries to it.

Dispatchers never raise for collaborator failures; they return Failed with
the detail, which the route logs and hides from the caller.
"""

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Any, Dict, Optional, Union

import httpx
from starlette.concurrency import run_in_threadpool

from contact_api.core.config import Settings
from contact_api.core.errors import DispatchUnavailable
from contact_api.schemas.contact import ValidSubmission
from contact_api.services import mail_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Delivered:
    acknowledgment: Any = None


@dataclass(frozen=True)
class Failed:
    reason: str


DispatchResult = Union[Delivered, Failed]


def _single_line(value: str) -> str:
    return " ".join(value.splitlines())


class Dispatcher:
    mode = ""

    async def send(self, submission: ValidSubmission, client_id: str) -> DispatchResult:
        raise NotImplementedError

    async def health(self) -> Optional[Dict[str, Any]]:
        """Collaborator health payload, or None when there is nothing to check."""
        return None

    async def aclose(self) -> None:
        pass


class MailDispatcher(Dispatcher):
    mode = "mail"

    def __init__(
        self,
        user: str,
        password: str,
        recipient: str,
        sender_name: str,
        site_name: str,
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 465,
        timeout: float = 10.0,
    ):
        self.user = user
        self.password = password
        self.recipient = recipient
        self.sender_name = sender_name
        self.site_name = site_name
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.timeout = timeout

    def compose(
        self,
        submission: ValidSubmission,
        client_id: str,
        submitted_at: Optional[datetime] = None,
    ) -> EmailMessage:
        submitted_at = submitted_at or datetime.now(timezone.utc)

        msg = EmailMessage()
        msg["From"] = formataddr((self.sender_name, self.user))
        msg["To"] = self.recipient
        msg["Reply-To"] = submission.email
        msg["Subject"] = f"Contact Form: Message from {_single_line(submission.name)}"
        msg["Message-ID"] = make_msgid()
        msg.set_content(mail_template.render_text(submission, client_id, submitted_at))
        msg.add_alternative(
            mail_template.render_html(
                submission, client_id, submitted_at, site_name=self.site_name
            ),
            subtype="html",
        )
        return msg

    def deliver(self, msg: EmailMessage) -> str:
        """Blocking SMTP hand-off. Returns the Message-ID as acknowledgment."""
        if self.smtp_port == smtplib.SMTP_SSL_PORT:
            server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout)

        with server:
            if self.smtp_port != smtplib.SMTP_SSL_PORT:
                server.starttls()
            server.login(self.user, self.password)
            server.send_message(msg)

        return msg["Message-ID"]

    async def send(self, submission: ValidSubmission, client_id: str) -> DispatchResult:
        if not self.user or not self.password:
            return Failed("Mail credentials are not configured")

        try:
            msg = self.compose(submission, client_id)
            message_id = await asyncio.wait_for(
                run_in_threadpool(self.deliver, msg), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            return Failed(f"Mail delivery timed out after {self.timeout}s")
        except Exception as e:
            logger.error(f"SMTP delivery failed: {e}", exc_info=True)
            return Failed(f"SMTP delivery failed: {e}")

        return Delivered(acknowledgment=message_id)


class IndexDispatcher(Dispatcher):
    mode = "search"

    def __init__(
        self,
        base_url: str,
        index: str,
        field: str = "message",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.index = index
        self.field = field
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    async def _post(self, path: str, payload: Dict[str, Any]) -> DispatchResult:
        try:
            response = await self._client.post(path, json=payload)
            response.raise_for_status()
            return Delivered(acknowledgment=response.json())
        except httpx.TimeoutException as e:
            return Failed(f"Index service timed out: {e!r}")
        except httpx.HTTPStatusError as e:
            return Failed(
                f"Index service returned {e.response.status_code}: {e.response.text}"
            )
        except (httpx.HTTPError, ValueError) as e:
            return Failed(f"Index service request failed: {e!r}")

    async def send(self, submission: ValidSubmission, client_id: str) -> DispatchResult:
        document = {
            "name": submission.name,
            "email": submission.email,
            "message": submission.message,
            "client_id": client_id,
            "submitted_at": datetime.now(timezone.utc).isoformat(),
        }
        return await self._post(f"/{self.index}/_doc", document)

    async def search(self, query: str) -> DispatchResult:
        return await self._post(
            f"/{self.index}/_search", {"query": {"match": {self.field: query}}}
        )

    async def health(self) -> Dict[str, Any]:
        try:
            response = await self._client.get("/_cluster/health")
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DispatchUnavailable(str(e)) from e

    async def aclose(self) -> None:
        await self._client.aclose()


def build_dispatcher(app_settings: Settings) -> Dispatcher:
    if app_settings.DISPATCH_MODE == "search":
        return IndexDispatcher(
            base_url=app_settings.SEARCH_URL,
            index=app_settings.SEARCH_INDEX,
            field=app_settings.SEARCH_FIELD,
            timeout=app_settings.DISPATCH_TIMEOUT_SECONDS,
        )
    return MailDispatcher(
        user=app_settings.EMAIL_USER,
        password=app_settings.EMAIL_APP_PASSWORD,
        recipient=app_settings.CONTACT_RECIPIENT,
        sender_name=app_settings.CONTACT_FORM_NAME,
        site_name=app_settings.SITE_NAME,
        smtp_host=app_settings.SMTP_HOST,
        smtp_port=app_settings.SMTP_PORT,
        timeout=app_settings.DISPATCH_TIMEOUT_SECONDS,
    )
