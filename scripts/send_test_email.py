"""Send one test message through the configured mail dispatcher.

Usage:
    python scripts/send_test_email.py
    python scripts/send_test_email.py --reply-to you@example.com
"""

import argparse
import asyncio
import sys

from contact_api.core.config import settings
from contact_api.schemas.contact import ValidSubmission
from contact_api.services.dispatchers import Failed, build_dispatcher


async def send_test_message(reply_to: str):
    # Always exercise the mail path, whatever DISPATCH_MODE says
    dispatcher = build_dispatcher(settings.model_copy(update={"DISPATCH_MODE": "mail"}))
    submission = ValidSubmission(
        name="Test User",
        email=reply_to,
        message=(
            "This is a test message from the contact form system. If you're "
            "seeing this, the email configuration is working correctly!"
        ),
    )
    try:
        return await dispatcher.send(submission, "127.0.0.1 (Test)")
    finally:
        await dispatcher.aclose()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Send a test contact email.")
    parser.add_argument("--reply-to", default="test@example.com")
    args = parser.parse_args(argv)

    print(f"From: {settings.EMAIL_USER}")
    print(f"To: {settings.CONTACT_RECIPIENT}")
    result = asyncio.run(send_test_message(args.reply_to))

    if isinstance(result, Failed):
        print(f"Error sending email: {result.reason}", file=sys.stderr)
        return 1

    print(f"Email sent successfully. Message ID: {result.acknowledgment}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
