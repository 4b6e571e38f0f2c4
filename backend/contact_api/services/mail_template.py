from datetime import datetime
from html import escape

from contact_api.schemas.contact import ValidSubmission

_STYLE = """
      body {
        font-family: 'Inter', Arial, sans-serif;
        line-height: 1.6;
        color: #333;
        max-width: 600px;
        margin: 0 auto;
        padding: 20px;
      }
      .header {
        background: #000;
        color: #fff;
        padding: 30px 20px;
        text-align: center;
        margin-bottom: 30px;
      }
      .header h1 {
        margin: 0;
        font-size: 24px;
        font-weight: 300;
        letter-spacing: 2px;
      }
      .content {
        background: #f8f8f8;
        padding: 30px;
        border-radius: 4px;
      }
      .field { margin-bottom: 20px; }
      .label {
        font-weight: 600;
        text-transform: uppercase;
        font-size: 12px;
        letter-spacing: 1px;
        color: #666;
        margin-bottom: 5px;
      }
      .value {
        font-size: 16px;
        color: #000;
        padding: 10px 0;
      }
      .message-box {
        background: #fff;
        padding: 20px;
        border-left: 3px solid #000;
        margin-top: 10px;
        white-space: pre-wrap;
      }
      .footer {
        margin-top: 30px;
        padding-top: 20px;
        border-top: 1px solid #ddd;
        font-size: 12px;
        color: #999;
        text-align: center;
      }
"""


def format_submitted_at(moment: datetime) -> str:
    """e.g. 'Monday, October 19, 2026 at 03:04:05 PM UTC'"""
    return moment.strftime("%A, %B %d, %Y at %I:%M:%S %p %Z").strip()


def _field(label: str, value_html: str, css_class: str = "value") -> str:
    return (
        '<div class="field">'
        f'<div class="label">{label}</div>'
        f'<div class="{css_class}">{value_html}</div>'
        "</div>"
    )


def render_html(
    submission: ValidSubmission,
    client_id: str,
    submitted_at: datetime,
    site_name: str,
    title: str = "New Contact Form Submission",
) -> str:
    name = escape(submission.name)
    email = escape(submission.email)
    fields = "".join(
        [
            _field("From", name),
            _field("Email", f'<a href="mailto:{email}">{email}</a>'),
            _field("Message", escape(submission.message), css_class="message-box"),
            _field("Submitted", escape(format_submitted_at(submitted_at))),
            _field("IP Address", escape(client_id)),
        ]
    )
    return f"""<!DOCTYPE html>
<html>
  <head>
    <style>{_STYLE}</style>
  </head>
  <body>
    <div class="header"><h1>{escape(title)}</h1></div>
    <div class="content">{fields}</div>
    <div class="footer">This message was sent from {escape(site_name)} contact form</div>
  </body>
</html>
"""


def render_text(
    submission: ValidSubmission, client_id: str, submitted_at: datetime
) -> str:
    return (
        f"Name: {submission.name}\n"
        f"Email: {submission.email}\n\n"
        f"Message:\n{submission.message}\n\n"
        f"Submitted: {format_submitted_at(submitted_at)}\n"
        f"IP: {client_id}"
    )
