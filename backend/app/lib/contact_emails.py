from html import escape
from typing import Optional

OWNER_SUBJECT_PREFIX = "New Contact: "
ACKNOWLEDGMENT_SUBJECT = "We received your request"
PHONE_PLACEHOLDER = "-"


def _header_safe(value: str) -> str:
    # header values must stay on one line
    return " ".join(str(value).split())


def owner_subject(name: str) -> str:
    return f"{OWNER_SUBJECT_PREFIX}{_header_safe(name)}"


def owner_notification_html(
    name: str,
    email: str,
    phone: Optional[str],
    service: str,
    message: str,
) -> str:
    rows = [
        ("Name", name),
        ("Email", email),
        ("Phone", phone or PHONE_PLACEHOLDER),
        ("Service", service),
        ("Message", message),
    ]
    lines = ["<h3>New Contact Request</h3>"]
    lines += [f"<p><b>{label}:</b> {escape(str(value))}</p>" for label, value in rows]
    return "\n".join(lines)


def acknowledgment_html(name: str, signature: Optional[str]) -> str:
    return "\n".join([
        f"<p>Hi {escape(str(name))},</p>",
        "<p>Thanks for contacting us. We’ll get back to you soon.</p>",
        f"<p>— {escape(signature or '')}</p>",
    ])
