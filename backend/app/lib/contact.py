import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from app.core.mailer import Sender
from app.lib.contact_emails import (
    ACKNOWLEDGMENT_SUBJECT,
    acknowledgment_html,
    owner_notification_html,
    owner_subject,
)
from app.lib.validation import is_valid_email

log = logging.getLogger("uvicorn.error")

REQUIRED_FIELDS = ("name", "email", "service", "message")


class ContactSubmission(BaseModel):
    # everything optional: absence is reported by the handler, not by FastAPI
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    service: Optional[str] = None
    message: Optional[str] = None

    @field_validator("name", "email", "phone", "service", "message", mode="before")
    @classmethod
    def _scalar_to_str(cls, value):
        # 0, false and "" are all "not provided"
        if not value:
            return None
        if isinstance(value, bool):
            return "true"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def missing_fields(self) -> List[str]:
        return [f for f in REQUIRED_FIELDS if not getattr(self, f)]


class ContactOutcome(str, Enum):
    OK = "ok"
    REJECTED_MISSING_FIELD = "rejected_missing_field"
    REJECTED_INVALID_EMAIL = "rejected_invalid_email"
    SERVER_ERROR = "server_error"

    def response(self) -> Tuple[int, Dict[str, Any]]:
        return _RESPONSES[self]


_RESPONSES = {
    ContactOutcome.OK: (200, {"ok": True}),
    ContactOutcome.REJECTED_MISSING_FIELD: (400, {"error": "Required fields missing"}),
    ContactOutcome.REJECTED_INVALID_EMAIL: (400, {"error": "Invalid email"}),
    ContactOutcome.SERVER_ERROR: (500, {"error": "Server error"}),
}


class ContactHandler:
    """
    Validates a submission and sends the two notification mails in order:
    owner first, then the acknowledgment to the submitter. A failed owner
    send stops the request before the acknowledgment is attempted.
    """

    def __init__(self, dispatcher, owner_email: Optional[str], sender: Sender):
        self.dispatcher = dispatcher
        self.owner_email = owner_email
        self.sender = sender

    async def handle(self, submission: ContactSubmission) -> ContactOutcome:
        if submission.missing_fields():
            return ContactOutcome.REJECTED_MISSING_FIELD
        if not is_valid_email(submission.email):
            return ContactOutcome.REJECTED_INVALID_EMAIL

        try:
            return await self._dispatch(submission)
        except Exception:
            log.exception("[contact] unexpected error while handling submission")
            return ContactOutcome.SERVER_ERROR

    async def _dispatch(self, s: ContactSubmission) -> ContactOutcome:
        owner = await self.dispatcher.send(
            self.sender,
            self.owner_email,
            owner_subject(s.name),
            owner_notification_html(s.name, s.email, s.phone, s.service, s.message),
            reply_to=s.email,
        )
        if not owner.ok:
            log.error(f"[contact] owner notification failed: {owner.reason}")
            return ContactOutcome.SERVER_ERROR

        ack = await self.dispatcher.send(
            self.sender,
            s.email,
            ACKNOWLEDGMENT_SUBJECT,
            acknowledgment_html(s.name, self.sender.name),
        )
        if not ack.ok:
            # owner already has the message; the client still sees a plain 500
            log.error(f"[contact] acknowledgment failed after owner was notified: {ack.reason}")
            return ContactOutcome.SERVER_ERROR

        return ContactOutcome.OK
