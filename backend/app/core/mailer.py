# app/core/mailer.py
import logging
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

import aiosmtplib

from app.core.settings import Settings

log = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class Sender:
    name: Optional[str]
    address: Optional[str]

    def formatted(self) -> str:
        return formataddr((self.name or "", self.address or ""))


@dataclass(frozen=True)
class SendResult:
    ok: bool
    reason: Optional[str] = None

    @classmethod
    def sent(cls) -> "SendResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: str) -> "SendResult":
        return cls(ok=False, reason=reason)


class MailDispatcher:
    """
    Hands HTML messages to an authenticated SMTP relay.

    One instance is built at startup and shared by every request. Each send
    opens its own relay session, so concurrent requests never share a socket.
    Failures come back as SendResult values; nothing is retried here.
    """

    def __init__(
        self,
        host: Optional[str],
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = False,
        validate_certs: bool = True,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.validate_certs = validate_certs
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailDispatcher":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_pass,
            use_tls=settings.smtp_secure,
            validate_certs=settings.smtp_validate_certs,
            timeout=settings.smtp_timeout,
        )

    def _connection_kwargs(self) -> dict:
        return {
            "hostname": self.host,
            "port": self.port,
            "username": self.username or None,
            "password": self.password or None,
            "use_tls": self.use_tls,
            # None = upgrade with STARTTLS when the relay offers it
            "start_tls": False if self.use_tls else None,
            "validate_certs": self.validate_certs,
            "timeout": self.timeout,
        }

    async def verify(self) -> bool:
        if not self.host:
            log.warning("[mailer] SMTP error: SMTP_HOST is not configured")
            return False
        try:
            async with aiosmtplib.SMTP(**self._connection_kwargs()) as smtp:
                await smtp.noop()
        except (aiosmtplib.SMTPException, OSError) as exc:
            log.warning(f"[mailer] SMTP error: {exc}")
            return False
        log.info(f"[mailer] SMTP ready ({self.host}:{self.port or 'default'})")
        return True

    def build_message(
        self,
        sender: Sender,
        to: str,
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = sender.formatted()
        msg["To"] = to
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(html, subtype="html")
        return msg

    async def send(
        self,
        sender: Sender,
        to: Optional[str],
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> SendResult:
        if not self.host:
            return SendResult.failed("SMTP_HOST is not configured")
        if not sender.address:
            return SendResult.failed("sender address is not configured")
        if not to:
            return SendResult.failed("recipient address is missing")

        msg = self.build_message(sender, to, subject, html, reply_to=reply_to)
        try:
            await aiosmtplib.send(msg, **self._connection_kwargs())
        except aiosmtplib.SMTPRecipientsRefused as exc:
            return SendResult.failed(f"recipient refused: {exc}")
        except (aiosmtplib.SMTPException, OSError) as exc:
            return SendResult.failed(f"{type(exc).__name__}: {exc}")
        return SendResult.sent()
