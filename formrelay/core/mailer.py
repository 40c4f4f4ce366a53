"""
Mail transport.

The notifier only depends on the MailTransport contract: send one message,
return on success, raise TransportError on any failure. SmtpTransport is the
production implementation; tests inject their own.
"""

import asyncio
import logging
import smtplib
import ssl
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import parseaddr
from typing import Optional, Protocol

from formrelay.core.config import Settings
from formrelay.core.exceptions import TransportError
from formrelay.models.notification import Attachment, NotificationMessage

logger = logging.getLogger(__name__)

SECURITY_MODES = ("starttls", "ssl", "none")


class MailTransport(Protocol):
    async def send(self, message: NotificationMessage) -> None:
        ...


def _attachment_part(attachment: Attachment) -> MIMEBase:
    main_type, _, rest = attachment.content_type.partition("/")
    sub_type, *raw_params = [piece.strip() for piece in rest.split(";")]

    part = MIMEBase(main_type or "application", sub_type or "octet-stream")
    for raw_param in raw_params:
        key, _, value = raw_param.partition("=")
        if key:
            part.set_param(key.strip(), value.strip())
    part.set_payload(attachment.content)
    encoders.encode_base64(part)
    part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
    return part


def build_mime_message(message: NotificationMessage, sender: str) -> MIMEMultipart:
    """Assemble a multipart/mixed email: the HTML body followed by attachments"""
    msg = MIMEMultipart("mixed")
    msg["Subject"] = message.subject
    msg["From"] = sender
    msg["To"] = message.recipient

    msg.attach(MIMEText(message.body_html, "html", "utf-8"))

    for attachment in message.attachments:
        msg.attach(_attachment_part(attachment))

    return msg


class SmtpTransport:
    """
    Sends each message over its own SMTP connection.

    smtplib is blocking, so the actual exchange runs in a worker thread and
    the caller simply awaits it.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        security: str = "starttls",
        timeout: float = 30.0,
    ):
        if security not in SECURITY_MODES:
            raise ValueError(f"Unsupported SMTP security mode '{security}', expected one of {SECURITY_MODES}")
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.security = security
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpTransport":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.email_from or settings.email_user or "",
            username=settings.email_user,
            password=settings.email_pass,
            security=settings.smtp_security,
            timeout=settings.smtp_timeout,
        )

    def _send_sync(self, message: NotificationMessage) -> None:
        if not self.sender:
            raise ValueError("Sender address not configured! Please set EMAIL_FROM or EMAIL_USER in your environment variables.")

        mime_message = build_mime_message(message, self.sender)
        envelope_from = parseaddr(self.sender)[1]

        if self.security == "ssl":
            connection = smtplib.SMTP_SSL(self.host, self.port, context=ssl.create_default_context(), timeout=self.timeout)
        else:
            connection = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        with connection as server:
            if self.security == "starttls":
                server.starttls(context=ssl.create_default_context())
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(envelope_from, [message.recipient], mime_message.as_string())

    async def send(self, message: NotificationMessage) -> None:
        try:
            await asyncio.to_thread(self._send_sync, message)
        except Exception as e:
            raise TransportError(message.recipient, e) from e

        logger.info(f"✅ Email sent via {self.host} to {message.recipient}")
