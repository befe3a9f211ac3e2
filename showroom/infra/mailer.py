"""Outbound mail transports.

A single transport is built at application startup (see ``showroom.main``)
and handed to the services that send mail.
"""

import asyncio
import smtplib
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from email.message import EmailMessage

from showroom.config import Settings
from showroom.infra.logging import get_logger

logger = get_logger(__name__)


class MailDeliveryError(Exception):
    """Raised when a message could not be handed to the mail server."""


@dataclass(frozen=True)
class OutgoingMail:
    """A single HTML message with a plain-text fallback."""

    to: str
    subject: str
    html: str
    text: str
    reply_to: str | None = None


class MailTransport(ABC):
    """Abstract base for mail transports."""

    def __init__(self, sender: str) -> None:
        self.sender = sender

    @abstractmethod
    async def send(self, mail: OutgoingMail) -> None:
        """Deliver a message.

        Raises:
            MailDeliveryError: If delivery failed
        """

    async def close(self) -> None:
        """Release transport resources."""

    def _build_message(self, mail: OutgoingMail) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = mail.to
        message["Subject"] = mail.subject
        if mail.reply_to:
            message["Reply-To"] = mail.reply_to
        message.set_content(mail.text)
        message.add_alternative(mail.html, subtype="html")
        return message


class ConsoleMailTransport(MailTransport):
    """Logs messages instead of sending them (development).

    Only the most recent ``keep`` messages stay in ``sent``.
    """

    def __init__(self, sender: str, keep: int = 50) -> None:
        super().__init__(sender)
        self.sent: deque[OutgoingMail] = deque(maxlen=keep)

    async def send(self, mail: OutgoingMail) -> None:
        self.sent.append(mail)
        logger.info(
            "Mail captured (console backend)",
            to=mail.to,
            subject=mail.subject,
            body=mail.text,
        )


class SmtpMailTransport(MailTransport):
    """Sends mail through an SMTP server.

    A new connection is opened per message so that stale credentials
    never outlive a request.
    """

    def __init__(
        self,
        sender: str,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(sender)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    async def send(self, mail: OutgoingMail) -> None:
        message = self._build_message(mail)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "SMTP delivery failed",
                to=mail.to,
                subject=mail.subject,
                host=self.host,
                error=str(e),
            )
            raise MailDeliveryError(str(e)) from e

        logger.info("Mail sent", to=mail.to, subject=mail.subject)

    def _deliver(self, message: EmailMessage) -> None:
        smtp_class = smtplib.SMTP_SSL if self.use_tls else smtplib.SMTP
        with smtp_class(self.host, self.port, timeout=self.timeout) as smtp:
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(message)


def build_mail_transport(settings: Settings) -> MailTransport:
    """Create the transport selected by configuration."""
    if settings.mail_backend == "smtp":
        logger.info("Using SMTP mail transport", host=settings.smtp_host, port=settings.smtp_port)
        return SmtpMailTransport(
            sender=settings.mail_sender,
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout,
        )

    logger.info("Using console mail transport")
    return ConsoleMailTransport(sender=settings.mail_sender)
