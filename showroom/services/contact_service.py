"""Contact Service - validates inquiries and sends the two notification mails."""

import asyncio
import html
import re
from datetime import datetime, timedelta, timezone

from showroom.config import settings
from showroom.core.errors import ShowroomError, ValidationError
from showroom.infra.logging import get_logger
from showroom.infra.mailer import MailTransport, OutgoingMail
from showroom.schemas.contact import ContactInquiry

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+]?[\d\s\-().]{7,20}$")
MAX_FIELD_LENGTH = 500
_WHITESPACE_RUN = re.compile(r"\s+")

BRAND_NAME = "VIDO Furniture"
# Vietnam has no DST
LOCAL_TIMEZONE = timezone(timedelta(hours=7), "ICT")

SEND_FAILED_MESSAGE = "Failed to send email. Please try again or contact us directly."


class MailSendError(ShowroomError):
    """One or both inquiry mails could not be delivered."""

    status_code = 500


def sanitize(value: str | None, max_length: int = MAX_FIELD_LENGTH) -> str:
    """Trim and cap a free-text field."""
    return (value or "").strip()[:max_length]


def sanitize_line(value: str | None, max_length: int = MAX_FIELD_LENGTH) -> str:
    """Like ``sanitize`` but folds line breaks and other whitespace runs to one space.

    Names end up in mail headers, which must stay on a single line.
    """
    return _WHITESPACE_RUN.sub(" ", sanitize(value, max_length))


def clean_inquiry(inquiry: ContactInquiry) -> ContactInquiry:
    """Validate and sanitize an inquiry.

    Raises:
        ValidationError: With per-field messages for every invalid field
    """
    cleaned = ContactInquiry(
        first_name=sanitize_line(inquiry.first_name),
        last_name=sanitize_line(inquiry.last_name),
        email=sanitize(inquiry.email),
        phone=sanitize_line(inquiry.phone),
        message=sanitize(inquiry.message),
    )

    errors: dict[str, str] = {}
    if not cleaned.first_name:
        errors["firstName"] = "First name is required"
    if not cleaned.last_name:
        errors["lastName"] = "Last name is required"
    if not cleaned.email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.match(cleaned.email):
        errors["email"] = "Please enter a valid email address"
    if not cleaned.phone:
        errors["phone"] = "Phone is required"
    elif not PHONE_PATTERN.match(cleaned.phone):
        errors["phone"] = "Please enter a valid phone number"

    if errors:
        raise ValidationError("Invalid inquiry", errors=errors)
    return cleaned


def build_customer_confirmation(inquiry: ContactInquiry) -> OutgoingMail:
    full_name = f"{inquiry.first_name} {inquiry.last_name}"
    rows = [("Name", full_name), ("Email", inquiry.email), ("Phone", inquiry.phone)]
    if inquiry.message:
        rows.append(("Message", inquiry.message))

    text = (
        f"Dear {full_name},\n\n"
        f"Thank you for your interest in {BRAND_NAME}. Our sales team has received "
        "your inquiry and will respond within 24 business hours.\n\n"
        + "\n".join(f"{label}: {value}" for label, value in rows)
        + f"\n\nWarm regards,\n{BRAND_NAME} Sales Team\n"
    )
    body = (
        f"<h2>Thank You for Your Inquiry</h2>"
        f"<p>Dear {html.escape(full_name)},</p>"
        f"<p>Thank you for your interest in {BRAND_NAME}. Our sales team has received "
        "your inquiry and will respond within <strong>24 business hours</strong>.</p>"
        f"{_html_table(rows)}"
        f"<p>Warm regards,<br/><strong>{BRAND_NAME} Sales Team</strong></p>"
    )
    return OutgoingMail(
        to=inquiry.email,
        subject=f"Thank you for your inquiry - {BRAND_NAME}",
        html=body,
        text=text,
    )


def build_company_notification(
    inquiry: ContactInquiry,
    received_at: datetime | None = None,
) -> OutgoingMail:
    received_at = received_at or datetime.now(LOCAL_TIMEZONE)
    timestamp = received_at.astimezone(LOCAL_TIMEZONE).strftime("%A, %B %d, %Y %H:%M")
    full_name = f"{inquiry.first_name} {inquiry.last_name}"
    rows = [
        ("Name", full_name),
        ("Email", inquiry.email),
        ("Phone", inquiry.phone),
        ("Message", inquiry.message or "(no message)"),
    ]

    text = (
        f"New inquiry received {timestamp} (Vietnam Time)\n\n"
        + "\n".join(f"{label}: {value}" for label, value in rows)
        + "\n"
    )
    body = (
        f"<h1>NEW INQUIRY</h1><p>{timestamp} (Vietnam Time)</p>"
        f"{_html_table(rows)}"
    )
    return OutgoingMail(
        to=settings.sales_inbox,
        subject=f"New Inquiry from {full_name}",
        html=body,
        text=text,
        reply_to=inquiry.email,
    )


class ContactService:
    """Handles public contact form submissions."""

    def __init__(self, mailer: MailTransport) -> None:
        self.mailer = mailer

    async def submit(self, inquiry: ContactInquiry) -> None:
        """Validate an inquiry and send both mails.

        Both sends are attempted even when one fails.

        Raises:
            ValidationError: If the inquiry is invalid
            MailSendError: If either mail could not be sent
        """
        cleaned = clean_inquiry(inquiry)

        results = await asyncio.gather(
            self.mailer.send(build_customer_confirmation(cleaned)),
            self.mailer.send(build_company_notification(cleaned)),
            return_exceptions=True,
        )

        failures = [result for result in results if isinstance(result, Exception)]
        for failure in failures:
            logger.error(
                "Inquiry mail failed",
                error=str(failure),
                error_type=type(failure).__name__,
            )
        if failures:
            raise MailSendError(SEND_FAILED_MESSAGE)

        logger.info("Inquiry received", has_message=bool(cleaned.message))


def _html_table(rows: list[tuple[str, str]]) -> str:
    cells = "".join(
        f"<tr><td><strong>{html.escape(label)}:</strong></td><td>{html.escape(value)}</td></tr>"
        for label, value in rows
    )
    return f"<table>{cells}</table>"

