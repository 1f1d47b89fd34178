"""
Check-in e-mail over SMTP (STARTTLS + login).

With APP_ENV=test messages are appended to EMAIL_OUTBOX instead of being
sent. Callers treat every failure here as best-effort.
"""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import parseaddr

from areuok.core.config import settings
from areuok.core.errors import EmailDeliveryError, InvalidEmailAddressError
from areuok.schemas.checkin import EmailConfig, Quote

logger = logging.getLogger(__name__)

EMAIL_OUTBOX: list[EmailMessage] = []

_SMTP_TIMEOUT = 15


def _parse_address(value: str, field: str) -> str:
    # Header values may not contain line breaks.
    if "\r" in value or "\n" in value:
        raise InvalidEmailAddressError(field, value)
    _, addr = parseaddr(value)
    if not addr or "@" not in addr or addr.startswith("@") or addr.endswith("@"):
        raise InvalidEmailAddressError(field, value)
    return value


def build_subject(name: str, streak: int) -> str:
    return f"🔥 {name} checked in! {streak}-day streak"


def build_body(name: str, streak: int, quote: Quote) -> str:
    return (
        f"Hi {name},\n\n"
        "You checked in today. 🎉\n\n"
        f"Current streak: {streak} days 🔥\n\n"
        "Quote of the day:\n"
        f"\"{quote.text}\"\n"
        f"- {quote.author}\n\n"
        "Keep going! 💪\n\n"
        "--\n"
        "Are You OK?"
    )


def build_message(name: str, streak: int, quote: Quote, config: EmailConfig) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = build_subject(name, streak)
    msg["From"] = _parse_address(config.from_email, "from")
    msg["To"] = _parse_address(config.to_email, "to")
    msg.set_content(build_body(name, streak, quote))
    return msg


def send_checkin_email(name: str, streak: int, quote: Quote, config: EmailConfig) -> bool:
    """
    Send one check-in message. Returns False when e-mail is disabled or no
    recipient is configured, True once the message has been handed off.
    """
    if not config.enabled or not config.to_email:
        return False

    msg = build_message(name, streak, quote, config)

    if settings.is_test:
        EMAIL_OUTBOX.append(msg)
        return True

    try:
        with smtplib.SMTP(config.smtp_server, config.smtp_port, timeout=_SMTP_TIMEOUT) as smtp:
            smtp.starttls()
            if config.smtp_username:
                smtp.login(config.smtp_username, config.smtp_password)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        raise EmailDeliveryError(str(exc)) from exc

    logger.info("Check-in email sent to %s", config.to_email)
    return True
