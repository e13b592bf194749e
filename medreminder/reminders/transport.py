import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol, Union

from .config import ReminderSettings

logger = logging.getLogger(__name__)


@dataclass
class EmailNotification:
    to_email: str
    subject: str
    html: str
    text: str


@dataclass
class Delivered:
    provider_id: Optional[str] = None


@dataclass
class Rejected:
    reason: str


@dataclass
class TransportError:
    reason: str


DeliveryResult = Union[Delivered, Rejected, TransportError]


class EmailTransport(Protocol):
    def send(self, notification: EmailNotification) -> DeliveryResult:
        ...


class LoggingTransport:
    """Records the send intent without contacting a provider."""

    def send(self, notification: EmailNotification) -> DeliveryResult:
        logger.info(
            "Sending email reminder to %s: %s", notification.to_email, notification.subject
        )
        return Delivered()


class SmtpTransport:
    def __init__(self, settings: ReminderSettings):
        # Validate required email configuration
        if not settings.SMTP_SERVER:
            raise ValueError("REMINDER_SMTP_SERVER is required but not configured")
        if not settings.SMTP_USERNAME:
            raise ValueError("REMINDER_SMTP_USERNAME is required but not configured")
        if not settings.SMTP_PASSWORD:
            raise ValueError("REMINDER_SMTP_PASSWORD is required but not configured")

        self.smtp_server = settings.SMTP_SERVER
        self.smtp_port = int(settings.SMTP_PORT)
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.use_tls = settings.SMTP_USE_TLS
        self.timeout = settings.SMTP_TIMEOUT_SECONDS
        self.from_email = settings.FROM_EMAIL

    def _build_message(self, notification: EmailNotification) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = notification.subject
        msg["From"] = self.from_email
        msg["To"] = notification.to_email
        msg.attach(MIMEText(notification.text, "plain"))
        msg.attach(MIMEText(notification.html, "html"))
        return msg

    def send(self, notification: EmailNotification) -> DeliveryResult:
        msg = self._build_message(notification)
        try:
            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls(context=ssl.create_default_context())
                server.login(self.smtp_username, self.smtp_password)
                refused = server.sendmail(self.from_email, [notification.to_email], msg.as_string())
        except smtplib.SMTPRecipientsRefused as e:
            return Rejected(reason=f"Recipient refused: {e.recipients}")
        except (smtplib.SMTPException, OSError) as e:
            return TransportError(reason=str(e) or e.__class__.__name__)

        if refused:
            return Rejected(reason=f"Recipient refused: {refused}")
        logger.info("Email sent to %s", notification.to_email)
        return Delivered()


def build_transport(settings: ReminderSettings) -> EmailTransport:
    if settings.EMAIL_TRANSPORT == "smtp":
        return SmtpTransport(settings)
    return LoggingTransport()
