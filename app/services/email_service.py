"""
Email service - persistence plus best-effort background delivery.

Delivery goes through a transport. SimulatedTransport stands in for a real
provider: it waits, "delivers", and reports an open with a fixed probability.
SmtpTransport sends for real and never reports opens.
"""
import logging
import random
import smtplib
import ssl
import time
from dataclasses import dataclass
from datetime import datetime, time as dt_time
from email.mime.text import MIMEText
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from app.constants import EMAIL_FAILED, EMAIL_PENDING, EMAIL_SENT
from app.core.config import Settings
from app.core.errors import BadRequest
from app.models.email import Email
from app.schemas.email import EmailCreate, EmailStats
from app.services.email_templates import TemplateRegistry
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


@dataclass
class OutgoingMessage:
    email_id: int
    to: str
    subject: str
    body: str


class SimulatedTransport:
    """Fake provider: fixed send delay, random open delay, fixed open probability"""

    def __init__(
        self,
        send_delay: float = 1.0,
        open_delay: float = 5.0,
        open_rate: float = 0.7,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.send_delay = send_delay
        self.open_delay = open_delay
        self.open_rate = open_rate
        self.rng = rng or random.Random()
        self.sleep = sleep

    def send(self, message: OutgoingMessage) -> None:
        if self.send_delay > 0:
            self.sleep(self.send_delay)
        logger.info("[SIMULATED EMAIL] To: %s | Subject: %s", message.to, message.subject)

    def track_open(self, message: OutgoingMessage) -> bool:
        delay = self.rng.uniform(0, self.open_delay) if self.open_delay > 0 else 0
        if delay > 0:
            self.sleep(delay)
        return self.rng.random() < self.open_rate


class SmtpTransport:
    """Send via SMTP. Open tracking is not available."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        from_email: str = "noreply@wishdesk.local",
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_email = from_email

    def send(self, message: OutgoingMessage) -> None:
        msg = MIMEText(message.body, "plain", "utf-8")
        msg["Subject"] = message.subject
        msg["From"] = self.from_email
        msg["To"] = message.to

        with smtplib.SMTP(self.host, self.port) as server:
            if self.use_tls:
                server.starttls(context=ssl.create_default_context())
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.from_email, [message.to], msg.as_string())
        logger.info("Email %s sent via SMTP to %s", message.email_id, message.to)

    def track_open(self, message: OutgoingMessage) -> bool:
        return False


def build_transport(config: Settings):
    """Pick the transport named by EMAIL_PROVIDER"""
    if config.EMAIL_PROVIDER == "smtp":
        if not config.SMTP_HOST:
            raise ValueError("SMTP_HOST must be set when EMAIL_PROVIDER=smtp")
        return SmtpTransport(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USERNAME,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_USE_TLS,
            from_email=config.EMAIL_FROM,
        )
    return SimulatedTransport(
        send_delay=config.EMAIL_SEND_DELAY_SECONDS,
        open_delay=config.EMAIL_OPEN_DELAY_SECONDS,
        open_rate=config.EMAIL_OPEN_RATE,
    )


def compose_email(email_data: EmailCreate, registry: TemplateRegistry) -> Tuple[str, str]:
    """
    Resolve the final subject and body

    Template output fills in whatever the caller did not pass explicitly.

    Raises:
        NotFound: Unknown template id
        BadRequest: Neither explicit text nor a template provides subject/body
    """
    subject, body = email_data.subject, email_data.body

    if email_data.template:
        template = registry.get_or_404(email_data.template)
        rendered_subject, rendered_body = template.render(email_data.variables)
        subject = subject if subject is not None else rendered_subject
        body = body if body is not None else rendered_body

    if not subject or not body:
        raise BadRequest("Email requires a subject and body, or a template")
    return subject, body


def list_emails(db: Session, status: Optional[str] = None):
    emails = db.query(Email).order_by(Email.created_at.desc(), Email.id.desc()).all()
    if status and status != "all":
        emails = [email for email in emails if email.status == status]
    return emails


def create_email(
    db: Session,
    email_data: EmailCreate,
    registry: TemplateRegistry,
    actor_id: Optional[int] = None,
) -> Email:
    """Persist a pending email; delivery happens in deliver_email"""
    subject, body = compose_email(email_data, registry)

    email = Email(
        to=email_data.to,
        subject=subject,
        body=body,
        template=email_data.template,
        status=EMAIL_PENDING,
        created_by=actor_id,
    )
    db.add(email)
    db.commit()
    db.refresh(email)
    return email


def _load_message(session_factory: Callable[[], Session], email_id: int) -> Optional[OutgoingMessage]:
    db = session_factory()
    try:
        email = db.query(Email).filter(Email.id == email_id).first()
        if email is None:
            return None
        return OutgoingMessage(email_id=email.id, to=email.to, subject=email.subject, body=email.body)
    finally:
        db.close()


def _update_email(session_factory: Callable[[], Session], email_id: int, **fields) -> None:
    db = session_factory()
    try:
        email = db.query(Email).filter(Email.id == email_id).first()
        if email is None:
            logger.warning("Email %s disappeared before update %s", email_id, list(fields))
            return
        for field, value in fields.items():
            setattr(email, field, value)
        db.commit()
    except Exception:
        logger.error("Failed to update email %s with %s", email_id, list(fields), exc_info=True)
        db.rollback()
    finally:
        db.close()


def deliver_email(session_factory: Callable[[], Session], email_id: int, transport) -> Optional[str]:
    """
    Background delivery lifecycle: pending -> sent (or failed), then open tracking

    Best-effort: nothing is retried and no error reaches the original caller.
    Returns the final delivery status, or None if the email no longer exists.
    """
    message = _load_message(session_factory, email_id)
    if message is None:
        logger.warning("Email %s not found, skipping delivery", email_id)
        return None

    try:
        transport.send(message)
    except Exception:
        logger.error("Email %s delivery failed", email_id, exc_info=True)
        _update_email(session_factory, email_id, status=EMAIL_FAILED)
        return EMAIL_FAILED

    _update_email(session_factory, email_id, status=EMAIL_SENT, sent_at=utcnow())

    try:
        opened = transport.track_open(message)
    except Exception:
        logger.error("Open tracking failed for email %s", email_id, exc_info=True)
        opened = False
    if opened:
        _update_email(session_factory, email_id, opened_at=utcnow())

    return EMAIL_SENT


def email_stats(db: Session, now: Optional[datetime] = None) -> EmailStats:
    now = now or utcnow()
    start_of_day = datetime.combine(now.date(), dt_time.min)
    emails = db.query(Email).all()

    sent_today = len([e for e in emails if e.sent_at and e.sent_at >= start_of_day])
    total_sent = len([e for e in emails if e.status == EMAIL_SENT])
    total_opened = len([e for e in emails if e.opened_at])
    open_rate = round(total_opened / total_sent * 100) if total_sent > 0 else 0
    pending = len([e for e in emails if e.status == EMAIL_PENDING])

    return EmailStats(sent_today=sent_today, open_rate=open_rate, pending=pending)
