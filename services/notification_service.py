"""
Email notifications sent from the request path.

``send`` is the single entry point: it renders the template for ``kind`` and
delivers it over SMTP. Failures raise ``NotificationError``; callers decide
whether that fails their operation (code delivery) or is only logged
(confirmations).
"""
import os
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from enum import Enum

from dotenv import load_dotenv

from templates import email_templates
from utils.logger_factory import new_logger

load_dotenv()

EMAIL_SERVER_HOST = os.environ.get("EMAIL_SERVER_HOST", "smtp.gmail.com")
EMAIL_SERVER_PORT = int(os.environ.get("EMAIL_SERVER_PORT", 587))
EMAIL_SERVER_USER = os.environ.get("EMAIL_SERVER_USER")
EMAIL_SERVER_PASS = os.environ.get("EMAIL_SERVER_PASS")
EMAIL_FROM = os.environ.get("EMAIL_FROM", "Buddha CEO <no-reply@buddhaceo.org>")


class TemplateKind(str, Enum):
    VERIFICATION_CODE = "verification_code"
    EVENT_REGISTRATION_CONFIRMATION = "event_registration_confirmation"
    TEACHER_APPLICATION_CONFIRMATION = "teacher_application_confirmation"
    TEACHER_ENROLLMENT_CONFIRMATION = "teacher_enrollment_confirmation"
    VOLUNTEER_APPLICATION_CONFIRMATION = "volunteer_application_confirmation"
    TEACHER_APPROVAL = "teacher_approval"
    VOLUNTEER_APPROVAL = "volunteer_approval"


RENDERERS = {
    TemplateKind.VERIFICATION_CODE: email_templates.render_verification_code,
    TemplateKind.EVENT_REGISTRATION_CONFIRMATION: email_templates.render_event_registration_confirmation,
    TemplateKind.TEACHER_APPLICATION_CONFIRMATION: email_templates.render_application_confirmation,
    TemplateKind.TEACHER_ENROLLMENT_CONFIRMATION: email_templates.render_application_confirmation,
    TemplateKind.VOLUNTEER_APPLICATION_CONFIRMATION: email_templates.render_application_confirmation,
    TemplateKind.TEACHER_APPROVAL: email_templates.render_application_approval,
    TemplateKind.VOLUNTEER_APPROVAL: email_templates.render_application_approval,
}


class NotificationError(Exception):
    """Raised when an email could not be rendered or delivered."""


def _deliver(to_email: str, subject: str, text: str, html: str) -> None:
    if not EMAIL_SERVER_USER or not EMAIL_SERVER_PASS:
        raise NotificationError("Email service not configured. Set EMAIL_SERVER_USER and EMAIL_SERVER_PASS.")

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = EMAIL_FROM
    msg["To"] = to_email
    # Text first, then HTML (some clients pick the first alternative)
    msg.attach(MIMEText(text, "plain"))
    msg.attach(MIMEText(html, "html"))

    with smtplib.SMTP(EMAIL_SERVER_HOST, EMAIL_SERVER_PORT, timeout=15) as server:
        server.starttls()
        server.login(EMAIL_SERVER_USER, EMAIL_SERVER_PASS)
        server.sendmail(EMAIL_SERVER_USER, to_email, msg.as_string())


def send(to: str, kind: TemplateKind, data: dict) -> None:
    log = new_logger("send_notification")
    kind = TemplateKind(kind)
    try:
        subject, text, html = RENDERERS[kind](data)
        _deliver(to, subject, text, html)
    except NotificationError:
        log.error(f"Notification {kind.value} to {to} not sent: email service not configured")
        raise
    except (smtplib.SMTPException, OSError, KeyError) as e:
        log.error(f"Notification {kind.value} to {to} failed: {type(e).__name__}: {e}")
        raise NotificationError(str(e)) from e
    log.info(f"Notification {kind.value} sent to {to}")


def send_quietly(to: str, kind: TemplateKind, data: dict) -> bool:
    """Send a best-effort notification; failures are logged and reported as False."""
    try:
        send(to, kind, data)
        return True
    except NotificationError:
        new_logger("send_quietly").warning(f"Continuing without {TemplateKind(kind).value} email to {to}")
        return False
