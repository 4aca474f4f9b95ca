from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from typing import Optional

from ..core.enums import MailTransport
from .model import AttendanceNotification, PasswordResetEmail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailSettings:
    transport: MailTransport = MailTransport.CONSOLE
    host: str = ""
    port: int = 2525
    user: str = ""
    password: str = ""
    sender: str = "no-reply@localhost"
    use_tls: bool = False
    timeout: int = 10

    @classmethod
    def from_settings(cls, settings) -> "MailSettings":
        return cls(
            transport=MailTransport(getattr(settings, "MAIL_TRANSPORT", MailTransport.CONSOLE.value)),
            host=getattr(settings, "MAIL_HOST", ""),
            port=int(getattr(settings, "MAIL_PORT", 2525)),
            user=getattr(settings, "MAIL_USER", ""),
            password=getattr(settings, "MAIL_PASS", ""),
            sender=getattr(settings, "MAIL_FROM", "no-reply@localhost"),
            use_tls=bool(getattr(settings, "MAIL_USE_TLS", False)),
        )


@dataclass(frozen=True)
class OutgoingMail:
    to: str
    subject: str
    text: str
    html: str


class MailDeliveryService:
    def __init__(self, settings: MailSettings, *, smtp_factory=smtplib.SMTP):
        self._settings = settings
        self._smtp_factory = smtp_factory

    def send_reset_password_email(self, email: PasswordResetEmail) -> OutgoingMail:
        url = escape(email.reset_url)
        mail = OutgoingMail(
            to=email.email,
            subject="Reset your password",
            text=f"Use this link to reset your password: {email.reset_url}",
            html=f'<p>Use this link to reset your password:</p><p><a href="{url}">{url}</a></p>',
        )
        self.send(mail)
        return mail

    def send_attendance_notification(self, notification: AttendanceNotification) -> OutgoingMail:
        status = notification.status.value
        mail = OutgoingMail(
            to=notification.email,
            subject=f"Attendance {status} recorded",
            text=(
                f"{notification.employee_name} has {status} on "
                f"{notification.attendance_date} at {notification.occurred_at}."
            ),
            html=(
                f"<p>{escape(notification.employee_name)} has <strong>{status}</strong> on "
                f"<strong>{notification.attendance_date}</strong> at "
                f"<strong>{notification.occurred_at}</strong>.</p>"
            ),
        )
        self.send(mail)
        return mail

    def send(self, mail: OutgoingMail) -> None:
        if self._settings.transport == MailTransport.CONSOLE:
            logger.info('[MAIL-CONSOLE] to=%s subject="%s" text="%s"', mail.to, mail.subject, mail.text)
            return

        msg = EmailMessage()
        msg["From"] = self._settings.sender
        msg["To"] = mail.to
        msg["Subject"] = mail.subject
        msg.set_content(mail.text)
        msg.add_alternative(mail.html, subtype="html")

        with self._smtp_factory(self._settings.host, self._settings.port, timeout=self._settings.timeout) as smtp:
            if self._settings.use_tls:
                smtp.starttls()
            if self._settings.user:
                smtp.login(self._settings.user, self._settings.password)
            smtp.send_message(msg)
        logger.info("Sent mail to=%s subject=%s", mail.to, mail.subject)
