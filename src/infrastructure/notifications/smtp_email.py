"""
Adapter: SMTP Email Sender

Concrete IEmailSender over smtplib. When SMTP is not configured the
message is skipped with a warning instead of failing.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from src.core.interfaces.notification_service import EmailMessage, IEmailSender

logger = logging.getLogger(__name__)


class SmtpEmailSender(IEmailSender):

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: str = "",
        password: str = "",
        use_tls: bool = True,
        from_email: str = "noreply@marketplace.local",
        timeout: float = 10.0,
    ):
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._use_tls = use_tls
        self._from = from_email
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._host)

    def build_mime(self, message: EmailMessage) -> MIMEMultipart:
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = self._from
        mime["To"] = message.to
        mime.attach(MIMEText(message.text, "plain", "utf-8"))
        mime.attach(MIMEText(message.html, "html", "utf-8"))
        return mime

    def send(self, message: EmailMessage) -> bool:
        if not self.configured or not message.to:
            logger.warning(f"SMTP not configured; skipping email '{message.subject}'")
            return False

        mime = self.build_mime(message)
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls()
            if self._user:
                smtp.login(self._user, self._password)
            smtp.sendmail(self._from, [message.to], mime.as_string())
        logger.info(f"Email sent to {message.to}: {message.subject}")
        return True
