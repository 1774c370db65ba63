"""SMTP delivery of composed messages."""
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from storefront.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class MailSender:
    """Sends messages through the SMTP server named in settings"""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_username
        self.password = settings.smtp_password
        self.use_tls = settings.smtp_use_tls
        self.timeout = settings.smtp_timeout

    def send(self, message: EmailMessage) -> None:
        """
        Deliver a message.

        Raises:
            smtplib.SMTPException: If the server rejects the message
            OSError: If the server cannot be reached
        """
        logger.debug(f"Connecting to SMTP server {self.host}:{self.port}")
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)
        logger.info(f"Sent '{message['Subject']}' to {message['To']}")
