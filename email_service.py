"""SMTP alert delivery."""
import smtplib
from email.message import EmailMessage

from logger import get_logger


class SmtpEmailService:
    """Send plain-text alert mail through an SMTP relay."""

    def __init__(self, host: str = "localhost", port: int = 25,
                 sender: str = "controller@localhost", timeout: float = 10) -> None:
        self.host = host
        self.port = port
        self.sender = sender
        self.timeout = timeout
        self.logger = get_logger(__name__)

    def send_mail(self, to: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        self.logger.info("Sending alert to %s: %s", to, subject)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.send_message(message)
