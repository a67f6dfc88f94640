"""
Delivery of password reset codes by email.

SMTP calls block, so they run in a worker thread. Sending happens after the
HTTP response has gone out, which leaves logging as the only way to report a
failed delivery.
"""

from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage

from todo_api.config import Settings
from todo_api.utils.logger import setup_logger

logger = setup_logger("mail_service")


class OtpMailer:
    def __init__(
        self,
        host: str,
        port: int,
        username: str | None,
        password: str | None,
        sender_name: str = "Todo App",
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender_name = sender_name
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> OtpMailer:
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_pass,
            sender_name=settings.mail_sender_name,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password)

    def build_message(self, email: str, otp: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = f'"{self.sender_name}" <{self.username}>'
        message["To"] = email
        message["Subject"] = "Your OTP Code"
        message.set_content(otp)
        message.add_alternative(f"<b>Your OTP Code is: {otp}</b>", subtype="html")
        return message

    def _send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            smtp.login(self.username, self.password)
            smtp.send_message(message)

    async def send_otp(self, email: str, otp: str) -> None:
        if not self.is_configured:
            logger.warning(f"SMTP credentials missing, reset code for {email} not sent")
            return

        try:
            await asyncio.to_thread(self._send, self.build_message(email, otp))
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send reset code to {email}: {e}", exc_info=True)
            return
        logger.info(f"Reset code sent to {email}")
