"""Outbound notifications for the business claim flow (email and SMS)."""
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from numtrip.config import Settings, get_settings
from numtrip.domain.enums import VerificationType

logger = logging.getLogger(__name__)


class ClaimNotifier:
    """Sends claim verification codes and approval notices.

    Email goes through SMTP when SMTP_* is configured; otherwise the message
    is logged and treated as delivered so local development works offline.
    SMS and phone-call codes are only logged.
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.smtp_from_email = settings.SMTP_FROM_EMAIL
        self.code_ttl_minutes = settings.CLAIM_CODE_TTL_MINUTES
        self.email_enabled = bool(
            self.smtp_host and
            self.smtp_username and
            self.smtp_password and
            self.smtp_from_email
        )

    def send_verification_code(
        self,
        verification_type: VerificationType,
        contact_value: str,
        code: str,
        business_name: str,
    ) -> bool:
        """Deliver a claim code over the requested channel.

        Returns:
            True if the code was handed off for delivery
        """
        if verification_type == VerificationType.EMAIL:
            subject = f"Verify your business claim for {business_name} - NumTrip"
            text_body = (
                f"Your verification code for claiming {business_name} on NumTrip is: {code}. "
                f"This code expires in {self.code_ttl_minutes} minutes."
            )
            html_body = self._build_code_html(code, business_name)
            return self._send_email(contact_value, subject, text_body, html_body)

        logger.info(
            f"[DEVELOPMENT] {verification_type.value} verification code for {business_name} "
            f"to {contact_value}: {code}"
        )
        return True

    def send_claim_approved(self, email: Optional[str], business_name: str) -> bool:
        if not email:
            return False
        subject = f"Your business claim has been approved - {business_name}"
        text_body = (
            f"Congratulations! Your claim for {business_name} has been approved. "
            "You now have full access to manage your business profile on NumTrip."
        )
        html_body = (
            "<html><body>"
            f"<h1>Congratulations!</h1><p>Your claim for <strong>{html.escape(business_name)}</strong> "
            "has been approved.</p></body></html>"
        )
        return self._send_email(email, subject, text_body, html_body)

    def _build_code_html(self, code: str, business_name: str) -> str:
        return (
            "<html><body style=\"font-family: Arial, sans-serif;\">"
            "<h1>NumTrip - Business Verification</h1>"
            f"<p>You've requested to claim <strong>{html.escape(business_name)}</strong> on NumTrip. "
            "Use the following verification code:</p>"
            f"<h2 style=\"letter-spacing: 5px;\">{html.escape(code)}</h2>"
            f"<p>This code will expire in <strong>{self.code_ttl_minutes} minutes</strong>. "
            "If you didn't request this verification, please ignore this email.</p>"
            "</body></html>"
        )

    def _send_email(self, to_email: str, subject: str, text_body: str, html_body: str) -> bool:
        if not self.email_enabled:
            logger.info(f"[DEVELOPMENT] Email to {to_email}: {subject} | {text_body}")
            return True

        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = self.smtp_from_email
            msg["To"] = to_email
            msg.attach(MIMEText(text_body, "plain"))
            msg.attach(MIMEText(html_body, "html"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            logger.info(f"Email sent to {to_email}: {subject}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False
