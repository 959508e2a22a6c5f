"""
StudyHub Backend - Mail Service
=================================

What:  Sends transactional HTML emails (enrollment confirmation, payment
       receipt) through the configured SMTP relay.
How:   aiosmtplib for non-blocking SMTP; tenacity retries transient SMTP
       and network failures with exponential backoff.
Who:   EnrollmentService (per course, failures recorded not raised) and
       PaymentService (receipt, failures surface as 500).
"""

import logging
from email.message import EmailMessage

import aiosmtplib
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from studyhub.config import settings
from studyhub.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class MailService:
    SERVICE = "Mail"

    async def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Send one HTML email.

        Raises:
            ExternalServiceError: the relay refused or was unreachable after
                all retry attempts
        """
        message = EmailMessage()
        message["From"] = settings.mail_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html_body, subtype="html")

        try:
            await self._send_with_retry(message)
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Failed to send '%s' to %s: %s", subject, to, str(e))
            raise ExternalServiceError(
                self.SERVICE,
                message="Could not send email",
                context={"error_type": type(e).__name__},
            )

        logger.info("Sent '%s' to %s", subject, to)

    @retry(
        retry=retry_if_exception_type((aiosmtplib.SMTPException, OSError)),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _send_with_retry(self, message: EmailMessage) -> None:
        await aiosmtplib.send(
            message,
            hostname=settings.mail_host,
            port=settings.mail_port,
            username=settings.mail_user or None,
            password=settings.mail_pass or None,
            start_tls=settings.mail_use_tls,
            timeout=settings.http_timeout,
        )


mail_service = MailService()
