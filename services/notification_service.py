"""Waitlist email notifications via AWS SES, with SMTP as the fallback path"""
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Callable, Optional

import boto3

from config.settings import MailSettings
from services import email_templates
from services.referral_service import ReferralStats
from services.signup_store import SignupRecord
from utils.logger import get_logger, mask_email

logger = get_logger('mail')


class NotificationService:
    """Send welcome and referral emails for the waitlist.

    Delivery is best-effort: every public method logs failures and returns a
    bool instead of raising, so a mail outage never reaches the caller.
    """

    def __init__(
        self,
        settings: MailSettings,
        ses_client=None,
        smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None
    ):
        self.settings = settings
        self.smtp_factory = smtp_factory or (smtplib.SMTP_SSL if settings.uses_ssl else smtplib.SMTP)

        if ses_client is not None:
            self.ses_client = ses_client
        elif settings.aws_access_key_id and settings.aws_secret_access_key:
            # Use explicit credentials from environment
            self.ses_client = boto3.client(
                'ses',
                region_name=settings.aws_region,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key
            )
        else:
            # Fallback to IAM role/default credentials (for EC2/ECS/Lambda)
            self.ses_client = boto3.client('ses', region_name=settings.aws_region)

    def _send_via_ses(self, to: str, subject: str, html_body: str):
        self.ses_client.send_email(
            Source=self.settings.sender,
            Destination={'ToAddresses': [to]},
            Message={
                'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                'Body': {'Html': {'Data': html_body, 'Charset': 'UTF-8'}}
            }
        )

    def _send_via_smtp(self, to: str, subject: str, html_body: str):
        if not self.settings.smtp_host:
            raise RuntimeError("SMTP fallback is not configured (SMTP_HOST is unset)")

        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = self.settings.sender
        msg['To'] = to
        msg.attach(MIMEText(html_body, 'html', 'utf-8'))

        with self.smtp_factory(
            self.settings.smtp_host,
            self.settings.smtp_port,
            timeout=self.settings.smtp_timeout
        ) as server:
            if not self.settings.uses_ssl:
                server.starttls()
            if self.settings.smtp_username:
                server.login(self.settings.smtp_username, self.settings.smtp_password or '')
            server.send_message(msg)

    def send_email(self, to: str, subject: str, html_body: str) -> bool:
        """Send one HTML email. Returns True if either path delivered it."""
        try:
            self._send_via_ses(to, subject, html_body)
            logger.info(f"Email sent to {mask_email(to)} via SES")
            return True
        except Exception as e:
            logger.warning(f"SES delivery to {mask_email(to)} failed, falling back to SMTP: {e}")

        try:
            self._send_via_smtp(to, subject, html_body)
            logger.info(f"Fallback email sent to {mask_email(to)} via SMTP")
            return True
        except Exception as e:
            logger.error(f"Email send to {mask_email(to)} failed entirely: {e}")
            return False

    def send_welcome_email(self, record: SignupRecord) -> bool:
        """Welcome the new registrant and hand them their referral link"""
        if not record.email or not record.first_name:
            return False
        return self.send_email(
            record.email,
            email_templates.welcome_subject(self.settings, record.first_name),
            email_templates.render_welcome_email(self.settings, record.first_name, record.referral_code)
        )

    def send_referral_email(self, referrer: SignupRecord, new_signup: SignupRecord, stats: ReferralStats) -> bool:
        """Tell a referrer that someone joined with their link, with their current count and rank"""
        if not referrer.email:
            return False
        return self.send_email(
            referrer.email,
            email_templates.referral_subject(self.settings, referrer.first_name, new_signup.first_name),
            email_templates.render_referral_email(
                self.settings,
                referrer_first_name=referrer.first_name,
                new_first_name=new_signup.first_name,
                new_last_initial=new_signup.last_name[:1],
                referral_count=stats.count,
                position=stats.position
            )
        )
