"""Application settings loaded from the environment"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class MailSettings:
    """Sender identity, links and transports used for waitlist emails"""
    from_email: str = 'team@trypropfolio.com'
    from_name: str = 'Propfolio'
    site_url: str = 'https://trypropfolio.com'
    logo_url: str = 'https://trypropfolio.com/logo-email.png'
    aws_region: str = 'us-east-1'
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_port: int = 465
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_timeout: float = 10.0

    @property
    def sender(self) -> str:
        return f"{self.from_name} <{self.from_email}>"

    @property
    def uses_ssl(self) -> bool:
        return self.smtp_port == 465

    def referral_link(self, referral_code: str) -> str:
        return f"{self.site_url}?ref={referral_code}"

    @classmethod
    def from_env(cls) -> 'MailSettings':
        return cls(
            from_email=os.environ.get('MAIL_FROM_EMAIL', cls.from_email),
            from_name=os.environ.get('MAIL_FROM_NAME', cls.from_name),
            site_url=os.environ.get('SITE_URL', cls.site_url).rstrip('/'),
            logo_url=os.environ.get('MAIL_LOGO_URL', cls.logo_url),
            aws_region=os.environ.get('AWS_REGION', cls.aws_region),
            aws_access_key_id=os.environ.get('AWS_ACCESS_KEY_ID'),
            aws_secret_access_key=os.environ.get('AWS_SECRET_ACCESS_KEY'),
            smtp_host=os.environ.get('SMTP_HOST'),
            smtp_port=int(os.environ.get('SMTP_PORT', cls.smtp_port)),
            smtp_username=os.environ.get('SMTP_USERNAME'),
            smtp_password=os.environ.get('SMTP_PASSWORD'),
            smtp_timeout=float(os.environ.get('SMTP_TIMEOUT', cls.smtp_timeout)),
        )


@dataclass(frozen=True)
class WaitlistSettings:
    """Storage, leaderboard and HTTP settings"""
    table_name: str = 'waitlist'
    leaderboard_size: int = 10
    mail_workers: int = 2
    send_emails: bool = True
    # Reverse proxies in front of the app whose X-Forwarded-For entries are trusted
    trusted_proxies: int = 0
    allowed_origins: List[str] = field(default_factory=lambda: ['https://trypropfolio.com'])

    @classmethod
    def from_env(cls) -> 'WaitlistSettings':
        origins = os.environ.get('ALLOWED_ORIGINS')
        return cls(
            table_name=os.environ.get('WAITLIST_TABLE', cls.table_name),
            leaderboard_size=int(os.environ.get('LEADERBOARD_SIZE', cls.leaderboard_size)),
            mail_workers=int(os.environ.get('MAIL_WORKERS', cls.mail_workers)),
            send_emails=_env_bool('SEND_EMAILS', cls.send_emails),
            trusted_proxies=int(os.environ.get('TRUSTED_PROXIES', cls.trusted_proxies)),
            allowed_origins=(
                [origin.strip() for origin in origins.split(',') if origin.strip()]
                if origins else ['https://trypropfolio.com']
            ),
        )
