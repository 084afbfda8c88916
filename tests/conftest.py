import os

# Keep the module-level app in app.py from wiring real mail transports
os.environ.setdefault('SEND_EMAILS', 'false')

import pytest  # noqa: E402

from config.settings import MailSettings  # noqa: E402
from services.notification_service import NotificationService  # noqa: E402
from services.signup_store import InMemorySignupStore  # noqa: E402
from services.waitlist_service import WaitlistService  # noqa: E402
from helpers import FakeSESClient, FakeSMTP, RecordingNotifier  # noqa: E402


@pytest.fixture(autouse=True)
def reset_fake_smtp():
    FakeSMTP.deliveries = []
    FakeSMTP.error = None
    yield


@pytest.fixture
def mail_settings():
    return MailSettings(
        from_email='team@example.com',
        from_name='Propfolio',
        site_url='https://example.com',
        logo_url='https://example.com/logo.png',
        smtp_host='smtp.example.com',
        smtp_port=465,
        smtp_username='team@example.com',
        smtp_password='secret',
    )


@pytest.fixture
def ses_client():
    return FakeSESClient()


@pytest.fixture
def mailer(mail_settings, ses_client):
    return NotificationService(mail_settings, ses_client=ses_client, smtp_factory=FakeSMTP)


@pytest.fixture
def store():
    return InMemorySignupStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(store, notifier):
    return WaitlistService(store, notifier=notifier)


@pytest.fixture
def signup_payload():
    return {
        'firstName': 'Jane',
        'lastName': 'Doe',
        'email': 'Jane.Doe@Example.com',
        'portfolioSize': '6-20',
        'companySize': '2-10',
        'country': 'Portugal',
        'referralCode': 'jane1234',
        'referredBy': '',
        'timestamp': '2026-02-14T10:00:00.000Z',
        'website': '',
    }
