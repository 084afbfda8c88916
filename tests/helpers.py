"""Record builders and mail doubles shared by the test modules"""
from services.signup_store import SignupRecord


def make_record(code, referred_by='', first_name=None, last_name=None, email=None,
                timestamp='2026-01-05T09:30:00.000Z'):
    """Record owning `code`, with a name and email derived from it unless given"""
    return SignupRecord(
        timestamp=timestamp,
        first_name=first_name if first_name is not None else f"First{code}",
        last_name=last_name if last_name is not None else f"Last{code}",
        email=email or f"{code.lower()}@example.com",
        portfolio_size='1-5',
        company_size='Solo',
        country='US',
        referral_code=code,
        referred_by=referred_by,
    )


class FakeSESClient:
    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def send_email(self, **kwargs):
        if self.error:
            raise self.error
        self.sent.append(kwargs)
        return {'MessageId': f"msg-{len(self.sent)}"}


class FakeSMTP:
    """Stands in for smtplib.SMTP / SMTP_SSL; every instance records into `deliveries`"""
    deliveries = []
    error = None

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.login_args = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, username, password):
        self.login_args = (username, password)

    def send_message(self, msg):
        if FakeSMTP.error:
            raise FakeSMTP.error
        FakeSMTP.deliveries.append((self, msg))


class RecordingNotifier:
    """Notifier double that records what would have been sent"""

    def __init__(self, fail=False):
        self.fail = fail
        self.welcomes = []
        self.referrals = []

    def send_welcome_email(self, record):
        if self.fail:
            raise RuntimeError('mail server on fire')
        self.welcomes.append(record)
        return True

    def send_referral_email(self, referrer, new_signup, stats):
        if self.fail:
            raise RuntimeError('mail server on fire')
        self.referrals.append((referrer, new_signup, stats))
        return True


