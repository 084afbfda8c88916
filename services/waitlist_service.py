"""Waitlist-related business logic: signup intake and leaderboard reads"""
import secrets
import string
import threading
import traceback
from concurrent.futures import Executor
from typing import Any, Dict, Optional

from services import referral_service
from services.notification_service import NotificationService
from services.signup_store import DuplicateRecordError, SignupRecord, SignupStore, utc_timestamp
from utils.logger import get_logger, log_error, log_warning, mask_email
from utils.validation import is_blank_code, normalize_email, sanitize_text, validate_email

logger = get_logger('intake')

HONEYPOT_FIELD = 'website'
REFERRAL_CODE_ALPHABET = string.ascii_lowercase + string.digits
REFERRAL_CODE_LENGTH = 8


class WaitlistError(Exception):
    """Base for every signup outcome other than success"""
    code = 'error'
    status = 'error'
    message = 'Something went wrong. Please try again.'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_response(self) -> Dict[str, str]:
        response = {'status': self.status, 'message': self.message}
        if self.status == 'error':
            response['error'] = self.code
        return response


class InvalidEmail(WaitlistError):
    code = 'invalid_email'
    message = 'Invalid email address.'


class MissingName(WaitlistError):
    code = 'missing_name'
    message = 'First name is required.'


class DuplicateEmail(WaitlistError):
    code = 'duplicate_email'
    status = 'duplicate'
    message = 'This email is already on the waitlist.'


class StorageFailure(WaitlistError):
    code = 'storage_failure'


def generate_referral_code(length: int = REFERRAL_CODE_LENGTH) -> str:
    """Random lowercase alphanumeric code, same shape as the landing page generates"""
    return ''.join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))


def build_record(payload: Dict[str, Any]) -> SignupRecord:
    """Sanitize a submission into a record and validate the required fields"""
    email = normalize_email(payload.get('email'))
    if not email or not validate_email(email):
        raise InvalidEmail()

    first_name = sanitize_text(payload.get('firstName'))
    if not first_name:
        raise MissingName()

    return SignupRecord(
        timestamp=sanitize_text(payload.get('timestamp')) or utc_timestamp(),
        first_name=first_name,
        last_name=sanitize_text(payload.get('lastName')),
        email=email,
        portfolio_size=sanitize_text(payload.get('portfolioSize')),
        company_size=sanitize_text(payload.get('companySize')),
        country=sanitize_text(payload.get('country')),
        referral_code=sanitize_text(payload.get('referralCode')) or generate_referral_code(),
        referred_by=sanitize_text(payload.get('referredBy')),
    )


def is_bot_submission(payload: Dict[str, Any]) -> bool:
    """The honeypot field is hidden from people, so only bots fill it in.

    Falsy values (None, "", false, 0) count as empty.
    """
    value = payload.get(HONEYPOT_FIELD)
    if not value:
        return False
    return str(value).strip() != ''


class WaitlistService:
    """Signup intake and referral reads over an injected store.

    The duplicate check and the append happen under one lock, so two
    submissions of the same email racing through this process store one row.
    """

    def __init__(
        self,
        store: SignupStore,
        notifier: Optional[NotificationService] = None,
        executor: Optional[Executor] = None,
        leaderboard_size: int = referral_service.DEFAULT_LEADERBOARD_SIZE
    ):
        self.store = store
        self.notifier = notifier
        self.executor = executor
        self.leaderboard_size = leaderboard_size
        self._write_lock = threading.Lock()

    def join_waitlist(self, payload: Dict[str, Any]) -> Dict[str, str]:
        """Handle one signup. Always returns a status dict, never raises."""
        if not isinstance(payload, dict):
            payload = {}

        if is_bot_submission(payload):
            logger.info("Honeypot field filled, dropping submission")
            return {'status': 'success'}

        try:
            record = build_record(payload)
            self._store_unique(record)
        except WaitlistError as e:
            logger.info(f"Signup rejected ({e.code}): {mask_email(normalize_email(payload.get('email')))}")
            return e.to_response()

        logger.info(f"New waitlist signup: {mask_email(record.email)}")
        self._dispatch(self._notify, record)
        return {'status': 'success'}

    def _store_unique(self, record: SignupRecord):
        with self._write_lock:
            try:
                existing = self.store.read_all()
                if any(r.email.strip().lower() == record.email for r in existing):
                    raise DuplicateEmail()
                self.store.append(record)
            except WaitlistError:
                raise
            except DuplicateRecordError:
                raise DuplicateEmail()
            except Exception as e:
                log_error("Error storing waitlist signup", error=e, traceback_str=traceback.format_exc())
                raise StorageFailure(str(e)) from e

    def _dispatch(self, fn, *args):
        if self.notifier is None:
            return
        if self.executor is not None:
            try:
                self.executor.submit(fn, *args)
                return
            except RuntimeError as e:
                # Executor already shut down; deliver inline instead
                log_warning(f"Notification executor unavailable: {e}")
        fn(*args)

    def _notify(self, record: SignupRecord):
        """Welcome email, then the referrer's notification. Failures are logged only."""
        try:
            self.notifier.send_welcome_email(record)

            if is_blank_code(record.referred_by):
                return

            records = self.store.read_all()
            referrer = referral_service.find_referrer(records, record.referred_by)
            if referrer is None or not referrer.email:
                logger.info(f"No referrer found for code {record.referred_by}")
                return

            stats = referral_service.get_referral_stats(records, record.referred_by)
            self.notifier.send_referral_email(referrer, record, stats)
        except Exception as e:
            log_error(f"Error sending notifications for {mask_email(record.email)}", error=e)

    def get_leaderboard(self) -> Dict[str, Any]:
        """Leaderboard response body; storage faults become an error status"""
        try:
            records = self.store.read_all()
        except Exception as e:
            log_error("Error reading waitlist for leaderboard", error=e)
            return {'status': 'error', 'message': str(e)}

        result = referral_service.build_leaderboard(records, limit=self.leaderboard_size)
        return {'status': 'success', **result}

    def get_referral_stats(self, code: str) -> Dict[str, Any]:
        """Referral count and rank for one code"""
        try:
            records = self.store.read_all()
        except Exception as e:
            log_error("Error reading waitlist for referral stats", error=e)
            return {'status': 'error', 'message': str(e)}

        stats = referral_service.get_referral_stats(records, code)
        return {
            'status': 'success',
            'code': str(code).strip(),
            'count': stats.count,
            'position': stats.position
        }
