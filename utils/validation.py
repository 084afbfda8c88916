"""Input sanitization and validation for signup submissions"""
import re
from typing import Any, Optional

SCRIPT_PATTERN = re.compile(r'<(script|style)\b[^>]*>.*?</\1\s*>', re.IGNORECASE | re.DOTALL)
TAG_PATTERN = re.compile(r'<[^>]*>')
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def sanitize_text(value: Any, max_length: Optional[int] = None) -> str:
    """Strip HTML tags and surrounding whitespace.

    Script and style elements go with their contents; every other <...>
    sequence is removed on its own. Anything that is not a string (None,
    numbers, lists) becomes an empty string, so absent fields default to "".
    """
    if not isinstance(value, str):
        return ''

    sanitized = SCRIPT_PATTERN.sub('', value)
    sanitized = TAG_PATTERN.sub('', sanitized).strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def normalize_email(value: Any) -> str:
    """Sanitize and lowercase an email address"""
    return sanitize_text(value).lower()


def validate_email(email: str) -> bool:
    """Validate email format (local@domain.tld)"""
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email))


def is_blank_code(code: Any) -> bool:
    """True for referral codes that mean "nobody".

    The landing page serializes a missing code as the literal "undefined".
    """
    if code is None:
        return True
    code = str(code).strip()
    return code == '' or code == 'undefined'
