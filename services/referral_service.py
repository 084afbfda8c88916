"""Referral counting, ranking and the public leaderboard.

Everything here is computed fresh from the full list of signup records;
no ranking state is cached or stored.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from services.signup_store import SignupRecord
from utils.validation import is_blank_code

MONTH_ABBREVIATIONS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                       'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

DEFAULT_LEADERBOARD_SIZE = 10


@dataclass
class ReferrerIdentity:
    first_name: str
    last_name: str
    timestamp: str


@dataclass
class ReferralStats:
    count: int
    position: int


def referral_counts(records: Sequence[SignupRecord]) -> Dict[str, int]:
    """Map each referring code to the number of signups it brought in"""
    counts: Dict[str, int] = {}
    for record in records:
        referred_by = str(record.referred_by).strip()
        if is_blank_code(referred_by):
            continue
        counts[referred_by] = counts.get(referred_by, 0) + 1
    return counts


def count_referrals(records: Sequence[SignupRecord], code: str) -> int:
    """Number of signups whose referredBy matches the code"""
    code = str(code).strip()
    if is_blank_code(code):
        return 0
    return referral_counts(records).get(code, 0)


def rank_for_count(count: int, counts: Dict[str, int]) -> int:
    """1 + the number of referring codes with a strictly greater count.

    Equal counts share a rank, so this is not the same as a position in the
    sorted list: counts {a: 5, b: 3, c: 3, d: 1} rank a=1, b=2, c=2, d=4.
    """
    return 1 + sum(1 for other in counts.values() if other > count)


def get_referral_stats(records: Sequence[SignupRecord], code: str) -> ReferralStats:
    """Referral count and leaderboard position for one code"""
    counts = referral_counts(records)
    code = str(code).strip()
    count = 0 if is_blank_code(code) else counts.get(code, 0)
    return ReferralStats(count=count, position=rank_for_count(count, counts))


def referrer_identities(records: Sequence[SignupRecord]) -> Dict[str, ReferrerIdentity]:
    """Map each owned referral code to its owner; a later owner replaces an earlier one"""
    identities: Dict[str, ReferrerIdentity] = {}
    for record in records:
        code = str(record.referral_code).strip()
        if code:
            identities[code] = ReferrerIdentity(
                first_name=record.first_name,
                last_name=record.last_name,
                timestamp=record.timestamp,
            )
    return identities


def find_referrer(records: Sequence[SignupRecord], code: str) -> Optional[SignupRecord]:
    """First record that owns the referral code, if any"""
    code = str(code).strip()
    if is_blank_code(code):
        return None
    for record in records:
        if str(record.referral_code).strip() == code:
            return record
    return None


def _parse_timestamp(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    text = str(value).strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def joined_label(timestamp) -> str:
    """'Joined Jan 5' from an ISO timestamp; 'Joined recently' if it cannot be parsed"""
    joined = _parse_timestamp(timestamp)
    if joined is None:
        return 'Joined recently'
    return f"Joined {MONTH_ABBREVIATIONS[joined.month - 1]} {joined.day}"


def leaderboard_entry(identity: ReferrerIdentity, referrals: int) -> dict:
    first_name = str(identity.first_name)
    last_initial = str(identity.last_name)[:1]
    return {
        'initials': (first_name[:1] + last_initial).upper(),
        'name': f"{first_name} {last_initial}.",
        'joined': joined_label(identity.timestamp),
        'referrals': referrals,
    }


def build_leaderboard(records: Sequence[SignupRecord], limit: int = DEFAULT_LEADERBOARD_SIZE) -> dict:
    """Top referrers plus aggregate totals.

    Codes that were used as referredBy but are owned by nobody are left off
    the board, though their referrals still count towards totalReferrals.
    """
    identities = referrer_identities(records)
    counts = referral_counts(records)

    entries: List[dict] = []
    for code, count in counts.items():
        identity = identities.get(code)
        if identity is not None:
            entries.append(leaderboard_entry(identity, count))

    entries.sort(key=lambda entry: entry['referrals'], reverse=True)

    return {
        'leaderboard': entries[:limit],
        'totalReferrals': sum(counts.values()),
        'totalSignups': len(records),
    }
