#!/usr/bin/env python3
"""
Print the referral leaderboard, or one referral code's stats, from the live waitlist table.

Useful for checking who is in the prize positions before launch, or for
answering "what rank am I?" support emails.

Usage:
    python leaderboard_report.py [--limit N] [--code CODE] [--table TABLE] [--json]

Examples:
    # Top 10 referrers with totals
    python leaderboard_report.py

    # Top 25
    python leaderboard_report.py --limit 25

    # Count and rank for a single referral code
    python leaderboard_report.py --code abc12345
"""

import sys
import os
import argparse
import json

# Add parent directory to path to import services
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from services import referral_service
from services.signup_store import SupabaseSignupStore


def build_report(records, code=None, limit=referral_service.DEFAULT_LEADERBOARD_SIZE):
    """Leaderboard or single-code stats as a plain dict"""
    if code:
        stats = referral_service.get_referral_stats(records, code)
        referrer = referral_service.find_referrer(records, code)
        return {
            'code': code,
            'owner': f"{referrer.first_name} {referrer.last_name}".strip() if referrer else None,
            'count': stats.count,
            'position': stats.position
        }
    return referral_service.build_leaderboard(records, limit=limit)


def format_report(report):
    """Human-readable lines for a report from build_report"""
    if 'code' in report:
        owner = report['owner'] or 'unknown owner'
        return [
            f"Code {report['code']} ({owner})",
            f"  Referrals: {report['count']}",
            f"  Rank: #{report['position']}",
        ]

    lines = []
    for rank, entry in enumerate(report['leaderboard'], start=1):
        lines.append(f"{rank:>3}. {entry['name']:<24} {entry['referrals']:>5}  {entry['joined']}")
    if not lines:
        lines.append("No referrals yet.")
    lines.append(f"{'='*60}")
    lines.append(f"Total referrals: {report['totalReferrals']}")
    lines.append(f"Total signups: {report['totalSignups']}")
    return lines


def main(argv=None, store=None):
    parser = argparse.ArgumentParser(description='Show the waitlist referral leaderboard')
    parser.add_argument('--limit', type=int, default=referral_service.DEFAULT_LEADERBOARD_SIZE,
                        help='Number of leaderboard entries to show')
    parser.add_argument('--code', help='Show count and rank for one referral code')
    parser.add_argument('--table', default=os.environ.get('WAITLIST_TABLE', 'waitlist'),
                        help='Supabase table holding the waitlist')
    parser.add_argument('--json', action='store_true', help='Print raw JSON instead of a table')

    args = parser.parse_args(argv)

    store = store or SupabaseSignupStore(args.table)
    try:
        records = store.read_all()
    except Exception as e:
        print(f"✗ ERROR: could not read waitlist: {str(e)}", file=sys.stderr)
        return 1

    report = build_report(records, code=args.code, limit=args.limit)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        for line in format_report(report):
            print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())
