import pytest

from services import referral_service
from services.referral_service import (
    build_leaderboard,
    count_referrals,
    find_referrer,
    get_referral_stats,
    joined_label,
    rank_for_count,
    referral_counts,
)
from helpers import make_record


@pytest.fixture
def small_network():
    """A referred B and C, B referred D"""
    return [
        make_record('A', '', first_name='Alice', last_name='Adams', timestamp='2026-01-05T09:30:00.000Z'),
        make_record('B', 'A', first_name='Bob', last_name='Brown', timestamp='2026-01-06T10:00:00.000Z'),
        make_record('C', 'A', first_name='Cara', last_name='Cole', timestamp='2026-01-07T11:00:00.000Z'),
        make_record('D', 'B', first_name='Dan', last_name='Diaz', timestamp='2026-01-08T12:00:00.000Z'),
    ]


def test_referral_counts_skip_blank_and_undefined():
    records = [
        make_record('A'),
        make_record('B', 'A'),
        make_record('C', ' A '),
        make_record('D', 'undefined'),
        make_record('E', '   '),
    ]
    assert referral_counts(records) == {'A': 2}


def test_count_referrals(small_network):
    assert count_referrals(small_network, 'A') == 2
    assert count_referrals(small_network, 'B') == 1
    assert count_referrals(small_network, 'C') == 0
    assert count_referrals(small_network, 'undefined') == 0
    assert count_referrals(small_network, '') == 0


def test_rank_ties_share_a_rank():
    counts = {'a': 5, 'b': 3, 'c': 3, 'd': 1}
    assert rank_for_count(5, counts) == 1
    assert rank_for_count(3, counts) == 2
    assert rank_for_count(1, counts) == 4
    # Not referred by anyone: after every referring code
    assert rank_for_count(0, counts) == 5


def test_rank_is_monotonic_in_count():
    counts = {'a': 7, 'b': 7, 'c': 4, 'd': 2, 'e': 2, 'f': 1}
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    ranks = [rank_for_count(count, counts) for _, count in ranked]
    assert ranks == sorted(ranks)
    for code, count in counts.items():
        for other, other_count in counts.items():
            if count == other_count:
                assert rank_for_count(count, counts) == rank_for_count(other_count, counts)


def test_get_referral_stats(small_network):
    stats = get_referral_stats(small_network, 'A')
    assert (stats.count, stats.position) == (2, 1)

    stats = get_referral_stats(small_network, 'B')
    assert (stats.count, stats.position) == (1, 2)

    stats = get_referral_stats(small_network, 'C')
    assert (stats.count, stats.position) == (0, 3)


def test_find_referrer_returns_first_owner():
    records = [
        make_record('X', first_name='First'),
        make_record('X', first_name='Second', email='second@example.com'),
    ]
    assert find_referrer(records, 'X').first_name == 'First'
    assert find_referrer(records, 'missing') is None
    assert find_referrer(records, 'undefined') is None


def test_leaderboard_small_network(small_network):
    result = build_leaderboard(small_network)

    assert result['leaderboard'] == [
        {'initials': 'AA', 'name': 'Alice A.', 'joined': 'Joined Jan 5', 'referrals': 2},
        {'initials': 'BB', 'name': 'Bob B.', 'joined': 'Joined Jan 6', 'referrals': 1},
    ]
    assert result['totalReferrals'] == 3
    assert result['totalSignups'] == 4


def test_leaderboard_drops_orphaned_codes_but_counts_them():
    records = [
        make_record('A'),
        make_record('B', 'A'),
        make_record('C', 'ghost'),
        make_record('D', 'ghost'),
    ]
    result = build_leaderboard(records)

    assert [entry['name'] for entry in result['leaderboard']] == ['FirstA L.']
    assert result['totalReferrals'] == 3
    assert result['totalSignups'] == 4


def test_leaderboard_identity_last_owner_wins():
    records = [
        make_record('X', first_name='Old', last_name='Owner'),
        make_record('X', first_name='New', last_name='Owner', email='new@example.com'),
        make_record('Y', 'X'),
    ]
    result = build_leaderboard(records)
    assert result['leaderboard'][0]['name'] == 'New O.'


def test_leaderboard_truncates_to_top_ten_in_order():
    records = []
    for i in range(12):
        code = f"R{i:02d}"
        records.append(make_record(code))
        for j in range(i + 1):
            records.append(make_record(f"{code}-{j}", code))

    result = build_leaderboard(records)
    referrals = [entry['referrals'] for entry in result['leaderboard']]

    assert len(referrals) == referral_service.DEFAULT_LEADERBOARD_SIZE
    assert referrals == sorted(referrals, reverse=True)
    assert referrals[0] == 12
    assert referrals[-1] == 3
    assert result['totalReferrals'] == sum(range(1, 13))


def test_leaderboard_custom_limit(small_network):
    assert len(build_leaderboard(small_network, limit=1)['leaderboard']) == 1


def test_leaderboard_entry_with_missing_last_name():
    records = [make_record('A', last_name='', first_name='cher'), make_record('B', 'A')]
    entry = build_leaderboard(records)['leaderboard'][0]
    assert entry['initials'] == 'C'
    assert entry['name'] == 'cher .'


def test_empty_leaderboard():
    assert build_leaderboard([]) == {'leaderboard': [], 'totalReferrals': 0, 'totalSignups': 0}


@pytest.mark.parametrize('timestamp, expected', [
    ('2026-03-09T23:15:00.000Z', 'Joined Mar 9'),
    ('2026-12-25', 'Joined Dec 25'),
    ('2026-07-01T08:00:00+02:00', 'Joined Jul 1'),
    ('', 'Joined recently'),
    ('not a date', 'Joined recently'),
])
def test_joined_label(timestamp, expected):
    assert joined_label(timestamp) == expected
