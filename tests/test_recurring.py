from datetime import date, timedelta
from decimal import Decimal

import pytest

from spending_analysis import detect_recurring
from spending_analysis.recurring import classify_frequency, normalize_description
from tests.helpers.factories import make_tx


def _series(start: str, gaps: list[int], description: str, amount: str = "-15.99", **kw):
    d = date.fromisoformat(start)
    out = [make_tx(d, description, amount, **kw)]
    for g in gaps:
        d = d + timedelta(days=g)
        out.append(make_tx(d, description, amount, **kw))
    return out


# ---- Normalization -----------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "key"),
    [
        ("NETFLIX.COM 01/05", "NETFLIX.COM"),
        ("Netflix.com 1/5/24", "NETFLIX.COM"),
        ("KROGER #123", "KROGER"),
        ("ATM 1234 WITHDRAWAL", "ATM WITHDRAWAL"),
        ("GYM $15.99 monthly", "GYM MONTHLY"),
        ("RENT 2024-01-05   PORTAL", "RENT PORTAL"),
        ("  spotify   usa  ", "SPOTIFY USA"),
        ("123456", ""),
    ],
)
def test_normalize_description(raw: str, key: str):
    assert normalize_description(raw) == key


@pytest.mark.parametrize(
    ("gap", "expected"),
    [
        (4.9, None),
        (5, "weekly"),
        (10, "weekly"),
        (11, None),
        (25, "monthly"),
        (38, "monthly"),
        (60, None),
        (80, "quarterly"),
        (105, "quarterly"),
        (340, "annual"),
        (400, "annual"),
        (401, None),
    ],
)
def test_classify_frequency_inclusive_ranges(gap: float, expected: str | None):
    assert classify_frequency(gap) == expected


# ---- Detection ---------------------------------------------------------------


def test_monthly_round_numbers():
    txs = _series("2024-01-01", [30] * 5, "SPOTIFY USA", category="Entertainment")
    [p] = detect_recurring(txs)

    assert p.frequency == "monthly"
    assert p.occurrences == 6
    assert p.average_amount == Decimal("-15.99")
    assert p.last_date == date(2024, 5, 30)
    assert p.next_expected_date == p.last_date + timedelta(days=30)
    assert p.category == "Entertainment"
    assert p.description == "SPOTIFY USA"


def test_inconsistent_gaps_are_rejected():
    txs = _series("2024-01-01", [5, 95, 12, 200], "RANDOM SHOP")
    assert detect_recurring(txs) == []


def test_mean_in_range_but_spread_too_wide_is_rejected():
    # mean 30 (monthly) but population std-dev 20
    txs = _series("2024-01-01", [10, 50], "IRREGULAR")
    assert detect_recurring(txs) == []


def test_single_stray_gap_can_still_pass():
    # gaps 30,30,30,30,50 -> mean 34, population std-dev 8
    txs = _series("2024-01-01", [30, 30, 30, 30, 50], "GYM")
    [p] = detect_recurring(txs)
    assert p.frequency == "monthly"
    assert p.next_expected_date == p.last_date + timedelta(days=34)


def test_single_occurrence_never_reported():
    txs = [make_tx("2024-01-01", "ONE OFF"), make_tx("2024-02-01", "OTHER ONE OFF")]
    assert detect_recurring(txs) == []


def test_grouping_ignores_noise_and_case():
    txs = [
        make_tx("2024-01-05", "NETFLIX.COM 01/05"),
        make_tx("2024-02-05", "Netflix.com 02/05"),
        make_tx("2024-03-06", "NETFLIX.COM 03/06"),
    ]
    [p] = detect_recurring(txs)
    assert p.description == "NETFLIX.COM"
    assert p.occurrences == 3
    # gaps 31 and 30: mean 30.5 rounds half up to 31 days
    assert p.next_expected_date == date(2024, 4, 6)


def test_members_sorted_by_date_and_latest_category_wins():
    txs = [
        make_tx("2024-03-01", "WATER BILL", "-40.00", category=None),
        make_tx("2024-01-01", "WATER BILL", "-30.00", category="Utilities"),
        make_tx("2024-01-31", "WATER BILL", "-35.00", category="Utilities"),
    ]
    [p] = detect_recurring(txs)
    assert [t.date for t in p.transactions] == sorted(t.date for t in txs)
    assert p.last_date == date(2024, 3, 1)
    # latest member has no category
    assert p.category == "Uncategorized"
    assert p.average_amount == Decimal("-35.00")


def test_average_amount_rounds_to_cents():
    txs = [
        make_tx("2024-01-01", "PHONE", "-10.00"),
        make_tx("2024-01-08", "PHONE", "-10.01"),
        make_tx("2024-01-15", "PHONE", "-10.01"),
    ]
    [p] = detect_recurring(txs)
    assert p.frequency == "weekly"
    assert p.average_amount == Decimal("-10.01")


@pytest.mark.parametrize(
    ("amounts", "average"),
    [
        (("-15.99", "-16.00"), "-15.99"),
        (("15.99", "16.00"), "16.00"),
        (("-0.01", "0.00"), "0.00"),
    ],
)
def test_average_amount_half_cent_ties_round_toward_positive(
    amounts: tuple[str, str], average: str
):
    txs = [
        make_tx("2024-01-01", "PHONE", amounts[0]),
        make_tx("2024-01-08", "PHONE", amounts[1]),
    ]
    [p] = detect_recurring(txs)
    assert p.average_amount == Decimal(average)
    assert str(p.average_amount) == average


def test_order_by_occurrences_then_encounter_order():
    weekly = _series("2024-01-01", [7, 7, 7], "COFFEE CLUB")
    first_pair = _series("2024-01-01", [30], "ALPHA")
    second_pair = _series("2024-01-02", [30], "BETA")
    txs = first_pair + weekly + second_pair

    result = detect_recurring(txs)
    assert [p.description for p in result] == ["COFFEE CLUB", "ALPHA", "BETA"]
    assert [p.occurrences for p in result] == [4, 2, 2]


def test_quarterly_and_annual_patterns():
    quarterly = _series("2023-01-15", [90, 91, 92], "INSURANCE PREMIUM")
    annual = _series("2021-06-01", [365, 366], "DOMAIN RENEWAL")
    by_desc = {p.description: p for p in detect_recurring(quarterly + annual)}
    assert by_desc["INSURANCE PREMIUM"].frequency == "quarterly"
    assert by_desc["DOMAIN RENEWAL"].frequency == "annual"


def test_detection_does_not_mutate_input():
    txs = list(reversed(_series("2024-01-01", [30, 30], "HULU")))
    snapshot = list(txs)
    [p] = detect_recurring(txs)
    assert txs == snapshot
    # members are shared, not copied
    assert all(any(m is t for t in txs) for m in p.transactions)


def test_empty_and_unkeyable_input():
    assert detect_recurring([]) == []
    txs = [make_tx("2024-01-01", "12345"), make_tx("2024-02-01", "67890")]
    assert detect_recurring(txs) == []


def test_same_day_duplicates_do_not_form_a_pattern():
    txs = [make_tx("2024-01-01", "SNACK"), make_tx("2024-01-01", "SNACK", "-2.00")]
    assert detect_recurring(txs) == []
