"""Unit tests for transaction anomaly detection"""

import pytest
from datetime import date
from propcalc.domain.anomaly import (
    calculate_similarity,
    detect_duplicates,
    detect_missed_rent,
    detect_unexpected_expense,
    detect_unusual_amount,
    extract_merchant,
)
from propcalc.domain.models import ExpectedTransaction, HistoricalAverage, TransactionSample


@pytest.fixture
def expected_rent() -> ExpectedTransaction:
    return ExpectedTransaction(
        id="exp-1",
        expected_date=date(2025, 10, 1),
        expected_amount=2400.0,
        description="Rent payment",
        property_address="12 Smith St, Richmond VIC",
    )


def test_missed_rent_after_grace_period(expected_rent: ExpectedTransaction):
    result = detect_missed_rent(expected_rent, alert_delay_days=3, today=date(2025, 10, 4))

    assert result.alert_type == "missed_rent"
    assert result.severity == "critical"
    assert "12 Smith St" in result.description
    assert result.metadata["expected_transaction_id"] == "exp-1"
    assert result.metadata["days_past_due"] == 3


def test_missed_rent_within_grace_period(expected_rent: ExpectedTransaction):
    assert detect_missed_rent(expected_rent, alert_delay_days=3, today=date(2025, 10, 3)) is None


def test_missed_rent_without_address(expected_rent: ExpectedTransaction):
    expected_rent.property_address = None
    result = detect_missed_rent(expected_rent, alert_delay_days=0, today=date(2025, 10, 1))
    assert "Unknown property" in result.description


def test_missed_rent_is_raised_again_on_each_call(expected_rent: ExpectedTransaction):
    """Test de-duplication is left to the caller"""
    first = detect_missed_rent(expected_rent, 3, today=date(2025, 10, 10))
    second = detect_missed_rent(expected_rent, 3, today=date(2025, 10, 10))
    assert first == second


def test_unusual_amount_higher_than_usual():
    result = detect_unusual_amount(TransactionSample(-300.0, "Origin Energy"), HistoricalAverage(avg=200.0, count=4))

    assert result.alert_type == "unusual_amount"
    assert "50% higher than usual" in result.description
    assert result.metadata["deviation"] == 50


def test_unusual_amount_needs_history():
    transaction = TransactionSample(-900.0, "Origin Energy")
    assert detect_unusual_amount(transaction, HistoricalAverage(avg=200.0, count=2)) is None
    assert detect_unusual_amount(transaction, HistoricalAverage(avg=0.0, count=10)) is None


def test_unusual_amount_within_tolerance():
    assert detect_unusual_amount(TransactionSample(-250.0, "Water"), HistoricalAverage(avg=200.0, count=5)) is None


def test_duplicate_same_amount_next_day():
    transaction = TransactionSample(-89.95, "BUNNINGS WAREHOUSE 123", id="t2", date=date(2025, 9, 2))
    recent = [
        TransactionSample(-89.95, "BUNNINGS WAREHOUSE 123", id="t1", date=date(2025, 9, 1)),
    ]

    result = detect_duplicates(transaction, recent)

    assert result.alert_type == "duplicate_transaction"
    assert result.metadata["duplicate_id"] == "t1"


def test_duplicate_ignores_itself_and_distant_dates():
    transaction = TransactionSample(-89.95, "BUNNINGS WAREHOUSE", id="t2", date=date(2025, 9, 10))
    recent = [
        TransactionSample(-89.95, "BUNNINGS WAREHOUSE", id="t2", date=date(2025, 9, 10)),
        TransactionSample(-89.95, "BUNNINGS WAREHOUSE", id="t1", date=date(2025, 9, 1)),
        TransactionSample(-12.00, "BUNNINGS WAREHOUSE", id="t3", date=date(2025, 9, 10)),
    ]
    assert detect_duplicates(transaction, recent) is None


def test_unexpected_expense_from_new_merchant():
    result = detect_unexpected_expense(TransactionSample(-1200.0, "ACE PLUMBING 4411 SYDNEY"), {"Origin Energy"})

    assert result.alert_type == "unexpected_expense"
    assert result.severity == "info"
    assert result.metadata["merchant"] == "ACE PLUMBING"


def test_known_merchant_small_amount_and_income_not_flagged():
    assert detect_unexpected_expense(TransactionSample(-1200.0, "ACE PLUMBING 4411"), {"ACE PLUMBING"}) is None
    assert detect_unexpected_expense(TransactionSample(-499.99, "NEW CO"), set()) is None
    assert detect_unexpected_expense(TransactionSample(2400.0, "RENT"), set()) is None


def test_similarity():
    assert calculate_similarity("Rent Payment", "rent payment") == 1.0
    assert calculate_similarity("Rent", "") == 0.0
    assert calculate_similarity("rent payment smith", "rent payment jones") == 0.5


def test_extract_merchant():
    assert extract_merchant("WOOLWORTHS 1234 RICHMOND VIC") == "WOOLWORTHS  RICHMOND"
