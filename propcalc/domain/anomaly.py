"""
Transaction anomaly detection.

Each detector returns an AnomalyResult or None. De-duplication against alerts
already raised is the caller's job.
"""

import re
from datetime import date
from typing import Iterable, Optional, Set

from propcalc.domain.models import AnomalyResult, ExpectedTransaction, HistoricalAverage, TransactionSample

UNUSUAL_AMOUNT_THRESHOLD = 0.3  # 30% deviation from the historical average
UNEXPECTED_EXPENSE_MIN = 500
MIN_HISTORICAL_COUNT = 3
DUPLICATE_DATE_TOLERANCE_DAYS = 1
DUPLICATE_AMOUNT_TOLERANCE = 0.01
DUPLICATE_SIMILARITY_THRESHOLD = 0.5


def detect_missed_rent(
    expected: ExpectedTransaction,
    alert_delay_days: int,
    today: Optional[date] = None,
) -> Optional[AnomalyResult]:
    """Flag rent that is still outstanding alert_delay_days after its expected date"""
    today = today or date.today()
    days_past_due = (today - expected.expected_date).days

    if days_past_due < alert_delay_days:
        return None

    property_name = expected.property_address or "Unknown property"
    return AnomalyResult(
        alert_type="missed_rent",
        severity="critical",
        description=(
            f"{expected.description} of ${expected.expected_amount:.2f} expected on "
            f"{expected.expected_date.isoformat()} from {property_name} has not been received"
        ),
        suggested_action="Check with tenant or mark as skipped",
        metadata={
            "expected_transaction_id": expected.id,
            "expected_amount": expected.expected_amount,
            "expected_date": expected.expected_date.isoformat(),
            "days_past_due": days_past_due,
        },
    )


def detect_unusual_amount(transaction: TransactionSample, historical: HistoricalAverage) -> Optional[AnomalyResult]:
    """Amount more than 30% away from the merchant's average over at least 3 samples"""
    if historical.count < MIN_HISTORICAL_COUNT or historical.avg <= 0:
        return None

    amount = abs(transaction.amount)
    deviation = abs(amount - historical.avg) / historical.avg
    if deviation <= UNUSUAL_AMOUNT_THRESHOLD:
        return None

    percent_diff = round(deviation * 100)
    direction = "higher" if amount > historical.avg else "lower"

    return AnomalyResult(
        alert_type="unusual_amount",
        severity="warning",
        description=(
            f"{transaction.description} of ${amount:.2f} is {percent_diff}% {direction} "
            f"than usual (${historical.avg:.2f} avg)"
        ),
        suggested_action="Review transaction or mark as expected",
        metadata={
            "amount": amount,
            "average": historical.avg,
            "deviation": percent_diff,
            "historical_count": historical.count,
        },
    )


def detect_duplicates(
    transaction: TransactionSample,
    recent_transactions: Iterable[TransactionSample],
) -> Optional[AnomalyResult]:
    """Same amount within a day and a similar description"""
    tx_date = transaction.date or date.today()

    for recent in recent_transactions:
        if recent.id is not None and recent.id == transaction.id:
            continue
        if abs(transaction.amount - recent.amount) > DUPLICATE_AMOUNT_TOLERANCE:
            continue

        recent_date = recent.date or date.today()
        if abs((tx_date - recent_date).days) > DUPLICATE_DATE_TOLERANCE_DAYS:
            continue

        similarity = calculate_similarity(transaction.description, recent.description)
        if similarity > DUPLICATE_SIMILARITY_THRESHOLD:
            return AnomalyResult(
                alert_type="duplicate_transaction",
                severity="warning",
                description=(
                    f"Possible duplicate: Two ${abs(transaction.amount):.2f} transactions from "
                    f"\"{transaction.description}\" on similar dates"
                ),
                suggested_action="Review both transactions - dismiss if intentional",
                metadata={
                    "transaction_id": transaction.id,
                    "duplicate_id": recent.id,
                    "amount": transaction.amount,
                    "similarity": similarity,
                },
            )

    return None


def detect_unexpected_expense(transaction: TransactionSample, known_merchants: Set[str]) -> Optional[AnomalyResult]:
    """Debit of $500 or more from a merchant not seen before"""
    if transaction.amount >= 0:
        return None

    amount = abs(transaction.amount)
    if amount < UNEXPECTED_EXPENSE_MIN:
        return None

    merchant = extract_merchant(transaction.description)
    if merchant in known_merchants:
        return None

    return AnomalyResult(
        alert_type="unexpected_expense",
        severity="info",
        description=f"New expense of ${amount:.2f} from \"{transaction.description}\"",
        suggested_action="Categorise and verify this transaction",
        metadata={"amount": amount, "merchant": merchant},
    )


def calculate_similarity(first: str, second: str) -> float:
    """Jaccard similarity over lower-cased words"""
    s1 = first.lower()
    s2 = second.lower()

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    words1 = set(s1.split())
    words2 = set(s2.split())
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


def extract_merchant(description: str) -> str:
    """First three words with digits stripped"""
    return re.sub(r"[0-9]", "", " ".join(description.split()[:3])).strip()
