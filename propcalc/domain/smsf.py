"""SMSF compliance - contribution caps and minimum pension drawdowns"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Optional

from propcalc.domain.models import ComplianceStatus, ContributionCapStatus
from propcalc.utils.date_utils import financial_year_range

CONTRIBUTION_CAPS = MappingProxyType({
    "concessional": 30_000,
    "non_concessional": 120_000,
})

CAP_WARNING_RATIO = 0.9
DRAWDOWN_WARNING_RATIO = 0.8

# (upper age bound exclusive, minimum drawdown factor)
PENSION_MINIMUM_FACTORS = (
    (65, 0.04),
    (75, 0.05),
    (80, 0.06),
    (85, 0.07),
    (90, 0.09),
    (95, 0.11),
    (None, 0.14),
)

_SEVERITY = {ComplianceStatus.OK: 0, ComplianceStatus.WARNING: 1, ComplianceStatus.BREACH: 2}


def calculate_age(date_of_birth: date, as_of: date) -> int:
    had_birthday = (as_of.month, as_of.day) >= (date_of_birth.month, date_of_birth.day)
    return as_of.year - date_of_birth.year - (0 if had_birthday else 1)


def get_minimum_pension_factor(age: int) -> float:
    for upper_bound, factor in PENSION_MINIMUM_FACTORS:
        if upper_bound is None or age < upper_bound:
            return factor
    return PENSION_MINIMUM_FACTORS[-1][1]


def calculate_minimum_pension(balance: float, age: int) -> float:
    """Minimum annual payment, rounded to the nearest $10 as the ATO does"""
    if balance <= 0:
        return 0.0
    tens = (Decimal(str(balance)) * Decimal(str(get_minimum_pension_factor(age))) / 10).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return float(tens * 10)


def minimum_pension_for_member(balance: float, date_of_birth: date, financial_year: int) -> float:
    """Factor is set by the member's age on 1 July of the financial year"""
    fy_start, _ = financial_year_range(financial_year)
    return calculate_minimum_pension(balance, calculate_age(date_of_birth, fy_start))


def _cap_status(amount: float, cap: float) -> ComplianceStatus:
    if amount > cap:
        return ComplianceStatus.BREACH
    if amount >= cap * CAP_WARNING_RATIO:
        return ComplianceStatus.WARNING
    return ComplianceStatus.OK


def get_contribution_cap_status(concessional: float, non_concessional: float) -> ContributionCapStatus:
    """Warning from 90% of a cap, breach once over it; overall is the worse of the two"""
    concessional_status = _cap_status(concessional, CONTRIBUTION_CAPS["concessional"])
    non_concessional_status = _cap_status(non_concessional, CONTRIBUTION_CAPS["non_concessional"])
    overall = max(concessional_status, non_concessional_status, key=_SEVERITY.__getitem__)

    return ContributionCapStatus(
        concessional=concessional_status,
        non_concessional=non_concessional_status,
        overall=overall,
    )


def get_pension_drawdown_status(
    amount_drawn: float,
    minimum_required: float,
    months_elapsed: int,
) -> ComplianceStatus:
    """
    Progress against the pro-rata share of the annual minimum.

    ok once the pro-rata share (or the full minimum) is drawn, warning from 80%
    of the pro-rata share, breach when further behind.
    """
    if amount_drawn >= minimum_required:
        return ComplianceStatus.OK

    pro_rata = minimum_required * min(12, max(0, months_elapsed)) / 12
    if amount_drawn >= pro_rata:
        return ComplianceStatus.OK
    if amount_drawn >= pro_rata * DRAWDOWN_WARNING_RATIO:
        return ComplianceStatus.WARNING
    return ComplianceStatus.BREACH


def remaining_cap(contributed: float, cap_name: str) -> Optional[float]:
    cap = CONTRIBUTION_CAPS.get(cap_name)
    if cap is None:
        return None
    return max(0.0, cap - contributed)
