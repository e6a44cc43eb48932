"""Unit tests for rent increase, SMSF and trust compliance rules"""

import pytest
from datetime import date
from propcalc.domain.models import ComplianceStatus, DeadlineStatus, RentIncreaseRule, RentReviewStatus
from propcalc.domain.rent_increase import (
    RENT_INCREASE_RULES,
    calculate_gap_percent,
    calculate_rent_review_status,
    earliest_increase_date,
    get_rent_increase_rule,
    review_rent,
    summarise_rent_reviews,
)
from propcalc.domain.smsf import (
    calculate_age,
    calculate_minimum_pension,
    get_contribution_cap_status,
    get_minimum_pension_factor,
    get_pension_drawdown_status,
    minimum_pension_for_member,
    remaining_cap,
)
from propcalc.domain.trust import get_days_until_deadline, get_deadline_status, get_distribution_deadline


# ---- Rent increases ----


def test_vic_rent_increase_rule():
    assert get_rent_increase_rule("VIC") == RentIncreaseRule(
        notice_days=60,
        max_frequency="12 months",
        fixed_term_rule="Only at end of fixed term",
    )


def test_unknown_state_has_no_rule():
    assert get_rent_increase_rule("XX") is None
    assert get_rent_increase_rule("") is None


def test_every_state_and_territory_covered():
    assert set(RENT_INCREASE_RULES) == {"NSW", "VIC", "QLD", "SA", "WA", "TAS", "NT", "ACT"}


def test_state_lookup_is_case_insensitive():
    assert get_rent_increase_rule("nt").notice_days == 30


def test_earliest_increase_date():
    assert earliest_increase_date("ACT", date(2025, 3, 1)) == date(2025, 4, 26)
    assert earliest_increase_date("XX", date(2025, 3, 1)) is None


# ---- Rent review ----


@pytest.mark.parametrize(
    "gap_percent,expected",
    [
        (24, RentReviewStatus.BELOW_MARKET_CRITICAL),
        (20, RentReviewStatus.BELOW_MARKET_WARNING),
        (12, RentReviewStatus.BELOW_MARKET_WARNING),
        (10, RentReviewStatus.AT_MARKET),
        (-10, RentReviewStatus.AT_MARKET),
        (-12, RentReviewStatus.ABOVE_MARKET),
    ],
)
def test_rent_review_status(gap_percent: float, expected: RentReviewStatus):
    assert calculate_rent_review_status(gap_percent) == expected


def test_gap_percent_without_current_rent():
    assert calculate_gap_percent(0, 500) == 100
    assert calculate_gap_percent(0, 0) == 0
    assert calculate_gap_percent(500, 440) == -12


def test_review_rent_below_market():
    """Test $500 a week received against a $620 market rent"""
    review = review_rent("p1", 26000, 620)

    assert review.current_rent_weekly == 500
    assert review.gap_percent == 24
    assert review.annual_uplift == 6240
    assert review.status == RentReviewStatus.BELOW_MARKET_CRITICAL


def test_review_rent_without_market_estimate():
    review = review_rent("p1", 26000, None)

    assert review.status == RentReviewStatus.NO_REVIEW
    assert review.gap_percent is None
    assert review.annual_uplift is None


def test_rent_review_summary_sorted_by_gap():
    summary = summarise_rent_reviews([
        review_rent("over", 26000, 440),
        review_rent("unreviewed", 20000, None),
        review_rent("critical", 26000, 620),
        review_rent("warning", 26000, 560),
    ])

    assert [r.property_id for r in summary.reviews] == ["critical", "warning", "over", "unreviewed"]
    assert summary.total_annual_uplift == 6240
    assert summary.reviewed_count == 3
    assert summary.total_count == 4


# ---- SMSF ----


@pytest.mark.parametrize(
    "age,factor",
    [(60, 0.04), (64, 0.04), (65, 0.05), (74, 0.05), (75, 0.06), (80, 0.07), (85, 0.09), (90, 0.11), (95, 0.14), (101, 0.14)],
)
def test_minimum_pension_factor_bands(age: int, factor: float):
    assert get_minimum_pension_factor(age) == factor


def test_minimum_pension_rounds_to_nearest_ten():
    assert calculate_minimum_pension(500000, 66) == 25000
    assert calculate_minimum_pension(123456, 70) == 6170
    assert calculate_minimum_pension(0, 70) == 0


def test_age_on_first_of_july_sets_the_factor():
    """Test a member turning 65 on 2 July is still 64 for the whole year"""
    assert calculate_age(date(1960, 7, 2), date(2025, 7, 1)) == 64
    assert minimum_pension_for_member(100000, date(1960, 7, 2), 2026) == 4000
    assert minimum_pension_for_member(100000, date(1960, 7, 1), 2026) == 5000


@pytest.mark.parametrize(
    "concessional,non_concessional,expected",
    [
        (10000, 0, ComplianceStatus.OK),
        (27000, 0, ComplianceStatus.WARNING),
        (30000, 0, ComplianceStatus.WARNING),
        (30001, 0, ComplianceStatus.BREACH),
        (0, 121000, ComplianceStatus.BREACH),
    ],
)
def test_contribution_cap_status(concessional: float, non_concessional: float, expected: ComplianceStatus):
    assert get_contribution_cap_status(concessional, non_concessional).overall == expected


def test_overall_status_is_worst_of_both_caps():
    status = get_contribution_cap_status(28000, 130000)
    assert status.concessional == ComplianceStatus.WARNING
    assert status.non_concessional == ComplianceStatus.BREACH
    assert status.overall == ComplianceStatus.BREACH


def test_remaining_cap():
    assert remaining_cap(12000, "concessional") == 18000
    assert remaining_cap(150000, "non_concessional") == 0
    assert remaining_cap(100, "unknown") is None


@pytest.mark.parametrize(
    "drawn,expected",
    [
        (12000, ComplianceStatus.OK),
        (6000, ComplianceStatus.OK),
        (4800, ComplianceStatus.WARNING),
        (4000, ComplianceStatus.BREACH),
    ],
)
def test_pension_drawdown_against_pro_rata(drawn: float, expected: ComplianceStatus):
    """Test six months into the year against a $12,000 minimum"""
    assert get_pension_drawdown_status(drawn, 12000, 6) == expected


def test_drawdown_met_in_full_is_ok_at_any_point():
    assert get_pension_drawdown_status(12000, 12000, 1) == ComplianceStatus.OK


# ---- Trusts ----


def test_distribution_deadline_is_end_of_financial_year():
    assert get_distribution_deadline(2026) == date(2026, 6, 30)
    assert get_days_until_deadline(2026, date(2026, 6, 1)) == 29


@pytest.mark.parametrize(
    "today,expected",
    [
        (date(2026, 3, 1), DeadlineStatus.COMPLIANT),
        (date(2026, 5, 31), DeadlineStatus.APPROACHING),
        (date(2026, 6, 23), DeadlineStatus.URGENT),
        (date(2026, 6, 30), DeadlineStatus.URGENT),
        (date(2026, 7, 1), DeadlineStatus.OVERDUE),
    ],
)
def test_deadline_status(today: date, expected: DeadlineStatus):
    assert get_deadline_status(2026, has_distribution=False, today=today) == expected


def test_recorded_distribution_is_compliant():
    assert get_deadline_status(2026, has_distribution=True, today=date(2026, 8, 1)) == DeadlineStatus.COMPLIANT
