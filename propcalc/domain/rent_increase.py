"""Rent increase notice rules per state and territory, and rent reviews against market"""

from datetime import date, timedelta
from types import MappingProxyType
from typing import Iterable, Optional

from propcalc.domain.models import RentIncreaseRule, RentReview, RentReviewStatus, RentReviewSummary
from propcalc.utils.date_utils import round_money

RENT_INCREASE_RULES = MappingProxyType({
    "NSW": RentIncreaseRule(60, "12 months", "Only if the agreement allows, once per 12 months"),
    "VIC": RentIncreaseRule(60, "12 months", "Only at end of fixed term"),
    "QLD": RentIncreaseRule(60, "12 months", "Only if the agreement allows"),
    "SA": RentIncreaseRule(60, "12 months", "Only if the agreement allows"),
    "WA": RentIncreaseRule(60, "12 months", "Only if the agreement sets the amount or method"),
    "TAS": RentIncreaseRule(60, "12 months", "Only if the agreement allows"),
    "NT": RentIncreaseRule(30, "6 months", "Only if the agreement allows"),
    "ACT": RentIncreaseRule(56, "12 months", "Only if the agreement sets the amount"),
})


def get_rent_increase_rule(state: str) -> Optional[RentIncreaseRule]:
    """Notice rules for a state code, None when the state is unknown"""
    return RENT_INCREASE_RULES.get(state.upper()) if state else None


def earliest_increase_date(state: str, notice_given_on: date) -> Optional[date]:
    """First day a new rent can apply if written notice is given today"""
    rule = get_rent_increase_rule(state)
    if rule is None:
        return None
    return notice_given_on + timedelta(days=rule.notice_days)


# Gap thresholds, percent of current rent
CRITICAL_GAP_PERCENT = 20
WARNING_GAP_PERCENT = 10
ABOVE_MARKET_GAP_PERCENT = -10


def calculate_rent_review_status(gap_percent: float) -> RentReviewStatus:
    """Positive gaps mean rent is below market"""
    if gap_percent > CRITICAL_GAP_PERCENT:
        return RentReviewStatus.BELOW_MARKET_CRITICAL
    if gap_percent > WARNING_GAP_PERCENT:
        return RentReviewStatus.BELOW_MARKET_WARNING
    if gap_percent < ABOVE_MARKET_GAP_PERCENT:
        return RentReviewStatus.ABOVE_MARKET
    return RentReviewStatus.AT_MARKET


def calculate_gap_percent(current_rent_weekly: float, market_rent_weekly: float) -> float:
    if current_rent_weekly > 0:
        return round_money((market_rent_weekly - current_rent_weekly) / current_rent_weekly * 100)
    return 100.0 if market_rent_weekly > 0 else 0.0


def review_rent(
    property_id: str,
    annual_rent: float,
    market_rent_weekly: Optional[float],
) -> RentReview:
    """
    Compare the last 12 months of rent with a weekly market estimate.

    annual_rent is the rental income actually received; without a market
    estimate the property is reported as NO_REVIEW.
    """
    current_rent_weekly = annual_rent / 52

    if market_rent_weekly is None:
        return RentReview(
            property_id=property_id,
            current_rent_weekly=round_money(current_rent_weekly),
            market_rent_weekly=None,
            gap_percent=None,
            annual_uplift=None,
            status=RentReviewStatus.NO_REVIEW,
        )

    gap_percent = calculate_gap_percent(current_rent_weekly, market_rent_weekly)
    return RentReview(
        property_id=property_id,
        current_rent_weekly=round_money(current_rent_weekly),
        market_rent_weekly=market_rent_weekly,
        gap_percent=gap_percent,
        annual_uplift=round_money((market_rent_weekly - current_rent_weekly) * 52),
        status=calculate_rent_review_status(gap_percent),
    )


def summarise_rent_reviews(reviews: Iterable[RentReview]) -> RentReviewSummary:
    """Largest gap first, unreviewed properties last"""
    ordered = sorted(reviews, key=lambda r: (r.gap_percent is None, -(r.gap_percent or 0)))
    reviewed = [r for r in ordered if r.status != RentReviewStatus.NO_REVIEW]

    return RentReviewSummary(
        reviews=ordered,
        total_annual_uplift=round_money(sum(r.annual_uplift or 0 for r in reviewed)),
        reviewed_count=len(reviewed),
        total_count=len(ordered),
    )
