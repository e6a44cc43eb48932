"""Compliance endpoints - rent increase notice and review, SMSF caps and drawdown, trust deadlines"""

import time
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from propcalc.api.v1.schemas import (
    ContributionRequest,
    ContributionResponse,
    PensionRequest,
    PensionResponse,
    RentIncreaseRuleResponse,
    RentReviewRequest,
    RentReviewResponse,
    TrustDeadlineResponse,
)
from propcalc.api.dependencies import get_request_id
from propcalc.domain.rent_increase import (
    earliest_increase_date,
    get_rent_increase_rule,
    review_rent,
    summarise_rent_reviews,
)
from propcalc.domain.smsf import (
    CONTRIBUTION_CAPS,
    get_contribution_cap_status,
    get_pension_drawdown_status,
    minimum_pension_for_member,
    remaining_cap,
)
from propcalc.domain.trust import get_days_until_deadline, get_deadline_status, get_distribution_deadline
from propcalc.infrastructure.observability.metrics import record_calculation
from propcalc.infrastructure.observability.logging import log_calculation
from propcalc.utils.date_utils import financial_year_label, months_elapsed_in_fy

router = APIRouter()


@router.get("/compliance/rent-increase/{state}", response_model=RentIncreaseRuleResponse)
def rent_increase_rule(
    state: str,
    request: Request,
    notice_date: Optional[date] = Query(None, description="Date written notice is given"),
):
    rule = get_rent_increase_rule(state)
    if rule is None:
        raise HTTPException(status_code=404, detail=f"No rent increase rules for state '{state}'")

    record_calculation("rent_increase")
    log_calculation(get_request_id(request), "rent_increase", 0.0, state=state.upper())

    return RentIncreaseRuleResponse(
        state=state.upper(),
        notice_days=rule.notice_days,
        max_frequency=rule.max_frequency,
        fixed_term_rule=rule.fixed_term_rule,
        earliest_increase_date=earliest_increase_date(state, notice_date) if notice_date else None,
    )


@router.post("/compliance/rent-review", response_model=RentReviewResponse)
def rent_review(request_body: RentReviewRequest, request: Request):
    """Gap between rent received and market rent per property, largest gap first"""
    start_time = time.time()

    summary = summarise_rent_reviews(
        review_rent(p.property_id, p.annual_rent, p.market_rent_weekly) for p in request_body.properties
    )

    record_calculation("rent_review")
    log_calculation(
        get_request_id(request), "rent_review", (time.time() - start_time) * 1000,
        reviewed_count=summary.reviewed_count,
        total_annual_uplift=summary.total_annual_uplift,
    )

    return RentReviewResponse.model_validate(summary)


@router.post("/compliance/smsf/contributions", response_model=ContributionResponse)
def smsf_contributions(request_body: ContributionRequest, request: Request):
    start_time = time.time()

    status = get_contribution_cap_status(request_body.concessional, request_body.non_concessional)

    record_calculation("smsf_contributions")
    log_calculation(
        get_request_id(request), "smsf_contributions", (time.time() - start_time) * 1000,
        overall=status.overall.value,
    )

    return ContributionResponse(
        concessional=status.concessional,
        non_concessional=status.non_concessional,
        overall=status.overall,
        caps=dict(CONTRIBUTION_CAPS),
        remaining={
            "concessional": remaining_cap(request_body.concessional, "concessional"),
            "non_concessional": remaining_cap(request_body.non_concessional, "non_concessional"),
        },
    )


@router.post("/compliance/smsf/pension", response_model=PensionResponse)
def smsf_pension(request_body: PensionRequest, request: Request):
    """Minimum pension for the year and progress against its pro-rata share"""
    start_time = time.time()

    minimum_required = minimum_pension_for_member(
        request_body.balance,
        request_body.date_of_birth,
        request_body.financial_year,
    )
    months_elapsed = months_elapsed_in_fy(request_body.financial_year, request_body.as_of)
    status = get_pension_drawdown_status(request_body.amount_drawn, minimum_required, months_elapsed)

    record_calculation("smsf_pension")
    log_calculation(
        get_request_id(request), "smsf_pension", (time.time() - start_time) * 1000,
        minimum_required=minimum_required,
        status=status.value,
    )

    return PensionResponse(
        minimum_required=minimum_required,
        amount_drawn=request_body.amount_drawn,
        months_elapsed=months_elapsed,
        status=status,
    )


@router.get("/compliance/trust/deadline", response_model=TrustDeadlineResponse)
def trust_deadline(
    request: Request,
    financial_year: int = Query(..., ge=2000, le=2100),
    has_distribution: bool = Query(False, description="Distribution resolution already recorded"),
    as_of: Optional[date] = Query(None),
):
    status = get_deadline_status(financial_year, has_distribution, as_of)

    record_calculation("trust_deadline")
    log_calculation(get_request_id(request), "trust_deadline", 0.0, status=status.value)

    return TrustDeadlineResponse(
        financial_year=financial_year,
        label=financial_year_label(financial_year),
        deadline=get_distribution_deadline(financial_year),
        days_until_deadline=get_days_until_deadline(financial_year, as_of),
        status=status,
    )
