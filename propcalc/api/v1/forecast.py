"""Forecast and tax position endpoints - full-year results from partial-year actuals"""

import time
from fastapi import APIRouter, HTTPException, Request

from propcalc.api.v1.schemas import (
    CategoryForecastRequest,
    CategoryForecastResponse,
    TaxForecastRequest,
    TaxForecastResponse,
    TaxPositionRequest,
    TaxPositionSchema,
    TaxYearsResponse,
)
from propcalc.api.dependencies import get_request_id
from propcalc.domain.exceptions import TaxTableNotFoundError
from propcalc.domain.models import ForecastTransaction, PropertyRef, TaxProfile
from propcalc.domain.tax_forecast import build_tax_forecast, compute_category_forecast, compute_confidence
from propcalc.domain.tax_position import calculate_tax_position, supported_financial_years
from propcalc.infrastructure.observability.metrics import record_calculation
from propcalc.infrastructure.observability.logging import log_calculation

router = APIRouter()


@router.post("/forecast/category", response_model=CategoryForecastResponse)
def category_forecast(request_body: CategoryForecastRequest, request: Request):
    start_time = time.time()

    result = compute_category_forecast(
        request_body.current_months,
        request_body.prior_months,
        request_body.months_elapsed,
    )
    confidence = compute_confidence(request_body.months_elapsed, bool(request_body.prior_months))

    record_calculation("forecast_category")
    log_calculation(
        get_request_id(request), "forecast_category", (time.time() - start_time) * 1000,
        months_elapsed=request_body.months_elapsed,
        forecast=result.forecast,
    )

    return CategoryForecastResponse(actual=result.actual, forecast=result.forecast, confidence=confidence)


@router.post("/forecast/tax", response_model=TaxForecastResponse)
def tax_forecast(request_body: TaxForecastRequest, request: Request):
    """
    Forecast rental income and deductions for every property.

    Transactions may cover the prior financial year as well; those months fill
    in the remainder of the current year.
    """
    start_time = time.time()

    result = build_tax_forecast(
        properties=[PropertyRef(**p.model_dump()) for p in request_body.properties],
        transactions=[ForecastTransaction(**t.model_dump()) for t in request_body.transactions],
        financial_year=request_body.financial_year,
        today=request_body.as_of,
        tax_profile=TaxProfile(**request_body.tax_profile.model_dump()) if request_body.tax_profile else None,
    )

    record_calculation("forecast_tax")
    log_calculation(
        get_request_id(request), "forecast_tax", (time.time() - start_time) * 1000,
        financial_year=result.financial_year,
        months_elapsed=result.months_elapsed,
        confidence=result.confidence.value,
        has_tax_position=result.tax_position is not None,
    )

    return TaxForecastResponse.model_validate(result)


@router.post("/tax/position", response_model=TaxPositionSchema)
def tax_position(request_body: TaxPositionRequest, request: Request):
    """Stateless tax position for a salary and a net rental result"""
    start_time = time.time()
    request_id = get_request_id(request)

    profile_fields = request_body.model_dump(exclude={"financial_year", "rental_net_result"})
    try:
        result = calculate_tax_position(
            TaxProfile(**profile_fields),
            request_body.financial_year,
            request_body.rental_net_result,
        )
    except TaxTableNotFoundError as e:
        raise HTTPException(status_code=422, detail=str(e))

    record_calculation("tax_position")
    log_calculation(
        request_id, "tax_position", (time.time() - start_time) * 1000,
        financial_year=result.financial_year,
        is_refund=result.is_refund,
    )

    return TaxPositionSchema.model_validate(result)


@router.get("/tax/years", response_model=TaxYearsResponse)
def tax_years():
    return TaxYearsResponse(financial_years=supported_financial_years())
