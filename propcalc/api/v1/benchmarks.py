"""POST /v1/benchmarks/* - expense and suburb performance benchmarking"""

import time
from fastapi import APIRouter, Request

from propcalc.api.v1.schemas import (
    PerformanceRequest,
    PerformanceResponse,
    PortfolioBenchmarkRequest,
    PortfolioBenchmarkResponse,
    PropertyBenchmarkRequest,
    PropertyBenchmarkResponse,
)
from propcalc.api.dependencies import get_request_id
from propcalc.domain.benchmarking import benchmark_property, summarise_portfolio_benchmarks
from propcalc.domain.models import PropertyBenchmark
from propcalc.domain.performance import (
    build_cohort_description,
    calculate_inverted_percentile,
    calculate_percentile,
    calculate_performance_score,
    generate_insights,
    get_score_label,
    is_underperforming,
)
from propcalc.infrastructure.observability.metrics import record_benchmark, record_calculation
from propcalc.infrastructure.observability.logging import log_calculation

router = APIRouter()

WEEKS_PER_YEAR = 52


def _benchmark(item: PropertyBenchmarkRequest) -> PropertyBenchmark:
    result = benchmark_property(
        property_id=item.property_id,
        state=item.state,
        property_value=item.property_value,
        insurance_total=item.insurance_total,
        council_rates_total=item.council_rates_total,
        management_fees_total=item.management_fees_total,
        rental_income_total=item.rental_income_total,
    )
    for category in ("insurance", "council_rates", "management_fees"):
        category_result = getattr(result, category)
        if category_result is not None:
            record_benchmark(category, category_result.status.value)
    return result


@router.post("/benchmarks/property", response_model=PropertyBenchmarkResponse)
def property_benchmark(request_body: PropertyBenchmarkRequest, request: Request):
    """Compare a property's insurance, council rates and management fees to state averages"""
    start_time = time.time()

    result = _benchmark(request_body)

    record_calculation("benchmark_property")
    log_calculation(
        get_request_id(request), "benchmark_property", (time.time() - start_time) * 1000,
        property_id=result.property_id,
        total_potential_savings=result.total_potential_savings,
    )
    return PropertyBenchmarkResponse.model_validate(result)


@router.post("/benchmarks/portfolio", response_model=PortfolioBenchmarkResponse)
def portfolio_benchmark(request_body: PortfolioBenchmarkRequest, request: Request):
    start_time = time.time()

    summary = summarise_portfolio_benchmarks(_benchmark(item) for item in request_body.properties)

    record_calculation("benchmark_portfolio")
    log_calculation(
        get_request_id(request), "benchmark_portfolio", (time.time() - start_time) * 1000,
        total_properties=summary.total_properties,
        total_potential_savings=summary.total_potential_savings,
    )
    return PortfolioBenchmarkResponse.model_validate(summary)


@router.post("/benchmarks/performance", response_model=PerformanceResponse)
def performance(request_body: PerformanceRequest, request: Request):
    """
    Score a property against its suburb cohort.

    Expense ratio and vacancy are inverted: lower than the median ranks higher.
    Vacancy weeks are compared with the suburb vacancy rate expressed in weeks.
    """
    start_time = time.time()
    body = request_body

    yield_percentile = None
    if body.user_yield is not None and body.median_yield is not None:
        yield_percentile = calculate_percentile(body.user_yield, body.median_yield)

    growth_percentile = None
    if body.user_growth is not None and body.median_growth is not None:
        growth_percentile = calculate_percentile(body.user_growth, body.median_growth)

    expense_percentile = None
    if body.user_expense_ratio is not None and body.median_expense_ratio is not None:
        expense_percentile = calculate_inverted_percentile(body.user_expense_ratio, body.median_expense_ratio)

    vacancy_percentile = None
    if body.user_vacancy_weeks is not None and body.suburb_vacancy_rate is not None:
        expected_weeks = body.suburb_vacancy_rate * WEEKS_PER_YEAR / 100
        vacancy_percentile = calculate_inverted_percentile(body.user_vacancy_weeks, expected_weeks)

    score = calculate_performance_score(yield_percentile, growth_percentile, expense_percentile, vacancy_percentile)
    insights = generate_insights(
        body.user_yield,
        body.median_yield,
        body.user_expense_ratio,
        body.median_expense_ratio,
        body.user_vacancy_weeks,
        body.suburb_vacancy_rate,
    )
    underperforming = is_underperforming(yield_percentile, expense_percentile, vacancy_percentile)

    record_calculation("benchmark_performance")
    log_calculation(
        get_request_id(request), "benchmark_performance", (time.time() - start_time) * 1000,
        score=score,
        underperforming=underperforming,
    )

    return PerformanceResponse(
        cohort=build_cohort_description(body.bedrooms, body.property_type, body.suburb, body.state),
        yield_percentile=yield_percentile,
        growth_percentile=growth_percentile,
        expense_percentile=expense_percentile,
        vacancy_percentile=vacancy_percentile,
        score=score,
        score_label=get_score_label(score),
        is_underperforming=underperforming,
        insights=insights,
    )
