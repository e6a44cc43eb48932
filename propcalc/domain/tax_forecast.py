"""
Tax forecast projector - full financial year totals from partial-year actuals.

Each category is projected by filling the months still to come with the same
months from the prior financial year. Without prior-year data the actuals are
annualised in a straight line.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from propcalc.domain.categories import DEDUCTIBLE_CATEGORIES, INCOME_CATEGORIES
from propcalc.domain.models import (
    CategoryForecast,
    CategoryForecastLine,
    Confidence,
    ForecastPair,
    ForecastTransaction,
    MonthlyTotals,
    PropertyForecast,
    PropertyRef,
    TaxForecastResult,
    TaxPositionPair,
    TaxProfile,
)
from propcalc.domain.tax_position import calculate_tax_position, get_tax_table
from propcalc.utils.date_utils import FY_MONTH_ORDER, financial_year_range, months_elapsed_in_fy

HIGH_CONFIDENCE_MONTHS = 9
MEDIUM_CONFIDENCE_MONTHS = 4


def compute_category_forecast(
    current_months: MonthlyTotals,
    prior_months: MonthlyTotals,
    months_elapsed: int,
) -> CategoryForecast:
    """
    Project one category to the end of the financial year.

    Requirements:
    - actual is the sum of current-year monthly totals
    - remaining months are the FY months (July first) not yet elapsed
    - with prior-year data: actual + prior-year totals for the remaining months
    - without: actual / months_elapsed * 12, or 0 when nothing has elapsed
    """
    actual = sum(current_months.values())
    months_elapsed = min(12, max(0, months_elapsed))
    remaining_months = FY_MONTH_ORDER[months_elapsed:]

    if not remaining_months:
        return CategoryForecast(actual=actual, forecast=actual)

    if prior_months:
        fill_in = sum(prior_months.get(month, 0) for month in remaining_months)
        return CategoryForecast(actual=actual, forecast=actual + fill_in)

    if months_elapsed == 0:
        return CategoryForecast(actual=actual, forecast=0.0)

    return CategoryForecast(actual=actual, forecast=actual / months_elapsed * 12)


def compute_confidence(months_elapsed: int, has_prior_year: bool) -> Confidence:
    """High with 9+ months or a prior year to lean on; medium from 4 months"""
    if months_elapsed >= HIGH_CONFIDENCE_MONTHS or has_prior_year:
        return Confidence.HIGH
    if months_elapsed >= MEDIUM_CONFIDENCE_MONTHS:
        return Confidence.MEDIUM
    return Confidence.LOW


def group_by_month(
    transactions: Iterable[ForecastTransaction],
    property_id: str,
    category: str,
) -> MonthlyTotals:
    """Absolute amounts summed by calendar month for one property and category"""
    totals: Dict[int, float] = defaultdict(float)
    for txn in transactions:
        if txn.property_id != property_id or txn.category != category:
            continue
        totals[txn.date.month] += abs(txn.amount)
    return dict(totals)


def _in_financial_year(transactions: Iterable[ForecastTransaction], financial_year: int) -> List[ForecastTransaction]:
    start, end = financial_year_range(financial_year)
    return [t for t in transactions if start <= t.date <= end]


def build_tax_forecast(
    properties: Iterable[PropertyRef],
    transactions: Iterable[ForecastTransaction],
    financial_year: int,
    today: Optional[date] = None,
    tax_profile: Optional[TaxProfile] = None,
) -> TaxForecastResult:
    """
    Forecast rental income and deductions per property and for the portfolio.

    transactions may span both the current and prior financial year; they are
    split by date. Categories with neither actuals nor a forecast are omitted.
    With a tax_profile, and tax tables for the year, the net rental result is
    also run through the personal tax position for both actual and forecast.
    """
    transactions = list(transactions)
    months_elapsed = months_elapsed_in_fy(financial_year, today)
    current_txns = _in_financial_year(transactions, financial_year)
    prior_txns = _in_financial_year(transactions, financial_year - 1)
    has_prior_year = bool(prior_txns)

    income_values = {c.value for c in INCOME_CATEGORIES}
    property_forecasts = []

    for prop in properties:
        lines: List[CategoryForecastLine] = []

        for category in INCOME_CATEGORIES + DEDUCTIBLE_CATEGORIES:
            current_months = group_by_month(current_txns, prop.id, category.value)
            prior_months = group_by_month(prior_txns, prop.id, category.value)
            result = compute_category_forecast(current_months, prior_months, months_elapsed)

            if result.actual == 0 and result.forecast == 0:
                continue

            lines.append(CategoryForecastLine(
                category=category.value,
                label=category.label,
                ato_code=category.ato_reference,
                actual=result.actual,
                forecast=result.forecast,
                confidence=compute_confidence(months_elapsed, bool(prior_months)),
            ))

        income = ForecastPair(
            actual=sum(line.actual for line in lines if line.category in income_values),
            forecast=sum(line.forecast for line in lines if line.category in income_values),
        )
        deductions = ForecastPair(
            actual=sum(line.actual for line in lines if line.category not in income_values),
            forecast=sum(line.forecast for line in lines if line.category not in income_values),
        )

        property_forecasts.append(PropertyForecast(
            property_id=prop.id,
            address=prop.address,
            categories=lines,
            total_income=income,
            total_deductions=deductions,
            net_result=ForecastPair(
                actual=income.actual - deductions.actual,
                forecast=income.forecast - deductions.forecast,
            ),
        ))

    total_income = ForecastPair(
        actual=sum(p.total_income.actual for p in property_forecasts),
        forecast=sum(p.total_income.forecast for p in property_forecasts),
    )
    total_deductions = ForecastPair(
        actual=sum(p.total_deductions.actual for p in property_forecasts),
        forecast=sum(p.total_deductions.forecast for p in property_forecasts),
    )
    net_rental_result = ForecastPair(
        actual=total_income.actual - total_deductions.actual,
        forecast=total_income.forecast - total_deductions.forecast,
    )

    tax_position = None
    if tax_profile is not None and get_tax_table(financial_year) is not None:
        tax_position = TaxPositionPair(
            actual=calculate_tax_position(tax_profile, financial_year, net_rental_result.actual),
            forecast=calculate_tax_position(tax_profile, financial_year, net_rental_result.forecast),
        )

    return TaxForecastResult(
        financial_year=financial_year,
        months_elapsed=months_elapsed,
        properties=property_forecasts,
        total_income=total_income,
        total_deductions=total_deductions,
        net_rental_result=net_rental_result,
        confidence=compute_confidence(months_elapsed, has_prior_year),
        tax_position=tax_position,
    )
