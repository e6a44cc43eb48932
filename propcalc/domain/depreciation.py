"""
Depreciation engine - ATO rules for residential investment property.

Covers:
- Div 40 plant & equipment: prime cost and diminishing value (200% rate)
- Div 43 capital works: 2.5% per year for 40 years
- Low-value pool: 37.5% in the year of addition, 18.75% of the opening balance after

All functions are stateless. The single yearly-deduction formula here backs both
the instant preview endpoint and schedule validation, so the two cannot drift.
"""

from datetime import date
from typing import Iterable, List, Optional

from propcalc.domain.models import (
    AssetCategory,
    DepreciationMethod,
    DepreciationYear,
    ExtractedAsset,
    PoolType,
    ProjectionAsset,
    ProjectionCapitalWork,
    ProjectionRow,
    ValidatedAsset,
)
from propcalc.utils.date_utils import financial_year_for, round_money

MAX_SCHEDULE_YEARS = 40
CAPITAL_WORKS_RATE = 0.025
CAPITAL_WORKS_LIFE_YEARS = 40
LOW_VALUE_POOL_ADDITION_RATE = 0.375
LOW_VALUE_POOL_OPENING_RATE = 0.1875
DISCREPANCY_TOLERANCE = 0.10  # 10% of the recalculated deduction
DAYS_IN_YEAR = 365


def calculate_yearly_deduction(
    original_cost: float,
    effective_life: float,
    method: DepreciationMethod | str,
    pro_rata_factor: float = 1.0,
) -> float:
    """
    Yearly deduction using the ATO formulas.

    Prime cost: cost / effective life
    Diminishing value: (cost * 2) / effective life

    Returns 0 for non-positive cost or life so callers can preview while the
    user is still typing.
    """
    if original_cost <= 0 or effective_life <= 0:
        return 0.0

    if DepreciationMethod(method) == DepreciationMethod.PRIME_COST:
        deduction = original_cost / effective_life
    else:
        deduction = (original_cost * 2) / effective_life

    return round_money(deduction * pro_rata_factor)


def calculate_remaining_value(
    original_cost: float,
    effective_life: float,
    method: DepreciationMethod | str,
    years_elapsed: int,
) -> float:
    """Book value after a number of full years of depreciation"""
    if original_cost <= 0 or effective_life <= 0:
        return 0.0
    if years_elapsed <= 0:
        return original_cost

    if DepreciationMethod(method) == DepreciationMethod.PRIME_COST:
        annual = original_cost / effective_life
        return max(0.0, round_money(original_cost - annual * years_elapsed))

    rate = 2 / effective_life
    value = original_cost
    for _ in range(years_elapsed):
        value = value * (1 - rate)
        if value < 0.01:
            return 0.0
    return round_money(value)


def generate_multi_year_schedule(
    original_cost: float,
    effective_life: float,
    method: DepreciationMethod | str,
    max_years: Optional[int] = None,
) -> List[DepreciationYear]:
    """
    Opening value, deduction and closing value per year.

    Defaults to the effective life, capped at 40 years. Diminishing value
    applies the 200% rate to the opening written-down value each year.
    """
    if original_cost <= 0 or effective_life <= 0:
        return []

    method = DepreciationMethod(method)
    years = min(max_years if max_years is not None else int(effective_life), MAX_SCHEDULE_YEARS)
    entries: List[DepreciationYear] = []
    opening_value = original_cost

    for year in range(1, years + 1):
        if opening_value <= 0:
            break

        if method == DepreciationMethod.PRIME_COST:
            deduction = original_cost / effective_life
        else:
            deduction = opening_value * (2 / effective_life)

        deduction = round_money(min(deduction, opening_value))
        closing_value = max(0.0, round_money(opening_value - deduction))

        entries.append(DepreciationYear(
            year=year,
            opening_value=round_money(opening_value),
            deduction=deduction,
            closing_value=closing_value,
        ))
        opening_value = closing_value

    return entries


def validate_and_recalculate(assets: Iterable[ExtractedAsset]) -> List[ValidatedAsset]:
    """
    Recompute deductions for extracted schedule lines and flag discrepancies.

    Capital works are forced to prime cost over 40 years (Div 43). A line is
    flagged when the supplied deduction differs from ours by more than 10%.
    """
    validated = []
    for asset in assets:
        method = DepreciationMethod(asset.method)
        effective_life = asset.effective_life

        if AssetCategory(asset.category) == AssetCategory.CAPITAL_WORKS:
            method = DepreciationMethod.PRIME_COST
            effective_life = CAPITAL_WORKS_LIFE_YEARS

        calculated = calculate_yearly_deduction(asset.original_cost, effective_life, method)
        discrepancy = abs(calculated - asset.yearly_deduction) > calculated * DISCREPANCY_TOLERANCE

        validated.append(ValidatedAsset(
            asset_name=asset.asset_name,
            category=AssetCategory(asset.category),
            original_cost=asset.original_cost,
            effective_life=effective_life,
            method=method,
            yearly_deduction=calculated,
            discrepancy=discrepancy,
        ))
    return validated


# ---- Projection across financial years ----


def days_in_first_fy(purchase_date: date) -> int:
    """Days from purchase to 30 June of that FY, inclusive, minimum 1"""
    fy_end = date(financial_year_for(purchase_date), 6, 30)
    return max((fy_end - purchase_date).days + 1, 1)


def calculate_diminishing_value(cost: float, effective_life: float, year_index: int, days_first_year: int) -> float:
    """
    Diminishing value deduction for a given year since purchase.

    Year 0 is pro-rated by days held / 365. Residuals under $1 count as fully
    depreciated.
    """
    rate = 2 / effective_life
    wdv = cost

    for y in range(year_index + 1):
        if wdv < 1:
            return 0.0

        if y == 0:
            year_deduction = wdv * rate * (days_first_year / DAYS_IN_YEAR)
        else:
            year_deduction = wdv * rate

        rounded = round_money(year_deduction)
        if y == year_index:
            return rounded
        wdv = round_money(wdv - rounded)

    return 0.0


def calculate_prime_cost(cost: float, effective_life: float, year_index: int, days_first_year: int) -> float:
    """
    Prime cost deduction for a given year since purchase.

    Year 0 is pro-rated; later years are flat and never exceed the remaining value.
    """
    annual = cost / effective_life
    total_deducted = 0.0

    for y in range(year_index + 1):
        remaining = round_money(cost - total_deducted)
        if remaining <= 0.01:
            return 0.0

        if y == 0:
            year_deduction = annual * (days_first_year / DAYS_IN_YEAR)
        else:
            year_deduction = min(annual, remaining)

        rounded = round_money(year_deduction)
        if y == year_index:
            return min(rounded, remaining)
        total_deducted += rounded

    return 0.0


def calculate_low_value_pool_deduction(opening_balance: float, additions: float) -> float:
    return round_money(
        opening_balance * LOW_VALUE_POOL_OPENING_RATE + additions * LOW_VALUE_POOL_ADDITION_RATE
    )


def calculate_capital_works_deduction(
    construction_cost: float,
    construction_date: date,
    claim_start_date: date,
    financial_year: int,
) -> float:
    """
    Div 43 deduction for one financial year.

    Zero before the claim start FY and from 40 years after the construction FY.
    The first claim year is pro-rated from the claim start date.
    """
    construction_fy = financial_year_for(construction_date)
    claim_start_fy = financial_year_for(claim_start_date)

    if financial_year < claim_start_fy:
        return 0.0
    if financial_year - construction_fy >= CAPITAL_WORKS_LIFE_YEARS:
        return 0.0

    annual = round_money(construction_cost * CAPITAL_WORKS_RATE)
    if financial_year == claim_start_fy:
        return round_money(annual * (days_in_first_fy(claim_start_date) / DAYS_IN_YEAR))
    return annual


def _low_value_pool_deduction_for_year(cost: float, purchase_fy: int, financial_year: int) -> float:
    pool_balance = cost
    for fy in range(purchase_fy, financial_year + 1):
        if pool_balance <= 0.01:
            return 0.0
        rate = LOW_VALUE_POOL_ADDITION_RATE if fy == purchase_fy else LOW_VALUE_POOL_OPENING_RATE
        deduction = round_money(pool_balance * rate)
        if fy == financial_year:
            return deduction
        pool_balance = round_money(pool_balance - deduction)
    return 0.0


def project_schedule(
    assets: Iterable[ProjectionAsset],
    capital_works: Iterable[ProjectionCapitalWork],
    from_fy: int,
    to_fy: int,
) -> List[ProjectionRow]:
    """
    Project deductions across financial years.

    - immediate_writeoff: full cost in the purchase FY
    - low_value: pool rates from the purchase FY onwards
    - individual: diminishing value or prime cost per the asset's method
    """
    if from_fy > to_fy:
        return []

    assets = list(assets)
    capital_works = list(capital_works)
    rows = []

    for fy in range(from_fy, to_fy + 1):
        div40_total = 0.0
        div43_total = 0.0
        low_value_pool_total = 0.0

        for asset in assets:
            purchase_fy = financial_year_for(asset.purchase_date)
            if fy < purchase_fy:
                continue

            pool_type = PoolType(asset.pool_type)
            if pool_type == PoolType.IMMEDIATE_WRITEOFF:
                if fy == purchase_fy:
                    div40_total = round_money(div40_total + asset.cost)
            elif pool_type == PoolType.LOW_VALUE:
                deduction = _low_value_pool_deduction_for_year(asset.cost, purchase_fy, fy)
                low_value_pool_total = round_money(low_value_pool_total + deduction)
            else:
                calculate = (
                    calculate_diminishing_value
                    if DepreciationMethod(asset.method) == DepreciationMethod.DIMINISHING_VALUE
                    else calculate_prime_cost
                )
                deduction = calculate(
                    asset.cost,
                    asset.effective_life,
                    fy - purchase_fy,
                    days_in_first_fy(asset.purchase_date),
                )
                div40_total = round_money(div40_total + deduction)

        for work in capital_works:
            deduction = calculate_capital_works_deduction(
                work.construction_cost,
                work.construction_date,
                work.claim_start_date,
                fy,
            )
            div43_total = round_money(div43_total + deduction)

        rows.append(ProjectionRow(
            financial_year=fy,
            div40_total=div40_total,
            div43_total=div43_total,
            low_value_pool_total=low_value_pool_total,
            grand_total=round_money(div40_total + div43_total + low_value_pool_total),
        ))

    return rows
