"""Unit tests for depreciation calculations"""

import pytest
from datetime import date
from propcalc.domain.depreciation import (
    calculate_capital_works_deduction,
    calculate_diminishing_value,
    calculate_low_value_pool_deduction,
    calculate_prime_cost,
    calculate_remaining_value,
    calculate_yearly_deduction,
    days_in_first_fy,
    generate_multi_year_schedule,
    project_schedule,
    validate_and_recalculate,
)
from propcalc.domain.models import (
    AssetCategory,
    DepreciationMethod,
    ExtractedAsset,
    PoolType,
    ProjectionAsset,
    ProjectionCapitalWork,
)


@pytest.mark.parametrize("cost,life", [(10000, 10), (2400, 8), (1500, 5), (60000, 40)])
def test_diminishing_value_is_double_prime_cost(cost: float, life: float):
    prime = calculate_yearly_deduction(cost, life, DepreciationMethod.PRIME_COST)
    diminishing = calculate_yearly_deduction(cost, life, DepreciationMethod.DIMINISHING_VALUE)
    assert diminishing == 2 * prime


@pytest.mark.parametrize("cost,life", [(0, 10), (-500, 10), (1000, 0), (1000, -2)])
@pytest.mark.parametrize("method", list(DepreciationMethod))
def test_non_positive_inputs_give_zero(cost: float, life: float, method: DepreciationMethod):
    assert calculate_yearly_deduction(cost, life, method) == 0


def test_yearly_deduction_rounds_half_up():
    """Test 1000 / 3 is rounded to cents"""
    assert calculate_yearly_deduction(1000, 3, "prime_cost") == 333.33
    assert calculate_yearly_deduction(1000, 3, "diminishing_value") == 666.67


def test_yearly_deduction_pro_rata():
    assert calculate_yearly_deduction(10000, 10, DepreciationMethod.PRIME_COST, pro_rata_factor=0.5) == 500


def test_remaining_value():
    assert calculate_remaining_value(10000, 10, DepreciationMethod.PRIME_COST, 3) == 7000
    assert calculate_remaining_value(10000, 10, DepreciationMethod.DIMINISHING_VALUE, 2) == 6400
    assert calculate_remaining_value(10000, 10, DepreciationMethod.PRIME_COST, 0) == 10000
    assert calculate_remaining_value(10000, 10, DepreciationMethod.PRIME_COST, 15) == 0


def test_prime_cost_schedule_runs_to_zero():
    schedule = generate_multi_year_schedule(10000, 5, DepreciationMethod.PRIME_COST)

    assert len(schedule) == 5
    assert [row.deduction for row in schedule] == [2000] * 5
    assert schedule[0].opening_value == 10000
    assert schedule[-1].closing_value == 0


def test_diminishing_value_schedule_declines():
    schedule = generate_multi_year_schedule(10000, 10, DepreciationMethod.DIMINISHING_VALUE, max_years=3)

    assert [row.deduction for row in schedule] == [2000, 1600, 1280]
    assert schedule[2].closing_value == 5120
    assert schedule[1].opening_value == schedule[0].closing_value


def test_schedule_capped_at_forty_years():
    schedule = generate_multi_year_schedule(100000, 50, DepreciationMethod.PRIME_COST)
    assert len(schedule) == 40


def test_schedule_empty_for_invalid_cost():
    assert generate_multi_year_schedule(0, 10, DepreciationMethod.PRIME_COST) == []


def test_validate_flags_discrepancy_over_ten_percent():
    assets = [
        ExtractedAsset("Carpet", AssetCategory.PLANT_EQUIPMENT, 8000, 8, DepreciationMethod.DIMINISHING_VALUE, 2000),
        ExtractedAsset("Oven", AssetCategory.PLANT_EQUIPMENT, 3000, 12, DepreciationMethod.PRIME_COST, 300),
    ]

    carpet, oven = validate_and_recalculate(assets)

    assert carpet.yearly_deduction == 2000
    assert carpet.discrepancy is False
    assert oven.yearly_deduction == 250
    assert oven.discrepancy is True


def test_validate_forces_capital_works_to_forty_year_prime_cost():
    """Test building works are recalculated at 2.5% regardless of the supplied method"""
    assets = [
        ExtractedAsset("Building", AssetCategory.CAPITAL_WORKS, 400000, 25, DepreciationMethod.DIMINISHING_VALUE, 32000),
    ]

    [building] = validate_and_recalculate(assets)

    assert building.method == DepreciationMethod.PRIME_COST
    assert building.effective_life == 40
    assert building.yearly_deduction == 10000
    assert building.discrepancy is True


def test_days_in_first_fy():
    assert days_in_first_fy(date(2024, 7, 1)) == 365
    assert days_in_first_fy(date(2025, 6, 30)) == 1
    assert days_in_first_fy(date(2024, 1, 1)) == 182


def test_first_year_is_pro_rated_by_days_held():
    days = days_in_first_fy(date(2025, 1, 1))  # 181 days to 30 June

    assert calculate_prime_cost(3650, 10, 0, days) == 181
    assert calculate_diminishing_value(3650, 10, 0, days) == 362


def test_diminishing_value_later_years_use_written_down_value():
    """Test year 1 applies the rate to cost less the year 0 deduction"""
    assert calculate_diminishing_value(10000, 10, 0, 365) == 2000
    assert calculate_diminishing_value(10000, 10, 1, 365) == 1600


def test_prime_cost_stops_at_cost():
    deductions = [calculate_prime_cost(1000, 2, year, 365) for year in range(4)]
    assert deductions == [500, 500, 0, 0]


def test_low_value_pool_rates():
    assert calculate_low_value_pool_deduction(0, 800) == 300
    assert calculate_low_value_pool_deduction(1000, 0) == 187.5


def test_capital_works_deduction_window():
    construction = date(2010, 3, 1)  # FY2010
    claim_start = date(2024, 7, 1)  # FY2025

    assert calculate_capital_works_deduction(400000, construction, claim_start, 2024) == 0
    assert calculate_capital_works_deduction(400000, construction, claim_start, 2025) == 10000
    assert calculate_capital_works_deduction(400000, construction, claim_start, 2049) == 10000
    assert calculate_capital_works_deduction(400000, construction, claim_start, 2050) == 0


def test_project_schedule_totals():
    assets = [
        ProjectionAsset("a1", 500, 5, DepreciationMethod.PRIME_COST, date(2024, 7, 1), PoolType.IMMEDIATE_WRITEOFF),
        ProjectionAsset("a2", 800, 5, DepreciationMethod.PRIME_COST, date(2024, 7, 1), PoolType.LOW_VALUE),
        ProjectionAsset("a3", 10000, 10, DepreciationMethod.DIMINISHING_VALUE, date(2024, 7, 1)),
    ]
    works = [ProjectionCapitalWork("w1", 200000, date(2024, 7, 1), date(2024, 7, 1))]

    rows = project_schedule(assets, works, 2025, 2026)

    first, second = rows
    assert first.financial_year == 2025
    assert first.div40_total == 2500
    assert first.low_value_pool_total == 300
    assert first.div43_total == 5000
    assert first.grand_total == 7800

    assert second.div40_total == 1600
    assert second.low_value_pool_total == 93.75
    assert second.div43_total == 5000


def test_project_schedule_empty_range():
    assert project_schedule([], [], 2026, 2025) == []
