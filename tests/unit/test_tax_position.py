"""Unit tests for personal tax position: brackets, Medicare, HECS and property savings"""

import pytest
from propcalc.domain.exceptions import TaxTableNotFoundError
from propcalc.domain.models import FamilyStatus, TaxProfile
from propcalc.domain.tax_position import (
    calculate_base_tax,
    calculate_hecs_repayment,
    calculate_medicare_levy,
    calculate_medicare_levy_surcharge,
    calculate_tax_position,
    estimate_property_savings,
    get_marginal_rate,
    get_tax_table,
    supported_financial_years,
)

FY2026 = get_tax_table(2026)
FY2024 = get_tax_table(2024)


def test_supported_years_most_recent_first():
    assert supported_financial_years() == [2026, 2025, 2024]
    assert get_tax_table(2030) is None


# ---- Base tax ----


@pytest.mark.parametrize(
    "taxable_income,expected",
    [
        (0, 0),
        (-5000, 0),
        (18200, 0),
        (18200.5, 0),
        (45000, 4288),
        (90000, 17788),
        (135000, 31288),
        (200000, 56138),
    ],
)
def test_base_tax_stage_3_brackets(taxable_income: float, expected: float):
    assert calculate_base_tax(taxable_income, FY2026) == pytest.approx(expected)


def test_base_tax_pre_stage_3():
    """Test FY2024 uses the 19% / 32.5% brackets"""
    assert calculate_base_tax(45000, FY2024) == pytest.approx(5092)
    assert calculate_base_tax(120000, FY2024) == pytest.approx(29467)


def test_marginal_rate():
    assert get_marginal_rate(0, FY2026) == 0
    assert get_marginal_rate(100000, FY2026) == 0.30
    assert get_marginal_rate(250000, FY2026) == 0.45
    assert get_marginal_rate(100000, FY2024) == 0.325


# ---- Medicare ----


def test_medicare_levy_low_income_threshold():
    assert calculate_medicare_levy(26000, FY2026) == 0
    assert calculate_medicare_levy(50000, FY2026) == pytest.approx(1000)


def test_surcharge_waived_with_private_health():
    result = calculate_medicare_levy_surcharge(200000, True, FamilyStatus.SINGLE, 0, 0, FY2026)

    assert result.applies is False
    assert result.surcharge == 0


def test_surcharge_single_over_threshold():
    result = calculate_medicare_levy_surcharge(100000, False, FamilyStatus.SINGLE, 0, 0, FY2026)

    assert result.applies is True
    assert result.threshold == 93000
    assert result.surcharge == pytest.approx(1000)


def test_surcharge_single_at_threshold():
    result = calculate_medicare_levy_surcharge(93000, False, FamilyStatus.SINGLE, 0, 0, FY2026)
    assert result.applies is False


def test_couple_tested_on_combined_income():
    result = calculate_medicare_levy_surcharge(100000, False, FamilyStatus.COUPLE, 0, 50000, FY2026)

    assert result.applies is False
    assert result.threshold == 186000
    assert result.combined_income == 150000


def test_family_threshold_rises_after_first_child():
    """Test three children add $3,000 and the rate follows individual income"""
    result = calculate_medicare_levy_surcharge(150000, False, "family", 3, 40000, FY2026)

    assert result.threshold == 189000
    assert result.combined_income == 190000
    assert result.applies is True
    assert result.surcharge == pytest.approx(2250)


# ---- HECS/HELP ----


def test_hecs_repayment():
    assert calculate_hecs_repayment(70000, False, FY2026) == 0
    assert calculate_hecs_repayment(50000, True, FY2026) == 0
    assert calculate_hecs_repayment(70000, True, FY2026) == pytest.approx(1750)
    assert calculate_hecs_repayment(70000, True, FY2024) == pytest.approx(2100)


# ---- Full position ----


def test_rental_loss_reduces_tax():
    """Test a $10k rental loss on a $100k salary"""
    profile = TaxProfile(gross_salary=100000, payg_withheld=25000, has_private_health=True)

    position = calculate_tax_position(profile, 2026, -10000)

    assert position.taxable_income == 90000
    assert position.base_tax == 17788
    assert position.medicare_levy == 1800
    assert position.medicare_levy_surcharge == 0
    assert position.total_tax_liability == 19588
    assert position.refund_or_owing == 5412
    assert position.is_refund is True
    assert position.marginal_rate == 0.30
    assert position.property_savings == 3000
    assert position.total_deductions == 10000


def test_depreciation_turns_profit_into_loss():
    profile = TaxProfile(gross_salary=100000, payg_withheld=25000, depreciation_deductions=8000, has_private_health=True)

    position = calculate_tax_position(profile, 2026, 5000)

    assert position.rental_net_result == 5000
    assert position.taxable_income == 97000
    assert position.property_savings == 900


def test_owing_when_nothing_withheld():
    position = calculate_tax_position(TaxProfile(gross_salary=60000, has_private_health=True), 2026, 0)

    assert position.is_refund is False
    assert position.refund_or_owing < 0
    assert position.property_savings == 0


def test_hecs_uses_salary_plus_rental_result():
    profile = TaxProfile(gross_salary=80000, has_hecs_debt=True, has_private_health=True)

    position = calculate_tax_position(profile, 2026, -10000)

    assert position.hecs_repayment == 1750


def test_taxable_income_never_negative():
    position = calculate_tax_position(TaxProfile(gross_salary=10000), 2026, -50000)

    assert position.taxable_income == 0
    assert position.base_tax == 0


def test_unsupported_year_raises():
    with pytest.raises(TaxTableNotFoundError) as exc_info:
        calculate_tax_position(TaxProfile(), 2019, 0)

    assert exc_info.value.financial_year == 2019


def test_estimate_property_savings():
    assert estimate_property_savings(-10000) == 3700
    assert estimate_property_savings(-10000, 0.30) == 3000
    assert estimate_property_savings(500) == 0
