"""Unit tests for expense benchmarking, rental yield and suburb performance"""

import pytest
from propcalc.domain.benchmarking import (
    benchmark_property,
    benchmark_status,
    calculate_council_rates_benchmark,
    calculate_insurance_benchmark,
    calculate_management_fees_benchmark,
    summarise_portfolio_benchmarks,
)
from propcalc.domain.models import BenchmarkStatus
from propcalc.domain.performance import (
    build_cohort_description,
    calculate_inverted_percentile,
    calculate_percentile,
    calculate_performance_score,
    generate_insights,
    get_percentile_status,
    get_score_label,
    is_underperforming,
)
from propcalc.domain.rental_yield import calculate_gross_yield, calculate_net_yield, summarise_portfolio_yields


# ---- Expense benchmarks ----


def test_insurance_benchmark_nsw():
    """Test $2,500 insurance on a $500k NSW property is well above the $900 average"""
    result = calculate_insurance_benchmark(2500, 500000, "NSW")

    assert result.average_amount == 900
    assert result.status == BenchmarkStatus.ABOVE
    assert result.potential_savings == 1600


def test_exactly_fifteen_percent_over_is_average():
    assert benchmark_status(1150, 1000) == BenchmarkStatus.AVERAGE
    assert benchmark_status(1150.01, 1000) == BenchmarkStatus.ABOVE
    assert benchmark_status(999.99, 1000) == BenchmarkStatus.BELOW
    assert benchmark_status(1000, 1000) == BenchmarkStatus.AVERAGE


def test_boundary_on_state_average():
    """Test 1.15x the VIC council rates average (2300) is not flagged"""
    result = calculate_council_rates_benchmark(2300, "VIC")

    assert result.status == BenchmarkStatus.AVERAGE
    assert result.potential_savings == 0


@pytest.mark.parametrize("amount,value", [(0, 500000), (2500, 0), (None, 500000), (-10, 500000)])
def test_insurance_benchmark_nothing_to_compare(amount, value):
    assert calculate_insurance_benchmark(amount, value, "NSW") is None


def test_unknown_state_uses_national_average():
    result = calculate_council_rates_benchmark(1000, "XX")
    assert result.average_amount == 1950
    assert result.status == BenchmarkStatus.BELOW

    assert calculate_insurance_benchmark(1000, 100000, None).average_amount == 185


def test_management_fees_compare_percentage_of_rent():
    """Test 10% of rent against the 7% average, savings reported in dollars"""
    result = calculate_management_fees_benchmark(3000, 30000)

    assert result.user_amount == 10
    assert result.average_amount == 7
    assert result.status == BenchmarkStatus.ABOVE
    assert result.potential_savings == 900


def test_management_fees_compare_unrounded_rate():
    """Test 8.054% is above the 8.05% line even though it displays as 8.05"""
    result = calculate_management_fees_benchmark(805.4, 10_000)

    assert result.user_amount == 8.05
    assert result.status == BenchmarkStatus.ABOVE
    assert result.potential_savings == 105.4


def test_management_fees_exactly_at_threshold_is_average():
    result = calculate_management_fees_benchmark(805, 10_000)

    assert result.user_amount == 8.05
    assert result.status == BenchmarkStatus.AVERAGE
    assert result.potential_savings == 0


def test_management_fees_without_rent():
    assert calculate_management_fees_benchmark(3000, 0) is None


def test_portfolio_summary():
    high = benchmark_property("p1", "NSW", 500000, 2500, 1000, 3000, 30000)
    low = benchmark_property("p2", "QLD", 400000, 500, 0, 0, 0)

    assert high.total_potential_savings == 2500
    assert low.council_rates is None
    assert low.management_fees is None

    summary = summarise_portfolio_benchmarks([high, low])
    assert summary.total_potential_savings == 2500
    assert summary.insurance_savings == 1600
    assert summary.management_fees_savings == 900
    assert summary.properties_with_savings == 1
    assert summary.total_properties == 2


# ---- Rental yield ----


def test_gross_and_net_yield():
    assert calculate_gross_yield(26000, 520000) == pytest.approx(5)
    assert calculate_net_yield(26000, 5200, 520000) == pytest.approx(4)


@pytest.mark.parametrize("rent", [0, 100, 26000, 1_000_000])
def test_gross_yield_never_negative(rent: float):
    assert calculate_gross_yield(rent, 500000) >= 0
    assert calculate_gross_yield(rent, 0) == 0


def test_net_yield_can_be_negative():
    assert calculate_net_yield(10000, 20000, 500000) == pytest.approx(-2)
    assert calculate_net_yield(10000, 20000, 0) == 0


def test_portfolio_yields():
    summary = summarise_portfolio_yields([(26000, 5200, 520000), (30000, 0, 500000)])
    assert summary == {"average_gross_yield": 5.5, "average_net_yield": 5}
    assert summarise_portfolio_yields([]) == {"average_gross_yield": 0.0, "average_net_yield": 0.0}


# ---- Suburb performance ----


def test_percentile_bands():
    assert calculate_percentile(6.0, 5.0) == 90
    assert calculate_percentile(5.0, 5.0) == 55
    assert calculate_percentile(3.0, 5.0) == 10
    assert calculate_percentile(5.0, 0) == 50


def test_inverted_percentile_rewards_lower_values():
    assert calculate_inverted_percentile(20, 30) == 90
    assert calculate_inverted_percentile(40, 30) == 10


def test_performance_score_renormalises_missing_metrics():
    assert calculate_performance_score(90, None, None, None) == 90
    assert calculate_performance_score(90, 10, None, None) == 56
    assert calculate_performance_score(None, None, None, None) == 50


def test_labels():
    assert get_score_label(85) == "Excellent"
    assert get_score_label(45) == "Average"
    assert get_percentile_status(10) == "poor"
    assert get_percentile_status(65) == "good"


def test_insights_for_low_yield_and_high_vacancy():
    insights = generate_insights(
        user_yield=3.2,
        median_yield=4.0,
        user_expense_ratio=None,
        median_expense_ratio=None,
        user_vacancy_weeks=6,
        suburb_vacancy_rate=2.0,
    )

    assert [i.type for i in insights] == ["yield", "vacancy"]
    assert insights[0].message.startswith("Rent is 20% below market")
    assert insights[1].severity == "critical"


def test_underperforming_on_any_critical_metric():
    assert is_underperforming(10, 90, 90) is True
    assert is_underperforming(55, None, 40) is False


def test_cohort_description():
    assert build_cohort_description(3, "house", "Richmond", "VIC") == "3-bed houses in Richmond VIC"
    assert build_cohort_description(None, "unit", "Manly", "NSW") == "units in Manly NSW"
