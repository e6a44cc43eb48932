"""Cost benchmarking against state-level reference averages"""

from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Optional

from propcalc.domain.models import (
    BenchmarkStatus,
    CategoryBenchmark,
    PortfolioBenchmarkSummary,
    PropertyBenchmark,
)
from propcalc.utils.date_utils import round_money

NATIONAL = "NATIONAL"

# Spend more than 15% over the average counts as "above"
ABOVE_AVERAGE_THRESHOLD = Decimal("1.15")

# Annual landlord insurance premium per $100,000 of property value
INSURANCE_PER_100K = MappingProxyType({
    "NSW": 180,
    "VIC": 165,
    "QLD": 230,
    "SA": 150,
    "WA": 170,
    "TAS": 145,
    "NT": 290,
    "ACT": 155,
    NATIONAL: 185,
})

# Average annual council rates per dwelling
COUNCIL_RATES_AVERAGE = MappingProxyType({
    "NSW": 1800,
    "VIC": 2000,
    "QLD": 2300,
    "SA": 1650,
    "WA": 1950,
    "TAS": 1600,
    "NT": 1550,
    "ACT": 2800,
    NATIONAL: 1950,
})

# Property management fee as a percentage of rent collected
MANAGEMENT_FEE_AVERAGE_PERCENT = 7.0


def _lookup(table, state: Optional[str]) -> float:
    return table.get((state or "").upper(), table[NATIONAL])


def benchmark_status(user_amount: float, average_amount: float) -> BenchmarkStatus:
    """Exactly 1.15x the average resolves to AVERAGE, not ABOVE"""
    user = Decimal(str(user_amount))
    average = Decimal(str(average_amount))

    if user > average * ABOVE_AVERAGE_THRESHOLD:
        return BenchmarkStatus.ABOVE
    if user < average:
        return BenchmarkStatus.BELOW
    return BenchmarkStatus.AVERAGE


def _build(
    user_amount: float,
    average_amount: float,
    savings_if_above: float,
    compared_amount=None,
) -> CategoryBenchmark:
    # compared_amount is the unrounded figure when user_amount is rounded for display
    status = benchmark_status(user_amount if compared_amount is None else compared_amount, average_amount)
    potential_savings = round_money(max(0.0, savings_if_above)) if status == BenchmarkStatus.ABOVE else 0.0
    return CategoryBenchmark(
        user_amount=user_amount,
        average_amount=average_amount,
        status=status,
        potential_savings=potential_savings,
    )


def calculate_insurance_benchmark(
    insurance_amount: float,
    property_value: float,
    state: Optional[str],
) -> Optional[CategoryBenchmark]:
    """Compare annual insurance spend with the state rate scaled to property value"""
    if not insurance_amount or insurance_amount <= 0 or not property_value or property_value <= 0:
        return None

    average = round_money(property_value / 100_000 * _lookup(INSURANCE_PER_100K, state))
    return _build(insurance_amount, average, insurance_amount - average)


def calculate_council_rates_benchmark(rates_amount: float, state: Optional[str]) -> Optional[CategoryBenchmark]:
    if not rates_amount or rates_amount <= 0:
        return None

    average = float(_lookup(COUNCIL_RATES_AVERAGE, state))
    return _build(rates_amount, average, rates_amount - average)


def calculate_management_fees_benchmark(
    management_fees: float,
    rental_income: float,
) -> Optional[CategoryBenchmark]:
    """
    Compare fees as a percentage of rent.

    user_amount and average_amount are percentages; potential_savings is in
    dollars, the fees paid above the average rate on the same rent.
    """
    if not management_fees or management_fees <= 0 or not rental_income or rental_income <= 0:
        return None

    fee_percent = Decimal(str(management_fees)) / Decimal(str(rental_income)) * 100
    savings = management_fees - rental_income * MANAGEMENT_FEE_AVERAGE_PERCENT / 100
    return _build(round_money(fee_percent), MANAGEMENT_FEE_AVERAGE_PERCENT, savings, fee_percent)


def benchmark_property(
    property_id: str,
    state: Optional[str],
    property_value: float,
    insurance_total: float,
    council_rates_total: float,
    management_fees_total: float,
    rental_income_total: float,
) -> PropertyBenchmark:
    """Run all three comparators over a property's last 12 months of spend"""
    insurance = calculate_insurance_benchmark(insurance_total, property_value, state)
    council_rates = calculate_council_rates_benchmark(council_rates_total, state)
    management_fees = calculate_management_fees_benchmark(management_fees_total, rental_income_total)

    total = sum(b.potential_savings for b in (insurance, council_rates, management_fees) if b is not None)

    return PropertyBenchmark(
        property_id=property_id,
        insurance=insurance,
        council_rates=council_rates,
        management_fees=management_fees,
        total_potential_savings=round_money(total),
    )


def summarise_portfolio_benchmarks(benchmarks: Iterable[PropertyBenchmark]) -> PortfolioBenchmarkSummary:
    benchmarks = list(benchmarks)

    def savings(attr: str) -> float:
        return round_money(sum(
            getattr(b, attr).potential_savings for b in benchmarks if getattr(b, attr) is not None
        ))

    insurance_savings = savings("insurance")
    council_rates_savings = savings("council_rates")
    management_fees_savings = savings("management_fees")

    return PortfolioBenchmarkSummary(
        total_potential_savings=round_money(insurance_savings + council_rates_savings + management_fees_savings),
        insurance_savings=insurance_savings,
        council_rates_savings=council_rates_savings,
        management_fees_savings=management_fees_savings,
        properties_with_savings=sum(1 for b in benchmarks if b.total_potential_savings > 0),
        total_properties=len(benchmarks),
    )
