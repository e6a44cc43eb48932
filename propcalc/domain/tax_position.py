"""
Personal tax position - marginal tax, Medicare levy and surcharge, HECS/HELP
repayments and the refund or amount owing once a rental result is included.

Tables are keyed by financial year (named by the calendar year it ends).
Rental losses reduce taxable income; property_savings is the tax those losses
save at the salary's marginal rate.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Optional, Tuple

from propcalc.domain.exceptions import TaxTableNotFoundError
from propcalc.domain.models import FamilyStatus, MedicareSurcharge, TaxPosition, TaxProfile
from propcalc.utils.date_utils import round_money

INF = float("inf")

# Fallback marginal rate used when no profile is available
DEFAULT_ESTIMATE_RATE = 0.37


@dataclass(frozen=True)
class TaxBracket:
    min: float
    max: float
    rate: float
    base: float = 0.0


@dataclass(frozen=True)
class TaxTable:
    brackets: Tuple[TaxBracket, ...]
    medicare_levy: float
    medicare_low_income_threshold: float
    mls_single_threshold: float
    mls_family_threshold: float
    mls_child_add: float
    mls_tiers: Tuple[TaxBracket, ...]
    hecs_rates: Tuple[TaxBracket, ...]


def _tiers(*rows) -> Tuple[TaxBracket, ...]:
    return tuple(TaxBracket(low, high, rate) for low, high, rate in rows)


HECS_RATES_2024 = _tiers(
    (0, 51550, 0), (51551, 59518, 0.01), (59519, 63089, 0.02), (63090, 66875, 0.025),
    (66876, 70888, 0.03), (70889, 75140, 0.035), (75141, 79649, 0.04), (79650, 84429, 0.045),
    (84430, 89494, 0.05), (89495, 94865, 0.055), (94866, 100557, 0.06), (100558, 106590, 0.065),
    (106591, 112985, 0.07), (112986, 119764, 0.075), (119765, 126950, 0.08),
    (126951, 134568, 0.085), (134569, 142642, 0.09), (142643, 151200, 0.095), (151201, INF, 0.10),
)

HECS_RATES_2026 = _tiers(
    (0, 54435, 0), (54436, 62850, 0.01), (62851, 66620, 0.02), (66621, 70618, 0.025),
    (70619, 74855, 0.03), (74856, 79346, 0.035), (79347, 84107, 0.04), (84108, 89154, 0.045),
    (89155, 94503, 0.05), (94504, 100174, 0.055), (100175, 106185, 0.06), (106186, 112556, 0.065),
    (112557, 119309, 0.07), (119310, 126467, 0.075), (126468, 134056, 0.08),
    (134057, 142100, 0.085), (142101, 150626, 0.09), (150627, 159663, 0.095), (159664, INF, 0.10),
)

# Stage 3 brackets apply from FY2025
STAGE_3_BRACKETS = (
    TaxBracket(0, 18200, 0, 0),
    TaxBracket(18201, 45000, 0.16, 0),
    TaxBracket(45001, 135000, 0.30, 4288),
    TaxBracket(135001, 190000, 0.37, 31288),
    TaxBracket(190001, INF, 0.45, 51638),
)

MLS_TIERS_2025 = _tiers((0, 93000, 0), (93001, 108000, 0.01), (108001, 144000, 0.0125), (144001, INF, 0.015))

TAX_TABLES = MappingProxyType({
    2026: TaxTable(
        brackets=STAGE_3_BRACKETS,
        medicare_levy=0.02,
        medicare_low_income_threshold=26000,
        mls_single_threshold=93000,
        mls_family_threshold=186000,
        mls_child_add=1500,
        mls_tiers=MLS_TIERS_2025,
        hecs_rates=HECS_RATES_2026,
    ),
    2025: TaxTable(
        brackets=STAGE_3_BRACKETS,
        medicare_levy=0.02,
        medicare_low_income_threshold=24276,
        mls_single_threshold=93000,
        mls_family_threshold=186000,
        mls_child_add=1500,
        mls_tiers=MLS_TIERS_2025,
        hecs_rates=HECS_RATES_2024,
    ),
    2024: TaxTable(
        brackets=(
            TaxBracket(0, 18200, 0, 0),
            TaxBracket(18201, 45000, 0.19, 0),
            TaxBracket(45001, 120000, 0.325, 5092),
            TaxBracket(120001, 180000, 0.37, 29467),
            TaxBracket(180001, INF, 0.45, 51667),
        ),
        medicare_levy=0.02,
        medicare_low_income_threshold=23365,
        mls_single_threshold=90000,
        mls_family_threshold=180000,
        mls_child_add=1500,
        mls_tiers=_tiers((0, 90000, 0), (90001, 105000, 0.01), (105001, 140000, 0.0125), (140001, INF, 0.015)),
        hecs_rates=HECS_RATES_2024,
    ),
})


def get_tax_table(financial_year: int) -> Optional[TaxTable]:
    return TAX_TABLES.get(financial_year)


def supported_financial_years() -> List[int]:
    """Most recent first"""
    return sorted(TAX_TABLES, reverse=True)


def _find_tier(income: float, tiers: Tuple[TaxBracket, ...]) -> TaxBracket:
    # Highest tier whose lower bound has been reached, so cents between
    # whole-dollar bounds stay in the lower tier
    found = tiers[0]
    for tier in tiers:
        if income >= tier.min:
            found = tier
    return found


def calculate_base_tax(taxable_income: float, table: TaxTable) -> float:
    if taxable_income <= 0:
        return 0.0
    bracket = _find_tier(taxable_income, table.brackets)
    return bracket.base + (taxable_income - bracket.min + 1) * bracket.rate


def get_marginal_rate(income: float, table: TaxTable) -> float:
    if income <= 0:
        return 0.0
    return _find_tier(income, table.brackets).rate


def calculate_medicare_levy(taxable_income: float, table: TaxTable) -> float:
    """Flat levy on the whole income once it exceeds the low-income threshold"""
    if taxable_income <= table.medicare_low_income_threshold:
        return 0.0
    return taxable_income * table.medicare_levy


def calculate_medicare_levy_surcharge(
    taxable_income: float,
    has_private_health: bool,
    family_status: FamilyStatus,
    dependent_children: int,
    partner_income: float,
    table: TaxTable,
) -> MedicareSurcharge:
    """
    Surcharge for earners without private hospital cover.

    Couples and families are tested on combined income against the family
    threshold, raised for each dependent child after the first. The rate
    itself comes from the individual's own income.
    """
    if has_private_health:
        return MedicareSurcharge(surcharge=0.0, applies=False, threshold=0.0, combined_income=0.0)

    threshold = table.mls_single_threshold
    income_for_test = taxable_income

    if FamilyStatus(family_status) in (FamilyStatus.COUPLE, FamilyStatus.FAMILY):
        threshold = table.mls_family_threshold
        if dependent_children > 1:
            threshold += (dependent_children - 1) * table.mls_child_add
        income_for_test = taxable_income + (partner_income or 0)

    if income_for_test <= threshold:
        return MedicareSurcharge(surcharge=0.0, applies=False, threshold=threshold, combined_income=income_for_test)

    rate = _find_tier(taxable_income, table.mls_tiers).rate
    return MedicareSurcharge(
        surcharge=taxable_income * rate,
        applies=True,
        threshold=threshold,
        combined_income=income_for_test,
    )


def calculate_hecs_repayment(repayment_income: float, has_hecs_debt: bool, table: TaxTable) -> float:
    """Compulsory repayment: a single rate applied to the whole repayment income"""
    if not has_hecs_debt or repayment_income <= 0:
        return 0.0
    return repayment_income * _find_tier(repayment_income, table.hecs_rates).rate


def calculate_tax_position(profile: TaxProfile, financial_year: int, rental_net_result: float) -> TaxPosition:
    """
    Estimate the year's tax outcome with the rental result included.

    Raises:
        TaxTableNotFoundError: no tax table for financial_year
    """
    table = get_tax_table(financial_year)
    if table is None:
        raise TaxTableNotFoundError(financial_year)

    adjusted_rental_result = rental_net_result - profile.depreciation_deductions
    taxable_income = max(0.0, profile.gross_salary + adjusted_rental_result - profile.other_deductions)

    base_tax = calculate_base_tax(taxable_income, table)
    medicare_levy = calculate_medicare_levy(taxable_income, table)
    mls = calculate_medicare_levy_surcharge(
        taxable_income,
        profile.has_private_health,
        profile.family_status,
        profile.dependent_children,
        profile.partner_income,
        table,
    )
    hecs_repayment = calculate_hecs_repayment(
        profile.gross_salary + adjusted_rental_result,
        profile.has_hecs_debt,
        table,
    )

    total_tax_liability = base_tax + medicare_levy + mls.surcharge + hecs_repayment
    refund_or_owing = profile.payg_withheld - total_tax_liability

    # Savings are valued at the salary's marginal rate, before the loss is applied
    marginal_rate = get_marginal_rate(profile.gross_salary, table)
    rental_loss = abs(adjusted_rental_result) if adjusted_rental_result < 0 else 0.0

    return TaxPosition(
        financial_year=financial_year,
        gross_salary=profile.gross_salary,
        rental_net_result=round_money(rental_net_result),
        taxable_income=round_money(taxable_income),
        other_deductions=profile.other_deductions,
        depreciation_deductions=profile.depreciation_deductions,
        total_deductions=round_money(rental_loss + profile.other_deductions),
        base_tax=round_money(base_tax),
        medicare_levy=round_money(medicare_levy),
        medicare_levy_surcharge=round_money(mls.surcharge),
        hecs_repayment=round_money(hecs_repayment),
        total_tax_liability=round_money(total_tax_liability),
        payg_withheld=profile.payg_withheld,
        refund_or_owing=round_money(refund_or_owing),
        is_refund=refund_or_owing >= 0,
        marginal_rate=marginal_rate,
        property_savings=round_money(rental_loss * marginal_rate),
        mls_applies=mls.applies,
        mls_threshold=mls.threshold,
        combined_income=round_money(mls.combined_income),
    )


def estimate_property_savings(rental_net_result: float, assumed_marginal_rate: float = DEFAULT_ESTIMATE_RATE) -> float:
    """Quick estimate for a rental loss when no tax profile has been entered"""
    if rental_net_result >= 0:
        return 0.0
    return round_money(abs(rental_net_result) * assumed_marginal_rate)
