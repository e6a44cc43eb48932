"""Capital gains tax calculations for property disposals"""

from datetime import date
from typing import Iterable

from propcalc.domain.models import CapitalGainInput, CapitalGainResult, CapitalTransaction
from propcalc.utils.date_utils import calendar_months_between

# Acquisition costs that form part of the cost base
CAPITAL_CATEGORIES = frozenset({
    "stamp_duty",
    "conveyancing",
    "buyers_agent_fees",
    "initial_repairs",
})

CGT_DISCOUNT_RATE = 0.5
CGT_DISCOUNT_MIN_MONTHS = 12


def calculate_cost_base(purchase_price: float, capital_transactions: Iterable[CapitalTransaction]) -> float:
    """
    Purchase price plus eligible acquisition costs.

    Transactions outside CAPITAL_CATEGORIES are ignored. Amounts are taken as
    absolute values since bank feeds record them as debits.
    """
    acquisition_costs = sum(
        abs(txn.amount) for txn in capital_transactions
        if txn.category in CAPITAL_CATEGORIES
    )
    return purchase_price + acquisition_costs


def months_held(purchase_date: date, settlement_date: date) -> int:
    """Calendar months between purchase and settlement (day of month ignored)"""
    return calendar_months_between(purchase_date, settlement_date)


def calculate_capital_gain(cgt_input: CapitalGainInput) -> CapitalGainResult:
    """
    Calculate capital gain and the 50% CGT discount.

    The discount applies only when the asset was held at least 12 calendar
    months and the result is a gain. Losses are never discounted.
    """
    total_selling_costs = cgt_input.selling_costs.total
    net_proceeds = cgt_input.sale_price - total_selling_costs
    capital_gain = net_proceeds - cgt_input.cost_base

    held_over_twelve_months = (
        months_held(cgt_input.purchase_date, cgt_input.settlement_date) >= CGT_DISCOUNT_MIN_MONTHS
    )

    if held_over_twelve_months and capital_gain > 0:
        discounted_gain = capital_gain * CGT_DISCOUNT_RATE
    else:
        discounted_gain = capital_gain

    return CapitalGainResult(
        total_selling_costs=total_selling_costs,
        net_proceeds=net_proceeds,
        capital_gain=capital_gain,
        discounted_gain=discounted_gain,
        held_over_twelve_months=held_over_twelve_months,
    )
