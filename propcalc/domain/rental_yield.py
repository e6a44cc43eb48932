"""Rental yield calculations"""

from typing import Dict, Iterable, Tuple

from propcalc.utils.date_utils import round_money


def calculate_gross_yield(annual_rent: float, property_value: float) -> float:
    """Annual rent as a percentage of property value; 0 when either is non-positive"""
    if annual_rent <= 0 or property_value <= 0:
        return 0.0
    return (annual_rent / property_value) * 100


def calculate_net_yield(annual_rent: float, annual_expenses: float, property_value: float) -> float:
    """
    Rent less expenses as a percentage of property value.

    Can be negative when expenses exceed rent.
    """
    if property_value <= 0:
        return 0.0
    return ((annual_rent - annual_expenses) / property_value) * 100


def summarise_portfolio_yields(items: Iterable[Tuple[float, float, float]]) -> Dict[str, float]:
    """
    Average gross and net yield across properties.

    items: (annual_rent, annual_expenses, property_value) per property
    """
    items = list(items)
    if not items:
        return {"average_gross_yield": 0.0, "average_net_yield": 0.0}

    gross = [calculate_gross_yield(rent, value) for rent, _, value in items]
    net = [calculate_net_yield(rent, expenses, value) for rent, expenses, value in items]

    return {
        "average_gross_yield": round_money(sum(gross) / len(gross)),
        "average_net_yield": round_money(sum(net) / len(net)),
    }
