"""Date and rounding utilities for Australian financial years (1 July - 30 June)"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

# FY month order: Jul..Dec then Jan..Jun
FY_MONTH_ORDER: Tuple[int, ...] = (7, 8, 9, 10, 11, 12, 1, 2, 3, 4, 5, 6)


def round_money(value: float) -> float:
    """Round to cents, half away from zero"""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def financial_year_for(day: date) -> int:
    """
    Return the FY a date falls in, named by the calendar year it ends.

    Jul 1 2025 -> 2026, Jun 30 2025 -> 2025
    """
    return day.year + 1 if day.month >= 7 else day.year


def financial_year_range(financial_year: int) -> Tuple[date, date]:
    """First and last day of a financial year"""
    return date(financial_year - 1, 7, 1), date(financial_year, 6, 30)


def financial_year_label(financial_year: int) -> str:
    """2026 -> '2025-26'"""
    return f"{financial_year - 1}-{str(financial_year)[-2:]}"


def calendar_months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end, ignoring the day of month"""
    return (end.year - start.year) * 12 + (end.month - start.month)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def months_elapsed_in_fy(financial_year: int, today: Optional[date] = None) -> int:
    """
    Completed months of a financial year as of today, clamped to 0..12.

    Counted by calendar month, so July to February are complete on 1 March
    whatever the day count.
    """
    today = today or date.today()
    fy_start, fy_end = financial_year_range(financial_year)

    if today < fy_start:
        return 0
    if today > fy_end:
        return 12
    return min(12, max(0, calendar_months_between(fy_start, today)))
