"""Discretionary trust distribution deadlines"""

from datetime import date
from typing import Optional

from propcalc.domain.models import DeadlineStatus
from propcalc.utils.date_utils import days_between

APPROACHING_DAYS = 30
URGENT_DAYS = 7


def get_distribution_deadline(financial_year: int) -> date:
    """Trustee resolutions must be made by 30 June of the financial year"""
    return date(financial_year, 6, 30)


def get_days_until_deadline(financial_year: int, today: Optional[date] = None) -> int:
    today = today or date.today()
    return days_between(today, get_distribution_deadline(financial_year))


def get_deadline_status(
    financial_year: int,
    has_distribution: bool,
    today: Optional[date] = None,
) -> DeadlineStatus:
    if has_distribution:
        return DeadlineStatus.COMPLIANT

    days_until = get_days_until_deadline(financial_year, today)
    if days_until < 0:
        return DeadlineStatus.OVERDUE
    if days_until <= URGENT_DAYS:
        return DeadlineStatus.URGENT
    if days_until <= APPROACHING_DAYS:
        return DeadlineStatus.APPROACHING
    return DeadlineStatus.COMPLIANT
