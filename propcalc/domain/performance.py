"""Suburb performance benchmarking - percentile bands against cohort medians"""

from typing import List, Optional

from propcalc.domain.models import PerformanceInsight

# Performance score weights
YIELD_WEIGHT = 0.4
GROWTH_WEIGHT = 0.3
EXPENSE_WEIGHT = 0.2
VACANCY_WEIGHT = 0.1

DEFAULT_PERCENTILE = 50
UNDERPERFORMING_PERCENTILE = 25


def calculate_percentile(user_value: float, benchmark_median: float) -> int:
    """
    Approximate percentile from the ratio to the cohort median.

    Higher is better (yield, growth).
    """
    if benchmark_median <= 0:
        return DEFAULT_PERCENTILE
    ratio = user_value / benchmark_median

    if ratio >= 1.2:
        return 90
    if ratio >= 1.1:
        return 75
    if ratio >= 1.0:
        return 55
    if ratio >= 0.9:
        return 40
    if ratio >= 0.8:
        return 25
    return 10


def calculate_inverted_percentile(user_value: float, benchmark_median: float) -> int:
    """Percentile where lower is better (expenses, vacancy)"""
    if benchmark_median <= 0:
        return DEFAULT_PERCENTILE
    ratio = user_value / benchmark_median

    if ratio <= 0.8:
        return 90
    if ratio <= 0.9:
        return 75
    if ratio <= 1.0:
        return 55
    if ratio <= 1.1:
        return 40
    if ratio <= 1.2:
        return 25
    return 10


def get_percentile_status(percentile: float) -> str:
    if percentile >= 80:
        return "excellent"
    if percentile >= 60:
        return "good"
    if percentile >= 40:
        return "average"
    if percentile >= 20:
        return "below"
    return "poor"


def get_score_label(score: float) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Average"
    if score >= 20:
        return "Below Average"
    return "Poor"


def calculate_performance_score(
    yield_percentile: Optional[float],
    growth_percentile: Optional[float],
    expense_percentile: Optional[float],
    vacancy_percentile: Optional[float],
) -> int:
    """
    Weighted score over whichever metrics are available.

    Weights: yield 40%, growth 30%, expenses 20%, vacancy 10%. Missing metrics
    are dropped and the remaining weights renormalised; with none, 50.
    """
    weighted = [
        (yield_percentile, YIELD_WEIGHT),
        (growth_percentile, GROWTH_WEIGHT),
        (expense_percentile, EXPENSE_WEIGHT),
        (vacancy_percentile, VACANCY_WEIGHT),
    ]
    available = [(p, w) for p, w in weighted if p is not None]
    if not available:
        return DEFAULT_PERCENTILE

    total_weight = sum(w for _, w in available)
    weighted_sum = sum(p * w for p, w in available)
    return int(weighted_sum / total_weight + 0.5)


def generate_insights(
    user_yield: Optional[float],
    median_yield: Optional[float],
    user_expense_ratio: Optional[float],
    median_expense_ratio: Optional[float],
    user_vacancy_weeks: Optional[float],
    suburb_vacancy_rate: Optional[float],
) -> List[PerformanceInsight]:
    insights = []

    if user_yield is not None and median_yield:
        yield_ratio = user_yield / median_yield
        if yield_ratio < 0.85:
            percent_below = round((1 - yield_ratio) * 100)
            insights.append(PerformanceInsight(
                type="yield",
                message=f"Rent is {percent_below}% below market. Consider rent review at next lease renewal.",
                severity="warning",
            ))
        elif yield_ratio > 1.1:
            insights.append(PerformanceInsight(
                type="yield",
                message="Strong yield performance - top quartile for similar properties.",
                severity="positive",
            ))

    if user_expense_ratio is not None and median_expense_ratio:
        if user_expense_ratio / median_expense_ratio > 1.2:
            insights.append(PerformanceInsight(
                type="expense",
                message="Operating expenses are high. Review insurance and management fees.",
                severity="warning",
            ))

    if user_vacancy_weeks is not None and suburb_vacancy_rate:
        expected_vacancy_weeks = suburb_vacancy_rate * 52 / 100
        if user_vacancy_weeks > expected_vacancy_weeks * 2:
            insights.append(PerformanceInsight(
                type="vacancy",
                message="High vacancy compared to suburb average. Check property presentation or agent performance.",
                severity="critical",
            ))

    return insights


def is_underperforming(
    yield_percentile: Optional[float],
    expense_percentile: Optional[float],
    vacancy_percentile: Optional[float],
) -> bool:
    """Bottom quartile on any critical metric"""
    return any(
        p is not None and p < UNDERPERFORMING_PERCENTILE
        for p in (yield_percentile, expense_percentile, vacancy_percentile)
    )


def build_cohort_description(bedrooms: Optional[int], property_type: str, suburb: str, state: str) -> str:
    """'3-bed houses in Richmond VIC'"""
    bedroom_text = f"{bedrooms}-bed" if bedrooms else ""
    type_text = property_type.capitalize()
    plural_type = "houses" if type_text == "House" else f"{type_text.lower()}s"
    return " ".join(f"{bedroom_text} {plural_type} in {suburb} {state}".split())
