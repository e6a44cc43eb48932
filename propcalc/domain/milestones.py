"""Equity and LVR milestone thresholds and detection"""

from typing import Iterable, List, Optional, Tuple

from propcalc.domain.models import EquityPosition, Milestone, ThresholdConfig, ThresholdOverride

DEFAULT_LVR_THRESHOLDS = (80.0, 60.0, 40.0, 20.0)
DEFAULT_EQUITY_THRESHOLDS = (100_000.0, 250_000.0, 500_000.0, 1_000_000.0)

LVR = "lvr"
EQUITY_AMOUNT = "equity_amount"


def default_thresholds() -> ThresholdConfig:
    return ThresholdConfig(
        lvr_thresholds=list(DEFAULT_LVR_THRESHOLDS),
        equity_thresholds=list(DEFAULT_EQUITY_THRESHOLDS),
        enabled=True,
    )


def _apply(base: ThresholdConfig, layer: Optional[ThresholdOverride]) -> ThresholdConfig:
    if layer is None:
        return base
    return ThresholdConfig(
        lvr_thresholds=list(layer.lvr_thresholds) if layer.lvr_thresholds is not None else base.lvr_thresholds,
        equity_thresholds=(
            list(layer.equity_thresholds) if layer.equity_thresholds is not None else base.equity_thresholds
        ),
        enabled=layer.enabled if layer.enabled is not None else base.enabled,
    )


def resolve_thresholds(
    global_prefs: Optional[ThresholdOverride],
    property_override: Optional[ThresholdOverride],
) -> ThresholdConfig:
    """
    Merge system defaults, the user's global preferences and a property override.

    Each field is taken from the most specific layer where it is not None, so a
    property can switch milestones off while keeping custom global thresholds.
    """
    return _apply(_apply(default_thresholds(), global_prefs), property_override)


def calculate_equity_position(estimated_value: float, loan_balance: float) -> Optional[EquityPosition]:
    """Equity and LVR (%) for a property; None without a positive valuation"""
    if estimated_value <= 0:
        return None
    return EquityPosition(
        equity=estimated_value - loan_balance,
        lvr=loan_balance / estimated_value * 100,
    )


def detect_new_milestones(
    position: EquityPosition,
    config: ThresholdConfig,
    existing: Iterable[Milestone],
) -> List[Milestone]:
    """
    Thresholds crossed now that have not been recorded before.

    LVR milestones are reached at or below the threshold; equity milestones at
    or above it.
    """
    if not config.enabled:
        return []

    existing = list(existing)
    seen_lvr = {m.value for m in existing if m.milestone_type == LVR}
    seen_equity = {m.value for m in existing if m.milestone_type == EQUITY_AMOUNT}

    crossed = [
        Milestone(LVR, threshold) for threshold in config.lvr_thresholds
        if position.lvr <= threshold and threshold not in seen_lvr
    ]
    crossed += [
        Milestone(EQUITY_AMOUNT, threshold) for threshold in config.equity_thresholds
        if position.equity >= threshold and threshold not in seen_equity
    ]
    return crossed


def get_milestone_message(milestone_type: str, value: float, address: str) -> Tuple[str, str]:
    """Notification title and body"""
    if milestone_type == LVR:
        return (
            f"LVR below {value:g}%",
            f"{address} now has a loan-to-value ratio under {value:g}%.",
        )
    return (
        f"${value:,.0f} equity reached",
        f"{address} has passed ${value:,.0f} in equity.",
    )
