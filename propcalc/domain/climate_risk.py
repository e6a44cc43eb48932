"""Climate hazard aggregation"""

from propcalc.domain.models import ClimateRisk, RiskLevel

RISK_ORDER = (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.EXTREME)


def calculate_overall_risk(flood_risk: RiskLevel, bushfire_risk: RiskLevel) -> RiskLevel:
    """The worse of the two hazards"""
    return max(RiskLevel(flood_risk), RiskLevel(bushfire_risk), key=RISK_ORDER.index)


def build_climate_risk(flood_risk: RiskLevel, bushfire_risk: RiskLevel) -> ClimateRisk:
    return ClimateRisk(
        flood_risk=RiskLevel(flood_risk),
        bushfire_risk=RiskLevel(bushfire_risk),
        overall_risk=calculate_overall_risk(flood_risk, bushfire_risk),
    )
