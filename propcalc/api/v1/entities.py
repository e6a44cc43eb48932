"""Entity permissions and climate risk lookups"""

from dataclasses import asdict

from fastapi import APIRouter, Request

from propcalc.api.v1.schemas import ClimateRiskRequest, ClimateRiskResponse, PermissionsResponse
from propcalc.api.dependencies import get_request_id
from propcalc.domain.climate_risk import build_climate_risk
from propcalc.domain.models import EntityRole
from propcalc.domain.permissions import get_permissions
from propcalc.infrastructure.observability.metrics import record_calculation
from propcalc.infrastructure.observability.logging import log_calculation

router = APIRouter()


@router.get("/entities/permissions/{role}", response_model=PermissionsResponse)
def role_permissions(role: EntityRole):
    return PermissionsResponse(role=role, **asdict(get_permissions(role)))


@router.post("/climate-risk", response_model=ClimateRiskResponse)
def climate_risk(request_body: ClimateRiskRequest, request: Request):
    """Overall rating is the worse of the flood and bushfire ratings"""
    result = build_climate_risk(request_body.flood_risk, request_body.bushfire_risk)

    record_calculation("climate_risk")
    log_calculation(get_request_id(request), "climate_risk", 0.0, overall_risk=result.overall_risk.value)

    return ClimateRiskResponse.model_validate(result)
