"""POST /v1/depreciation/* - Div 40 and Div 43 deduction calculators"""

import time
from fastapi import APIRouter, HTTPException, Request

from propcalc.api.v1.schemas import (
    DeductionRequest,
    DeductionResponse,
    ProjectionRequest,
    ProjectionResponse,
    ScheduleRequest,
    ScheduleResponse,
    ValidateRequest,
    ValidateResponse,
)
from propcalc.api.dependencies import get_request_id
from propcalc.domain.depreciation import (
    calculate_yearly_deduction,
    generate_multi_year_schedule,
    project_schedule,
    validate_and_recalculate,
)
from propcalc.domain.models import ExtractedAsset, ProjectionAsset, ProjectionCapitalWork
from propcalc.infrastructure.observability.metrics import record_calculation
from propcalc.infrastructure.observability.logging import log_calculation
from propcalc.utils.date_utils import round_money

router = APIRouter()

# Longest projection window accepted in one request
MAX_PROJECTION_YEARS = 50


@router.post("/depreciation/deduction", response_model=DeductionResponse)
def deduction(request_body: DeductionRequest, request: Request):
    """Live preview of a single asset's yearly deduction"""
    start_time = time.time()

    yearly = calculate_yearly_deduction(
        request_body.original_cost,
        request_body.effective_life,
        request_body.method,
        request_body.pro_rata_factor,
    )

    record_calculation("depreciation_deduction")
    log_calculation(
        get_request_id(request), "depreciation_deduction", (time.time() - start_time) * 1000,
        method=request_body.method.value,
        yearly_deduction=yearly,
    )

    return DeductionResponse(method=request_body.method, yearly_deduction=yearly)


@router.post("/depreciation/schedule", response_model=ScheduleResponse)
def schedule(request_body: ScheduleRequest, request: Request):
    start_time = time.time()

    years = generate_multi_year_schedule(
        request_body.original_cost,
        request_body.effective_life,
        request_body.method,
        request_body.max_years,
    )

    record_calculation("depreciation_schedule")
    log_calculation(
        get_request_id(request), "depreciation_schedule", (time.time() - start_time) * 1000,
        years=len(years),
    )

    return ScheduleResponse(
        years=years,
        total_deductions=round_money(sum(y.deduction for y in years)),
    )


@router.post("/depreciation/validate", response_model=ValidateResponse)
def validate(request_body: ValidateRequest, request: Request):
    """Recalculate the lines of an uploaded depreciation schedule"""
    start_time = time.time()

    validated = validate_and_recalculate(
        ExtractedAsset(**asset.model_dump()) for asset in request_body.assets
    )
    discrepancy_count = sum(1 for asset in validated if asset.discrepancy)

    record_calculation("depreciation_validate")
    log_calculation(
        get_request_id(request), "depreciation_validate", (time.time() - start_time) * 1000,
        assets=len(validated),
        discrepancies=discrepancy_count,
    )

    return ValidateResponse(assets=validated, discrepancy_count=discrepancy_count)


@router.post("/depreciation/projection", response_model=ProjectionResponse)
def projection(request_body: ProjectionRequest, request: Request):
    """Deductions per financial year across plant, pooled assets and capital works"""
    start_time = time.time()

    if request_body.to_fy - request_body.from_fy >= MAX_PROJECTION_YEARS:
        raise HTTPException(
            status_code=422,
            detail=f"Projection window is limited to {MAX_PROJECTION_YEARS} financial years",
        )

    rows = project_schedule(
        [ProjectionAsset(**asset.model_dump()) for asset in request_body.assets],
        [ProjectionCapitalWork(**work.model_dump()) for work in request_body.capital_works],
        request_body.from_fy,
        request_body.to_fy,
    )

    record_calculation("depreciation_projection")
    log_calculation(
        get_request_id(request), "depreciation_projection", (time.time() - start_time) * 1000,
        from_fy=request_body.from_fy,
        to_fy=request_body.to_fy,
    )

    return ProjectionResponse(rows=rows)
