"""Equity milestones - threshold resolution and the nightly detection job"""

import time
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from propcalc.api.v1.schemas import (
    MilestoneJobRequest,
    MilestoneJobResponse,
    RecordedMilestone,
    ResolveThresholdsRequest,
    ThresholdConfigResponse,
    ThresholdOverrideSchema,
)
from propcalc.api.dependencies import get_request_id, verify_cron_token
from propcalc.domain.milestones import (
    calculate_equity_position,
    detect_new_milestones,
    get_milestone_message,
    resolve_thresholds,
)
from propcalc.domain.models import ThresholdOverride
from propcalc.infrastructure.database.repositories import MilestoneRepository
from propcalc.infrastructure.database.session import get_db
from propcalc.infrastructure.observability.metrics import job_failure_counter, milestone_counter, record_calculation
from propcalc.infrastructure.observability.logging import log_calculation, log_job

router = APIRouter()


def _override(layer: Optional[ThresholdOverrideSchema]) -> Optional[ThresholdOverride]:
    if layer is None:
        return None
    return ThresholdOverride(**layer.model_dump())


@router.post("/milestones/resolve", response_model=ThresholdConfigResponse)
def resolve(request_body: ResolveThresholdsRequest, request: Request):
    """Effective thresholds: defaults, then global preferences, then the property override"""
    config = resolve_thresholds(_override(request_body.global_prefs), _override(request_body.property_override))

    record_calculation("milestone_thresholds")
    log_calculation(get_request_id(request), "milestone_thresholds", 0.0, enabled=config.enabled)

    return ThresholdConfigResponse.model_validate(config)


@router.post(
    "/jobs/milestones",
    response_model=MilestoneJobResponse,
    dependencies=[Depends(verify_cron_token)],
)
def run_milestone_job(
    request_body: MilestoneJobRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Record LVR and equity thresholds newly crossed by each property.

    Properties without a positive valuation are skipped. Milestones already
    recorded for a property are never recorded again.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    new_milestones = []
    skipped = 0

    try:
        milestone_repo = MilestoneRepository(db)

        for item in request_body.properties:
            position = calculate_equity_position(item.estimated_value, item.loan_balance)
            if position is None:
                skipped += 1
                continue

            config = resolve_thresholds(_override(item.global_prefs), _override(item.property_override))
            crossed = detect_new_milestones(position, config, milestone_repo.get_milestones(item.property_id))
            if not crossed:
                continue

            milestone_repo.record_milestones(item.property_id, item.user_id, crossed, position)

            for milestone in crossed:
                title, body = get_milestone_message(milestone.milestone_type, milestone.value, item.address)
                new_milestones.append(RecordedMilestone(
                    property_id=item.property_id,
                    milestone_type=milestone.milestone_type,
                    value=milestone.value,
                    title=title,
                    body=body,
                ))

        db.commit()

    except Exception as e:
        db.rollback()
        job_failure_counter.labels(job="milestones").inc()
        logging.error(f"Milestone job failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    for milestone in new_milestones:
        milestone_counter.labels(milestone_type=milestone.milestone_type).inc()

    processed = len(request_body.properties)
    log_job(request_id, "milestones", processed, len(new_milestones), skipped, (time.time() - start_time) * 1000)

    return MilestoneJobResponse(processed=processed, skipped=skipped, new_milestones=new_milestones)
