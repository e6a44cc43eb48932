"""Anomaly alerts - missed-rent job, alert listing and dismissal, detector preview"""

import time
import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from propcalc.api.v1.schemas import (
    AlertListResponse,
    AlertSchema,
    AnomalyCheckRequest,
    AnomalyCheckResponse,
    MissedRentJobRequest,
    MissedRentJobResponse,
)
from propcalc.api.dependencies import get_entity_role, get_request_id, verify_cron_token
from propcalc.config import settings
from propcalc.domain.anomaly import (
    detect_duplicates,
    detect_missed_rent,
    detect_unexpected_expense,
    detect_unusual_amount,
)
from propcalc.domain.exceptions import AlertNotFoundError, PermissionDeniedError
from propcalc.domain.models import EntityRole, ExpectedTransaction, HistoricalAverage, TransactionSample
from propcalc.domain.permissions import ensure_permission
from propcalc.infrastructure.database.models import AnomalyAlert
from propcalc.infrastructure.database.repositories import AlertRepository
from propcalc.infrastructure.database.session import get_db
from propcalc.infrastructure.observability.metrics import anomaly_alert_counter, job_failure_counter, record_calculation
from propcalc.infrastructure.observability.logging import log_calculation, log_job

router = APIRouter()


def _to_schema(alert: AnomalyAlert) -> AlertSchema:
    return AlertSchema(
        alert_id=str(alert.id),
        alert_type=alert.alert_type,
        severity=alert.severity,
        status=alert.status,
        description=alert.description,
        suggested_action=alert.suggested_action,
        expected_transaction_id=alert.expected_transaction_id,
        created_at=alert.created_at.isoformat(),
    )


@router.post(
    "/jobs/missed-rent",
    response_model=MissedRentJobResponse,
    dependencies=[Depends(verify_cron_token)],
)
def run_missed_rent_job(
    request_body: MissedRentJobRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Raise missed_rent alerts for overdue expected rent.

    Flow:
    1. Skip expected transactions that already have an active alert
    2. Detect rent still outstanding after the grace period
    3. Persist new alerts in one transaction
    """
    start_time = time.time()
    request_id = get_request_id(request)
    created_ids = []
    created_types = []
    skipped = 0

    try:
        alert_repo = AlertRepository(db)

        for item in request_body.expected_transactions:
            if alert_repo.has_active_alert(item.id):
                skipped += 1
                continue

            delay_days = (
                item.alert_delay_days
                if item.alert_delay_days is not None
                else settings.default_alert_delay_days
            )
            result = detect_missed_rent(
                ExpectedTransaction(
                    id=item.id,
                    expected_date=item.expected_date,
                    expected_amount=item.expected_amount,
                    description=item.description,
                    property_address=item.property_address,
                ),
                delay_days,
                request_body.as_of,
            )
            if result is None:
                continue

            db_alert = alert_repo.create_alert(
                user_id=item.user_id,
                result=result,
                property_id=item.property_id,
                expected_transaction_id=item.id,
            )
            created_ids.append(str(db_alert.id))
            created_types.append(result.alert_type)

        db.commit()

    except Exception as e:
        db.rollback()
        job_failure_counter.labels(job="missed_rent").inc()
        logging.error(f"Missed rent job failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    for alert_type in created_types:
        anomaly_alert_counter.labels(alert_type=alert_type).inc()

    processed = len(request_body.expected_transactions)
    log_job(request_id, "missed_rent", processed, len(created_ids), skipped, (time.time() - start_time) * 1000)

    return MissedRentJobResponse(
        processed=processed,
        created=len(created_ids),
        skipped=skipped,
        alert_ids=created_ids,
    )


@router.get("/alerts", response_model=AlertListResponse)
def list_alerts(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Active alerts for a user, newest first"""
    alert_repo = AlertRepository(db)
    alerts = alert_repo.get_active_alerts(user_id)
    return AlertListResponse(user_id=user_id, alerts=[_to_schema(a) for a in alerts])


@router.post("/alerts/{alert_id}/dismiss", response_model=AlertSchema)
def dismiss_alert(
    alert_id: uuid.UUID,
    request: Request,
    role: EntityRole = Depends(get_entity_role),
    db: Session = Depends(get_db),
):
    """Dismiss an alert; the caller's entity role must allow writes"""
    request_id = get_request_id(request)

    try:
        ensure_permission(role, "can_write")

        alert_repo = AlertRepository(db)
        alert = alert_repo.get_alert_by_id(alert_id)
        if alert is None:
            raise AlertNotFoundError(f"Alert {alert_id} not found")

        alert_repo.dismiss(alert)
        db.commit()
        return _to_schema(alert)

    except PermissionDeniedError as e:
        db.rollback()
        logging.warning(f"Permission denied: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=403, detail=str(e))

    except AlertNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/anomalies/check", response_model=AnomalyCheckResponse)
def check_transaction(request_body: AnomalyCheckRequest, request: Request):
    """
    Run the transaction detectors without persisting anything.

    Each detector only runs when its context is supplied.
    """
    start_time = time.time()
    transaction = TransactionSample(**request_body.transaction.model_dump())
    results = []

    if request_body.historical is not None:
        results.append(detect_unusual_amount(
            transaction,
            HistoricalAverage(**request_body.historical.model_dump()),
        ))
    if request_body.recent_transactions:
        results.append(detect_duplicates(
            transaction,
            [TransactionSample(**t.model_dump()) for t in request_body.recent_transactions],
        ))
    if request_body.known_merchants is not None:
        results.append(detect_unexpected_expense(transaction, set(request_body.known_merchants)))

    anomalies = [r for r in results if r is not None]

    record_calculation("anomaly_check")
    log_calculation(
        get_request_id(request), "anomaly_check", (time.time() - start_time) * 1000,
        anomalies=[a.alert_type for a in anomalies],
    )

    return AnomalyCheckResponse(anomalies=anomalies)
