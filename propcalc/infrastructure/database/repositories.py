"""Data access layer for alerts and milestones"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from propcalc.infrastructure.database.models import AnomalyAlert, EquityMilestone
from propcalc.domain.models import AnomalyResult, EquityPosition, Milestone


class AlertRepository:
    """Repository for anomaly alerts"""

    def __init__(self, db: Session):
        self.db = db

    def has_active_alert(self, expected_transaction_id: str, alert_type: str = "missed_rent") -> bool:
        """True when an undismissed alert already exists for this expected transaction"""
        return (
            self.db.query(AnomalyAlert.id)
            .filter(
                AnomalyAlert.expected_transaction_id == expected_transaction_id,
                AnomalyAlert.alert_type == alert_type,
                AnomalyAlert.status == "active",
            )
            .first()
            is not None
        )

    def create_alert(
        self,
        user_id: str,
        result: AnomalyResult,
        property_id: Optional[str] = None,
        expected_transaction_id: Optional[str] = None,
    ) -> AnomalyAlert:
        db_alert = AnomalyAlert(
            user_id=user_id,
            property_id=property_id,
            expected_transaction_id=expected_transaction_id,
            alert_type=result.alert_type,
            severity=result.severity,
            description=result.description,
            suggested_action=result.suggested_action,
            details=result.metadata,
        )
        self.db.add(db_alert)
        self.db.flush()
        return db_alert

    def get_active_alerts(self, user_id: str, limit: int = 50) -> List[AnomalyAlert]:
        return (
            self.db.query(AnomalyAlert)
            .filter(AnomalyAlert.user_id == user_id, AnomalyAlert.status == "active")
            .order_by(AnomalyAlert.created_at.desc())
            .limit(limit)
            .all()
        )

    def get_alert_by_id(self, alert_id: uuid.UUID) -> Optional[AnomalyAlert]:
        return self.db.query(AnomalyAlert).filter(AnomalyAlert.id == alert_id).first()

    def dismiss(self, alert: AnomalyAlert) -> AnomalyAlert:
        alert.status = "dismissed"
        alert.dismissed_at = datetime.now(timezone.utc)
        self.db.flush()
        return alert


class MilestoneRepository:
    """Repository for equity milestones"""

    def __init__(self, db: Session):
        self.db = db

    def get_milestones(self, property_id: str) -> List[Milestone]:
        rows = (
            self.db.query(EquityMilestone)
            .filter(EquityMilestone.property_id == property_id)
            .all()
        )
        return [Milestone(row.milestone_type, row.milestone_value) for row in rows]

    def record_milestones(
        self,
        property_id: str,
        user_id: str,
        milestones: List[Milestone],
        position: EquityPosition,
    ) -> List[EquityMilestone]:
        """Persist newly crossed milestones with the position at the time"""
        records = []
        for milestone in milestones:
            record = EquityMilestone(
                property_id=property_id,
                user_id=user_id,
                milestone_type=milestone.milestone_type,
                milestone_value=milestone.value,
                equity_at_achievement=position.equity,
                lvr_at_achievement=position.lvr,
            )
            self.db.add(record)
            records.append(record)

        self.db.flush()
        return records
