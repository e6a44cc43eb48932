"""SQLAlchemy ORM models for records owned by the job endpoints"""

import uuid
from sqlalchemy import Column, String, Float, DateTime, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class AnomalyAlert(Base):
    """Alert raised by an anomaly detector"""

    __tablename__ = "anomaly_alert"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    property_id = Column(Text, nullable=True)
    expected_transaction_id = Column(Text, nullable=True, index=True)
    alert_type = Column(String(50), nullable=False)
    severity = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="active")  # active | dismissed
    description = Column(Text, nullable=False)
    suggested_action = Column(Text, nullable=True)
    details = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    dismissed_at = Column(DateTime(timezone=True), nullable=True)


class EquityMilestone(Base):
    """LVR or equity threshold a property has crossed"""

    __tablename__ = "equity_milestone"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    property_id = Column(Text, nullable=False, index=True)
    user_id = Column(Text, nullable=False, index=True)
    milestone_type = Column(String(20), nullable=False)  # lvr | equity_amount
    milestone_value = Column(Float, nullable=False)
    equity_at_achievement = Column(Float, nullable=False)
    lvr_at_achievement = Column(Float, nullable=False)
    achieved_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
