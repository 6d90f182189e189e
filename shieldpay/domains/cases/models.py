"""Pydantic models for alerts and flagged-account cases."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class AlertType(StrEnum):
    QR_STEGANOGRAPHY = "qr-steganography"
    TRANSACTION_FRAUD = "transaction-fraud"
    ACCOUNT_FLAGGED = "account-flagged"


class AlertSeverity(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Descending urgency: lower rank = more urgent
SEVERITY_RANK = {
    AlertSeverity.CRITICAL: 0,
    AlertSeverity.HIGH: 1,
    AlertSeverity.MEDIUM: 2,
    AlertSeverity.LOW: 3,
}


class AlertStatus(StrEnum):
    ACTIVE = "active"
    ACKNOWLEDGED = "acknowledged"


class CaseStatus(StrEnum):
    PENDING = "pending"
    UNDER_INVESTIGATION = "under-investigation"
    RESOLVED = "resolved"
    FALSE_POSITIVE = "false-positive"


OPEN_CASE_STATUSES = (CaseStatus.PENDING, CaseStatus.UNDER_INVESTIGATION)


class AlertCreate(BaseModel):
    type: AlertType
    severity: AlertSeverity
    title: str
    description: str
    account_id: str | None = None
    risk_score: int | None = Field(default=None, ge=0, le=100)
    metadata: dict = Field(default_factory=dict)


class Alert(AlertCreate):
    id: int
    status: AlertStatus = AlertStatus.ACTIVE
    acknowledged: bool = False
    created_at: datetime


class FlaggedAccountCreate(BaseModel):
    account_id: str
    flag_reason: str
    risk_score: int = Field(ge=0, le=100)
    metadata: dict = Field(default_factory=dict)


class FlaggedAccount(FlaggedAccountCreate):
    id: int
    status: CaseStatus = CaseStatus.PENDING
    flagged_at: datetime
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None


class FlagAccountRequest(BaseModel):
    """Inbound flag command. Fields are optional so that the case manager,
    not the transport, decides what counts as missing."""

    account_id: str | None = None
    flag_reason: str | None = None
    risk_score: int | None = None


class StatusUpdateRequest(BaseModel):
    status: CaseStatus
    reviewer: str | None = None


class DashboardStats(BaseModel):
    total_transactions: int = 0
    suspicious_count: int = 0
    high_risk_count: int = 0
    active_alerts: int = 0
    pending_flagged_accounts: int = 0
    qr_scanned: int = 0
