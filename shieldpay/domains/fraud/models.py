"""Pydantic models for the fraud domain."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PatternType(StrEnum):
    NORMAL = "normal"
    SMURFING = "smurfing"
    FLASH_LAUNDERING = "flash-laundering"
    MULE_NETWORK = "mule-network"
    # Reserved: counted in reports, no detector emits it yet
    CIRCULAR_TRANSFER = "circular-transfer"


class QRClassification(StrEnum):
    CLEAN = "clean"
    SUSPICIOUS = "suspicious"
    HIGH_RISK = "high-risk"


def _as_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are taken as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class TransactionCreate(BaseModel):
    sender_id: str = Field(min_length=1)
    receiver_id: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    timestamp: datetime | None = None
    device_id: str | None = None
    geo_ip: str | None = None
    metadata: dict = Field(default_factory=dict)

    @field_validator("timestamp")
    @classmethod
    def timestamp_as_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class Transaction(BaseModel):
    id: int
    sender_id: str
    receiver_id: str
    amount: Decimal
    timestamp: datetime
    device_id: str | None = None
    geo_ip: str | None = None
    risk_score: int | None = Field(default=None, ge=0, le=100)
    pattern_type: PatternType | None = None
    flagged: bool = False
    metadata: dict = Field(default_factory=dict)

    @field_validator("timestamp")
    @classmethod
    def timestamp_as_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class DetectorResult(BaseModel):
    detector_name: str
    matched: bool
    score: int = 0
    pattern: PatternType | None = None
    description: str = ""
    evidence: dict = Field(default_factory=dict)


class TransactionAnalysis(BaseModel):
    transaction_id: int
    risk_score: int = Field(ge=0, le=100)
    pattern: PatternType = PatternType.NORMAL
    description: str = ""
    detector_results: list[DetectorResult] = []


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FlaggedTransaction(_CamelModel):
    id: int
    pattern: PatternType
    risk_score: int
    description: str


class PatternCounts(_CamelModel):
    smurfing: int = 0
    flash_laundering: int = 0
    mule_networks: int = 0
    circular_transfers: int = 0


class AnalysisReport(_CamelModel):
    total_analyzed: int = 0
    suspicious_count: int = 0
    high_risk_count: int = 0
    failed_count: int = 0
    patterns: PatternCounts = Field(default_factory=PatternCounts)
    flagged_transactions: list[FlaggedTransaction] = []
    alerts_created: int = 0


class QRArtifactCreate(BaseModel):
    filename: str = Field(min_length=1)
    upi_id: str | None = None
    merchant_name: str | None = None
    amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    risk_score: int = Field(ge=0, le=100)
    classification: QRClassification = QRClassification.CLEAN
    steganography_detected: bool = False
    confidence: Decimal = Field(ge=0, le=100, decimal_places=2)
    metadata: dict = Field(default_factory=dict)


class QRArtifact(QRArtifactCreate):
    id: int
    scanned_at: datetime
