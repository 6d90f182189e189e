"""Alert emission: severity policy, alert creation and Kafka publishing."""

import json

import structlog
from pydantic import BaseModel, Field

from shieldpay.db.repository import Repository
from shieldpay.domains.cases.models import (
    Alert,
    AlertCreate,
    AlertSeverity,
    AlertType,
    FlaggedAccount,
)

from .config import FraudConfig, default_config
from .models import AnalysisReport, QRArtifact

logger = structlog.get_logger()

# Severity used when the risk score does not cross the critical threshold
DEFAULT_SEVERITY = {
    AlertType.TRANSACTION_FRAUD: AlertSeverity.HIGH,
    AlertType.ACCOUNT_FLAGGED: AlertSeverity.HIGH,
    AlertType.QR_STEGANOGRAPHY: AlertSeverity.HIGH,
}


def resolve_severity(
    alert_type: AlertType,
    risk_score: int | None,
    config: FraudConfig | None = None,
) -> AlertSeverity:
    """The one severity rule: score above the critical threshold is critical,
    anything else gets the alert type's default."""
    cfg = config or default_config
    if risk_score is not None and risk_score > cfg.alerts.critical_above:
        return AlertSeverity.CRITICAL
    return DEFAULT_SEVERITY[alert_type]


class AlertEvidence(BaseModel):
    """What a producer hands the emitter: score, subject and context."""

    risk_score: int | None = Field(default=None, ge=0, le=100)
    subject_id: str | None = None
    title: str
    description: str
    metadata: dict = Field(default_factory=dict)


class AlertEmitter:
    """Creates alerts for high-risk transactions, flagged accounts and QR artifacts."""

    def __init__(
        self,
        repository: Repository,
        config: FraudConfig | None = None,
        kafka_producer=None,
    ) -> None:
        self._repository = repository
        self._config = config or default_config
        self._kafka_producer = kafka_producer

    async def emit(self, alert_type: AlertType, evidence: AlertEvidence) -> Alert:
        """Persist one alert, graded by the shared severity policy."""
        severity = resolve_severity(alert_type, evidence.risk_score, self._config)
        alert = await self._repository.add_alert(
            AlertCreate(
                type=alert_type,
                severity=severity,
                title=evidence.title,
                description=evidence.description,
                account_id=evidence.subject_id,
                risk_score=evidence.risk_score,
                metadata=evidence.metadata,
            )
        )

        logger.warning(
            "alert_created",
            alert_id=alert.id,
            alert_type=alert_type.value,
            severity=severity.value,
            risk_score=evidence.risk_score,
            subject_id=evidence.subject_id,
        )

        if self._kafka_producer is not None:
            await publish_alert(alert, self._kafka_producer, self._config.alerts.kafka_topic)

        return alert

    async def emit_for_report(self, report: AnalysisReport) -> list[Alert]:
        """One transaction-fraud alert per flagged transaction above the alert threshold."""
        threshold = self._config.alerts.transaction_alert_above
        already_alerted: set[int] = set()
        if self._config.alerts.dedup_transaction_alerts:
            already_alerted = await self._repository.transaction_ids_with_alerts()

        created: list[Alert] = []
        for flagged in report.flagged_transactions:
            if flagged.risk_score <= threshold:
                continue
            if flagged.id in already_alerted:
                logger.info("transaction_alert_deduplicated", transaction_id=flagged.id)
                continue

            alert = await self.emit(
                AlertType.TRANSACTION_FRAUD,
                AlertEvidence(
                    risk_score=flagged.risk_score,
                    subject_id=f"transaction-{flagged.id}",
                    title=f"{flagged.pattern.value} Pattern Detected",
                    description=flagged.description,
                    metadata={"transaction_id": flagged.id},
                ),
            )
            await self._repository.flag_transaction(flagged.id)
            created.append(alert)

        return created

    async def emit_for_flagged_account(self, account: FlaggedAccount) -> Alert:
        """Companion alert for a flag-account command."""
        return await self.emit(
            AlertType.ACCOUNT_FLAGGED,
            AlertEvidence(
                risk_score=account.risk_score,
                subject_id=account.account_id,
                title="Account Flagged",
                description=f"Account {account.account_id} flagged for {account.flag_reason}",
                metadata={"flagged_account_id": account.id},
            ),
        )

    async def emit_for_qr_artifact(self, artifact: QRArtifact) -> Alert | None:
        """Alert for a QR artifact whose externally computed risk is high enough."""
        if artifact.risk_score <= self._config.alerts.qr_alert_above:
            return None
        return await self.emit(
            AlertType.QR_STEGANOGRAPHY,
            AlertEvidence(
                risk_score=artifact.risk_score,
                subject_id=artifact.upi_id,
                title="Steganographic QR Code Detected",
                description=f"Hidden payload found in QR code from {artifact.upi_id or artifact.filename}",
                metadata={"qr_artifact_id": artifact.id},
            ),
        )


async def publish_alert(alert: Alert, producer, topic: str = "shieldpay.fraud.alerts") -> None:
    """Publish alert to Kafka topic for downstream consumption.

    Args:
        alert: The persisted alert.
        producer: An aiokafka AIOKafkaProducer instance.
        topic: Destination topic.
    """
    if producer is None:
        logger.debug("kafka_producer_not_available", alert_id=alert.id)
        return

    payload = alert.model_dump(mode="json")
    key = alert.account_id or str(alert.id)

    try:
        await producer.send_and_wait(
            topic,
            value=json.dumps(payload).encode("utf-8"),
            key=key.encode("utf-8"),
        )
        logger.info("alert_published_to_kafka", alert_id=alert.id, topic=topic)
    except Exception:
        logger.exception("alert_publish_failed", alert_id=alert.id, topic=topic)
