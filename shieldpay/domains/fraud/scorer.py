"""Fraud scoring pipeline: ingest -> batch analysis -> persist -> alert."""

import structlog

from shieldpay.db.repository import Repository

from .alerts import AlertEmitter
from .analyzer import BatchAnalyzer
from .config import FraudConfig, default_config
from .models import (
    AnalysisReport,
    PatternType,
    QRArtifact,
    QRArtifactCreate,
    Transaction,
    TransactionCreate,
)

logger = structlog.get_logger()


class FraudScorer:
    """Orchestrates ingestion and the full analysis pipeline."""

    def __init__(
        self,
        repository: Repository,
        config: FraudConfig | None = None,
        emitter: AlertEmitter | None = None,
        analyzer: BatchAnalyzer | None = None,
    ) -> None:
        self._repository = repository
        self._config = config or default_config
        self._emitter = emitter or AlertEmitter(repository, config=self._config)
        self._analyzer = analyzer or BatchAnalyzer(repository, config=self._config)

    async def submit(self, data: TransactionCreate) -> Transaction:
        """Record one observed payment event."""
        tx = await self._repository.add_transaction(data)
        logger.info(
            "transaction_submitted",
            transaction_id=tx.id,
            sender_id=tx.sender_id,
            receiver_id=tx.receiver_id,
            amount=str(tx.amount),
        )
        return tx

    async def submit_many(self, items: list[TransactionCreate]) -> list[Transaction]:
        return [await self.submit(item) for item in items]

    async def list_transactions(self, pattern: PatternType | None = None) -> list[Transaction]:
        return await self._repository.list_transactions(pattern=pattern)

    async def analyze_all(self) -> AnalysisReport:
        """Score the full history, persist risk fields and raise alerts."""
        # 1. Score and persist every transaction
        report = await self._analyzer.analyze_all()

        # 2. Alert on the flagged transactions above the alert threshold
        alerts = await self._emitter.emit_for_report(report)
        report.alerts_created = len(alerts)

        logger.info(
            "transactions_scored",
            total_analyzed=report.total_analyzed,
            high_risk_count=report.high_risk_count,
            alerts_created=report.alerts_created,
        )
        return report

    async def record_qr_artifact(self, data: QRArtifactCreate) -> QRArtifact:
        """Store an externally analyzed QR artifact and alert if it is high risk."""
        artifact = await self._repository.add_qr_artifact(data)
        alert = await self._emitter.emit_for_qr_artifact(artifact)
        logger.info(
            "qr_artifact_recorded",
            qr_artifact_id=artifact.id,
            risk_score=artifact.risk_score,
            classification=artifact.classification.value,
            alert_created=alert is not None,
        )
        return artifact

    async def list_qr_artifacts(self) -> list[QRArtifact]:
        return await self._repository.list_qr_artifacts()
