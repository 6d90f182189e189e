"""Batch analysis: score every transaction against the full history."""

import structlog

from shieldpay.db.repository import Repository
from shieldpay.shared.errors import AnalysisFailure

from .aggregator import RiskAggregator
from .config import FraudConfig, default_config
from .history import ScanHistory, TransactionHistory
from .models import (
    AnalysisReport,
    FlaggedTransaction,
    PatternCounts,
    PatternType,
    Transaction,
    TransactionAnalysis,
)

logger = structlog.get_logger()


def _count_pattern(counts: PatternCounts, pattern: PatternType) -> None:
    if pattern == PatternType.SMURFING:
        counts.smurfing += 1
    elif pattern == PatternType.FLASH_LAUNDERING:
        counts.flash_laundering += 1
    elif pattern == PatternType.MULE_NETWORK:
        counts.mule_networks += 1
    elif pattern == PatternType.CIRCULAR_TRANSFER:
        counts.circular_transfers += 1


class BatchAnalyzer:
    """Runs the RiskAggregator over a whole transaction set.

    Each transaction is scored against the same history (all-pairs), bucketed
    into normal / suspicious / high-risk, and its risk_score and pattern_type
    are written back through the repository. A transaction whose scoring
    fails is logged and skipped; the rest of the batch still runs.
    """

    def __init__(
        self,
        repository: Repository,
        config: FraudConfig | None = None,
        aggregator: RiskAggregator | None = None,
        history_factory=ScanHistory,
    ) -> None:
        self._repository = repository
        self._config = config or default_config
        self._aggregator = aggregator or RiskAggregator(config=self._config)
        self._history_factory = history_factory

    def build_report(
        self, history: TransactionHistory
    ) -> tuple[AnalysisReport, list[TransactionAnalysis]]:
        """Score and bucket every transaction in ``history``. Pure: no writes."""
        thresholds = self._config.classification
        report = AnalysisReport(total_analyzed=len(history))
        analyses: list[TransactionAnalysis] = []

        for tx in history:
            try:
                analysis = self._aggregator.evaluate(tx, history)
            except AnalysisFailure as exc:
                report.failed_count += 1
                logger.exception(
                    "transaction_analysis_failed",
                    transaction_id=tx.id,
                    detector_id=exc.context.get("detector_id"),
                    error=exc.message,
                )
                continue

            analyses.append(analysis)

            if analysis.risk_score > thresholds.high_risk_above:
                report.high_risk_count += 1
                report.flagged_transactions.append(
                    FlaggedTransaction(
                        id=tx.id,
                        pattern=analysis.pattern,
                        risk_score=analysis.risk_score,
                        description=analysis.description,
                    )
                )
            elif analysis.risk_score > thresholds.suspicious_above:
                report.suspicious_count += 1

            _count_pattern(report.patterns, analysis.pattern)

        return report, analyses

    async def analyze(self, transactions: list[Transaction]) -> AnalysisReport:
        """Analyze ``transactions`` and persist each transaction's risk fields."""
        history = self._history_factory(transactions)
        report, analyses = self.build_report(history)

        for analysis in analyses:
            updated = await self._repository.update_transaction_risk(
                analysis.transaction_id, analysis.risk_score, analysis.pattern
            )
            if updated is None:
                logger.warning(
                    "transaction_risk_not_persisted",
                    transaction_id=analysis.transaction_id,
                )

        logger.info(
            "batch_analysis_completed",
            total_analyzed=report.total_analyzed,
            suspicious_count=report.suspicious_count,
            high_risk_count=report.high_risk_count,
            failed_count=report.failed_count,
            patterns=report.patterns.model_dump(),
        )
        return report

    async def analyze_all(self) -> AnalysisReport:
        """Analyze the full history held by the repository."""
        transactions = await self._repository.list_transactions()
        return await self.analyze(transactions)
