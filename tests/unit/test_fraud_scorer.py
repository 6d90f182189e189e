"""Unit tests for the fraud scorer pipeline."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from shieldpay.domains.fraud.config import FraudConfig
from shieldpay.domains.fraud.models import (
    AnalysisReport,
    FlaggedTransaction,
    PatternType,
    QRArtifactCreate,
)
from shieldpay.domains.fraud.scorer import FraudScorer
from tests.conftest import make_create

CONFIG = FraudConfig()


@pytest.fixture
def scorer(repository):
    return FraudScorer(repository, config=CONFIG)


def _qr(risk_score: int) -> QRArtifactCreate:
    return QRArtifactCreate(filename="qr.png", risk_score=risk_score, confidence="70.00")


class TestSubmit:
    @pytest.mark.asyncio
    async def test_submit_does_not_score(self, scorer):
        tx = await scorer.submit(make_create())
        assert tx.id == 1
        assert tx.risk_score is None

    @pytest.mark.asyncio
    async def test_submit_many_preserves_order(self, scorer):
        items = [make_create(f"S{i}", "R") for i in range(4)]
        stored = await scorer.submit_many(items)
        assert [tx.sender_id for tx in stored] == ["S0", "S1", "S2", "S3"]
        assert len(await scorer.list_transactions()) == 4


class TestAnalyzeAll:
    @pytest.mark.asyncio
    async def test_alerts_created_reported(self, repository):
        report = AnalysisReport(
            total_analyzed=1,
            high_risk_count=1,
            flagged_transactions=[
                FlaggedTransaction(
                    id=1, pattern=PatternType.MULE_NETWORK, risk_score=90, description="d"
                )
            ],
        )
        analyzer = MagicMock()
        analyzer.analyze_all = AsyncMock(return_value=report)
        emitter = MagicMock()
        emitter.emit_for_report = AsyncMock(return_value=[MagicMock()])

        scorer = FraudScorer(repository, CONFIG, emitter=emitter, analyzer=analyzer)
        result = await scorer.analyze_all()

        emitter.emit_for_report.assert_awaited_once_with(report)
        assert result.alerts_created == 1

    @pytest.mark.asyncio
    async def test_empty_history(self, scorer):
        report = await scorer.analyze_all()
        assert report.total_analyzed == 0
        assert report.alerts_created == 0


class TestQRArtifacts:
    @pytest.mark.asyncio
    async def test_low_risk_recorded_without_alert(self, scorer, repository):
        artifact = await scorer.record_qr_artifact(_qr(30))
        assert artifact.id == 1
        assert artifact.scanned_at is not None
        assert await repository.list_alerts() == []
        assert [a.id for a in await scorer.list_qr_artifacts()] == [1]

    @pytest.mark.asyncio
    async def test_high_risk_recorded_with_alert(self, scorer, repository):
        await scorer.record_qr_artifact(_qr(85))
        alerts = await repository.list_alerts()
        assert len(alerts) == 1
        assert alerts[0].metadata == {"qr_artifact_id": 1}
