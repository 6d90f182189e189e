"""End-to-end risk flows through the engine.

Each test class drives a realistic sequence through ingest, analysis,
alerting and case review:
  E2E-1: Smurfing burst from one sender
  E2E-2: Flash laundering through a shared device
  E2E-3: Analyst review of a flagged account
  E2E-4: Report invariants over mixed traffic
"""

from datetime import timedelta

import pytest

from shieldpay.domains.cases.models import AlertSeverity, AlertType, CaseStatus
from shieldpay.domains.fraud.models import PatternType
from shieldpay.shared.errors import NotFound
from tests.conftest import NOW, flash_mule_dataset, make_create

pytestmark = pytest.mark.integration


class TestSmurfingBurst:
    """E2E-1: twelve small transfers from A1 inside one hour."""

    @pytest.mark.asyncio
    async def test_every_burst_transaction_is_smurfing(self, engine):
        await engine.scorer.submit_many(
            [
                make_create("A1", f"R{i}", "2000.00", NOW + timedelta(minutes=i * 4))
                for i in range(12)
            ]
        )

        report = await engine.scorer.analyze_all()

        assert report.total_analyzed == 12
        assert report.patterns.smurfing == 12
        # 30 on its own stays below the high-risk cut
        assert report.high_risk_count == 0
        assert report.suspicious_count == 0
        assert report.alerts_created == 0

        transactions = await engine.scorer.list_transactions(pattern=PatternType.SMURFING)
        assert len(transactions) == 12
        assert all(tx.risk_score == 30 for tx in transactions)

    @pytest.mark.asyncio
    async def test_eleven_transactions_at_five_thousand(self, engine):
        await engine.scorer.submit_many(
            [make_create("S", f"R{i}", "5000.00", NOW + timedelta(minutes=i)) for i in range(11)]
        )
        await engine.scorer.analyze_all()

        for tx in await engine.scorer.list_transactions():
            assert tx.risk_score >= 30
            assert tx.pattern_type == PatternType.SMURFING

    @pytest.mark.asyncio
    async def test_ten_transactions_stay_normal(self, engine):
        await engine.scorer.submit_many(
            [make_create("S", f"R{i}", "5000.00", NOW + timedelta(minutes=i)) for i in range(10)]
        )
        report = await engine.scorer.analyze_all()
        assert report.patterns.smurfing == 0


class TestFlashLaundering:
    """E2E-2: a 30,000 transfer at 03:00 hitting flash, mule and both modifiers."""

    @pytest.mark.asyncio
    async def test_single_critical_alert(self, engine):
        await engine.scorer.submit_many(flash_mule_dataset())

        report = await engine.scorer.analyze_all()

        assert report.high_risk_count == 1
        assert report.patterns.flash_laundering == 0
        assert report.patterns.mule_networks == 7
        flagged = report.flagged_transactions[0]
        assert flagged.risk_score == 90
        assert flagged.pattern == PatternType.MULE_NETWORK
        assert flagged.description == (
            "Rapid circular transfers detected. "
            "Multiple accounts on same device detected. "
            "Suspicious amount pattern. "
            "Unusual timing"
        )

        alerts = await engine.cases.list_active_alerts()
        assert len(alerts) == 1
        assert alerts[0].type == AlertType.TRANSACTION_FRAUD
        assert alerts[0].severity == AlertSeverity.CRITICAL

        subject = (await engine.scorer.list_transactions())[0]
        assert subject.flagged is True

    @pytest.mark.asyncio
    async def test_rerun_does_not_duplicate_alerts(self, engine):
        await engine.scorer.submit_many(flash_mule_dataset())
        first = await engine.scorer.analyze_all()
        second = await engine.scorer.analyze_all()

        assert first.alerts_created == 1
        assert second.alerts_created == 0
        assert second.flagged_transactions == first.flagged_transactions
        assert len(await engine.cases.list_alerts()) == 1


class TestAnalystReview:
    """E2E-3: flag, investigate, resolve, acknowledge."""

    @pytest.mark.asyncio
    async def test_review_lifecycle(self, engine):
        account = await engine.cases.flag_account("acct-A", "flash laundering", 90)
        stats = await engine.dashboard_stats()
        assert stats.pending_flagged_accounts == 1
        assert stats.active_alerts == 1

        await engine.cases.update_status(account.id, CaseStatus.UNDER_INVESTIGATION, "analyst-1")
        resolved = await engine.cases.update_status(account.id, CaseStatus.RESOLVED)
        assert resolved.reviewed_by == "analyst-1"

        alert = (await engine.cases.list_alerts())[0]
        await engine.cases.acknowledge(alert.id)

        stats = await engine.dashboard_stats()
        assert stats.pending_flagged_accounts == 0
        assert stats.active_alerts == 0

    @pytest.mark.asyncio
    async def test_unknown_case_leaves_store_unchanged(self, engine):
        await engine.cases.flag_account("acct-A", "reason", 40)
        before = await engine.cases.list_flagged_accounts()
        with pytest.raises(NotFound):
            await engine.cases.update_status(999, CaseStatus.RESOLVED)
        assert await engine.cases.list_flagged_accounts() == before


class TestReportInvariants:
    """E2E-4: totals and bucket bounds over mixed traffic."""

    @pytest.mark.asyncio
    async def test_mixed_traffic(self, engine):
        items = flash_mule_dataset()
        items += [
            make_create("A1", f"R{i}", "2000.00", NOW + timedelta(minutes=i)) for i in range(12)
        ]
        items += [make_create(f"solo-{i}", "shop", "49.99") for i in range(5)]
        await engine.scorer.submit_many(items)

        report = await engine.scorer.analyze_all()

        assert report.total_analyzed == len(items)
        assert report.failed_count == 0
        assert report.suspicious_count + report.high_risk_count <= report.total_analyzed
        assert report.patterns.circular_transfers == 0
        scored = await engine.scorer.list_transactions()
        assert all(tx.risk_score is not None for tx in scored)
