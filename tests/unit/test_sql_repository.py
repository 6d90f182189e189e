"""Tests for the SQLAlchemy repository against mocked async sessions."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from shieldpay.db.models import AlertDB, FlaggedAccountDB, TransactionDB
from shieldpay.db.sql_repository import SqlRepository
from shieldpay.domains.cases.models import (
    AlertCreate,
    AlertSeverity,
    AlertStatus,
    AlertType,
    CaseStatus,
    FlaggedAccountCreate,
)
from shieldpay.domains.fraud.models import PatternType
from shieldpay.shared.errors import ValidationError
from tests.conftest import NOW, make_create


def _mock_session(result=None):
    session = AsyncMock()
    session.add = MagicMock()
    session.commit = AsyncMock()
    session.execute = AsyncMock(return_value=result or MagicMock())

    async def _refresh(row):
        row.id = 1

    session.refresh = AsyncMock(side_effect=_refresh)
    return session


def _factory(session):
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory


def _transaction_row(**kwargs) -> TransactionDB:
    defaults = {
        "id": 3,
        "sender_id": "a",
        "receiver_id": "b",
        "amount": Decimal("100.00"),
        "timestamp": NOW,
        "device_id": None,
        "geo_ip": None,
        "risk_score": None,
        "pattern_type": None,
        "flagged": False,
        "metadata_": {},
    }
    defaults.update(kwargs)
    return TransactionDB(**defaults)


class TestSqlRepository:
    @pytest.mark.asyncio
    async def test_add_transaction_commits_and_maps(self):
        session = _mock_session()
        repo = SqlRepository(_factory(session))

        tx = await repo.add_transaction(make_create("a", "b", "250.00"))

        session.add.assert_called_once()
        row = session.add.call_args[0][0]
        assert isinstance(row, TransactionDB)
        assert row.flagged is False
        session.commit.assert_awaited_once()
        assert tx.id == 1
        assert tx.amount == Decimal("250.00")
        assert tx.risk_score is None

    @pytest.mark.asyncio
    async def test_list_transactions_maps_rows(self):
        result = MagicMock()
        result.scalars.return_value = MagicMock(
            all=MagicMock(
                return_value=[_transaction_row(risk_score=65, pattern_type="smurfing")]
            )
        )
        repo = SqlRepository(_factory(_mock_session(result)))

        transactions = await repo.list_transactions(pattern=PatternType.SMURFING)

        assert len(transactions) == 1
        assert transactions[0].pattern_type == PatternType.SMURFING
        assert transactions[0].risk_score == 65

    @pytest.mark.asyncio
    async def test_update_risk_unknown_id_returns_none(self):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        session = _mock_session(result)
        repo = SqlRepository(_factory(session))

        assert await repo.update_transaction_risk(99, 50, PatternType.NORMAL) is None
        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_risk_returns_updated_row(self):
        result = MagicMock()
        result.scalar_one_or_none.return_value = _transaction_row(
            risk_score=90, pattern_type="mule-network"
        )
        repo = SqlRepository(_factory(_mock_session(result)))

        tx = await repo.update_transaction_risk(3, 90, PatternType.MULE_NETWORK)
        assert tx.risk_score == 90
        assert tx.pattern_type == PatternType.MULE_NETWORK

    @pytest.mark.asyncio
    async def test_add_alert_starts_active(self):
        session = _mock_session()
        repo = SqlRepository(_factory(session))

        alert = await repo.add_alert(
            AlertCreate(
                type=AlertType.TRANSACTION_FRAUD,
                severity=AlertSeverity.CRITICAL,
                title="t",
                description="d",
                metadata={"transaction_id": 3},
            )
        )

        row = session.add.call_args[0][0]
        assert isinstance(row, AlertDB)
        assert row.status == "active"
        assert alert.status == AlertStatus.ACTIVE
        assert alert.metadata == {"transaction_id": 3}

    @pytest.mark.asyncio
    async def test_transaction_ids_with_alerts(self):
        result = MagicMock()
        result.scalars.return_value = MagicMock(
            all=MagicMock(return_value=[{"transaction_id": 4}, {}, None, {"transaction_id": 9}])
        )
        repo = SqlRepository(_factory(_mock_session(result)))

        assert await repo.transaction_ids_with_alerts() == {4, 9}

    @pytest.mark.asyncio
    async def test_update_flagged_account_status(self):
        reviewed_at = datetime.now(UTC)
        result = MagicMock()
        result.scalar_one_or_none.return_value = FlaggedAccountDB(
            id=2,
            account_id="acct-1",
            flag_reason="r",
            risk_score=50,
            status="resolved",
            flagged_at=NOW,
            reviewed_at=reviewed_at,
            reviewed_by="analyst-1",
            metadata_={},
        )
        session = _mock_session(result)
        repo = SqlRepository(_factory(session))

        account = await repo.update_flagged_account_status(
            2, CaseStatus.RESOLVED, reviewed_at, "analyst-1"
        )

        assert account.status == CaseStatus.RESOLVED
        assert account.reviewed_by == "analyst-1"
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_open_case_conflict_becomes_validation_error(self):
        session = _mock_session()
        session.commit.side_effect = IntegrityError(
            "INSERT INTO flagged_accounts", {}, Exception("duplicate key")
        )
        repo = SqlRepository(_factory(session))

        with pytest.raises(ValidationError, match="already has an open case"):
            await repo.add_flagged_account(
                FlaggedAccountCreate(account_id="acct-1", flag_reason="r", risk_score=50)
            )

    @pytest.mark.asyncio
    async def test_reopen_conflict_becomes_validation_error(self):
        session = _mock_session()
        session.execute.side_effect = IntegrityError(
            "UPDATE flagged_accounts", {}, Exception("duplicate key")
        )
        repo = SqlRepository(_factory(session))

        with pytest.raises(ValidationError):
            await repo.update_flagged_account_status(2, CaseStatus.PENDING, datetime.now(UTC))

    @pytest.mark.asyncio
    async def test_delete_flagged_account(self):
        result = MagicMock()
        result.scalar_one_or_none.return_value = 2
        session = _mock_session(result)
        repo = SqlRepository(_factory(session))

        assert await repo.delete_flagged_account(2) is True
        session.commit.assert_awaited_once()

        result.scalar_one_or_none.return_value = None
        assert await repo.delete_flagged_account(99) is False


class TestOpenCaseIndex:
    def test_partial_unique_index_on_open_cases(self):
        indexes = {ix.name: ix for ix in FlaggedAccountDB.__table__.indexes}
        index = indexes["uq_flagged_accounts_open_account"]
        assert index.unique is True
        assert [c.name for c in index.columns] == ["account_id"]
        where = str(index.dialect_options["postgresql"]["where"])
        assert "pending" in where
        assert "under-investigation" in where
