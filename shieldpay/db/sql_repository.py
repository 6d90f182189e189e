"""Async SQLAlchemy implementation of the Repository contract."""

from datetime import UTC, datetime

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shieldpay.domains.cases.models import (
    OPEN_CASE_STATUSES,
    Alert,
    AlertCreate,
    AlertStatus,
    AlertType,
    CaseStatus,
    FlaggedAccount,
    FlaggedAccountCreate,
)
from shieldpay.domains.fraud.models import (
    PatternType,
    QRArtifact,
    QRArtifactCreate,
    Transaction,
    TransactionCreate,
)
from shieldpay.shared.errors import ValidationError

from .models import AlertDB, FlaggedAccountDB, QRArtifactDB, TransactionDB
from .repository import Repository

logger = structlog.get_logger()


def _to_transaction(row: TransactionDB) -> Transaction:
    return Transaction(
        id=row.id,
        sender_id=row.sender_id,
        receiver_id=row.receiver_id,
        amount=row.amount,
        timestamp=row.timestamp,
        device_id=row.device_id,
        geo_ip=row.geo_ip,
        risk_score=row.risk_score,
        pattern_type=row.pattern_type,
        flagged=bool(row.flagged),
        metadata=row.metadata_ or {},
    )


def _to_qr_artifact(row: QRArtifactDB) -> QRArtifact:
    return QRArtifact(
        id=row.id,
        filename=row.filename,
        upi_id=row.upi_id,
        merchant_name=row.merchant_name,
        amount=row.amount,
        risk_score=row.risk_score,
        classification=row.classification,
        steganography_detected=bool(row.steganography_detected),
        confidence=row.confidence,
        scanned_at=row.scanned_at,
        metadata=row.metadata_ or {},
    )


def _to_alert(row: AlertDB) -> Alert:
    return Alert(
        id=row.id,
        type=row.type,
        severity=row.severity,
        title=row.title,
        description=row.description,
        account_id=row.account_id,
        risk_score=row.risk_score,
        status=row.status,
        acknowledged=bool(row.acknowledged),
        created_at=row.created_at,
        metadata=row.metadata_ or {},
    )


def _to_flagged_account(row: FlaggedAccountDB) -> FlaggedAccount:
    return FlaggedAccount(
        id=row.id,
        account_id=row.account_id,
        flag_reason=row.flag_reason,
        risk_score=row.risk_score,
        status=row.status,
        flagged_at=row.flagged_at,
        reviewed_at=row.reviewed_at,
        reviewed_by=row.reviewed_by,
        metadata=row.metadata_ or {},
    )


def _open_case_conflict(account_id: str | None = None, **context) -> ValidationError:
    logger.warning("open_case_conflict", account_id=account_id, **context)
    return ValidationError(
        f"Account {account_id} already has an open case"
        if account_id
        else "Another open case exists for this account",
        account_id=account_id,
        **context,
    )


class SqlRepository(Repository):
    """One short-lived session per call; every write commits on its own."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _add(self, row):
        async with self._session_factory() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return row

    async def add_transaction(self, data: TransactionCreate) -> Transaction:
        row = TransactionDB(
            sender_id=data.sender_id,
            receiver_id=data.receiver_id,
            amount=data.amount,
            timestamp=data.timestamp or datetime.now(UTC),
            device_id=data.device_id,
            geo_ip=data.geo_ip,
            flagged=False,
            metadata_=dict(data.metadata),
        )
        return _to_transaction(await self._add(row))

    async def list_transactions(self, pattern: PatternType | None = None) -> list[Transaction]:
        stmt = select(TransactionDB).order_by(TransactionDB.id.asc())
        if pattern is not None:
            stmt = stmt.where(TransactionDB.pattern_type == pattern.value)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_transaction(row) for row in result.scalars().all()]

    async def update_transaction_risk(
        self, transaction_id: int, risk_score: int, pattern: PatternType
    ) -> Transaction | None:
        # Single UPDATE: both fields land together or not at all
        stmt = (
            update(TransactionDB)
            .where(TransactionDB.id == transaction_id)
            .values(risk_score=risk_score, pattern_type=pattern.value)
            .returning(TransactionDB)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            await session.commit()
            return _to_transaction(row) if row is not None else None

    async def flag_transaction(self, transaction_id: int) -> Transaction | None:
        stmt = (
            update(TransactionDB)
            .where(TransactionDB.id == transaction_id)
            .values(flagged=True)
            .returning(TransactionDB)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            await session.commit()
            return _to_transaction(row) if row is not None else None

    async def add_qr_artifact(self, data: QRArtifactCreate) -> QRArtifact:
        row = QRArtifactDB(
            filename=data.filename,
            upi_id=data.upi_id,
            merchant_name=data.merchant_name,
            amount=data.amount,
            risk_score=data.risk_score,
            classification=data.classification.value,
            steganography_detected=data.steganography_detected,
            confidence=data.confidence,
            scanned_at=datetime.now(UTC),
            metadata_=dict(data.metadata),
        )
        return _to_qr_artifact(await self._add(row))

    async def list_qr_artifacts(self) -> list[QRArtifact]:
        async with self._session_factory() as session:
            result = await session.execute(select(QRArtifactDB).order_by(QRArtifactDB.id.asc()))
            return [_to_qr_artifact(row) for row in result.scalars().all()]

    async def add_alert(self, data: AlertCreate) -> Alert:
        row = AlertDB(
            type=data.type.value,
            severity=data.severity.value,
            title=data.title,
            description=data.description,
            account_id=data.account_id,
            risk_score=data.risk_score,
            status=AlertStatus.ACTIVE.value,
            acknowledged=False,
            created_at=datetime.now(UTC),
            metadata_=dict(data.metadata),
        )
        return _to_alert(await self._add(row))

    async def list_alerts(self, status: AlertStatus | None = None) -> list[Alert]:
        stmt = select(AlertDB).order_by(AlertDB.id.asc())
        if status is not None:
            stmt = stmt.where(AlertDB.status == status.value)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_alert(row) for row in result.scalars().all()]

    async def acknowledge_alert(self, alert_id: int) -> Alert | None:
        stmt = (
            update(AlertDB)
            .where(AlertDB.id == alert_id)
            .values(status=AlertStatus.ACKNOWLEDGED.value, acknowledged=True)
            .returning(AlertDB)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            await session.commit()
            return _to_alert(row) if row is not None else None

    async def transaction_ids_with_alerts(self) -> set[int]:
        stmt = select(AlertDB.metadata_).where(AlertDB.type == AlertType.TRANSACTION_FRAUD.value)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return {
                meta["transaction_id"]
                for meta in result.scalars().all()
                if meta and "transaction_id" in meta
            }

    async def add_flagged_account(self, data: FlaggedAccountCreate) -> FlaggedAccount:
        row = FlaggedAccountDB(
            account_id=data.account_id,
            flag_reason=data.flag_reason,
            risk_score=data.risk_score,
            status=CaseStatus.PENDING.value,
            flagged_at=datetime.now(UTC),
            metadata_=dict(data.metadata),
        )
        try:
            row = await self._add(row)
        except IntegrityError:
            raise _open_case_conflict(data.account_id) from None
        return _to_flagged_account(row)

    async def delete_flagged_account(self, flagged_id: int) -> bool:
        stmt = (
            delete(FlaggedAccountDB)
            .where(FlaggedAccountDB.id == flagged_id)
            .returning(FlaggedAccountDB.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            deleted = result.scalar_one_or_none()
            await session.commit()
            return deleted is not None

    async def list_flagged_accounts(self) -> list[FlaggedAccount]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(FlaggedAccountDB).order_by(FlaggedAccountDB.id.asc())
            )
            return [_to_flagged_account(row) for row in result.scalars().all()]

    async def find_open_flagged_account(self, account_id: str) -> FlaggedAccount | None:
        stmt = select(FlaggedAccountDB).where(
            FlaggedAccountDB.account_id == account_id,
            FlaggedAccountDB.status.in_([s.value for s in OPEN_CASE_STATUSES]),
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalars().first()
            return _to_flagged_account(row) if row is not None else None

    async def update_flagged_account_status(
        self,
        flagged_id: int,
        status: CaseStatus,
        reviewed_at: datetime,
        reviewed_by: str | None = None,
    ) -> FlaggedAccount | None:
        values = {"status": status.value, "reviewed_at": reviewed_at}
        if reviewed_by:
            values["reviewed_by"] = reviewed_by
        stmt = (
            update(FlaggedAccountDB)
            .where(FlaggedAccountDB.id == flagged_id)
            .values(**values)
            .returning(FlaggedAccountDB)
        )
        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                row = result.scalar_one_or_none()
                await session.commit()
            except IntegrityError:
                raise _open_case_conflict(flagged_id=flagged_id) from None
            return _to_flagged_account(row) if row is not None else None

    async def close(self) -> None:
        from .database import get_engine

        await get_engine().dispose()
        logger.info("sql_repository_closed")
