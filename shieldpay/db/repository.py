"""Repository interface and the in-memory implementation.

The engine never holds a process-wide store: a Repository is constructed
explicitly and handed to the analyzer, emitter and case manager.
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime

from shieldpay.domains.cases.models import (
    OPEN_CASE_STATUSES,
    Alert,
    AlertCreate,
    AlertStatus,
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


class Repository(ABC):
    """Persistence contract for transactions, QR artifacts, alerts and cases.

    Update methods return None for an unknown id and leave the store
    unchanged; raising NotFound is the caller's decision.
    """

    # Transactions

    @abstractmethod
    async def add_transaction(self, data: TransactionCreate) -> Transaction: ...

    @abstractmethod
    async def list_transactions(self, pattern: PatternType | None = None) -> list[Transaction]: ...

    @abstractmethod
    async def update_transaction_risk(
        self, transaction_id: int, risk_score: int, pattern: PatternType
    ) -> Transaction | None:
        """Write risk_score and pattern_type together, or not at all."""

    @abstractmethod
    async def flag_transaction(self, transaction_id: int) -> Transaction | None: ...

    # QR artifacts

    @abstractmethod
    async def add_qr_artifact(self, data: QRArtifactCreate) -> QRArtifact: ...

    @abstractmethod
    async def list_qr_artifacts(self) -> list[QRArtifact]: ...

    # Alerts

    @abstractmethod
    async def add_alert(self, data: AlertCreate) -> Alert: ...

    @abstractmethod
    async def list_alerts(self, status: AlertStatus | None = None) -> list[Alert]: ...

    @abstractmethod
    async def acknowledge_alert(self, alert_id: int) -> Alert | None: ...

    @abstractmethod
    async def transaction_ids_with_alerts(self) -> set[int]:
        """Transaction ids already referenced by a transaction-fraud alert."""

    # Flagged accounts

    @abstractmethod
    async def add_flagged_account(self, data: FlaggedAccountCreate) -> FlaggedAccount:
        """Raises ValidationError if the account already has an open case."""

    @abstractmethod
    async def delete_flagged_account(self, flagged_id: int) -> bool:
        """Remove a case record. False if the id is unknown."""

    @abstractmethod
    async def list_flagged_accounts(self) -> list[FlaggedAccount]: ...

    @abstractmethod
    async def find_open_flagged_account(self, account_id: str) -> FlaggedAccount | None: ...

    @abstractmethod
    async def update_flagged_account_status(
        self,
        flagged_id: int,
        status: CaseStatus,
        reviewed_at: datetime,
        reviewed_by: str | None = None,
    ) -> FlaggedAccount | None: ...

    async def close(self) -> None:
        """Release resources held by the repository."""


class InMemoryRepository(Repository):
    """Dict-backed repository. Returned models are copies of stored state."""

    def __init__(self) -> None:
        self._transactions: dict[int, Transaction] = {}
        self._qr_artifacts: dict[int, QRArtifact] = {}
        self._alerts: dict[int, Alert] = {}
        self._flagged: dict[int, FlaggedAccount] = {}
        self._next_ids = {"transaction": 1, "qr": 1, "alert": 1, "flagged": 1}

    def _next_id(self, kind: str) -> int:
        value = self._next_ids[kind]
        self._next_ids[kind] = value + 1
        return value

    async def add_transaction(self, data: TransactionCreate) -> Transaction:
        tx = Transaction(
            id=self._next_id("transaction"),
            sender_id=data.sender_id,
            receiver_id=data.receiver_id,
            amount=data.amount,
            timestamp=data.timestamp or datetime.now(UTC),
            device_id=data.device_id,
            geo_ip=data.geo_ip,
            metadata=dict(data.metadata),
        )
        self._transactions[tx.id] = tx
        return tx.model_copy(deep=True)

    async def list_transactions(self, pattern: PatternType | None = None) -> list[Transaction]:
        return [
            tx.model_copy(deep=True)
            for tx in self._transactions.values()
            if pattern is None or tx.pattern_type == pattern
        ]

    async def update_transaction_risk(
        self, transaction_id: int, risk_score: int, pattern: PatternType
    ) -> Transaction | None:
        tx = self._transactions.get(transaction_id)
        if tx is None:
            return None
        updated = tx.model_copy(update={"risk_score": risk_score, "pattern_type": pattern})
        self._transactions[transaction_id] = updated
        return updated.model_copy(deep=True)

    async def flag_transaction(self, transaction_id: int) -> Transaction | None:
        tx = self._transactions.get(transaction_id)
        if tx is None:
            return None
        tx.flagged = True
        return tx.model_copy(deep=True)

    async def add_qr_artifact(self, data: QRArtifactCreate) -> QRArtifact:
        artifact = QRArtifact(
            id=self._next_id("qr"),
            scanned_at=datetime.now(UTC),
            **data.model_dump(),
        )
        self._qr_artifacts[artifact.id] = artifact
        return artifact.model_copy(deep=True)

    async def list_qr_artifacts(self) -> list[QRArtifact]:
        return [a.model_copy(deep=True) for a in self._qr_artifacts.values()]

    async def add_alert(self, data: AlertCreate) -> Alert:
        alert = Alert(
            id=self._next_id("alert"),
            created_at=datetime.now(UTC),
            **data.model_dump(),
        )
        self._alerts[alert.id] = alert
        return alert.model_copy(deep=True)

    async def list_alerts(self, status: AlertStatus | None = None) -> list[Alert]:
        return [
            a.model_copy(deep=True)
            for a in self._alerts.values()
            if status is None or a.status == status
        ]

    async def acknowledge_alert(self, alert_id: int) -> Alert | None:
        alert = self._alerts.get(alert_id)
        if alert is None:
            return None
        alert.status = AlertStatus.ACKNOWLEDGED
        alert.acknowledged = True
        return alert.model_copy(deep=True)

    async def transaction_ids_with_alerts(self) -> set[int]:
        return {
            a.metadata["transaction_id"]
            for a in self._alerts.values()
            if "transaction_id" in a.metadata
        }

    def _open_case_for(self, account_id: str, exclude_id: int | None = None) -> FlaggedAccount | None:
        for account in self._flagged.values():
            if (
                account.account_id == account_id
                and account.status in OPEN_CASE_STATUSES
                and account.id != exclude_id
            ):
                return account
        return None

    async def add_flagged_account(self, data: FlaggedAccountCreate) -> FlaggedAccount:
        # No await between the check and the insert
        if self._open_case_for(data.account_id) is not None:
            raise ValidationError(
                f"Account {data.account_id} already has an open case",
                account_id=data.account_id,
            )
        account = FlaggedAccount(
            id=self._next_id("flagged"),
            flagged_at=datetime.now(UTC),
            **data.model_dump(),
        )
        self._flagged[account.id] = account
        return account.model_copy(deep=True)

    async def delete_flagged_account(self, flagged_id: int) -> bool:
        return self._flagged.pop(flagged_id, None) is not None

    async def list_flagged_accounts(self) -> list[FlaggedAccount]:
        return [a.model_copy(deep=True) for a in self._flagged.values()]

    async def find_open_flagged_account(self, account_id: str) -> FlaggedAccount | None:
        account = self._open_case_for(account_id)
        return account.model_copy(deep=True) if account is not None else None

    async def update_flagged_account_status(
        self,
        flagged_id: int,
        status: CaseStatus,
        reviewed_at: datetime,
        reviewed_by: str | None = None,
    ) -> FlaggedAccount | None:
        account = self._flagged.get(flagged_id)
        if account is None:
            return None
        if status in OPEN_CASE_STATUSES and self._open_case_for(account.account_id, flagged_id):
            raise ValidationError(
                f"Account {account.account_id} already has an open case",
                account_id=account.account_id,
                flagged_id=flagged_id,
            )
        account.status = status
        account.reviewed_at = reviewed_at
        if reviewed_by:
            account.reviewed_by = reviewed_by
        return account.model_copy(deep=True)
