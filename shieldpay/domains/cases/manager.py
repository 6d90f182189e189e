"""Case lifecycle: alert acknowledgement and flagged-account review."""

from datetime import UTC, datetime

import structlog
from pydantic import ValidationError as PydanticValidationError

from shieldpay.db.repository import Repository
from shieldpay.domains.fraud.alerts import AlertEmitter
from shieldpay.shared.errors import NotFound, ValidationError

from .models import (
    Alert,
    AlertStatus,
    CaseStatus,
    FlagAccountRequest,
    FlaggedAccount,
    FlaggedAccountCreate,
)

logger = structlog.get_logger()


class CaseManager:
    """Owns the Alert and FlaggedAccount state machines.

    Alert: active -> acknowledged (idempotent).
    FlaggedAccount: any status -> any status. Cases can be re-opened, and
    every transition refreshes reviewed_at.
    """

    def __init__(self, repository: Repository, emitter: AlertEmitter) -> None:
        self._repository = repository
        self._emitter = emitter

    # Alerts

    async def list_alerts(self) -> list[Alert]:
        return await self._repository.list_alerts()

    async def list_active_alerts(self) -> list[Alert]:
        return await self._repository.list_alerts(status=AlertStatus.ACTIVE)

    async def acknowledge(self, alert_id: int) -> Alert:
        alert = await self._repository.acknowledge_alert(alert_id)
        if alert is None:
            raise NotFound(f"Alert {alert_id} not found", alert_id=alert_id)
        logger.info("alert_acknowledged", alert_id=alert_id)
        return alert

    # Flagged accounts

    async def list_flagged_accounts(self) -> list[FlaggedAccount]:
        return await self._repository.list_flagged_accounts()

    async def flag_account(
        self,
        account_id: str | None,
        flag_reason: str | None,
        risk_score: int | None,
        metadata: dict | None = None,
    ) -> FlaggedAccount:
        """Open a review case for an account and raise its companion alert."""
        try:
            request = FlagAccountRequest(
                account_id=account_id, flag_reason=flag_reason, risk_score=risk_score
            )
        except PydanticValidationError as exc:
            raise ValidationError("Malformed flag command", errors=exc.errors()) from None
        self._validate_flag(request)

        existing = await self._repository.find_open_flagged_account(request.account_id)
        if existing is not None:
            raise ValidationError(
                f"Account {request.account_id} already has an open case",
                account_id=request.account_id,
                flagged_account_id=existing.id,
            )

        account = await self._repository.add_flagged_account(
            FlaggedAccountCreate(
                account_id=request.account_id,
                flag_reason=request.flag_reason,
                risk_score=request.risk_score,
                metadata=metadata or {},
            )
        )
        try:
            await self._emitter.emit_for_flagged_account(account)
        except Exception:
            # A case without its companion alert must not stay open
            await self._repository.delete_flagged_account(account.id)
            logger.exception(
                "flag_account_rolled_back",
                flagged_account_id=account.id,
                account_id=account.account_id,
            )
            raise

        logger.info(
            "account_flagged",
            flagged_account_id=account.id,
            account_id=account.account_id,
            risk_score=account.risk_score,
        )
        return account

    async def update_status(
        self,
        flagged_id: int,
        status: CaseStatus | str,
        reviewer: str | None = None,
    ) -> FlaggedAccount:
        try:
            new_status = CaseStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown case status: {status}", status=str(status)) from None

        account = await self._repository.update_flagged_account_status(
            flagged_id,
            new_status,
            reviewed_at=datetime.now(UTC),
            reviewed_by=reviewer,
        )
        if account is None:
            raise NotFound(f"Flagged account {flagged_id} not found", flagged_id=flagged_id)

        logger.info(
            "flagged_account_status_updated",
            flagged_account_id=flagged_id,
            new_status=new_status.value,
            reviewed_by=reviewer,
        )
        return account

    @staticmethod
    def _validate_flag(request: FlagAccountRequest) -> None:
        missing = [
            name
            for name, value in (
                ("account_id", request.account_id),
                ("flag_reason", request.flag_reason),
                ("risk_score", request.risk_score),
            )
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing=missing)
        if not 0 <= request.risk_score <= 100:
            raise ValidationError(
                "risk_score must be between 0 and 100", risk_score=request.risk_score
            )
