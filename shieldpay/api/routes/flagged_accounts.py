"""Flag-account command and case review endpoints."""

from fastapi import APIRouter, Depends

from shieldpay.api.deps import get_engine
from shieldpay.domains.cases.models import FlagAccountRequest, StatusUpdateRequest
from shieldpay.engine import RiskEngine

router = APIRouter(prefix="/api/v1/flagged-accounts", tags=["cases"])


@router.post("")
async def flag_account(
    request: FlagAccountRequest,
    engine: RiskEngine = Depends(get_engine),  # noqa: B008
) -> dict:
    account = await engine.cases.flag_account(
        account_id=request.account_id,
        flag_reason=request.flag_reason,
        risk_score=request.risk_score,
    )
    return {"success": True, "flagged_account": account.model_dump(mode="json")}


@router.get("")
async def list_flagged_accounts(
    engine: RiskEngine = Depends(get_engine),  # noqa: B008
) -> list[dict]:
    accounts = await engine.cases.list_flagged_accounts()
    return [a.model_dump(mode="json") for a in accounts]


@router.patch("/{flagged_id}")
async def update_flagged_account(
    flagged_id: int,
    request: StatusUpdateRequest,
    engine: RiskEngine = Depends(get_engine),  # noqa: B008
) -> dict:
    account = await engine.cases.update_status(flagged_id, request.status, request.reviewer)
    return account.model_dump(mode="json")
