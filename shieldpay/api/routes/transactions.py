"""Transaction ingest and listing endpoints."""

from fastapi import APIRouter, Depends, Query

from shieldpay.api.deps import get_engine
from shieldpay.domains.fraud.models import PatternType, TransactionCreate
from shieldpay.engine import RiskEngine

router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


@router.post("")
async def submit_transaction(
    request: TransactionCreate,
    engine: RiskEngine = Depends(get_engine),  # noqa: B008
) -> dict:
    tx = await engine.scorer.submit(request)
    return tx.model_dump(mode="json")


@router.post("/batch")
async def submit_transactions(
    request: list[TransactionCreate],
    engine: RiskEngine = Depends(get_engine),  # noqa: B008
) -> dict:
    transactions = await engine.scorer.submit_many(request)
    return {
        "submitted": len(transactions),
        "transactions": [tx.model_dump(mode="json") for tx in transactions],
    }


@router.get("")
async def list_transactions(
    pattern: PatternType | None = Query(default=None),  # noqa: B008
    engine: RiskEngine = Depends(get_engine),  # noqa: B008
) -> list[dict]:
    transactions = await engine.scorer.list_transactions(pattern=pattern)
    return [tx.model_dump(mode="json") for tx in transactions]
