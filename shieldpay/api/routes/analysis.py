"""Batch analysis endpoint."""

from fastapi import APIRouter, Depends

from shieldpay.api.deps import get_engine
from shieldpay.engine import RiskEngine

router = APIRouter(prefix="/api/v1/analysis", tags=["analysis"])


@router.post("")
async def analyze_all(engine: RiskEngine = Depends(get_engine)) -> dict:  # noqa: B008
    report = await engine.scorer.analyze_all()
    return {
        "success": True,
        "analysis": report.model_dump(mode="json", by_alias=True),
    }
