"""Dashboard statistics endpoint."""

from fastapi import APIRouter, Depends

from shieldpay.api.deps import get_engine
from shieldpay.engine import RiskEngine

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/stats")
async def dashboard_stats(engine: RiskEngine = Depends(get_engine)) -> dict:  # noqa: B008
    stats = await engine.dashboard_stats()
    return stats.model_dump()
