"""Alert listing and acknowledgement endpoints."""

from fastapi import APIRouter, Depends

from shieldpay.api.deps import get_engine
from shieldpay.engine import RiskEngine

router = APIRouter(prefix="/api/v1/alerts", tags=["alerts"])


@router.get("")
async def list_alerts(engine: RiskEngine = Depends(get_engine)) -> list[dict]:  # noqa: B008
    alerts = await engine.cases.list_alerts()
    return [a.model_dump(mode="json") for a in alerts]


@router.get("/active")
async def list_active_alerts(engine: RiskEngine = Depends(get_engine)) -> list[dict]:  # noqa: B008
    alerts = await engine.cases.list_active_alerts()
    return [a.model_dump(mode="json") for a in alerts]


@router.patch("/{alert_id}/acknowledge")
async def acknowledge_alert(
    alert_id: int,
    engine: RiskEngine = Depends(get_engine),  # noqa: B008
) -> dict:
    alert = await engine.cases.acknowledge(alert_id)
    return alert.model_dump(mode="json")
