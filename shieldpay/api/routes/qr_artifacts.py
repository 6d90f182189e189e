"""QR artifact intake. Analysis itself happens in an external service."""

from fastapi import APIRouter, Depends

from shieldpay.api.deps import get_engine
from shieldpay.domains.fraud.models import QRArtifactCreate
from shieldpay.engine import RiskEngine

router = APIRouter(prefix="/api/v1/qr-artifacts", tags=["qr"])


@router.post("")
async def record_qr_artifact(
    request: QRArtifactCreate,
    engine: RiskEngine = Depends(get_engine),  # noqa: B008
) -> dict:
    artifact = await engine.scorer.record_qr_artifact(request)
    return {"success": True, "qr_artifact": artifact.model_dump(mode="json")}


@router.get("")
async def list_qr_artifacts(engine: RiskEngine = Depends(get_engine)) -> list[dict]:  # noqa: B008
    artifacts = await engine.scorer.list_qr_artifacts()
    return [a.model_dump(mode="json") for a in artifacts]
