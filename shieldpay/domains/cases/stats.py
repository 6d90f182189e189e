"""Dashboard statistics: a read-only projection computed on every call."""

from shieldpay.db.repository import Repository
from shieldpay.domains.fraud.config import FraudConfig, default_config

from .models import AlertStatus, CaseStatus, DashboardStats


async def compute_dashboard_stats(
    repository: Repository,
    config: FraudConfig | None = None,
) -> DashboardStats:
    cfg = config or default_config
    transactions = await repository.list_transactions()
    active_alerts = await repository.list_alerts(status=AlertStatus.ACTIVE)
    flagged = await repository.list_flagged_accounts()
    qr_artifacts = await repository.list_qr_artifacts()

    scores = [tx.risk_score or 0 for tx in transactions]

    return DashboardStats(
        total_transactions=len(transactions),
        suspicious_count=sum(1 for s in scores if s > cfg.dashboard.suspicious_above),
        high_risk_count=sum(1 for s in scores if s > cfg.dashboard.high_risk_above),
        active_alerts=len(active_alerts),
        pending_flagged_accounts=sum(1 for a in flagged if a.status == CaseStatus.PENDING),
        qr_scanned=len(qr_artifacts),
    )
