"""Wires the scorer, case manager and stats around one repository."""

from shieldpay.db.repository import InMemoryRepository, Repository
from shieldpay.domains.cases.manager import CaseManager
from shieldpay.domains.cases.models import DashboardStats
from shieldpay.domains.cases.stats import compute_dashboard_stats
from shieldpay.domains.fraud.alerts import AlertEmitter
from shieldpay.domains.fraud.config import FraudConfig, default_config
from shieldpay.domains.fraud.scorer import FraudScorer


class RiskEngine:
    """The core's external interface: ingest, analyze, flag, review, stats."""

    def __init__(
        self,
        repository: Repository,
        config: FraudConfig | None = None,
        kafka_producer=None,
    ) -> None:
        self.repository = repository
        self.config = config or default_config
        self.emitter = AlertEmitter(repository, config=self.config, kafka_producer=kafka_producer)
        self.scorer = FraudScorer(repository, config=self.config, emitter=self.emitter)
        self.cases = CaseManager(repository, emitter=self.emitter)

    async def dashboard_stats(self) -> DashboardStats:
        return await compute_dashboard_stats(self.repository, self.config)

    async def close(self) -> None:
        await self.repository.close()


def build_engine(
    storage_backend: str = "memory",
    config: FraudConfig | None = None,
    kafka_producer=None,
) -> RiskEngine:
    """Construct an engine for the given storage backend ("memory" or "sql")."""
    if storage_backend == "memory":
        repository: Repository = InMemoryRepository()
    elif storage_backend == "sql":
        from shieldpay.db.database import get_session_factory
        from shieldpay.db.sql_repository import SqlRepository

        repository = SqlRepository(get_session_factory())
    else:
        raise ValueError(f"Unknown storage backend: {storage_backend}")
    return RiskEngine(repository, config=config, kafka_producer=kafka_producer)
