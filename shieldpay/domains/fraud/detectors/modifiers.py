"""Amount and timing modifiers. They add risk but never set the pattern."""

from ..config import FraudConfig
from ..history import TransactionHistory
from ..models import DetectorResult, Transaction
from .base import PatternDetector


class RoundAmountModifier(PatternDetector):
    """Known structuring amounts and exact multiples of the round unit."""

    detector_id = "round_amount"
    structural = False

    def evaluate(
        self,
        subject: Transaction,
        history: TransactionHistory,
        config: FraudConfig,
    ) -> DetectorResult:
        settings = config.modifiers
        amount = subject.amount

        if amount not in settings.suspicious_amounts and amount % settings.round_amount_unit != 0:
            return self._not_matched()

        return self._matched(
            score=settings.round_amount_score,
            description="Suspicious amount pattern",
            evidence={"amount": str(amount)},
        )


class OddHourModifier(PatternDetector):
    """Transactions timestamped late at night or early in the morning."""

    detector_id = "odd_hour"
    structural = False

    def evaluate(
        self,
        subject: Transaction,
        history: TransactionHistory,
        config: FraudConfig,
    ) -> DetectorResult:
        settings = config.modifiers
        hour = subject.timestamp.hour

        if settings.odd_hour_start <= hour <= settings.odd_hour_end:
            return self._not_matched()

        return self._matched(
            score=settings.odd_hour_score,
            description="Unusual timing",
            evidence={"hour": hour},
        )
