"""Abstract base class for pattern detectors."""

from abc import ABC, abstractmethod

from ..config import FraudConfig
from ..history import TransactionHistory
from ..models import DetectorResult, PatternType, Transaction


class PatternDetector(ABC):
    """Base class for all detectors.

    Detectors are pure: they read the subject and the history and return a
    DetectorResult. Structural detectors set ``pattern``; modifiers leave it
    as None and only add score.
    """

    detector_id: str
    structural: bool = True

    @abstractmethod
    def evaluate(
        self,
        subject: Transaction,
        history: TransactionHistory,
        config: FraudConfig,
    ) -> DetectorResult:
        """Evaluate this detector and return a DetectorResult."""
        ...

    def _not_matched(self) -> DetectorResult:
        """Convenience: return a non-matched result for this detector."""
        return DetectorResult(detector_name=self.detector_id, matched=False)

    def _matched(
        self,
        score: int,
        description: str,
        pattern: PatternType | None = None,
        evidence: dict | None = None,
    ) -> DetectorResult:
        """Convenience: return a matched result for this detector."""
        return DetectorResult(
            detector_name=self.detector_id,
            matched=True,
            score=score,
            pattern=pattern,
            description=description,
            evidence=evidence or {},
        )
