"""Risk aggregation: detectors -> one score and one pattern per transaction."""

import structlog

from shieldpay.shared.errors import AnalysisFailure

from .config import FraudConfig, default_config
from .detectors import ALL_DETECTORS, PatternDetector
from .history import TransactionHistory
from .models import DetectorResult, PatternType, Transaction, TransactionAnalysis

logger = structlog.get_logger()

NORMAL_DESCRIPTION = "Normal transaction pattern"


class RiskAggregator:
    """Evaluates one transaction against every detector.

    Scoring is additive:
    1. Run detectors in fixed order -> list[DetectorResult]
    2. Sum the scores of every matched detector, clamp to [0, max_score]
    3. Pattern = last matched structural detector, else NORMAL
    4. Description = structural descriptions in order, then one clause per
       matched modifier
    """

    def __init__(
        self,
        config: FraudConfig | None = None,
        detectors: list[PatternDetector] | None = None,
    ) -> None:
        self._config = config or default_config
        self._detectors = list(detectors) if detectors is not None else list(ALL_DETECTORS)

    @property
    def detectors(self) -> list[PatternDetector]:
        return list(self._detectors)

    def evaluate(
        self,
        subject: Transaction,
        history: TransactionHistory,
    ) -> TransactionAnalysis:
        """Score ``subject`` against ``history``.

        Raises AnalysisFailure if any detector faults; no partial result is
        returned in that case.
        """
        results: list[DetectorResult] = []
        for detector in self._detectors:
            try:
                results.append(detector.evaluate(subject, history, self._config))
            except Exception as exc:
                raise AnalysisFailure(
                    f"Detector {detector.detector_id} failed",
                    transaction_id=subject.id,
                    detector_id=detector.detector_id,
                ) from exc

        matched = [r for r in results if r.matched]
        structural = [r for r in matched if r.pattern is not None]
        modifiers = [r for r in matched if r.pattern is None]

        total = sum(r.score for r in matched)
        risk_score = max(0, min(total, self._config.classification.max_score))

        pattern = structural[-1].pattern if structural else PatternType.NORMAL

        if structural:
            description = ". ".join(r.description for r in structural)
        else:
            description = NORMAL_DESCRIPTION
        for r in modifiers:
            description += f". {r.description}"

        return TransactionAnalysis(
            transaction_id=subject.id,
            risk_score=risk_score,
            pattern=pattern,
            description=description,
            detector_results=results,
        )
