"""Structural pattern detectors: smurfing, flash-laundering, mule networks."""

from datetime import timedelta

from ..config import FraudConfig
from ..history import TransactionHistory
from ..models import DetectorResult, PatternType, Transaction
from .base import PatternDetector


class SmurfingDetector(PatternDetector):
    """Many small payments from one sender inside a +/- 24h window."""

    detector_id = "smurfing"

    def evaluate(
        self,
        subject: Transaction,
        history: TransactionHistory,
        config: FraudConfig,
    ) -> DetectorResult:
        thresholds = config.smurfing
        window = timedelta(hours=thresholds.window_hours)
        count = len(history.same_sender_within(subject, window))

        if count <= thresholds.min_count_exclusive:
            return self._not_matched()
        if subject.amount >= thresholds.max_amount_exclusive:
            return self._not_matched()

        return self._matched(
            score=thresholds.score,
            pattern=PatternType.SMURFING,
            description="Multiple small transactions from same sender detected",
            evidence={
                "sender_id": subject.sender_id,
                "sender_count": count,
                "window_hours": thresholds.window_hours,
            },
        )


class FlashLaunderingDetector(PatternDetector):
    """Large transfer with heavy traffic on the reverse edge inside +/- 1h."""

    detector_id = "flash_laundering"

    def evaluate(
        self,
        subject: Transaction,
        history: TransactionHistory,
        config: FraudConfig,
    ) -> DetectorResult:
        thresholds = config.flash_laundering
        window = timedelta(minutes=thresholds.window_minutes)
        count = len(history.reverse_edge_within(subject, window))

        if count <= thresholds.min_count_exclusive:
            return self._not_matched()
        if subject.amount <= thresholds.min_amount_exclusive:
            return self._not_matched()

        return self._matched(
            score=thresholds.score,
            pattern=PatternType.FLASH_LAUNDERING,
            description="Rapid circular transfers detected",
            evidence={
                "reverse_edge_count": count,
                "window_minutes": thresholds.window_minutes,
                "amount": str(subject.amount),
            },
        )


class MuleNetworkDetector(PatternDetector):
    """One device fingerprint used by several distinct senders."""

    detector_id = "mule_network"

    def evaluate(
        self,
        subject: Transaction,
        history: TransactionHistory,
        config: FraudConfig,
    ) -> DetectorResult:
        if not subject.device_id:
            return self._not_matched()

        thresholds = config.mule_network
        shared = history.same_device_other_sender(subject)
        if len(shared) <= thresholds.min_count_exclusive:
            return self._not_matched()

        return self._matched(
            score=thresholds.score,
            pattern=PatternType.MULE_NETWORK,
            description="Multiple accounts on same device detected",
            evidence={
                "device_id": subject.device_id,
                "shared_device_count": len(shared),
                "other_senders": sorted({tx.sender_id for tx in shared}),
            },
        )
