"""Fraud detection domain."""

from .aggregator import RiskAggregator
from .config import FraudConfig, default_config
from .detectors import ALL_DETECTORS
from .history import ScanHistory, TransactionHistory
from .models import (
    AnalysisReport,
    DetectorResult,
    FlaggedTransaction,
    PatternCounts,
    PatternType,
    QRArtifact,
    QRArtifactCreate,
    QRClassification,
    Transaction,
    TransactionAnalysis,
    TransactionCreate,
)

__all__ = [
    "ALL_DETECTORS",
    "AnalysisReport",
    "DetectorResult",
    "FlaggedTransaction",
    "FraudConfig",
    "PatternCounts",
    "PatternType",
    "QRArtifact",
    "QRArtifactCreate",
    "QRClassification",
    "RiskAggregator",
    "ScanHistory",
    "Transaction",
    "TransactionAnalysis",
    "TransactionCreate",
    "TransactionHistory",
    "default_config",
]
