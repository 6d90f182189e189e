"""Alert and flagged-account case domain."""

from .models import (
    Alert,
    AlertSeverity,
    AlertStatus,
    AlertType,
    CaseStatus,
    DashboardStats,
    FlaggedAccount,
)

__all__ = [
    "Alert",
    "AlertSeverity",
    "AlertStatus",
    "AlertType",
    "CaseStatus",
    "DashboardStats",
    "FlaggedAccount",
]
