"""Risk engine configuration with sensible defaults."""

import os
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class SmurfingThresholds:
    window_hours: int = 24
    min_count_exclusive: int = 10
    max_amount_exclusive: Decimal = Decimal("10000")
    score: int = 30


@dataclass
class FlashLaunderingThresholds:
    window_minutes: int = 60
    min_count_exclusive: int = 3
    min_amount_exclusive: Decimal = Decimal("20000")
    score: int = 40


@dataclass
class MuleNetworkThresholds:
    min_count_exclusive: int = 5
    score: int = 25


@dataclass
class ModifierSettings:
    suspicious_amounts: tuple[Decimal, ...] = (Decimal("9999"), Decimal("49999"))
    round_amount_unit: Decimal = Decimal("10000")
    round_amount_score: int = 15
    odd_hour_start: int = 6
    odd_hour_end: int = 23
    odd_hour_score: int = 10


@dataclass
class ClassificationThresholds:
    high_risk_above: int = 70
    suspicious_above: int = 40
    max_score: int = 100


@dataclass
class AlertSettings:
    transaction_alert_above: int = 80
    qr_alert_above: int = 80
    critical_above: int = 80
    dedup_transaction_alerts: bool = True
    kafka_topic: str = "shieldpay.fraud.alerts"


@dataclass
class DashboardThresholds:
    suspicious_above: int = 40
    high_risk_above: int = 80


@dataclass
class FraudConfig:
    smurfing: SmurfingThresholds = field(default_factory=SmurfingThresholds)
    flash_laundering: FlashLaunderingThresholds = field(default_factory=FlashLaunderingThresholds)
    mule_network: MuleNetworkThresholds = field(default_factory=MuleNetworkThresholds)
    modifiers: ModifierSettings = field(default_factory=ModifierSettings)
    classification: ClassificationThresholds = field(default_factory=ClassificationThresholds)
    alerts: AlertSettings = field(default_factory=AlertSettings)
    dashboard: DashboardThresholds = field(default_factory=DashboardThresholds)

    @classmethod
    def from_env(cls) -> "FraudConfig":
        """Load config with env var overrides. Env vars use FRAUD_ prefix."""
        config = cls()

        # Detector overrides
        if v := os.getenv("FRAUD_SMURFING_WINDOW_HOURS"):
            config.smurfing.window_hours = int(v)
        if v := os.getenv("FRAUD_SMURFING_MIN_COUNT"):
            config.smurfing.min_count_exclusive = int(v)
        if v := os.getenv("FRAUD_FLASH_WINDOW_MINUTES"):
            config.flash_laundering.window_minutes = int(v)
        if v := os.getenv("FRAUD_FLASH_MIN_COUNT"):
            config.flash_laundering.min_count_exclusive = int(v)
        if v := os.getenv("FRAUD_MULE_MIN_COUNT"):
            config.mule_network.min_count_exclusive = int(v)

        # Classification overrides
        if v := os.getenv("FRAUD_HIGH_RISK_ABOVE"):
            config.classification.high_risk_above = int(v)
        if v := os.getenv("FRAUD_SUSPICIOUS_ABOVE"):
            config.classification.suspicious_above = int(v)

        # Alert overrides
        if v := os.getenv("FRAUD_TRANSACTION_ALERT_ABOVE"):
            config.alerts.transaction_alert_above = int(v)
        if v := os.getenv("FRAUD_CRITICAL_ABOVE"):
            config.alerts.critical_above = int(v)
        if v := os.getenv("FRAUD_DEDUP_TRANSACTION_ALERTS"):
            config.alerts.dedup_transaction_alerts = v.lower() in ("1", "true", "yes")
        if v := os.getenv("FRAUD_ALERT_KAFKA_TOPIC"):
            config.alerts.kafka_topic = v

        return config


# Module-level default instance
default_config = FraudConfig()
