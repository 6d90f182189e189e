"""Shared test fixtures for the ShieldPay risk engine tests."""

import os
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("KAFKA_ENABLED", "false")

from shieldpay.db.repository import InMemoryRepository  # noqa: E402
from shieldpay.domains.fraud.config import FraudConfig  # noqa: E402
from shieldpay.domains.fraud.models import Transaction, TransactionCreate  # noqa: E402
from shieldpay.engine import RiskEngine  # noqa: E402

NOW = datetime(2026, 1, 15, 14, 0, 0, tzinfo=UTC)


def make_tx(
    tx_id: int,
    sender_id: str = "sender-1",
    receiver_id: str = "receiver-1",
    amount: str = "100.00",
    timestamp: datetime | None = None,
    device_id: str | None = None,
) -> Transaction:
    """Build a stored-shape Transaction without going through a repository."""
    return Transaction(
        id=tx_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        amount=Decimal(amount),
        timestamp=timestamp or NOW,
        device_id=device_id,
    )


def make_create(
    sender_id: str = "sender-1",
    receiver_id: str = "receiver-1",
    amount: str = "100.00",
    timestamp: datetime | None = None,
    device_id: str | None = None,
) -> TransactionCreate:
    return TransactionCreate(
        sender_id=sender_id,
        receiver_id=receiver_id,
        amount=Decimal(amount),
        timestamp=timestamp or NOW,
        device_id=device_id,
    )


def flash_mule_dataset() -> list[TransactionCreate]:
    """A 30,000 transfer at 03:00 that hits flash-laundering, mule-network,
    round-amount and odd-hour (score 90), plus its supporting traffic."""
    subject_time = NOW.replace(hour=3)
    items = [
        make_create("acct-A", "acct-B", "30000.00", subject_time, device_id="device-D"),
    ]
    # Reverse-edge traffic: the subject's receiver sending within the hour
    for i in range(4):
        items.append(
            make_create("acct-B", f"acct-C{i}", "100.00", subject_time + timedelta(minutes=10 * (i + 1)))
        )
    # Six other senders on the same device
    for i in range(6):
        items.append(
            make_create(f"mule-{i}", "acct-Z", "100.00", NOW.replace(hour=10), device_id="device-D")
        )
    return items


@pytest.fixture
def config() -> FraudConfig:
    return FraudConfig()


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def engine(repository, config) -> RiskEngine:
    return RiskEngine(repository, config=config)
