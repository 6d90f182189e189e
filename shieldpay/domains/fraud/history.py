"""Neighbour lookups the detectors run against the transaction history.

The detectors never walk the history themselves; they ask a
``TransactionHistory`` for the neighbours of a subject transaction. The
reference implementation, ``ScanHistory``, is a linear scan per query (so a
batch pass is all-pairs). An indexed implementation (by sender, device or
time bucket) must return exactly the same neighbours.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from datetime import timedelta

from .models import Transaction


def within_window(a: Transaction, b: Transaction, window: timedelta) -> bool:
    """True when |a.timestamp - b.timestamp| is strictly below ``window``."""
    return abs(a.timestamp - b.timestamp) < window


class TransactionHistory(ABC):
    """Read-only view over every transaction observed so far."""

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def __iter__(self) -> Iterator[Transaction]: ...

    @abstractmethod
    def same_sender_within(self, subject: Transaction, window: timedelta) -> list[Transaction]:
        """Transactions from the subject's sender, subject included."""

    @abstractmethod
    def reverse_edge_within(self, subject: Transaction, window: timedelta) -> list[Transaction]:
        """Transactions sent by the subject's receiver or received by its sender."""

    @abstractmethod
    def same_device_other_sender(self, subject: Transaction) -> list[Transaction]:
        """Transactions sharing the subject's device under a different sender."""


class ScanHistory(TransactionHistory):
    """Naive all-pairs history: every query scans the full list."""

    def __init__(self, transactions: Iterable[Transaction]) -> None:
        self._transactions = list(transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def same_sender_within(self, subject: Transaction, window: timedelta) -> list[Transaction]:
        return [
            tx
            for tx in self._transactions
            if tx.sender_id == subject.sender_id and within_window(tx, subject, window)
        ]

    def reverse_edge_within(self, subject: Transaction, window: timedelta) -> list[Transaction]:
        return [
            tx
            for tx in self._transactions
            if (tx.sender_id == subject.receiver_id or tx.receiver_id == subject.sender_id)
            and within_window(tx, subject, window)
        ]

    def same_device_other_sender(self, subject: Transaction) -> list[Transaction]:
        if not subject.device_id:
            return []
        return [
            tx
            for tx in self._transactions
            if tx.device_id == subject.device_id and tx.sender_id != subject.sender_id
        ]
