# Overview: Append-only transaction ledger; the source of truth for stock history and analytics.

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Iterable

from ..models import Transaction, TransactionType, increases_stock, reduces_stock
from ..time_utils import Clock, SystemClock
from .concurrency import AtomicCounter
"""
Ledger Invariants (authoritative)

- Append-only: entries are never updated or deleted.
- Transaction ids come from one counter shared by every append and are
  independent of product ids.
- timestamp is assigned from the injected clock at append time.
- An entry becomes visible to readers only once fully built.
- Entries outlive their product: deleting a product keeps its history.
- Reads return snapshots (lists), never live views.
"""


def _newest_first(entries: Iterable[Transaction]) -> list[Transaction]:
    return sorted(entries, key=lambda t: (t.timestamp, t.id), reverse=True)


class TransactionLedger:
    def __init__(self, clock: Clock | None = None):
        self.clock = clock or SystemClock()
        self._ids = AtomicCounter()
        self._lock = threading.Lock()
        self._entries: list[Transaction] = []

    def append(
        self,
        product_id: int,
        tx_type: TransactionType,
        quantity: int,
        total_cost: float,
        notes: str | None,
        performed_by: str | None,
        *,
        stock_after: int,
    ) -> Transaction:
        """Record a stock-affecting event and return the immutable entry."""
        if quantity < 0:
            raise ValueError("ledger quantity must be >= 0")

        with self._lock:
            tx = Transaction(
                id=self._ids.next(),
                product_id=product_id,
                type=tx_type,
                quantity=quantity,
                total_cost=float(total_cost),
                timestamp=self.clock.now(),
                notes=notes or "",
                performed_by=performed_by or "System",
                stock_after=stock_after,
            )
            self._entries.append(tx)
        return tx

    def all(self) -> list[Transaction]:
        """Every entry in append order."""
        with self._lock:
            return list(self._entries)

    def history(
        self,
        product_id: int,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Transaction]:
        """
        Entries for one product, newest first.

        With start/end, only timestamps in [start, end] (inclusive) are kept.
        """
        entries = [t for t in self.all() if t.product_id == product_id]
        if start is not None:
            entries = [t for t in entries if t.timestamp >= start]
        if end is not None:
            entries = [t for t in entries if t.timestamp <= end]
        return _newest_first(entries)

    def recent(self, days: int) -> list[Transaction]:
        """Entries newer than now - days, newest first."""
        cutoff = self.clock.now() - timedelta(days=days)
        return _newest_first(t for t in self.all() if t.timestamp > cutoff)

    def has_activity_since(self, product_id: int, since: datetime) -> bool:
        return any(t.product_id == product_id and t.timestamp > since for t in self.all())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def replay_stock(transactions: Iterable[Transaction]) -> int:
    """
    Rebuild a product's stock level from its history.

    Oldest first; reducing types subtract, increasing types add, adjustments
    set the level to the entry's stock_after.
    """
    stock = 0
    for tx in sorted(transactions, key=lambda t: (t.timestamp, t.id)):
        if reduces_stock(tx.type):
            stock -= tx.quantity
        elif increases_stock(tx.type):
            stock += tx.quantity
        else:
            stock = tx.stock_after
    return stock
