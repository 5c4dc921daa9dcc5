"""
In-Memory Storage Implementation

A process-local stand-in for the Supabase table. Used by tests, and by
the app when it runs without a configured backend.
"""

from datetime import datetime, timezone
from itertools import count
from typing import Callable, Iterable, Optional
from uuid import uuid4

from expense_tracker.models.invoice import Invoice, NewInvoice
from expense_tracker.services.storage.interface import InvoiceRepository, NotFoundError


class InMemoryInvoiceRepository(InvoiceRepository):
    """Invoice storage backed by a dict, assigning ids and timestamps like the server would."""

    def __init__(
        self,
        invoices: Optional[Iterable[Invoice]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._rows: dict[str, Invoice] = {}
        # Tie-breaker so rows created within the same clock tick keep insertion order
        self._sequence = count()
        self._order: dict[str, int] = {}
        for invoice in invoices or []:
            self._store(invoice)

    def _store(self, invoice: Invoice) -> None:
        self._rows[invoice.id] = invoice
        self._order[invoice.id] = next(self._sequence)

    async def list_for_user(self, user_id: str) -> list[Invoice]:
        owned = [row for row in self._rows.values() if row.user_id == user_id]
        owned.sort(key=lambda row: (row.created_at, self._order[row.id]), reverse=True)
        return owned

    async def insert(self, invoice: NewInvoice) -> Invoice:
        stored = Invoice(
            id=str(uuid4()),
            created_at=self._clock(),
            **invoice.model_dump(),
        )
        self._store(stored)
        return stored

    async def delete(self, invoice_id: str) -> None:
        if invoice_id not in self._rows:
            raise NotFoundError(f"Invoice not found: {invoice_id}")
        del self._rows[invoice_id]
        del self._order[invoice_id]

    def __len__(self) -> int:
        return len(self._rows)
