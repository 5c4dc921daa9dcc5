"""
Supabase Storage Implementation

Invoices live in a single Postgres table exposed through Supabase's REST
layer. Row-level security on that table is expected to restrict rows to
their owner; we still filter every listing by user_id explicitly.

Calls are NOT retried. A failure is wrapped in DataAccessError and handed
back to the caller, which decides what the user sees.
"""

from typing import Any, Optional

import structlog

from expense_tracker.models.invoice import Invoice, NewInvoice
from expense_tracker.services.storage.interface import (
    BackendNotConfiguredError,
    DataAccessError,
    InvoiceRepository,
    NotFoundError,
)


logger = structlog.get_logger(__name__)


class SupabaseInvoiceRepository(InvoiceRepository):
    """
    Supabase implementation of invoice storage.

    Table columns mirror the Invoice model one to one.
    """

    def __init__(self, client: Optional[Any], table_name: str = "invoices"):
        """
        Args:
            client: A supabase.Client, or None when the backend is not configured
            table_name: Name of the invoices table
        """
        self._client = client
        self._table_name = table_name

    def _table(self):
        if self._client is None:
            raise BackendNotConfiguredError(
                "Backend client is not configured (set SUPABASE_URL and SUPABASE_ANON_KEY)"
            )
        return self._client.table(self._table_name)

    async def list_for_user(self, user_id: str) -> list[Invoice]:
        """List a user's invoices, newest first."""
        try:
            response = (
                self._table()
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
            return [Invoice.model_validate(row) for row in response.data or []]
        except DataAccessError:
            raise
        except Exception as e:
            raise DataAccessError(f"Failed to list invoices: {e}") from e

    async def insert(self, invoice: NewInvoice) -> Invoice:
        """Insert one invoice and return the stored row."""
        try:
            response = self._table().insert([invoice.to_row()]).execute()
            rows = response.data or []
            if not rows:
                raise DataAccessError("Failed to create invoice: backend returned no row")
            stored = Invoice.model_validate(rows[0])
        except DataAccessError:
            raise
        except Exception as e:
            raise DataAccessError(f"Failed to create invoice: {e}") from e

        logger.debug("invoice_inserted", invoice_id=stored.id, user_id=stored.user_id)
        return stored

    async def delete(self, invoice_id: str) -> None:
        """Delete one invoice by id."""
        try:
            response = self._table().delete().eq("id", invoice_id).execute()
        except DataAccessError:
            raise
        except Exception as e:
            raise DataAccessError(f"Failed to delete invoice: {e}") from e

        # Supabase returns the deleted rows. Nothing deleted means the id
        # does not exist, or row-level policy hid it from us.
        if not response.data:
            raise NotFoundError(f"Invoice not found: {invoice_id}")
