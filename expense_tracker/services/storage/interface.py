"""
Abstract Invoice Repository

We define an abstract interface for invoice storage so that:
1. The managed Supabase table can be swapped without touching call sites
2. Tests use in-memory storage instead of a live database

The interface is intentionally small: the app only lists, inserts and
deletes. There is no update operation because invoices are never edited
in place.
"""

from abc import ABC, abstractmethod

from expense_tracker.models.invoice import Invoice, NewInvoice


class InvoiceRepository(ABC):
    """
    Abstract interface for invoice storage operations.

    Every implementation scopes listing by owner.
    """

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[Invoice]:
        """
        List all invoices owned by a user.

        Args:
            user_id: Owner to filter on

        Returns:
            Invoices ordered by created_at, newest first

        Raises:
            DataAccessError: If the backend call fails
        """
        pass

    @abstractmethod
    async def insert(self, invoice: NewInvoice) -> Invoice:
        """
        Persist a new invoice.

        Args:
            invoice: The invoice without identity or timestamp

        Returns:
            The stored row, with server-assigned id and created_at

        Raises:
            DataAccessError: If the backend call fails
        """
        pass

    @abstractmethod
    async def delete(self, invoice_id: str) -> None:
        """
        Delete an invoice by ID.

        No ownership check happens here; row-level policy on the
        backend decides what the caller may delete.

        Raises:
            NotFoundError: If no row matched
            DataAccessError: If the backend call fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DataAccessError(StorageError):
    """A list/insert/delete call against the backend failed."""
    pass


class NotFoundError(DataAccessError):
    """Entity not found in storage."""
    pass


class BackendNotConfiguredError(DataAccessError):
    """No backend client is available (missing connection settings)."""
    pass
