"""
Storage Services Package

Abstract invoice repository plus the Supabase and in-memory implementations.
"""

from expense_tracker.services.storage.interface import (
    BackendNotConfiguredError,
    DataAccessError,
    InvoiceRepository,
    NotFoundError,
    StorageError,
)
from expense_tracker.services.storage.memory import InMemoryInvoiceRepository
from expense_tracker.services.storage.supabase_store import SupabaseInvoiceRepository

__all__ = [
    # Interface
    "InvoiceRepository",
    # Exceptions
    "BackendNotConfiguredError",
    "DataAccessError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryInvoiceRepository",
    "SupabaseInvoiceRepository",
]
