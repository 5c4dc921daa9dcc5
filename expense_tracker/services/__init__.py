"""Services package."""

from expense_tracker.services.extraction import (
    DocumentExtractor,
    ExtractionError,
    ExtractionServiceError,
    LowConfidenceExtractionError,
    MalformedDocumentError,
    MindeeDocumentExtractor,
    MockDocumentExtractor,
)
from expense_tracker.services.invoice_service import InvoiceService
from expense_tracker.services.storage import (
    BackendNotConfiguredError,
    DataAccessError,
    InMemoryInvoiceRepository,
    InvoiceRepository,
    NotFoundError,
    StorageError,
    SupabaseInvoiceRepository,
)

__all__ = [
    # Extraction
    "DocumentExtractor",
    "ExtractionError",
    "ExtractionServiceError",
    "LowConfidenceExtractionError",
    "MalformedDocumentError",
    "MindeeDocumentExtractor",
    "MockDocumentExtractor",
    # Invoices
    "InvoiceService",
    # Storage
    "BackendNotConfiguredError",
    "DataAccessError",
    "InMemoryInvoiceRepository",
    "InvoiceRepository",
    "NotFoundError",
    "StorageError",
    "SupabaseInvoiceRepository",
]
