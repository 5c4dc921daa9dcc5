"""
Invoice Service

The single entry point the UI uses for invoice data: list, create,
delete, and extract. It delegates to an InvoiceRepository and a
DocumentExtractor and records an audit event for each outcome.

Errors from the repository and extractor are propagated unchanged;
deciding what the user sees is the caller's job.
"""

from typing import Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.invoice import (
    ExtractedInvoiceData,
    Invoice,
    NewInvoice,
    UploadedDocument,
)
from expense_tracker.services.extraction import DocumentExtractor
from expense_tracker.services.storage import DataAccessError, InvoiceRepository


class InvoiceService:
    """List/create/delete invoices for a user and run extraction."""

    def __init__(
        self,
        repository: InvoiceRepository,
        extractor: DocumentExtractor,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._extractor = extractor
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def extractor_name(self) -> str:
        return self._extractor.name

    async def list_invoices(self, user_id: str) -> list[Invoice]:
        """All invoices owned by `user_id`, newest first."""
        try:
            return await self._repository.list_for_user(user_id)
        except DataAccessError as e:
            self._audit_logger.log(
                AuditEventBuilder.data_access_error("list", str(e))
            )
            raise

    async def create_invoice(self, record: NewInvoice) -> Invoice:
        """Persist `record` and return the stored row."""
        try:
            invoice = await self._repository.insert(record)
        except DataAccessError as e:
            self._audit_logger.log(
                AuditEventBuilder.data_access_error("create", str(e))
            )
            raise

        self._audit_logger.log(
            AuditEventBuilder.invoice_created(
                invoice_id=invoice.id,
                user_id=invoice.user_id,
                vendor=invoice.vendor_name,
                amount=str(invoice.amount),
            )
        )
        return invoice

    async def delete_invoice(self, invoice_id: str, user_id: Optional[str] = None) -> None:
        """Delete by id. `user_id` is only recorded in the audit trail."""
        try:
            await self._repository.delete(invoice_id)
        except DataAccessError as e:
            self._audit_logger.log(
                AuditEventBuilder.data_access_error("delete", str(e), entity_id=invoice_id)
            )
            raise

        self._audit_logger.log(AuditEventBuilder.invoice_deleted(invoice_id, user_id))

    async def extract_invoice_data(self, document: UploadedDocument) -> ExtractedInvoiceData:
        """Propose invoice fields for an uploaded image."""
        try:
            extracted = await self._extractor.extract(document)
        except Exception as e:
            self._audit_logger.log(
                AuditEventBuilder.extraction_failed(document.filename, str(e))
            )
            raise

        self._audit_logger.log(
            AuditEventBuilder.extraction_completed(
                filename=document.filename,
                vendor_name=extracted.vendor_name,
                amount=str(extracted.amount),
                extractor=self._extractor.name,
            )
        )
        return extracted
