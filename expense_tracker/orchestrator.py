"""
Main Orchestrator for Expense Tracker

This module ties the components together and defines the two user flows
that have state:
1. Upload (open → choose file → extract → review/edit → save)
2. Invoice list (load → confirm delete → delete)

The orchestrator enforces the boundaries:
- Nothing is saved without the user reviewing an extraction first
- Nothing is deleted without an explicit confirmation step
- Every failure ends in a notification or a log line, never a crash
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.auth import AuthSession
from expense_tracker.config import Settings, get_settings
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.invoice import (
    DashboardStats,
    ExtractedInvoiceData,
    Invoice,
    InvoiceStatus,
    NewInvoice,
    UploadedDocument,
    UserProfile,
)
from expense_tracker.notifications import ToastCenter
from expense_tracker.queries import build_dashboard_stats
from expense_tracker.services.backend import create_backend_client
from expense_tracker.services.extraction import (
    DocumentExtractor,
    MindeeDocumentExtractor,
    MockDocumentExtractor,
)
from expense_tracker.services.invoice_service import InvoiceService
from expense_tracker.services.storage import DataAccessError, SupabaseInvoiceRepository


logger = structlog.get_logger(__name__)

SAVE_SUCCESS_MESSAGE = "Invoice saved successfully"
SAVE_FAILURE_MESSAGE = "Failed to save invoice"
EXTRACTION_FAILURE_MESSAGE = "Failed to extract data"
DELETE_SUCCESS_MESSAGE = "Invoice deleted"
DELETE_FAILURE_MESSAGE = "Delete failed"


class InvalidTransitionError(Exception):
    """An operation was attempted from a state that does not allow it."""
    pass


class UploadState(str, Enum):
    IDLE = "idle"                    # modal closed
    AWAITING_FILE = "awaiting_file"  # modal open, nothing extracted yet
    EXTRACTING = "extracting"        # extraction in flight
    REVIEW = "review"                # editable draft shown
    SAVED = "saved"                  # last attempt was saved; modal closed


OPEN_STATES = frozenset({UploadState.AWAITING_FILE, UploadState.EXTRACTING, UploadState.REVIEW})


class InvoiceUploadFlow:
    """
    State machine for one upload attempt at a time.

    Every open/cancel/save starts a new attempt. An extraction that
    finishes after its attempt was superseded is ignored: the call itself
    is never aborted.
    """

    def __init__(
        self,
        service: InvoiceService,
        toasts: ToastCenter,
        placeholder_image_url: Optional[str] = None,
        on_saved: Optional[Callable[[Invoice], None]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._service = service
        self._toasts = toasts
        self._placeholder_image_url = placeholder_image_url
        self._on_saved = on_saved
        self._audit_logger = audit_logger or AuditLogger()

        self._state = UploadState.IDLE
        self._attempt = 0
        self._draft: Optional[ExtractedInvoiceData] = None

    @property
    def state(self) -> UploadState:
        return self._state

    @property
    def attempt(self) -> int:
        """Counter identifying the current attempt; changes on open/cancel/save."""
        return self._attempt

    @property
    def is_open(self) -> bool:
        return self._state in OPEN_STATES

    @property
    def draft(self) -> Optional[ExtractedInvoiceData]:
        return self._draft

    def _new_attempt(self, state: UploadState) -> None:
        self._attempt += 1
        self._draft = None
        self._state = state

    def open(self) -> None:
        """Open the modal on a fresh attempt."""
        self._new_attempt(UploadState.AWAITING_FILE)

    def cancel(self) -> None:
        """Close the modal and discard anything extracted so far."""
        if self._state == UploadState.IDLE:
            return
        self._new_attempt(UploadState.IDLE)

    async def extract(self, document: UploadedDocument) -> Optional[ExtractedInvoiceData]:
        """
        Run extraction for the chosen file.

        Returns the proposal, or None if extraction failed or the attempt
        was cancelled while it ran.
        """
        if self._state != UploadState.AWAITING_FILE:
            raise InvalidTransitionError(f"Cannot extract from state {self._state.value}")

        attempt = self._attempt
        self._state = UploadState.EXTRACTING
        try:
            extracted = await self._service.extract_invoice_data(document)
        except Exception as e:
            if attempt != self._attempt:
                return None
            logger.warning("extraction_failed", filename=document.filename, error=str(e))
            self._state = UploadState.AWAITING_FILE
            self._toasts.error(EXTRACTION_FAILURE_MESSAGE)
            return None

        if attempt != self._attempt:
            self._audit_logger.log(AuditEventBuilder.extraction_discarded(document.filename))
            return None

        self._draft = extracted
        self._state = UploadState.REVIEW
        return extracted

    def update_draft(
        self,
        vendor_name: Optional[str] = None,
        amount: Optional[Decimal] = None,
        invoice_date: Optional[date] = None,
    ) -> ExtractedInvoiceData:
        """Apply user edits to the review draft. Values are taken as typed."""
        if self._state != UploadState.REVIEW or self._draft is None:
            raise InvalidTransitionError(f"Nothing to edit in state {self._state.value}")

        updates = {
            key: value
            for key, value in (
                ("vendor_name", vendor_name),
                ("amount", amount),
                ("invoice_date", invoice_date),
            )
            if value is not None
        }
        self._draft = self._draft.model_copy(update=updates)
        return self._draft

    async def save(self, user: UserProfile) -> Optional[Invoice]:
        """
        Persist the reviewed draft as a pending invoice.

        On failure the flow stays in REVIEW with the draft intact so the
        user can retry without re-uploading.
        """
        if self._state != UploadState.REVIEW or self._draft is None:
            raise InvalidTransitionError(f"Cannot save from state {self._state.value}")

        record = NewInvoice(
            user_id=user.id,
            vendor_name=self._draft.vendor_name,
            amount=self._draft.amount,
            invoice_date=self._draft.invoice_date,
            status=InvoiceStatus.PENDING,
            image_url=self._placeholder_image_url,
        )
        try:
            invoice = await self._service.create_invoice(record)
        except DataAccessError as e:
            logger.error("invoice_save_failed", user_id=user.id, error=str(e))
            self._toasts.error(SAVE_FAILURE_MESSAGE)
            return None

        self._new_attempt(UploadState.SAVED)
        if self._on_saved is not None:
            self._on_saved(invoice)
        self._toasts.success(SAVE_SUCCESS_MESSAGE)
        return invoice


class InvoiceBook:
    """
    The invoice list shown on a page.

    Holds the list in memory; navigating back to a page re-fetches it.
    """

    def __init__(self, service: InvoiceService, toasts: ToastCenter):
        self._service = service
        self._toasts = toasts
        self._invoices: list[Invoice] = []
        self._loaded = False
        self._pending_delete: Optional[str] = None

    @property
    def invoices(self) -> list[Invoice]:
        return list(self._invoices)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def pending_delete(self) -> Optional[str]:
        return self._pending_delete

    @property
    def stats(self) -> DashboardStats:
        return build_dashboard_stats(self._invoices)

    async def refresh(self, user_id: str) -> list[Invoice]:
        """Reload from the backend. On failure the current list is kept."""
        try:
            self._invoices = await self._service.list_invoices(user_id)
        except DataAccessError as e:
            logger.error("invoice_list_failed", user_id=user_id, error=str(e))
        finally:
            self._loaded = True
        return self.invoices

    def prepend(self, invoice: Invoice) -> None:
        self._invoices.insert(0, invoice)

    def clear(self) -> None:
        self._invoices = []
        self._loaded = False
        self._pending_delete = None

    def search(self, query: str) -> list[Invoice]:
        """Case-insensitive vendor substring filter over the loaded list."""
        needle = query.strip().lower()
        if not needle:
            return self.invoices
        return [invoice for invoice in self._invoices if needle in invoice.vendor_name.lower()]

    def request_delete(self, invoice_id: str) -> None:
        """First step of a delete: ask the user to confirm."""
        self._pending_delete = invoice_id

    def cancel_delete(self) -> None:
        self._pending_delete = None

    async def confirm_delete(self, user_id: Optional[str] = None) -> bool:
        """Second step of a delete. Returns True if the invoice was removed."""
        if self._pending_delete is None:
            raise InvalidTransitionError("No delete is awaiting confirmation")

        invoice_id = self._pending_delete
        self._pending_delete = None
        try:
            await self._service.delete_invoice(invoice_id, user_id=user_id)
        except DataAccessError as e:
            logger.error("invoice_delete_failed", invoice_id=invoice_id, error=str(e))
            self._toasts.error(DELETE_FAILURE_MESSAGE)
            return False

        self._invoices = [invoice for invoice in self._invoices if invoice.id != invoice_id]
        self._toasts.success(DELETE_SUCCESS_MESSAGE)
        return True


@dataclass
class AppComponents:
    """Everything one browser session needs."""

    settings: Settings
    audit_logger: AuditLogger
    session: AuthSession
    invoice_service: InvoiceService
    toasts: ToastCenter
    invoices: InvoiceBook
    upload_flow: InvoiceUploadFlow

    def close(self) -> None:
        """Release the backend auth subscription. The components are unusable afterwards."""
        self.session.close()


def create_extractor(settings: Settings) -> DocumentExtractor:
    """Pick the extractor named by APP_EXTRACTOR_BACKEND."""
    app_settings = settings.app
    if app_settings.extractor_backend == "mindee":
        return MindeeDocumentExtractor(
            api_key=settings.mindee.api_key,
            min_confidence=app_settings.min_extraction_confidence,
        )
    return MockDocumentExtractor(delay_seconds=app_settings.extraction_delay_seconds)


def create_app_components(settings: Optional[Settings] = None) -> AppComponents:
    """
    Factory for one browser session's components.

    The backend client carries the auth session, so each browser session
    gets its own. A missing backend configuration is logged and the app
    still starts; backend calls then fail with a configuration error.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    audit_logger = AuditLogger()

    client = create_backend_client(settings.supabase, audit_logger)
    session = AuthSession(client.auth if client is not None else None, audit_logger)
    session.initialize()

    service = InvoiceService(
        repository=SupabaseInvoiceRepository(client, table_name=app_settings.invoices_table),
        extractor=create_extractor(settings),
        audit_logger=audit_logger,
    )
    toasts = ToastCenter(duration_seconds=app_settings.toast_duration_seconds)
    invoices = InvoiceBook(service, toasts)
    upload_flow = InvoiceUploadFlow(
        service,
        toasts,
        placeholder_image_url=app_settings.placeholder_image_url,
        on_saved=invoices.prepend,
        audit_logger=audit_logger,
    )
    session.subscribe(lambda event, user: invoices.clear())

    return AppComponents(
        settings=settings,
        audit_logger=audit_logger,
        session=session,
        invoice_service=service,
        toasts=toasts,
        invoices=invoices,
        upload_flow=upload_flow,
    )


def replace_app_components(
    current: Optional[AppComponents],
    settings: Optional[Settings] = None,
) -> AppComponents:
    """Close `current` (if any) and build fresh components, e.g. after a settings reload."""
    if current is not None:
        current.close()
    return create_app_components(settings)
