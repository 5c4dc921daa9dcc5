"""
Tests for Expense Tracker

Test strategy:
1. Unit tests for individual components (models, aggregates, routing)
2. Flow tests for upload/delete/session (with in-memory and fake backends)
3. No real API calls in tests (use fakes)
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

from expense_tracker.models.invoice import (
    ExtractedInvoiceData,
    Invoice,
    InvoiceStatus,
    NewInvoice,
    UploadedDocument,
    UserProfile,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestInvoiceModels:
    """Tests for invoice-related Pydantic models."""

    def test_new_invoice_defaults_to_pending(self):
        """New invoices start pending with no image."""
        record = NewInvoice(
            user_id="user-1",
            vendor_name="Stripe",
            amount=Decimal("120.50"),
            invoice_date=date(2024, 5, 1),
        )
        assert record.status == InvoiceStatus.PENDING
        assert record.image_url is None

    def test_new_invoice_strips_whitespace(self):
        """Test that whitespace is stripped from vendor name."""
        record = NewInvoice(
            user_id="user-1",
            vendor_name="  WeWork  ",
            amount=Decimal("10"),
            invoice_date=date(2024, 5, 1),
        )
        assert record.vendor_name == "WeWork"

    def test_new_invoice_requires_owner(self):
        with pytest.raises(ValueError):
            NewInvoice(
                user_id="",
                vendor_name="Figma",
                amount=Decimal("10"),
                invoice_date=date(2024, 5, 1),
            )

    def test_amount_is_not_range_checked(self):
        """Whatever the user confirmed is accepted, including negatives."""
        record = NewInvoice(
            user_id="user-1",
            vendor_name="Refund",
            amount=Decimal("-25"),
            invoice_date=date(2024, 5, 1),
        )
        assert record.amount == Decimal("-25")

    def test_to_row_is_json_ready(self):
        """Rows sent to the backend use plain JSON types and omit unset fields."""
        row = NewInvoice(
            user_id="user-1",
            vendor_name="Amazon",
            amount=Decimal("350.25"),
            invoice_date=date(2024, 5, 1),
        ).to_row()
        assert row == {
            "user_id": "user-1",
            "vendor_name": "Amazon",
            "amount": 350.25,
            "invoice_date": "2024-05-01",
            "status": "pending",
        }

    def test_invoice_from_backend_row(self):
        """Backend rows validate into Invoice; numeric ids become strings."""
        invoice = Invoice.model_validate({
            "id": 42,
            "user_id": uuid4(),
            "vendor_name": "Google Cloud",
            "amount": 99.9,
            "invoice_date": "2024-04-30",
            "status": "approved",
            "image_url": "https://picsum.photos/seed/invoice/200/300",
            "created_at": "2024-05-01T10:00:00+00:00",
        })
        assert invoice.id == "42"
        assert isinstance(invoice.user_id, str)
        assert invoice.amount == Decimal("99.9")
        assert invoice.status == InvoiceStatus.APPROVED
        assert invoice.is_pending is False
        assert invoice.created_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            Invoice(
                id="1",
                user_id="user-1",
                vendor_name="Amazon",
                amount=Decimal("1"),
                invoice_date=date(2024, 5, 1),
                status="rejected",
                created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
            )

    def test_extracted_data_confidence_bounds(self):
        """Test confidence must be between 0 and 1."""
        with pytest.raises(ValueError):
            ExtractedInvoiceData(
                vendor_name="Amazon",
                amount=Decimal("10"),
                invoice_date=date(2024, 5, 1),
                confidence=1.5,  # Invalid
            )

    def test_uploaded_document_is_image(self):
        doc = UploadedDocument(filename="a.PNG", mime_type="IMAGE/PNG", content=b"x", size_bytes=1)
        assert doc.is_image is True
        pdf = UploadedDocument(filename="a.pdf", mime_type="application/pdf", content=b"x", size_bytes=1)
        assert pdf.is_image is False


class TestUserProfile:
    """Tests for the signed-in user model."""

    def test_from_auth_user_reads_full_name_metadata(self):
        auth_user = SimpleNamespace(
            id="abc",
            email="ada@example.com",
            user_metadata={"full_name": "Ada Lovelace"},
        )
        profile = UserProfile.from_auth_user(auth_user)
        assert profile.id == "abc"
        assert profile.full_name == "Ada Lovelace"
        assert profile.display_name == "Ada Lovelace"

    def test_display_name_falls_back_to_email(self):
        auth_user = SimpleNamespace(id="abc", email="ada@example.com", user_metadata=None)
        profile = UserProfile.from_auth_user(auth_user)
        assert profile.full_name == ""
        assert profile.display_name == "ada@example.com"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.INVOICE_CREATED,
            description="Invoice saved",
        )
        assert event.event_type == AuditEventType.INVOICE_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.INVOICE_DELETED,
            description="Invoice deleted",
            details={"vendor": "Amazon"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "invoice_deleted"
        assert log_dict["details"]["vendor"] == "Amazon"

    def test_audit_event_builder_invoice_created(self):
        event = AuditEventBuilder.invoice_created(
            invoice_id="inv-1",
            user_id="user-1",
            vendor="Stripe",
            amount="120.50",
        )
        assert event.event_type == AuditEventType.INVOICE_CREATED
        assert event.entity_id == "inv-1"
        assert event.user_id == "user-1"
        assert event.is_user_action is True

    def test_audit_event_builder_auth_failed_is_warning(self):
        event = AuditEventBuilder.auth_failed("sign_in", "ada@example.com", "Invalid login credentials")
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "Invalid login credentials"
        assert event.details["action"] == "sign_in"

    def test_audit_event_builder_configuration_error(self):
        event = AuditEventBuilder.configuration_error(["SUPABASE_URL", "SUPABASE_ANON_KEY"])
        assert event.severity == AuditSeverity.ERROR
        assert "SUPABASE_URL" in event.error_message


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
