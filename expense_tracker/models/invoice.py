"""
Core Data Models for Expense Tracker

These models define the schemas for all data flowing between the UI,
the services and the backend table.

Amounts are Decimal end to end. The backend stores them as numeric and
hands them back as JSON numbers; Pydantic converts on the way in.
Amounts are deliberately NOT range-checked: the review form lets the user
type anything and the stored value is whatever they confirmed.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class InvoiceStatus(str, Enum):
    """
    Invoice approval status.

    New invoices are always PENDING. Nothing in the app moves an invoice
    to APPROVED; the value only arrives from the backend.
    """
    PENDING = "pending"
    APPROVED = "approved"


# =============================================================================
# INVOICE MODELS
# =============================================================================

class NewInvoice(BaseModel):
    """
    An invoice that has not been persisted yet.

    Identity and creation timestamp are assigned by the backend.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(
        ...,
        min_length=1,
        description="Owner of the invoice"
    )
    vendor_name: str = Field(
        ...,
        description="Vendor/company name"
    )
    amount: Decimal = Field(
        ...,
        description="Invoice amount"
    )
    invoice_date: date = Field(
        ...,
        description="Date printed on the invoice"
    )
    status: InvoiceStatus = Field(
        default=InvoiceStatus.PENDING,
        description="Approval status"
    )
    image_url: Optional[str] = Field(
        default=None,
        description="Reference to the invoice image"
    )

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)

    def to_row(self) -> dict[str, Any]:
        """Convert to a JSON-ready row for the backend table."""
        return self.model_dump(mode="json", exclude_none=True)


class Invoice(NewInvoice):
    """A persisted invoice row."""

    id: str = Field(
        ...,
        description="Server-assigned identifier"
    )
    created_at: datetime = Field(
        ...,
        description="Server-assigned creation timestamp"
    )

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        # Backends may hand back integer or UUID identities
        return str(v) if v is not None else v

    @property
    def is_pending(self) -> bool:
        return self.status == InvoiceStatus.PENDING


class ExtractedInvoiceData(BaseModel):
    """
    Fields proposed by an extractor.

    This is PROPOSED data; the user reviews and may edit every field
    before anything is saved.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    vendor_name: str
    amount: Decimal
    invoice_date: date
    confidence: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Extractor confidence, when the extractor reports one"
    )


class UploadedDocument(BaseModel):
    """A file handed over by the upload widget."""

    filename: str
    mime_type: str
    content: bytes = Field(repr=False)
    size_bytes: int = Field(ge=0)

    @property
    def is_image(self) -> bool:
        return self.mime_type.lower().startswith("image/")


# =============================================================================
# USER
# =============================================================================

class UserProfile(BaseModel):
    """The signed-in user, as described by the auth session."""

    id: str
    email: str = ""
    full_name: str = ""

    @classmethod
    def from_auth_user(cls, user: Any) -> "UserProfile":
        """Build from a Supabase auth user object."""
        metadata = getattr(user, "user_metadata", None) or {}
        return cls(
            id=str(user.id),
            email=getattr(user, "email", None) or "",
            full_name=metadata.get("full_name") or "",
        )

    @property
    def display_name(self) -> str:
        return self.full_name or self.email


# =============================================================================
# DASHBOARD VIEW MODELS
# =============================================================================

class MonthlySpending(BaseModel):
    """One bar of the spending trend chart."""

    month: str
    amount: Decimal


class DashboardStats(BaseModel):
    """Aggregates computed from the loaded invoice list."""

    total_spending: Decimal = Decimal("0")
    processed_count: int = Field(default=0, ge=0)
    pending_count: int = Field(default=0, ge=0)
    approved_count: int = Field(default=0, ge=0)
    recent_activity: list[Invoice] = Field(default_factory=list)
