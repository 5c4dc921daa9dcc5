"""
Audit Models for Expense Tracker

Every significant user action (signing in, saving or deleting an invoice,
running an extraction) is described by an AuditEvent and written to the
structured log.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Session
    USER_SIGNED_IN = "user_signed_in"
    USER_SIGNED_UP = "user_signed_up"
    USER_SIGNED_OUT = "user_signed_out"
    AUTH_FAILED = "auth_failed"
    SESSION_CHANGED = "session_changed"

    # Extraction
    EXTRACTION_COMPLETED = "extraction_completed"
    EXTRACTION_FAILED = "extraction_failed"
    EXTRACTION_DISCARDED = "extraction_discarded"

    # Persistence
    INVOICE_CREATED = "invoice_created"
    INVOICE_DELETED = "invoice_deleted"
    DATA_ACCESS_ERROR = "data_access_error"

    # System
    CONFIGURATION_ERROR = "configuration_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'invoice', 'user', 'extraction')"
    )
    entity_id: Optional[str] = None

    # Who triggered it
    user_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.invoice_created(invoice_id, user_id, vendor, amount)
        event = AuditEventBuilder.user_signed_out(user_id)
    """

    @staticmethod
    def user_signed_in(user_id: str, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_IN,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description=f"User signed in: {email}",
            is_user_action=True,
        )

    @staticmethod
    def user_signed_up(email: str, user_id: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_UP,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description=f"User signed up: {email}",
            details={"confirmed_session": user_id is not None},
            is_user_action=True,
        )

    @staticmethod
    def user_signed_out(user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_OUT,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description="User signed out",
            is_user_action=True,
        )

    @staticmethod
    def auth_failed(action: str, email: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTH_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description=f"Authentication failed during {action}",
            details={"action": action, "email": email},
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def session_changed(event_name: str, user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_CHANGED,
            severity=AuditSeverity.DEBUG,
            entity_type="session",
            user_id=user_id,
            description=f"Session changed: {event_name}",
            details={"event": event_name},
        )

    @staticmethod
    def extraction_completed(
        filename: str,
        vendor_name: str,
        amount: str,
        extractor: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_COMPLETED,
            entity_type="extraction",
            description=f"Extraction completed for {filename}",
            details={
                "filename": filename,
                "vendor_name": vendor_name,
                "amount": amount,
                "extractor": extractor,
            },
        )

    @staticmethod
    def extraction_failed(filename: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="extraction",
            description=f"Extraction failed for {filename}",
            details={"filename": filename},
            error_message=error_message,
        )

    @staticmethod
    def extraction_discarded(filename: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_DISCARDED,
            entity_type="extraction",
            description=f"Extraction result ignored after cancel: {filename}",
            details={"filename": filename},
        )

    @staticmethod
    def invoice_created(
        invoice_id: str,
        user_id: str,
        vendor: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_CREATED,
            entity_type="invoice",
            entity_id=invoice_id,
            user_id=user_id,
            description=f"Invoice saved: {vendor} - ${amount}",
            details={"vendor": vendor, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def invoice_deleted(invoice_id: str, user_id: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_DELETED,
            entity_type="invoice",
            entity_id=invoice_id,
            user_id=user_id,
            description="Invoice deleted",
            is_user_action=True,
        )

    @staticmethod
    def data_access_error(
        operation: str,
        error_message: str,
        entity_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_ACCESS_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="invoice",
            entity_id=entity_id,
            description=f"Data access failed: {operation}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def configuration_error(missing: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONFIGURATION_ERROR,
            severity=AuditSeverity.ERROR,
            description="Backend configuration is incomplete",
            details={"missing": missing},
            error_message=f"Missing {', '.join(missing)}",
        )
