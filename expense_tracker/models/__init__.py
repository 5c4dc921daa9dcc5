"""
Data Models Package

All Pydantic models used in the Expense Tracker.
"""

from expense_tracker.models.invoice import (
    DashboardStats,
    ExtractedInvoiceData,
    Invoice,
    InvoiceStatus,
    MonthlySpending,
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

__all__ = [
    # Invoice models
    "DashboardStats",
    "ExtractedInvoiceData",
    "Invoice",
    "InvoiceStatus",
    "MonthlySpending",
    "NewInvoice",
    "UploadedDocument",
    "UserProfile",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
