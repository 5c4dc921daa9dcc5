"""
Dashboard aggregates.

Everything here is computed from the invoice list already loaded for the
page; nothing is stored. The monthly trend is a fixed illustrative series
with the current total dropped into the latest month.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from expense_tracker.models.invoice import (
    DashboardStats,
    Invoice,
    InvoiceStatus,
    MonthlySpending,
)


RECENT_ACTIVITY_LIMIT = 5

BASELINE_MONTHS = (
    ("Jan", Decimal("4500")),
    ("Feb", Decimal("3200")),
    ("Mar", Decimal("5100")),
    ("Apr", Decimal("4200")),
)
LATEST_MONTH = "May"
LATEST_MONTH_PLACEHOLDER = Decimal("1500")


def total_spending(invoices: Iterable[Invoice]) -> Decimal:
    """Sum of amounts; Decimal('0') for no invoices."""
    return sum((invoice.amount for invoice in invoices), Decimal("0"))


def build_dashboard_stats(invoices: Sequence[Invoice]) -> DashboardStats:
    """Compute the stat-card numbers and recent activity from a recency-ordered list."""
    pending = sum(1 for invoice in invoices if invoice.status == InvoiceStatus.PENDING)
    approved = sum(1 for invoice in invoices if invoice.status == InvoiceStatus.APPROVED)
    return DashboardStats(
        total_spending=total_spending(invoices),
        processed_count=len(invoices),
        pending_count=pending,
        approved_count=approved,
        recent_activity=list(invoices[:RECENT_ACTIVITY_LIMIT]),
    )


def monthly_spending(current_total: Decimal) -> list[MonthlySpending]:
    """Five-bar trend; the last bar is the current total, or a placeholder when it is zero."""
    series = [MonthlySpending(month=month, amount=amount) for month, amount in BASELINE_MONTHS]
    series.append(
        MonthlySpending(
            month=LATEST_MONTH,
            amount=current_total if current_total else LATEST_MONTH_PLACEHOLDER,
        )
    )
    return series


def format_currency(amount: Decimal) -> str:
    """'$350' for whole amounts, '$1,234.50' otherwise."""
    amount = Decimal(amount)
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    if amount == amount.to_integral_value():
        return f"{sign}${amount:,.0f}"
    return f"{sign}${amount:,.2f}"
