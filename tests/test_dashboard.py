"""Tests for dashboard aggregates."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from expense_tracker.models.invoice import InvoiceStatus
from expense_tracker.queries import (
    RECENT_ACTIVITY_LIMIT,
    build_dashboard_stats,
    format_currency,
    monthly_spending,
    total_spending,
)


class TestDashboardStats:

    def test_example_totals(self, invoice_factory):
        invoices = [
            invoice_factory("1", amount="100", status=InvoiceStatus.PENDING),
            invoice_factory("2", amount="250", status=InvoiceStatus.APPROVED),
        ]

        stats = build_dashboard_stats(invoices)

        assert stats.total_spending == Decimal("350")
        assert format_currency(stats.total_spending) == "$350"
        assert stats.processed_count == 2
        assert stats.pending_count == 1
        assert stats.approved_count == 1

    def test_empty_list(self):
        stats = build_dashboard_stats([])
        assert stats.total_spending == Decimal("0")
        assert stats.processed_count == 0
        assert stats.pending_count == 0
        assert stats.recent_activity == []

    def test_status_counts_add_up(self, invoice_factory):
        statuses = [InvoiceStatus.PENDING, InvoiceStatus.APPROVED] * 3 + [InvoiceStatus.PENDING]
        invoices = [invoice_factory(str(i), status=s) for i, s in enumerate(statuses)]

        stats = build_dashboard_stats(invoices)

        assert stats.pending_count + stats.approved_count == stats.processed_count == 7

    def test_recent_activity_is_first_five(self, invoice_factory):
        start = datetime(2024, 5, 1, tzinfo=timezone.utc)
        # Already newest first, as the repository returns them
        invoices = [
            invoice_factory(str(i), created_at=start - timedelta(hours=i))
            for i in range(8)
        ]

        stats = build_dashboard_stats(invoices)

        assert len(stats.recent_activity) == RECENT_ACTIVITY_LIMIT
        assert [i.id for i in stats.recent_activity] == ["0", "1", "2", "3", "4"]

    def test_total_handles_decimals(self, invoice_factory):
        invoices = [invoice_factory("1", amount="0.10"), invoice_factory("2", amount="0.20")]
        assert total_spending(invoices) == Decimal("0.30")


class TestMonthlySpending:

    def test_latest_month_is_current_total(self):
        series = monthly_spending(Decimal("350"))
        assert [point.month for point in series] == ["Jan", "Feb", "Mar", "Apr", "May"]
        assert series[-1].amount == Decimal("350")
        assert series[0].amount == Decimal("4500")

    def test_zero_total_uses_placeholder(self):
        assert monthly_spending(Decimal("0"))[-1].amount == Decimal("1500")


class TestFormatCurrency:

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("350"), "$350"),
            (Decimal("1234.5"), "$1,234.50"),
            (Decimal("0"), "$0"),
            (Decimal("-25.25"), "-$25.25"),
        ],
    )
    def test_format(self, amount, expected):
        assert format_currency(amount) == expected
