"""Dashboard aggregation package."""

from expense_tracker.queries.aggregates import (
    RECENT_ACTIVITY_LIMIT,
    build_dashboard_stats,
    format_currency,
    monthly_spending,
    total_spending,
)

__all__ = [
    "RECENT_ACTIVITY_LIMIT",
    "build_dashboard_stats",
    "format_currency",
    "monthly_spending",
    "total_spending",
]
