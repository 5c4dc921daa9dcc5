"""
Shared Streamlit widgets: stat card, toast, status badge, trend chart,
sidebar layout and placeholder page.
"""

from typing import Callable, Optional, Sequence

import plotly.graph_objects as go
import streamlit as st

from expense_tracker.models.invoice import InvoiceStatus, MonthlySpending, UserProfile
from expense_tracker.notifications import ToastCenter, ToastKind
from expense_tracker.routing import INVOICES, NAVIGATION


BAR_COLOR = "#e2e8f0"
HIGHLIGHT_COLOR = "#4f46e5"


def render_stats_card(
    title: str,
    value: str,
    trend: Optional[str] = None,
    trend_is_up: bool = True,
) -> None:
    """A bordered metric with an optional 'vs last month' badge."""
    with st.container(border=True):
        delta = None
        if trend:
            delta = f"{trend} vs last month" if trend_is_up else f"-{trend} vs last month"
        st.metric(label=title, value=value, delta=delta)


def render_toast(toasts: ToastCenter) -> None:
    """Hand the pending notification to st.toast; it closes itself."""
    toast = toasts.pop()
    if toast is None:
        return
    icon = "✅" if toast.kind == ToastKind.SUCCESS else "❌"
    st.toast(toast.message, icon=icon)


def status_badge(status: InvoiceStatus) -> str:
    color = "green" if status == InvoiceStatus.APPROVED else "orange"
    return f":{color}[{status.value.upper()}]"


def render_spending_chart(series: Sequence[MonthlySpending]) -> None:
    """Bar chart of the monthly series with the latest month highlighted."""
    colors = [BAR_COLOR] * len(series)
    if colors:
        colors[-1] = HIGHLIGHT_COLOR

    fig = go.Figure(
        go.Bar(
            x=[point.month for point in series],
            y=[float(point.amount) for point in series],
            marker_color=colors,
        )
    )
    fig.update_layout(
        margin=dict(l=0, r=0, t=10, b=0),
        height=300,
        plot_bgcolor="white",
        yaxis=dict(gridcolor="#f1f5f9"),
        showlegend=False,
    )
    st.plotly_chart(fig, use_container_width=True)


def render_sidebar(
    user: UserProfile,
    current_path: str,
    navigate: Callable[[str], None],
    on_upload: Callable[[], None],
    on_sign_out: Callable[[], None],
) -> None:
    """App shell: navigation, quick upload action, current user and sign out."""
    with st.sidebar:
        st.title("🧾 InvoiceFlow")
        st.markdown("---")

        for label, path in NAVIGATION:
            if st.button(
                label,
                key=f"nav_{path}",
                type="primary" if path == current_path else "secondary",
                use_container_width=True,
            ):
                navigate(path)

        st.markdown("---")
        if st.button("➕ Upload Invoice", key="nav_quick_upload", use_container_width=True):
            on_upload()

        st.markdown("---")
        st.caption("Signed in as")
        st.markdown(f"**{user.display_name}**")
        if user.full_name and user.email:
            st.caption(user.email)
        if st.button("Sign out", key="nav_sign_out", use_container_width=True):
            on_sign_out()


def render_placeholder_page(name: str) -> None:
    st.title(f"{name} Page")
    st.caption("This module is coming soon in the next version.")


def link_to_invoices(navigate: Callable[[str], None], label: str = "View all →") -> None:
    if st.button(label, key=f"link_invoices_{label}"):
        navigate(INVOICES)
