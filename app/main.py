"""
Streamlit Frontend for Expense Tracker

Pages: login, dashboard, invoices (with the upload modal), and the
settings/profile placeholders. Routing is a path kept in session state and
mirrored to the `route` query parameter; resolve_route() guards it.

The UI enforces the review step:
- User sees what was extracted
- User confirms or edits
- Nothing is saved without explicit "Confirm & Save"

Run with:
    streamlit run app/main.py
"""

import asyncio
import weakref
from datetime import date
from decimal import Decimal

import streamlit as st

from expense_tracker.audit import configure_logging
from expense_tracker.auth import AuthenticationError
from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.models.invoice import UploadedDocument
from expense_tracker.orchestrator import AppComponents, UploadState, replace_app_components
from expense_tracker.queries import format_currency, monthly_spending
from expense_tracker.routing import (
    DASHBOARD,
    INVOICES,
    LOGIN,
    PROFILE,
    SETTINGS,
    resolve_route,
)
from expense_tracker.ui.components import (
    link_to_invoices,
    render_placeholder_page,
    render_sidebar,
    render_spending_chart,
    render_stats_card,
    render_toast,
    status_badge,
)


st.set_page_config(
    page_title="InvoiceFlow",
    page_icon="🧾",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_components(reload: bool = False) -> AppComponents:
    """
    Per-browser-session components; never shared between users.

    `reload=True` closes the current components and builds new ones from
    freshly read settings. Components of a browser session that ends are
    closed when Streamlit drops its session state.
    """
    current = st.session_state.get("components")
    if current is None or reload:
        if reload:
            get_settings.cache_clear()
        settings = get_settings()
        configure_logging(settings.app.log_level)
        components = replace_app_components(current, settings)
        weakref.finalize(components, components.session.close)
        st.session_state.components = components
    return st.session_state.components


def navigate(path: str) -> None:
    """Go to `path`; the target page re-fetches its data."""
    st.session_state.route = path
    st.session_state.needs_refresh = True
    st.query_params["route"] = path
    st.rerun()


def main():
    """Main application entry point."""
    components = get_components()
    session = components.session

    if "route" not in st.session_state:
        st.session_state.route = st.query_params.get("route", DASHBOARD)
        st.session_state.needs_refresh = True

    requested = st.session_state.route
    route = resolve_route(requested, session.user)
    if route != requested:
        st.session_state.route = route
        st.query_params["route"] = route

    if route == LOGIN:
        render_login_page(components)
        return

    def open_upload():
        components.upload_flow.open()
        navigate(INVOICES)

    def sign_out():
        session.sign_out()
        components.toasts.dismiss()
        # Navigation after sign-out is ours to do
        navigate(LOGIN)

    render_sidebar(
        user=session.user,
        current_path=route,
        navigate=navigate,
        on_upload=open_upload,
        on_sign_out=sign_out,
    )
    render_toast(components.toasts)

    if route == DASHBOARD:
        render_dashboard_page(components)
    elif route == INVOICES:
        render_invoices_page(components)
    elif route == SETTINGS:
        render_settings_page()
    elif route == PROFILE:
        render_placeholder_page("Profile")


# =============================================================================
# LOGIN
# =============================================================================

def render_login_page(components: AppComponents):
    """Sign-in / sign-up form. Backend errors are shown inline, verbatim."""
    session = components.session
    if "login_mode" not in st.session_state:
        st.session_state.login_mode = "sign_in"
    is_login = st.session_state.login_mode == "sign_in"

    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.title("🧾 InvoiceFlow")
        st.subheader("Sign in to your account" if is_login else "Create an account")

        with st.form("auth_form"):
            full_name = ""
            if not is_login:
                full_name = st.text_input("Full Name", placeholder="Full Name")
            email = st.text_input("Email address", placeholder="you@company.com")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button(
                "Sign in" if is_login else "Sign up",
                type="primary",
                use_container_width=True,
            )

        if submitted:
            with st.spinner("Please wait..."):
                try:
                    if is_login:
                        session.sign_in(email, password)
                    else:
                        session.sign_up(email, password, full_name)
                        st.session_state.signup_notice = True
                except AuthenticationError as e:
                    st.error(str(e))
                else:
                    navigate(DASHBOARD)

        if st.session_state.pop("signup_notice", False):
            st.info("Check your email for confirmation!")

        toggle_label = (
            "Don't have an account? Sign up" if is_login else "Already have an account? Sign in"
        )
        if st.button(toggle_label, use_container_width=True):
            st.session_state.login_mode = "sign_up" if is_login else "sign_in"
            st.rerun()


# =============================================================================
# DASHBOARD
# =============================================================================

def _load_invoices(components: AppComponents):
    book = components.invoices
    user = components.session.user
    if user and (st.session_state.get("needs_refresh") or not book.loaded):
        with st.spinner("Loading invoices..."):
            run_async(book.refresh(user.id))
        st.session_state.needs_refresh = False
    return book


def render_dashboard_page(components: AppComponents):
    """Stat cards, spending trend and recent activity."""
    book = _load_invoices(components)
    stats = book.stats

    head_left, head_right = st.columns([3, 1])
    with head_left:
        st.title("Financial Overview")
        st.caption("Welcome back, here's what's happening today.")
    with head_right:
        st.markdown(f"Last 30 Days: **:violet[{format_currency(stats.total_spending)}]**")

    col1, col2, col3 = st.columns(3)
    with col1:
        render_stats_card("Total Spending", format_currency(stats.total_spending), trend="12%")
    with col2:
        render_stats_card("Invoices Processed", str(stats.processed_count))
    with col3:
        render_stats_card("Pending Approval", str(stats.pending_count))

    chart_col, activity_col = st.columns([2, 1])
    with chart_col:
        with st.container(border=True):
            title_col, year_col = st.columns([3, 1])
            with title_col:
                st.subheader("📈 Spending Trends")
            with year_col:
                # Shown for parity with the design; the series does not depend on it
                st.selectbox("Year", ["Year 2024", "Year 2023"], label_visibility="collapsed")
            render_spending_chart(monthly_spending(stats.total_spending))

    with activity_col:
        with st.container(border=True):
            st.subheader("Recent Activity")
            if not stats.recent_activity:
                st.caption("No activity yet")
            for invoice in stats.recent_activity:
                left, right = st.columns([2, 1])
                with left:
                    st.markdown(f"**{invoice.vendor_name}**")
                    st.caption(invoice.invoice_date.strftime("%b %d, %Y"))
                with right:
                    st.markdown(f"**{format_currency(invoice.amount)}**")
                    st.markdown(status_badge(invoice.status))
            link_to_invoices(navigate)


# =============================================================================
# INVOICES
# =============================================================================

def render_invoices_page(components: AppComponents):
    """Invoice table with search, view, confirmed delete and the upload modal."""
    book = _load_invoices(components)
    flow = components.upload_flow
    user = components.session.user

    head_left, head_right = st.columns([3, 1])
    with head_left:
        st.title("Invoices")
        st.caption("Manage and track your business expenses.")
    with head_right:
        if st.button("➕ Upload Invoice", type="primary", use_container_width=True):
            flow.open()
            st.rerun()

    if flow.is_open:
        render_upload_modal(components)

    query = st.text_input("Search", placeholder="Search by vendor...", label_visibility="collapsed")
    rows = book.search(query)

    if not book.invoices:
        with st.container(border=True):
            st.markdown("**No invoices found**")
            st.caption("Upload your first invoice to get started.")
            if st.button("Upload now"):
                flow.open()
                st.rerun()
        return

    header = st.columns([3, 2, 2, 2, 2])
    for col, label in zip(header, ["Vendor", "Date", "Amount", "Status", "Actions"]):
        col.markdown(f"**{label}**")

    for invoice in rows:
        vendor_col, date_col, amount_col, status_col, actions_col = st.columns([3, 2, 2, 2, 2])
        vendor_col.markdown(invoice.vendor_name)
        date_col.markdown(invoice.invoice_date.strftime("%b %d, %Y"))
        amount_col.markdown(format_currency(invoice.amount))
        status_col.markdown(status_badge(invoice.status))
        with actions_col:
            view_col, delete_col = st.columns(2)
            if view_col.button("👁", key=f"view_{invoice.id}", help="View"):
                st.session_state.viewing = (
                    None if st.session_state.get("viewing") == invoice.id else invoice.id
                )
                st.rerun()
            if delete_col.button("🗑", key=f"delete_{invoice.id}", help="Delete"):
                book.request_delete(invoice.id)
                st.rerun()

        if st.session_state.get("viewing") == invoice.id and invoice.image_url:
            st.image(invoice.image_url, width=200)

        if book.pending_delete == invoice.id:
            with st.container(border=True):
                st.warning("Are you sure you want to delete this invoice?")
                confirm_col, cancel_col = st.columns(2)
                if confirm_col.button("Delete", key=f"confirm_delete_{invoice.id}", type="primary"):
                    run_async(book.confirm_delete(user_id=user.id if user else None))
                    st.rerun()
                if cancel_col.button("Cancel", key=f"cancel_delete_{invoice.id}"):
                    book.cancel_delete()
                    st.rerun()


def render_upload_modal(components: AppComponents):
    """Upload → extract → review → save, inside a bordered panel."""
    flow = components.upload_flow
    settings = components.settings.app
    user = components.session.user

    if flow.state == UploadState.EXTRACTING:
        # A previous run was interrupted mid-extraction; start the attempt over
        flow.open()

    with st.container(border=True):
        title_col, close_col = st.columns([12, 1])
        title_col.subheader("Upload Invoice")
        if close_col.button("✕", key="upload_close", help="Cancel"):
            flow.cancel()
            st.rerun()

        if flow.state == UploadState.AWAITING_FILE:
            nonce = st.session_state.get("upload_nonce", 0)
            uploaded = st.file_uploader(
                f"Click to upload or drag and drop (PNG, JPG up to {settings.max_upload_size_mb}MB)",
                type=settings.supported_formats_list,
                key=f"invoice_upload_{flow.attempt}_{nonce}",
            )
            if uploaded is not None:
                document = UploadedDocument(
                    filename=uploaded.name,
                    mime_type=uploaded.type or "application/octet-stream",
                    content=uploaded.getvalue(),
                    size_bytes=uploaded.size,
                )
                with st.spinner("AI is analyzing your invoice..."):
                    extracted = run_async(flow.extract(document))
                if extracted is None:
                    # Fresh uploader so the failed file is not re-submitted on rerun
                    st.session_state.upload_nonce = nonce + 1
                st.rerun()

        elif flow.state == UploadState.REVIEW and flow.draft is not None:
            draft = flow.draft
            st.success("Data extracted successfully. Please verify the details below.")
            with st.form(f"review_{flow.attempt}"):
                vendor_name = st.text_input("Vendor Name", value=draft.vendor_name)
                date_col, amount_col = st.columns(2)
                invoice_date = date_col.date_input("Date", value=draft.invoice_date)
                amount = amount_col.number_input(
                    "Amount ($)",
                    value=float(draft.amount),
                    step=0.01,
                    format="%.2f",
                )
                save_col, cancel_col = st.columns(2)
                save = save_col.form_submit_button(
                    "Confirm & Save", type="primary", use_container_width=True
                )
                cancel = cancel_col.form_submit_button("Cancel", use_container_width=True)

            if cancel:
                flow.cancel()
                st.rerun()
            if save and user is not None:
                flow.update_draft(
                    vendor_name=vendor_name,
                    amount=Decimal(str(amount)),
                    invoice_date=invoice_date if isinstance(invoice_date, date) else None,
                )
                run_async(flow.save(user))
                st.rerun()


# =============================================================================
# SETTINGS
# =============================================================================

def render_settings_page():
    """Placeholder page plus backend connection status."""
    render_placeholder_page("Settings")

    st.markdown("### Connection Status")
    status = validate_all_settings()
    services = [
        ("Supabase (Database & Auth)", "supabase"),
        ("Mindee (Invoice Extraction)", "mindee"),
    ]
    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.caption(f"Extractor in use: {get_components().invoice_service.extractor_name}")
    if st.button("🔄 Reload configuration", help="Re-reads settings and reconnects; signs you out"):
        get_components(reload=True)
        navigate(LOGIN)


if __name__ == "__main__":
    main()
