"""
Backend client binding.

Builds the Supabase client (database + auth) from settings. Missing
connection values are reported as a configuration error and the app keeps
starting; every backend call then fails downstream instead.
"""

from typing import Any, Optional

import structlog
from supabase import create_client

from expense_tracker.audit import AuditLogger
from expense_tracker.config import SupabaseSettings
from expense_tracker.models.audit import AuditEventBuilder


logger = structlog.get_logger(__name__)


def create_backend_client(
    settings: SupabaseSettings,
    audit_logger: Optional[AuditLogger] = None,
) -> Optional[Any]:
    """
    Create a Supabase client, or return None if it is not configured.

    A client that fails to build (e.g. a malformed URL) is treated the
    same way as a missing one.
    """
    if not settings.is_configured:
        (audit_logger or AuditLogger()).log(
            AuditEventBuilder.configuration_error(settings.missing_values)
        )
        return None

    try:
        return create_client(settings.url, settings.anon_key)
    except Exception as e:
        logger.error("backend_client_failed", error=str(e))
        return None
