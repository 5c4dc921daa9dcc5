"""Authentication package."""

from expense_tracker.auth.session import (
    AuthSession,
    AuthenticationError,
    SessionListener,
)

__all__ = ["AuthSession", "AuthenticationError", "SessionListener"]
