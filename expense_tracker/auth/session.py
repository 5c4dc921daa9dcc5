"""
Auth Session

Holds the signed-in user for one browser session and delegates sign-in,
sign-up and sign-out to the backend's auth client (supabase.Client.auth).

The session is an explicitly constructed object with a lifecycle:

    session = AuthSession(client.auth)
    session.initialize()   # pick up an existing session, start listening
    ...
    session.close()        # stop listening

Nothing here navigates. After sign_out() the caller is responsible for
sending the user to the login page.

The backend may report session changes from its token-refresh thread, so
the current user is swapped under a lock. Listeners run on whichever thread
reported the change and must not touch Streamlit widgets.
"""

import threading
from typing import Any, Callable, Optional

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.invoice import UserProfile


logger = structlog.get_logger(__name__)

SessionListener = Callable[[str, Optional[UserProfile]], None]

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
INITIAL_SESSION = "INITIAL_SESSION"


class AuthenticationError(Exception):
    """Sign-in/sign-up failed. The message is the backend's, verbatim."""
    pass


class AuthSession:
    """Current-user state plus sign-in/sign-up/sign-out."""

    def __init__(
        self,
        auth_client: Optional[Any],
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Args:
            auth_client: The backend auth client (supabase.Client.auth),
                or None when the backend is not configured
            audit_logger: Where session events are recorded
        """
        self._auth = auth_client
        self._audit_logger = audit_logger or AuditLogger()
        self._user: Optional[UserProfile] = None
        self._listeners: list[SessionListener] = []
        self._subscription: Optional[Any] = None
        self._initialized = False
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Load any existing backend session and subscribe to session changes."""
        if self._initialized:
            return
        self._initialized = True

        if self._auth is None:
            logger.warning("auth_backend_not_configured")
            return

        try:
            session = self._auth.get_session()
        except Exception as e:
            logger.error("auth_get_session_failed", error=str(e))
            session = None
        self._apply_session(INITIAL_SESSION, session)

        try:
            self._subscription = self._auth.on_auth_state_change(self._on_backend_change)
        except Exception as e:
            logger.error("auth_subscribe_failed", error=str(e))

    def close(self) -> None:
        """Stop listening to the backend and drop local subscribers."""
        if self._subscription is not None:
            try:
                self._subscription.unsubscribe()
            except Exception as e:
                logger.warning("auth_unsubscribe_failed", error=str(e))
            self._subscription = None
        self._listeners.clear()
        self._initialized = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def user(self) -> Optional[UserProfile]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener called with (event_name, user) on every session change.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_user(self, event_name: str, user: Optional[UserProfile]) -> None:
        with self._lock:
            changed = user != self._user
            self._user = user
        if not changed:
            return
        self._audit_logger.log(
            AuditEventBuilder.session_changed(event_name, user.id if user else None)
        )
        for listener in list(self._listeners):
            try:
                listener(event_name, user)
            except Exception as e:
                logger.error("session_listener_failed", event=event_name, error=str(e))

    def _apply_session(self, event_name: str, session: Optional[Any]) -> None:
        auth_user = getattr(session, "user", None) if session is not None else None
        self._set_user(event_name, UserProfile.from_auth_user(auth_user) if auth_user else None)

    def _on_backend_change(self, event: Any, session: Optional[Any]) -> None:
        event_name = getattr(event, "value", None) or str(event)
        self._apply_session(event_name, session)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _require_backend(self, action: str, email: str) -> Any:
        if self._auth is None:
            message = "Authentication backend is not configured"
            self._audit_logger.log(AuditEventBuilder.auth_failed(action, email, message))
            raise AuthenticationError(message)
        return self._auth

    def sign_in(self, email: str, password: str) -> UserProfile:
        """
        Sign in with email and password.

        Raises:
            AuthenticationError: With the backend's error message
        """
        auth = self._require_backend("sign_in", email)
        try:
            response = auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            self._audit_logger.log(AuditEventBuilder.auth_failed("sign_in", email, str(e)))
            raise AuthenticationError(str(e)) from e

        auth_user = getattr(response, "user", None)
        if auth_user is None:
            message = "Sign in did not return a user"
            self._audit_logger.log(AuditEventBuilder.auth_failed("sign_in", email, message))
            raise AuthenticationError(message)

        user = UserProfile.from_auth_user(auth_user)
        self._set_user(SIGNED_IN, user)
        self._audit_logger.log(AuditEventBuilder.user_signed_in(user.id, user.email))
        return user

    def sign_up(self, email: str, password: str, full_name: str) -> Optional[UserProfile]:
        """
        Create an account, storing `full_name` as user metadata.

        Returns the signed-in user, or None when the backend requires email
        confirmation before a session is issued.

        Raises:
            AuthenticationError: With the backend's error message
        """
        auth = self._require_backend("sign_up", email)
        try:
            response = auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"full_name": full_name}},
            })
        except Exception as e:
            self._audit_logger.log(AuditEventBuilder.auth_failed("sign_up", email, str(e)))
            raise AuthenticationError(str(e)) from e

        user = None
        if getattr(response, "session", None) is not None and getattr(response, "user", None):
            user = UserProfile.from_auth_user(response.user)
            self._set_user(SIGNED_IN, user)
        self._audit_logger.log(AuditEventBuilder.user_signed_up(email, user.id if user else None))
        return user

    def sign_out(self) -> None:
        """End the session. Local state is cleared even if the backend call fails."""
        previous = self._user
        if self._auth is not None:
            try:
                self._auth.sign_out()
            except Exception as e:
                logger.error("auth_sign_out_failed", error=str(e))
        self._set_user(SIGNED_OUT, None)
        self._audit_logger.log(AuditEventBuilder.user_signed_out(previous.id if previous else None))
