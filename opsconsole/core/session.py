"""
SESSION MANAGER

Owns the authentication state machine:

    ANONYMOUS ──login()──▶ VERIFYING ──▶ AUTHENTICATED
                               │
                               └──────▶ FAILED

    restore(): cached pair ─▶ VERIFYING (cached user shown) ─▶ AUTHENTICATED
                                                           └─▶ ANONYMOUS

Rules:
- A credential alone is NOT an authenticated session; it must be
  confirmed by the server at least once per process (login or /auth/me)
- The session store is written ONLY here (login / logout / 401 handler)
- A failed login never tears down the previous session
- Startup verification failures are swallowed, never crash the console
"""

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from opsconsole.core.models import UserProfile
from opsconsole.core.navigation import Navigator
from opsconsole.integrations.api_client import ApiClient, ApiError
from opsconsole.storage.session_store import SessionStore

logger = logging.getLogger(__name__)

# ==================================================
# SESSION STATUS
# ==================================================

STATUS_ANONYMOUS: Literal["ANONYMOUS"] = "ANONYMOUS"
STATUS_VERIFYING: Literal["VERIFYING"] = "VERIFYING"
STATUS_AUTHENTICATED: Literal["AUTHENTICATED"] = "AUTHENTICATED"
STATUS_FAILED: Literal["FAILED"] = "FAILED"

GENERIC_LOGIN_ERROR = "Login failed"


@dataclass
class Session:
    user: Optional[UserProfile] = None
    credential: Optional[str] = None
    status: str = STATUS_ANONYMOUS
    error: Optional[str] = None
    # Confirmed by the server during this process lifetime
    verified: bool = False
    # False until restore() has finished; the route guard shows a placeholder meanwhile
    resolved: bool = False
    # Bumped on every resolution (restore done, login, logout)
    generation: int = 0

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.credential is not None and self.verified


class SessionManager:
    """
    Process-wide session owner, injected into pages through ConsoleContext.

    Args:
        store: persisted {token, user} pair
        client: API client; its unauthorized handler is bound to this manager
        navigator: used to redirect to login on a forced logout
    """

    def __init__(self, store: SessionStore, client: ApiClient,
                 navigator: Optional[Navigator] = None):
        self.store = store
        self.client = client
        self.navigator = navigator
        self.session = Session()
        client.set_unauthorized_handler(self.handle_unauthorized)

    # ------------------------------
    # INTERNAL HELPERS
    # ------------------------------

    def _mark_resolved(self) -> None:
        self.session.resolved = True
        self.session.generation += 1

    def _reset(self) -> None:
        self.session.user = None
        self.session.credential = None
        self.session.status = STATUS_ANONYMOUS
        self.session.error = None
        self.session.verified = False

    # ------------------------------
    # OPERATIONS
    # ------------------------------

    def restore(self) -> Session:
        """
        Hydrate from persisted storage, then confirm with GET /auth/me.

        The cached profile is visible while verification runs; the verified
        profile replaces it on success. Any failure clears everything.
        """
        stored = self.store.read()

        if stored is None:
            self._reset()
            self._mark_resolved()
            return self.session

        token, cached_user = stored
        self.session.credential = token
        self.session.user = UserProfile.from_api(cached_user)
        self.session.status = STATUS_VERIFYING
        self.session.verified = False

        try:
            data = self.client.get_current_user()
            profile = UserProfile.from_api(data)
        except ApiError as e:
            logger.warning(f"Session verification failed, starting anonymous: {e}")
            self.store.clear()
            self._reset()
        else:
            self.store.write(token, data)
            self.session.user = profile
            self.session.status = STATUS_AUTHENTICATED
            self.session.verified = True
            self.session.error = None
            logger.info(f"Session restored for {profile.email}")

        self._mark_resolved()
        return self.session

    def login(self, email: str, password: str) -> Optional[UserProfile]:
        """
        Authenticate with the server.

        Returns the profile on success, None on failure (message in
        session.error). Persisted state is only touched on success.
        """
        if not email or not password:
            self.session.status = STATUS_FAILED
            self.session.error = "Email and password are required"
            return None

        self.session.status = STATUS_VERIFYING
        self.session.error = None

        try:
            data = self.client.login(email, password)
            token = data["token"]
            user = data["user"]
        except ApiError as e:
            self.session.status = STATUS_FAILED
            self.session.error = e.server_message or GENERIC_LOGIN_ERROR
            logger.warning(f"Login failed for {email}: {self.session.error}")
            return None
        except (KeyError, TypeError):
            self.session.status = STATUS_FAILED
            self.session.error = GENERIC_LOGIN_ERROR
            logger.warning("Login response missing token or user")
            return None

        self.store.write(token, user)
        profile = UserProfile.from_api(user)
        self.session.user = profile
        self.session.credential = token
        self.session.status = STATUS_AUTHENTICATED
        self.session.verified = True
        self._mark_resolved()
        logger.info(f"Logged in as {profile.email}")
        return profile

    def logout(self) -> None:
        """Clear persisted and in-memory state. No server call."""
        self.store.clear()
        self._reset()
        self._mark_resolved()
        logger.info("Logged out")

    def handle_unauthorized(self) -> None:
        """Global 401 rule: forced logout + redirect to login."""
        self.logout()
        if self.navigator is not None:
            self.navigator.redirect_to_login()
