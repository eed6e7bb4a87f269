"""
ROUTE GUARD

Gate in front of every protected view.

States:
- LOADING          session not resolved yet: placeholder, no navigation
- AUTHENTICATED    render the protected content
- UNAUTHENTICATED  redirect to login, carrying the requested location

Rules:
- Never renders protected content while LOADING
- One decision per session resolution (no flicker between
  UNAUTHENTICATED and AUTHENTICATED for the same resolved session)
"""

from dataclasses import dataclass
from typing import Dict, Literal, Optional

from opsconsole.core.navigation import LOGIN_PATH, Location, Navigator
from opsconsole.core.session import Session

GUARD_LOADING: Literal["LOADING"] = "LOADING"
GUARD_AUTHENTICATED: Literal["AUTHENTICATED"] = "AUTHENTICATED"
GUARD_UNAUTHENTICATED: Literal["UNAUTHENTICATED"] = "UNAUTHENTICATED"

PUBLIC_PATHS = {LOGIN_PATH}


@dataclass(frozen=True)
class GuardDecision:
    state: str
    redirect_to: Optional[Location] = None

    @property
    def may_render(self) -> bool:
        return self.state == GUARD_AUTHENTICATED


class RouteGuard:

    def __init__(self, navigator: Navigator):
        self.navigator = navigator
        self._decisions: Dict[int, str] = {}

    def evaluate(self, session: Session, location: Optional[Location] = None) -> GuardDecision:
        location = location or self.navigator.location

        if not session.resolved:
            return GuardDecision(GUARD_LOADING)

        state = self._decisions.get(session.generation)
        if state is None:
            state = GUARD_AUTHENTICATED if session.is_authenticated else GUARD_UNAUTHENTICATED
            # Older generations can never come back
            self._decisions = {session.generation: state}

        if state == GUARD_AUTHENTICATED:
            return GuardDecision(GUARD_AUTHENTICATED)

        redirect = self.navigator.redirect_to_login(location)
        return GuardDecision(GUARD_UNAUTHENTICATED, redirect_to=redirect)

    def is_public(self, location: Location) -> bool:
        return location.path in PUBLIC_PATHS
