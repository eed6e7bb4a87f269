"""
NAVIGATION BOUNDARY

The console's notion of "where the operator is". The page router itself
is external (Streamlit reruns); this module only records the current
location and redirect requests so the session layer and the route guard
can drive it without importing any UI code.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"
HOME_PATH = "/"


@dataclass(frozen=True)
class Location:
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    state: Dict[str, Any] = field(default_factory=dict)


class Navigator:
    """Holds the active location; every navigation replaces it."""

    def __init__(self, initial: str = HOME_PATH):
        self.location = Location(DASHBOARD_PATH if initial == HOME_PATH else initial)

    def navigate(self, path: str, params: Optional[Dict[str, str]] = None,
                 state: Optional[Dict[str, Any]] = None) -> Location:
        if path == HOME_PATH:
            path = DASHBOARD_PATH
        self.location = Location(path, dict(params or {}), dict(state or {}))
        logger.info(f"Navigate to {path}")
        return self.location

    def redirect_to_login(self, origin: Optional[Location] = None) -> Location:
        """Go to the login view, remembering where the operator was headed."""
        origin = origin or self.location
        if origin.path == LOGIN_PATH:
            return self.navigate(LOGIN_PATH, state=origin.state)
        return self.navigate(LOGIN_PATH, state={"from": origin})


def login_return_target(location: Location) -> Location:
    """Where to send the operator after a successful login."""
    origin = location.state.get("from")
    if isinstance(origin, Location) and origin.path != LOGIN_PATH:
        return origin
    return Location(DASHBOARD_PATH)
