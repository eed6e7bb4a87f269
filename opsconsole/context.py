"""
Console context: the owned object graph handed to every page.

One context per operator session (one Streamlit browser tab). Pages get
their collaborators from here instead of reaching for globals.

The persisted session belongs to the operator's browser: each browser id
maps to its own session file, so visitors never see each other's token.
"""

from dataclasses import dataclass
from typing import Optional

import requests

from opsconsole.config import Settings
from opsconsole.core.navigation import Navigator
from opsconsole.core.route_guard import RouteGuard
from opsconsole.core.session import SessionManager
from opsconsole.integrations.api_client import ApiClient
from opsconsole.storage.session_store import (
    FileSessionStore,
    MemorySessionStore,
    SessionStore,
    session_file_for,
)


@dataclass
class ConsoleContext:
    settings: Settings
    store: SessionStore
    client: ApiClient
    navigator: Navigator
    sessions: SessionManager
    guard: RouteGuard


def browser_store(settings: Settings, browser_id: Optional[str]) -> SessionStore:
    """Persistent store for one browser; in-memory when the browser is unknown."""
    if browser_id is None:
        return MemorySessionStore()
    return FileSessionStore(session_file_for(settings.session_dir, browser_id))


def build_context(settings: Settings, browser_id: Optional[str] = None,
                  store: Optional[SessionStore] = None,
                  http: Optional[requests.Session] = None) -> ConsoleContext:
    store = store or browser_store(settings, browser_id)
    client = ApiClient(
        settings.api_url,
        token_provider=store.token,
        timeout=settings.api_timeout,
        http=http,
    )
    navigator = Navigator()
    sessions = SessionManager(store, client, navigator)
    return ConsoleContext(
        settings=settings,
        store=store,
        client=client,
        navigator=navigator,
        sessions=sessions,
        guard=RouteGuard(navigator),
    )
