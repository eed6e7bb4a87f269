"""
Operator browser identity.

The id lives in a first-party cookie so every tab and reload of the same
browser finds the same session file, while other browsers get their own.
"""

import streamlit as st
import streamlit.components.v1 as components

from opsconsole.storage.session_store import is_browser_id, new_browser_id

BROWSER_COOKIE = "opsconsole_browser"
COOKIE_MAX_AGE = 60 * 60 * 24 * 365  # seconds


def _set_cookie(browser_id: str) -> None:
    components.html(
        "<script>"
        f"window.parent.document.cookie = '{BROWSER_COOKIE}={browser_id}; "
        f"path=/; max-age={COOKIE_MAX_AGE}; SameSite=Strict';"
        "</script>",
        height=0,
    )


def current_browser_id() -> str:
    """Browser id from the cookie, minting and storing one on first visit."""
    cookie = st.context.cookies.get(BROWSER_COOKIE)

    if "browser_id" not in st.session_state:
        st.session_state.browser_id = cookie if is_browser_id(cookie) else new_browser_id()

    browser_id = st.session_state.browser_id
    # Cookies are only re-read on page load; keep writing until it lands
    if cookie != browser_id:
        _set_cookie(browser_id)
    return browser_id
