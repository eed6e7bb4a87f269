"""
Delivery Operations Console - Streamlit entrypoint

Run with:  streamlit run app.py
"""
import logging

import streamlit as st

from opsconsole.config import load_settings
from opsconsole.context import build_context
from opsconsole.core.route_guard import GUARD_LOADING, GUARD_UNAUTHENTICATED
from opsconsole.ui.browser import current_browser_id
from opsconsole.ui.crud import reset_page_state

# ═══════════════════════════════════════════════════════════════
# PAGE CONFIG (MUST BE FIRST)
# ═══════════════════════════════════════════════════════════════
st.set_page_config(
    page_title="Delivery Operations Console",
    layout="wide",
    initial_sidebar_state="expanded",
)

SETTINGS = load_settings()
logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ═══════════════════════════════════════════════════════════════
# SESSION STATE (ONE CONTEXT PER TAB, ONE STORE PER BROWSER)
# ═══════════════════════════════════════════════════════════════
browser_id = current_browser_id()

if "console" not in st.session_state:
    st.session_state.console = build_context(SETTINGS, browser_id)
    st.session_state.active_path = None

ctx = st.session_state.console

if not ctx.sessions.session.resolved:
    with st.spinner("Checking session..."):
        ctx.sessions.restore()


def render_page(path: str) -> None:
    """Lazy-import the page for `path` and render it."""
    if path == "/dashboard":
        from opsconsole.ui.dashboard import render_dashboard
        render_dashboard(ctx)
    elif path == "/simulation":
        from opsconsole.ui.simulation import render_simulation
        render_simulation(ctx)
    elif path.startswith("/simulation/"):
        from opsconsole.ui.simulation import render_simulation_details
        render_simulation_details(ctx, path.rsplit("/", 1)[-1])
    elif path == "/drivers":
        from opsconsole.ui.drivers import render_drivers
        render_drivers(ctx)
    elif path == "/routes":
        from opsconsole.ui.routes import render_routes
        render_routes(ctx)
    elif path == "/orders":
        from opsconsole.ui.orders import render_orders
        render_orders(ctx)
    else:
        ctx.navigator.navigate("/dashboard")
        st.rerun()


# ═══════════════════════════════════════════════════════════════
# PAGE SWITCH: unmount whatever the previous page had in flight
# ═══════════════════════════════════════════════════════════════
location = ctx.navigator.location
if st.session_state.active_path != location.path:
    reset_page_state()
    st.session_state.active_path = location.path

st.title("🚚 Delivery Operations Console")

if ctx.guard.is_public(location):
    from opsconsole.ui.login import render_login
    render_login(ctx)
else:
    decision = ctx.guard.evaluate(ctx.sessions.session, location)

    if decision.state == GUARD_LOADING:
        st.info("Loading...")
    elif decision.state == GUARD_UNAUTHENTICATED:
        st.rerun()
    else:
        from opsconsole.ui.navbar import render_navbar
        render_navbar(ctx)
        render_page(location.path)

        # A forced logout during the page's requests moved us to login
        if ctx.navigator.location.path != location.path:
            st.rerun()
