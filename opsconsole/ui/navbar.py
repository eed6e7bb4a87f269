"""
Sidebar navigation. Hidden while anonymous.
"""
import streamlit as st

from opsconsole.core.navigation import LOGIN_PATH

NAV_ITEMS = [
    ("📊 Dashboard", "/dashboard"),
    ("🚚 Simulation", "/simulation"),
    ("🧑‍✈️ Drivers", "/drivers"),
    ("🛣️ Routes", "/routes"),
    ("📦 Orders", "/orders"),
]


def render_navbar(ctx):
    session = ctx.sessions.session
    if not session.is_authenticated:
        return

    with st.sidebar:
        st.markdown("### Logistics System")
        st.caption(session.user.display_name)

        for label, path in NAV_ITEMS:
            active = ctx.navigator.location.path == path
            if st.button(label, key=f"nav_{path}", use_container_width=True,
                         type="primary" if active else "secondary"):
                ctx.navigator.navigate(path)
                st.rerun()

        st.divider()
        if st.button("Logout", key="nav_logout", use_container_width=True):
            ctx.sessions.logout()
            ctx.navigator.navigate(LOGIN_PATH)
            st.rerun()
