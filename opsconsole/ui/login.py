"""
Login page
"""
import streamlit as st

from opsconsole.core.navigation import login_return_target


def render_login(ctx):
    st.markdown("## 🔐 Logistics System Login")

    session = ctx.sessions.session
    if session.error:
        st.error(session.error)

    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", type="primary")

    if submitted:
        # Failure keeps the operator here with the error shown
        if ctx.sessions.login(email.strip(), password) is not None:
            target = login_return_target(ctx.navigator.location)
            ctx.navigator.navigate(target.path, params=target.params)
        st.rerun()
