"""
Dashboard

Latest simulation KPIs + charts, and entity counts.
No simulation yet (404) renders a call-to-action, not an error.
"""
import streamlit as st

from opsconsole.core.projections import NO_DATA, delivery_chart, fuel_cost_chart, kpi_summary
from opsconsole.core.simulation import DashboardState, load_dashboard
from opsconsole.ui.charts import delivery_pie, fuel_cost_bar
from opsconsole.ui.crud import page_state

PAGE_KEY = "dashboard"


def render_kpis(result):
    kpis = kpi_summary(result)
    if kpis is NO_DATA:
        return
    c1, c2, c3 = st.columns(3)
    c1.metric("Total Profit", kpis.profit_label)
    c2.metric("Efficiency", kpis.efficiency_label)
    c3.metric("On-time Deliveries", kpis.deliveries_label)


def render_charts(result):
    delivery = delivery_chart(result)
    fuel = fuel_cost_chart(result)
    if delivery is NO_DATA or fuel is NO_DATA:
        return
    left, right = st.columns(2)
    with left:
        st.plotly_chart(delivery_pie(delivery), use_container_width=True)
    with right:
        st.plotly_chart(fuel_cost_bar(fuel), use_container_width=True)


def render_dashboard(ctx):
    state = page_state(PAGE_KEY, DashboardState)

    if state.loading:
        with st.spinner("Loading dashboard..."):
            load_dashboard(ctx.client, state)

    st.markdown("## 📊 Dashboard")

    if state.error:
        st.error(state.error)

    c1, c2, c3 = st.columns(3)
    c1.metric("Drivers", state.total_drivers)
    c2.metric("Routes", state.total_routes)
    c3.metric("Orders", state.total_orders)

    links = st.columns(3)
    for col, (label, path) in zip(links, [
        ("Manage Drivers", "/drivers"),
        ("Manage Routes", "/routes"),
        ("Manage Orders", "/orders"),
    ]):
        if col.button(label, key=f"dash_{path}"):
            ctx.navigator.navigate(path)
            st.rerun()

    st.divider()

    if not state.has_simulation:
        st.info("No simulations yet. Run a simulation to see delivery KPIs.")
        if st.button("Run First Simulation", type="primary"):
            ctx.navigator.navigate("/simulation")
            st.rerun()
        return

    latest = state.latest
    st.markdown("### 🚚 Latest Simulation")
    if latest.created_at is not None:
        st.caption(f"Run on: {latest.created_at.strftime('%d %b %Y, %H:%M')}")

    render_kpis(latest)
    render_charts(latest)

    if st.button("Run New Simulation"):
        ctx.navigator.navigate("/simulation")
        st.rerun()
