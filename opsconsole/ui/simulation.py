"""
Simulation pages: run form + result, and full per-order details by id.
"""
import streamlit as st

from opsconsole.core.projections import NO_DATA, order_preview
from opsconsole.core.simulation import SimulationRunner, load_simulation
from opsconsole.ui.charts import order_outcomes_frame
from opsconsole.ui.crud import page_state
from opsconsole.ui.dashboard import render_charts, render_kpis

PAGE_KEY = "simulation"


def render_simulation(ctx):
    runner = page_state(PAGE_KEY, lambda: SimulationRunner(ctx.client))

    st.markdown("## 🚚 Run Delivery Simulation")

    with st.form("simulation_form"):
        c1, c2, c3 = st.columns(3)
        drivers = c1.number_input("Number of Drivers", min_value=1, value=5, step=1)
        start = c2.text_input("Route Start Time (HH:MM)", value="09:00")
        max_hours = c3.number_input("Max Hours per Driver", min_value=0.5, value=8.0, step=0.1)
        submitted = st.form_submit_button(
            "Running..." if runner.running else "Run Simulation",
            type="primary",
            disabled=runner.running,
        )

    if submitted:
        with st.spinner("Running simulation..."):
            runner.run({
                "number_of_drivers": drivers,
                "route_start_time": start,
                "max_hours_per_driver": max_hours,
            })

    if runner.error:
        st.error(runner.error)

    result = runner.result
    if result is None:
        return

    st.divider()
    st.markdown("### 📈 Results")
    render_kpis(result)
    render_charts(result)

    preview = order_preview(result, ctx.settings.order_preview_limit)
    if preview is NO_DATA:
        return

    st.markdown("### 📋 Order Details")
    st.dataframe(order_outcomes_frame(preview.rows), use_container_width=True, hide_index=True)

    if preview.has_more and result.id:
        st.caption(f"Showing {len(preview.rows)} of {preview.total} orders")
        if st.button("View all orders"):
            ctx.navigator.navigate(f"/simulation/{result.id}", params={"id": result.id})
            st.rerun()


def render_simulation_details(ctx, simulation_id):
    key = f"simulation_{simulation_id}"
    result = page_state(key, lambda: load_simulation(ctx.client, simulation_id))

    if result is None:
        st.warning("Simulation details are not available.")
        if st.button("← Back to Dashboard"):
            ctx.navigator.navigate("/dashboard")
            st.rerun()
        return

    st.markdown("## 📋 Simulation Details")
    if result.created_at is not None:
        st.caption(f"Run on: {result.created_at.strftime('%d %b %Y, %H:%M')}")

    st.dataframe(order_outcomes_frame(result.per_order), use_container_width=True, hide_index=True)

    if st.button("← Back to Dashboard"):
        ctx.navigator.navigate("/dashboard")
        st.rerun()
