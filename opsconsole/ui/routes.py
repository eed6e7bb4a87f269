"""
Routes page
"""
import streamlit as st

from opsconsole.core.models import ALL_TRAFFIC_LEVELS
from opsconsole.core.resource_sync import route_synchronizer
from opsconsole.ui.crud import page_state, render_resource_page

PAGE_KEY = "routes"


def _route_form(editing, busy):
    with st.form("route_form"):
        # Route ID cannot change once created
        route_id = st.text_input(
            "Route ID", value=editing.route_id if editing else "", disabled=editing is not None
        )
        distance = st.number_input(
            "Distance (km)", min_value=0.0, step=0.1,
            value=float(editing.distance_km) if editing else 0.0,
        )
        traffic = st.selectbox(
            "Traffic Level",
            ALL_TRAFFIC_LEVELS,
            index=ALL_TRAFFIC_LEVELS.index(editing.traffic_level)
            if editing and editing.traffic_level in ALL_TRAFFIC_LEVELS else 0,
        )
        base_time = st.number_input(
            "Base Time (minutes)", min_value=0, step=1,
            value=int(editing.base_time_minutes) if editing else 1,
        )
        submitted = st.form_submit_button("Update" if editing else "Save", disabled=busy)

    if not submitted:
        return None
    return {
        "route_id": route_id,
        "distance_km": distance,
        "traffic_level": traffic,
        "base_time_minutes": base_time,
    }


def render_routes(ctx):
    sync = page_state(PAGE_KEY, lambda: route_synchronizer(ctx.client))
    render_resource_page(
        title="🛣️ Manage Routes",
        sync=sync,
        columns=["Route ID", "Distance (km)", "Traffic Level", "Base Time (min)"],
        to_row=lambda r: [r.route_id, r.distance_km, r.traffic_level, r.base_time_minutes],
        render_form=_route_form,
    )
