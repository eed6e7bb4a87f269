"""
Orders page

Also loads routes so the form can offer assignedRouteId choices.
"""
import streamlit as st

from opsconsole.core.models import ALL_ORDER_STATUSES
from opsconsole.core.resource_sync import order_synchronizer, route_synchronizer
from opsconsole.ui.crud import ensure_loaded, page_state, render_resource_page

PAGE_KEY = "orders"
ROUTES_KEY = "orders_routes"


def _order_form_factory(routes_sync):
    def _order_form(editing, busy):
        ensure_loaded(routes_sync)
        choices = {r.route_id: r.choice_label for r in routes_sync.items}
        route_ids = list(choices)
        if editing and editing.assigned_route_id and editing.assigned_route_id not in choices:
            route_ids.append(editing.assigned_route_id)

        with st.form("order_form"):
            order_id = st.text_input(
                "Order ID", value=editing.order_id if editing else "", disabled=editing is not None
            )
            value = st.number_input(
                "Value (Rs)", min_value=0.0, step=1.0,
                value=float(editing.value_rs) if editing else 0.0,
            )
            route = st.selectbox(
                "Assigned Route",
                route_ids,
                index=route_ids.index(editing.assigned_route_id)
                if editing and editing.assigned_route_id in route_ids else None,
                format_func=lambda rid: choices.get(rid, rid),
                placeholder="Select a route",
            )
            status = st.selectbox(
                "Status",
                ALL_ORDER_STATUSES,
                index=ALL_ORDER_STATUSES.index(editing.status)
                if editing and editing.status in ALL_ORDER_STATUSES else 0,
            )
            submitted = st.form_submit_button("Update" if editing else "Save", disabled=busy)

        if routes_sync.error:
            st.caption(routes_sync.error)

        if not submitted:
            return None
        return {
            "order_id": order_id,
            "value_rs": value,
            "assigned_route_id": route,
            "status": status,
        }
    return _order_form


def render_orders(ctx):
    sync = page_state(PAGE_KEY, lambda: order_synchronizer(ctx.client))
    routes_sync = page_state(ROUTES_KEY, lambda: route_synchronizer(ctx.client))
    render_resource_page(
        title="📦 Manage Orders",
        sync=sync,
        columns=["Order ID", "Value (Rs)", "Assigned Route", "Status"],
        to_row=lambda o: [o.order_id, o.value_rs, o.assigned_route_id, o.status],
        render_form=_order_form_factory(routes_sync),
    )
