"""
Drivers page
"""
import streamlit as st

from opsconsole.core.resource_sync import driver_synchronizer
from opsconsole.ui.crud import page_state, render_resource_page

PAGE_KEY = "drivers"


def _driver_form(editing, busy):
    with st.form("driver_form"):
        name = st.text_input("Name", value=editing.name if editing else "")
        email = st.text_input("Email", value=(editing.email or "") if editing else "")
        shift = st.number_input(
            "Current Shift Hours",
            min_value=0.0,
            step=0.5,
            value=float(editing.current_shift_hours) if editing else 0.0,
        )
        active = st.checkbox("Active", value=editing.is_active if editing else True)
        past = st.text_input(
            "Past 7 Day Hours (comma separated)",
            value=",".join(str(h) for h in editing.past_7_day_hours) if editing else "",
            placeholder="e.g. 7,8,6,7,8,6",
        )
        submitted = st.form_submit_button("Update" if editing else "Save", disabled=busy)

    if not submitted:
        return None
    return {
        "name": name,
        "email": email,
        "current_shift_hours": shift,
        "is_active": active,
        "past_7_day_hours": past,
    }


def render_drivers(ctx):
    sync = page_state(PAGE_KEY, lambda: driver_synchronizer(ctx.client))
    render_resource_page(
        title="🧑‍✈️ Manage Drivers",
        sync=sync,
        columns=["Name", "Email", "Current Shift Hours", "Status"],
        to_row=lambda d: [
            d.name,
            d.email or "-",
            d.current_shift_hours,
            "Active" if d.is_active else "Inactive",
        ],
        render_form=_driver_form,
    )
