"""
Shared CRUD page for drivers / routes / orders.

Minimal by default: table first, form only when requested.
The page never touches the list itself; all mutations go through the
ResourceSynchronizer so every entity page follows the same contract.
"""

from typing import Any, Callable, Dict, List, Optional

import streamlit as st

from opsconsole.core.resource_sync import (
    ACTION_CREATE,
    ACTION_REMOVE,
    ACTION_UPDATE,
    ResourceSynchronizer,
)

PAGE_STATE_KEY = "_page_state"


def page_state(key: str, factory: Callable[[], Any]) -> Any:
    """Per-page state; dropped by the app when the page is left."""
    pages = st.session_state.setdefault(PAGE_STATE_KEY, {})
    if key not in pages:
        pages[key] = factory()
    return pages[key]


def drop_page_state(key: str) -> None:
    pages = st.session_state.get(PAGE_STATE_KEY, {})
    state = pages.pop(key, None)
    unmount = getattr(state, "unmount", None)
    if callable(unmount):
        unmount()


def ensure_loaded(sync: ResourceSynchronizer) -> None:
    if not sync.mounted:
        sync.mount()
        sync.load()


def render_resource_page(
    *,
    title: str,
    sync: ResourceSynchronizer,
    columns: List[str],
    to_row: Callable[[Any], List[Any]],
    render_form: Callable[[Optional[Any], bool], Optional[Dict[str, Any]]],
) -> None:
    spec = sync.spec
    show_key = f"{spec.plural}_show_form"
    editing_key = f"{spec.plural}_editing"

    ensure_loaded(sync)

    if sync.loading and not sync.items:
        st.info(f"Loading {spec.plural}...")
        return

    st.markdown(f"## {title}")

    if sync.error:
        st.error(sync.error)

    if st.button(f"Add New {spec.name.title()}", key=f"{spec.plural}_add"):
        st.session_state[show_key] = True
        st.session_state[editing_key] = None
        sync.clear_error()

    # ------------------------------
    # FORM
    # ------------------------------
    if st.session_state.get(show_key):
        editing = sync.find(st.session_state.get(editing_key)) if st.session_state.get(editing_key) else None
        busy = sync.is_busy(ACTION_UPDATE if editing else ACTION_CREATE)

        st.markdown(f"### {'Edit' if editing else 'Add New'} {spec.name.title()}")
        values = render_form(editing, busy)

        if values is not None:
            if editing is not None:
                saved = sync.update(editing.id, values)
            else:
                saved = sync.create(values) is not None

            if saved:
                st.session_state[show_key] = False
                st.session_state[editing_key] = None
                st.rerun()
            # On failure the form keeps its values for correction

        if st.button("Cancel", key=f"{spec.plural}_cancel"):
            st.session_state[show_key] = False
            st.session_state[editing_key] = None
            st.rerun()

    st.divider()

    # ------------------------------
    # TABLE
    # ------------------------------
    if not sync.items:
        st.info(f"No {spec.plural} found")
        return

    header = st.columns(len(columns) + 1)
    for col, name in zip(header, columns + ["Actions"]):
        col.markdown(f"**{name}**")

    for item in sync.items:
        cells = st.columns(len(columns) + 1)
        for col, value in zip(cells, to_row(item)):
            col.write(value)

        with cells[-1]:
            edit_col, delete_col = st.columns(2)
            if edit_col.button("Edit", key=f"{spec.plural}_edit_{item.id}"):
                st.session_state[show_key] = True
                st.session_state[editing_key] = item.id
                st.rerun()
            if delete_col.button("Delete", key=f"{spec.plural}_delete_{item.id}"):
                st.session_state[f"{spec.plural}_confirm"] = item.id

        if st.session_state.get(f"{spec.plural}_confirm") == item.id:
            st.warning(spec.confirm_prompt)
            yes, no = st.columns(2)
            if yes.button("Yes, delete", key=f"{spec.plural}_yes_{item.id}",
                          disabled=sync.is_busy(ACTION_REMOVE)):
                st.session_state[f"{spec.plural}_confirm"] = None
                sync.remove(item.id, confirm=True)
                st.rerun()
            if no.button("No", key=f"{spec.plural}_no_{item.id}"):
                st.session_state[f"{spec.plural}_confirm"] = None
                st.rerun()


def reset_page_state() -> None:
    """Unmount and forget every page's state (called on page change)."""
    for key in list(st.session_state.get(PAGE_STATE_KEY, {})):
        drop_page_state(key)
