# ===============================================================
# Delivery Timelines — ETA rules form
# ===============================================================
# Features:
#   • One section per rule: collections, shipping & delivery day ranges
#   • Every edit re-validates its rule (errors shown inline)
#   • Save blocked until every rule is valid; one atomic submit
#   • Rule list replaced wholesale on each edit → rerun-safe state
# ===============================================================

import sys, os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../../")))

import streamlit as st

from core.form_session import FormSession
from core.schemas import UIRule
from core.ui_helpers import fetch_backend, fetch_collections, post_backend
from ui.components.backend_status import render_status_bar

# -----------------------------
# Page Config
# -----------------------------
st.set_page_config(page_title="Delivery Timelines (ETA rules)", page_icon="🚚", layout="wide")
st.title("🚚 Delivery Timelines (ETA rules)")
st.caption("Shipping and delivery day ranges per collection.")
render_status_bar(expanded=True)

FIELD_LABELS = {
    "shipping_from": "Shipping from (days)",
    "shipping_to": "Shipping to (days)",
    "delivery_from": "Delivery from (days)",
    "delivery_to": "Delivery to (days)",
}


# -----------------------------
# Notifications
# -----------------------------
class SessionNotifier:
    """Queue notices in session state so they survive st.rerun()."""

    def notify(self, message: str, is_error: bool = False) -> None:
        st.session_state.notices.append((message, is_error))


def show_notices():
    for message, is_error in st.session_state.notices:
        if is_error:
            st.error(message)
        else:
            st.toast(message, icon="✅")
    st.session_state.notices = []


# -----------------------------
# Session State
# -----------------------------
if "notices" not in st.session_state:
    st.session_state.notices = []

if "form_session" not in st.session_state:
    loaded = fetch_backend("/timelines")
    initial = [UIRule.model_validate(r) for r in (loaded or {}).get("initialRules", [])]
    st.session_state.form_session = FormSession(initial, notifier=SessionNotifier())

session: FormSession = st.session_state.form_session


# -----------------------------
# Callbacks
# -----------------------------
def on_field_change(rule_id: str, field: str):
    session.update_field(rule_id, field, st.session_state[f"{rule_id}:{field}"])


def on_collections_change(rule_id: str, titles: dict):
    picked = st.session_state[f"{rule_id}:collections"]
    session.update_collections(rule_id, [{"id": cid, "title": titles.get(cid, cid)} for cid in picked])


def on_save():
    session.save(lambda payload: post_backend("/timelines", payload))


# ===============================================================
# Toolbar
# ===============================================================
show_notices()

c1, c2, _ = st.columns([1, 1, 4])
with c1:
    st.button("💾 Save timelines", type="primary", on_click=on_save, disabled=session.is_saving)
with c2:
    st.button("+ Add timeline", on_click=session.add_rule)

st.divider()

# ===============================================================
# Rules
# ===============================================================
catalog = {c["id"]: c["title"] for c in fetch_collections()}

for index, rule in enumerate(session.rules):
    st.subheader(f"Timeline {index + 1}")

    titles = dict(catalog)
    titles.update({c.id: c.title for c in rule.values.collections})
    st.multiselect(
        "Collections",
        options=list(titles),
        default=[c.id for c in rule.values.collections],
        format_func=lambda cid, t=titles: t.get(cid, cid),
        key=f"{rule.id}:collections",
        on_change=on_collections_change,
        args=(rule.id, titles),
    )

    for pair in (("shipping_from", "shipping_to"), ("delivery_from", "delivery_to")):
        cols = st.columns(2)
        for col, field in zip(cols, pair):
            with col:
                st.text_input(
                    FIELD_LABELS[field],
                    value=getattr(rule.values, field),
                    key=f"{rule.id}:{field}",
                    on_change=on_field_change,
                    args=(rule.id, field),
                )
                if rule.errors.get(field):
                    st.caption(f":red[{rule.errors[field]}]")

    st.button("Remove timeline", key=f"{rule.id}:remove", on_click=session.remove_rule, args=(rule.id,))
    st.divider()
