"""Streamlit hours-saved calculator backed by the Timesaver API.

Run with ``streamlit run app_streamlit.py`` while the API is up.
"""
import streamlit as st
import requests
import pandas as pd

from timesaver.core.config import settings
from timesaver.domain.usage import CLIENT_BOUNDS
from timesaver.services.calculator import clamp_inputs, estimate_hours_saved

# ---------------------------
# CONFIG
# ---------------------------
st.set_page_config(page_title="Timesaver Calculator", page_icon="⏱️", layout="centered")

API_BASE = settings.api_base
st.title("⏱️ How many hours could you save?")
st.caption("Tell us about your week and we'll estimate the time automation gives back.")

FIELDS = [
    ("emails_per_week", "Emails handled per week", 100, 1),
    ("data_entry_hours", "Hours of data entry per week", 5.0, 0.5),
    ("follow_ups", "Follow-ups sent per week", 20, 1),
    ("reporting_hours", "Hours spent on reporting per week", 3.0, 0.5),
]

# Per-session state; every visitor gets their own flag
if "calculator_used" not in st.session_state:
    st.session_state["calculator_used"] = False
if "last_hours" not in st.session_state:
    st.session_state["last_hours"] = None


# ---------------------------
# HELPER FUNCTIONS
# ---------------------------
def track_event(event, properties=None):
    """Fire-and-forget analytics call; failures only show up in the sidebar."""
    try:
        requests.post(
            f"{API_BASE}/api/analytics",
            json={"event": event, "properties": properties or {}},
            timeout=5,
        )
    except requests.RequestException as e:
        st.sidebar.warning(f"Analytics unavailable: {e}")


def fetch_breakdown(inputs):
    """Ask the API for the per-field breakdown, or None if it is unreachable."""
    payload = {
        "emailsPerWeek": inputs.emails_per_week,
        "dataEntry": inputs.data_entry_hours,
        "followUps": inputs.follow_ups,
        "reporting": inputs.reporting_hours,
    }
    try:
        res = requests.post(f"{API_BASE}/api/calculate", json=payload, timeout=10)
        if res.ok:
            return res.json().get("breakdown")
        st.error(f"Error: {res.json().get('error', 'Unknown error')}")
    except requests.RequestException as e:
        st.warning(f"Breakdown unavailable, backend not reachable: {e}")
    return None


# ---------------------------
# CALCULATOR
# ---------------------------
raw = {}
for field, label, default, step in FIELDS:
    minimum, maximum = CLIENT_BOUNDS[field]
    raw[field] = st.number_input(
        label,
        min_value=type(default)(minimum),
        max_value=type(default)(maximum),
        value=default,
        step=step,
        key=field,
    )

inputs = clamp_inputs(raw)
hours = estimate_hours_saved(inputs)

if st.session_state["last_hours"] is not None and hours != st.session_state["last_hours"]:
    if not st.session_state["calculator_used"]:
        track_event("calculator_used", {"initial_hours": st.session_state["last_hours"]})
        st.session_state["calculator_used"] = True
st.session_state["last_hours"] = hours

st.metric("Estimated time saved", f"{hours} hours / week")

breakdown = fetch_breakdown(inputs)
if breakdown:
    df = pd.DataFrame(
        {"hours": [breakdown["email"], breakdown["dataEntry"], breakdown["followUp"], breakdown["reporting"]]},
        index=["Email", "Data entry", "Follow-ups", "Reporting"],
    )
    st.bar_chart(df)

# ---------------------------
# LEAD CAPTURE
# ---------------------------
st.subheader("📬 Book a free automation audit")
with st.form("lead_form"):
    email = st.text_input("Work email")
    company = st.text_input("Company (optional)")
    phone = st.text_input("Phone (optional)")
    submitted = st.form_submit_button("Send")

if submitted:
    track_event("cta_clicked", {"hours_displayed": hours, **inputs.model_dump()})
    try:
        res = requests.post(
            f"{API_BASE}/api/lead",
            json={"email": email, "company": company, "phone": phone, "calculatedHours": hours},
            timeout=10,
        )
        if res.ok:
            st.success("Thanks! We'll be in touch.")
        else:
            st.error(res.json().get("error", "Could not send, please try again."))
    except requests.RequestException as e:
        st.error(f"⚠️ Error contacting backend: {e}")
