import logging

import folium
import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

from frontend.analytics_view import ErrorView, LoadingView, build_analytics_view
from frontend.api_client import AnalyticsStore, SitesClient
from frontend.charts import build_figure
from frontend.config import API_BASE, DEFAULT_TIME_RANGE, TIME_RANGES, configure_logging
from frontend.notifications import StreamlitNotifier
from frontend.site_form import SiteFormController

configure_logging()
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Drone Ops Dashboard", layout="wide")

# -------------------------------
# Sidebar Navigation
# -------------------------------
st.sidebar.title("📊 Menu")
page = st.sidebar.radio(
    "Choose a Dashboard:",
    [
        "📊 Analytics",
        "📍 Sites",
    ]
)

API = st.sidebar.text_input("API base URL", value=API_BASE)

# -------------------------------
# Collaborators (one set per session and API URL)
# -------------------------------
if st.session_state.get("api_base") != API:
    st.session_state.api_base = API
    st.session_state.sites_client = SitesClient(API)
    st.session_state.analytics_store = AnalyticsStore(API)
    st.session_state.site_form = SiteFormController(
        st.session_state.sites_client.add_site, StreamlitNotifier()
    )

sites_client = st.session_state.sites_client
analytics_store = st.session_state.analytics_store
site_form = st.session_state.site_form

if "time_range" not in st.session_state:
    st.session_state.time_range = DEFAULT_TIME_RANGE
if "site_form_nonce" not in st.session_state:
    st.session_state.site_form_nonce = 0

StreamlitNotifier.flush()


# -------------------------------
# 1️⃣ ANALYTICS
# -------------------------------
def _select_range(label):
    st.session_state.time_range = label


def render_analytics():
    head, ranges = st.columns([3, 2])
    head.title("Analytics")
    head.caption("Monitor your drone operations and performance metrics")

    # Time range buttons
    range_cols = ranges.columns(len(TIME_RANGES) + 1)
    for col, label in zip(range_cols, TIME_RANGES):
        selected = st.session_state.time_range == label
        col.button(f"{TIME_RANGES[label]} Days", key=f"range_{label}",
                   type="primary" if selected else "secondary",
                   on_click=_select_range, args=(label,))
    refresh = range_cols[-1].button("🔄", help="Reload analytics")

    range_days = TIME_RANGES[st.session_state.time_range]
    if refresh or analytics_store.range_days != range_days:
        with st.spinner("Loading analytics..."):
            analytics_store.load(range_days)

    view = build_analytics_view(analytics_store)

    if isinstance(view, LoadingView):
        st.info("Loading analytics...")
        return
    if isinstance(view, ErrorView):
        st.error(f"**{view.title}**\n\n{view.message}")
        return

    # --- Key Metrics ---
    for col, card in zip(st.columns(len(view.metrics)), view.metrics):
        col.metric(f"{card.icon} {card.title}", card.value)
        col.caption(card.caption)

    st.divider()

    # --- Charts ---
    tabs = st.tabs([panel.tab for panel in view.charts])
    for tab, panel in zip(tabs, view.charts):
        with tab:
            st.subheader(panel.title)
            st.caption(panel.description)
            if not panel.data:
                st.info("No data for this period yet.")
            st.plotly_chart(build_figure(panel), use_container_width=True, key=f"chart_{panel.key}")


# -------------------------------
# 2️⃣ SITES
# -------------------------------
SITE_FIELDS = ("name", "description", "latitude", "longitude", "altitude", "is_active")


def _field_key(name):
    return f"site_{name}_{st.session_state.site_form_nonce}"


def _field_error(name):
    message = site_form.errors.get(name)
    if message:
        st.caption(f":red[{message}]")


def _queue_site_submit():
    # Runs before the dialog redraws, so field errors show in that same run
    site_form.update(**{name: st.session_state[_field_key(name)] for name in SITE_FIELDS})
    site_form.queue_submit()


def _draw_site_buttons(cancel_slot, confirm_slot, suffix=""):
    busy = site_form.confirm_disabled
    cancel_slot.button("Cancel", key=f"site_cancel{suffix}", disabled=busy,
                       on_click=site_form.cancel, use_container_width=True)
    confirm_slot.button(site_form.confirm_label, key=f"site_confirm{suffix}", type="primary",
                        disabled=busy, on_click=_queue_site_submit, use_container_width=True)


@st.dialog("Add New Site")
def add_site_dialog():
    if not site_form.is_open:
        # Cancelled from inside the dialog
        st.rerun()
    StreamlitNotifier.flush()
    st.caption("Create a new operational site for drone missions. Fill in the details below.")

    # Map click prefills the coordinate inputs; st_folium repeats the last
    # click on every rerun, so each click is applied once
    with st.expander("🗺️ Pick location on map"):
        nonce = st.session_state.site_form_nonce
        lat0 = st.session_state.get(_field_key("latitude")) or 20.0
        lon0 = st.session_state.get(_field_key("longitude")) or 0.0
        m = folium.Map(location=[lat0, lon0], zoom_start=3)
        clicked = st_folium(m, height=300, width=450, key=f"site_map_{nonce}")
        point = (clicked or {}).get("last_clicked")
        if point and point != st.session_state.get(f"site_map_applied_{nonce}"):
            st.session_state[f"site_map_applied_{nonce}"] = point
            st.session_state[_field_key("latitude")] = point["lat"]
            st.session_state[_field_key("longitude")] = point["lng"]

    st.text_input("Site Name *", placeholder="Enter site name", key=_field_key("name"))
    _field_error("name")

    st.text_area("Description", placeholder="Enter site description",
                 height=90, key=_field_key("description"))

    c1, c2 = st.columns(2)
    with c1:
        st.number_input("Latitude *", format="%.6f", step=0.0001, key=_field_key("latitude"))
        _field_error("latitude")
    with c2:
        st.number_input("Longitude *", format="%.6f", step=0.0001, key=_field_key("longitude"))
        _field_error("longitude")

    st.number_input("Altitude (meters)", key=_field_key("altitude"))
    st.toggle("Site is active", key=_field_key("is_active"))

    # Buttons live in placeholders: a queued draft draws them disabled
    # before the blocking save, and a failed save redraws them enabled
    cancel_col, submit_col = st.columns(2)
    cancel_slot, confirm_slot = cancel_col.empty(), submit_col.empty()
    _draw_site_buttons(cancel_slot, confirm_slot)

    if site_form.queued:
        if site_form.submit():
            # Fresh widget keys, so the saved values cannot be sent again
            st.session_state.site_form_nonce += 1
            st.rerun()
        _draw_site_buttons(cancel_slot, confirm_slot, suffix="_retry")
        StreamlitNotifier.flush()


def open_site_dialog():
    site_form.open()
    st.session_state.site_form_nonce += 1
    draft = site_form.draft
    for name in SITE_FIELDS:
        st.session_state[_field_key(name)] = getattr(draft, name)


def render_sites():
    st.title("📍 Sites")

    if st.button("➕ Add Site", key="add_site", type="primary"):
        open_site_dialog()
    if site_form.is_open:
        add_site_dialog()

    sites = sites_client.list_sites()
    if not sites:
        st.info("No sites added yet.")
        return

    df = pd.DataFrame(sites)
    st.map(df.rename(columns={"latitude": "lat", "longitude": "lon"})[["lat", "lon"]])
    df = df.rename(columns={
        "id": "Site ID",
        "name": "Site Name",
        "description": "Description",
        "latitude": "Latitude",
        "longitude": "Longitude",
        "altitude": "Altitude (m)",
        "is_active": "Active",
    })
    st.dataframe(df.drop(columns=["created_at"], errors="ignore"), use_container_width=True)


if page == "📊 Analytics":
    # A dialog closed with its X is not reported; leaving the page discards it
    site_form.cancel()
    render_analytics()
elif page == "📍 Sites":
    render_sites()
