"""
Streamlit UI for square-footage pricing.

Features:
- Service picker grouped by profile
- Square footage entry with acreage converter
- Rendered breakdown and resolution trace
"""
import streamlit as st
import pandas as pd
from datetime import datetime

from tier_pricing.engine import PricingEngine, InvalidInput, NoMatch
from tier_pricing.engine.display import render_lines
from tier_pricing.engine.resolver import acres_to_sqft, parse_square_footage


st.set_page_config(
    page_title="Service Pricing Calculator",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine()


try:
    engine = get_engine()
except (FileNotFoundError, ValueError) as e:
    st.error(f"System Error: {e}")
    st.stop()


# ============================================================================
# SIDEBAR: Service selection
# ============================================================================
with st.sidebar:
    st.header("🏠 Service")

    profiles = sorted({s.profile_id for s in engine.list_services()})
    profile_id = st.selectbox("Profile", options=profiles)
    services = engine.list_services(profile_id)

    labels = [f"{s.name} | {s.frequency}" if s.frequency else s.name for s in services]
    selected = st.selectbox("Service", options=range(len(services)), format_func=lambda i: labels[i])
    service = services[selected] if services else None

    st.divider()

    with st.expander("📐 Acreage Converter"):
        acres_text = st.text_input("Acres", value="")
        if acres_text.strip():
            try:
                st.success(f"{acres_to_sqft(acres_text):,} sq ft")
            except InvalidInput:
                st.error("Please enter a valid number")

    if engine.load_report["warnings"]:
        st.warning(f"⚠️ {len(engine.load_report['warnings'])} catalog warnings")


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Service Pricing Calculator")
st.caption(f"{len(engine.services)} services loaded | {datetime.now().strftime('%Y-%m-%d')}")

if service is None:
    st.info("No services for this profile.")
    st.stop()

col1, col2 = st.columns([1.2, 1.8], gap="large")

with col1:
    st.subheader(service.name)
    if service.billing_frequency:
        st.caption(f"Billed {service.billing_frequency}")

    sqft_text = st.text_input("Square footage", placeholder="Enter square footage")

    with st.expander("📋 Pricing Tiers"):
        st.dataframe(
            pd.DataFrame([{
                'Min Sq Ft': t.sqft_min,
                'Max Sq Ft': t.sqft_max,
                'Service Type': t.service_type,
                'First': t.first_price,
                'Recurring': t.recurring_price,
                'Components': len(t.components),
            } for t in service.tiers]),
            use_container_width=True,
            hide_index=True
        )

with col2:
    st.subheader("Pricing")
    sqft = parse_square_footage(sqft_text)

    if sqft_text.strip():
        try:
            result = engine.quote(service.service_id, sqft)
        except InvalidInput:
            result = None

        if result is not None:
            with st.container(border=True):
                lines = render_lines(result)
                for line in lines[:-1]:
                    st.text(line)
                if isinstance(result, NoMatch):
                    st.warning(lines[-1])
                else:
                    st.caption(lines[-1])

            with st.expander("🔍 Resolution Details"):
                for t in result.trace:
                    if t.value:
                        st.caption(f"**{t.step}**: {t.description} = `{t.value}`")
                    else:
                        st.caption(f"**{t.step}**: {t.description}")
    else:
        st.info("Enter a square footage to see pricing.")
