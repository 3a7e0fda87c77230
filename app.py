"""
FloodSense - Streamlit front end.

Enter a point inside Davao City and get the stacked RF + XGBoost flood
susceptibility, the component model comparison and the flagged factors.
"""

import json

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

# ═══════════════════════════════════════════════════════════════════════════
# PAGE CONFIG
# ═══════════════════════════════════════════════════════════════════════════
st.set_page_config(
    page_title="Davao FloodSense",
    page_icon="🌊",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    #MainMenu, header, footer, .stDeployButton {visibility: hidden; display: none;}
    .block-container { padding: 1rem 2rem; }
</style>
""", unsafe_allow_html=True)

from core.errors import OutOfBoundsError
from core.service import create_service

RISK_COLORS = {
    "Low": "#22c55e",
    "Moderate": "#eab308",
    "High": "#f97316",
    "Very High": "#ef4444",
    "Critical": "#ef4444",
}


@st.cache_resource
def get_service():
    # One service per process, shared by every session
    return create_service()


service = get_service()

# ═══════════════════════════════════════════════════════════════════════════
# SIDEBAR
# ═══════════════════════════════════════════════════════════════════════════
st.sidebar.title("🌊 Davao FloodSense")
st.sidebar.markdown("---")

info = service.get_model_info()
st.sidebar.caption(info["modelType"])
st.sidebar.metric("Ensemble AUC", f"{info['accuracy']['ensemble']:.2f}")
if info["trained"]:
    st.sidebar.success("✅ Models ready")
else:
    st.sidebar.info("💤 Models train on first analysis")

st.sidebar.markdown("---")
st.sidebar.subheader("Known flood-prone areas")
areas = service.get_flood_prone_areas()["areas"]
area_names = ["(custom)"] + [a["name"] for a in areas]
chosen = st.sidebar.selectbox("Jump to", area_names)

# ═══════════════════════════════════════════════════════════════════════════
# MAIN PAGE
# ═══════════════════════════════════════════════════════════════════════════
st.title("🌊 Ensemble Flood Risk Mapper")
st.markdown("*Flood susceptibility for Davao City from eight conditioning factors.*")

default_lat, default_lon = 7.07, 125.61
if chosen != "(custom)":
    area = next(a for a in areas if a["name"] == chosen)
    default_lat, default_lon = area["latitude"], area["longitude"]

with st.form("location_form"):
    col1, col2 = st.columns(2)
    with col1:
        latitude = st.number_input("Latitude", value=default_lat, format="%.5f")
    with col2:
        longitude = st.number_input("Longitude", value=default_lon, format="%.5f")
    submitted = st.form_submit_button("🔍 Analyze Flood Risk")

if submitted:
    try:
        record = service.analyze_location(latitude, longitude).to_dict()
    except OutOfBoundsError:
        st.error("Your location is outside Davao City. Please select within the boundary.")
        st.stop()

    pred = record["prediction"]

    col_gauge, col_models = st.columns(2)

    with col_gauge:
        st.subheader("Risk Level")
        fig_gauge = go.Figure(go.Indicator(
            mode="gauge+number",
            value=pred["probability"] * 100,
            number={"suffix": "%"},
            title={"text": pred["riskLevel"]},
            gauge={
                "axis": {"range": [0, 100]},
                "bar": {"color": RISK_COLORS[pred["riskLevel"]]},
                "steps": [
                    {"range": [0, 25], "color": "#dcfce7"},
                    {"range": [25, 50], "color": "#fef9c3"},
                    {"range": [50, 75], "color": "#ffedd5"},
                    {"range": [75, 100], "color": "#fee2e2"},
                ],
            },
        ))
        st.plotly_chart(fig_gauge, width="stretch")
        st.metric("Confidence", f"{pred['confidence'] * 100:.1f}%")

    with col_models:
        st.subheader("Model Comparison")
        df_models = pd.DataFrame({
            "model": ["Random Forest", "XGBoost", "Ensemble"],
            "probability": [pred["rfProbability"], pred["xgbProbability"], pred["probability"]],
        })
        fig_models = go.Figure(go.Bar(
            x=df_models["model"],
            y=df_models["probability"] * 100,
            marker_color=["#60a5fa", "#a78bfa", RISK_COLORS[pred["riskLevel"]]],
        ))
        fig_models.update_layout(yaxis_title="Flood probability (%)", yaxis_range=[0, 100])
        st.plotly_chart(fig_models, width="stretch")
        weights = pred["ensembleWeight"]
        st.caption(f"Stacking weights: RF {weights['rf']:.2f} / XGBoost {weights['xgb']:.2f}")

    st.markdown("---")
    st.subheader("Key Risk Factors")
    if record["factorImportance"]:
        for item in record["factorImportance"]:
            st.markdown(f"{item['icon']} **{item['factor']}** ({item['risk']}): {item['message']}")
    else:
        st.info("No individual factor stands out at this location.")

    with st.expander("Conditioning factors"):
        df_factors = pd.DataFrame(
            [{"factor": k, "value": f"{v:.2f}" if isinstance(v, float) else v}
             for k, v in record["factors"].items()]
        )
        st.dataframe(df_factors, width="stretch", hide_index=True)

    st.download_button(
        "⬇️ Download JSON",
        data=json.dumps(record, indent=2, ensure_ascii=False),
        file_name="flood-risk-assessment.json",
        mime="application/json",
    )
