"""
Streamlit Dashboard for the Disaster Early Warning Platform

Map of known disaster zones, current weather, risk scores and alerts.
"""

import streamlit as st
import pandas as pd
import plotly.express as px
from datetime import datetime, timezone
import json
import sys
import os

# Add parent directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src import config
from src.errors import PlatformError
from src.api_connectors import OpenWeatherConnector, WeatherCache
from src.alerts import JsonFileAlertRepository, alert_summary
from src.risk_scoring import RiskEngine, WeatherObservation, risk_level

config.configure_logging()

# Page configuration
st.set_page_config(
    page_title="Disaster Early Warning System",
    page_icon="🌀",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Demo disaster zones (India)
DISASTER_ZONES = pd.DataFrame([
    {"name": "North Delhi - Flood Risk", "lat": 28.7041, "lon": 77.1025, "type": "flood", "severity": "critical", "message": "Flash flood warning"},
    {"name": "Mumbai - Cyclone Risk", "lat": 19.0760, "lon": 72.8777, "type": "cyclone", "severity": "warning", "message": "Cyclone approaching coast"},
    {"name": "Bangalore - Drought", "lat": 12.9716, "lon": 77.5946, "type": "drought", "severity": "warning", "message": "Water scarcity alert"},
    {"name": "Chennai - Heatwave", "lat": 13.0827, "lon": 80.2707, "type": "heatwave", "severity": "critical", "message": "Extreme heat warning"},
    {"name": "Kolkata - Heavy Rain", "lat": 22.5726, "lon": 88.3639, "type": "flood", "severity": "warning", "message": "Heavy rainfall expected"},
    {"name": "Hyderabad - Landslide", "lat": 17.3850, "lon": 78.4867, "type": "landslide", "severity": "critical", "message": "Landslide risk high"},
])

QUICK_LOCATIONS = {
    "New Delhi": (28.7041, 77.1025),
    "Mumbai": (19.0760, 72.8777),
    "Chennai": (13.0827, 80.2707),
    "Kolkata": (22.5726, 88.3639),
}


@st.cache_resource
def get_services():
    cache = WeatherCache(
        ttl_seconds=config.WEATHER_CACHE_TTL,
        max_entries=config.WEATHER_CACHE_MAX_ENTRIES
    )
    return {
        "weather": OpenWeatherConnector(cache=cache),
        "alerts": JsonFileAlertRepository(config.ALERTS_FILE),
        "engine": RiskEngine()
    }

services = get_services()

# Title and description
st.title("Disaster Early Warning System")
st.markdown("**Weather-Driven Disaster Risk Monitoring**")

# Sidebar
st.sidebar.header("Configuration")

st.sidebar.subheader("📍 Location")
if "location" not in st.session_state:
    st.session_state.location = QUICK_LOCATIONS["New Delhi"]

col1, col2 = st.sidebar.columns(2)
for i, (name, coords) in enumerate(QUICK_LOCATIONS.items()):
    if (col1 if i % 2 == 0 else col2).button(name):
        st.session_state.location = coords

latitude = st.sidebar.number_input("Latitude", value=st.session_state.location[0], min_value=-90.0, max_value=90.0, format="%.4f")
longitude = st.sidebar.number_input("Longitude", value=st.session_state.location[1], min_value=-180.0, max_value=180.0, format="%.4f")

if st.sidebar.button("Refresh Weather", type="primary"):
    with st.spinner("Fetching weather data..."):
        try:
            weather_data, cached = services["weather"].get_current_weather_cached(latitude, longitude)
            observation = WeatherObservation.from_openweather(weather_data)
            forecast = services["weather"].get_forecast(latitude, longitude)

            st.session_state.weather_data = weather_data
            st.session_state.cached = cached
            st.session_state.observation = observation
            st.session_state.predictions = services["engine"].predict(observation)
            st.session_state.assessment = services["engine"].assess(observation)
            st.session_state.forecast = services["weather"].forecast_to_dataframe(forecast)
            st.session_state.analysis_complete = True
        except PlatformError as e:
            st.sidebar.error(f"{e.message}: {e.error}")

# Main content
tab1, tab2, tab3 = st.tabs(["🗺️ Risk Map", "📈 Weather & Risk", "🚨 Alerts"])

with tab1:
    st.subheader("Known Disaster Zones")
    fig = px.scatter_mapbox(
        DISASTER_ZONES,
        lat="lat",
        lon="lon",
        color="type",
        hover_name="name",
        hover_data={"severity": True, "message": True, "lat": False, "lon": False},
        zoom=3.5,
        center={"lat": 20.5937, "lon": 78.9629},
        height=550
    )
    fig.update_layout(mapbox_style="open-street-map", margin={"r": 0, "t": 0, "l": 0, "b": 0})
    st.plotly_chart(fig, use_container_width=True)

with tab2:
    if st.session_state.get("analysis_complete", False):
        obs = st.session_state.observation
        weather_data = st.session_state.weather_data

        st.subheader(f"Current Weather - {weather_data.get('name') or 'Unknown'}")
        if st.session_state.cached:
            st.caption("Served from cache")

        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Temperature", f"{round(obs.temperature_c)}°C")
        col2.metric("Wind Speed", f"{obs.wind_speed_ms * 3.6:.1f} km/h")
        col3.metric("Humidity", f"{obs.humidity_percent:.0f}%")
        col4.metric("Precipitation", f"{obs.rain_1h_mm:.0f} mm")

        st.markdown("---")

        # Triggered predictions
        st.subheader("Disaster Predictions")
        predictions = st.session_state.predictions
        if predictions:
            for prediction in predictions:
                level = risk_level(prediction.risk_score)
                text = f"**{prediction.type.title()}** - {prediction.risk_score}/100 ({level}). {prediction.recommendation}"
                if level == "High":
                    st.error(text)
                elif level == "Medium":
                    st.warning(text)
                else:
                    st.info(text)
        else:
            st.success("No disaster conditions detected at this location.")

        # Category assessment
        assessment = st.session_state.assessment
        categories = assessment.categories()
        st.metric(
            label="Overall Risk",
            value=f"{assessment.overall_risk}/100",
            delta=risk_level(assessment.overall_risk)
        )
        fig = px.bar(
            x=[c.title() for c in categories],
            y=list(categories.values()),
            labels={"x": "Disaster Type", "y": "Risk Score (0-100)"},
            title="Risk Assessment by Category",
            color=list(categories.values()),
            color_continuous_scale="Reds",
            range_y=[0, 100]
        )
        fig.update_layout(showlegend=False)
        st.plotly_chart(fig, use_container_width=True)

        # Forecast
        forecast = st.session_state.forecast
        if not forecast.empty:
            fig = px.line(
                forecast,
                x="time",
                y=["temp", "humidity", "wind_speed"],
                title="5-Day Forecast",
                labels={"time": "Time", "value": "Value", "variable": "Metric"}
            )
            st.plotly_chart(fig, use_container_width=True)

        # Report download
        report = {
            "reportDate": datetime.now(timezone.utc).isoformat(),
            "location": weather_data.get("name") or "Unknown",
            "weatherData": {
                "temperature": obs.temperature_c,
                "windSpeed": obs.wind_speed_ms,
                "humidity": obs.humidity_percent
            },
            "predictions": [p.to_dict() for p in predictions],
            "riskAssessment": {k: risk_level(v) for k, v in categories.items()},
            "recommendations": [
                "Stay alert for weather updates",
                "Keep emergency supplies ready",
                "Follow local authority guidelines",
                "Keep family members informed"
            ]
        }
        st.download_button(
            "Download Report",
            data=json.dumps(report, indent=2),
            file_name=f"disaster-report-{datetime.now().date().isoformat()}.json",
            mime="application/json"
        )
    else:
        st.info("👈 Pick a location in the sidebar and click **Refresh Weather** to begin.")

with tab3:
    st.subheader("Active Alerts")
    repository = services["alerts"]

    with st.expander("Create Alert"):
        with st.form("create_alert"):
            alert_type = st.selectbox("Type", ["flood", "cyclone", "earthquake", "heatwave", "drought", "landslide"])
            severity = st.selectbox("Severity", ["critical", "warning", "info"])
            location = st.text_input("Location")
            message = st.text_area("Message")
            if st.form_submit_button("Create"):
                try:
                    repository.create(
                        type=alert_type,
                        severity=severity,
                        location=location,
                        message=message,
                        coordinates={"lat": latitude, "lon": longitude}
                    )
                    st.success("Alert created successfully")
                except PlatformError as e:
                    st.error(e.message)

    alerts = repository.list_active()
    if alerts:
        for alert in alerts:
            col1, col2 = st.columns([5, 1])
            text = alert_summary(alert)
            if alert.get("severity") == "critical":
                col1.error(text)
            else:
                col1.warning(text)
            if col2.button("Delete", key=f"delete-{alert['id']}"):
                repository.delete(alert["id"])
                st.rerun()
    else:
        st.success("No active alerts.")

# Footer
st.sidebar.markdown("---")
st.sidebar.markdown("""
**Disaster Early Warning System**
Version 1.0.0
Data Source: OpenWeatherMap
""")
