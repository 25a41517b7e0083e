import os
from datetime import date
from typing import Any

import pandas as pd
import plotly.express as px
import requests
import streamlit as st
from streamlit_autorefresh import st_autorefresh


DEFAULT_BACKEND_URL = os.getenv("BACKEND_API_URL", "http://localhost:8000/api")
REQUEST_TIMEOUT = 10

CONDITION_COLORS = {
    "Good": "#2e7d32",
    "Favourable": "#7cb342",
    "Average": "#fbc02d",
    "Poor": "#ef6c00",
    "Worst": "#c62828",
    "N/A": "#9e9e9e",
}


st.set_page_config(page_title="Soil Sage Dashboard", layout="wide")


def api_get(base_url: str, path: str, params: dict[str, Any] | None = None) -> tuple[dict[str, Any] | None, str | None]:
    try:
        response = requests.get(f"{base_url}{path}", params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json(), None
    except requests.RequestException as exc:
        return None, str(exc)


def api_post(base_url: str, path: str, payload: dict[str, Any] | None = None) -> tuple[dict[str, Any] | None, str | None]:
    try:
        response = requests.post(f"{base_url}{path}", json=payload or {}, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        if response.content:
            return response.json(), None
        return {}, None
    except requests.RequestException as exc:
        return None, str(exc)


def format_target(value: float | None, unit: str = "") -> str:
    return "-" if value is None else f"{value:.1f}{unit}"


st.title("Soil Sage Monitor")
st.caption("Sensor telemetry, daily rollups, calibration targets and growing condition reports")

with st.sidebar:
    st.header("Settings")
    backend_url = st.text_input("Backend API URL", value=DEFAULT_BACKEND_URL)
    auto_refresh = st.checkbox("Auto refresh", value=True)
    refresh_seconds = st.slider("Refresh interval (seconds)", min_value=30, max_value=600, value=60, step=30)

    plants_payload, _ = api_get(backend_url, "/plants")
    plant_options = ["(global)"] + (plants_payload or {}).get("fruits", [])
    selected_plant = st.selectbox("Plant", plant_options)
    fruit = None if selected_plant == "(global)" else selected_plant
    report_day = st.date_input("Report day", value=date.today())

if auto_refresh:
    st_autorefresh(interval=refresh_seconds * 1000, key="soil-sage-refresh")

health_payload, health_error = api_get(backend_url, "/health")
if health_error:
    st.error(f"Backend unavailable: {health_error}")
    st.stop()

left, right = st.columns([2, 1])
with left:
    st.subheader("Latest Reading")
with right:
    if st.button("Collect now", use_container_width=True):
        _, collect_error = api_post(backend_url, "/sensors/collect")
        if collect_error:
            st.error(f"Collection failed: {collect_error}")
        else:
            st.success("Stored a fresh reading")

latest_payload, latest_error = api_get(backend_url, "/sensors/latest")
if latest_error:
    st.warning("No sensor records yet. Click 'Collect now' or wait for the next collection.")
else:
    m1, m2, m3, m4, m5, m6 = st.columns(6)
    m1.metric("Temperature", f"{latest_payload['temperature']:.1f} C")
    m2.metric("Humidity", f"{latest_payload['humidity']:.1f}%")
    m3.metric("Moisture", f"{latest_payload['moisture_percent']:.1f}%")
    m4.metric("Light", f"{latest_payload['lux']:.0f} lux")
    m5.metric("UV index", f"{latest_payload['uv_index']:.1f}")
    m6.metric("Battery", f"{latest_payload['battery_percent']:.0f}%")

st.subheader("Condition Report")
report_params = {"day": report_day.isoformat()}
if fruit:
    report_params["fruit"] = fruit
report, report_error = api_get(backend_url, "/reports/day", report_params)
if report_error:
    st.warning(f"Report unavailable: {report_error}")
else:
    targets = report["targets"]
    c1, c2 = st.columns([1, 2])
    with c1:
        st.metric("Day condition", report["condition"])
        st.write(f"Readings: {report['total_readings']}")
        st.table(
            pd.DataFrame(
                [
                    ("Sunlight", format_target(targets["sunlight_lux"], " lux")),
                    ("Moisture", format_target(targets["moisture_percent"], "%")),
                    ("Temperature", format_target(targets["temperature_c"], " C")),
                    ("Humidity", format_target(targets["humidity_percent"], "%")),
                    ("UV index", format_target(targets["uv_index"])),
                ],
                columns=["Target", "Value"],
            )
        )
    with c2:
        buckets = pd.DataFrame(
            [
                {"hour": bucket["start"], "score": bucket["score"], "condition": bucket["condition"]}
                for bucket in report["buckets"]
            ]
        )
        buckets["hour"] = pd.to_datetime(buckets["hour"])
        fig_buckets = px.bar(
            buckets,
            x="hour",
            y="score",
            color="condition",
            color_discrete_map=CONDITION_COLORS,
            range_y=[0, 4],
            title="Hourly condition score",
        )
        st.plotly_chart(fig_buckets, use_container_width=True)

    if report["suggestions"]:
        for suggestion in report["suggestions"]:
            st.warning(suggestion)
    else:
        st.success("All metrics are within their target bands")

st.subheader("Sensor Trends")
history_payload, history_error = api_get(backend_url, "/sensors/history", {"limit": 144})
if history_error:
    st.warning(f"History unavailable: {history_error}")
else:
    rows = history_payload.get("items", [])
    if not rows:
        st.info("No historical data yet")
    else:
        df = pd.DataFrame(rows)
        df["timestamp"] = pd.to_datetime(df["timestamp"])
        df = df.sort_values("timestamp")

        fig_temp = px.line(df, x="timestamp", y="temperature", title="Temperature (C)")
        fig_moisture = px.line(df, x="timestamp", y="moisture_percent", title="Moisture (%)")
        fig_lux = px.line(df, x="timestamp", y="lux", title="Light (lux)")

        c1, c2, c3 = st.columns(3)
        c1.plotly_chart(fig_temp, use_container_width=True)
        c2.plotly_chart(fig_moisture, use_container_width=True)
        c3.plotly_chart(fig_lux, use_container_width=True)

st.subheader("Daily Aggregates")
aggregates_payload, aggregates_error = api_get(backend_url, "/aggregates", {"limit": 30})
if aggregates_error:
    st.warning(f"Aggregates unavailable: {aggregates_error}")
else:
    items = aggregates_payload.get("items", [])
    if not items:
        st.info("No daily aggregates yet")
    else:
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "day": item["day"][:10],
                        "sunlight_hours": item["sunlight_hours"],
                        "uv_exposure_hours": item["uv_exposure_hours"],
                        "water_level_avg": round(item["water_level_avg"], 2),
                        "temp_min": item["temperature"]["min"],
                        "temp_max": item["temperature"]["max"],
                        "readings": item["total_readings"],
                    }
                    for item in items
                ]
            ),
            use_container_width=True,
        )

st.subheader("Calibration")
cal_col1, cal_col2 = st.columns([1, 2])
with cal_col1:
    days = st.number_input("Window (days)", min_value=1, max_value=60, value=7)
    strategy = st.radio("Strategy", ["median", "avg"], horizontal=True)
    if st.button("Calibrate", use_container_width=True):
        _, cal_error = api_post(
            backend_url,
            "/calibration",
            {"days": int(days), "strategy": strategy, "fruit": fruit},
        )
        st.error(cal_error) if cal_error else st.success("Calibration stored")
with cal_col2:
    calibration, calibration_error = api_get(
        backend_url, "/calibration/latest", {"fruit": fruit} if fruit else None
    )
    if calibration_error:
        st.info("No calibration found")
    else:
        st.json(calibration)
