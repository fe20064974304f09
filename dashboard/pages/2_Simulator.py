"""Simulator page — distribution of lines and payouts over random matches."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import pandas as pd
import plotly.express as px
import streamlit as st
from dashboard.utils import api_post

st.set_page_config(page_title="Simulator | FRC Line Maker", layout="wide")

st.title("Match Simulator")

c1, c2 = st.columns(2)
n = c1.slider("Matches", min_value=10, max_value=1000, value=200, step=10)
seed = c2.number_input("Seed (0 = random)", min_value=0, value=0, step=1)

if not st.button("Run simulation", type="primary"):
    st.stop()

data = api_post("/simulate", {"n": n, "seed": int(seed) or None})
if not data or not data.get("results"):
    st.info("Simulation returned no matches.")
    st.stop()

summary = data["summary"]
m1, m2, m3, m4 = st.columns(4)
m1.metric("Mean Line", summary["mean_match_line"])
m2.metric("Line Range", f"{summary['min_match_line']} – {summary['max_match_line']}")
m3.metric("Mean Red / Blue Payout", f"{summary['mean_red_payout']:.2f} / {summary['mean_blue_payout']:.2f}")
m4.metric("Red Favoured", f"{summary['red_favoured_pct']:.1f}%")

df = pd.DataFrame([
    {
        "match": r["match"],
        "match_line": r["suggestion"]["match_line"],
        "red_value": r["red"]["alliance_value"],
        "blue_value": r["blue"]["alliance_value"],
        "red_payout": r["suggestion"]["per_alliance"]["red"]["payout_multiplier"],
        "blue_payout": r["suggestion"]["per_alliance"]["blue"]["payout_multiplier"],
    }
    for r in data["results"]
])

st.subheader("Match Line Distribution")
fig_lines = px.histogram(df, x="match_line", nbins=40)
fig_lines.update_layout(xaxis_title="Match Line", yaxis_title="Matches", height=320)
st.plotly_chart(fig_lines, use_container_width=True)

st.subheader("Value Ratio vs Payout")
df["value_ratio"] = df["red_value"] / (df["red_value"] + df["blue_value"])
fig_payout = px.scatter(df, x="value_ratio", y="red_payout", hover_data=["match"])
fig_payout.add_hline(y=1.01, line_dash="dash", line_color="gray")
fig_payout.update_layout(xaxis_title="Red Value Share", yaxis_title="Red Payout", height=320)
st.plotly_chart(fig_payout, use_container_width=True)

st.dataframe(df, hide_index=True, use_container_width=True)
