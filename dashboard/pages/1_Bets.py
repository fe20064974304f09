"""Bet Ledger page — filterable table with CSV export."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import pandas as pd
import streamlit as st
from dashboard.utils import api_get

st.set_page_config(page_title="Bets | FRC Line Maker", layout="wide")

st.title("Bet Ledger")

# --- Filters ---
col_f1, col_f2 = st.columns(2)
with col_f1:
    match_filter = st.text_input("Match ID")
with col_f2:
    user_filter = st.text_input("User")

params = {}
if match_filter:
    params["match_id"] = match_filter
if user_filter:
    params["user"] = user_filter

data = api_get("/bets", params)

if not data or not data.get("bets"):
    st.info("No bets found for this filter.")
    st.stop()

df = pd.DataFrame(data["bets"])
df["time"] = pd.to_datetime(df["time"]).dt.strftime("%Y-%m-%d %H:%M:%S")

# --- Summary ---
c1, c2, c3 = st.columns(3)
c1.metric("Bets", data["count"])
c2.metric("Total Staked", f"${df['amount'].sum():,.2f}")
c3.metric("Over / Under", f"{(df['type'] == 'over').sum()} / {(df['type'] == 'under').sum()}")

# --- Stake by alliance and side ---
pivot = df.pivot_table(index="alliance", columns="type", values="amount", aggfunc="sum", fill_value=0.0)
st.subheader("Stake by Alliance")
st.dataframe(pivot, use_container_width=True)

st.subheader("All Bets")
display_cols = ["id", "time", "user", "match_id", "alliance", "type", "line", "amount"]
st.dataframe(df[display_cols], hide_index=True, use_container_width=True)

st.download_button(
    "Download CSV",
    df[display_cols].to_csv(index=False).encode("utf-8"),
    file_name="bets.csv",
    mime="text/csv",
)
