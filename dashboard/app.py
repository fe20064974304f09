"""
Streamlit Dashboard for the FRC Line Maker
Enter two alliances, get a line, and place bets against it
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import streamlit as st
import pandas as pd
from dashboard.utils import api_get, api_post, teams_frame_to_payload, ALLIANCE_COLORS

st.set_page_config(
    page_title="FRC Line Maker",
    page_icon="🤖",
    layout="wide",
    initial_sidebar_state="expanded",
)

_DEFAULT_TEAMS = {
    "red": [
        {"team_key": "frc254", "rank": 1, "epa": 38.5, "win_prob": 0.78},
        {"team_key": "frc1678", "rank": 3, "epa": 28.4, "win_prob": 0.62},
        {"team_key": "frc971", "rank": 5, "epa": 15.2, "win_prob": 0.43},
    ],
    "blue": [
        {"team_key": "frc1114", "rank": 2, "epa": 34.1, "win_prob": 0.73},
        {"team_key": "frc2056", "rank": 4, "epa": 26.0, "win_prob": 0.59},
        {"team_key": "frc148", "rank": 6, "epa": 14.9, "win_prob": 0.41},
    ],
}


# ==============================================================================
# SIDEBAR
# ==============================================================================

with st.sidebar:
    st.title("🤖 FRC Line Maker")
    health = api_get("/health")
    if health:
        st.success(f"API {health.get('status', 'unknown')}")

    st.markdown("---")
    st.subheader("Valuation Config")
    cfg = api_get("/config")
    if cfg:
        st.metric("EPA scale", cfg["epa_scale"])
        st.metric("Min payout", f"{cfg['min_payout']:.2f}x")
        st.dataframe(
            pd.DataFrame(
                list(cfg["rank_multipliers"].items()), columns=["rank", "multiplier"]
            ),
            hide_index=True,
        )


# ==============================================================================
# MATCH INPUT
# ==============================================================================

st.title("Match Line")

match_id = st.text_input("Match ID", value="qm1")

col_red, col_blue = st.columns(2)
edited = {}
for side, col in (("red", col_red), ("blue", col_blue)):
    with col:
        st.subheader(f"{ALLIANCE_COLORS[side]} {side.title()} Alliance")
        edited[side] = st.data_editor(
            pd.DataFrame(_DEFAULT_TEAMS[side]),
            num_rows="dynamic",
            key=f"editor_{side}",
            use_container_width=True,
        )

if st.button("Suggest line", type="primary"):
    payload = {
        "match_id": match_id,
        "alliances": {side: teams_frame_to_payload(df) for side, df in edited.items()},
    }
    st.session_state["prediction"] = api_post("/predict", payload)

prediction = st.session_state.get("prediction")
if prediction:
    suggestion = prediction["suggestion"]
    st.markdown("---")
    c1, c2 = st.columns(2)
    c1.metric("Match Line", suggestion["match_line"])
    c2.metric("Base Line (mean EPA)", suggestion["base_line"])

    cols = st.columns(2)
    for col, side in zip(cols, ("red", "blue")):
        alliance = prediction[side]
        per = suggestion["per_alliance"][side]
        with col:
            st.subheader(f"{ALLIANCE_COLORS[side]} {side.title()}")
            m1, m2, m3 = st.columns(3)
            m1.metric("Value", f"{alliance['alliance_value']:.2f}")
            m2.metric("Line", per["line"])
            m3.metric("Payout", f"{per['payout_multiplier']:.2f}x")
            rows = [
                {
                    "team": t["team_key"],
                    "value": round(t["computed"]["value"], 3),
                    "raw": round(t["computed"]["raw_value"], 3),
                    **{k: round(v, 4) for k, v in t["computed"]["components"].items()},
                }
                for t in alliance["teams"]
            ]
            st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)

    # ==========================================================================
    # PLACE BET
    # ==========================================================================

    st.markdown("---")
    st.subheader("Place Bet")
    with st.form("bet_form"):
        b1, b2, b3, b4 = st.columns(4)
        user = b1.text_input("User")
        alliance = b2.selectbox("Alliance", ["red", "blue"])
        bet_type = b3.selectbox("Type", ["over", "under"])
        amount = b4.number_input("Amount", min_value=0.01, value=10.0, step=1.0)
        submitted = st.form_submit_button("Place bet")

    if submitted:
        result = api_post("/bet", {
            "user": user,
            "match_id": prediction.get("match_id") or match_id,
            "alliance": alliance,
            "amount": amount,
            "type": bet_type,
            "line": suggestion["match_line"],
        })
        if result:
            st.success(f"Bet #{result['bet']['id']} recorded at line {result['bet']['line']}")
