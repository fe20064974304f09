"""Shared utilities for all dashboard pages."""

import os
import pandas as pd
import requests
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

_API_URL = os.getenv("API_URL", "http://localhost:8000")


def api_get(endpoint: str, params: dict = None):
    try:
        r = requests.get(f"{_API_URL}{endpoint}", params=params, timeout=15)
        r.raise_for_status()
        return r.json()
    except Exception as exc:
        st.error(f"API error: {exc}")
        return None


def http_error_message(exc: requests.HTTPError) -> str:
    """Message for a failed API call.  Proxies may answer with a non-JSON body."""
    response = exc.response
    if response is None:
        return f"API error: {exc}"
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and "detail" in body:
        detail = body["detail"]
    else:
        detail = response.text or str(exc)
    return f"API {response.status_code}: {detail}"


def api_post(endpoint: str, payload: dict):
    try:
        r = requests.post(
            f"{_API_URL}{endpoint}",
            headers={"Content-Type": "application/json"},
            json=payload,
            timeout=15,
        )
        r.raise_for_status()
        return r.json()
    except requests.HTTPError as exc:
        st.error(http_error_message(exc))
        return None
    except Exception as exc:
        st.error(f"Request failed: {exc}")
        return None


def teams_frame_to_payload(df: pd.DataFrame) -> list:
    """Turn an edited alliance table into the /predict team list."""
    teams = []
    for row in df.to_dict("records"):
        if not row.get("team_key"):
            continue
        rank, epa, win_prob = row.get("rank"), row.get("epa"), row.get("win_prob")
        teams.append({
            "team_key": str(row["team_key"]),
            "rank": int(rank) if pd.notna(rank) else None,
            "epa": float(epa) if pd.notna(epa) else None,
            "win_prob": float(win_prob) if pd.notna(win_prob) else None,
        })
    return teams


ALLIANCE_COLORS = {
    "red":  "🔴",
    "blue": "🔵",
}
