"""
core/ui_helpers.py
------------------
Backend request helpers for the Streamlit form.

GET failures surface as `st.error` and an empty result. POST returns the
backend's JSON body even for 4xx/5xx answers, since the submit endpoint
reports failures as `{"ok": false, "error": ...}`.
"""

from __future__ import annotations
import requests
import streamlit as st
from core.ui_config import BACKEND_URL


def _url(endpoint: str) -> str:
    return f"{BACKEND_URL.rstrip('/')}/{endpoint.lstrip('/')}"


def fetch_backend(endpoint: str, params: dict | None = None) -> dict | list:
    """
    Unified safe fetch for GET endpoints.
    Automatically prefixes BACKEND_URL and handles JSON decoding.
    """
    try:
        resp = requests.get(_url(endpoint), params=params, timeout=10)
        resp.raise_for_status()
        return resp.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Backend request failed: {e}")
        return {}


@st.cache_data(ttl=60)
def fetch_collections(first: int = 50) -> list:
    """Picker source, cached for a minute."""
    data = fetch_backend("/collections", params={"first": first})
    return data if isinstance(data, list) else []


def post_backend(endpoint: str, payload: dict) -> dict:
    """Unified POST helper; transport failures become an ok=false body."""
    try:
        resp = requests.post(_url(endpoint), json=payload, timeout=30)
        return resp.json()
    except requests.exceptions.RequestException as e:
        return {"ok": False, "error": f"Backend POST failed: {e}"}
    except ValueError:
        return {"ok": False, "error": f"Backend returned HTTP {resp.status_code} without JSON"}
