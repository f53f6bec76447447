# ui/components/backend_status.py
"""
Backend health indicator for the Streamlit sidebar.

Features
--------
✅ Environment-aware: reads BACKEND_URL from the environment.
✅ Type-safe: validates the /health payload with Pydantic.
✅ Cached via st.cache_data with a configurable TTL.
✅ Never crashes the UI when the backend is offline.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

import requests
import streamlit as st
from pydantic import BaseModel, Field

from core.ui_config import BACKEND_URL

CACHE_TTL = int(os.getenv("BACKEND_STATUS_TTL", "60"))  # seconds

STATUS_COLORS = {
    "ok": "green",
    "healthy": "green",
    "degraded": "orange",
    "error": "red",
    "offline": "red",
}


class HealthSchema(BaseModel):
    """Structured schema for the /health endpoint response."""
    status: str = Field(default="unknown", description="Overall backend status")
    message: Optional[str] = Field(default=None, description="Optional status message")
    version: Optional[str] = Field(default=None, description="Backend version string")
    store_connected: Optional[bool] = Field(default=None, description="Store connectivity flag")
    shop_name: Optional[str] = Field(default=None, description="Connected shop name")
    cpu_load: Optional[float] = Field(default=None, description="Backend CPU load (optional)")
    memory_usage: Optional[float] = Field(default=None, description="Backend memory usage in MB")
    latency_ms: Optional[float] = Field(default=None, description="Approximate round-trip latency in ms")

    def color(self) -> str:
        return get_status_color(self.status)


def get_status_color(status: str) -> str:
    """Color for a status string; unknown statuses are gray."""
    return STATUS_COLORS.get(status.lower(), "gray")


@st.cache_data(ttl=CACHE_TTL)
def get_backend_status() -> Dict[str, Any]:
    """
    Fetch the backend /health endpoint with structured fallback.

    Returns
    -------
    dict
        Parsed health payload or a structured error dict.
    """
    url = f"{BACKEND_URL}/health"
    try:
        resp = requests.get(url, timeout=5)
        latency_ms = round(resp.elapsed.total_seconds() * 1000, 2)

        if resp.status_code == 200:
            data = resp.json()
            data["latency_ms"] = latency_ms
            return HealthSchema(**data).model_dump()
        return {
            "status": "error",
            "message": f"HTTP {resp.status_code}: {resp.text[:100]}",
        }
    except requests.exceptions.RequestException as e:
        return {
            "status": "offline",
            "message": f"Backend unreachable at {BACKEND_URL} ({e.__class__.__name__})",
        }


def render_status_bar(expanded: bool = False):
    """Render a compact backend health summary in the sidebar."""
    st.sidebar.markdown("---")
    st.sidebar.caption("### 🔍 Backend Status")

    health = HealthSchema(**get_backend_status())
    st.sidebar.markdown(
        f"<span style='color:{health.color()}; font-weight:600;'>● {health.status.upper()}</span>",
        unsafe_allow_html=True,
    )

    if health.message:
        st.sidebar.caption(f"💬 {health.message}")

    if health.store_connected:
        st.sidebar.caption(f"🛍️ Store: {health.shop_name or 'connected'}")
    else:
        st.sidebar.caption("🛍️ Store: unavailable")

    if expanded:
        with st.sidebar.expander("Advanced diagnostics", expanded=False):
            if health.latency_ms:
                st.write(f"⏱ Latency: {health.latency_ms} ms")
            if health.cpu_load is not None:
                st.write(f"🧠 CPU load: {health.cpu_load}%")
            if health.memory_usage is not None:
                st.write(f"💾 Memory: {health.memory_usage} MB")
            if health.version:
                st.write(f"🧩 Version: {health.version}")
