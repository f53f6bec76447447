"""
core/health.py
--------------
System health diagnostics for the delivery timelines backend.

Purpose
-------
- Used by the FastAPI `/health` endpoint and the Streamlit status bar.
- Validates store connectivity with a tiny `shop { name }` query.
- Reports backend uptime, version, CPU/memory usage.
- Returns a JSON-safe dict ready for serialization.
"""

from __future__ import annotations

import os
import platform
import time
from typing import Any, Callable, Dict

import psutil

from admin_client.client import StoreClient
from core.metadata import __version__

# Cache the process start time for uptime calculation
START_TIME = time.time()

SHOP_PING = """
query {
  shop {
    name
  }
}
"""


def system_health(store_factory: Callable[[], StoreClient]) -> Dict[str, Any]:
    """
    Return structured backend health diagnostics.

    Parameters
    ----------
    store_factory : callable
        Builds the store client; a failure here counts as "not connected".

    Returns
    -------
    dict
        JSON-safe health report compatible with the UI HealthSchema.
    """
    status = "ok"
    message = "Backend operational."
    store_connected = False
    shop_name = None

    # --- Store connectivity test ---
    try:
        store = store_factory()
        data = store.execute(SHOP_PING)
        shop_name = (data.get("shop") or {}).get("name")
        store_connected = True
    except Exception as e:  # noqa: BLE001 - any failure means degraded
        status = "degraded"
        message = f"Store check failed: {e.__class__.__name__}"

    # --- System metrics ---
    try:
        cpu_load = psutil.cpu_percent(interval=0.1)
        memory_usage = round(psutil.virtual_memory().used / (1024 * 1024), 2)
    except Exception:  # noqa: BLE001
        cpu_load = None
        memory_usage = None

    return {
        "status": status,
        "message": message,
        "version": os.getenv("BACKEND_VERSION", __version__),
        "store_connected": store_connected,
        "shop_name": shop_name,
        "cpu_load": cpu_load,
        "memory_usage": memory_usage,
        "uptime_sec": round(time.time() - START_TIME, 2),
        "system": platform.system(),
        "release": platform.release(),
    }
