"""
core/ui_config.py
-----------------
Central configuration for the Streamlit form.

Reads the backend URL from the environment; every UI helper builds its
requests from here.
"""

from __future__ import annotations
import os

# ---------------------------------------------------------------------------
# Backend configuration
# ---------------------------------------------------------------------------

BACKEND_URL: str = os.getenv("BACKEND_URL", "http://127.0.0.1:8000").rstrip("/")
