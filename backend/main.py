"""
Delivery Timelines Backend API
==============================

FastAPI service in front of the host store's metaobject API.

Endpoints
---------
- GET    /              liveness probe
- GET    /health        store connectivity + process metrics
- GET    /timelines     saved rules as form state (`initialRules`)
- POST   /timelines     persist rules (`{"rules": "<json>"}`)
- DELETE /timelines     remove the saved record
- GET    /collections   picker source

Run with:
    uvicorn backend.main:app --reload
"""

from __future__ import annotations

import logging
import os
import sys

from fastapi import FastAPI

# --------------------------------------------------------------------------- #
# Path setup: ensure project root on sys.path
# --------------------------------------------------------------------------- #

# Allows imports like `core.*`, `database.*`, `admin_client.*` when running via uvicorn
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.append(ROOT_DIR)

from admin_client.config import get_store_client
from backend.routes.timelines import router as timelines_router
from core.health import system_health
from core.metadata import __version__, get_metadata

# --------------------------------------------------------------------------- #
# Logging
# --------------------------------------------------------------------------- #

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# FastAPI App
# --------------------------------------------------------------------------- #

app = FastAPI(
    title="Delivery Timelines API",
    version=__version__,
    description=(
        "Load, validate and persist per-collection delivery timeline rules.\n"
        "- Singleton metaobject record (create on first save, update afterwards).\n"
        "- Idempotent metaobject definition provisioning.\n"
        "- Collection title enrichment for the form."
    ),
)

app.include_router(timelines_router)
logger.info("[Backend] ✅ Registered /timelines router.")

# --------------------------------------------------------------------------- #
# Core Routes
# --------------------------------------------------------------------------- #


@app.get("/")
async def root():
    """
    Basic liveness probe.
    """
    return {
        "status": "ok",
        "message": "Delivery Timelines backend is live.",
        "version": app.version,
        "store_configured": bool(os.getenv("SHOP_DOMAIN") and os.getenv("SHOP_ADMIN_TOKEN")),
    }


@app.get("/health")
async def health():
    """
    System health endpoint.

    Delegates to core.health.system_health, which pings the store and reports
    process metrics in a stable, machine-readable payload.
    """
    return system_health(get_store_client)


@app.get("/meta")
async def meta():
    return get_metadata()
