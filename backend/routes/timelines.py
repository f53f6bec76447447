"""
Delivery timelines endpoints
----------------------------
Load, submit and delete the singleton timeline record, plus the collection
listing that feeds the form's picker.

Store-layer errors are caught here, once: logged, then turned into a
structured `{"ok": false, "error": ...}` response. Nothing is retried.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from admin_client.client import StoreClient
from admin_client.config import get_store_client
from core.enrichment import build_initial_rules
from core.errors import TimelinesError
from core.schemas import LoadResponse, SubmitRequest, SubmittedRuleList, SubmitResponse
from database.collections import list_collections
from database.definitions import ensure_schema
from database.queries import delete_timelines, load_timelines, save_timelines

logger = logging.getLogger(__name__)

router = APIRouter(tags=["timelines"])


def get_store() -> StoreClient:
    """FastAPI dependency: the store client for this request."""
    try:
        return get_store_client()
    except RuntimeError as e:
        logger.error("[Backend] ❌ %s", e)
        raise HTTPException(status_code=503, detail=str(e))


def _failure(error: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=SubmitResponse(ok=False, error=error).model_dump())


@router.get("/timelines")
async def load_timelines_endpoint(store: StoreClient = Depends(get_store)) -> Dict[str, Any]:
    """
    Load the saved rules as form state.

    Returns `{"initialRules": [...]}`, always with at least one rule.
    """
    try:
        rules = load_timelines(store)
        initial_rules = build_initial_rules(store, rules)
    except (TimelinesError, ValidationError) as e:
        logger.exception("[Backend] ❌ Load failed")
        raise HTTPException(status_code=500, detail=f"Failed to load timelines: {e}")

    return LoadResponse(initial_rules=initial_rules).model_dump(by_alias=True)


@router.post("/timelines", response_model=SubmitResponse)
async def submit_timelines_endpoint(request: SubmitRequest, store: StoreClient = Depends(get_store)):
    """
    Persist the submitted rules.

    - Body: `{"rules": "<JSON-encoded Rule[]>"}`.
    - Ensures the metaobject definition exists, then creates or updates the
      singleton record.
    """
    if not request.rules:
        return SubmitResponse(ok=False, error="No data")

    try:
        rules = SubmittedRuleList.validate_python(json.loads(request.rules))
    except (ValueError, ValidationError) as e:
        logger.warning("[Backend] ⚠️ Rejected submission: %s", e)
        return _failure(f"Invalid rules payload: {e}", status_code=400)

    logger.info("[Backend] SAVE: %d rules", len(rules))
    try:
        ensure_schema(store)
        result = save_timelines(store, rules)
    except TimelinesError as e:
        logger.error("[Backend] ❌ Save failed: %s", e)
        return _failure(str(e), status_code=500)

    return SubmitResponse(ok=True, action=result.action, id=result.id)


@router.delete("/timelines")
async def delete_timelines_endpoint(store: StoreClient = Depends(get_store)):
    """Delete the saved record; a missing record is reported, not an error."""
    try:
        result = delete_timelines(store)
    except TimelinesError as e:
        logger.error("[Backend] ❌ Delete failed: %s", e)
        return _failure(str(e), status_code=500)

    return {"ok": True, **result.model_dump(by_alias=True, exclude_none=True)}


@router.get("/collections")
async def list_collections_endpoint(
    first: int = Query(50, ge=1, le=250, description="Number of collections to return (1–250)"),
    store: StoreClient = Depends(get_store),
) -> List[Dict[str, str]]:
    """Collections available to the picker (id + title)."""
    try:
        return [c.model_dump() for c in list_collections(store, first=first)]
    except TimelinesError as e:
        raise HTTPException(status_code=500, detail=f"Failed to list collections: {e}")
