# admin_client/client.py
"""
Thin transport for the host store's Admin GraphQL API.

Every persistence operation receives a `StoreClient` explicitly; tests swap in
an in-memory fake with the same `execute` signature.

Failure policy
--------------
Anything that means "the call did not succeed" raises StoreRequestError:
network errors, HTTP >= 400, top-level GraphQL `errors`, or a body without a
`data` object. Mutation `userErrors` are *not* handled here; they belong to
the caller, which knows which operation it issued.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

import requests

from core.errors import StoreRequestError

logger = logging.getLogger(__name__)


class StoreClient(Protocol):
    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...


class AdminClient:
    """Blocking Admin GraphQL client backed by a `requests.Session`."""

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = "2025-10",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        domain = shop_domain.strip().rstrip("/")
        if not domain.startswith("http"):
            domain = f"https://{domain}"
        self.endpoint = f"{domain}/admin/api/{api_version}/graphql.json"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "X-Shopify-Access-Token": access_token,
            }
        )

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run one query or mutation and return its `data` object.

        Parameters
        ----------
        query : str
            GraphQL document text.
        variables : dict, optional
            GraphQL variables.

        Returns
        -------
        dict
            The response's `data` member.
        """
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            resp = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("[Store] ❌ Request failed: %s", e.__class__.__name__)
            raise StoreRequestError(f"Store request failed: {e}") from e

        if resp.status_code >= 400:
            logger.error("[Store] ❌ HTTP %s: %s", resp.status_code, resp.text[:200])
            raise StoreRequestError(f"HTTP {resp.status_code}: {resp.text[:200]}", status_code=resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise StoreRequestError("Store returned a non-JSON response", status_code=resp.status_code) from e

        if body.get("errors"):
            logger.error("[Store] ❌ GraphQL errors: %s", body["errors"])
            raise StoreRequestError(f"GraphQL errors: {body['errors']}", status_code=resp.status_code)

        data = body.get("data")
        if not isinstance(data, dict):
            raise StoreRequestError("Store response has no data object", status_code=resp.status_code)
        return data
