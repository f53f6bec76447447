# admin_client/config.py
"""
Environment-driven configuration for the host store's Admin GraphQL API.

Variables
---------
SHOP_DOMAIN       e.g. "my-shop.myshopify.com"
SHOP_ADMIN_TOKEN  Admin API access token
SHOP_API_VERSION  API version segment (default "2025-10")
SHOP_API_TIMEOUT  request timeout in seconds (default 30)
"""

from __future__ import annotations

import os

from admin_client.client import AdminClient

DEFAULT_API_VERSION = "2025-10"
DEFAULT_TIMEOUT = 30.0


def get_store_client() -> AdminClient:
    """Return an authenticated Admin API client if credentials are set."""
    domain = os.getenv("SHOP_DOMAIN")
    token = os.getenv("SHOP_ADMIN_TOKEN")
    if not domain or not token:
        raise RuntimeError("Store credentials not set in environment variables (SHOP_DOMAIN, SHOP_ADMIN_TOKEN).")

    version = os.getenv("SHOP_API_VERSION", DEFAULT_API_VERSION)
    timeout = float(os.getenv("SHOP_API_TIMEOUT", str(DEFAULT_TIMEOUT)))
    return AdminClient(domain, token, api_version=version, timeout=timeout)
