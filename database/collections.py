# database/collections.py
"""
Catalog collection lookups: batch title resolution for stored identifiers and
a small listing used by the form's collection picker.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from admin_client.client import StoreClient
from admin_client.models import (
    CollectionListResponse,
    CollectionNode,
    CollectionNodesResponse,
    parse_response,
)

logger = logging.getLogger(__name__)

COLLECTION_TITLES = """
query getCollectionTitles($ids: [ID!]!) {
  nodes(ids: $ids) {
    ... on Collection {
      id
      title
    }
  }
}
"""

LIST_COLLECTIONS = """
query listCollections($first: Int!) {
  collections(first: $first, sortKey: TITLE) {
    nodes {
      id
      title
    }
  }
}
"""


def fetch_collection_titles(store: StoreClient, ids: List[str]) -> Dict[str, str]:
    """
    Resolve collection identifiers to titles with one batch query.

    Identifiers the store no longer knows are simply absent from the result.
    """
    if not ids:
        return {}
    data = store.execute(COLLECTION_TITLES, {"ids": list(ids)})
    found = parse_response(CollectionNodesResponse, data).collections()
    logger.info("[Collections] ← Resolved %d/%d titles", len(found), len(ids))
    return {c.id: c.title for c in found}


def list_collections(store: StoreClient, first: int = 50) -> List[CollectionNode]:
    data = store.execute(LIST_COLLECTIONS, {"first": first})
    return parse_response(CollectionListResponse, data).collections.nodes
