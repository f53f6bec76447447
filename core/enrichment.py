"""
core/enrichment.py
------------------
Turns persisted rules into form state.

Collection identifiers are resolved to display titles with a single batch
lookup; identifiers that no longer resolve (e.g. deleted upstream) get a
fallback title built from their trailing path segment.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from admin_client.client import StoreClient
from core.schemas import PickedCollection, Rule, TimelineValues, UIRule, new_timeline
from database.collections import fetch_collection_titles


def collect_collection_ids(rules: Iterable[Rule]) -> List[str]:
    """Unique identifiers across all rules, first-seen order."""
    return list(dict.fromkeys(cid for rule in rules for cid in rule.collections))


def fallback_title(collection_id: str) -> str:
    return f"Collection {collection_id.split('/')[-1]}"


def to_ui_rule(rule: Rule, titles: Dict[str, str]) -> UIRule:
    return UIRule(
        values=TimelineValues(
            collections=[
                PickedCollection(id=cid, title=titles.get(cid) or fallback_title(cid))
                for cid in rule.collections
            ],
            shipping_from=str(rule.shipping_from),
            shipping_to=str(rule.shipping_to),
            delivery_from=str(rule.delivery_from),
            delivery_to=str(rule.delivery_to),
        )
    )


def build_initial_rules(store: StoreClient, rules: Optional[List[Rule]]) -> List[UIRule]:
    """
    Enrich loaded rules into UI rules.

    Parameters
    ----------
    store : StoreClient
        Used for the title lookup only.
    rules : list of Rule or None
        Result of `load_timelines`; None means "never saved".

    Returns
    -------
    list of UIRule
        Never empty: a single blank rule when there is nothing to show.
    """
    if not rules:
        return [new_timeline()]

    ids = collect_collection_ids(rules)
    titles = fetch_collection_titles(store, ids) if ids else {}
    return [to_ui_rule(rule, titles) for rule in rules]
