# tests/conftest.py
"""
Shared fixtures: an in-memory stand-in for the Admin GraphQL API.

FakeStore recognises the handful of operations the app issues by their root
field and answers the way the real API does, including unwrapping the string
literal spliced into metaobject mutations.
"""

from __future__ import annotations

import itertools
import json
import re
from typing import Any, Dict, List, Optional

import pytest

from core.errors import StoreRequestError

_STRING = r'("(?:[^"\\]|\\.)*")'
_VALUE_RE = re.compile(r"value: " + _STRING)
_ID_RE = re.compile(r"\bid: " + _STRING)
_TYPE_RE = re.compile(r'type: "([^"]+)"')


class FakeStore:
    def __init__(self):
        self.definitions: List[str] = []
        self.records: List[Dict[str, Any]] = []
        self.collections: Dict[str, str] = {}
        self.calls: List[str] = []
        self.user_errors: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_on: Optional[str] = None
        # Canned `data` per operation, returned as-is (e.g. a null payload).
        self.responses: Dict[str, Any] = {}
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #

    def operation_count(self, name: str) -> int:
        return sum(1 for op in self.calls if op == name)

    def stored_value(self, index: int = 0) -> Optional[str]:
        for f in self.records[index]["fields"]:
            if f["key"] == "timelines":
                return f["value"]
        return None

    def add_record(self, value: Optional[str], record_type: str = "delivery_timeline_rule") -> str:
        rid = f"gid://shopify/Metaobject/{next(self._ids)}"
        fields = [] if value is None else [{"key": "timelines", "value": value}]
        self.records.append({"id": rid, "handle": f"entry-{rid[-1]}", "type": record_type, "fields": fields})
        return rid

    def _of_type(self, record_type: str) -> List[Dict[str, Any]]:
        return [r for r in self.records if r["type"] == record_type]

    def _errors(self, op: str) -> List[Dict[str, Any]]:
        return self.user_errors.get(op, [])

    # ------------------------------------------------------------------ #
    # StoreClient
    # ------------------------------------------------------------------ #

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        op = self._operation(query)
        self.calls.append(op)
        if self.fail_on == op:
            raise StoreRequestError(f"{op}: connection reset")
        if op in self.responses:
            return self.responses[op]
        return getattr(self, f"_{op}")(query, variables or {})

    @staticmethod
    def _operation(query: str) -> str:
        for name in (
            "metaobjectDefinitionCreate",
            "metaobjectDefinitions",
            "metaobjectCreate",
            "metaobjectUpdate",
            "metaobjectDelete",
            "metaobjects",
            "collections",
            "shop",
            "nodes",
        ):
            if re.search(rf"\b{name}\s*[({{]", query):
                return name
        raise AssertionError(f"unexpected operation: {query}")

    def _metaobjectDefinitions(self, query, variables):
        return {"metaobjectDefinitions": {"nodes": [{"type": t} for t in self.definitions]}}

    def _metaobjectDefinitionCreate(self, query, variables):
        errors = self._errors("metaobjectDefinitionCreate")
        if errors:
            return {"metaobjectDefinitionCreate": {"metaobjectDefinition": None, "userErrors": errors}}
        record_type = _TYPE_RE.search(query).group(1)
        self.definitions.append(record_type)
        return {
            "metaobjectDefinitionCreate": {
                "metaobjectDefinition": {"id": "gid://shopify/MetaobjectDefinition/1", "type": record_type, "name": "Delivery Timeline Rule"},
                "userErrors": [],
            }
        }

    def _metaobjects(self, query, variables):
        record_type = _TYPE_RE.search(query).group(1)
        first = int(re.search(r"first: (\d+)", query).group(1))
        nodes = [
            {"id": r["id"], "handle": r["handle"], "fields": r["fields"]}
            for r in self._of_type(record_type)[:first]
        ]
        return {"metaobjects": {"nodes": nodes}}

    def _metaobjectCreate(self, query, variables):
        errors = self._errors("metaobjectCreate")
        if errors:
            return {"metaobjectCreate": {"metaobject": None, "userErrors": errors}}
        value = json.loads(_VALUE_RE.search(query).group(1))
        rid = self.add_record(value, _TYPE_RE.search(query).group(1))
        return {"metaobjectCreate": {"metaobject": {"id": rid, "handle": self.records[-1]["handle"]}, "userErrors": []}}

    def _metaobjectUpdate(self, query, variables):
        rid = json.loads(_ID_RE.search(query).group(1))
        errors = self._errors("metaobjectUpdate")
        if errors:
            return {"metaobjectUpdate": {"metaobject": None, "userErrors": errors}}
        value = json.loads(_VALUE_RE.search(query).group(1))
        record = next(r for r in self.records if r["id"] == rid)
        record["fields"] = [{"key": "timelines", "value": value}]
        return {"metaobjectUpdate": {"metaobject": {"id": rid, "handle": record["handle"]}, "userErrors": []}}

    def _metaobjectDelete(self, query, variables):
        rid = json.loads(_ID_RE.search(query).group(1))
        errors = self._errors("metaobjectDelete")
        if errors:
            return {"metaobjectDelete": {"deletedId": None, "userErrors": errors}}
        self.records = [r for r in self.records if r["id"] != rid]
        return {"metaobjectDelete": {"deletedId": rid, "userErrors": []}}

    def _nodes(self, query, variables):
        return {
            "nodes": [
                {"id": cid, "title": self.collections[cid]} if cid in self.collections else None
                for cid in variables["ids"]
            ]
        }

    def _collections(self, query, variables):
        items = sorted(self.collections.items(), key=lambda kv: kv[1])[: variables.get("first", 50)]
        return {"collections": {"nodes": [{"id": cid, "title": title} for cid, title in items]}}

    def _shop(self, query, variables):
        return {"shop": {"name": "Test Shop"}}


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def sample_rule_dicts() -> List[Dict[str, Any]]:
    return [
        {"collections": ["gid://shopify/Collection/1", "gid://shopify/Collection/2"], "shippingFrom": 1, "shippingTo": 2, "deliveryFrom": 3, "deliveryTo": 5},
        {"collections": [], "shippingFrom": 0, "shippingTo": 0, "deliveryFrom": 7, "deliveryTo": 14},
    ]
