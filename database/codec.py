# database/codec.py
"""
Wire encoding of the `timelines` field.

The field is declared with the store's `json` type. Writes embed the value in
the mutation text as a GraphQL string literal whose content is the JSON array,
i.e. `json.dumps(json.dumps(rules))`. The store unwraps the literal, so the
value read back is the JSON array text and decodes with a single `json.loads`.

Do not collapse this to a single encoding: records written so far would no
longer decode.
"""

from __future__ import annotations

import json
from typing import List, Optional

from core.schemas import Rule, RuleList, dump_rules

TIMELINES_TYPE = "delivery_timeline_rule"
TIMELINES_FIELD = "timelines"


def encode_field_literal(rules: List[Rule]) -> str:
    """Double-encode `rules` into a literal ready to splice into a mutation."""
    return json.dumps(json.dumps(dump_rules(rules)))


def decode_field_value(value: Optional[str]) -> Optional[List[Rule]]:
    """
    Decode a stored field value (single JSON layer).

    Returns None for an absent or empty value.
    """
    if not value:
        return None
    return RuleList.validate_python(json.loads(value))


def quote(value: str) -> str:
    """GraphQL string literal for an identifier spliced into query text."""
    return json.dumps(value)
