"""
core/schemas.py
---------------
Typed models for delivery timeline rules (persisted and in-form) and for the
results exchanged across the submission boundary.

- Rule:          durable unit written to the store (camelCase on the wire).
- UIRule:        form-session entity with local id, raw string values and errors.
- SaveResult / DeleteResult: repository outcomes.
- SubmitRequest / SubmitResponse: HTTP boundary payloads.
"""

from __future__ import annotations

import uuid
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic.alias_generators import to_camel

# Order matters: validation runs field checks in this order.
DAY_FIELDS = ("shipping_from", "shipping_to", "delivery_from", "delivery_to")

ErrorMap = Dict[str, str]


class _WireModel(BaseModel):
    """Snake_case attributes, camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --------------------------------------------------------------------------- #
# Persisted rule
# --------------------------------------------------------------------------- #

class Rule(_WireModel):
    """One delivery timeline rule as stored inside the singleton record.

    No range check here: records already in the store load as-is so the form
    can show (and fix) an inverted range.
    """

    collections: List[str] = Field(default_factory=list)
    shipping_from: int = Field(ge=0)
    shipping_to: int = Field(ge=0)
    delivery_from: int = Field(ge=0)
    delivery_to: int = Field(ge=0)


class SubmittedRule(Rule):
    """A rule arriving for persistence: ranges must be ordered."""

    @model_validator(mode="after")
    def _check_ranges(self) -> "SubmittedRule":
        if self.shipping_from > self.shipping_to:
            raise ValueError("shippingTo must be >= shippingFrom")
        if self.delivery_from > self.delivery_to:
            raise ValueError("deliveryTo must be >= deliveryFrom")
        return self


RuleList = TypeAdapter(List[Rule])
SubmittedRuleList = TypeAdapter(List[SubmittedRule])


def dump_rules(rules: List[Rule]) -> List[dict]:
    """Plain JSON-ready dicts using the wire (camelCase) keys."""
    return [r.model_dump(by_alias=True) for r in rules]


# --------------------------------------------------------------------------- #
# Form-session entities
# --------------------------------------------------------------------------- #

class PickedCollection(BaseModel):
    id: str
    title: str


class TimelineValues(_WireModel):
    """Editable values of one rule; day fields stay raw strings until save."""

    collections: List[PickedCollection] = Field(default_factory=list)
    shipping_from: str = ""
    shipping_to: str = ""
    delivery_from: str = ""
    delivery_to: str = ""


def new_local_id() -> str:
    return str(uuid.uuid4())


class UIRule(BaseModel):
    """A rule as held by the form: never persisted as-is."""

    id: str = Field(default_factory=new_local_id)
    values: TimelineValues = Field(default_factory=TimelineValues)
    errors: ErrorMap = Field(default_factory=dict)

    def to_rule(self) -> Rule:
        """Project to the durable Rule. Assumes the values validate cleanly."""
        v = self.values
        return Rule(
            collections=[c.id for c in v.collections],
            shipping_from=int(v.shipping_from),
            shipping_to=int(v.shipping_to),
            delivery_from=int(v.delivery_from),
            delivery_to=int(v.delivery_to),
        )


def new_timeline() -> UIRule:
    """Freshly-initialized empty UI rule."""
    return UIRule()


# --------------------------------------------------------------------------- #
# Repository results
# --------------------------------------------------------------------------- #

class TimelineRecord(BaseModel):
    id: str
    handle: Optional[str] = None
    timelines: List[Rule]


class SaveResult(BaseModel):
    action: Literal["created", "updated"]
    id: str


class DeleteResult(_WireModel):
    action: Literal["deleted", "nothing_to_delete"]
    deleted_id: Optional[str] = None


# --------------------------------------------------------------------------- #
# Submission boundary
# --------------------------------------------------------------------------- #

class SubmitRequest(BaseModel):
    """Body of POST /timelines: the Rule array, already JSON-encoded."""
    rules: Optional[str] = None


class SubmitResponse(BaseModel):
    ok: bool
    action: Optional[str] = None
    id: Optional[str] = None
    error: Optional[str] = None


class LoadResponse(_WireModel):
    initial_rules: List[UIRule]
