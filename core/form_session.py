"""
core/form_session.py
--------------------
Editable, in-memory list of delivery timeline rules behind the form.

The rule list is only ever replaced as a whole; no UIRule is mutated in place.
That keeps change detection trivial for the UI layer (identity comparison)
and makes every edit a single assignment.

Collaborators are plain callables so the session can be driven by Streamlit,
a test, or anything else:

- submit(payload) -> SubmitResponse   (payload is {"rules": "<json>"})
- notifier.notify(message, is_error=False)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Union

from core.schemas import (
    DAY_FIELDS,
    PickedCollection,
    Rule,
    SubmitResponse,
    TimelineValues,
    UIRule,
    dump_rules,
    new_timeline,
)
from core.validation import has_errors, validate_timeline

logger = logging.getLogger(__name__)

FIX_ERRORS_MESSAGE = "Please fix errors before saving"
SAVED_MESSAGE = "Timelines saved"

# Day fields by attribute name and by wire alias (`shippingFrom`).
_DAY_FIELD_KEYS = {
    **{name: name for name in DAY_FIELDS},
    **{TimelineValues.model_fields[name].alias: name for name in DAY_FIELDS},
}


class Notifier(Protocol):
    def notify(self, message: str, is_error: bool = False) -> None:
        ...


SubmitFn = Callable[[Dict[str, str]], Union[SubmitResponse, Mapping[str, Any]]]


class FormSession:
    """Holds the form's rules and drives edits, validation and save."""

    def __init__(self, initial_rules: Optional[Iterable[UIRule]] = None, notifier: Optional[Notifier] = None):
        rules = list(initial_rules or [])
        self.rules: List[UIRule] = rules or [new_timeline()]
        self.notifier = notifier
        self.is_saving = False

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get(self, rule_id: str) -> UIRule:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        raise KeyError(rule_id)

    @property
    def has_errors(self) -> bool:
        return any(has_errors(r.errors) for r in self.rules)

    def to_rules(self) -> List[Rule]:
        """Durable projection: integers and collection ids only."""
        return [r.to_rule() for r in self.rules]

    # ------------------------------------------------------------------ #
    # Edits
    # ------------------------------------------------------------------ #

    def _replace(self, rule_id: str, **updates: Any) -> None:
        def revise(rule: UIRule) -> UIRule:
            values = rule.values.model_copy(update=updates)
            return rule.model_copy(update={"values": values, "errors": validate_timeline(values)})

        self.rules = [revise(r) if r.id == rule_id else r for r in self.rules]

    def update_field(self, rule_id: str, field_key: str, value: str) -> None:
        """Replace one day field of one rule and re-validate that rule.

        `field_key` is the attribute name or its camelCase alias.
        """
        if field_key not in _DAY_FIELD_KEYS:
            raise KeyError(field_key)
        self._replace(rule_id, **{_DAY_FIELD_KEYS[field_key]: value})

    def update_collections(self, rule_id: str, picked: Iterable[Union[PickedCollection, Mapping[str, str]]]) -> None:
        """Replace the rule's collections wholesale (the picker returns a full set)."""
        collections = [p if isinstance(p, PickedCollection) else PickedCollection(**p) for p in picked]
        self._replace(rule_id, collections=collections)

    def add_rule(self) -> UIRule:
        rule = new_timeline()
        self.rules = [*self.rules, rule]
        return rule

    def remove_rule(self, rule_id: str) -> None:
        self.rules = [r for r in self.rules if r.id != rule_id]

    # ------------------------------------------------------------------ #
    # Save
    # ------------------------------------------------------------------ #

    def _notify(self, message: str, is_error: bool = False) -> None:
        if self.notifier is not None:
            self.notifier.notify(message, is_error=is_error)

    def validate_all(self) -> bool:
        """Re-validate every rule, store fresh errors, return True when clean."""
        self.rules = [r.model_copy(update={"errors": validate_timeline(r.values)}) for r in self.rules]
        return not self.has_errors

    def build_payload(self) -> Dict[str, str]:
        return {"rules": json.dumps(dump_rules(self.to_rules()))}

    def save(self, submit: SubmitFn) -> Optional[SubmitResponse]:
        """
        Validate everything and submit the rules as one payload.

        Returns the submission response, or None when the save was blocked
        (validation errors, or another save still in flight).
        """
        if self.is_saving:
            logger.info("[Form] Save already in progress; ignoring")
            return None

        if not self.validate_all():
            self._notify(FIX_ERRORS_MESSAGE, is_error=True)
            return None

        self.is_saving = True
        try:
            raw = submit(self.build_payload())
        finally:
            self.is_saving = False

        response = raw if isinstance(raw, SubmitResponse) else SubmitResponse.model_validate(raw)
        if response.ok:
            self._notify(SAVED_MESSAGE)
        else:
            self._notify(response.error or "Save failed", is_error=True)
        return response
