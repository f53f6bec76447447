"""
core/validation.py
------------------
Pure validation of one delivery timeline rule in its form (string) shape.

Field checks run first, cross-field checks second; a cross-field error
overwrites whatever the field check put on the same key.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional, Union

from core.schemas import DAY_FIELDS, ErrorMap, TimelineValues

MIN_DAYS = 0

REQUIRED = "Required"
NOT_A_NUMBER = "Must be a number"

# ASCII digits only: no sign, decimal point or exponent marker.
_DIGITS = re.compile(r"[0-9]+")


def validate_number(raw: str, *, min_value: Optional[int] = None, required: bool = False) -> Optional[str]:
    """Return the error message for a single day field, or None."""
    if raw == "":
        return REQUIRED if required else None
    if not _DIGITS.fullmatch(raw):
        return NOT_A_NUMBER

    n = int(raw)
    if min_value is not None and n < min_value:
        return f"Must be {min_value} or greater"
    return None


def _is_number(raw: str) -> bool:
    return bool(raw) and _DIGITS.fullmatch(raw) is not None


def validate_timeline(values: Union[TimelineValues, Mapping[str, Any]]) -> ErrorMap:
    """
    Compute the error map for one rule.

    Parameters
    ----------
    values : TimelineValues or mapping
        Raw form values. Mappings may use snake_case or camelCase keys.

    Returns
    -------
    dict
        field name -> message, only for fields that have an error.
    """
    if not isinstance(values, TimelineValues):
        values = TimelineValues.model_validate(dict(values))

    errors: ErrorMap = {}
    for name in DAY_FIELDS:
        message = validate_number(getattr(values, name), min_value=MIN_DAYS, required=True)
        if message:
            errors[name] = message

    if (
        _is_number(values.shipping_from)
        and _is_number(values.shipping_to)
        and int(values.shipping_from) > int(values.shipping_to)
    ):
        errors["shipping_to"] = "Must be ≥ Shipping from"

    if (
        _is_number(values.delivery_from)
        and _is_number(values.delivery_to)
        and int(values.delivery_from) > int(values.delivery_to)
    ):
        errors["delivery_to"] = "Must be ≥ Delivery from"

    return errors


def has_errors(errors: ErrorMap) -> bool:
    return any(bool(msg) for msg in errors.values())
