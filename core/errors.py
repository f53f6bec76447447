"""
core/errors.py
--------------
Exception taxonomy shared by the store client, the persistence layer and the
FastAPI boundary.

Validation problems are *not* exceptions: they travel as plain error maps
(see core/validation.py) and block the save in the UI.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional


class TimelinesError(Exception):
    """Base class for every raised delivery-timeline error."""


class StoreRequestError(TimelinesError):
    """The store call itself failed (network, HTTP status, GraphQL errors)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UserErrorsMixin:
    """Carries the raw ``userErrors`` list returned by a mutation."""

    user_errors: List[Any]

    def user_errors_json(self) -> str:
        return json.dumps(self.user_errors, indent=2, default=str)


class SchemaProvisionError(UserErrorsMixin, TimelinesError):
    """
    The metaobject definition could not be created.

    Fatal: a naming collision or malformed definition will not resolve by
    retrying.
    """

    def __init__(self, user_errors: List[Any]):
        self.user_errors = list(user_errors)
        super().__init__(self.user_errors_json())


class StoreMutationError(UserErrorsMixin, TimelinesError):
    """A create/update/delete mutation reported user errors."""

    def __init__(self, operation: str, user_errors: List[Any]):
        self.operation = operation
        self.user_errors = list(user_errors)
        super().__init__(self.user_errors_json())
