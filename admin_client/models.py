# admin_client/models.py
"""
Explicit result types for the store responses we consume.

Parsing through these models instead of indexing raw dicts means a shape
change in the API fails loudly at the edge: `parse_response` turns a
pydantic ValidationError into a StoreRequestError.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.errors import StoreRequestError

R = TypeVar("R", bound=BaseModel)


class _Response(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def parse_response(model: Type[R], data: Any) -> R:
    """Validate `data` into `model`; a shape mismatch is a failed store call."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise StoreRequestError(f"Unexpected store response for {model.__name__}: {e}") from e


class UserError(_Response):
    field: Optional[List[str]] = None
    message: str


def user_errors_as_dicts(errors: List[UserError]) -> List[Dict[str, Any]]:
    return [e.model_dump() for e in errors]


# --------------------------------------------------------------------------- #
# Definitions
# --------------------------------------------------------------------------- #

class DefinitionNode(_Response):
    type: str


class DefinitionConnection(_Response):
    nodes: List[DefinitionNode] = Field(default_factory=list)


class DefinitionListResponse(_Response):
    metaobject_definitions: DefinitionConnection = Field(alias="metaobjectDefinitions")


class CreatedDefinition(_Response):
    id: Optional[str] = None
    type: str
    name: Optional[str] = None


class DefinitionCreatePayload(_Response):
    metaobject_definition: Optional[CreatedDefinition] = Field(default=None, alias="metaobjectDefinition")
    user_errors: List[UserError] = Field(default_factory=list, alias="userErrors")


class DefinitionCreateResponse(_Response):
    payload: DefinitionCreatePayload = Field(alias="metaobjectDefinitionCreate")


# --------------------------------------------------------------------------- #
# Metaobject records
# --------------------------------------------------------------------------- #

class MetaobjectField(_Response):
    key: str
    value: Optional[str] = None


class MetaobjectNode(_Response):
    id: str
    handle: Optional[str] = None
    fields: List[MetaobjectField] = Field(default_factory=list)

    def field_value(self, key: str) -> Optional[str]:
        for f in self.fields:
            if f.key == key:
                return f.value
        return None


class MetaobjectConnection(_Response):
    nodes: List[MetaobjectNode] = Field(default_factory=list)


class MetaobjectListResponse(_Response):
    metaobjects: MetaobjectConnection

    def first(self) -> Optional[MetaobjectNode]:
        return self.metaobjects.nodes[0] if self.metaobjects.nodes else None


class MetaobjectMutationPayload(_Response):
    metaobject: Optional[MetaobjectNode] = None
    deleted_id: Optional[str] = Field(default=None, alias="deletedId")
    user_errors: List[UserError] = Field(default_factory=list, alias="userErrors")


class MetaobjectCreateResponse(_Response):
    payload: MetaobjectMutationPayload = Field(alias="metaobjectCreate")


class MetaobjectUpdateResponse(_Response):
    payload: MetaobjectMutationPayload = Field(alias="metaobjectUpdate")


class MetaobjectDeleteResponse(_Response):
    payload: MetaobjectMutationPayload = Field(alias="metaobjectDelete")


# --------------------------------------------------------------------------- #
# Collections
# --------------------------------------------------------------------------- #

class CollectionNode(_Response):
    id: str
    title: str


class CollectionNodesResponse(_Response):
    # `nodes(ids:)` returns null for ids that no longer resolve, and an empty
    # object for ids of another type.
    nodes: Optional[List[Optional[Dict[str, Any]]]] = None

    def collections(self) -> List[CollectionNode]:
        return [CollectionNode(**n) for n in self.nodes or [] if n and "id" in n and "title" in n]


class CollectionConnection(_Response):
    nodes: List[CollectionNode] = Field(default_factory=list)


class CollectionListResponse(_Response):
    collections: CollectionConnection
