# database/queries.py
"""
Repository for the singleton delivery timeline record.

There is at most one record of type `delivery_timeline_rule`. Every lookup
asks for the *first* matching record and treats it as the singleton; extra
records, if any exist, are ignored.

The lookup → create-or-update → write sequence is not atomic. Two concurrent
writers can both see "no record" and both create one; the first of them then
wins every later lookup.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from admin_client.client import StoreClient
from admin_client.models import (
    MetaobjectCreateResponse,
    MetaobjectDeleteResponse,
    MetaobjectListResponse,
    MetaobjectMutationPayload,
    MetaobjectNode,
    MetaobjectUpdateResponse,
    parse_response,
    user_errors_as_dicts,
)
from core.errors import StoreMutationError
from core.schemas import DeleteResult, Rule, SaveResult, TimelineRecord
from database.codec import (
    TIMELINES_FIELD,
    TIMELINES_TYPE,
    decode_field_value,
    encode_field_literal,
    quote,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------
# GraphQL documents
# ---------------------------------------------------------------------
FIND_RECORD = f"""
query {{
  metaobjects(type: "{TIMELINES_TYPE}", first: 1) {{
    nodes {{
      id
      handle
    }}
  }}
}}
"""

READ_RECORD = f"""
query {{
  metaobjects(type: "{TIMELINES_TYPE}", first: 1) {{
    nodes {{
      id
      handle
      fields {{
        key
        value
      }}
    }}
  }}
}}
"""

_MUTATION_RESULT = """
    metaobject {
      id
      handle
    }
    userErrors {
      field
      message
    }
"""


def _update_mutation(record_id: str, literal: str) -> str:
    return f"""
mutation {{
  metaobjectUpdate(
    id: {quote(record_id)}
    metaobject: {{
      fields: [
        {{
          key: "{TIMELINES_FIELD}"
          value: {literal}
        }}
      ]
    }}
  ) {{{_MUTATION_RESULT}  }}
}}
"""


def _create_mutation(literal: str) -> str:
    return f"""
mutation {{
  metaobjectCreate(
    metaobject: {{
      type: "{TIMELINES_TYPE}"
      fields: [
        {{
          key: "{TIMELINES_FIELD}"
          value: {literal}
        }}
      ]
    }}
  ) {{{_MUTATION_RESULT}  }}
}}
"""


def _delete_mutation(record_id: str) -> str:
    return f"""
mutation {{
  metaobjectDelete(id: {quote(record_id)}) {{
    deletedId
    userErrors {{
      field
      message
    }}
  }}
}}
"""


def _check(operation: str, payload: MetaobjectMutationPayload) -> None:
    if payload.user_errors:
        errors = user_errors_as_dicts(payload.user_errors)
        logger.error("[Timelines] ❌ %s errors: %s", operation, errors)
        raise StoreMutationError(operation, errors)


# ---------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------
def find_record(store: StoreClient) -> Optional[MetaobjectNode]:
    """Return the singleton record (id + handle) or None if never saved."""
    data = store.execute(FIND_RECORD)
    return parse_response(MetaobjectListResponse, data).first()


# ---------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------
def load_timeline_record(store: StoreClient) -> Optional[TimelineRecord]:
    """
    Read the singleton record with its decoded rules.

    Returns None when no record exists or its `timelines` field is absent or
    empty.
    """
    logger.info("[Timelines] 📖 Loading delivery timelines...")
    data = store.execute(READ_RECORD)
    entry = parse_response(MetaobjectListResponse, data).first()

    if entry is None:
        logger.info("[Timelines] ℹ️ No timelines found")
        return None

    timelines = decode_field_value(entry.field_value(TIMELINES_FIELD))
    if timelines is None:
        logger.info("[Timelines] ℹ️ Timelines field is empty")
        return None

    logger.info("[Timelines] ✅ Loaded %d rules", len(timelines))
    return TimelineRecord(id=entry.id, handle=entry.handle, timelines=timelines)


def load_timelines(store: StoreClient) -> Optional[List[Rule]]:
    """Rules of the singleton record, or None if nothing was ever saved."""
    record = load_timeline_record(store)
    return record.timelines if record is not None else None


# ---------------------------------------------------------------------
# Write
# ---------------------------------------------------------------------
def save_timelines(store: StoreClient, rules: List[Rule]) -> SaveResult:
    """
    Create the singleton record or update the existing one.

    Raises
    ------
    StoreMutationError
        The create/update mutation reported user errors. An update failure
        never falls back to create.
    StoreRequestError
        A store call failed or answered with an unexpected shape.
    """
    logger.info("[Timelines] 💾 Saving %d delivery timelines...", len(rules))
    literal = encode_field_literal(rules)
    existing = find_record(store)

    if existing is not None:
        logger.info("[Timelines] 📝 Updating existing entry: %s", existing.id)
        data = store.execute(_update_mutation(existing.id, literal))
        payload = parse_response(MetaobjectUpdateResponse, data).payload
        _check("metaobjectUpdate", payload)
        logger.info("[Timelines] ✅ Updated successfully")
        return SaveResult(action="updated", id=existing.id)

    logger.info("[Timelines] 🆕 Creating new entry")
    data = store.execute(_create_mutation(literal))
    payload = parse_response(MetaobjectCreateResponse, data).payload
    _check("metaobjectCreate", payload)
    if payload.metaobject is None:
        raise StoreMutationError("metaobjectCreate", [{"field": None, "message": "No metaobject returned"}])

    logger.info("[Timelines] ✅ Created successfully: %s", payload.metaobject.id)
    return SaveResult(action="created", id=payload.metaobject.id)


# ---------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------
def delete_timelines(store: StoreClient) -> DeleteResult:
    """Delete the singleton record. A missing record is a no-op, not an error."""
    logger.info("[Timelines] 🗑️ Deleting delivery timelines...")
    entry = find_record(store)

    if entry is None:
        logger.info("[Timelines] ℹ️ No entry to delete")
        return DeleteResult(action="nothing_to_delete")

    data = store.execute(_delete_mutation(entry.id))
    payload = parse_response(MetaobjectDeleteResponse, data).payload
    _check("metaobjectDelete", payload)

    logger.info("[Timelines] ✅ Deleted successfully")
    return DeleteResult(action="deleted", deleted_id=payload.deleted_id)
