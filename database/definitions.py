# database/definitions.py
"""
Schema provisioning for the delivery timeline metaobject.

`ensure_schema` is idempotent: when the definition already exists it only
reads. It is safe to call before every write.
"""

from __future__ import annotations

import logging

from admin_client.client import StoreClient
from admin_client.models import (
    DefinitionCreateResponse,
    DefinitionListResponse,
    parse_response,
    user_errors_as_dicts,
)
from core.errors import SchemaProvisionError
from database.codec import TIMELINES_FIELD, TIMELINES_TYPE

logger = logging.getLogger(__name__)

DEFINITIONS_PAGE_SIZE = 50

LIST_DEFINITIONS = f"""
query {{
  metaobjectDefinitions(first: {DEFINITIONS_PAGE_SIZE}) {{
    nodes {{
      type
    }}
  }}
}}
"""

CREATE_DEFINITION = f"""
mutation {{
  metaobjectDefinitionCreate(
    definition: {{
      name: "Delivery Timeline Rule"
      type: "{TIMELINES_TYPE}"
      fieldDefinitions: [
        {{
          key: "{TIMELINES_FIELD}"
          name: "Timelines"
          type: "json"
          required: true
        }}
      ]
    }}
  ) {{
    metaobjectDefinition {{
      id
      type
      name
    }}
    userErrors {{
      field
      message
    }}
  }}
}}
"""


def schema_exists(store: StoreClient) -> bool:
    data = store.execute(LIST_DEFINITIONS)
    definitions = parse_response(DefinitionListResponse, data).metaobject_definitions.nodes
    return any(d.type == TIMELINES_TYPE for d in definitions)


def ensure_schema(store: StoreClient) -> None:
    """
    Create the `delivery_timeline_rule` definition unless it already exists.

    Raises
    ------
    SchemaProvisionError
        The create mutation reported user errors. Not retried.
    StoreRequestError
        A store call failed.
    """
    logger.info("[Schema] ➡️ Checking metaobject definitions")
    if schema_exists(store):
        logger.info("[Schema] ✔ Metaobject schema already exists")
        return

    logger.info("[Schema] 🆕 Creating metaobject definition")
    data = store.execute(CREATE_DEFINITION)
    payload = parse_response(DefinitionCreateResponse, data).payload

    if payload.user_errors:
        errors = user_errors_as_dicts(payload.user_errors)
        logger.error("[Schema] ❌ Definition create errors: %s", errors)
        raise SchemaProvisionError(errors)

    created = payload.metaobject_definition.type if payload.metaobject_definition else TIMELINES_TYPE
    logger.info("[Schema] ✅ Metaobject definition created: %s", created)
