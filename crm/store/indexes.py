"""Core per-tenant MongoDB indexes.

Content collections are dynamic (named by ModelDefs) and are not indexed here.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

logger = logging.getLogger(__name__)

# meta collection -> (identity key, index name stem)
META_COLLECTIONS: List[Tuple[str, str, str]] = [
    ("forms", "id", "formId"),
    ("actions", "id", "actionId"),
    ("workflows", "id", "workflowId"),
    ("policies", "id", "policyId"),
    ("components", "id", "componentId"),
    ("prompts", "id", "promptId"),
    ("scripts", "id", "scriptId"),
]


def _versioned_meta_indexes(db: Database, collection: str, key: str, stem: str) -> List[str]:
    col = db[collection]
    return [
        col.create_index(
            [("tenantId", ASCENDING), (key, ASCENDING), ("active", ASCENDING)],
            name=f"tenant_{stem}_active_unique",
            unique=True,
            partialFilterExpression={"active": True},
        ),
        col.create_index(
            [("tenantId", ASCENDING), (key, ASCENDING), ("version", DESCENDING)],
            name=f"tenant_{stem}_version",
        ),
    ]


def ensure_indexes(db: Database) -> List[str]:
    """Create the core indexes; safe to call on every startup."""
    created: List[str] = []
    created += _versioned_meta_indexes(db, "models", "name", "name")
    created.append(
        db["models"].create_index(
            [("tenantId", ASCENDING), ("updatedAt", DESCENDING)],
            name="tenant_updatedAt",
        )
    )
    for collection, key, stem in META_COLLECTIONS:
        created += _versioned_meta_indexes(db, collection, key, stem)

    events = db["event_store"]
    created.append(events.create_index([("tenantId", ASCENDING), ("ts", DESCENDING)], name="tenant_ts"))
    created.append(
        events.create_index(
            [("tenantId", ASCENDING), ("type", ASCENDING), ("ts", DESCENDING)],
            name="tenant_type_ts",
        )
    )

    created.append(
        db["ai_sessions"].create_index(
            [("tenantId", ASCENDING), ("userId", ASCENDING), ("sessionId", ASCENDING)],
            name="tenant_user_session_unique",
            unique=True,
        )
    )
    logger.info("Ensured %d indexes on database %s", len(created), db.name)
    return created
