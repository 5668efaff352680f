"""MongoDB connection lifecycle.

The process entry point owns the single ``MongoStore``; repositories receive
the resulting ``Database`` handle through their constructors.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from pymongo import MongoClient
from pymongo.database import Database

from crm.config import runtime_config

logger = logging.getLogger(__name__)


class MongoStore:
    def __init__(
        self,
        uri: Optional[str] = None,
        db_name: Optional[str] = None,
        client: Optional[MongoClient] = None,
    ) -> None:
        self._uri = uri or runtime_config.get_mongo_uri()
        self._db_name = db_name or runtime_config.get_mongo_db()
        self._client = client

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            logger.info("Connecting to MongoDB database %s", self._db_name)
            self._client = MongoClient(self._uri)
        return self._client

    @property
    def database(self) -> Database:
        return self.client[self._db_name]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def to_jsonable(doc: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy a stored document, rendering the ObjectId as a string."""
    out = dict(doc)
    if "_id" in out:
        out["_id"] = str(out["_id"])
    return out
