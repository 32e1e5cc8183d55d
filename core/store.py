# core/store.py

"""
Guarded data access for the users / houses / residents tables.

DirectoryStore is the only way request handlers touch the directory tables.
Every operation builds the rule request (caller, target id, stored document,
proposed document) and runs core.security_rules.enforce BEFORE issuing the
Supabase call, so a denied write never reaches the database.
"""

import uuid
from typing import Any, Dict, List, Optional

from supabase import Client

from core.logging_config import get_logger
from core.security_rules import AuthContext, enforce
from models.enums import Action, Collection


logger = get_logger("store")


class DocumentNotFound(Exception):
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


class DirectoryStore:
    def __init__(self, client: Client, uid: Optional[str] = None):
        self.client = client
        self.uid = uid
        self._auth: Optional[AuthContext] = None

    # ---------------------------------------------------------
    # Caller context (rules read the caller's own users record)
    # ---------------------------------------------------------
    def auth_context(self) -> Optional[AuthContext]:
        if not self.uid:
            return None
        if self._auth is None:
            self._auth = AuthContext(uid=self.uid, user=self._fetch(Collection.users, self.uid))
        return self._auth

    def _invalidate_if_self(self, collection: Collection, doc_id: str):
        if collection == Collection.users and doc_id == self.uid:
            self._auth = None

    # ---------------------------------------------------------
    # Raw access (internal; callers must enforce first)
    # ---------------------------------------------------------
    def _fetch(self, collection: Collection, doc_id: str) -> Optional[Dict[str, Any]]:
        res = (
            self.client.table(str(collection))
            .select("*")
            .eq("id", doc_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None

    # ---------------------------------------------------------
    # Reads
    # ---------------------------------------------------------
    def get(self, collection: Collection, doc_id: str) -> Optional[Dict[str, Any]]:
        enforce(self.auth_context(), Action.read, collection, doc_id)
        return self._fetch(collection, doc_id)

    def list(
        self,
        collection: Collection,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        desc: bool = False,
    ) -> List[Dict[str, Any]]:
        enforce(self.auth_context(), Action.read, collection)

        query = self.client.table(str(collection)).select("*")
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        if order_by:
            query = query.order(order_by, desc=desc)

        return query.execute().data or []

    # ---------------------------------------------------------
    # Writes
    # ---------------------------------------------------------
    def create(
        self,
        collection: Collection,
        data: Dict[str, Any],
        doc_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        doc_id = doc_id or data.get("id") or str(uuid.uuid4())
        # A payload id that disagrees with doc_id is kept, so the rules see it
        proposed = {"id": doc_id, **data}

        enforce(self.auth_context(), Action.create, collection, doc_id, proposed=proposed)

        res = self.client.table(str(collection)).insert(proposed).execute()
        self._invalidate_if_self(collection, doc_id)

        logger.info(f"Created {collection}/{doc_id} by {self.uid}")
        return (res.data or [proposed])[0]

    def update(self, collection: Collection, doc_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        existing = self._fetch(collection, doc_id)
        if existing is None:
            # Deny before revealing whether the document exists
            enforce(self.auth_context(), Action.read, collection, doc_id)
            raise DocumentNotFound(str(collection), doc_id)

        proposed = {**existing, **changes, "id": doc_id}
        enforce(
            self.auth_context(), Action.update, collection, doc_id,
            existing=existing, proposed=proposed,
        )

        res = (
            self.client.table(str(collection))
            .update(changes)
            .eq("id", doc_id)
            .execute()
        )
        self._invalidate_if_self(collection, doc_id)

        logger.info(f"Updated {collection}/{doc_id} by {self.uid}")
        return (res.data or [proposed])[0]

    def delete(self, collection: Collection, doc_id: str) -> None:
        existing = self._fetch(collection, doc_id)
        if existing is None:
            enforce(self.auth_context(), Action.read, collection, doc_id)
            raise DocumentNotFound(str(collection), doc_id)

        enforce(self.auth_context(), Action.delete, collection, doc_id, existing=existing)

        self.client.table(str(collection)).delete().eq("id", doc_id).execute()
        logger.info(f"Deleted {collection}/{doc_id} by {self.uid}")
