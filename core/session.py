# core/session.py

"""
Per-request session.

Replaces a process-wide "current user" with an explicit object handed to
every handler that needs the caller. Lifecycle:

    Session.open(identity, store)   after the identity provider verified the caller
    session.refresh(store)          after the caller's users record changed
    session.clear()                 on sign-out
"""

from typing import Optional

from pydantic import ValidationError

from core.logging_config import logger
from core.permissions import Permissions, build_permissions, get_user_role_display_name
from core.store import DirectoryStore
from models.auth import Identity, PermissionsRead, SessionRead
from models.enums import Collection
from models.timestamp import Timestamp
from models.user import User


class Session:
    def __init__(self, identity: Optional[Identity] = None, user: Optional[User] = None):
        self.identity = identity
        self.user = user

    # ---------------------------------------------------------
    # Derived state
    # ---------------------------------------------------------
    @property
    def uid(self) -> Optional[str]:
        return self.identity.uid if self.identity else None

    @property
    def is_authenticated(self) -> bool:
        """Verified identity AND a registered users record."""
        return self.identity is not None and self.user is not None

    @property
    def needs_registration(self) -> bool:
        return self.identity is not None and self.user is None

    @property
    def permissions(self) -> Permissions:
        return build_permissions(self.user, self.is_authenticated)

    # ---------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------
    @classmethod
    def open(cls, identity: Identity, store: DirectoryStore, record_login: bool = True) -> "Session":
        session = cls(identity=identity)
        session.refresh(store)

        if record_login and session.user is not None:
            session._record_login(store)

        return session

    def refresh(self, store: DirectoryStore) -> "Session":
        if self.identity is None:
            self.user = None
            return self

        raw = store.get(Collection.users, self.identity.uid)
        self.user = self._parse_user(raw)
        return self

    def clear(self):
        self.identity = None
        self.user = None

    def _record_login(self, store: DirectoryStore):
        now = Timestamp.now()
        try:
            store.update(Collection.users, self.user.id, {"lastLoginAt": now.to_document()})
            self.user.last_login_at = now
        except Exception as e:
            # A stale login timestamp must not block the session
            logger.error(f"Failed to record login for {self.user.id}: {e}")

    def _parse_user(self, raw) -> Optional[User]:
        if not raw:
            return None
        try:
            return User.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Malformed users record for {self.uid}: {e.error_count()} errors")
            return None

    # ---------------------------------------------------------
    # Serialization
    # ---------------------------------------------------------
    def snapshot(self) -> SessionRead:
        perms = self.permissions
        return SessionRead(
            uid=self.uid,
            user=self.user,
            is_authenticated=self.is_authenticated,
            needs_registration=self.needs_registration,
            role_display_name=get_user_role_display_name(self.user),
            permissions=PermissionsRead(
                can_access_add_home=perms.can_access_add_home,
                can_view_all_houses=perms.can_view_all_houses,
                editable_house_id=perms.editable_house_id,
            ),
        )
