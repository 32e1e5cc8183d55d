# core/security_rules.py

"""
Data-store enforcement rules.

Every read and write the store performs is evaluated here first. This is the
trust boundary: route guards may be bypassed or wrong, these rules may not.

The rule set is declarative: RULES maps (collection, action) to the list of
named conditions that must ALL hold. A missing entry, or an empty list,
means the action is never allowed.

Conditions receive a RuleRequest:
    auth:      None for anonymous callers, else the verified uid plus the
               caller's own users/{uid} record as the store looked it up
    doc_id:    target document id (None for collection reads, which
               is_self never matches, so users cannot be listed)
    existing:  stored document before the write (update / delete)
    proposed:  full document after the write (create / update)

Resident write scope is always derived from auth.user (the caller's stored
record), never from the payload alone.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel

from core.logging_config import get_logger
from core.permissions import can_edit_resident, can_view_all_houses, is_head_of_family
from models.enums import Action, Collection


logger = get_logger("rules")


# ============================================================
# REQUEST / DECISION TYPES
# ============================================================
class AuthContext(BaseModel):
    uid: str
    user: Optional[Dict[str, Any]] = None


class RuleRequest(BaseModel):
    auth: Optional[AuthContext] = None
    doc_id: Optional[str] = None
    existing: Optional[Dict[str, Any]] = None
    proposed: Optional[Dict[str, Any]] = None

    @property
    def uid(self) -> Optional[str]:
        return self.auth.uid if self.auth else None

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self.auth.user if self.auth else None


class Decision(BaseModel):
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)


class PermissionDenied(Exception):
    """Raised by enforce(); carries the failed condition for logging only."""

    def __init__(self, collection: str, action: str, doc_id: Optional[str], reason: str):
        self.collection = collection
        self.action = action
        self.doc_id = doc_id
        self.reason = reason
        super().__init__(f"{action} {collection}/{doc_id or '*'} denied: {reason}")


# ============================================================
# CONDITIONS
# ============================================================
def is_authenticated(req: RuleRequest) -> bool:
    return can_view_all_houses(bool(req.uid))


def is_self(req: RuleRequest) -> bool:
    return req.doc_id is not None and req.uid == req.doc_id


def payload_id_matches(req: RuleRequest) -> bool:
    return req.proposed is not None and req.proposed.get("id") == req.doc_id


def caller_is_head_of_family(req: RuleRequest) -> bool:
    return is_head_of_family(req.user)


def payload_in_own_house(req: RuleRequest) -> bool:
    return req.proposed is not None and can_edit_resident(req.user, req.proposed.get("houseId"))


def existing_in_own_house(req: RuleRequest) -> bool:
    return req.existing is not None and can_edit_resident(req.user, req.existing.get("houseId"))


def payload_created_by_caller(req: RuleRequest) -> bool:
    return req.proposed is not None and req.proposed.get("createdBy") == req.uid


def creator_is_sole_head(req: RuleRequest) -> bool:
    if req.proposed is None:
        return False
    return (
        req.proposed.get("headOfFamilyId") == req.uid
        and req.proposed.get("memberIds") == [req.uid]
    )


# Fields a joining member may touch on a house document
JOIN_MUTABLE_FIELDS = {"memberIds", "updatedAt"}


def is_self_join(req: RuleRequest) -> bool:
    """The update only appends the caller's own id to memberIds."""
    if req.existing is None or req.proposed is None:
        return False

    before = list(req.existing.get("memberIds") or [])
    after = list(req.proposed.get("memberIds") or [])

    if req.uid in before:
        return False
    if after != before + [req.uid]:
        return False

    keys = (set(req.existing) | set(req.proposed)) - JOIN_MUTABLE_FIELDS
    return all(req.existing.get(k) == req.proposed.get(k) for k in keys)


def is_house_head(req: RuleRequest) -> bool:
    return req.existing is not None and req.existing.get("headOfFamilyId") == req.uid


def house_head_or_self_join(req: RuleRequest) -> bool:
    return is_house_head(req) or is_self_join(req)


Condition = Tuple[str, Callable[[RuleRequest], bool]]


# ============================================================
# CENTRALIZED COLLECTION → ACTION → CONDITIONS MAP
# ============================================================
RULES: Dict[Collection, Dict[Action, List[Condition]]] = {

    # =====================================================
    # USERS: private, self only, never deleted by clients
    # =====================================================
    Collection.users: {
        Action.read: [
            ("is_authenticated", is_authenticated),
            ("is_self", is_self),
        ],
        Action.create: [
            ("is_authenticated", is_authenticated),
            ("is_self", is_self),
            ("payload_id_matches", payload_id_matches),
        ],
        Action.update: [
            ("is_authenticated", is_authenticated),
            ("is_self", is_self),
        ],
    },

    # =====================================================
    # HOUSES: shared directory, head edits, members may join
    # =====================================================
    Collection.houses: {
        Action.read: [
            ("is_authenticated", is_authenticated),
        ],
        Action.create: [
            ("is_authenticated", is_authenticated),
            ("creator_is_sole_head", creator_is_sole_head),
        ],
        Action.update: [
            ("is_authenticated", is_authenticated),
            ("house_head_or_self_join", house_head_or_self_join),
        ],
    },

    # =====================================================
    # RESIDENTS: shared reads, writes scoped to caller's house
    # =====================================================
    Collection.residents: {
        Action.read: [
            ("is_authenticated", is_authenticated),
        ],
        Action.create: [
            ("is_authenticated", is_authenticated),
            ("caller_is_head_of_family", caller_is_head_of_family),
            ("payload_in_own_house", payload_in_own_house),
            ("payload_created_by_caller", payload_created_by_caller),
        ],
        Action.update: [
            ("is_authenticated", is_authenticated),
            ("caller_is_head_of_family", caller_is_head_of_family),
            ("existing_in_own_house", existing_in_own_house),
            ("payload_in_own_house", payload_in_own_house),
        ],
        Action.delete: [
            ("is_authenticated", is_authenticated),
            ("caller_is_head_of_family", caller_is_head_of_family),
            ("existing_in_own_house", existing_in_own_house),
        ],
    },
}


# ============================================================
# EVALUATION
# ============================================================
def evaluate(
    auth: Optional[AuthContext],
    action: Action,
    collection: Collection,
    doc_id: Optional[str] = None,
    existing: Optional[Dict[str, Any]] = None,
    proposed: Optional[Dict[str, Any]] = None,
) -> Decision:
    """
    Pure decision function. Conditions are checked in order and the first
    failing one is reported as the deny reason.
    """
    try:
        conditions = RULES.get(Collection(collection), {}).get(Action(action))
    except ValueError:
        return Decision.deny("unknown_target")

    if not conditions:
        return Decision.deny("no_rule")

    req = RuleRequest(auth=auth, doc_id=doc_id, existing=existing, proposed=proposed)

    for name, condition in conditions:
        if not condition(req):
            return Decision.deny(name)

    return Decision.allow()


def enforce(
    auth: Optional[AuthContext],
    action: Action,
    collection: Collection,
    doc_id: Optional[str] = None,
    existing: Optional[Dict[str, Any]] = None,
    proposed: Optional[Dict[str, Any]] = None,
) -> None:
    """Raise PermissionDenied unless evaluate() allows the request."""
    decision = evaluate(auth, action, collection, doc_id, existing, proposed)
    if decision.allowed:
        return

    logger.warning(
        f"Store rule denied {action} {collection}/{doc_id or '*'} "
        f"for {auth.uid if auth else 'anonymous'}: {decision.reason}"
    )
    raise PermissionDenied(str(collection), str(action), doc_id, decision.reason)
