# core/permissions.py

"""
Permission predicates.

Single source of truth for "who may do what". Both the route guards
(core.permission_helpers) and the store's enforcement rules
(core.security_rules) are written on top of these functions.

Every predicate fails closed: an absent principal, or one whose role /
house id is missing or malformed, is denied rather than raising.
"""

from typing import Any, Optional

from pydantic import BaseModel

from core.utils import get_field
from core.validation import validate_user_house_association, validate_user_role
from models.enums import Role


# ============================================================
# PRINCIPAL FIELD ACCESS
# ============================================================
def _role(principal: Any) -> Optional[Role]:
    return validate_user_role(get_field(principal, "role"))


def _house_id(principal: Any) -> Optional[str]:
    house_id = get_field(principal, "house_id", "houseId")
    if isinstance(house_id, str) and house_id:
        return house_id
    return None


# ============================================================
# ROLE PREDICATES
# ============================================================
def is_head_of_family(principal: Any) -> bool:
    return _role(principal) is Role.head


def is_member(principal: Any) -> bool:
    return _role(principal) is Role.member


# ============================================================
# HOUSE / RESIDENT PREDICATES
# ============================================================
def can_edit_house(principal: Any, house_id: Any) -> bool:
    """
    Only the head of family may create/update/delete resident records,
    and only under their own house.
    """
    if not is_head_of_family(principal):
        return False

    own_house = _house_id(principal)
    return own_house is not None and own_house == house_id


def can_edit_resident(principal: Any, resident_house_id: Any) -> bool:
    # Same rule as can_edit_house, applied to a resident's houseId
    return can_edit_house(principal, resident_house_id)


def can_access_add_home(principal: Any) -> bool:
    return is_head_of_family(principal)


def can_view_all_houses(is_authenticated: bool) -> bool:
    """Reads are gated on authentication only, never on role."""
    return is_authenticated is True


def can_perform_admin_actions(principal: Any, target_house_id: Optional[str] = None) -> bool:
    """
    Heads of family administer their own house. Without a target house
    this reduces to the role check.
    """
    if target_house_id is None:
        return is_head_of_family(principal)
    return can_edit_house(principal, target_house_id)


def get_user_role_display_name(principal: Any) -> str:
    if not principal:
        return "Guest"
    return "Head of Family" if is_head_of_family(principal) else "Member"


# ============================================================
# DENIAL MESSAGES
# ============================================================
PERMISSION_ERRORS = {
    "NOT_AUTHENTICATED": "You must be logged in to access this feature.",
    "NOT_HEAD_OF_FAMILY": "Only heads of family can perform this action.",
    "WRONG_HOUSE": "You can only edit residents in your own house.",
    "GENERAL_UNAUTHORIZED": "You don't have permission to perform this action.",
    "MEMBER_RESTRICTION": "Members can only view resident information.",
}


def get_permission_error_message(
    principal: Any,
    required: str,
    target_house_id: Optional[str] = None,
) -> str:
    """Pick the user-facing message for a denied requirement."""
    if not principal:
        return PERMISSION_ERRORS["NOT_AUTHENTICATED"]

    if required == "authenticated":
        return PERMISSION_ERRORS["NOT_AUTHENTICATED"]

    if required in ("add_home", "admin"):
        if not is_head_of_family(principal):
            return PERMISSION_ERRORS["NOT_HEAD_OF_FAMILY"]

    elif required == "edit_house":
        if not is_head_of_family(principal):
            return PERMISSION_ERRORS["NOT_HEAD_OF_FAMILY"]
        if target_house_id and _house_id(principal) != target_house_id:
            return PERMISSION_ERRORS["WRONG_HOUSE"]

    return PERMISSION_ERRORS["GENERAL_UNAUTHORIZED"]


# ============================================================
# DERIVED PERMISSION OBJECT (held by the session)
# ============================================================
class Permissions(BaseModel):
    can_access_add_home: bool = False
    can_view_all_houses: bool = False
    # The one house whose residents this principal may edit, if any
    editable_house_id: Optional[str] = None

    def can_edit_house(self, house_id: str) -> bool:
        return self.editable_house_id is not None and self.editable_house_id == house_id


def build_permissions(principal: Any, is_authenticated: bool) -> Permissions:
    editable = _house_id(principal) if is_head_of_family(principal) else None
    return Permissions(
        can_access_add_home=can_access_add_home(principal),
        can_view_all_houses=can_view_all_houses(is_authenticated),
        editable_house_id=editable,
    )


__all__ = [
    "is_head_of_family",
    "is_member",
    "can_edit_house",
    "can_edit_resident",
    "can_access_add_home",
    "can_view_all_houses",
    "can_perform_admin_actions",
    "get_user_role_display_name",
    "validate_user_house_association",
    "PERMISSION_ERRORS",
    "get_permission_error_message",
    "Permissions",
    "build_permissions",
]
