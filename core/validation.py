# core/validation.py

"""
Field and record validators.

Used before a value reaches the permission predicates or the store. All
validators are total: bad input returns False / "" / None, never raises.
"""

import re
from typing import Any, Optional

from core.utils import get_field
from models.enums import Role


HOUSE_NUMBER_PATTERN = re.compile(r"^[A-Za-z0-9\-]+$")

# +91XXXXXXXXXX, 91XXXXXXXXXX, XXXXXXXXXX (first digit 6-9)
PHONE_NUMBER_PATTERN = re.compile(r"^(\+91|91)?[6-9]\d{9}$", re.ASCII)

PHONE_COUNTRY_CODE = "91"


# ============================================================
# HOUSE NUMBER
# ============================================================
def validate_house_number(house_number: Any) -> bool:
    """House numbers are alphanumeric with hyphens, e.g. "96", "96A", "B-12"."""
    if not house_number or not isinstance(house_number, str):
        return False

    trimmed = house_number.strip()
    if not trimmed:
        return False

    return HOUSE_NUMBER_PATTERN.match(trimmed) is not None


def sanitize_house_number(house_number: Any) -> str:
    if not house_number or not isinstance(house_number, str):
        return ""

    return house_number.strip().upper()


# ============================================================
# PHONE NUMBER
# ============================================================
def _strip_phone(phone_number: str) -> str:
    # Keep ASCII digits, and a "+" only in leading position
    digits = re.sub(r"[^0-9]", "", phone_number)
    if phone_number.strip().startswith("+"):
        return "+" + digits
    return digits


def validate_phone_number(phone_number: Any) -> bool:
    if not phone_number or not isinstance(phone_number, str):
        return False

    return PHONE_NUMBER_PATTERN.match(_strip_phone(phone_number)) is not None


def sanitize_phone_number(phone_number: Any) -> str:
    """Reduce any accepted format to the bare 10-digit local number."""
    if not phone_number or not isinstance(phone_number, str):
        return ""

    cleaned = _strip_phone(phone_number)

    if cleaned.startswith("+" + PHONE_COUNTRY_CODE):
        cleaned = cleaned[len(PHONE_COUNTRY_CODE) + 1:]
    elif cleaned.startswith(PHONE_COUNTRY_CODE) and len(cleaned) == 12:
        cleaned = cleaned[len(PHONE_COUNTRY_CODE):]

    return cleaned


# ============================================================
# ROLE
# ============================================================
def validate_user_role(role: Any) -> Optional[Role]:
    """
    Narrow an arbitrary value to a Role.

    Returns the Role member for exactly "head" / "member", else None, so it
    can be used both as a guard and as a converter:

        if (role := validate_user_role(raw)) is None: ...
    """
    if isinstance(role, Role):
        return role
    if role == Role.head.value:
        return Role.head
    if role == Role.member.value:
        return Role.member
    return None


# ============================================================
# COMPOSITE RECORDS
# ============================================================
def validate_user_data(user: Any) -> bool:
    """A user needs id, phone number, role and house id, each valid."""
    if not user:
        return False

    user_id = get_field(user, "id")
    phone = get_field(user, "phone_number", "phoneNumber")
    role = get_field(user, "role")
    house_id = get_field(user, "house_id", "houseId")

    return bool(
        user_id
        and phone
        and role
        and house_id
        and validate_phone_number(phone)
        and validate_user_role(role) is not None
    )


def validate_house_data(house: Any) -> bool:
    if not house:
        return False

    house_id = get_field(house, "id")
    house_number = get_field(house, "house_number", "houseNumber")
    head_id = get_field(house, "head_of_family_id", "headOfFamilyId")

    return bool(
        house_id
        and house_number
        and head_id
        and validate_house_number(house_number)
    )


def validate_user_house_association(user: Any, house: Any) -> bool:
    """True when the user is the house's head or listed among its members."""
    if not user or not house:
        return False

    user_id = get_field(user, "id")
    if not user_id:
        return False

    if get_field(house, "head_of_family_id", "headOfFamilyId") == user_id:
        return True

    member_ids = get_field(house, "member_ids", "memberIds")
    if isinstance(member_ids, (list, tuple, set)) and user_id in member_ids:
        return True

    return False
