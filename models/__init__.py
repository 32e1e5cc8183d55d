# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    Ownership,
    Collection,
    Action,
    SortField,
    SortOrder,
)

# -------------------------
# Shared
# -------------------------
from .base import DocumentModel
from .timestamp import Timestamp

# -------------------------
# Directory Documents
# -------------------------
from .user import User

from .resident import (
    EmergencyContact,
    HeadOfFamily,
    FamilyMember,
    ResidentBase,
    ResidentCreate,
    ResidentRead,
    ResidentUpdate,
    FilterOptions,
)

from .house import (
    House,
    CreateHouseRequest,
    JoinHouseRequest,
    HouseWithResidents,
    HouseDataResult,
)

# -------------------------
# Auth / Session
# -------------------------
from .auth import Identity, PermissionsRead, SessionRead

__all__ = [
    # enums
    "Role",
    "Ownership",
    "Collection",
    "Action",
    "SortField",
    "SortOrder",

    # shared
    "DocumentModel",
    "Timestamp",

    # users
    "User",

    # residents
    "EmergencyContact",
    "HeadOfFamily",
    "FamilyMember",
    "ResidentBase",
    "ResidentCreate",
    "ResidentRead",
    "ResidentUpdate",
    "FilterOptions",

    # houses
    "House",
    "CreateHouseRequest",
    "JoinHouseRequest",
    "HouseWithResidents",
    "HouseDataResult",

    # auth
    "Identity",
    "PermissionsRead",
    "SessionRead",
]
