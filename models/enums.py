from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# USER ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """A principal is either the head of a house or a plain member."""

    head = "head"
    member = "member"


# -----------------------------------------------------
# OWNERSHIP
# -----------------------------------------------------
class Ownership(BaseStrEnum):
    owned = "owned"
    rented = "rented"


# -----------------------------------------------------
# DATA STORE COLLECTIONS
# -----------------------------------------------------
class Collection(BaseStrEnum):
    users = "users"
    houses = "houses"
    residents = "residents"


# -----------------------------------------------------
# STORE ACTIONS (evaluated by core.security_rules)
# -----------------------------------------------------
class Action(BaseStrEnum):
    read = "read"
    create = "create"
    update = "update"
    delete = "delete"


# -----------------------------------------------------
# DIRECTORY SORTING
# -----------------------------------------------------
class SortField(BaseStrEnum):
    """Resident fields the directory can be ordered by."""

    house_name = "houseName"
    house_number = "houseNumber"
    street = "street"
    timestamp = "timestamp"


class SortOrder(BaseStrEnum):
    asc = "asc"
    desc = "desc"
