# models/user.py

from typing import Optional

from pydantic import Field

from models.base import DocumentModel
from models.enums import Role
from models.timestamp import Timestamp


# ===============================================================
# users/{id}
# ===============================================================
class User(DocumentModel):
    """
    A registered principal. Bound to one verified phone number and at most
    one house.
    """
    id: str
    phone_number: str = Field(alias="phoneNumber")
    role: Role
    house_id: str = Field(alias="houseId")
    created_at: Optional[Timestamp] = Field(None, alias="createdAt")
    last_login_at: Optional[Timestamp] = Field(None, alias="lastLoginAt")
