from typing import Optional

from pydantic import BaseModel, Field

from models.base import DocumentModel
from models.user import User


# -----------------------------------------------------
# VERIFIED IDENTITY (Supabase Auth phone sign-in)
# -----------------------------------------------------
class Identity(BaseModel):
    uid: str                            # Supabase Auth UID
    phone: Optional[str] = None         # verified phone, E.164 as issued


# -----------------------------------------------------
# SESSION SNAPSHOT returned by /auth/me
# -----------------------------------------------------
class PermissionsRead(DocumentModel):
    can_access_add_home: bool = Field(alias="canAccessAddHome")
    can_view_all_houses: bool = Field(alias="canViewAllHouses")
    editable_house_id: Optional[str] = Field(None, alias="editableHouseId")


class SessionRead(DocumentModel):
    uid: Optional[str] = None
    user: Optional[User] = None
    is_authenticated: bool = Field(alias="isAuthenticated")
    needs_registration: bool = Field(alias="needsRegistration")
    role_display_name: str = Field(alias="roleDisplayName")
    permissions: PermissionsRead
