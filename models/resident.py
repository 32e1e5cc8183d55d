# models/resident.py

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from models.base import DocumentModel
from models.enums import Ownership, SortField, SortOrder
from models.timestamp import Timestamp


# -------------------------------------------------
# Nested household details
# -------------------------------------------------
class EmergencyContact(BaseModel):
    name: str = ""
    phone: str = ""


class HeadOfFamily(DocumentModel):
    name: str
    phone: str = ""
    occupation: str = ""
    blood_group: str = Field("", alias="bloodGroup")
    emergency_contact: EmergencyContact = Field(
        default_factory=EmergencyContact, alias="emergencyContact"
    )


class FamilyMember(DocumentModel):
    name: str
    relationship: str = ""
    phone: str = ""
    occupation: str = ""
    blood_group: str = Field("", alias="bloodGroup")


# -------------------------------------------------
# Shared fields (what a head of family fills in)
# -------------------------------------------------
class ResidentBase(DocumentModel):
    house_name: str = Field(alias="houseName")
    house_number: str = Field(alias="houseNumber")
    street: str = ""
    ownership: Ownership = Ownership.owned
    floor_type: str = Field("", alias="floorType")
    total_family_members: str = Field("1", alias="totalFamilyMembers")
    head_of_family: HeadOfFamily = Field(alias="headOfFamily")
    family_members: List[FamilyMember] = Field(default_factory=list, alias="familyMembers")
    permanent_address: str = Field("", alias="permanentAddress")
    owner_address: str = Field("", alias="ownerAddress")


# -------------------------------------------------
# Create: houseId / createdBy / timestamp are stamped server-side
# -------------------------------------------------
class ResidentCreate(ResidentBase):
    pass


# -------------------------------------------------
# Update (PATCH)
# -------------------------------------------------
class ResidentUpdate(DocumentModel):
    house_name: Optional[str] = Field(None, alias="houseName")
    house_number: Optional[str] = Field(None, alias="houseNumber")
    street: Optional[str] = None
    ownership: Optional[Ownership] = None
    floor_type: Optional[str] = Field(None, alias="floorType")
    total_family_members: Optional[str] = Field(None, alias="totalFamilyMembers")
    head_of_family: Optional[HeadOfFamily] = Field(None, alias="headOfFamily")
    family_members: Optional[List[FamilyMember]] = Field(None, alias="familyMembers")
    permanent_address: Optional[str] = Field(None, alias="permanentAddress")
    owner_address: Optional[str] = Field(None, alias="ownerAddress")

    # Omit a field to leave it unchanged; null would erase a required value
    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


# -------------------------------------------------
# Read (stored document → API response)
# -------------------------------------------------
class ResidentRead(ResidentBase):
    id: str
    house_id: str = Field(alias="houseId")
    created_by: str = Field(alias="createdBy")
    updated_by: str = Field(alias="updatedBy")
    timestamp: Optional[Timestamp] = None


# -------------------------------------------------
# Directory filtering
# -------------------------------------------------
class FilterOptions(BaseModel):
    search_term: str = ""
    sort_by: SortField = SortField.house_number
    sort_order: SortOrder = SortOrder.asc
