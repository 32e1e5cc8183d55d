# models/house.py

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.base import DocumentModel
from models.resident import ResidentRead
from models.timestamp import Timestamp


# -------------------------------------------------
# houses/{id}
# -------------------------------------------------
class House(DocumentModel):
    id: str
    house_number: str = Field(alias="houseNumber")
    head_of_family_id: str = Field(alias="headOfFamilyId")
    member_ids: List[str] = Field(default_factory=list, alias="memberIds")
    created_at: Optional[Timestamp] = Field(None, alias="createdAt")
    updated_at: Optional[Timestamp] = Field(None, alias="updatedAt")


# -------------------------------------------------
# Registration payloads
# -------------------------------------------------
class CreateHouseRequest(BaseModel):
    house_number: str = Field(alias="houseNumber")

    model_config = ConfigDict(populate_by_name=True)


class JoinHouseRequest(BaseModel):
    house_id: str = Field(alias="houseId")

    model_config = ConfigDict(populate_by_name=True)


# -------------------------------------------------
# Directory views
# -------------------------------------------------
class HouseWithResidents(DocumentModel):
    house: House
    residents: List[ResidentRead] = Field(default_factory=list)
    can_edit: bool = Field(False, alias="canEdit")
    is_user_house: bool = Field(False, alias="isUserHouse")


class HouseDataResult(DocumentModel):
    """
    Directory listing. `error` carries a soft, non-fatal message
    (e.g. the caller's own house could not be matched).
    """
    houses: List[HouseWithResidents] = Field(default_factory=list)
    all_residents: List[ResidentRead] = Field(default_factory=list, alias="allResidents")
    user_house: Optional[HouseWithResidents] = Field(None, alias="userHouse")
    error: Optional[str] = None
