# routers/houses.py

from fastapi import APIRouter, Depends, Query

from core.errors import handle_store_error
from core.permission_helpers import requires_authenticated
from core.session import Session
from core.store import DirectoryStore
from dependencies.auth import get_store
from models.enums import SortField, SortOrder
from models.house import HouseDataResult, HouseWithResidents
from models.resident import FilterOptions
from services.house_data import load_house_data, load_specific_house


router = APIRouter(
    prefix="/houses",
    tags=["Houses"]
)


# ============================================================
# DIRECTORY
# ============================================================
@router.get(
    "",
    response_model=HouseDataResult,
    summary="List houses with residents",
    description="""
    The community directory: every house with its resident records.

    **Permissions:** any registered, authenticated user.
    **Annotations:** `canEdit` marks the caller's own house when they are its
    head of family; `isUserHouse` marks the caller's house. `error` carries a
    soft message when the caller's own house cannot be matched.

    **Query Parameters:**
    - `search`: match on house name/number, street, names and phone numbers
    - `sort_by`: houseName | houseNumber | street | timestamp
    - `sort_order`: asc | desc
    """,
)
def list_houses(
    search: str = Query("", max_length=100),
    sort_by: SortField = SortField.house_number,
    sort_order: SortOrder = SortOrder.asc,
    session: Session = Depends(requires_authenticated),
    store: DirectoryStore = Depends(get_store),
):
    filters = FilterOptions(search_term=search.strip(), sort_by=sort_by, sort_order=sort_order)

    try:
        return load_house_data(session, store, filters)
    except Exception as e:
        raise handle_store_error(e, "Failed to fetch house data") from e


# ============================================================
# SINGLE HOUSE
# ============================================================
@router.get("/{house_id}", response_model=HouseWithResidents, summary="Get a house with residents")
def get_house(
    house_id: str,
    session: Session = Depends(requires_authenticated),
    store: DirectoryStore = Depends(get_store),
):
    try:
        return load_specific_house(session, store, house_id)
    except Exception as e:
        raise handle_store_error(e, "Failed to fetch house") from e
