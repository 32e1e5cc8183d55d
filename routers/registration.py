# routers/registration.py

from typing import List
from fastapi import APIRouter, Depends

from core.errors import handle_store_error
from core.permission_helpers import requires_identity
from core.session import Session
from core.store import DirectoryStore
from dependencies.auth import get_store
from models.house import CreateHouseRequest, House, JoinHouseRequest
from services import registration


router = APIRouter(
    prefix="/register",
    tags=["Registration"],
)


# -----------------------------------------------------
# Houses available to join
# -----------------------------------------------------
@router.get("/houses", response_model=List[House], summary="Houses available to join")
def available_houses(
    session: Session = Depends(requires_identity),
    store: DirectoryStore = Depends(get_store),
):
    try:
        return registration.list_available_houses(store)
    except Exception as e:
        raise handle_store_error(e, "Failed to load available houses") from e


# -----------------------------------------------------
# Create a new house as head of family
# -----------------------------------------------------
@router.post("/house", response_model=House, status_code=201, summary="Register a new house")
def create_house(
    payload: CreateHouseRequest,
    session: Session = Depends(requires_identity),
    store: DirectoryStore = Depends(get_store),
):
    try:
        return registration.create_house(session, store, payload.house_number)
    except Exception as e:
        raise handle_store_error(e, "Failed to create house") from e


# -----------------------------------------------------
# Join an existing house as member
# -----------------------------------------------------
@router.post("/join", response_model=House, summary="Join an existing house")
def join_house(
    payload: JoinHouseRequest,
    session: Session = Depends(requires_identity),
    store: DirectoryStore = Depends(get_store),
):
    try:
        return registration.join_house(session, store, payload.house_id)
    except Exception as e:
        raise handle_store_error(e, "Failed to join house") from e
