# routers/residents.py

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from core.errors import handle_store_error
from core.logging_config import logger
from core.permission_helpers import (
    requires_add_home_access,
    requires_authenticated,
    requires_role,
    require_house_edit,
)
from core.session import Session
from core.store import DirectoryStore
from core.utils import sanitize_document
from dependencies.auth import get_store
from models.enums import Collection, Role, SortField, SortOrder
from models.resident import FilterOptions, ResidentCreate, ResidentRead, ResidentUpdate
from models.timestamp import Timestamp
from services.house_data import filter_and_sort_residents, parse_residents


router = APIRouter(
    prefix="/residents",
    tags=["Residents"],
)


# -----------------------------------------------------
# Helper: fetch one resident or 404
# -----------------------------------------------------
def get_resident_or_404(store: DirectoryStore, resident_id: str) -> dict:
    row = store.get(Collection.residents, resident_id)
    if not row:
        raise HTTPException(404, "Resident record not found")
    return row


# ============================================================
# LIST RESIDENTS
# ============================================================
@router.get("", response_model=List[ResidentRead], summary="List resident records")
def list_residents(
    search: str = Query("", max_length=100),
    sort_by: SortField = SortField.timestamp,
    sort_order: SortOrder = SortOrder.desc,
    session: Session = Depends(requires_authenticated),
    store: DirectoryStore = Depends(get_store),
):
    filters = FilterOptions(search_term=search.strip(), sort_by=sort_by, sort_order=sort_order)

    try:
        residents = parse_residents(store.list(Collection.residents))
        return filter_and_sort_residents(residents, filters)
    except Exception as e:
        raise handle_store_error(e, "Failed to fetch residents") from e


# ============================================================
# GET RESIDENT
# ============================================================
@router.get("/{resident_id}", response_model=ResidentRead, summary="Get a resident record")
def get_resident(
    resident_id: str,
    session: Session = Depends(requires_authenticated),
    store: DirectoryStore = Depends(get_store),
):
    try:
        row = get_resident_or_404(store, resident_id)
    except Exception as e:
        raise handle_store_error(e, "Failed to fetch resident") from e

    try:
        return ResidentRead.model_validate(row)
    except ValidationError:
        logger.warning(f"Malformed resident record {resident_id}")
        raise HTTPException(422, "Invalid resident data")


# ============================================================
# CREATE RESIDENT (head of family, own house only)
# ============================================================
@router.post("", response_model=ResidentRead, status_code=201, summary="Add home details")
def create_resident(
    payload: ResidentCreate,
    session: Session = Depends(requires_add_home_access),
    store: DirectoryStore = Depends(get_store),
):
    user = session.user
    require_house_edit(session, user.house_id)

    data = sanitize_document(payload.to_document())
    data.update({
        "houseId": user.house_id,
        "createdBy": user.id,
        "updatedBy": user.id,
        "timestamp": Timestamp.now().to_document(),
    })

    try:
        row = store.create(Collection.residents, data)
    except Exception as e:
        raise handle_store_error(e, "Failed to create resident") from e

    logger.info(f"Resident {row.get('id')} added to house {user.house_id} by {user.id}")
    return row


# ============================================================
# UPDATE RESIDENT
# ============================================================
@router.patch(
    "/{resident_id}",
    response_model=ResidentRead,
    summary="Update a resident record",
    dependencies=[Depends(requires_role(Role.head))],
)
def update_resident(
    resident_id: str,
    payload: ResidentUpdate,
    session: Session = Depends(requires_authenticated),
    store: DirectoryStore = Depends(get_store),
):
    try:
        existing = get_resident_or_404(store, resident_id)
        require_house_edit(session, existing.get("houseId"))

        changes = sanitize_document(payload.to_document(exclude_unset=True, exclude_none=True))
        changes["updatedBy"] = session.user.id

        return store.update(Collection.residents, resident_id, changes)
    except Exception as e:
        raise handle_store_error(e, "Failed to update resident") from e


# ============================================================
# DELETE RESIDENT
# ============================================================
@router.delete(
    "/{resident_id}",
    summary="Delete a resident record",
    dependencies=[Depends(requires_role(Role.head))],
)
def delete_resident(
    resident_id: str,
    session: Session = Depends(requires_authenticated),
    store: DirectoryStore = Depends(get_store),
):
    try:
        existing = get_resident_or_404(store, resident_id)
        require_house_edit(session, existing.get("houseId"))

        store.delete(Collection.residents, resident_id)
    except Exception as e:
        raise handle_store_error(e, "Failed to delete resident") from e

    logger.info(f"Resident {resident_id} deleted by {session.user.id}")
    return {"success": True, "deleted_id": resident_id}
