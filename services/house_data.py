# services/house_data.py

"""
Directory assembly: houses joined with their resident records, annotated
with what the current session may do to each.
"""

from typing import Dict, List, Optional

from fastapi import HTTPException
from pydantic import ValidationError

from core.logging_config import logger
from core.permissions import can_view_all_houses
from core.session import Session
from core.store import DirectoryStore
from core.validation import validate_house_number, validate_user_house_association
from models.enums import Collection, SortField, SortOrder
from models.house import House, HouseDataResult, HouseWithResidents
from models.resident import FilterOptions, ResidentRead


HOUSE_NOT_ACCESSIBLE = "Your house information is not accessible. Please contact support."


# ============================================================
# Helpers
# ============================================================
def parse_houses(rows: List[dict]) -> List[House]:
    houses = []
    for row in rows:
        if not validate_house_number(row.get("houseNumber")):
            logger.warning(f"Invalid house number format: {row.get('houseNumber')!r} (house {row.get('id')})")
            continue
        try:
            houses.append(House.model_validate(row))
        except ValidationError:
            logger.warning(f"Skipping malformed house {row.get('id')}")
    return houses


def parse_residents(rows: List[dict]) -> List[ResidentRead]:
    residents = []
    for row in rows:
        try:
            residents.append(ResidentRead.model_validate(row))
        except ValidationError:
            logger.warning(f"Skipping malformed resident {row.get('id')}")
    return residents


def matches_search(resident: ResidentRead, search_term: str) -> bool:
    """Case-insensitive match on names / numbers; phone numbers match as typed."""
    term = search_term.lower()
    head = resident.head_of_family

    if (
        term in resident.house_name.lower()
        or term in resident.house_number.lower()
        or term in resident.street.lower()
        or term in head.name.lower()
        or search_term in head.phone
    ):
        return True

    return any(
        term in member.name.lower() or search_term in member.phone
        for member in resident.family_members
    )


def _sort_key(resident: ResidentRead, sort_by: SortField):
    if sort_by == SortField.timestamp:
        ts = resident.timestamp
        return (ts.seconds, ts.nanoseconds) if ts else (0, 0)
    return {
        SortField.house_name: resident.house_name,
        SortField.house_number: resident.house_number,
        SortField.street: resident.street,
    }[sort_by].lower()


def filter_and_sort_residents(residents: List[ResidentRead], filters: FilterOptions) -> List[ResidentRead]:
    if filters.search_term:
        residents = [r for r in residents if matches_search(r, filters.search_term)]

    return sorted(
        residents,
        key=lambda r: _sort_key(r, filters.sort_by),
        reverse=filters.sort_order == SortOrder.desc,
    )


def _annotate(session: Session, house: House, residents: List[ResidentRead]) -> HouseWithResidents:
    user_house_id = session.user.house_id if session.user else None
    return HouseWithResidents(
        house=house,
        residents=residents,
        can_edit=session.permissions.can_edit_house(house.id),
        is_user_house=user_house_id == house.id,
    )


# ============================================================
# Whole directory
# ============================================================
def load_house_data(session: Session, store: DirectoryStore, filters: FilterOptions) -> HouseDataResult:
    houses = parse_houses(store.list(Collection.houses, order_by="houseNumber"))
    if not houses:
        return HouseDataResult()

    residents = filter_and_sort_residents(
        parse_residents(store.list(Collection.residents)), filters
    )

    by_house: Dict[str, List[ResidentRead]] = {}
    for resident in residents:
        by_house.setdefault(resident.house_id, []).append(resident)

    result = HouseDataResult(all_residents=residents)
    view_all = can_view_all_houses(session.is_authenticated)

    for house in houses:
        if not view_all and not validate_user_house_association(session.user, house):
            continue

        entry = _annotate(session, house, by_house.get(house.id, []))
        result.houses.append(entry)
        if entry.is_user_house:
            result.user_house = entry

    result.error = check_user_house(session, result.user_house)
    return result


def check_user_house(session: Session, user_house: Optional[HouseWithResidents]) -> Optional[str]:
    """
    Detect (not repair) a users.houseId that does not point at a house
    listing the user. Returns the soft error to surface, if any.
    """
    user = session.user
    if not user or not user.house_id:
        return None

    if user_house is None:
        logger.warning(f"User {user.id}: house {user.house_id} not found or not accessible")
        return HOUSE_NOT_ACCESSIBLE

    if not validate_user_house_association(user, user_house.house):
        logger.warning(
            f"User {user.id}: house {user.house_id} lists neither as head nor member"
        )
        return HOUSE_NOT_ACCESSIBLE

    return None


# ============================================================
# Single house
# ============================================================
def load_specific_house(session: Session, store: DirectoryStore, house_id: str) -> HouseWithResidents:
    row = store.get(Collection.houses, house_id)
    if not row:
        raise HTTPException(404, "House not found")

    if not validate_house_number(row.get("houseNumber")):
        raise HTTPException(422, "Invalid house data")

    house = House.model_validate(row)

    if not can_view_all_houses(session.is_authenticated) and not validate_user_house_association(session.user, house):
        raise HTTPException(403, "You don't have permission to access this house")

    # Newest first; timestamps are stored as objects, so order here
    residents = filter_and_sort_residents(
        parse_residents(store.list(Collection.residents, filters={"houseId": house_id})),
        FilterOptions(sort_by=SortField.timestamp, sort_order=SortOrder.desc),
    )

    return _annotate(session, house, residents)
