# services/registration.py

"""
Household registration.

A verified identity without a users record registers once, either by
creating a new house (becoming its head) or by joining an existing one
(becoming a member). Each path is two store writes, house first, then the
users record. They are not atomic; see check_orphaned_house for how a
failed second write is resumed.
"""

from typing import List, Optional

from fastapi import HTTPException

from core.logging_config import logger
from core.session import Session
from core.store import DirectoryStore
from core.validation import (
    sanitize_house_number,
    sanitize_phone_number,
    validate_house_number,
    validate_phone_number,
)
from models.enums import Collection, Role
from models.house import House
from models.timestamp import Timestamp
from models.user import User
from services.house_data import parse_houses


INVALID_HOUSE_NUMBER = "House number must be alphanumeric (e.g., 96, 96A, B-12)"
DUPLICATE_HOUSE_NUMBER = "House number already exists. Please choose a different number."


# ============================================================
# Helpers
# ============================================================
def _ensure_unregistered(session: Session):
    if session.user is not None:
        raise HTTPException(409, "You are already registered with a house")


def _verified_phone(session: Session) -> str:
    phone = sanitize_phone_number(session.identity.phone)
    if not validate_phone_number(phone):
        raise HTTPException(400, "Phone number not available")
    return phone


def house_number_exists(store: DirectoryStore, house_number: str) -> bool:
    # Read-then-write: two concurrent registrations can both pass this check
    rows = store.list(Collection.houses, filters={"houseNumber": sanitize_house_number(house_number)})
    return bool(rows)


def check_orphaned_house(store: DirectoryStore, uid: str, house_number: str) -> Optional[dict]:
    """
    A house this caller created earlier whose users record was never written
    (the second registration write failed). Resuming it keeps a retry from
    tripping over the caller's own house number.
    """
    rows = store.list(Collection.houses, filters={"headOfFamilyId": uid})
    for row in rows:
        if row.get("houseNumber") == house_number and row.get("memberIds") == [uid]:
            return row
    return None


def _create_user_record(
    store: DirectoryStore,
    session: Session,
    phone: str,
    role: Role,
    house_id: str,
    now: Timestamp,
) -> User:
    user = User(
        id=session.uid,
        phone_number=phone,
        role=role,
        house_id=house_id,
        created_at=now,
        last_login_at=now,
    )

    try:
        store.create(Collection.users, user.to_document(), doc_id=session.uid)
    except Exception:
        logger.error(
            f"Registration incomplete: house {house_id} written but users/{session.uid} "
            f"was not; retrying registration resumes it"
        )
        raise

    session.refresh(store)
    return user


# ============================================================
# Join picker
# ============================================================
def list_available_houses(store: DirectoryStore) -> List[House]:
    houses = parse_houses(store.list(Collection.houses))
    return sorted(houses, key=lambda h: h.house_number)


# ============================================================
# Create a new house (caller becomes head)
# ============================================================
def create_house(session: Session, store: DirectoryStore, house_number: str) -> House:
    _ensure_unregistered(session)

    if not validate_house_number(house_number):
        raise HTTPException(400, INVALID_HOUSE_NUMBER)

    number = sanitize_house_number(house_number)
    phone = _verified_phone(session)
    uid = session.uid
    now = Timestamp.now()

    row = check_orphaned_house(store, uid, number)
    if row is not None:
        logger.info(f"Resuming registration of {uid} with orphaned house {row['id']}")
    else:
        if house_number_exists(store, number):
            raise HTTPException(409, DUPLICATE_HOUSE_NUMBER)

        row = store.create(
            Collection.houses,
            {
                "houseNumber": number,
                "headOfFamilyId": uid,
                "memberIds": [uid],
                "createdAt": now.to_document(),
                "updatedAt": now.to_document(),
            },
        )

    _create_user_record(store, session, phone, Role.head, row["id"], now)
    logger.info(f"User {uid} registered house {number} ({row['id']}) as head of family")

    return House.model_validate(row)


# ============================================================
# Join an existing house (caller becomes member)
# ============================================================
def join_house(session: Session, store: DirectoryStore, house_id: str) -> House:
    _ensure_unregistered(session)

    phone = _verified_phone(session)
    uid = session.uid
    now = Timestamp.now()

    row = store.get(Collection.houses, house_id)
    if not row:
        raise HTTPException(404, "House not found")

    members = list(row.get("memberIds") or [])
    if uid in members:
        # Listed by an earlier attempt whose users write failed
        logger.info(f"Resuming join of {uid} to house {house_id}")
    else:
        row = store.update(
            Collection.houses,
            house_id,
            {"memberIds": members + [uid], "updatedAt": now.to_document()},
        )

    _create_user_record(store, session, phone, Role.member, house_id, now)
    logger.info(f"User {uid} joined house {house_id} as member")

    return House.model_validate(row)
