# core/permission_helpers.py

"""
Route guards.

These decide whether a route runs at all and which message the caller sees.
They are a convenience layer: the store re-checks everything through
core.security_rules, so a guard that is too permissive is caught there.
"""

from fastapi import Depends, HTTPException

from core.permissions import (
    can_access_add_home,
    can_edit_house,
    get_permission_error_message,
)
from core.session import Session
from dependencies.auth import get_session
from models.enums import Role


REGISTRATION_REQUIRED = "Please complete registration to access this feature."


# -----------------------------------------------------
# Verified identity (registration may still be pending)
# -----------------------------------------------------
def requires_identity(session: Session = Depends(get_session)) -> Session:
    if session.identity is None:
        raise HTTPException(
            status_code=401,
            detail=get_permission_error_message(None, "authenticated"),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


# -----------------------------------------------------
# Registered, authenticated principal
# -----------------------------------------------------
def requires_authenticated(session: Session = Depends(requires_identity)) -> Session:
    if not session.is_authenticated:
        raise HTTPException(status_code=403, detail=REGISTRATION_REQUIRED)
    return session


# -----------------------------------------------------
# Role guard
# -----------------------------------------------------
def requires_role(role: Role):
    """
    Usage:
        @router.post("/", dependencies=[Depends(requires_role(Role.head))])
    """

    def checker(session: Session = Depends(requires_authenticated)) -> Session:
        if session.user.role != role:
            raise HTTPException(
                status_code=403,
                detail=get_permission_error_message(session.user, "admin"),
            )
        return session

    return checker


# -----------------------------------------------------
# Add-home (resident creation) guard
# -----------------------------------------------------
def requires_add_home_access(session: Session = Depends(requires_authenticated)) -> Session:
    if not can_access_add_home(session.user):
        raise HTTPException(
            status_code=403,
            detail=get_permission_error_message(session.user, "add_home"),
        )
    return session


# -----------------------------------------------------
# House edit guard (called inside handlers, once the house id is known)
# -----------------------------------------------------
def require_house_edit(session: Session, house_id: str):
    if not can_edit_house(session.user, house_id):
        raise HTTPException(
            status_code=403,
            detail=get_permission_error_message(session.user, "edit_house", house_id),
        )
