from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials

from core.errors import handle_store_error
from core.logging_config import logger
from core.permission_helpers import requires_identity
from core.session import Session
from core.store import DirectoryStore
from core.supabase_client import get_supabase_client
from dependencies.auth import bearer_scheme, get_store
from models.auth import SessionRead


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# CURRENT SESSION
# ============================================================
@router.get("/me", response_model=SessionRead, summary="Current session and permissions")
def read_me(session: Session = Depends(requires_identity)):
    """
    Returns the caller's users record (if registered) and the derived
    permission object. `needsRegistration` is true for a verified phone
    that has not created or joined a house yet.
    """
    return session.snapshot()


# ============================================================
# START SESSION (after phone verification on the client)
# ============================================================
@router.post("/session", response_model=SessionRead, summary="Start session, record login")
def start_session(
    session: Session = Depends(requires_identity),
    store: DirectoryStore = Depends(get_store),
):
    try:
        session = Session.open(session.identity, store, record_login=True)
    except Exception as e:
        raise handle_store_error(e, "Failed to start session") from e

    logger.info(
        f"Session started for {session.uid} "
        f"({'registered' if session.is_authenticated else 'needs registration'})"
    )
    return session.snapshot()


# ============================================================
# REFRESH (re-read users record, e.g. after registration)
# ============================================================
@router.post("/refresh", response_model=SessionRead, summary="Reload session from the directory")
def refresh_session(
    session: Session = Depends(requires_identity),
    store: DirectoryStore = Depends(get_store),
):
    try:
        session.refresh(store)
    except Exception as e:
        raise handle_store_error(e, "Failed to refresh session") from e
    return session.snapshot()


# ============================================================
# LOGOUT
# ============================================================
@router.post("/logout", summary="Sign out")
def logout(
    session: Session = Depends(requires_identity),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
):
    uid = session.uid
    client = get_supabase_client()

    try:
        client.auth.admin.sign_out(credentials.credentials)
    except Exception as e:
        # Token expiry still ends the session; the client drops its token
        logger.warning(f"Supabase sign-out failed for {uid}: {type(e).__name__}")

    session.clear()
    logger.info(f"Session cleared for {uid}")
    return {"success": True}
