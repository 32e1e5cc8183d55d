from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from core.errors import handle_store_error
from core.logging_config import logger
from core.session import Session
from core.store import DirectoryStore
from core.supabase_client import get_supabase_client
from models.auth import Identity


# auto_error=False: anonymous callers still get a (empty) Session, and the
# guard dependencies decide whether that is enough for the route
bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# IDENTITY (Supabase Auth: validates the phone-verified JWT)
# ============================================================
def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:

    if not credentials:
        return None

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        auth_resp = client.auth.get_user(credentials.credentials)
    except Exception as e:
        logger.warning(f"Token validation failed: {type(e).__name__}")
        raise unauthorized

    if not auth_resp or not auth_resp.user:
        raise unauthorized

    auth_user = auth_resp.user
    return Identity(uid=auth_user.id, phone=getattr(auth_user, "phone", None) or None)


# ============================================================
# STORE (rule-enforcing, bound to the caller)
# ============================================================
def get_store(identity: Optional[Identity] = Depends(get_identity)) -> DirectoryStore:
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    return DirectoryStore(client, identity.uid if identity else None)


# ============================================================
# SESSION (identity + users record + derived permissions)
# ============================================================
def get_session(
    identity: Optional[Identity] = Depends(get_identity),
    store: DirectoryStore = Depends(get_store),
) -> Session:
    if identity is None:
        return Session()

    try:
        return Session.open(identity, store, record_login=False)
    except Exception as e:
        raise handle_store_error(e, "Failed to load session") from e
