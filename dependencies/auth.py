from typing import Optional, Union
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.supabase_client import get_supabase_client
from core.profile_store import load_actor
from core.errors import ProfileLoadError
from core.logging_config import logger
from models.actor import AdminActor, GuardActor


bearer_scheme = HTTPBearer()


# ============================================================
# Authenticated identity (opaque id from Supabase Auth)
# ============================================================
class AuthIdentity(BaseModel):
    auth_user_id: str
    email: Optional[str] = None


# ============================================================
# AUTH DECODING (Supabase: validates JWT)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> AuthIdentity:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        auth_resp = client.auth.get_user(token)
    except Exception as e:
        logger.warning(f"Token validation failed: {type(e).__name__}")
        raise unauthorized

    if not auth_resp or not auth_resp.user:
        raise unauthorized

    return AuthIdentity(
        auth_user_id=auth_resp.user.id,
        email=auth_resp.user.email,
    )


# ============================================================
# CURRENT ACTOR (fresh profile read on every request)
# ============================================================
def get_current_actor(
    identity: AuthIdentity = Depends(get_current_user),
) -> Optional[Union[AdminActor, GuardActor]]:
    """
    Resolve the authenticated identity to its admin or guard profile.

    Returns None when no profile exists (pending signups included);
    every authorization check treats that as a denial.
    """
    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        return load_actor(client, identity.auth_user_id)
    except ProfileLoadError as e:
        logger.error(str(e))
        raise HTTPException(500, "Stored profile is malformed")
