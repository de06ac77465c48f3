from datetime import datetime
from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Depends, Request

from core.config import settings
from core.errors import ProfileLoadError
from core.logging_config import logger
from core.permission_helpers import get_effective_permissions, is_super_admin
from core.profile_store import load_actor
from core.rate_limiter import require_rate_limit, get_rate_limit_identifier
from core.supabase_client import get_supabase_client
from dependencies.auth import get_current_actor
from models.actor import ActorProfile, AdminActor, GuardActor
from models.auth import LoginRequest, TokenResponse


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# LOGIN (SUPABASE AUTH)
# ============================================================
@router.post("/login", response_model=TokenResponse, summary="Authenticate admin or guard")
def login(payload: LoginRequest, request: Request):

    email = payload.email.strip().lower()

    identifier = get_rate_limit_identifier(request, key=email)
    require_rate_limit(
        request,
        max_requests=settings.LOGIN_RATE_LIMIT_MAX,
        window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS,
        identifier=identifier,
    )

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        response = client.auth.sign_in_with_password(
            {"email": email, "password": payload.password}
        )
    except Exception as e:
        # Don't expose details to the caller
        logger.warning(f"Login attempt failed for {email}: {type(e).__name__}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    session = response.session
    if not session or not session.access_token:
        raise HTTPException(401, "Invalid email or password")

    # Only provisioned, active profiles get a console session
    try:
        actor = load_actor(client, response.user.id)
    except ProfileLoadError as e:
        logger.error(str(e))
        raise HTTPException(500, "Stored profile is malformed")

    if actor is None:
        raise HTTPException(403, "Admin account not found or pending approval")
    if not actor.is_active:
        raise HTTPException(403, "Admin account is inactive")

    logger.info(f"{actor.kind} {actor.id} logged in")

    return TokenResponse(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        expires_in=getattr(session, "expires_in", None),
    )


# ============================================================
# CURRENT ACTOR
# ============================================================
@router.get("/me", response_model=ActorProfile, summary="Current actor and effective permissions")
def read_me(actor: Optional[Union[AdminActor, GuardActor]] = Depends(get_current_actor)):
    if actor is None:
        raise HTTPException(403, "Admin account not found")

    return ActorProfile(
        actor=actor,
        is_super_admin=is_super_admin(actor),
        effective_permissions=get_effective_permissions(actor),
        checked_at=datetime.utcnow(),
    )
