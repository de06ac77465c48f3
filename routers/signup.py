# routers/signup.py

from fastapi import APIRouter, HTTPException, Request

from core.admin_requests import create_pending_request
from core.config import settings
from core.errors import handle_supabase_error
from core.logging_config import logger
from core.rate_limiter import require_rate_limit
from core.supabase_client import get_supabase_client
from models.pending_admin import AdminSignupCreate


router = APIRouter(
    prefix="/signup",
    tags=["Signup"],
)


# -----------------------------------------------------
# PUBLIC: Admin self-registration
# Creates the auth user and a pending request; the account
# has zero permissions until a super admin approves it.
# -----------------------------------------------------
@router.post("/", status_code=201, summary="Public: Request an admin account")
def request_admin_account(payload: AdminSignupCreate, request: Request):
    require_rate_limit(
        request,
        max_requests=settings.SIGNUP_RATE_LIMIT_MAX,
        window_seconds=settings.SIGNUP_RATE_LIMIT_WINDOW_SECONDS,
    )

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        auth_resp = client.auth.sign_up({
            "email": payload.email,
            "password": payload.password,
            "options": {
                "data": {
                    "first_name": payload.first_name,
                    "last_name": payload.last_name,
                },
            },
        })
    except Exception as e:
        logger.warning(f"Signup failed for {payload.email}: {type(e).__name__}")
        raise HTTPException(400, "Unable to register with this email")

    if not auth_resp or not auth_resp.user:
        raise HTTPException(400, "Unable to register with this email")

    try:
        pending = create_pending_request(client, payload, auth_resp.user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create admin request")

    return {"status": "pending", "request_id": pending["id"]}
