# core/admin_requests.py

"""
Self-registered admin requests.

    pending ──approve──▶ approved   (admins row created, terminal)
       │
       └────reject────▶ rejected   (terminal)

Approval writes the admins row and flips the request status inside one
Postgres transaction (`approve_pending_admin`, see database/functions.sql).
Rejection is a single conditional update on status = 'pending'.
"""

from datetime import datetime
from typing import List, Optional

from supabase import Client

from core.admin_accounts import prepare_account_assignment
from core.errors import AlreadyResolved, RecordNotFound, extract_supabase_error
from core.logging_config import logger
from models.enums import RequestStatus
from models.pending_admin import AdminSignupCreate, ApprovalRequest, PendingAdminRequest


PENDING_ADMINS_TABLE = "pending_admins"
APPROVE_FUNCTION = "approve_pending_admin"


# -----------------------------------------------------
# State machine
# -----------------------------------------------------
def ensure_pending(request: PendingAdminRequest) -> None:
    if request.is_resolved:
        raise AlreadyResolved(request.id, request.status.value)


def build_admin_record(
    request: PendingAdminRequest,
    approval: ApprovalRequest,
    approved_by: str,
) -> dict:
    """
    The admins row an approval would create. Validation errors raise here,
    before anything is written.
    """
    ensure_pending(request)
    assignment = prepare_account_assignment(approval)

    return {
        "id": request.auth_uid,
        "first_name": request.first_name,
        "last_name": request.last_name,
        "email": request.email,
        "mobile": request.mobile,
        "national_id": request.national_id,
        **assignment,
        "is_active": True,
        "approved_by": approved_by,
    }


# -----------------------------------------------------
# Store access
# -----------------------------------------------------
def get_pending_request(client: Client, request_id: str) -> PendingAdminRequest:
    result = (
        client.table(PENDING_ADMINS_TABLE)
        .select("*")
        .eq("id", request_id)
        .limit(1)
        .execute()
    )
    if not result.data:
        raise RecordNotFound(PENDING_ADMINS_TABLE, request_id)
    return PendingAdminRequest.model_validate(result.data[0])


def list_pending_requests(client: Client, status: Optional[RequestStatus] = None) -> List[dict]:
    query = client.table(PENDING_ADMINS_TABLE).select("*")
    if status:
        query = query.eq("status", status.value)
    result = query.order("requested_at", desc=True).execute()
    return result.data or []


def create_pending_request(client: Client, payload: AdminSignupCreate, auth_uid: str) -> dict:
    request_data = {
        "first_name": payload.first_name,
        "last_name": payload.last_name,
        "email": payload.email,
        "mobile": payload.mobile,
        "national_id": payload.national_id,
        "auth_uid": auth_uid,
        "status": RequestStatus.pending.value,
        "requested_at": datetime.utcnow().isoformat(),
    }

    result = (
        client.table(PENDING_ADMINS_TABLE)
        .insert(request_data, returning="representation")
        .execute()
    )
    logger.info(f"Admin signup request created for {payload.email}")
    return result.data[0]


# -----------------------------------------------------
# Resolution
# -----------------------------------------------------
def approve_pending_admin(
    client: Client,
    request_id: str,
    approval: ApprovalRequest,
    approved_by: str,
) -> dict:
    request = get_pending_request(client, request_id)
    admin_record = build_admin_record(request, approval, approved_by)

    try:
        result = client.rpc(
            APPROVE_FUNCTION,
            {
                "p_request_id": request_id,
                "p_admin": admin_record,
                "p_approved_by": approved_by,
            },
        ).execute()
    except Exception as e:
        # Lost a race with another resolver; the transaction rolled back
        if "already resolved" in extract_supabase_error(e).lower():
            raise AlreadyResolved(request_id) from e
        raise

    admin = result.data[0] if isinstance(result.data, list) else result.data
    logger.info(
        f"Admin request {request_id} approved by {approved_by} "
        f"as {admin_record['account_type']}"
    )
    return admin


def reject_pending_admin(
    client: Client,
    request_id: str,
    rejected_by: str,
    reason: Optional[str] = "",
) -> dict:
    request = get_pending_request(client, request_id)
    ensure_pending(request)

    result = (
        client.table(PENDING_ADMINS_TABLE)
        .update({
            "status": RequestStatus.rejected.value,
            "resolved_by": rejected_by,
            "resolved_at": datetime.utcnow().isoformat(),
            "rejection_reason": reason or "",
        })
        .eq("id", request_id)
        .eq("status", RequestStatus.pending.value)
        .execute()
    )

    if not result.data:
        raise AlreadyResolved(request_id)

    logger.info(f"Admin request {request_id} rejected by {rejected_by}")
    return result.data[0]
