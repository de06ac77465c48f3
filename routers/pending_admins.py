# routers/pending_admins.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.admin_requests import (
    approve_pending_admin,
    get_pending_request,
    list_pending_requests,
    reject_pending_admin,
)
from core.errors import (
    AccountValidationError,
    RecordNotFound,
    StateError,
    handle_supabase_error,
    state_http_error,
    validation_http_error,
)
from core.permission_helpers import requires_permission
from core.supabase_client import get_supabase_client
from models.enums import RequestStatus
from models.pending_admin import ApprovalRequest, PendingAdminRequest, RejectionRequest
from routers.admins import validate_assignment_scope


router = APIRouter(
    prefix="/admins/pending",
    tags=["Admin Requests"],
)


def _client():
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return client


# -----------------------------------------------------
# LIST
# permissions: admin_accounts:read
# -----------------------------------------------------
@router.get(
    "/",
    response_model=List[PendingAdminRequest],
    summary="List admin signup requests",
    dependencies=[Depends(requires_permission("admin_accounts", "read"))],
)
def list_requests(status: Optional[RequestStatus] = Query(None)):
    try:
        return list_pending_requests(_client(), status)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch admin requests")


@router.get(
    "/{request_id}",
    response_model=PendingAdminRequest,
    summary="Get one admin signup request",
    dependencies=[Depends(requires_permission("admin_accounts", "read"))],
)
def get_request(request_id: str):
    try:
        return get_pending_request(_client(), request_id)
    except RecordNotFound:
        raise HTTPException(404, "Admin request not found")


# -----------------------------------------------------
# APPROVE
# permissions: admin_accounts:create
# -----------------------------------------------------
@router.post(
    "/{request_id}/approve",
    summary="Approve a signup request and create the admin account",
)
def approve_request(
    request_id: str,
    payload: ApprovalRequest,
    actor=Depends(requires_permission("admin_accounts", "create")),
):
    validate_assignment_scope(actor, payload)

    try:
        admin = approve_pending_admin(_client(), request_id, payload, approved_by=actor.id)
    except RecordNotFound:
        raise HTTPException(404, "Admin request not found")
    except AccountValidationError as e:
        raise validation_http_error(e)
    except StateError as e:
        raise state_http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to approve admin request")

    return {"status": RequestStatus.approved.value, "admin": admin}


# -----------------------------------------------------
# REJECT
# permissions: admin_accounts:write
# -----------------------------------------------------
@router.post(
    "/{request_id}/reject",
    summary="Reject a signup request",
)
def reject_request(
    request_id: str,
    payload: RejectionRequest,
    actor=Depends(requires_permission("admin_accounts", "write")),
):
    try:
        request = reject_pending_admin(_client(), request_id, rejected_by=actor.id, reason=payload.reason)
    except RecordNotFound:
        raise HTTPException(404, "Admin request not found")
    except StateError as e:
        raise state_http_error(e)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to reject admin request")

    return {"status": RequestStatus.rejected.value, "request": request}
