# routers/admins.py

from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException

from core.admin_accounts import (
    count_active_super_admins,
    create_admin_account,
    delete_admin_account,
    set_admin_active,
    update_admin_account,
)
from core.errors import (
    AccountValidationError,
    RecordNotFound,
    handle_supabase_error,
    validation_http_error,
)
from core.logging_config import logger
from core.permission_helpers import (
    has_permission,
    has_project_access,
    is_super_admin,
    require_super_admin,
    requires_permission,
)
from core.permissions import FULL_ACCESS_PERMISSIONS
from core.profile_store import get_admin_row, list_admin_rows
from core.supabase_client import get_supabase_client
from models.admin import AccountAssignment, AdminCreate, AdminRead, AdminUpdate
from models.enums import AccountType, PermissionAction, PermissionEntity


router = APIRouter(
    prefix="/admins",
    tags=["Admin Accounts"],
)


def _client():
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return client


# -----------------------------------------------------
# Helper: Secure account assignment
# -----------------------------------------------------
def _grant_pairs(assignment: AccountAssignment) -> List[Tuple[str, str]]:
    """Entity/action pairs the assignment would hand out (known literals only)."""
    if assignment.account_type == AccountType.full_access:
        return [
            (entity.value, action.value)
            for entity, actions in FULL_ACCESS_PERMISSIONS.items()
            for action in actions
        ]
    if assignment.account_type == AccountType.custom:
        # Unknown literals are reported later by validate_permission_grant
        return [
            (entity, action)
            for entity, actions in assignment.permissions.items()
            if entity in PermissionEntity.list()
            for action in actions
            if action in PermissionAction.list()
        ]
    return []


def validate_assignment_scope(actor, assignment: AccountAssignment):
    """
    Prevent privilege escalation through account management:
      • only a super_admin may assign the super_admin tier
      • other admins may only assign projects they can access themselves
      • and may only hand out permissions they hold themselves
    """
    if is_super_admin(actor):
        return

    if assignment.account_type == AccountType.super_admin:
        raise HTTPException(403, "Only a super_admin can assign the super_admin account type.")

    outside = [p for p in assignment.assigned_projects if not has_project_access(actor, p)]
    if outside:
        raise HTTPException(403, f"You do not have access to projects: {', '.join(outside)}")

    missing = sorted({
        f"{entity}:{action}"
        for entity, action in _grant_pairs(assignment)
        if not has_permission(actor, entity, action)
    })
    if missing:
        raise HTTPException(403, f"You cannot grant permissions you do not hold: {', '.join(missing)}")


def validate_update_scope(actor, admin_id: str, existing: dict, payload: AdminUpdate):
    """
    A non-super admin may only edit admins inside its own projects, never a
    super_admin, and never its own tier, projects or permissions.
    """
    if is_super_admin(actor):
        return

    if existing.get("account_type") == AccountType.super_admin.value:
        raise HTTPException(403, "Only a super_admin can edit a super_admin.")

    outside = [p for p in existing.get("assigned_projects") or [] if not has_project_access(actor, p)]
    if outside:
        raise HTTPException(403, f"You do not have access to projects: {', '.join(outside)}")

    if not payload.touches_assignment:
        return

    if admin_id == actor.id:
        raise HTTPException(403, "You cannot change your own account type, projects or permissions.")

    validate_assignment_scope(actor, AccountAssignment(
        account_type=payload.account_type or existing.get("account_type"),
        assigned_projects=(
            payload.assigned_projects
            if payload.assigned_projects is not None
            else existing.get("assigned_projects") or []
        ),
        permissions=(
            payload.permissions
            if payload.permissions is not None
            else existing.get("permissions") or {}
        ),
    ))


def _not_last_super_admin(client, admin_id: str, row: dict):
    if row.get("account_type") != AccountType.super_admin.value or row.get("is_active") is not True:
        return
    if count_active_super_admins(client, exclude_id=admin_id) == 0:
        raise HTTPException(400, "Cannot remove the last active super_admin.")


# -----------------------------------------------------
# LIST / GET
# permissions: admin_accounts:read
# -----------------------------------------------------
@router.get(
    "/",
    response_model=List[AdminRead],
    summary="List admin accounts",
    dependencies=[Depends(requires_permission("admin_accounts", "read"))],
)
def list_admins():
    try:
        return list_admin_rows(_client())
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch admin accounts")


@router.get(
    "/{admin_id}",
    response_model=AdminRead,
    summary="Get one admin account",
    dependencies=[Depends(requires_permission("admin_accounts", "read"))],
)
def get_admin(admin_id: str):
    try:
        row = get_admin_row(_client(), admin_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch admin account")
    if not row:
        raise HTTPException(404, "Admin not found")
    return row


# -----------------------------------------------------
# CREATE
# permissions: admin_accounts:create
# -----------------------------------------------------
@router.post("/", response_model=AdminRead, status_code=201, summary="Create an admin account")
def create_admin(
    payload: AdminCreate,
    actor=Depends(requires_permission("admin_accounts", "create")),
):
    validate_assignment_scope(actor, payload)

    try:
        return create_admin_account(_client(), payload, created_by=actor.id)
    except AccountValidationError as e:
        raise validation_http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create admin account")


# -----------------------------------------------------
# UPDATE
# permissions: admin_accounts:write
# -----------------------------------------------------
@router.patch("/{admin_id}", response_model=AdminRead, summary="Update an admin account")
def update_admin(
    admin_id: str,
    payload: AdminUpdate,
    actor=Depends(requires_permission("admin_accounts", "write")),
):
    client = _client()

    existing = get_admin_row(client, admin_id)
    if not existing:
        raise HTTPException(404, "Admin not found")

    validate_update_scope(actor, admin_id, existing, payload)

    if payload.account_type is not None and payload.account_type != AccountType.super_admin:
        _not_last_super_admin(client, admin_id, existing)

    try:
        return update_admin_account(client, admin_id, payload)
    except RecordNotFound:
        raise HTTPException(404, "Admin not found")
    except AccountValidationError as e:
        raise validation_http_error(e)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update admin account")


# -----------------------------------------------------
# ACTIVATE / DEACTIVATE: super_admin only
# -----------------------------------------------------
@router.post("/{admin_id}/toggle-active", response_model=AdminRead, summary="Activate or deactivate an admin")
def toggle_admin_active(admin_id: str, actor=Depends(require_super_admin)):
    client = _client()

    row = get_admin_row(client, admin_id)
    if not row:
        raise HTTPException(404, "Admin not found")

    if admin_id == actor.id:
        raise HTTPException(400, "You cannot deactivate your own account.")

    currently_active = row.get("is_active") is True
    if currently_active:
        _not_last_super_admin(client, admin_id, row)

    try:
        updated = set_admin_active(client, admin_id, not currently_active)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update admin status")

    logger.info(f"Admin {admin_id} active={not currently_active} (by {actor.id})")
    return updated


# -----------------------------------------------------
# DELETE
# permissions: admin_accounts:delete
# -----------------------------------------------------
@router.delete("/{admin_id}", summary="Delete an admin account")
def delete_admin(
    admin_id: str,
    actor=Depends(requires_permission("admin_accounts", "delete")),
):
    client = _client()

    if admin_id == actor.id:
        raise HTTPException(400, "You cannot delete your own account.")

    row = get_admin_row(client, admin_id)
    if not row:
        raise HTTPException(404, "Admin not found")

    if row.get("account_type") == AccountType.super_admin.value and not is_super_admin(actor):
        raise HTTPException(403, "Only a super_admin can delete a super_admin.")

    _not_last_super_admin(client, admin_id, row)

    try:
        delete_admin_account(client, admin_id)
    except RecordNotFound:
        raise HTTPException(404, "Admin not found")
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete admin account")

    return {"status": "deleted", "id": admin_id}
