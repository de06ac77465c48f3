# core/admin_accounts.py

import secrets
import string
from typing import Dict, List, Optional, Set

from supabase import Client

from core.errors import NoAssignedProjects, RecordNotFound, extract_supabase_error
from core.logging_config import logger
from core.permission_helpers import validate_permission_grant
from core.profile_store import ADMINS_TABLE, get_admin_row, list_admin_rows
from models.admin import AccountAssignment, AdminCreate, AdminUpdate
from models.enums import AccountType, PermissionAction, PermissionEntity


# -----------------------------------------------------
# Grant serialization (enum sets → JSON-friendly lists)
# -----------------------------------------------------
def serialize_grant(grant: Dict[PermissionEntity, Set[PermissionAction]]) -> Dict[str, List[str]]:
    return {
        entity.value: [a.value for a in PermissionAction if a in actions]
        for entity, actions in grant.items()
    }


# -----------------------------------------------------
# Account assignment validation
# -----------------------------------------------------
def prepare_account_assignment(assignment: AccountAssignment) -> dict:
    """
    Validate what an admin is about to be given and return the columns
    to store. Raises AccountValidationError subclasses; nothing is
    written before this passes.

    super_admin rows keep empty projects/permissions (never consulted).
    full_access rows store no grant (the fixed table applies).
    """
    if assignment.account_type == AccountType.super_admin:
        return {
            "account_type": AccountType.super_admin.value,
            "assigned_projects": [],
            "permissions": {},
        }

    if not assignment.assigned_projects:
        raise NoAssignedProjects()

    permissions = {}
    if assignment.account_type == AccountType.custom:
        permissions = serialize_grant(validate_permission_grant(assignment.permissions))

    return {
        "account_type": assignment.account_type.value,
        "assigned_projects": list(assignment.assigned_projects),
        "permissions": permissions,
    }


def remove_orphaned_auth_user(client: Client, auth_uid: str) -> None:
    """
    Delete the auth user left behind by a failed profile insert so the email
    can be reused. A cleanup failure is logged; the caller re-raises the
    insert error.
    """
    try:
        client.auth.admin.delete_user(auth_uid)
    except Exception as e:
        logger.error(f"Failed to remove orphaned auth user {auth_uid}: {extract_supabase_error(e)}")


def _temporary_password(length: int = 16) -> str:
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return "".join(secrets.choice(alphabet) for _ in range(length))


# -----------------------------------------------------
# Direct creation by a super admin
# -----------------------------------------------------
def create_admin_account(client: Client, payload: AdminCreate, created_by: str) -> dict:
    assignment = prepare_account_assignment(payload)

    auth_resp = client.auth.admin.create_user({
        "email": payload.email,
        "password": _temporary_password(),
        "email_confirm": True,
        "user_metadata": {
            "first_name": payload.first_name,
            "last_name": payload.last_name,
        },
    })
    auth_uid = auth_resp.user.id

    record = {
        "id": auth_uid,
        "first_name": payload.first_name,
        "last_name": payload.last_name,
        "email": payload.email,
        "mobile": payload.mobile,
        "national_id": payload.national_id,
        **assignment,
        "is_active": True,
        "approved_by": created_by,
    }

    try:
        result = (
            client.table(ADMINS_TABLE)
            .insert(record, returning="representation")
            .execute()
        )
    except Exception:
        remove_orphaned_auth_user(client, auth_uid)
        raise

    # Password setup link instead of sharing the temporary password
    try:
        client.auth.reset_password_for_email(payload.email)
    except Exception as e:
        logger.warning(f"Password setup email failed for {payload.email}: {extract_supabase_error(e)}")

    logger.info(f"Admin {auth_uid} created by {created_by} as {assignment['account_type']}")
    return result.data[0]


# -----------------------------------------------------
# Updates
# -----------------------------------------------------
def build_admin_update(existing: dict, payload: AdminUpdate) -> dict:
    """
    Merge a partial update into the stored assignment and re-validate it
    whenever tier, projects or grant change.
    """
    update = {
        k: v.strip() if isinstance(v, str) else v
        for k, v in payload.model_dump(
            include={"first_name", "last_name", "mobile", "national_id"},
            exclude_none=True,
        ).items()
    }

    if payload.touches_assignment:
        merged = AccountAssignment(
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
        )
        update.update(prepare_account_assignment(merged))

    return update


def update_admin_account(client: Client, admin_id: str, payload: AdminUpdate) -> dict:
    existing = get_admin_row(client, admin_id)
    if not existing:
        raise RecordNotFound(ADMINS_TABLE, admin_id)

    update = build_admin_update(existing, payload)
    if not update:
        return existing

    result = (
        client.table(ADMINS_TABLE)
        .update(update)
        .eq("id", admin_id)
        .execute()
    )
    return result.data[0] if result.data else {**existing, **update}


def set_admin_active(client: Client, admin_id: str, is_active: bool) -> dict:
    existing = get_admin_row(client, admin_id)
    if not existing:
        raise RecordNotFound(ADMINS_TABLE, admin_id)

    result = (
        client.table(ADMINS_TABLE)
        .update({"is_active": is_active})
        .eq("id", admin_id)
        .execute()
    )
    logger.info(f"Admin {admin_id} {'activated' if is_active else 'deactivated'}")
    return result.data[0] if result.data else {**existing, "is_active": is_active}


# -----------------------------------------------------
# Super admin safety
# -----------------------------------------------------
def count_active_super_admins(client: Client, exclude_id: Optional[str] = None) -> int:
    return sum(
        1
        for row in list_admin_rows(client)
        if row.get("account_type") == AccountType.super_admin.value
        and row.get("is_active") is True
        and row.get("id") != exclude_id
    )


def delete_admin_account(client: Client, admin_id: str) -> None:
    existing = get_admin_row(client, admin_id)
    if not existing:
        raise RecordNotFound(ADMINS_TABLE, admin_id)

    client.table(ADMINS_TABLE).delete().eq("id", admin_id).execute()
    logger.info(f"Admin {admin_id} deleted")
