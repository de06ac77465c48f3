# routers/guards.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from core.admin_accounts import remove_orphaned_auth_user
from core.errors import handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import requires_project_permission
from core.profile_store import GUARDS_TABLE, get_guard_row
from core.supabase_client import get_supabase_client
from models.guard import GuardCreate, GuardRead, GuardUpdate


router = APIRouter(
    prefix="/projects/{project_id}/guards",
    tags=["Guards"],
)


def _client():
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return client


def _get_project_guard(client, project_id: str, guard_id: str) -> dict:
    row = get_guard_row(client, guard_id)
    # A guard id from another project is indistinguishable from a missing one
    if not row or row.get("project_id") != project_id:
        raise HTTPException(404, "Guard not found")
    return row


# -----------------------------------------------------
# LIST
# permissions: guards:read + project access
# -----------------------------------------------------
@router.get(
    "/",
    response_model=List[GuardRead],
    summary="List guards of a project",
    dependencies=[Depends(requires_project_permission("guards", "read"))],
)
def list_guards(project_id: str):
    try:
        result = (
            _client().table(GUARDS_TABLE)
            .select("*")
            .eq("project_id", project_id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch guards")
    return result.data or []


# -----------------------------------------------------
# CREATE: guard login + profile scoped to this project
# permissions: guards:write + project access
# -----------------------------------------------------
@router.post("/", response_model=GuardRead, status_code=201, summary="Create a guard account")
def create_guard(
    project_id: str,
    payload: GuardCreate,
    actor=Depends(requires_project_permission("guards", "write")),
):
    client = _client()

    try:
        auth_resp = client.auth.admin.create_user({
            "email": payload.email,
            "password": payload.password,
            "email_confirm": True,
            "user_metadata": {"kind": "guard", "project_id": project_id},
        })
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create guard login", status_code=400)

    guard_id = auth_resp.user.id
    record = {
        "id": guard_id,
        "project_id": project_id,
        "first_name": payload.first_name,
        "last_name": payload.last_name,
        "email": payload.email,
        "mobile": payload.mobile,
        "national_id": payload.national_id,
        "is_active": True,
        "created_by": actor.id,
    }

    try:
        result = (
            client.table(GUARDS_TABLE)
            .insert(record, returning="representation")
            .execute()
        )
    except Exception as e:
        remove_orphaned_auth_user(client, guard_id)
        raise handle_supabase_error(e, "Failed to create guard")

    logger.info(f"Guard {guard_id} created in project {project_id} by {actor.id}")
    return result.data[0]


# -----------------------------------------------------
# UPDATE
# permissions: guards:write + project access
# -----------------------------------------------------
@router.patch(
    "/{guard_id}",
    response_model=GuardRead,
    summary="Update a guard profile",
    dependencies=[Depends(requires_project_permission("guards", "write"))],
)
def update_guard(project_id: str, guard_id: str, payload: GuardUpdate):
    client = _client()
    existing = _get_project_guard(client, project_id, guard_id)

    update = {k: v.strip() for k, v in payload.model_dump(exclude_none=True).items()}
    if not update:
        return existing

    try:
        result = (
            client.table(GUARDS_TABLE)
            .update(update)
            .eq("id", guard_id)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update guard")

    return result.data[0] if result.data else {**existing, **update}


# -----------------------------------------------------
# DELETE: removes the profile and the login entirely
# permissions: guards:delete + project access
# -----------------------------------------------------
@router.delete("/{guard_id}", summary="Delete a guard account")
def delete_guard(
    project_id: str,
    guard_id: str,
    actor=Depends(requires_project_permission("guards", "delete")),
):
    client = _client()
    _get_project_guard(client, project_id, guard_id)

    try:
        client.table(GUARDS_TABLE).delete().eq("id", guard_id).execute()
        client.auth.admin.delete_user(guard_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete guard")

    logger.info(f"Guard {guard_id} deleted from project {project_id} by {actor.id}")
    return {"status": "deleted", "id": guard_id}
