# core/profile_store.py

from typing import List, Optional, Union
from pydantic import ValidationError
from supabase import Client

from core.errors import ProfileLoadError
from models.actor import AdminActor, GuardActor


ADMINS_TABLE = "admins"
GUARDS_TABLE = "guards"


# -----------------------------------------------------
# Row → actor parsing (the one place literals are checked)
# -----------------------------------------------------
def parse_admin_row(row: dict) -> AdminActor:
    try:
        return AdminActor.model_validate({
            "id": row["id"],
            "account_type": row.get("account_type"),
            "assigned_projects": row.get("assigned_projects") or [],
            "permissions": row.get("permissions") or {},
            "is_active": row.get("is_active") is True,
            "first_name": row.get("first_name"),
            "last_name": row.get("last_name"),
            "email": row.get("email"),
        })
    except (KeyError, ValidationError) as e:
        raise ProfileLoadError(f"Malformed admin profile {row.get('id')}: {e}") from e


def parse_guard_row(row: dict) -> GuardActor:
    try:
        return GuardActor.model_validate({
            "id": row["id"],
            "project_id": row["project_id"],
            "is_active": row.get("is_active", True) is not False,
            "first_name": row.get("first_name"),
            "last_name": row.get("last_name"),
            "email": row.get("email"),
        })
    except (KeyError, ValidationError) as e:
        raise ProfileLoadError(f"Malformed guard profile {row.get('id')}: {e}") from e


def _fetch_one(client: Client, table: str, record_id: str) -> Optional[dict]:
    result = (
        client.table(table)
        .select("*")
        .eq("id", record_id)
        .limit(1)
        .execute()
    )
    rows = result.data or []
    return rows[0] if rows else None


# -----------------------------------------------------
# Actor lookup by auth uid
# -----------------------------------------------------
def load_actor(client: Client, auth_user_id: str) -> Optional[Union[AdminActor, GuardActor]]:
    """
    Admin profile first, then guard profile. None when neither exists.
    Never cached: a deactivation is visible on the next request.
    """
    row = _fetch_one(client, ADMINS_TABLE, auth_user_id)
    if row:
        return parse_admin_row(row)

    row = _fetch_one(client, GUARDS_TABLE, auth_user_id)
    if row:
        return parse_guard_row(row)

    return None


def list_admin_rows(client: Client) -> List[dict]:
    result = (
        client.table(ADMINS_TABLE)
        .select("*")
        .order("created_at", desc=True)
        .execute()
    )
    return result.data or []


def get_admin_row(client: Client, admin_id: str) -> Optional[dict]:
    return _fetch_one(client, ADMINS_TABLE, admin_id)


def get_guard_row(client: Client, guard_id: str) -> Optional[dict]:
    return _fetch_one(client, GUARDS_TABLE, guard_id)
