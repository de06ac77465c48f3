# routers/permissions.py

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException

from core.admin_accounts import serialize_grant
from core.errors import PermissionValidationError, validation_http_error
from core.permission_helpers import requires_permission, validate_permission_grant
from core.permissions import DEFAULT_PERMISSIONS
from models.enums import AccountType, PermissionAction, PermissionEntity


router = APIRouter(
    prefix="/permissions",
    tags=["Permissions"],
)


# -----------------------------------------------------
# Catalog for the console's grant editor
# -----------------------------------------------------
@router.get(
    "/catalog",
    summary="Entities, actions and default grant tables",
    dependencies=[Depends(requires_permission("admin_accounts", "read"))],
)
def permission_catalog():
    return {
        "entities": PermissionEntity.list(),
        "actions": PermissionAction.list(),
        "account_types": AccountType.list(),
        "defaults": {
            account_type.value: serialize_grant(table)
            for account_type, table in DEFAULT_PERMISSIONS.items()
        },
    }


# -----------------------------------------------------
# Dry-run validation of a custom grant
# -----------------------------------------------------
@router.post(
    "/validate",
    summary="Validate a custom permission grant",
    dependencies=[Depends(requires_permission("admin_accounts", "read"))],
)
def validate_grant(payload: Dict[str, List[str]]):
    try:
        grant = validate_permission_grant(payload)
    except PermissionValidationError as e:
        raise validation_http_error(e)
    return {"valid": True, "permissions": serialize_grant(grant)}
