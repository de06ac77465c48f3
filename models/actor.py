# models/actor.py

from typing import Annotated, Dict, Literal, Optional, Set, Union
from datetime import datetime
from pydantic import BaseModel, Field

from models.enums import AccountType, PermissionEntity, PermissionAction


# ===============================================================
# ACTORS: the identities whose access is evaluated
# ===============================================================

class AdminActor(BaseModel):
    """
    Snapshot of an `admins` row.

    super_admin rows carry empty assigned_projects / permissions;
    neither field is consulted for that tier.
    """
    kind: Literal["admin"] = "admin"
    id: str
    account_type: AccountType
    assigned_projects: Set[str] = Field(default_factory=set)

    # Only meaningful for account_type = custom
    permissions: Dict[PermissionEntity, Set[PermissionAction]] = Field(default_factory=dict)

    is_active: bool = True

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    model_config = {"frozen": True}


class GuardActor(BaseModel):
    """Snapshot of a `guards` row. Guards are scoped to exactly one project."""
    kind: Literal["guard"] = "guard"
    id: str
    project_id: str
    is_active: bool = True

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    model_config = {"frozen": True}


Actor = Annotated[Union[AdminActor, GuardActor], Field(discriminator="kind")]


# ===============================================================
# API RESPONSES
# ===============================================================

class ActorProfile(BaseModel):
    """Returned by /auth/me."""
    actor: Actor
    is_super_admin: bool = False
    effective_permissions: Dict[PermissionEntity, Set[PermissionAction]] = Field(default_factory=dict)
    checked_at: datetime
