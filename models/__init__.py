# -------------------------
# Enums
# -------------------------
from .enums import (
    AccountType,
    PermissionEntity,
    PermissionAction,
    RequestStatus,
)

# -------------------------
# Actors
# -------------------------
from .actor import (
    Actor,
    AdminActor,
    GuardActor,
    ActorProfile,
)

# -------------------------
# Admin Accounts
# -------------------------
from .admin import (
    AccountAssignment,
    AdminCreate,
    AdminRead,
    AdminUpdate,
)

# -------------------------
# Pending Admin Requests
# -------------------------
from .pending_admin import (
    AdminSignupCreate,
    ApprovalRequest,
    PendingAdminRequest,
    RejectionRequest,
)

# -------------------------
# Guards / Projects
# -------------------------
from .guard import GuardCreate, GuardRead, GuardUpdate
from .project import ProjectRead

# -------------------------
# Auth Models
# -------------------------
from .auth import LoginRequest, TokenResponse

__all__ = [
    # enums
    "AccountType",
    "PermissionEntity",
    "PermissionAction",
    "RequestStatus",

    # actors
    "Actor",
    "AdminActor",
    "GuardActor",
    "ActorProfile",

    # admins
    "AccountAssignment",
    "AdminCreate",
    "AdminRead",
    "AdminUpdate",

    # pending requests
    "AdminSignupCreate",
    "ApprovalRequest",
    "PendingAdminRequest",
    "RejectionRequest",

    # guards / projects
    "GuardCreate",
    "GuardRead",
    "GuardUpdate",
    "ProjectRead",

    # auth
    "LoginRequest",
    "TokenResponse",
]
