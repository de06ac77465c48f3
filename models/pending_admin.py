# models/pending_admin.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from models.admin import ProfileFields, AccountAssignment
from models.enums import RequestStatus


# --------------------------------------------------------------------
# PUBLIC SIGNUP BODY: self-registration form
# --------------------------------------------------------------------
class AdminSignupCreate(ProfileFields):
    password: str = Field(..., min_length=6)


# --------------------------------------------------------------------
# SUPABASE ROW → API RESPONSE
# --------------------------------------------------------------------
class PendingAdminRequest(BaseModel):
    id: str

    first_name: str
    last_name: str
    email: str
    mobile: Optional[str] = None
    national_id: Optional[str] = None
    auth_uid: str

    status: RequestStatus = RequestStatus.pending
    requested_at: Optional[datetime] = None

    # System populated on resolution
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    admin_id: Optional[str] = None

    model_config = {"from_attributes": True}

    @property
    def is_resolved(self) -> bool:
        return self.status != RequestStatus.pending


# --------------------------------------------------------------------
# RESOLUTION PAYLOADS
# --------------------------------------------------------------------
class ApprovalRequest(AccountAssignment):
    """What the approving super admin assigns to the new account."""
    pass


class RejectionRequest(BaseModel):
    reason: Optional[str] = ""
