# models/admin.py

import re
from typing import Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from models.enums import AccountType


MOBILE_PATTERN = re.compile(r"^[0-9+\-\s()]+$")

# Raw grant as submitted by the console form. Kept as plain strings so
# unknown entities/actions reach validate_permission_grant and are
# reported as form errors instead of schema errors.
RawPermissionGrant = Dict[str, List[str]]


# --------------------------------------------------------------------
# Shared profile fields (admins, pending requests, guards)
# --------------------------------------------------------------------
def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def _mobile_number(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Mobile number is required")
    if not MOBILE_PATTERN.match(value):
        raise ValueError("Invalid mobile number format")
    return value


class ProfileFields(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    mobile: str
    national_id: str

    @field_validator("first_name", "last_name", "national_id")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _required_text(value)

    @field_validator("mobile")
    @classmethod
    def valid_mobile(cls, value: str) -> str:
        return _mobile_number(value)


class ProfileUpdateFields(BaseModel):
    """Same rules as ProfileFields, applied only to the fields sent."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    mobile: Optional[str] = None
    national_id: Optional[str] = None

    @field_validator("first_name", "last_name", "national_id")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _required_text(value)

    @field_validator("mobile")
    @classmethod
    def valid_mobile(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _mobile_number(value)


# --------------------------------------------------------------------
# Account assignment (direct creation + approval)
# --------------------------------------------------------------------
class AccountAssignment(BaseModel):
    account_type: AccountType
    assigned_projects: List[str] = Field(default_factory=list)
    permissions: RawPermissionGrant = Field(default_factory=dict)

    @field_validator("assigned_projects")
    @classmethod
    def dedupe_projects(cls, value: List[str]) -> List[str]:
        # set semantics, first-seen order kept for storage
        return list(dict.fromkeys(p.strip() for p in value if p and p.strip()))


class AdminCreate(ProfileFields, AccountAssignment):
    """Payload used by a super admin to create an admin directly."""
    pass


class AdminUpdate(ProfileUpdateFields):
    """Partial update of an admin row (profile, tier, projects, grant)."""
    account_type: Optional[AccountType] = None
    assigned_projects: Optional[List[str]] = None
    permissions: Optional[RawPermissionGrant] = None

    @property
    def touches_assignment(self) -> bool:
        return (
            self.account_type is not None
            or self.assigned_projects is not None
            or self.permissions is not None
        )


class AdminRead(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    national_id: Optional[str] = None

    account_type: AccountType
    assigned_projects: List[str] = Field(default_factory=list)
    permissions: Dict[str, List[str]] = Field(default_factory=dict)
    is_active: bool = True

    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
