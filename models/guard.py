from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from models.admin import ProfileFields, ProfileUpdateFields


class GuardCreate(ProfileFields):
    """Guard account created by an admin inside one project."""
    password: str = Field(..., min_length=6)


class GuardUpdate(ProfileUpdateFields):
    """Partial guard profile update."""


class GuardRead(BaseModel):
    id: str
    project_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    national_id: Optional[str] = None
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
