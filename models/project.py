from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class ProjectRead(BaseModel):
    """A managed compound / property (the unit of project scoping)."""
    id: str
    name: Optional[str] = None
    location: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "allow"}
