# models/group.py

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class PermissionGroup(BaseModel):
    """Row of custom_permission_groups. Soft-deleted via is_active."""
    id: str
    name: str
    description: Optional[str] = None
    job_description: Optional[str] = None
    permissions: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
