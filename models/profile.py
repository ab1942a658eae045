# models/profile.py

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


# ===============================================================
# SUPABASE AUTH IDENTITY
# ===============================================================

class Identity(BaseModel):
    """
    Minimal view of an auth.users row: who is calling.
    """
    id: str
    email: Optional[str] = None


# ===============================================================
# USER PROFILE (user_profiles table)
# ===============================================================

class UserProfile(BaseModel):
    """
    One row of user_profiles, keyed by the auth user id.

    Effective permissions are role ∪ custom_permissions, or the whole
    catalog when is_super_admin is set (see core.permission_helpers).
    Deleting a user only flips is_active.
    """
    user_id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    is_super_admin: bool = False
    custom_permissions: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or (self.email or self.user_id)


class PermissionCheck(BaseModel):
    """One line of a per-permission grant report."""
    permission: str
    granted: bool
    description: Optional[str] = None
