# services/profiles.py

from typing import Any, Dict, List, Optional

from supabase import Client

from core.supabase_helpers import (
    row_to_model,
    rows_to_models,
    safe_count,
    safe_select,
    safe_update,
    safe_upsert,
)
from core.roles import SUPER_ADMIN_ROLE
from core.utils import utc_now_iso
from models.profile import UserProfile

TABLE = "user_profiles"

# Flag or role, the same test core.permission_helpers.is_super_admin applies
SUPER_ADMIN_MATCH = f"is_super_admin.eq.true,role.eq.{SUPER_ADMIN_ROLE}"


class ProfileStore:
    """CRUD over user_profiles. No business rules live here."""

    def __init__(self, client: Optional[Client]):
        self.client = client

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        row = safe_select(self.client, TABLE, {"user_id": user_id}, single=True)
        return row_to_model(row, UserProfile, TABLE) if row else None

    def upsert_profile(self, profile: UserProfile) -> UserProfile:
        payload = profile.model_dump(mode="json", exclude={"created_at", "updated_at"})
        payload["updated_at"] = utc_now_iso()
        row = safe_upsert(self.client, TABLE, payload, on_conflict="user_id")
        return row_to_model(row, UserProfile, TABLE) if row else profile

    def update_profile(self, user_id: str, patch: Dict[str, Any]) -> Optional[UserProfile]:
        row = safe_update(
            self.client,
            TABLE,
            {"user_id": user_id},
            {**patch, "updated_at": utc_now_iso()},
        )
        return row_to_model(row, UserProfile, TABLE) if row else None

    def set_profile_active(self, user_id: str, active: bool) -> bool:
        return self.update_profile(user_id, {"is_active": active}) is not None

    def list_profiles(self) -> List[UserProfile]:
        rows = safe_select(self.client, TABLE, order_by="created_at", desc=True)
        return rows_to_models(rows, UserProfile, TABLE)

    def find_active_super_admin(self) -> Optional[UserProfile]:
        row = safe_select(
            self.client,
            TABLE,
            {"is_active": True},
            any_of=SUPER_ADMIN_MATCH,
            single=True,
        )
        return row_to_model(row, UserProfile, TABLE) if row else None

    def count_profiles(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return safe_count(self.client, TABLE, filters)

    def count_super_admins(self, active_only: bool = True) -> int:
        filters = {"is_active": True} if active_only else None
        return safe_count(self.client, TABLE, filters, any_of=SUPER_ADMIN_MATCH)
