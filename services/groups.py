# services/groups.py

from typing import Any, Dict, List, Optional

from supabase import Client

from core.errors import ExternalFailure
from core.supabase_helpers import (
    row_to_model,
    rows_to_models,
    safe_count,
    safe_insert,
    safe_select,
    safe_update,
)
from core.utils import utc_now_iso
from models.group import PermissionGroup

TABLE = "custom_permission_groups"


class GroupStore:
    def __init__(self, client: Optional[Client]):
        self.client = client

    def get_group(self, group_id: str) -> Optional[PermissionGroup]:
        row = safe_select(self.client, TABLE, {"id": group_id}, single=True)
        return row_to_model(row, PermissionGroup, TABLE) if row else None

    def insert_group(self, data: Dict[str, Any]) -> PermissionGroup:
        now = utc_now_iso()
        row = safe_insert(
            self.client,
            TABLE,
            {**data, "is_active": True, "created_at": now, "updated_at": now},
        )
        if not row:
            raise ExternalFailure(f"Failed to insert into {TABLE}: no row returned")
        return row_to_model(row, PermissionGroup, TABLE)

    def update_group(self, group_id: str, patch: Dict[str, Any]) -> Optional[PermissionGroup]:
        row = safe_update(
            self.client,
            TABLE,
            {"id": group_id},
            {**patch, "updated_at": utc_now_iso()},
        )
        return row_to_model(row, PermissionGroup, TABLE) if row else None

    def set_group_active(self, group_id: str, active: bool) -> bool:
        return self.update_group(group_id, {"is_active": active}) is not None

    def list_groups(self, active_only: bool = True) -> List[PermissionGroup]:
        filters = {"is_active": True} if active_only else None
        rows = safe_select(self.client, TABLE, filters, order_by="created_at", desc=True)
        return rows_to_models(rows, PermissionGroup, TABLE)

    def count_groups(self, active_only: bool = True) -> int:
        return safe_count(self.client, TABLE, {"is_active": True} if active_only else None)
