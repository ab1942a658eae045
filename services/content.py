# services/content.py

from typing import Any, Dict, List, Optional

from supabase import Client

from core.errors import ExternalFailure
from core.supabase_helpers import (
    row_to_model,
    rows_to_models,
    safe_insert,
    safe_select,
    safe_update,
    safe_upsert,
)
from core.utils import utc_now_iso
from models.enums import ContentStatus
from models.workflow import (
    ContentRecord,
    WorkflowAssignment,
    WorkflowAuditEntry,
    WorkflowDashboardRow,
)

CONTENT_TABLE = "content"
AUDIT_TABLE = "workflow_audit_log"
DASHBOARD_TABLE = "workflow_dashboard"
ASSIGNMENTS_TABLE = "workflow_assignments"


class ContentStore:
    """
    Persistence for the approval workflow.

    Status changes only go through update_content_conditional(), which
    filters on the expected status so a concurrent transition that got
    there first leaves zero matching rows.
    """

    def __init__(self, client: Optional[Client]):
        self.client = client

    # -----------------------------------------------------
    # content
    # -----------------------------------------------------
    def get_content(self, content_id: str) -> Optional[ContentRecord]:
        row = safe_select(self.client, CONTENT_TABLE, {"id": content_id}, single=True)
        return row_to_model(row, ContentRecord, CONTENT_TABLE) if row else None

    def list_content(self, status: Optional[ContentStatus] = None) -> List[ContentRecord]:
        filters = {"status": str(status)} if status else None
        rows = safe_select(
            self.client, CONTENT_TABLE, filters, order_by="updated_at", desc=True
        )
        return rows_to_models(rows, ContentRecord, CONTENT_TABLE)

    def update_content_conditional(
        self,
        content_id: str,
        expected_status: ContentStatus,
        patch: Dict[str, Any],
    ) -> Optional[ContentRecord]:
        """None means the row was not in expected_status (or is gone)."""
        row = safe_update(
            self.client,
            CONTENT_TABLE,
            {"id": content_id, "status": str(expected_status)},
            {**patch, "updated_at": utc_now_iso()},
        )
        return row_to_model(row, ContentRecord, CONTENT_TABLE) if row else None

    # -----------------------------------------------------
    # audit log (append only)
    # -----------------------------------------------------
    def append_audit_entry(self, entry: WorkflowAuditEntry) -> WorkflowAuditEntry:
        payload = entry.model_dump(mode="json", exclude={"id"})
        payload["timestamp"] = payload.get("timestamp") or utc_now_iso()
        row = safe_insert(self.client, AUDIT_TABLE, payload)
        return row_to_model(row, WorkflowAuditEntry, AUDIT_TABLE) if row else entry

    def list_audit_entries(self, content_id: str) -> List[WorkflowAuditEntry]:
        rows = safe_select(
            self.client, AUDIT_TABLE, {"content_id": content_id}, order_by="timestamp"
        )
        return rows_to_models(rows, WorkflowAuditEntry, AUDIT_TABLE)

    # -----------------------------------------------------
    # dashboard + assignments
    # -----------------------------------------------------
    def get_dashboard_row(self, content_id: str) -> Optional[WorkflowDashboardRow]:
        row = safe_select(self.client, DASHBOARD_TABLE, {"content_id": content_id}, single=True)
        return row_to_model(row, WorkflowDashboardRow, DASHBOARD_TABLE) if row else None

    def upsert_dashboard_row(self, row: WorkflowDashboardRow) -> WorkflowDashboardRow:
        payload = row.model_dump(mode="json")
        payload["updated_at"] = utc_now_iso()
        stored = safe_upsert(self.client, DASHBOARD_TABLE, payload, on_conflict="content_id")
        return row_to_model(stored, WorkflowDashboardRow, DASHBOARD_TABLE) if stored else row

    def list_dashboard_rows(self, assigned_to: Optional[str] = None) -> List[WorkflowDashboardRow]:
        filters = {"assigned_to": assigned_to} if assigned_to else None
        rows = safe_select(
            self.client, DASHBOARD_TABLE, filters, order_by="updated_at", desc=True
        )
        return rows_to_models(rows, WorkflowDashboardRow, DASHBOARD_TABLE)

    def insert_assignment(self, assignment: WorkflowAssignment) -> WorkflowAssignment:
        payload = assignment.model_dump(mode="json", exclude={"id", "created_at"})
        payload["created_at"] = utc_now_iso()
        row = safe_insert(self.client, ASSIGNMENTS_TABLE, payload)
        if not row:
            raise ExternalFailure(f"Failed to insert into {ASSIGNMENTS_TABLE}: no row returned")
        return row_to_model(row, WorkflowAssignment, ASSIGNMENTS_TABLE)
