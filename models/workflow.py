# models/workflow.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from models.enums import (
    AssignmentRole,
    AssignmentStatus,
    ContentStatus,
    ErrorCode,
    Priority,
    WorkflowAction,
    WorkflowStage,
)


# ===============================================================
# CONTENT RECORD (content table)
# ===============================================================

class ContentRecord(BaseModel):
    """
    The workflow columns of a content row. Body, categories and the rest
    of the editorial payload are not read by the core.
    """
    id: str
    title: Optional[str] = None
    author_id: Optional[str] = None
    status: ContentStatus = ContentStatus.draft
    workflow_stage: Optional[WorkflowStage] = None

    initiated_by: Optional[str] = None
    initiated_by_id: Optional[str] = None
    initiated_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    reviewed_by_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    published_by: Optional[str] = None
    published_by_id: Optional[str] = None
    published_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_by_id: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    review_notes: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ===============================================================
# DASHBOARD ROW (workflow_dashboard table)
# ===============================================================

class WorkflowDashboardRow(BaseModel):
    content_id: str
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None
    priority: Priority = Priority.normal
    due_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ===============================================================
# WORKFLOW STATE (read model)
# ===============================================================

class ContentWorkflowState(BaseModel):
    """
    Approval state of one content item as shown on dashboards: the
    content row's workflow columns plus the current assignment, if any.
    """
    content_id: str
    status: ContentStatus
    workflow_stage: WorkflowStage

    initiated_by: Optional[str] = None
    initiated_by_id: Optional[str] = None
    initiated_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    reviewed_by_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    published_by: Optional[str] = None
    published_by_id: Optional[str] = None
    published_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_by_id: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    review_notes: Optional[str] = None

    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None
    priority: Priority = Priority.normal
    due_date: Optional[datetime] = None


# ===============================================================
# AUDIT + ASSIGNMENT ROWS (write-once)
# ===============================================================

class WorkflowAuditEntry(BaseModel):
    id: Optional[str] = None
    content_id: str
    action: WorkflowAction
    old_status: Optional[ContentStatus] = None
    new_status: Optional[ContentStatus] = None
    performed_by: str
    performed_by_id: Optional[str] = None
    notes: Optional[str] = None
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WorkflowAssignment(BaseModel):
    id: Optional[str] = None
    content_id: str
    assigned_to: str
    assigned_to_name: Optional[str] = None
    assigned_by: str
    assigned_by_name: Optional[str] = None
    role: AssignmentRole
    status: AssignmentStatus = AssignmentStatus.pending
    priority: Priority = Priority.normal
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ===============================================================
# PRE-FLIGHT CHECK RESULT
# ===============================================================

class ActionCheck(BaseModel):
    """
    Outcome of WorkflowEngine.can_user_perform_action().

    error_code tells a refusal that will never succeed for this caller
    (permission_denied) from one that depends on the item's current
    state (state_conflict).
    """
    can_perform: bool
    reason: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    current_status: Optional[ContentStatus] = None
