# services/workflow.py

from typing import Dict, FrozenSet, List, NamedTuple, Optional, Tuple

from core.errors import (
    CMSError,
    InvalidInput,
    NotFound,
    PermissionDenied,
    StateConflict,
    operation_boundary,
)
from core.logging_config import logger
from core.permission_helpers import has_permission
from core.permissions import Permission
from core.utils import utc_now_iso
from models.enums import (
    AssignmentRole,
    ContentStatus,
    ErrorCode,
    Priority,
    WorkflowAction,
    WorkflowStage,
)
from models.profile import Identity, UserProfile
from models.results import OperationResult
from models.workflow import (
    ActionCheck,
    ContentRecord,
    ContentWorkflowState,
    WorkflowAssignment,
    WorkflowAuditEntry,
    WorkflowDashboardRow,
)


# ============================================================
# STATE MACHINE
# ============================================================
#   draft ──submit──▶ pending_review ──approve──▶ reviewed ──publish──▶ published
#     ▲                  │    ▲                                            │
#     │                reject │ submit                                     │
#     │                  ▼    │                                            │
#     │                rejected                                            │
#     └──────────────────────────── unpublish ◀────────────────────────────┘
# ============================================================

class Transition(NamedTuple):
    permission: Permission
    sources: FrozenSet[ContentStatus]
    target: ContentStatus
    actor_prefix: Optional[str]
    denied_reason: str
    state_reason: str


TRANSITIONS: Dict[WorkflowAction, Transition] = {
    WorkflowAction.submit_for_review: Transition(
        Permission.content_submit_review,
        frozenset({ContentStatus.draft, ContentStatus.rejected}),
        ContentStatus.pending_review,
        "initiated",
        "You do not have permission to submit content for review",
        "Content must be a draft or rejected to be submitted for review",
    ),
    WorkflowAction.approve: Transition(
        Permission.content_approve_review,
        frozenset({ContentStatus.pending_review}),
        ContentStatus.reviewed,
        "reviewed",
        "You do not have permission to approve content",
        "Content must be pending review",
    ),
    WorkflowAction.reject: Transition(
        Permission.content_approve_review,
        frozenset({ContentStatus.pending_review}),
        ContentStatus.rejected,
        "rejected",
        "You do not have permission to reject content",
        "Content must be pending review",
    ),
    WorkflowAction.publish: Transition(
        Permission.content_publish,
        frozenset({ContentStatus.reviewed}),
        ContentStatus.published,
        "published",
        "You do not have permission to publish content",
        "Content must be approved first",
    ),
    WorkflowAction.unpublish: Transition(
        Permission.content_unpublish,
        frozenset({ContentStatus.published}),
        ContentStatus.draft,
        None,
        "You do not have permission to unpublish content",
        "Content must be published first",
    ),
}

ASSIGNMENT_ACTIONS = {
    WorkflowAction.assign_reviewer: AssignmentRole.reviewer,
    WorkflowAction.assign_publisher: AssignmentRole.publisher,
}

_STAGES: Dict[ContentStatus, WorkflowStage] = {
    ContentStatus.draft: WorkflowStage.draft,
    ContentStatus.pending_review: WorkflowStage.review,
    ContentStatus.reviewed: WorkflowStage.approval,
    ContentStatus.published: WorkflowStage.published,
    ContentStatus.rejected: WorkflowStage.draft,
}


def stage_for_status(status: ContentStatus) -> WorkflowStage:
    """Coarse dashboard grouping of a status. Unknown values group as draft."""
    return _STAGES.get(status, WorkflowStage.draft)


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInput([message])
    return str(value).strip()


def _actor_id(actor) -> str:
    # UserProfile carries user_id, Identity carries id
    return getattr(actor, "user_id", None) or actor.id


def _actor_name(actor) -> str:
    return actor.email or _actor_id(actor)


# ============================================================
# WORKFLOW ENGINE
# ============================================================

class WorkflowEngine:
    """
    Content approval pipeline.

    Every transition goes through _evaluate(), the same guard that
    can_user_perform_action() reports, then writes the new status with a
    conditional update (WHERE id = :id AND status = :expected) and appends
    one audit entry.
    """

    def __init__(self, authorization, content):
        self.authorization = authorization
        self.content = content

    # -----------------------------------------------------
    # Guard
    # -----------------------------------------------------
    def _evaluate(
        self, content_id: str, action: WorkflowAction
    ) -> Tuple[ActionCheck, Optional[UserProfile], Optional[ContentRecord]]:
        if action in ASSIGNMENT_ACTIONS:
            check, _ = self._evaluate_assignment(content_id)
            return check, None, None

        profile = self.authorization.get_current_profile()
        if profile is None or not profile.is_active:
            return (
                ActionCheck(
                    can_perform=False,
                    reason="User not authenticated",
                    error_code=ErrorCode.permission_denied,
                ),
                None,
                None,
            )

        transition = TRANSITIONS[action]
        if not has_permission(profile, transition.permission):
            return (
                ActionCheck(
                    can_perform=False,
                    reason=transition.denied_reason,
                    error_code=ErrorCode.permission_denied,
                ),
                profile,
                None,
            )

        record = self.content.get_content(content_id)
        if record is None:
            return (
                ActionCheck(
                    can_perform=False,
                    reason="Content not found",
                    error_code=ErrorCode.not_found,
                ),
                profile,
                None,
            )

        if action == WorkflowAction.submit_for_review:
            is_author = record.author_id == profile.user_id
            if not is_author and not has_permission(profile, Permission.content_edit_all):
                return (
                    ActionCheck(
                        can_perform=False,
                        reason="You can only submit your own content for review",
                        error_code=ErrorCode.permission_denied,
                        current_status=record.status,
                    ),
                    profile,
                    record,
                )

        if record.status not in transition.sources:
            return (
                ActionCheck(
                    can_perform=False,
                    reason=transition.state_reason,
                    error_code=ErrorCode.state_conflict,
                    current_status=record.status,
                ),
                profile,
                record,
            )

        return ActionCheck(can_perform=True, current_status=record.status), profile, record

    def _evaluate_assignment(self, content_id: str) -> Tuple[ActionCheck, Optional[Identity]]:
        # assignments only need an authenticated caller
        identity = self.authorization.get_current_identity()
        if identity is None:
            return ActionCheck(
                can_perform=False,
                reason="User not authenticated",
                error_code=ErrorCode.permission_denied,
            ), None

        record = self.content.get_content(content_id)
        if record is None:
            return ActionCheck(
                can_perform=False,
                reason="Content not found",
                error_code=ErrorCode.not_found,
            ), identity
        return ActionCheck(can_perform=True, current_status=record.status), identity

    def can_user_perform_action(self, content_id: str, action: WorkflowAction) -> ActionCheck:
        """Pre-flight for a transition. Never mutates and never raises."""
        try:
            action = WorkflowAction(action)
        except ValueError:
            return ActionCheck(
                can_perform=False,
                reason="Invalid action",
                error_code=ErrorCode.validation_error,
            )

        try:
            check, _, _ = self._evaluate(content_id, action)
        except CMSError as exc:
            logger.error(f"Error checking {action} on {content_id}: {exc.detail}")
            return ActionCheck(
                can_perform=False,
                reason="Error checking permissions",
                error_code=exc.code,
            )
        except Exception as e:
            logger.error(f"Unexpected error checking {action} on {content_id}: {e}")
            return ActionCheck(
                can_perform=False,
                reason="Error checking permissions",
                error_code=ErrorCode.external_failure,
            )
        return check

    def _authorize(self, content_id: str, action: WorkflowAction) -> Tuple[UserProfile, ContentRecord]:
        check, profile, record = self._evaluate(content_id, action)
        if not check.can_perform:
            self._refuse(check)
        return profile, record

    @staticmethod
    def _refuse(check: ActionCheck):
        if check.error_code == ErrorCode.state_conflict:
            raise StateConflict(check.reason)
        if check.error_code == ErrorCode.not_found:
            raise NotFound(check.reason)
        raise PermissionDenied(check.reason)

    # -----------------------------------------------------
    # Audit
    # -----------------------------------------------------
    def _audit(
        self,
        content_id: str,
        action: WorkflowAction,
        old_status: Optional[ContentStatus],
        new_status: Optional[ContentStatus],
        actor,
        notes: Optional[str],
    ) -> bool:
        """
        Append one audit entry. The status change is already committed,
        so a failed write is reported through the return value.
        """
        entry = WorkflowAuditEntry(
            content_id=content_id,
            action=action,
            old_status=old_status,
            new_status=new_status,
            performed_by=_actor_name(actor),
            performed_by_id=_actor_id(actor),
            notes=notes,
        )
        try:
            self.content.append_audit_entry(entry)
        except CMSError as exc:
            logger.error(f"Audit entry for {action} on {content_id} was not written: {exc.detail}")
            return False
        return True

    # -----------------------------------------------------
    # Transitions
    # -----------------------------------------------------
    def _transition(
        self,
        action: WorkflowAction,
        content_id: str,
        notes: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> OperationResult:
        transition = TRANSITIONS[action]
        profile, record = self._authorize(content_id, action)
        now = utc_now_iso()

        patch = {
            "status": str(transition.target),
            "workflow_stage": str(stage_for_status(transition.target)),
        }
        if transition.actor_prefix:
            patch[f"{transition.actor_prefix}_by"] = _actor_name(profile)
            patch[f"{transition.actor_prefix}_by_id"] = profile.user_id
            patch[f"{transition.actor_prefix}_at"] = now
        if notes is not None:
            patch["review_notes"] = notes
        if reason is not None:
            patch["rejection_reason"] = reason
        if action == WorkflowAction.unpublish:
            patch.update({"published_by": None, "published_by_id": None, "published_at": None})

        updated = self.content.update_content_conditional(content_id, record.status, patch)
        if updated is None:
            raise StateConflict(
                f"Content {content_id} is no longer {record.status}; another change won the race"
            )

        audit_logged = self._audit(
            content_id, action, record.status, transition.target, profile, reason or notes
        )

        logger.info(
            f"{action}: content {content_id} {record.status} → {transition.target} "
            f"by {profile.user_id}"
        )

        return OperationResult.ok(
            f"Content moved to {transition.target}",
            data={
                "content_id": content_id,
                "old_status": str(record.status),
                "status": str(updated.status),
                "workflow_stage": str(stage_for_status(updated.status)),
                "audit_logged": audit_logged,
            },
        )

    @operation_boundary("Submit for review")
    def submit_for_review(self, content_id: str, notes: Optional[str] = None) -> OperationResult:
        content_id = _require_text(content_id, "Content id is required")
        return self._transition(WorkflowAction.submit_for_review, content_id, notes=notes)

    @operation_boundary("Approve content")
    def approve(self, content_id: str, notes: Optional[str] = None) -> OperationResult:
        content_id = _require_text(content_id, "Content id is required")
        return self._transition(WorkflowAction.approve, content_id, notes=notes)

    @operation_boundary("Reject content")
    def reject(self, content_id: str, reason: str, notes: Optional[str] = None) -> OperationResult:
        content_id = _require_text(content_id, "Content id is required")
        reason = _require_text(reason, "A rejection reason is required")
        return self._transition(WorkflowAction.reject, content_id, notes=notes, reason=reason)

    @operation_boundary("Publish content")
    def publish(self, content_id: str, notes: Optional[str] = None) -> OperationResult:
        content_id = _require_text(content_id, "Content id is required")
        return self._transition(WorkflowAction.publish, content_id, notes=notes)

    @operation_boundary("Unpublish content")
    def unpublish(self, content_id: str, reason: str) -> OperationResult:
        content_id = _require_text(content_id, "Content id is required")
        reason = _require_text(reason, "An unpublish reason is required")
        return self._transition(WorkflowAction.unpublish, content_id, reason=reason)

    # -----------------------------------------------------
    # Assignments (side tables only, status untouched)
    # -----------------------------------------------------
    def _assign(
        self,
        action: WorkflowAction,
        content_id: str,
        assignee_id: str,
        assignee_name: Optional[str],
        priority: Priority,
        due_date: Optional[str],
    ) -> OperationResult:
        check, identity = self._evaluate_assignment(content_id)
        if not check.can_perform:
            self._refuse(check)

        role = ASSIGNMENT_ACTIONS[action]
        assignee_name = assignee_name or assignee_id

        self.content.upsert_dashboard_row(
            WorkflowDashboardRow(
                content_id=content_id,
                assigned_to=assignee_id,
                assigned_to_name=assignee_name,
                priority=priority,
                due_date=due_date,
            )
        )
        self.content.insert_assignment(
            WorkflowAssignment(
                content_id=content_id,
                assigned_to=assignee_id,
                assigned_to_name=assignee_name,
                assigned_by=identity.id,
                assigned_by_name=identity.email,
                role=role,
                priority=priority,
                due_date=due_date,
            )
        )

        audit_logged = self._audit(
            content_id, action, None, None, identity, f"Assigned to {assignee_name}"
        )
        logger.info(f"{action}: content {content_id} assigned to {assignee_id} by {identity.id}")

        return OperationResult.ok(
            f"Content assigned to {role} {assignee_name}",
            data={
                "content_id": content_id,
                "assigned_to": assignee_id,
                "role": str(role),
                "audit_logged": audit_logged,
            },
        )

    @operation_boundary("Assign reviewer")
    def assign_reviewer(
        self,
        content_id: str,
        reviewer_id: str,
        reviewer_name: Optional[str] = None,
        priority: Priority = Priority.normal,
        due_date: Optional[str] = None,
    ) -> OperationResult:
        content_id = _require_text(content_id, "Content id is required")
        reviewer_id = _require_text(reviewer_id, "Reviewer id is required")
        return self._assign(
            WorkflowAction.assign_reviewer, content_id, reviewer_id, reviewer_name, priority, due_date
        )

    @operation_boundary("Assign publisher")
    def assign_publisher(
        self,
        content_id: str,
        publisher_id: str,
        publisher_name: Optional[str] = None,
        priority: Priority = Priority.normal,
        due_date: Optional[str] = None,
    ) -> OperationResult:
        content_id = _require_text(content_id, "Content id is required")
        publisher_id = _require_text(publisher_id, "Publisher id is required")
        return self._assign(
            WorkflowAction.assign_publisher, content_id, publisher_id, publisher_name, priority, due_date
        )

    # -----------------------------------------------------
    # Reads
    # -----------------------------------------------------
    @staticmethod
    def _state(record: ContentRecord, dashboard: Optional[WorkflowDashboardRow] = None) -> ContentWorkflowState:
        fields = record.model_dump(exclude={"id", "title", "author_id", "workflow_stage", "created_at", "updated_at"})
        state = ContentWorkflowState(
            content_id=record.id,
            workflow_stage=stage_for_status(record.status),
            **fields,
        )
        if dashboard is not None:
            state.assigned_to = dashboard.assigned_to
            state.assigned_to_name = dashboard.assigned_to_name
            state.priority = dashboard.priority
            state.due_date = dashboard.due_date
        return state

    @operation_boundary("Get workflow state")
    def get_workflow_state(self, content_id: str) -> OperationResult:
        content_id = _require_text(content_id, "Content id is required")

        record = self.content.get_content(content_id)
        if record is None:
            raise NotFound("Content not found")

        state = self._state(record, self.content.get_dashboard_row(content_id))
        return OperationResult.ok("Workflow state retrieved", data=state)

    @operation_boundary("Get workflow items")
    def get_workflow_items(self, status: Optional[ContentStatus] = None) -> OperationResult:
        if status is not None and status not in ContentStatus.list():
            raise InvalidInput([f"Unknown status '{status}'"])

        records = self.content.list_content(ContentStatus(status) if status else None)
        dashboards = {row.content_id: row for row in self.content.list_dashboard_rows()}
        items = [self._state(r, dashboards.get(r.id)) for r in records]
        return OperationResult.ok(f"Retrieved {len(items)} workflow items", data=items)

    @operation_boundary("Get my workflow items")
    def get_my_workflow_items(self) -> OperationResult:
        identity = self.authorization.get_current_identity()
        if identity is None:
            raise PermissionDenied("User not authenticated")

        items: List[ContentWorkflowState] = []
        for row in self.content.list_dashboard_rows(assigned_to=identity.id):
            record = self.content.get_content(row.content_id)
            if record is not None:
                items.append(self._state(record, row))

        return OperationResult.ok(f"Retrieved {len(items)} workflow items", data=items)

    @operation_boundary("Get audit trail")
    def get_audit_trail(self, content_id: str) -> OperationResult:
        content_id = _require_text(content_id, "Content id is required")
        entries = self.content.list_audit_entries(content_id)
        return OperationResult.ok(f"Retrieved {len(entries)} audit entries", data=entries)
