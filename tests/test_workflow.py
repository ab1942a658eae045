# tests/test_workflow.py

"""
Tests for the content approval state machine.
"""

import pytest

from models.enums import (
    AssignmentRole,
    ContentStatus,
    ErrorCode,
    WorkflowAction,
    WorkflowStage,
)
from models.profile import UserProfile
from models.workflow import ContentRecord
from services.workflow import TRANSITIONS, stage_for_status


# -----------------------------------------------------
# Derived stage
# -----------------------------------------------------
@pytest.mark.parametrize("status,stage", [
    (ContentStatus.draft, WorkflowStage.draft),
    (ContentStatus.pending_review, WorkflowStage.review),
    (ContentStatus.reviewed, WorkflowStage.approval),
    (ContentStatus.published, WorkflowStage.published),
    (ContentStatus.rejected, WorkflowStage.draft),
])
def test_stage_for_status(status, stage):
    assert stage_for_status(status) == stage


def test_transition_table_edges():
    assert TRANSITIONS[WorkflowAction.submit_for_review].sources == {
        ContentStatus.draft, ContentStatus.rejected
    }
    assert TRANSITIONS[WorkflowAction.publish].sources == {ContentStatus.reviewed}
    assert TRANSITIONS[WorkflowAction.unpublish].target == ContentStatus.draft


# -----------------------------------------------------
# Happy path
# -----------------------------------------------------
def test_full_approval_pipeline(
    workflow, content, login, draft,
    author_profile, subscriber_profile, reviewer_profile, editor_profile,
):
    """Author submits, reviewer approves, publisher publishes."""
    login(author_profile)
    result = workflow.submit_for_review(draft.id, notes="ready")
    assert result.success, result
    assert content.status_of(draft.id) == ContentStatus.pending_review

    login(subscriber_profile)
    result = workflow.approve(draft.id)
    assert not result.success
    assert result.error_code == ErrorCode.permission_denied
    assert content.status_of(draft.id) == ContentStatus.pending_review

    login(reviewer_profile)
    result = workflow.approve(draft.id, notes="looks good")
    assert result.success, result
    assert content.status_of(draft.id) == ContentStatus.reviewed

    login(editor_profile)
    result = workflow.publish(draft.id)
    assert result.success, result

    record = content.rows[draft.id]
    assert record.status == ContentStatus.published
    assert record.workflow_stage == WorkflowStage.published
    assert record.published_by == editor_profile.email
    assert record.published_by_id == editor_profile.user_id
    assert record.published_at is not None
    assert record.initiated_by_id == author_profile.user_id
    assert record.reviewed_by_id == reviewer_profile.user_id

    actions = [e.action for e in content.audit]
    assert actions == [
        WorkflowAction.submit_for_review,
        WorkflowAction.approve,
        WorkflowAction.publish,
    ]


def test_transition_result_data(workflow, login, draft, author_profile):
    login(author_profile)
    result = workflow.submit_for_review(draft.id)
    assert result.data == {
        "content_id": draft.id,
        "old_status": "draft",
        "status": "pending_review",
        "workflow_stage": "review",
        "audit_logged": True,
    }


def test_reject_records_reason_and_stage(workflow, content, login, make_content, reviewer_profile):
    item = make_content(ContentStatus.pending_review)
    login(reviewer_profile)

    result = workflow.reject(item.id, "spam", "not relevant")

    assert result.success, result
    record = content.rows[item.id]
    assert record.status == ContentStatus.rejected
    assert record.rejection_reason == "spam"
    assert record.review_notes == "not relevant"
    assert record.rejected_by_id == reviewer_profile.user_id
    assert stage_for_status(record.status) == WorkflowStage.draft
    assert record.workflow_stage == WorkflowStage.draft

    entry = content.audit[-1]
    assert entry.action == WorkflowAction.reject
    assert entry.old_status == ContentStatus.pending_review
    assert entry.new_status == ContentStatus.rejected


def test_rejected_content_can_be_resubmitted(workflow, content, login, make_content, author_profile):
    item = make_content(ContentStatus.rejected)
    login(author_profile)
    assert workflow.submit_for_review(item.id).success
    assert content.status_of(item.id) == ContentStatus.pending_review


def test_unpublish_clears_published_fields(workflow, content, login, make_content, editor_profile):
    item = make_content(ContentStatus.reviewed)
    login(editor_profile)
    assert workflow.publish(item.id).success

    result = workflow.unpublish(item.id, "outdated figures")

    assert result.success, result
    record = content.rows[item.id]
    assert record.status == ContentStatus.draft
    assert record.workflow_stage == WorkflowStage.draft
    assert record.published_by is None
    assert record.published_by_id is None
    assert record.published_at is None
    assert record.rejection_reason == "outdated figures"


# -----------------------------------------------------
# Guards
# -----------------------------------------------------
@pytest.mark.parametrize("status", [
    ContentStatus.draft,
    ContentStatus.pending_review,
    ContentStatus.published,
    ContentStatus.rejected,
])
def test_publish_requires_reviewed(workflow, content, login, make_content, editor_profile, status):
    """Publishing anything not reviewed is a state conflict and changes nothing."""
    item = make_content(status)
    login(editor_profile)

    result = workflow.publish(item.id)

    assert not result.success
    assert result.error_code == ErrorCode.state_conflict
    assert content.status_of(item.id) == status
    assert "update_content_conditional" not in content.calls
    assert content.audit == []


def test_permission_checked_before_state(workflow, login, make_content, subscriber_profile):
    item = make_content(ContentStatus.draft)
    login(subscriber_profile)
    result = workflow.publish(item.id)
    assert result.error_code == ErrorCode.permission_denied


def test_only_author_or_edit_all_may_submit(workflow, profiles, content, login, draft, editor_profile):
    other = profiles.add(UserProfile(user_id="contrib-2", role="contributor"))
    login(other)
    result = workflow.submit_for_review(draft.id)
    assert result.error_code == ErrorCode.permission_denied
    assert content.status_of(draft.id) == ContentStatus.draft

    login(editor_profile)
    assert workflow.submit_for_review(draft.id).success


@pytest.mark.parametrize("call", [
    lambda wf, cid: wf.reject(cid, "   "),
    lambda wf, cid: wf.reject(cid, None),
    lambda wf, cid: wf.unpublish(cid, ""),
    lambda wf, cid: wf.publish(""),
])
def test_missing_reason_is_validation_error(workflow, identity, content, login, make_content, editor_profile, call):
    item = make_content(ContentStatus.pending_review)
    login(editor_profile)
    identity.calls.clear()

    result = call(workflow, item.id)

    assert not result.success
    assert result.error_code == ErrorCode.validation_error
    assert result.errors
    assert identity.calls == []
    assert content.calls == []


def test_unknown_content_is_not_found(workflow, login, editor_profile):
    login(editor_profile)
    result = workflow.approve("missing")
    assert result.error_code == ErrorCode.not_found


def test_anonymous_caller_is_denied(workflow, identity, content, draft):
    identity.logout()
    result = workflow.submit_for_review(draft.id)
    assert result.error_code == ErrorCode.permission_denied
    assert content.status_of(draft.id) == ContentStatus.draft


def test_inactive_profile_is_denied(workflow, profiles, login, make_content):
    item = make_content(ContentStatus.reviewed)
    gone = profiles.add(UserProfile(user_id="gone", role="editor", is_active=False))
    login(gone)
    assert workflow.publish(item.id).error_code == ErrorCode.permission_denied


# -----------------------------------------------------
# Pre-flight consistency
# -----------------------------------------------------
@pytest.mark.parametrize("status", list(ContentStatus))
@pytest.mark.parametrize("profile_fixture", ["editor_profile", "reviewer_profile", "author_profile"])
def test_can_perform_publish_matches_publish(request, workflow, login, make_content, status, profile_fixture):
    item = make_content(status)
    login(request.getfixturevalue(profile_fixture))

    check = workflow.can_user_perform_action(item.id, WorkflowAction.publish)
    result = workflow.publish(item.id)

    assert check.can_perform == result.success
    if not check.can_perform:
        assert check.error_code == result.error_code


@pytest.mark.parametrize("action", [
    WorkflowAction.submit_for_review,
    WorkflowAction.approve,
    WorkflowAction.reject,
    WorkflowAction.unpublish,
])
@pytest.mark.parametrize("status", list(ContentStatus))
def test_can_perform_matches_every_transition(workflow, content, login, make_content, editor_profile, action, status):
    item = make_content(status)
    login(editor_profile)

    check = workflow.can_user_perform_action(item.id, action)
    transition = {
        WorkflowAction.submit_for_review: lambda: workflow.submit_for_review(item.id),
        WorkflowAction.approve: lambda: workflow.approve(item.id),
        WorkflowAction.reject: lambda: workflow.reject(item.id, "off topic"),
        WorkflowAction.unpublish: lambda: workflow.unpublish(item.id, "retired"),
    }[action]

    assert check.can_perform == transition().success


def test_can_perform_does_not_mutate(workflow, content, login, make_content, editor_profile):
    item = make_content(ContentStatus.reviewed)
    login(editor_profile)
    check = workflow.can_user_perform_action(item.id, "publish")
    assert check.can_perform
    assert content.status_of(item.id) == ContentStatus.reviewed
    assert content.audit == []


def test_can_perform_reports_reasons(workflow, login, make_content, subscriber_profile, editor_profile):
    item = make_content(ContentStatus.draft)

    login(subscriber_profile)
    check = workflow.can_user_perform_action(item.id, "publish")
    assert check.reason == "You do not have permission to publish content"

    login(editor_profile)
    check = workflow.can_user_perform_action(item.id, "publish")
    assert check.reason == "Content must be approved first"
    assert check.current_status == ContentStatus.draft


def test_can_perform_rejects_unknown_action(workflow, draft):
    check = workflow.can_user_perform_action(draft.id, "teleport")
    assert not check.can_perform
    assert check.reason == "Invalid action"


def test_can_perform_never_raises_on_unreadable_content(workflow, content, login, editor_profile, monkeypatch):
    def unreadable(content_id):
        return ContentRecord.model_validate({"id": content_id, "title": "Old post", "status": "archived"})

    monkeypatch.setattr(content, "get_content", unreadable)
    login(editor_profile)

    check = workflow.can_user_perform_action("content-9", WorkflowAction.publish)

    assert not check.can_perform
    assert check.reason == "Error checking permissions"
    assert check.error_code == ErrorCode.external_failure


# -----------------------------------------------------
# Concurrency + audit
# -----------------------------------------------------
def test_lost_race_is_state_conflict(workflow, content, login, make_content, reviewer_profile):
    """Another reviewer rejects between our guard read and our write."""
    item = make_content(ContentStatus.pending_review)
    login(reviewer_profile)

    def concurrent_reject(content_id):
        content.rows[content_id] = content.rows[content_id].model_copy(
            update={"status": ContentStatus.rejected}
        )

    content.before_update = concurrent_reject
    result = workflow.approve(item.id)

    assert not result.success
    assert result.error_code == ErrorCode.state_conflict
    assert content.status_of(item.id) == ContentStatus.rejected
    assert content.audit == []


def test_audit_failure_keeps_transition(workflow, content, login, draft, author_profile):
    login(author_profile)
    content.fail_audit = True

    result = workflow.submit_for_review(draft.id)

    assert result.success
    assert result.data["audit_logged"] is False
    assert content.status_of(draft.id) == ContentStatus.pending_review


def test_audit_entry_identifies_actor(workflow, content, login, draft, author_profile):
    login(author_profile)
    workflow.submit_for_review(draft.id, notes="first pass")

    entry = content.audit[0]
    assert entry.performed_by == author_profile.email
    assert entry.performed_by_id == author_profile.user_id
    assert entry.notes == "first pass"


# -----------------------------------------------------
# Assignments
# -----------------------------------------------------
def test_assign_reviewer(workflow, content, login, draft, author_profile, reviewer_profile):
    login(author_profile)

    result = workflow.assign_reviewer(draft.id, reviewer_profile.user_id, "Eric Mugisha")

    assert result.success, result
    assert content.status_of(draft.id) == ContentStatus.draft
    assert content.dashboard[draft.id].assigned_to == reviewer_profile.user_id

    assignment = content.assignments[0]
    assert assignment.role == AssignmentRole.reviewer
    assert assignment.assigned_by == author_profile.user_id

    entry = content.audit[-1]
    assert entry.action == WorkflowAction.assign_reviewer
    assert entry.old_status is None and entry.new_status is None
    assert entry.notes == "Assigned to Eric Mugisha"


def test_assign_publisher_needs_authentication_only(workflow, content, identity, draft):
    identity.login("no-profile-user", "someone@benirage.org")
    result = workflow.assign_publisher(draft.id, "editor-1", "Grace")
    assert result.success, result
    assert content.assignments[0].role == AssignmentRole.publisher


def test_assign_requires_authentication(workflow, content, identity, draft):
    identity.logout()
    result = workflow.assign_reviewer(draft.id, "reviewer-1")
    assert result.error_code == ErrorCode.permission_denied
    assert content.assignments == []


# -----------------------------------------------------
# Reads
# -----------------------------------------------------
def test_get_workflow_state(workflow, content, login, draft, author_profile):
    login(author_profile)
    workflow.submit_for_review(draft.id)
    workflow.assign_reviewer(draft.id, "reviewer-1", "Eric")

    result = workflow.get_workflow_state(draft.id)

    assert result.success
    state = result.data
    assert state.content_id == draft.id
    assert state.status == ContentStatus.pending_review
    assert state.workflow_stage == WorkflowStage.review
    assert state.assigned_to == "reviewer-1"
    assert state.initiated_by_id == author_profile.user_id


def test_get_workflow_state_missing(workflow):
    assert workflow.get_workflow_state("missing").error_code == ErrorCode.not_found


def test_get_workflow_items_by_status(workflow, make_content):
    make_content(ContentStatus.draft, "c-1")
    make_content(ContentStatus.published, "c-2")

    everything = workflow.get_workflow_items()
    published = workflow.get_workflow_items(ContentStatus.published)

    assert len(everything.data) == 2
    assert [s.content_id for s in published.data] == ["c-2"]
    assert workflow.get_workflow_items("bogus").error_code == ErrorCode.validation_error


def test_get_my_workflow_items(workflow, login, identity, make_content, author_profile, reviewer_profile):
    make_content(ContentStatus.pending_review, "c-1")
    make_content(ContentStatus.pending_review, "c-2")
    login(author_profile)
    workflow.assign_reviewer("c-1", reviewer_profile.user_id)

    login(reviewer_profile)
    mine = workflow.get_my_workflow_items()

    assert [s.content_id for s in mine.data] == ["c-1"]

    identity.logout()
    assert workflow.get_my_workflow_items().error_code == ErrorCode.permission_denied


def test_get_audit_trail(workflow, login, draft, author_profile):
    login(author_profile)
    workflow.submit_for_review(draft.id)

    trail = workflow.get_audit_trail(draft.id)

    assert trail.success
    assert [e.action for e in trail.data] == [WorkflowAction.submit_for_review]
