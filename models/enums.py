from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# CONTENT STATUS
# -----------------------------------------------------
class ContentStatus(BaseStrEnum):
    """Approval state of a content item. `draft` is the initial state."""

    draft = "draft"
    pending_review = "pending_review"
    reviewed = "reviewed"
    published = "published"
    rejected = "rejected"


# -----------------------------------------------------
# WORKFLOW STAGE
# -----------------------------------------------------
class WorkflowStage(BaseStrEnum):
    """Coarse, derived view of ContentStatus used for dashboard grouping."""

    draft = "draft"
    review = "review"
    approval = "approval"
    published = "published"


# -----------------------------------------------------
# WORKFLOW ACTION
# -----------------------------------------------------
class WorkflowAction(BaseStrEnum):
    submit_for_review = "submit_for_review"
    approve = "approve"
    reject = "reject"
    publish = "publish"
    unpublish = "unpublish"
    assign_reviewer = "assign_reviewer"
    assign_publisher = "assign_publisher"


# -----------------------------------------------------
# WORKFLOW ASSIGNMENT
# -----------------------------------------------------
class AssignmentRole(BaseStrEnum):
    reviewer = "reviewer"
    publisher = "publisher"


class AssignmentStatus(BaseStrEnum):
    pending = "pending"
    completed = "completed"


class Priority(BaseStrEnum):
    low = "low"
    normal = "normal"
    high = "high"


# -----------------------------------------------------
# PERMISSION ASSIGNMENT ACTION
# -----------------------------------------------------
class PermissionAction(BaseStrEnum):
    """How a permission list is applied to a user or group."""

    add = "add"
    remove = "remove"
    replace = "replace"


# -----------------------------------------------------
# ERROR CODES
# -----------------------------------------------------
class ErrorCode(BaseStrEnum):
    """Machine-readable failure kinds carried by OperationResult."""

    validation_error = "validation_error"
    permission_denied = "permission_denied"
    state_conflict = "state_conflict"
    external_failure = "external_failure"
    protected_entity = "protected_entity"
    not_found = "not_found"
