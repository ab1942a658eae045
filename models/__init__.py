# -------------------------
# Enums
# -------------------------
from .enums import (
    BaseStrEnum,
    ContentStatus,
    WorkflowStage,
    WorkflowAction,
    AssignmentRole,
    AssignmentStatus,
    Priority,
    PermissionAction,
    ErrorCode,
)

# -------------------------
# Operation Result
# -------------------------
from .results import OperationResult

# -------------------------
# Identity / Profile Models
# -------------------------
from .profile import (
    Identity,
    UserProfile,
    PermissionCheck,
)

# -------------------------
# Permission Group Models
# -------------------------
from .group import PermissionGroup

# -------------------------
# Workflow Models
# -------------------------
from .workflow import (
    ContentRecord,
    WorkflowDashboardRow,
    ContentWorkflowState,
    WorkflowAuditEntry,
    WorkflowAssignment,
    ActionCheck,
)

# models.admin validates against core.permissions / core.roles and is
# imported directly from there.
