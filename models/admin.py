# models/admin.py

from typing import List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from core.permissions import is_valid_permission
from core.roles import is_valid_role
from core.utils import meets_password_policy, sanitize_input
from models.enums import PermissionAction


def _clean_permissions(values: List[str]) -> List[str]:
    cleaned = [v.strip() if isinstance(v, str) else v for v in values]
    if any(not v or not is_valid_permission(v) for v in cleaned):
        raise ValueError("Invalid permissions specified")
    # keep first occurrence order, drop duplicates
    return list(dict.fromkeys(cleaned))


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value.strip() if isinstance(value, str) else value


# ===============================================================
# USER CREATION
# ===============================================================

class CreateUserData(BaseModel):
    """
    Payload used by super admins to create a Supabase Auth user and its
    user_profiles row in one step.

    Strings are sanitized (trimmed, `<`/`>` stripped) and the email is
    lower-cased before anything is sent to Supabase. When role is left
    empty the configured DEFAULT_USER_ROLE is used.
    """

    email: str
    password: str
    first_name: str
    last_name: str
    role: Optional[str] = None
    custom_permissions: List[str] = Field(default_factory=list)

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v: str) -> str:
        v = sanitize_input(v)
        if len(v) < 2:
            raise ValueError("First name must be at least 2 characters long")
        return v

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, v: str) -> str:
        v = sanitize_input(v)
        if len(v) < 2:
            raise ValueError("Last name must be at least 2 characters long")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        try:
            info = validate_email(sanitize_input(v), check_deliverability=False)
        except EmailNotValidError:
            raise ValueError("Valid email address is required")
        return info.normalized.lower()

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not meets_password_policy(v):
            raise ValueError(
                "Password must be at least 8 characters with uppercase, lowercase, and number"
            )
        return v

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v):
        v = _blank_to_none(v)
        if v is not None and not is_valid_role(v):
            raise ValueError("Invalid role specified")
        return v

    @field_validator("custom_permissions")
    @classmethod
    def _custom_permissions(cls, v: List[str]) -> List[str]:
        return _clean_permissions(v)


# ===============================================================
# GROUP CREATION
# ===============================================================

class CreateGroupData(BaseModel):
    name: str
    description: str
    job_description: Optional[str] = None
    permissions: List[str]

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = sanitize_input(v)
        if len(v) < 3:
            raise ValueError("Group name must be at least 3 characters long")
        return v

    @field_validator("description")
    @classmethod
    def _description(cls, v: str) -> str:
        v = sanitize_input(v)
        if len(v) < 10:
            raise ValueError("Group description must be at least 10 characters long")
        return v

    @field_validator("job_description")
    @classmethod
    def _job_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return sanitize_input(v) or None

    @field_validator("permissions")
    @classmethod
    def _permissions(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one permission must be specified")
        return _clean_permissions(v)


class JobDescriptionGroupData(BaseModel):
    """
    Input for a group whose permissions are generated from the job
    rather than listed by hand.
    """

    title: str
    description: str
    department: str

    @field_validator("title", "description", "department")
    @classmethod
    def _required(cls, v: str, info: ValidationInfo) -> str:
        v = sanitize_input(v)
        if not v:
            label = "Job title" if info.field_name == "title" else info.field_name.capitalize()
            raise ValueError(f"{label} is required")
        return v


# ===============================================================
# PERMISSION ASSIGNMENT
# ===============================================================

class PermissionAssignment(BaseModel):
    """
    Targets exactly one of user_id / group_id.
      add      → union (adding a held permission is a no-op)
      remove   → filter out
      replace  → discard the existing list entirely
    """

    user_id: Optional[str] = None
    group_id: Optional[str] = Field(default=None, validate_default=True)
    permissions: List[str]
    action: PermissionAction

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id(cls, v):
        return _blank_to_none(v)

    @field_validator("group_id", mode="before")
    @classmethod
    def _group_id(cls, v, info: ValidationInfo):
        v = _blank_to_none(v)
        user_id = info.data.get("user_id")
        if v is None and user_id is None:
            raise ValueError("Must specify either userId or groupId for permission assignment")
        if v is not None and user_id is not None:
            raise ValueError("Cannot specify both userId and groupId for permission assignment")
        return v

    @field_validator("permissions")
    @classmethod
    def _permissions(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one permission must be specified")
        return _clean_permissions(v)

    @field_validator("action", mode="before")
    @classmethod
    def _action(cls, v):
        if v not in PermissionAction.list():
            raise ValueError("Action must be one of: add, remove, replace")
        return v


# ===============================================================
# REPORTING
# ===============================================================

class SystemStats(BaseModel):
    total_users: int
    active_users: int
    total_groups: int
    super_admins: int
