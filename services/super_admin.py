# services/super_admin.py

import secrets
import string
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from core.config import settings
from core.errors import (
    ExternalFailure,
    InvalidInput,
    NotFound,
    PermissionDenied,
    ProtectedEntity,
    operation_boundary,
)
from core.job_descriptions import generate_permissions_from_job_description
from core.logging_config import logger
from core.permission_helpers import is_super_admin
from core.permissions import ALL_PERMISSIONS, describe_permission
from core.roles import SUPER_ADMIN_ROLE, get_roles_with_permission, is_valid_role
from models.admin import (
    CreateGroupData,
    CreateUserData,
    JobDescriptionGroupData,
    PermissionAssignment,
    SystemStats,
)
from models.enums import PermissionAction
from models.profile import UserProfile
from models.results import OperationResult

ModelT = TypeVar("ModelT", bound=BaseModel)

_PAST_TENSE = {
    PermissionAction.add: "added",
    PermissionAction.remove: "removed",
    PermissionAction.replace: "replaced",
}


# ============================================================
# Input helpers
# ============================================================

def _parse(model: Type[ModelT], data: Union[ModelT, dict]) -> ModelT:
    """Validate raw input before anything touches Supabase."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidInput.from_validation_error(exc) from exc


def _require_id(value: Optional[str], label: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInput([f"{label} is required"])
    return str(value).strip()


def apply_permission_action(
    action: PermissionAction,
    current: List[str],
    permissions: List[str],
) -> List[str]:
    if action == PermissionAction.add:
        return list(current) + [p for p in permissions if p not in current]
    if action == PermissionAction.remove:
        removed = set(permissions)
        return [p for p in current if p not in removed]
    return list(permissions)


def generate_password(length: int = 20) -> str:
    """Random password satisfying the upper/lower/digit policy."""
    alphabet = string.ascii_letters + string.digits
    while True:
        candidate = "".join(secrets.choice(alphabet) for _ in range(length))
        if (
            any(c.islower() for c in candidate)
            and any(c.isupper() for c in candidate)
            and any(c.isdigit() for c in candidate)
        ):
            return candidate


# ============================================================
# SUPER ADMIN SERVICE
# ============================================================

class SuperAdminService:
    """
    User, group and permission administration.

    Every operation validates its input first, then re-verifies that the
    caller is an active super admin, then acts. The only exception is
    ensure_default_super_admin(), the bootstrap path.
    """

    def __init__(self, authorization, identity, profiles, groups):
        self.authorization = authorization
        self.identity = identity
        self.profiles = profiles
        self.groups = groups

    # -----------------------------------------------------
    # Access
    # -----------------------------------------------------
    def _require_super_admin(self) -> UserProfile:
        profile = self.authorization.require_active_profile()
        if not is_super_admin(profile):
            logger.warning(f"Super admin access denied for {profile.user_id}")
            raise PermissionDenied("Super admin access required")
        return profile

    @operation_boundary("Verify super admin access")
    def verify_super_admin_access(self) -> OperationResult:
        profile = self._require_super_admin()
        return OperationResult.ok(
            "Super admin access verified",
            data={"user_id": profile.user_id, "email": profile.email},
        )

    # -----------------------------------------------------
    # Users
    # -----------------------------------------------------
    @operation_boundary("Create user")
    def create_user(self, data: Union[CreateUserData, dict]) -> OperationResult:
        payload = _parse(CreateUserData, data)
        actor = self._require_super_admin()

        role = payload.role or settings.DEFAULT_USER_ROLE

        identity = self.identity.create_identity(
            payload.email,
            payload.password,
            {
                "first_name": payload.first_name,
                "last_name": payload.last_name,
                "full_name": f"{payload.first_name} {payload.last_name}",
                "role": role,
            },
        )

        profile = UserProfile(
            user_id=identity.id,
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=role,
            is_super_admin=role == SUPER_ADMIN_ROLE,
            custom_permissions=payload.custom_permissions,
            is_active=True,
        )

        try:
            stored = self.profiles.upsert_profile(profile)
        except ExternalFailure as exc:
            # No rollback: the auth user stays behind and has to be cleaned up by hand.
            raise ExternalFailure(
                f"Auth user {identity.id} ({payload.email}) was created "
                f"but its profile could not be saved: {exc.detail}"
            ) from exc

        logger.info(f"User {payload.email} ({identity.id}) created by {actor.user_id} with role {role}")

        return OperationResult.ok(
            f"User {payload.email} created successfully",
            data=stored.model_dump(mode="json"),
        )

    @operation_boundary("Assign role")
    def assign_role(self, user_id: str, role: str) -> OperationResult:
        user_id = _require_id(user_id, "User id")
        if not is_valid_role(role):
            raise InvalidInput(["Invalid role specified"])
        actor = self._require_super_admin()

        target = self.profiles.get_profile(user_id)
        if target is None:
            raise NotFound("User not found")
        if is_super_admin(target) and role != SUPER_ADMIN_ROLE:
            raise ProtectedEntity("Cannot demote a super admin")

        updated = self.profiles.update_profile(
            user_id,
            {"role": role, "is_super_admin": role == SUPER_ADMIN_ROLE},
        )
        if updated is None:
            raise NotFound("User not found")

        logger.info(f"Role of {user_id} set to {role} by {actor.user_id}")
        return OperationResult.ok(
            f"Role {role} assigned successfully",
            data={"user_id": user_id, "role": role},
        )

    @operation_boundary("Delete user")
    def delete_user(self, user_id: str) -> OperationResult:
        user_id = _require_id(user_id, "User id")
        actor = self._require_super_admin()

        target = self.profiles.get_profile(user_id)
        if target is None:
            raise NotFound("User not found")
        if is_super_admin(target):
            raise ProtectedEntity("Cannot delete super admin users")

        if not self.profiles.set_profile_active(user_id, False):
            raise NotFound("User not found")

        logger.info(f"User {user_id} deactivated by {actor.user_id}")
        return OperationResult.ok("User deactivated successfully", data={"user_id": user_id})

    @operation_boundary("Get users")
    def get_all_users(self) -> OperationResult:
        self._require_super_admin()
        users = self.profiles.list_profiles()
        return OperationResult.ok(f"Retrieved {len(users)} users", data=users)

    # -----------------------------------------------------
    # Groups
    # -----------------------------------------------------
    def _store_group(self, payload: CreateGroupData, actor: UserProfile) -> OperationResult:
        group = self.groups.insert_group(
            {
                "name": payload.name,
                "description": payload.description,
                "job_description": payload.job_description,
                "permissions": payload.permissions,
                "created_by": actor.user_id,
            }
        )

        logger.info(f"Group '{group.name}' ({group.id}) created by {actor.user_id}")
        return OperationResult.ok(
            f'Group "{group.name}" created successfully',
            data=group.model_dump(mode="json"),
        )

    @operation_boundary("Create group")
    def create_group(self, data: Union[CreateGroupData, dict]) -> OperationResult:
        payload = _parse(CreateGroupData, data)
        actor = self._require_super_admin()
        return self._store_group(payload, actor)

    @operation_boundary("Create group from job description")
    def create_group_from_job_description(
        self,
        title: str,
        description: str,
        department: str,
    ) -> OperationResult:
        job = _parse(
            JobDescriptionGroupData,
            {"title": title, "description": description, "department": department},
        )
        payload = _parse(
            CreateGroupData,
            {
                "name": f"{job.department} - {job.title}",
                "description": f"Custom permission group for {job.title} role in {job.department}",
                "job_description": job.description,
                "permissions": [
                    p.value
                    for p in generate_permissions_from_job_description(
                        job.title, job.description, job.department
                    )
                ],
            },
        )
        actor = self._require_super_admin()
        return self._store_group(payload, actor)

    @operation_boundary("Delete group")
    def delete_group(self, group_id: str) -> OperationResult:
        group_id = _require_id(group_id, "Group id")
        actor = self._require_super_admin()

        if self.groups.get_group(group_id) is None:
            raise NotFound("Group not found")
        if not self.groups.set_group_active(group_id, False):
            raise NotFound("Group not found")

        logger.info(f"Group {group_id} deactivated by {actor.user_id}")
        return OperationResult.ok("Group deactivated successfully", data={"group_id": group_id})

    @operation_boundary("Get groups")
    def get_all_groups(self) -> OperationResult:
        self._require_super_admin()
        groups = self.groups.list_groups(active_only=True)
        return OperationResult.ok(f"Retrieved {len(groups)} groups", data=groups)

    @operation_boundary("Assign user to group")
    def assign_user_to_group(self, user_id: str, group_id: str) -> OperationResult:
        """Merges the group's permissions into the user's custom permissions."""
        user_id = _require_id(user_id, "User id")
        group_id = _require_id(group_id, "Group id")
        actor = self._require_super_admin()

        profile = self.profiles.get_profile(user_id)
        if profile is None:
            raise NotFound("User not found")
        group = self.groups.get_group(group_id)
        if group is None or not group.is_active:
            raise NotFound("Group not found or inactive")

        merged = apply_permission_action(
            PermissionAction.add, profile.custom_permissions, group.permissions
        )
        if self.profiles.update_profile(user_id, {"custom_permissions": merged}) is None:
            raise NotFound("User not found")

        logger.info(f"User {user_id} given permissions of group {group_id} by {actor.user_id}")
        return OperationResult.ok(
            f'User added to group "{group.name}"',
            data={"user_id": user_id, "group_id": group_id, "permissions": merged},
        )

    # -----------------------------------------------------
    # Permissions
    # -----------------------------------------------------
    @operation_boundary("Assign permissions")
    def assign_permissions(self, assignment: Union[PermissionAssignment, dict]) -> OperationResult:
        payload = _parse(PermissionAssignment, assignment)
        actor = self._require_super_admin()
        verb = _PAST_TENSE[payload.action]

        if payload.user_id:
            profile = self.profiles.get_profile(payload.user_id)
            if profile is None:
                raise NotFound("User not found")

            new_permissions = apply_permission_action(
                payload.action, profile.custom_permissions, payload.permissions
            )
            if self.profiles.update_profile(payload.user_id, {"custom_permissions": new_permissions}) is None:
                raise NotFound("User not found")

            logger.info(f"Permissions {verb} for user {payload.user_id} by {actor.user_id}")
            return OperationResult.ok(
                f"Permissions {verb} for user successfully",
                data={"user_id": payload.user_id, "permissions": new_permissions},
            )

        group = self.groups.get_group(payload.group_id)
        if group is None:
            raise NotFound("Group not found")

        new_permissions = apply_permission_action(
            payload.action, group.permissions, payload.permissions
        )
        if self.groups.update_group(payload.group_id, {"permissions": new_permissions}) is None:
            raise NotFound("Group not found")

        logger.info(f"Permissions {verb} for group {payload.group_id} by {actor.user_id}")
        return OperationResult.ok(
            f"Permissions {verb} for group successfully",
            data={"group_id": payload.group_id, "permissions": new_permissions},
        )

    @operation_boundary("Get permissions")
    def get_all_permissions(self) -> OperationResult:
        self._require_super_admin()
        catalog = [
            {
                "permission": p.value,
                "description": describe_permission(p),
                "roles": get_roles_with_permission(p),
            }
            for p in sorted(ALL_PERMISSIONS, key=lambda p: p.value)
        ]
        return OperationResult.ok(f"Retrieved {len(catalog)} permissions", data=catalog)

    # -----------------------------------------------------
    # Reporting
    # -----------------------------------------------------
    @operation_boundary("Get system stats")
    def get_system_stats(self) -> OperationResult:
        self._require_super_admin()

        stats = SystemStats(
            total_users=self.profiles.count_profiles(),
            active_users=self.profiles.count_profiles({"is_active": True}),
            total_groups=self.groups.count_groups(active_only=True),
            super_admins=self.profiles.count_super_admins(active_only=True),
        )
        return OperationResult.ok("System statistics retrieved", data=stats)

    # -----------------------------------------------------
    # Bootstrap
    # -----------------------------------------------------
    @operation_boundary("Ensure default super admin")
    def ensure_default_super_admin(self) -> OperationResult:
        existing = self.profiles.find_active_super_admin()
        if existing is not None:
            return OperationResult.ok(
                "Default super admin already exists",
                data={"created": False, "user_id": existing.user_id, "email": existing.email},
            )

        logger.info("No active super admin found, creating the default one")

        email = settings.DEFAULT_SUPER_ADMIN_EMAIL.strip().lower()
        password = settings.DEFAULT_SUPER_ADMIN_PASSWORD
        generated = password is None
        if generated:
            password = generate_password()

        first_name = settings.DEFAULT_SUPER_ADMIN_FIRST_NAME
        last_name = settings.DEFAULT_SUPER_ADMIN_LAST_NAME

        identity = self.identity.create_identity(
            email,
            password,
            {
                "first_name": first_name,
                "last_name": last_name,
                "full_name": f"{first_name} {last_name}",
                "role": SUPER_ADMIN_ROLE,
            },
        )

        profile = UserProfile(
            user_id=identity.id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=SUPER_ADMIN_ROLE,
            is_super_admin=True,
            custom_permissions=sorted(p.value for p in ALL_PERMISSIONS),
            is_active=True,
        )
        try:
            self.profiles.upsert_profile(profile)
        except ExternalFailure as exc:
            raise ExternalFailure(
                f"Auth user {identity.id} ({email}) was created "
                f"but its super admin profile could not be saved: {exc.detail}"
            ) from exc

        logger.info(f"Default super admin {email} ({identity.id}) created")

        data: Dict[str, Any] = {"created": True, "user_id": identity.id, "email": email}
        if generated:
            data["generated_password"] = password
        return OperationResult.ok("Default super admin created", data=data)
