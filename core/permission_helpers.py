# core/permission_helpers.py

from typing import FrozenSet, Iterable, List, Optional

from core.logging_config import logger
from core.permissions import ALL_PERMISSIONS, WILDCARD, Permission, describe_permission
from core.roles import SUPER_ADMIN_ROLE, get_role_hierarchy, role_permissions
from models.profile import PermissionCheck, UserProfile


# -----------------------------------------------------
# Collect effective permissions:
#   • role-based permissions
#   • user-specific custom_permissions
# Super admins (flag) get the whole catalog.
# -----------------------------------------------------
def resolve_effective_permissions(profile: Optional[UserProfile]) -> FrozenSet[Permission]:
    if profile is None:
        return frozenset()

    # Super admin = master key
    if profile.is_super_admin:
        return ALL_PERMISSIONS

    custom = profile.custom_permissions or []

    # Legacy rows may still carry the wildcard
    if WILDCARD in custom:
        return ALL_PERMISSIONS

    effective = set(role_permissions(profile.role))

    for raw in custom:
        try:
            effective.add(Permission(raw))
        except ValueError:
            logger.warning(f"Ignoring unknown permission '{raw}' on profile {profile.user_id}")

    return frozenset(effective)


# -----------------------------------------------------
# Permission evaluation
# -----------------------------------------------------
def has_permission(profile: Optional[UserProfile], permission: str) -> bool:
    return permission in resolve_effective_permissions(profile)


def has_any_permission(profile: Optional[UserProfile], permissions: Iterable[str]) -> bool:
    effective = resolve_effective_permissions(profile)
    return any(p in effective for p in permissions)


def has_all_permissions(profile: Optional[UserProfile], permissions: Iterable[str]) -> bool:
    effective = resolve_effective_permissions(profile)
    return all(p in effective for p in permissions)


def check_permissions(profile: Optional[UserProfile], permissions: Iterable[str]) -> List[PermissionCheck]:
    """Per-permission grant report, in the order asked."""
    effective = resolve_effective_permissions(profile)
    return [
        PermissionCheck(
            permission=p,
            granted=p in effective,
            description=describe_permission(p),
        )
        for p in permissions
    ]


# ============================================================
# ROLE HELPERS
# ============================================================

def is_super_admin(profile: Optional[UserProfile]) -> bool:
    """Flag or role: either one makes the profile a super admin."""
    if profile is None:
        return False
    return profile.is_super_admin or profile.role == SUPER_ADMIN_ROLE


def get_primary_role(profile: Optional[UserProfile]) -> Optional[str]:
    """
    The most privileged role the profile effectively holds.
    Super admins report 'super-admin' regardless of their stored role.
    """
    if profile is None:
        return None
    if is_super_admin(profile):
        return SUPER_ADMIN_ROLE
    if profile.role in get_role_hierarchy():
        return profile.role
    return None
