# services/authorization.py

from typing import Iterable, Optional

from core.errors import PermissionDenied
from core.logging_config import logger
from core.permission_helpers import has_any_permission, has_permission
from models.profile import Identity, UserProfile


class AuthorizationService:
    """
    Answers "may the current caller do X?".

    Read-only. Every lookup failure (bad token, missing profile, Supabase
    error) resolves to "no permissions" instead of propagating.
    """

    def __init__(self, identity, profiles):
        self.identity = identity
        self.profiles = profiles

    # -----------------------------------------------------
    # Caller resolution
    # -----------------------------------------------------
    def get_current_identity(self) -> Optional[Identity]:
        try:
            return self.identity.get_current_identity()
        except Exception as e:
            logger.warning(f"Identity lookup failed, treating caller as anonymous: {e}")
            return None

    def get_current_profile(self) -> Optional[UserProfile]:
        identity = self.get_current_identity()
        if identity is None:
            return None

        try:
            return self.profiles.get_profile(identity.id)
        except Exception as e:
            logger.warning(f"Profile lookup failed for {identity.id}, denying: {e}")
            return None

    def require_active_profile(self) -> UserProfile:
        """Raises PermissionDenied unless an active profile is calling."""
        profile = self.get_current_profile()
        if profile is None:
            raise PermissionDenied("User not authenticated or profile not found")
        if not profile.is_active:
            raise PermissionDenied("User profile is inactive")
        return profile

    # -----------------------------------------------------
    # Permission queries (fail closed)
    # -----------------------------------------------------
    def current_user_has_permission(self, permission: str) -> bool:
        profile = self.get_current_profile()
        if profile is None or not profile.is_active:
            return False
        return has_permission(profile, permission)

    def current_user_has_any_permission(self, permissions: Iterable[str]) -> bool:
        profile = self.get_current_profile()
        if profile is None or not profile.is_active:
            return False
        return has_any_permission(profile, permissions)

    def can_access_resource(self, resource: str, action: str) -> bool:
        return self.current_user_has_permission(f"{resource}.{action}")
