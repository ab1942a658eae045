# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
# Each role lists its permissions explicitly. The chain
#   super-admin ⊇ admin ⊇ editor ⊇ author ⊇ contributor ⊇ subscriber
# is a convention kept by hand, not an inheritance mechanism.

from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict

from core.permissions import ALL_PERMISSIONS, Permission as P


class Role(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    permissions: FrozenSet[P]
    order_index: int


SUPER_ADMIN_ROLE = "super-admin"

_ROLE_LIST: List[Role] = [

    # =====================================================
    # SUPER ADMIN: Full access to everything
    # =====================================================
    Role(
        id=SUPER_ADMIN_ROLE,
        name="Super Administrator",
        description="Full system access with complete control",
        permissions=ALL_PERMISSIONS,
        order_index=1,
    ),

    # =====================================================
    # ADMIN: users, settings, and everything editors do
    # =====================================================
    Role(
        id="admin",
        name="Administrator",
        description="Manage users, content, and most system settings",
        permissions=frozenset({
            P.users_view, P.users_create, P.users_edit, P.users_assign_roles, P.users_export,
            P.groups_view,
            P.content_view, P.content_create_draft, P.content_edit_own, P.content_edit_all,
            P.content_delete_own, P.content_delete_all, P.content_view_drafts, P.content_schedule,
            P.content_submit_review, P.content_approve_review, P.content_publish, P.content_unpublish,
            P.media_view, P.media_upload, P.media_edit_own, P.media_edit_all, P.media_delete,
            P.media_organize,
            P.pages_view, P.pages_edit, P.pages_publish, P.pages_seo,
            P.categories_view, P.categories_manage,
            P.comments_view, P.comments_create, P.comments_moderate, P.comments_delete,
            P.membership_view_all, P.membership_approve,
            P.volunteers_view_all, P.volunteers_review_applications,
            P.analytics_view, P.analytics_export,
            P.settings_view, P.settings_edit,
            P.system_view_logs,
        }),
        order_index=2,
    ),

    # =====================================================
    # EDITOR: reviews and publishes everyone's content
    # =====================================================
    Role(
        id="editor",
        name="Editor",
        description="Create, edit, review, and publish all content",
        permissions=frozenset({
            P.content_view, P.content_create_draft, P.content_edit_own, P.content_edit_all,
            P.content_delete_own, P.content_delete_all, P.content_view_drafts, P.content_schedule,
            P.content_submit_review, P.content_approve_review, P.content_publish, P.content_unpublish,
            P.media_view, P.media_upload, P.media_edit_own, P.media_edit_all, P.media_organize,
            P.pages_view, P.pages_edit, P.pages_publish,
            P.categories_view, P.categories_manage,
            P.comments_view, P.comments_create, P.comments_moderate,
        }),
        order_index=3,
    ),

    # =====================================================
    # AUTHOR: own content, submitted for review
    # =====================================================
    Role(
        id="author",
        name="Author",
        description="Create and manage their own content",
        permissions=frozenset({
            P.content_view, P.content_create_draft, P.content_edit_own, P.content_delete_own,
            P.content_schedule, P.content_submit_review,
            P.media_view, P.media_upload, P.media_edit_own,
            P.pages_view,
            P.categories_view,
            P.comments_view, P.comments_create,
        }),
        order_index=4,
    ),

    # =====================================================
    # CONTRIBUTOR: drafts that require approval
    # =====================================================
    Role(
        id="contributor",
        name="Contributor",
        description="Create content that requires approval before publishing",
        permissions=frozenset({
            P.content_view, P.content_create_draft, P.content_edit_own, P.content_submit_review,
            P.media_view, P.media_upload,
            P.pages_view,
            P.categories_view,
            P.comments_view, P.comments_create,
        }),
        order_index=5,
    ),

    # =====================================================
    # MODERATOR
    # =====================================================
    Role(
        id="moderator",
        name="Moderator",
        description="Manage comments and user interactions",
        permissions=frozenset({
            P.content_view,
            P.comments_view, P.comments_create, P.comments_moderate, P.comments_delete,
            P.users_view,
        }),
        order_index=6,
    ),

    # =====================================================
    # SEO SPECIALIST
    # =====================================================
    Role(
        id="seo-specialist",
        name="SEO Specialist",
        description="Manage SEO settings and analytics",
        permissions=frozenset({
            P.content_view,
            P.pages_view, P.pages_edit, P.pages_seo,
            P.analytics_view, P.analytics_export,
        }),
        order_index=7,
    ),

    # =====================================================
    # DESIGNER
    # =====================================================
    Role(
        id="designer",
        name="Designer",
        description="Manage themes and visual design assets",
        permissions=frozenset({
            P.media_view, P.media_upload, P.media_organize,
            P.theme_customize,
        }),
        order_index=8,
    ),

    # =====================================================
    # DEVELOPER
    # =====================================================
    Role(
        id="developer",
        name="Developer",
        description="Technical management, plugins, and integrations",
        permissions=frozenset({
            P.plugins_manage, P.theme_customize,
            P.settings_view,
            P.system_view_logs,
        }),
        order_index=9,
    ),

    # =====================================================
    # SUBSCRIBER: read-only
    # =====================================================
    Role(
        id="subscriber",
        name="Viewer/Subscriber",
        description="Read-only access to content",
        permissions=frozenset({
            P.content_view,
            P.media_view,
            P.pages_view,
            P.categories_view,
            P.comments_view, P.comments_create,
        }),
        order_index=10,
    ),
]

ROLES: Dict[str, Role] = {role.id: role for role in _ROLE_LIST}

ROLE_PERMISSIONS: Dict[str, FrozenSet[P]] = {
    role.id: role.permissions for role in _ROLE_LIST
}


def get_role(role_id: Optional[str]) -> Optional[Role]:
    return ROLES.get(role_id) if role_id else None


def is_valid_role(role_id: Optional[str]) -> bool:
    return role_id in ROLES


def role_permissions(role_id: Optional[str]) -> FrozenSet[P]:
    """Unknown or missing roles grant nothing."""
    return ROLE_PERMISSIONS.get(role_id, frozenset()) if role_id else frozenset()


def get_role_hierarchy() -> List[str]:
    """Role ids, most privileged first."""
    return [role.id for role in sorted(_ROLE_LIST, key=lambda r: r.order_index)]


def get_roles_with_permission(permission: P) -> List[str]:
    return [role_id for role_id in get_role_hierarchy() if permission in ROLE_PERMISSIONS[role_id]]
