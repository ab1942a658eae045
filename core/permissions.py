# ============================================
# PERMISSION CATALOG
# ============================================
# Closed set of `<domain>.<action>` tokens. Anything not listed here is not
# a permission: custom permissions and group permissions are validated
# against this enum at the input boundary.

from typing import Dict, FrozenSet

from models.enums import BaseStrEnum


class Permission(BaseStrEnum):

    # =====================================================
    # USERS
    # =====================================================
    users_view = "users.view"
    users_create = "users.create"
    users_edit = "users.edit"
    users_edit_own = "users.edit_own"
    users_delete = "users.delete"
    users_assign_roles = "users.assign_roles"
    users_export = "users.export"
    users_manage_all = "users.manage_all"

    # =====================================================
    # GROUPS & PERMISSIONS
    # =====================================================
    groups_view = "groups.view"
    groups_manage = "groups.manage"
    permissions_assign = "permissions.assign"

    # =====================================================
    # CONTENT
    # =====================================================
    content_view = "content.view"
    content_create_draft = "content.create_draft"
    content_edit_own = "content.edit_own"
    content_edit_all = "content.edit_all"
    content_delete_own = "content.delete_own"
    content_delete_all = "content.delete_all"
    content_view_drafts = "content.view_drafts"
    content_schedule = "content.schedule"
    content_submit_review = "content.submit_review"
    content_approve_review = "content.approve_review"
    content_publish = "content.publish"
    content_unpublish = "content.unpublish"

    # =====================================================
    # MEDIA LIBRARY
    # =====================================================
    media_view = "media.view"
    media_upload = "media.upload"
    media_edit_own = "media.edit_own"
    media_edit_all = "media.edit_all"
    media_delete = "media.delete"
    media_organize = "media.organize"

    # =====================================================
    # PAGES & TAXONOMY
    # =====================================================
    pages_view = "pages.view"
    pages_edit = "pages.edit"
    pages_publish = "pages.publish"
    pages_seo = "pages.seo"
    categories_view = "categories.view"
    categories_manage = "categories.manage"

    # =====================================================
    # COMMENTS
    # =====================================================
    comments_view = "comments.view"
    comments_create = "comments.create"
    comments_moderate = "comments.moderate"
    comments_delete = "comments.delete"

    # =====================================================
    # MEMBERSHIP & VOLUNTEERS
    # =====================================================
    membership_view_all = "membership.view_all"
    membership_approve = "membership.approve"
    volunteers_view_all = "volunteers.view_all"
    volunteers_review_applications = "volunteers.review_applications"
    volunteers_create_opportunities = "volunteers.create_opportunities"
    volunteers_assign = "volunteers.assign"

    # =====================================================
    # EVENTS & OUTREACH
    # =====================================================
    events_view_all = "events.view_all"
    events_create = "events.create"
    events_edit_own = "events.edit_own"
    events_edit_all = "events.edit_all"
    email_send_individual = "email.send_individual"

    # =====================================================
    # ANALYTICS
    # =====================================================
    analytics_view = "analytics.view"
    analytics_view_advanced = "analytics.view_advanced"
    analytics_export = "analytics.export"
    reports_generate = "reports.generate"
    reports_custom = "reports.custom"

    # =====================================================
    # SETTINGS, DESIGN & SYSTEM
    # =====================================================
    settings_view = "settings.view"
    settings_edit = "settings.edit"
    theme_customize = "theme.customize"
    plugins_manage = "plugins.manage"
    system_view_logs = "system.view_logs"
    system_manage_security = "system.manage_security"
    system_backup = "system.backup"


ALL_PERMISSIONS: FrozenSet[Permission] = frozenset(Permission)

# Legacy rows may still carry the wildcard in custom_permissions.
# It is only interpreted by core.permission_helpers.resolve_effective_permissions.
WILDCARD = "*"


PERMISSION_DESCRIPTIONS: Dict[Permission, str] = {
    Permission.users_view: "View user profiles",
    Permission.users_create: "Create new user accounts",
    Permission.users_edit: "Edit any user profile",
    Permission.users_edit_own: "Edit own profile",
    Permission.users_delete: "Deactivate user accounts",
    Permission.users_assign_roles: "Assign roles to users",
    Permission.users_export: "Export user data",
    Permission.users_manage_all: "Full user administration, including super admins",
    Permission.groups_view: "View permission groups",
    Permission.groups_manage: "Create and edit permission groups",
    Permission.permissions_assign: "Grant or revoke custom permissions",
    Permission.content_view: "View published content",
    Permission.content_create_draft: "Create content in draft mode",
    Permission.content_edit_own: "Edit own content",
    Permission.content_edit_all: "Edit any content",
    Permission.content_delete_own: "Delete own drafts",
    Permission.content_delete_all: "Delete any content",
    Permission.content_view_drafts: "View all draft content",
    Permission.content_schedule: "Schedule content publication",
    Permission.content_submit_review: "Submit content for approval",
    Permission.content_approve_review: "Approve or reject submitted content",
    Permission.content_publish: "Publish reviewed content",
    Permission.content_unpublish: "Unpublish content",
    Permission.media_view: "Browse the media library",
    Permission.media_upload: "Upload media",
    Permission.media_edit_own: "Edit own uploads",
    Permission.media_edit_all: "Edit any media item",
    Permission.media_delete: "Delete media items",
    Permission.media_organize: "Organize media folders",
    Permission.pages_view: "View pages",
    Permission.pages_edit: "Edit pages",
    Permission.pages_publish: "Publish pages",
    Permission.pages_seo: "Edit page SEO settings",
    Permission.categories_view: "View categories and tags",
    Permission.categories_manage: "Create and edit categories and tags",
    Permission.comments_view: "View comments",
    Permission.comments_create: "Post comments",
    Permission.comments_moderate: "Moderate comments",
    Permission.comments_delete: "Delete any comment",
    Permission.membership_view_all: "View all membership applications",
    Permission.membership_approve: "Approve membership applications",
    Permission.volunteers_view_all: "View all volunteers",
    Permission.volunteers_review_applications: "Review volunteer applications",
    Permission.volunteers_create_opportunities: "Post volunteer opportunities",
    Permission.volunteers_assign: "Assign volunteers to opportunities",
    Permission.events_view_all: "View all events",
    Permission.events_create: "Create events",
    Permission.events_edit_own: "Edit own events",
    Permission.events_edit_all: "Edit any event",
    Permission.email_send_individual: "Email individual members",
    Permission.analytics_view: "View analytics dashboards",
    Permission.analytics_view_advanced: "View advanced analytics",
    Permission.analytics_export: "Export analytics reports",
    Permission.reports_generate: "Generate standard reports",
    Permission.reports_custom: "Build custom reports",
    Permission.settings_view: "View site settings",
    Permission.settings_edit: "Edit site settings",
    Permission.theme_customize: "Customize the site theme",
    Permission.plugins_manage: "Install and configure plugins",
    Permission.system_view_logs: "View system logs",
    Permission.system_manage_security: "Manage security settings",
    Permission.system_backup: "Create and restore backups",
}


def is_valid_permission(value: str) -> bool:
    return value in Permission.list()


def describe_permission(permission: str) -> str:
    try:
        return PERMISSION_DESCRIPTIONS.get(Permission(permission), "No description available")
    except ValueError:
        return "No description available"
