# tests/test_permissions.py

"""
Tests for the permission catalog, role definitions and effective-permission
resolution.
"""

import pytest

from core.permission_helpers import (
    check_permissions,
    get_primary_role,
    has_all_permissions,
    has_any_permission,
    has_permission,
    is_super_admin,
    resolve_effective_permissions,
)
from core.permissions import (
    ALL_PERMISSIONS,
    PERMISSION_DESCRIPTIONS,
    WILDCARD,
    Permission,
    describe_permission,
    is_valid_permission,
)
from core.roles import (
    ROLE_PERMISSIONS,
    ROLES,
    get_role_hierarchy,
    get_roles_with_permission,
    is_valid_role,
    role_permissions,
)
from models.profile import UserProfile


CHAIN = ["super-admin", "admin", "editor", "author", "contributor", "subscriber"]


# -----------------------------------------------------
# Catalog
# -----------------------------------------------------
def test_permissions_are_namespaced():
    """Every permission is a <domain>.<action> token."""
    for permission in Permission:
        domain, _, action = permission.value.partition(".")
        assert domain and action


def test_every_permission_has_a_description():
    assert set(PERMISSION_DESCRIPTIONS) == set(ALL_PERMISSIONS)
    assert describe_permission("content.publish") == "Publish reviewed content"
    assert describe_permission("nope.nothing") == "No description available"


def test_is_valid_permission():
    assert is_valid_permission("content.edit_all")
    assert not is_valid_permission("content.fly")
    assert not is_valid_permission(WILDCARD)
    assert not is_valid_permission("")


def test_wildcard_is_not_a_catalog_member():
    assert WILDCARD not in Permission.list()


# -----------------------------------------------------
# Roles
# -----------------------------------------------------
def test_role_chain_is_a_superset_chain():
    """super-admin ⊇ admin ⊇ editor ⊇ author ⊇ contributor ⊇ subscriber."""
    for higher, lower in zip(CHAIN, CHAIN[1:]):
        assert ROLE_PERMISSIONS[higher] >= ROLE_PERMISSIONS[lower], (higher, lower)


def test_super_admin_role_holds_entire_catalog():
    assert ROLE_PERMISSIONS["super-admin"] == ALL_PERMISSIONS


def test_role_permissions_stay_inside_catalog():
    for role_id, permissions in ROLE_PERMISSIONS.items():
        assert permissions <= ALL_PERMISSIONS, role_id


def test_side_roles_exist_outside_the_chain():
    for role_id in ["moderator", "seo-specialist", "designer", "developer"]:
        assert is_valid_role(role_id)
        assert role_id not in CHAIN
        assert ROLE_PERMISSIONS[role_id]
        assert not ROLE_PERMISSIONS[role_id] <= ROLE_PERMISSIONS["subscriber"]


def test_role_hierarchy_is_ordered_by_order_index():
    hierarchy = get_role_hierarchy()
    assert hierarchy[0] == "super-admin"
    assert hierarchy[-1] == "subscriber"
    indexes = [ROLES[r].order_index for r in hierarchy]
    assert indexes == sorted(indexes)


def test_unknown_role_grants_nothing():
    assert not is_valid_role("janitor")
    assert role_permissions("janitor") == frozenset()
    assert role_permissions(None) == frozenset()


def test_get_roles_with_permission():
    roles = get_roles_with_permission(Permission.content_publish)
    assert roles == ["super-admin", "admin", "editor"]


# -----------------------------------------------------
# Effective permissions
# -----------------------------------------------------
@pytest.mark.parametrize("role_id", sorted(ROLES))
def test_effective_permissions_equal_role_set(role_id):
    """A plain profile resolves to exactly its role's declared set."""
    profile = UserProfile(user_id="u", role=role_id)
    assert resolve_effective_permissions(profile) == ROLE_PERMISSIONS[role_id]


def test_custom_permissions_are_unioned():
    profile = UserProfile(
        user_id="u",
        role="subscriber",
        custom_permissions=["content.publish"],
    )
    effective = resolve_effective_permissions(profile)
    assert effective == ROLE_PERMISSIONS["subscriber"] | {Permission.content_publish}


@pytest.mark.parametrize("role_id", [None, "subscriber", "janitor"])
def test_super_admin_flag_grants_everything(role_id):
    profile = UserProfile(user_id="u", role=role_id, is_super_admin=True, custom_permissions=[])
    for permission in Permission:
        assert has_permission(profile, permission)
        assert has_permission(profile, permission.value)


def test_legacy_wildcard_resolves_to_full_catalog():
    profile = UserProfile(user_id="u", role="subscriber", custom_permissions=[WILDCARD])
    assert resolve_effective_permissions(profile) == ALL_PERMISSIONS


def test_unknown_custom_permissions_are_ignored():
    profile = UserProfile(user_id="u", role=None, custom_permissions=["content.fly", "media.view"])
    assert resolve_effective_permissions(profile) == {Permission.media_view}


def test_missing_profile_has_no_permissions():
    assert resolve_effective_permissions(None) == frozenset()
    assert not has_permission(None, "content.view")
    assert not has_any_permission(None, ["content.view"])


def test_has_any_and_all_permissions():
    profile = UserProfile(user_id="u", role="author")
    assert has_any_permission(profile, ["content.publish", "content.edit_own"])
    assert not has_any_permission(profile, ["content.publish", "users.delete"])
    assert has_all_permissions(profile, ["content.edit_own", "media.upload"])
    assert not has_all_permissions(profile, ["content.edit_own", "content.publish"])
    assert has_all_permissions(profile, [])


def test_check_permissions_reports_each_permission():
    profile = UserProfile(user_id="u", role="contributor")
    report = check_permissions(profile, ["content.create_draft", "content.publish"])
    assert [(c.permission, c.granted) for c in report] == [
        ("content.create_draft", True),
        ("content.publish", False),
    ]
    assert report[0].description == "Create content in draft mode"


# -----------------------------------------------------
# Role helpers
# -----------------------------------------------------
def test_is_super_admin_by_flag_or_role():
    assert is_super_admin(UserProfile(user_id="u", is_super_admin=True))
    assert is_super_admin(UserProfile(user_id="u", role="super-admin"))
    assert not is_super_admin(UserProfile(user_id="u", role="admin"))
    assert not is_super_admin(None)


def test_get_primary_role():
    assert get_primary_role(UserProfile(user_id="u", role="editor")) == "editor"
    assert get_primary_role(UserProfile(user_id="u", role="editor", is_super_admin=True)) == "super-admin"
    assert get_primary_role(UserProfile(user_id="u", role="janitor")) is None
    assert get_primary_role(None) is None
