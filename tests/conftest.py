# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from unittest.mock import Mock

from core.permissions import Permission
from models.enums import ContentStatus
from models.profile import UserProfile
from models.workflow import ContentRecord
from services.authorization import AuthorizationService
from services.super_admin import SuperAdminService
from services.workflow import WorkflowEngine
from tests.fakes import (
    FakeContentStore,
    FakeGroupStore,
    FakeIdentityProvider,
    FakeProfileStore,
)


# -----------------------------------------------------
# Collaborators
# -----------------------------------------------------
@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def profiles():
    return FakeProfileStore()


@pytest.fixture
def groups():
    return FakeGroupStore()


@pytest.fixture
def content():
    return FakeContentStore()


# -----------------------------------------------------
# Services
# -----------------------------------------------------
@pytest.fixture
def authorization(identity, profiles):
    return AuthorizationService(identity, profiles)


@pytest.fixture
def workflow(authorization, content):
    return WorkflowEngine(authorization, content)


@pytest.fixture
def super_admin(authorization, identity, profiles, groups):
    return SuperAdminService(authorization, identity, profiles, groups)


# -----------------------------------------------------
# Profiles
# -----------------------------------------------------
@pytest.fixture
def admin_profile(profiles):
    """An active super admin."""
    return profiles.add(UserProfile(
        user_id="admin-1",
        email="admin@benirage.org",
        first_name="System",
        last_name="Administrator",
        role="super-admin",
        is_super_admin=True,
    ))


@pytest.fixture
def author_profile(profiles):
    return profiles.add(UserProfile(
        user_id="author-1",
        email="author@benirage.org",
        first_name="Amina",
        last_name="Uwase",
        role="contributor",
    ))


@pytest.fixture
def reviewer_profile(profiles):
    """Holds approve_review but not publish."""
    return profiles.add(UserProfile(
        user_id="reviewer-1",
        email="reviewer@benirage.org",
        first_name="Eric",
        last_name="Mugisha",
        role="subscriber",
        custom_permissions=[Permission.content_approve_review.value],
    ))


@pytest.fixture
def editor_profile(profiles):
    return profiles.add(UserProfile(
        user_id="editor-1",
        email="editor@benirage.org",
        first_name="Grace",
        last_name="Ineza",
        role="editor",
    ))


@pytest.fixture
def subscriber_profile(profiles):
    return profiles.add(UserProfile(
        user_id="subscriber-1",
        email="reader@benirage.org",
        role="subscriber",
    ))


@pytest.fixture
def login(identity):
    """Make the given profile the current caller."""
    def _login(profile: UserProfile):
        identity.login(profile.user_id, profile.email)
        return profile
    return _login


@pytest.fixture
def draft(content, author_profile):
    return content.add(ContentRecord(
        id="content-1",
        title="Community garden opening",
        author_id=author_profile.user_id,
        status=ContentStatus.draft,
    ))


@pytest.fixture
def make_content(content, author_profile):
    def _make(status: ContentStatus, content_id: str = "content-x"):
        return content.add(ContentRecord(
            id=content_id,
            title="Volunteer drive",
            author_id=author_profile.user_id,
            status=status,
        ))
    return _make


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = Mock()
    mock_table = Mock()
    mock_client.table.return_value = mock_table
    return mock_client
