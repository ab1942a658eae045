# services/factory.py

from typing import NamedTuple, Optional

from supabase import Client

from core.config_validator import validate_config_on_startup
from core.supabase_client import get_supabase_client
from services.authorization import AuthorizationService
from services.content import ContentStore
from services.groups import GroupStore
from services.identity import SupabaseIdentityProvider
from services.profiles import ProfileStore
from services.super_admin import SuperAdminService
from services.workflow import WorkflowEngine


class Services(NamedTuple):
    authorization: AuthorizationService
    workflow: WorkflowEngine
    super_admin: SuperAdminService


def build_services(access_token: Optional[str] = None, client: Optional[Client] = None) -> Services:
    """
    Wire the core against one Supabase client for one caller.

    access_token is the caller's Supabase JWT; without it every permission
    check fails closed (ensure_default_super_admin() still works).
    """
    if client is None:
        validate_config_on_startup()
        client = get_supabase_client()

    identity = SupabaseIdentityProvider(client, access_token)
    profiles = ProfileStore(client)
    groups = GroupStore(client)
    content = ContentStore(client)

    authorization = AuthorizationService(identity, profiles)

    return Services(
        authorization=authorization,
        workflow=WorkflowEngine(authorization, content),
        super_admin=SuperAdminService(authorization, identity, profiles, groups),
    )
