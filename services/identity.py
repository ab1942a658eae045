# services/identity.py

from typing import Any, Dict, Optional

from supabase import Client

from core.errors import ExternalFailure, supabase_error
from core.logging_config import logger
from core.supabase_helpers import require_client
from models.profile import Identity


# ============================================================
# Supabase Auth identity provider
# ============================================================
# get_current_identity() answers "who is calling" from the caller's
# access token; create_identity() provisions a confirmed auth user
# through the service-role admin API.
# ============================================================

class SupabaseIdentityProvider:
    def __init__(self, client: Optional[Client], access_token: Optional[str] = None):
        self.client = client
        self.access_token = access_token

    def get_current_identity(self) -> Optional[Identity]:
        """Fails closed: any auth error means nobody is calling."""
        if not self.access_token or self.client is None:
            return None

        try:
            auth_resp = self.client.auth.get_user(self.access_token)
        except Exception as e:
            logger.warning(f"Token verification failed: {e}")
            return None

        if not auth_resp or not auth_resp.user:
            return None

        auth_user = auth_resp.user
        return Identity(id=str(auth_user.id), email=auth_user.email)

    def create_identity(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Identity:
        client = require_client(self.client)

        create_payload = {
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": metadata or {},
        }

        try:
            user_resp = client.auth.admin.create_user(create_payload)
        except Exception as e:
            supabase_error(e, "Supabase user creation failed")

        # user_resp.user is an object, not dict
        new_user_id = getattr(user_resp.user, "id", None) if user_resp else None
        if not new_user_id:
            raise ExternalFailure("Supabase user creation failed: no user returned")

        return Identity(id=str(new_user_id), email=email)
