from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Benirage CMS Core"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------
    # Supabase (Primary DB, Auth & Storage)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # -------------------------------------------------
    # Bootstrap super admin
    # -------------------------------------------------
    # Used by ensure_default_super_admin() when no active super admin exists.
    # If the password is left unset a strong one is generated and returned once.
    DEFAULT_SUPER_ADMIN_EMAIL: str = "admin@benirage.org"
    DEFAULT_SUPER_ADMIN_PASSWORD: Optional[str] = None
    DEFAULT_SUPER_ADMIN_FIRST_NAME: str = "System"
    DEFAULT_SUPER_ADMIN_LAST_NAME: str = "Administrator"

    # -------------------------------------------------
    # User provisioning
    # -------------------------------------------------
    DEFAULT_USER_ROLE: str = "contributor"

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()
