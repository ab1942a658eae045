# core/config_validator.py

from typing import List

from core.config import settings
from core.logging_config import logger
from core.roles import is_valid_role
from core.utils import meets_password_policy


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing (or unusable) required variables.
    """
    missing = []

    # Every store and the identity provider go through the service-role client
    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    # New users get this role when none is given
    if not is_valid_role(settings.DEFAULT_USER_ROLE):
        missing.append(f"DEFAULT_USER_ROLE (unknown role '{settings.DEFAULT_USER_ROLE}')")

    return missing


def validate_optional_config() -> List[str]:
    """
    Validate optional but recommended configuration.
    Returns a list of warnings.
    """
    warnings = []

    password = settings.DEFAULT_SUPER_ADMIN_PASSWORD
    if not password:
        warnings.append(
            "DEFAULT_SUPER_ADMIN_PASSWORD (a random password is generated at bootstrap)"
        )
    elif not meets_password_policy(password):
        warnings.append("DEFAULT_SUPER_ADMIN_PASSWORD does not meet the password policy")

    return warnings


def validate_config_on_startup():
    """
    Validate configuration before wiring the Supabase-backed services.
    Raises RuntimeError if critical config is missing.
    Logs warnings for optional config.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    for warning in missing_optional:
        logger.warning(f"Optional configuration missing: {warning}")

    logger.info("Configuration validation passed")
