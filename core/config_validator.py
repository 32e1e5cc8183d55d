# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Settings the directory cannot serve a request without.
    Returns the problems found (empty when all is well).
    """
    problems = []

    if not settings.SUPABASE_URL:
        problems.append("SUPABASE_URL is not set")
    elif not settings.SUPABASE_URL.startswith(("https://", "http://localhost", "http://127.0.0.1")):
        problems.append("SUPABASE_URL must be an https:// URL")

    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        problems.append("SUPABASE_SERVICE_ROLE_KEY is not set")
    elif settings.SUPABASE_SERVICE_ROLE_KEY == settings.SUPABASE_ANON_KEY:
        # The store evaluates the rules itself and expects to bypass RLS
        problems.append("SUPABASE_SERVICE_ROLE_KEY is set to the anon key")

    return problems


def validate_optional_config() -> List[str]:
    """Recommended settings; reported as warnings only."""
    warnings = []

    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY (optional but recommended)")
    if not settings.FRONTEND_DOMAIN:
        warnings.append("FRONTEND_DOMAIN (CORS limited to FRONTEND_DOMAINS)")

    return warnings


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Raises RuntimeError on required-config problems outside development.
    """
    problems = validate_required_config()

    for warning in validate_optional_config():
        logger.warning(f"Optional configuration missing: {warning}")

    if problems:
        error_msg = f"Invalid configuration: {'; '.join(problems)}"
        if settings.ENV == "development":
            logger.warning(error_msg)
        else:
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        return

    logger.info("Configuration validation passed")
