"""
Configuration module.

Handles environment variables, API keys, and application settings.
"""

from ideas_central.config.config import (
    APP_ENV,
    DEBUG,
    LOG_LEVEL,
    STORAGE_BACKEND,
    SUPABASE_URL,
    SUPABASE_KEY,
    REQUEST_TIMEOUT,
    RESEND_API_KEY,
    MAIL_FROM,
    MENTOR_CONTACT_EMAIL,
    IDEMPOTENCY_WINDOW_SECONDS,
    ALLOW_REEVALUATION,
    BCRYPT_ROUNDS,
    VALID_BACKENDS,
    is_production,
    is_development,
    is_supabase_configured,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "STORAGE_BACKEND",
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "REQUEST_TIMEOUT",
    "RESEND_API_KEY",
    "MAIL_FROM",
    "MENTOR_CONTACT_EMAIL",
    "IDEMPOTENCY_WINDOW_SECONDS",
    "ALLOW_REEVALUATION",
    "BCRYPT_ROUNDS",
    "VALID_BACKENDS",
    "is_production",
    "is_development",
    "is_supabase_configured",
    "validate_config",
    "print_config_summary",
]
