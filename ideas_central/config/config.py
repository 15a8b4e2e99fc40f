"""
Configuration module for Ideas Central.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root (parent of ideas_central/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging (only in development)
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Log level name; DEBUG=true forces "DEBUG"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# =============================================================================
# Storage Configuration
# =============================================================================

# Storage backend: "memory" (in-process, lost on exit) or "supabase"
STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory").lower()

# Supabase project URL, e.g. https://abcd.supabase.co
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")

# Supabase API key (service role key for server-side use)
SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

# HTTP request timeout in seconds
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))


# =============================================================================
# Notification Configuration
# =============================================================================

# Resend API key; when empty, decision emails go to the in-memory outbox
RESEND_API_KEY: str = os.getenv("RESEND_API_KEY", "")

# Sender shown on decision emails
MAIL_FROM: str = os.getenv("MAIL_FROM", "Ideas Central <onboarding@resend.dev>")

# Mentorship contact included in approval emails
MENTOR_CONTACT_EMAIL: str = os.getenv("MENTOR_CONTACT_EMAIL", "mentorship@example.com")


# =============================================================================
# Evaluation Workflow
# =============================================================================

# Width of the idempotency bucket for evaluation retries, in seconds
IDEMPOTENCY_WINDOW_SECONDS: int = int(os.getenv("IDEMPOTENCY_WINDOW_SECONDS", "60"))

# Allow a second evaluation to overwrite an approved/rejected idea
ALLOW_REEVALUATION: bool = os.getenv("ALLOW_REEVALUATION", "false").lower() == "true"


# =============================================================================
# Identity
# =============================================================================

# bcrypt cost factor for password hashes (4-31)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))


# =============================================================================
# Helper Functions
# =============================================================================

_SUPABASE_PLACEHOLDER = "YOUR-SUPABASE-PROJECT"

VALID_BACKENDS = ("memory", "supabase")


def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def is_supabase_configured() -> bool:
    """True when Supabase credentials are set and not the template placeholder."""
    return bool(SUPABASE_URL) and bool(SUPABASE_KEY) and _SUPABASE_PLACEHOLDER not in SUPABASE_URL


def validate_config() -> list[str]:
    """
    Validate that required configuration is present.

    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []

    if STORAGE_BACKEND not in VALID_BACKENDS:
        errors.append(f"STORAGE_BACKEND must be one of {', '.join(VALID_BACKENDS)}")

    if STORAGE_BACKEND == "supabase" and not is_supabase_configured():
        errors.append("SUPABASE_URL and SUPABASE_KEY are required for the supabase backend")

    if is_production():
        if STORAGE_BACKEND == "memory":
            errors.append("STORAGE_BACKEND=memory is not allowed in production")
        if not RESEND_API_KEY:
            errors.append("RESEND_API_KEY is required in production")

    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    if IDEMPOTENCY_WINDOW_SECONDS < 1:
        errors.append("IDEMPOTENCY_WINDOW_SECONDS must be at least 1 second")

    if not 4 <= BCRYPT_ROUNDS <= 31:
        errors.append("BCRYPT_ROUNDS must be between 4 and 31")

    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  LOG_LEVEL: {LOG_LEVEL}")
    print(f"  STORAGE_BACKEND: {STORAGE_BACKEND}")
    print(f"  SUPABASE_URL: {SUPABASE_URL or '(not set)'}")
    print(f"  SUPABASE_KEY: {'***' if SUPABASE_KEY else '(not set)'}")
    print(f"  RESEND_API_KEY: {'***' if RESEND_API_KEY else '(not set)'}")
    print(f"  MAIL_FROM: {MAIL_FROM}")
    print(f"  MENTOR_CONTACT_EMAIL: {MENTOR_CONTACT_EMAIL}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(f"  IDEMPOTENCY_WINDOW_SECONDS: {IDEMPOTENCY_WINDOW_SECONDS}s")
    print(f"  ALLOW_REEVALUATION: {ALLOW_REEVALUATION}")
    print(f"  BCRYPT_ROUNDS: {BCRYPT_ROUNDS}")
