"""
Identity module.

Users, roles and sign-in.
"""

from ideas_central.identity.base import (
    REVIEWER_ROLES,
    Identity,
    IdentityProvider,
    require_role,
)
from ideas_central.identity.memory import InMemoryIdentityProvider

__all__ = [
    "REVIEWER_ROLES",
    "Identity",
    "IdentityProvider",
    "require_role",
    "InMemoryIdentityProvider",
]
