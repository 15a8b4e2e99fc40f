"""
In-memory identity provider.

Keeps users in a dict with bcrypt password hashes. Used for local
development and tests.
"""

import uuid
from dataclasses import dataclass
from typing import Dict, Optional

import bcrypt

from ideas_central.config import BCRYPT_ROUNDS
from ideas_central.errors import AuthenticationError, ValidationError
from ideas_central.identity.base import Identity, IdentityProvider, validate_role
from ideas_central.log import get_logger

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6

# bcrypt only reads the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def normalize_email(email: str) -> str:
    """Lowercase + trim."""
    return (email or "").strip().lower()


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash password with bcrypt (BCRYPT_ROUNDS unless rounds is given)."""
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds or BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))


@dataclass
class _Account:
    identity: Identity
    password_hash: str


class InMemoryIdentityProvider(IdentityProvider):
    """
    Identity provider backed by a dict keyed by normalized email.

    Usage:
        identity = InMemoryIdentityProvider()
        identity.sign_up("asha@example.edu", "secret1", "Asha", "Rao", "student")
        user = identity.authenticate("asha@example.edu", "secret1")
    """

    def __init__(self):
        self._accounts: Dict[str, _Account] = {}
        self._current: Optional[Identity] = None

    def sign_up(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: str,
        department: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> Identity:
        key = normalize_email(email)
        if not key or "@" not in key:
            raise ValidationError(f"Invalid email address: {email!r}")
        password = (password or "").strip()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        validate_role(role)
        if key in self._accounts:
            raise ValidationError(f"User already exists: {key}")

        identity = Identity(
            id=f"user-{uuid.uuid4()}",
            email=key,
            role=role,
            first_name=(first_name or "").strip(),
            last_name=(last_name or "").strip(),
            department=department,
            student_id=student_id,
        )
        self._accounts[key] = _Account(identity=identity, password_hash=hash_password(password))

        logger.info("Registered %s user %s", role, identity.id)
        return identity

    def authenticate(self, email: str, password: str) -> Identity:
        account = self._accounts.get(normalize_email(email))
        if account is None or not verify_password((password or "").strip(), account.password_hash):
            logger.warning("Failed sign-in for %s", normalize_email(email))
            raise AuthenticationError("Invalid email or password")

        self._current = account.identity
        logger.info("Signed in user %s", account.identity.id)
        return account.identity

    def current_user(self) -> Optional[Identity]:
        return self._current

    def sign_out(self) -> None:
        self._current = None

    def get_user(self, user_id: str) -> Optional[Identity]:
        for account in self._accounts.values():
            if account.identity.id == user_id:
                return account.identity
        return None

    def __len__(self) -> int:
        return len(self._accounts)
