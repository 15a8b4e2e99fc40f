"""
Identity abstraction for Ideas Central.

The core never stores users itself; it asks an identity provider who is
acting and checks their role.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ideas_central.errors import AuthorizationError, ValidationError
from ideas_central.models import ROLES

# Roles allowed to evaluate ideas
REVIEWER_ROLES = ("faculty", "admin")


@dataclass
class Identity:
    """
    An authenticated user.

    Attributes:
        id: User id.
        email: Login email (stored lowercase).
        role: One of student, faculty, admin.
        first_name / last_name: Display name parts.
        department: Optional department.
        student_id: Optional student number.
    """
    id: str
    email: str
    role: str
    first_name: str = ""
    last_name: str = ""
    department: Optional[str] = None
    student_id: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_reviewer(self) -> bool:
        return self.role in REVIEWER_ROLES

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "department": self.department,
            "student_id": self.student_id,
        }


def require_role(identity: Optional[Identity], *roles: str) -> Identity:
    """
    Check that identity is present and holds one of roles.

    Raises:
        AuthorizationError: If nobody is signed in or the role does not match.
    """
    if identity is None:
        raise AuthorizationError("Sign in required")
    if roles and identity.role not in roles:
        raise AuthorizationError(
            f"Role {identity.role!r} is not allowed; requires one of {', '.join(roles)}"
        )
    return identity


def validate_role(role: str) -> str:
    if role not in ROLES:
        raise ValidationError(f"role must be one of {', '.join(ROLES)}, got {role!r}")
    return role


class IdentityProvider(ABC):
    """Interface for sign-up, sign-in and session lookup."""

    @abstractmethod
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
        """
        Register a user.

        Raises:
            ValidationError: Bad email/password/role, or the email is taken.
        """
        pass

    @abstractmethod
    def authenticate(self, email: str, password: str) -> Identity:
        """
        Sign a user in and make them the current user.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """
        pass

    @abstractmethod
    def current_user(self) -> Optional[Identity]:
        pass

    @abstractmethod
    def sign_out(self) -> None:
        pass
