"""
Principal resolution and role checks.

Turns a bearer token into a live user record and decides whether that
user may proceed.
"""

from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from snafles.errors import (
    Forbidden,
    InvalidCredentials,
    PrincipalNotFound,
    Unauthenticated,
)
from snafles.security import TokenCodec, verify_password
from snafles.storage.models import Role, User
from snafles.storage.repository import UserRepository


class PrincipalResolver:
    """
    Maps tokens and credentials to users.

    Args:
        codec: Token codec sharing the process secret.
        users: Live user repository.
    """

    def __init__(self, codec: TokenCodec, users: UserRepository):
        self.codec = codec
        self.users = users

    def resolve(self, token: Optional[str]) -> User:
        """
        Resolve a token to the user it names.

        Raises:
            Unauthenticated: No token supplied.
            InvalidToken / ExpiredToken: From the codec.
            PrincipalNotFound: The user id no longer exists.
            Forbidden: The account has been deactivated.
        """
        if not token:
            raise Unauthenticated()

        principal_id = self.codec.verify(token)

        user = self.users.get(principal_id)
        if user is None:
            logger.warning(f"Token for unknown user {principal_id}")
            raise PrincipalNotFound(principal_id)
        if not user.is_active:
            raise Forbidden("Account is deactivated")
        return user

    def authenticate(
        self,
        email: str,
        password: str,
        role: Optional[Role] = None,
    ) -> User:
        """
        Check an email/password pair and refresh the last-login time.

        Unknown email, wrong password and wrong role fail the same way.
        """
        message = "Invalid vendor credentials" if role == Role.VENDOR else "Invalid credentials"

        user = self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentials(message)
        if role is not None and user.role != role:
            raise InvalidCredentials(message)
        if not user.is_active:
            raise Forbidden("Account is deactivated")

        return self.users.update(user.id, last_login=datetime.now(timezone.utc))

    def issue_token(self, user: User) -> str:
        return self.codec.issue(user.id)


def require_role(principal: User, role: Role) -> None:
    """Raise Forbidden unless the principal holds the role."""
    if principal.role != role:
        raise Forbidden(f"Access denied. {role.value.capitalize()} role required.")
