"""
Credential and token primitives.

- Password hashing with bcrypt
- Signed access tokens (JWT via python-jose) binding a user id
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from snafles.errors import ExpiredToken, InvalidToken


ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7
DEFAULT_HASH_ROUNDS = 12


# =============================================================================
# Passwords
# =============================================================================

def get_password_hash(password: str, rounds: int = DEFAULT_HASH_ROUNDS) -> str:
    """Hash a plaintext password for storage."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a plaintext password against a stored hash."""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # Malformed stored hash
        return False


# =============================================================================
# Tokens
# =============================================================================

class TokenCodec:
    """
    Issues and verifies signed principal-identity tokens.

    The secret is read once at startup. Rotating it invalidates every
    outstanding token.

    Usage:
        codec = TokenCodec(secret="s3cret")
        token = codec.issue("42")
        codec.verify(token)  # -> "42"
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = ALGORITHM,
        expires_delta: timedelta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, principal_id: str, now: Optional[datetime] = None) -> str:
        """
        Create a token for a principal.

        Args:
            principal_id: Id of the user the token asserts.
            now: Issuance time. Defaults to the current UTC time.

        Returns:
            Encoded JWT.
        """
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(principal_id),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.expires_delta).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Decode a token and return the principal id it carries.

        Raises:
            ExpiredToken: The token is past its expiry.
            InvalidToken: Bad signature, malformed token or missing subject.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise ExpiredToken()
        except JWTError as e:
            raise InvalidToken(detail=str(e))

        principal_id = payload.get("sub")
        if not principal_id:
            raise InvalidToken(detail="Token has no subject")
        return principal_id
