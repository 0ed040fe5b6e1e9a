"""
Credential service — bcrypt password hashing and signed session tokens.

Tokens are HS256 JWTs (python-jose) carrying ``userId``, ``role`` and
``exp``. A :class:`CredentialService` is built once from settings in
``create_app`` and shared read-only by every request.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from quill.models.user import Role


class InvalidToken(Exception):
    """Bad signature, malformed token, or unusable claims."""


class ExpiredToken(InvalidToken):
    """Token signature is valid but its expiry has lapsed."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Role


# ═══════════════════════════════════════════════════════════════
#  Passwords
# ═══════════════════════════════════════════════════════════════

# bcrypt only looks at the first 72 bytes and newer releases refuse more.
BCRYPT_MAX_BYTES = 72


def _secret_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    return bcrypt.hashpw(_secret_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_secret_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash.
        return False


# bcrypt hash of a random throwaway password, checked when the email is
# unknown so failed logins take the same time either way.
DUMMY_HASH = hash_password("quill-dummy-password")


# ═══════════════════════════════════════════════════════════════
#  Tokens
# ═══════════════════════════════════════════════════════════════

class CredentialService:
    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: int, role: Role) -> str:
        """Create a signed JWT binding ``user_id`` and ``role`` with an expiry claim."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        to_encode = {
            "userId": user_id,
            "role": Role(role).value,
            "exp": expire,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require_exp": True},
            )
        except ExpiredSignatureError as e:
            raise ExpiredToken("token expired") from e
        except JWTError as e:
            raise InvalidToken("token invalid") from e

        user_id = payload.get("userId")
        # bool is an int subclass; reject it explicitly.
        if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
            raise InvalidToken("token carries no user id")
        try:
            role = Role(payload.get("role"))
        except ValueError as e:
            raise InvalidToken("token carries no valid role") from e
        return TokenClaims(user_id=user_id, role=role)
