"""
Auth Service
============

Registers dashboard users and hands out bearer tokens.

- register: needs the provisioning secret; stores a bcrypt hash, returns a token
- login: username + password in, token out
- verify: token in, caller identity out

Tokens are HS256 JWTs valid for 7 days. Any valid token can read every
device's records; there is no per-user scoping yet.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import bcrypt
import jwt

from devicesync.config import TOKEN_ALGORITHM, TOKEN_TTL
from devicesync.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from devicesync.models import TokenIdentity
from devicesync.services.record_store import RecordStore

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input
MAX_PASSWORD_BYTES = 72

INVALID_CREDENTIALS = "Invalid username or password"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthService:
    """
    Users and tokens.

    Args:
        store: Where users live
        provisioning_secret: Shared secret a caller must know to register.
            Empty means registration is closed.
        token_secret: Key for signing tokens
        token_ttl: How long a token stays valid
        clock: Returns "now" as an aware datetime (swappable in tests)
    """

    def __init__(
        self,
        store: RecordStore,
        provisioning_secret: str,
        token_secret: str,
        token_ttl: timedelta = TOKEN_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.provisioning_secret = provisioning_secret
        self.token_secret = token_secret
        self.token_ttl = token_ttl
        self.clock = clock

    # =========================================================================
    # REGISTER / LOGIN
    # =========================================================================

    def register(
        self,
        username: Optional[str],
        password: Optional[str],
        provisioning_secret: Optional[str],
    ) -> str:
        """
        Create a user and return a fresh token.

        Raises:
            ValidationError: Missing field, or password too long
            ForbiddenError: Wrong provisioning secret
            ConflictError: Username taken
        """
        if not username or not password or not provisioning_secret:
            raise ValidationError("username, password and provisioningSecret are required")

        if not self.provisioning_secret or not hmac.compare_digest(
            provisioning_secret.encode("utf-8"), self.provisioning_secret.encode("utf-8")
        ):
            logger.warning(f"Registration refused for '{username}': bad provisioning secret")
            raise ForbiddenError("Invalid provisioning secret")

        password_bytes = password.encode("utf-8")
        if len(password_bytes) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        password_hash = bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")
        user = self.store.create_user(username, password_hash)

        logger.info(f"Registered user '{username}'")
        return self.issue_token(user.id, username)

    def login(self, username: Optional[str], password: Optional[str]) -> str:
        """
        Check credentials and return a fresh token.

        Unknown user and wrong password give the same error.

        Raises:
            ValidationError: Missing username or password
            UnauthorizedError: Bad credentials
        """
        if not username or not password:
            raise ValidationError("username and password are required")

        user = self.store.find_user(username)
        if user is None or not self._password_matches(password, user.passwordHash):
            logger.warning(f"Failed login for '{username}'")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return self.issue_token(user.id, username)

    @staticmethod
    def _password_matches(password: str, password_hash: str) -> bool:
        password_bytes = password.encode("utf-8")
        if not password_hash or len(password_bytes) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(password_bytes, password_hash.encode("utf-8"))
        except ValueError:
            # Stored hash isn't a bcrypt hash
            return False

    # =========================================================================
    # TOKENS
    # =========================================================================

    def issue_token(self, user_id: str, username: str) -> str:
        """Sign a token for a user, valid for ``token_ttl`` from now."""
        issued_at = self.clock()
        payload = {
            "sub": user_id,
            "username": username,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.token_ttl).timestamp()),
        }
        return jwt.encode(payload, self.token_secret, algorithm=TOKEN_ALGORITHM)

    def verify(self, token: Optional[str]) -> TokenIdentity:
        """
        Check a token's signature and expiry.

        Expiry is checked against ``self.clock`` rather than the wall clock.

        Raises:
            UnauthorizedError: Token missing, malformed, badly signed or expired
        """
        if not token:
            raise UnauthorizedError("Missing token")

        try:
            payload = jwt.decode(
                token,
                self.token_secret,
                algorithms=[TOKEN_ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp"],
                },
            )
        except jwt.InvalidTokenError as e:
            raise UnauthorizedError("Invalid token") from e

        try:
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise UnauthorizedError("Invalid token") from e
        if self.clock() >= expires_at:
            raise UnauthorizedError("Token expired")

        return TokenIdentity(
            user_id=payload["sub"],
            username=payload.get("username", ""),
            expires_at=expires_at,
        )
