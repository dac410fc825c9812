"""
Core Authentication Primitives.

This module holds the credential building blocks used by the Auth Service and
by the authorization gate in front of every protected endpoint.

Key Components:
- JWTManager: Issues and verifies the signed, time-limited session tokens. A
  token carries only the user id (`{"user": {"id": ...}}`) plus issue and
  expiry times; verification never touches the database.
- PasswordManager: Salted one-way password hashing with bcrypt.
- gravatar_url: Derives a user's avatar URL from their email address.
- init_auth / get_jwt_manager / get_password_manager: Process-wide instances
  configured from `Settings` at application startup.

Architectural Design:
- Stateless Sessions: There is no server-side session or revocation list. A
  token is valid until it expires, so its lifetime is the only knob.
- Separation of Concerns: Hashing and token handling are independent classes,
  which keeps each of them trivially testable.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import bcrypt
import jwt

from core.config import Settings, get_settings
from core.exceptions import AuthenticationError
from core.logging_config import get_logger

logger = get_logger(__name__)

GRAVATAR_BASE_URL = "https://www.gravatar.com/avatar/"


class JWTManager:
    """JWT token management"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: str = "HS256",
        expires_in: int = 360000,
    ):
        self.secret_key = secret_key or self._generate_secret_key()
        self.algorithm = algorithm
        self.token_expire = timedelta(seconds=expires_in)

    def _generate_secret_key(self) -> str:
        """Generate a secure secret key"""
        key = secrets.token_urlsafe(32)
        logger.warning(
            "Generated new JWT secret key. This should be set via JWT_SECRET_KEY environment variable."
        )
        return key

    def create_token(self, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a session token for a user"""
        if expires_delta is None:
            expires_delta = self.token_expire

        now = datetime.now(timezone.utc)
        payload = {
            "user": {"id": user_id},
            "iat": now,
            "exp": now + expires_delta,
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug(f"Created session token for user {user_id}")
        return token

    def decode_token(self, token: str) -> Dict[str, Any]:
        """Verify signature and expiry, returning the payload"""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired session token")
            raise AuthenticationError("Token is not valid")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected invalid session token: {e}")
            raise AuthenticationError("Token is not valid")

    def verify_token(self, token: Optional[str]) -> str:
        """Verify a session token and return the embedded user id"""
        if not token:
            raise AuthenticationError("No token, authorization denied")

        payload = self.decode_token(token)
        user = payload.get("user")
        if not isinstance(user, dict) or not user.get("id"):
            raise AuthenticationError("Token is not valid")
        return str(user["id"])


class PasswordManager:
    """Password hashing and verification"""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        """Hash password using bcrypt"""
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        """Verify password against hash"""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError as e:
            logger.error(f"Password verification error: {e}")
            return False


def gravatar_url(
    email: str, size: int = 200, rating: str = "pg", default: str = "mm"
) -> str:
    """Build the gravatar URL for an email address"""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    query = urlencode({"s": size, "r": rating, "d": default})
    return f"{GRAVATAR_BASE_URL}{digest}?{query}"


# Global authentication primitives
_jwt_manager: Optional[JWTManager] = None
_password_manager: Optional[PasswordManager] = None


def init_auth(settings: Optional[Settings] = None) -> JWTManager:
    """Initialize global token and password managers from settings"""
    global _jwt_manager, _password_manager
    settings = settings or get_settings()
    _jwt_manager = JWTManager(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_in=settings.jwt_expires_in,
    )
    _password_manager = PasswordManager(rounds=settings.bcrypt_rounds)
    logger.info("Initialized authentication primitives")
    return _jwt_manager


def get_jwt_manager() -> JWTManager:
    """Get global JWT manager"""
    if _jwt_manager is None:
        init_auth()
    return _jwt_manager


def get_password_manager() -> PasswordManager:
    """Get global password manager"""
    if _password_manager is None:
        init_auth()
    return _password_manager
