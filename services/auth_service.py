"""
Account Registration and Authentication Service.

This module defines the `AuthService`, which owns the credential store (the
`users` table) and is the only code path that creates accounts or issues
session tokens.

Key Components:
- `register`: Validates the registration form, rejects duplicate emails,
  derives the gravatar avatar, hashes the password and returns a token.
- `authenticate`: Checks an email/password pair and returns a token. A missing
  user and a wrong password fail with the same error so the response does not
  reveal which emails are registered.
- `verify`: Stateless token check, delegated to the `JWTManager`.
- `current_user`: Loads the account behind a verified token.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from core.auth import (
    JWTManager,
    PasswordManager,
    get_jwt_manager,
    get_password_manager,
    gravatar_url,
)
from core.exceptions import DuplicateUserError, InvalidCredentialsError, NotFoundError
from core.models import User
from core.validation import FieldErrors, InputValidator

logger = logging.getLogger(__name__)


class AuthService:
    """Service for registration, login and token verification"""

    def __init__(
        self,
        session: AsyncSession,
        jwt_manager: Optional[JWTManager] = None,
        password_manager: Optional[PasswordManager] = None,
    ):
        self.session = session
        self.jwt_manager = jwt_manager or get_jwt_manager()
        self.password_manager = password_manager or get_password_manager()

    async def register(self, name: str, email: str, password: str) -> str:
        """Create an account and return a session token"""
        errors = FieldErrors()
        name = errors.check(
            InputValidator.validate_required, "name", name, "Name is required"
        )
        email = errors.check(InputValidator.validate_email, email)
        password = errors.check(InputValidator.validate_password, password)
        errors.raise_if_any()

        if await self._find_by_email(email) is not None:
            logger.info(f"Registration rejected, email already in use: {email}")
            raise DuplicateUserError(email)

        user = User(
            name=name,
            email=email,
            avatar=gravatar_url(email),
            password=self.password_manager.hash_password(password),
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await self.session.rollback()
            logger.info(f"Registration rejected, email already in use: {email}")
            raise DuplicateUserError(email)

        logger.info(f"Registered new user {user.id} ({email})")
        return self.jwt_manager.create_token(user.id)

    async def authenticate(self, email: str, password: str) -> str:
        """Check credentials and return a session token"""
        errors = FieldErrors()
        email = errors.check(InputValidator.validate_email, email)
        errors.check(
            InputValidator.validate_required, "password", password, "Password is required"
        )
        errors.raise_if_any()

        user = await self._find_by_email(email)
        if user is None or not self.password_manager.verify_password(
            password, user.password
        ):
            logger.warning(f"Authentication failed for {email}")
            raise InvalidCredentialsError()

        logger.info(f"User {user.id} authenticated successfully")
        return self.jwt_manager.create_token(user.id)

    def verify(self, token: Optional[str]) -> str:
        """Return the user id embedded in a valid token"""
        return self.jwt_manager.verify_token(token)

    async def current_user(self, user_id: str) -> User:
        """Load the account for a verified user id"""
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User", "User not found")
        return user

    async def _find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.exec(select(User).where(User.email == email))
        return result.first()
