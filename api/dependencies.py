"""
Shared FastAPI dependencies.

`get_current_user_id` is the authorization gate: every protected route depends
on it, and it is the only place a session token is read from a request. The
token is accepted from the `x-auth-token` header or as an
`Authorization: Bearer` credential.
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from core.auth import get_jwt_manager
from core.database import get_session
from services.auth_service import AuthService
from services.post_service import PostService
from services.profile_service import ProfileService


def get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(session)


def get_profile_service(session: AsyncSession = Depends(get_session)) -> ProfileService:
    return ProfileService(session)


def get_post_service(session: AsyncSession = Depends(get_session)) -> PostService:
    return PostService(session)


def extract_token(
    x_auth_token: Optional[str] = None, authorization: Optional[str] = None
) -> Optional[str]:
    if x_auth_token:
        return x_auth_token.strip()
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return None


async def get_current_user_id(
    request: Request,
    x_auth_token: Optional[str] = Header(default=None, alias="x-auth-token"),
    authorization: Optional[str] = Header(default=None),
) -> str:
    """Verify the request's session token and return its user id"""
    token = extract_token(x_auth_token, authorization)
    user_id = get_jwt_manager().verify_token(token)
    request.state.user_id = user_id
    return user_id
