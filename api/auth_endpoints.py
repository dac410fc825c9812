"""
Registration and Authentication Endpoints.

Endpoints Provided:
- `POST /api/users`: Registers a new account and returns a session token.
- `POST /api/auth`: Exchanges an email/password pair for a session token.
- `GET /api/auth`: Returns the account behind the current session token.

Architectural Design:
- Thin Handlers: Validation, duplicate detection and hashing live in
  `AuthService`. Handlers only translate between HTTP and the service.
- Error Mapping: Failures are raised as `ConnectorAPIException` subclasses and
  rendered by the error handling middleware, so every failure reaches the
  client as a JSON body with an `errors` list (400) or a message.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_auth_service, get_current_user_id
from api.schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from core.exceptions import ConnectorAPIException
from core.logging_config import get_logger, log_function_call
from services.auth_service import AuthService

logger = get_logger(__name__)

users_router = APIRouter(prefix="/api/users", tags=["Users"])
router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@users_router.post("", response_model=TokenResponse)
@log_function_call(logger)
async def register_user(
    request: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    try:
        token = await auth_service.register(
            name=request.name, email=request.email, password=request.password
        )
    except ConnectorAPIException as e:
        logger.warning(f"User registration failed: {e}")
        raise

    return TokenResponse(token=token)


@router.post("", response_model=TokenResponse)
@log_function_call(logger)
async def login_user(
    request: LoginRequest, auth_service: AuthService = Depends(get_auth_service)
):
    """Authenticate user and return a token"""
    try:
        token = await auth_service.authenticate(request.email, request.password)
    except ConnectorAPIException as e:
        logger.warning(f"User login failed: {e}")
        raise

    return TokenResponse(token=token)


@router.get("", response_model=UserResponse)
@log_function_call(logger)
async def get_current_user_info(
    user_id: str = Depends(get_current_user_id),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Get current user information"""
    user = await auth_service.current_user(user_id)
    return UserResponse.from_user(user)
