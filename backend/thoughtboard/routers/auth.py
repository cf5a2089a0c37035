"""
Authentication Router for Thoughtboard

Signup, login and the current-user lookup, plus the bearer-token
dependency every other router uses.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from thoughtboard.database import get_db
from thoughtboard.services.auth_service import AuthService
from thoughtboard.schemas.auth import SignupRequest, LoginRequest, UserResponse, AuthResponse
from thoughtboard.models.user import User
from thoughtboard.utils.rate_limit import rate_limit
from thoughtboard.utils.logging_config import auth_logger
from thoughtboard.exceptions import TokenExpiredException

router = APIRouter(prefix="/api/auth", tags=["Authentication"])
# Missing headers must be 401, not HTTPBearer's default 403
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> User:
    """
    Resolve the bearer token to a user.

    Raises:
        TokenExpiredException: Token missing, invalid or expired
        UserNotFoundException: Token is valid but its user is gone
    """
    if credentials is None:
        raise TokenExpiredException("No token provided")

    auth_service = AuthService(db)
    user = await auth_service.get_user_from_token(credentials.credentials)
    if not user:
        auth_logger.warning("Failed authorization attempt via token")
        raise TokenExpiredException("Invalid token")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@rate_limit("signup")
async def signup(
    request: Request,
    signup_data: SignupRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """
    Create an account and return a token - 10 requests / minute.

    Raises:
        UsernameTakenException: Username already registered
    """
    auth_service = AuthService(db)
    user = await auth_service.create_user(signup_data)
    return auth_service.create_token(user)


@router.post("/login", response_model=AuthResponse)
@rate_limit("login")
async def login(
    request: Request,
    login_data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """
    Log in with username and password - 5 attempts / minute.

    Raises:
        InvalidCredentialsException: Unknown user or wrong password
    """
    auth_service = AuthService(db)
    user = await auth_service.authenticate_user(login_data.username, login_data.password)
    return auth_service.create_token(user)


@router.get("/me", response_model=UserResponse)
@rate_limit("read")
async def get_me(
    request: Request,
    current_user: CurrentUser
):
    return current_user
