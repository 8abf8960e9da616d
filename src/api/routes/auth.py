"""Authentication routes (register, login, logout, me)."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_user_repo
from api.models import AuthResponse, LoginRequest, RegisterRequest, SuccessResponse, UserResponse
from api.security import (
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    get_identity,
    get_session_tokens,
)
from domain.model.errors import (
    DuplicateError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)
from domain.model.session import Identity
from port.session_tokens import SessionTokens
from port.user_repository import UserRepository
from services import auth_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse)
def register(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user.

    Returns:
        Public user fields (id, email, name)

    Raises:
        HTTPException: 400 if fields are missing or the email is taken, 500 on store failure
    """
    try:
        user = auth_service.register(
            repo, email=request.email, password=request.password, name=request.name
        )
    except (ValidationError, DuplicateError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while registering",
        )

    return UserResponse.from_domain(user)


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repo),
    tokens: SessionTokens = Depends(get_session_tokens),
):
    """Login user, return a session token and set it as an HttpOnly cookie.

    Raises:
        HTTPException: 401 if fields are missing or credentials are invalid
    """
    try:
        user, session = auth_service.authenticate(
            repo, tokens, email=request.email, password=request.password
        )
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while logging in",
        )

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.token,
        expires=session.expires_at,
        httponly=True,
        samesite="lax",
        secure=SESSION_COOKIE_SECURE,
    )
    return AuthResponse(
        token=session.token,
        expires_at=session.expires_at,
        user=UserResponse.from_domain(user),
    )


@router.post("/logout", response_model=SuccessResponse)
def logout(response: Response):
    """Clear the session cookie. Bearer tokens stay valid until they expire."""
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=SESSION_COOKIE_SECURE,
    )
    return SuccessResponse()


@router.get("/me", response_model=UserResponse)
def get_me(
    identity: Optional[Identity] = Depends(get_identity),
    repo: UserRepository = Depends(get_user_repo),
):
    """Get current authenticated user info.

    Raises:
        HTTPException: 401 if not authenticated or the user no longer exists
    """
    try:
        user = auth_service.get_current_user(repo, identity)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to fetch user")

    return UserResponse.from_domain(user)
