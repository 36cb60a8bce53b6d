"""Authentication endpoints."""

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_current_user, get_current_user_optional, get_user_service
from app.config import settings
from app.core.identity import CurrentUser
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    SessionUser,
    UserResponse,
)
from app.services.user_service import UserService

router = APIRouter()


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
        path="/",
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, service: UserService = Depends(get_user_service)):
    """Register a new student or employer together with their profile."""
    user = await service.register(request)
    return RegisterResponse(
        message="User created successfully",
        user_id=user.id,
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    response: Response,
    service: UserService = Depends(get_user_service),
):
    """Login with email and password; sets the auth cookie."""
    user, token = await service.login(request.email, request.password)
    set_auth_cookie(response, token)
    return LoginResponse(
        access_token=token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Logout by clearing the auth cookie. Works with or without a session."""
    response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
    return MessageResponse(message="Successfully logged out")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser = Depends(get_current_user)):
    """Get current user information."""
    return UserResponse(
        id=current_user.id,
        email=current_user.email,
        role=current_user.role.value,
        created_at=current_user.created_at,
        profile=current_user.profile,
    )


@router.get("/session", response_model=SessionResponse)
async def get_session(current_user: CurrentUser = Depends(get_current_user_optional)):
    """Session check for the client: ``{"user": null}`` when signed out."""
    if current_user is None:
        return SessionResponse(user=None)
    return SessionResponse(
        user=SessionUser(
            id=current_user.id,
            email=current_user.email,
            role=current_user.role.value,
            name=current_user.display_name,
        )
    )
