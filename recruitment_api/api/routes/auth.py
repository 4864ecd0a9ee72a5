from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import ValidationError as PydanticValidationError

from recruitment_api.core.deps import get_anonymous_context, get_current_context, provide_service
from recruitment_api.core.errors import UnauthorizedError
from recruitment_api.schemas.auth import (
    AuthSession,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserRead,
)
from recruitment_api.schemas.common import ApiResponse
from recruitment_api.notifications.email import LoginNotifier, get_login_notifier
from recruitment_api.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

get_public_auth = provide_service(AuthService, get_anonymous_context)
get_caller_auth = provide_service(AuthService, get_current_context)


# PUBLIC_INTERFACE
@router.post(
    "/register",
    response_model=ApiResponse[AuthSession],
    status_code=status.HTTP_201_CREATED,
    summary="Register organization",
    description="Create a new organization and its first user (role Admin), and sign that user in.",
)
async def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_public_auth),
) -> ApiResponse:
    session = await service.register(payload)
    return ApiResponse(message="Registration successful", data=session)


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=ApiResponse[AuthSession],
    summary="Login",
    description=(
        "Authenticate with email and password and receive access/refresh tokens. "
        "When SMTP is configured a login notification is emailed after the response."
    ),
)
async def login(
    payload: LoginRequest,
    background_tasks: BackgroundTasks,
    service: AuthService = Depends(get_public_auth),
    notifier: LoginNotifier = Depends(get_login_notifier),
) -> ApiResponse:
    session = await service.login(payload)
    if notifier.enabled:
        name = await service.display_name(session.user)
        background_tasks.add_task(notifier.send_login_notification, session.user.Email, name)
    return ApiResponse(message="Login successful", data=session)


# PUBLIC_INTERFACE
@router.post(
    "/token",
    response_model=TokenPair,
    summary="OAuth2 token",
    description="OAuth2 password flow for interactive docs; the username field carries the email.",
)
async def token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: AuthService = Depends(get_public_auth),
) -> TokenPair:
    try:
        credentials = LoginRequest(Email=form_data.username, Password=form_data.password)
    except PydanticValidationError:
        raise UnauthorizedError("Invalid credentials")
    session = await service.login(credentials)
    return session.tokens


# PUBLIC_INTERFACE
@router.post(
    "/refresh",
    response_model=ApiResponse[TokenPair],
    summary="Refresh access token",
    description="Issue a new token pair from a valid refresh token.",
)
async def refresh(
    payload: RefreshRequest,
    service: AuthService = Depends(get_public_auth),
) -> ApiResponse:
    return ApiResponse(data=await service.refresh(payload.refresh_token))


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=ApiResponse[UserRead],
    summary="Current user",
)
async def me(service: AuthService = Depends(get_caller_auth)) -> ApiResponse:
    return ApiResponse(data=await service.me())
