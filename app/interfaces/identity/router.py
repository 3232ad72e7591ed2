"""
FastAPI router for authentication.

All routes delegate to use cases. No business logic here.
Guards run through GuardPipeline dependencies.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Request, Response

from app.application.identity.dtos import LoginCommand, SignUpCommand
from app.application.identity.log_in import LoginUseCase
from app.application.identity.log_out import LogoutUseCase
from app.application.identity.sign_up import SignUpUseCase
from app.domain.access.entities import Role
from app.domain.access.errors import AccountDisabledError, InvalidCredentialsError
from app.interfaces.dependencies import (
    Container,
    get_container,
    get_login_use_case,
    get_logout_use_case,
    get_sign_up_use_case,
)
from app.interfaces.identity.schemas import (
    LoginRequest,
    SessionResponse,
    SignUpRequest,
    UserResponse,
)
from app.interfaces.pipeline import GuardContext, GuardPipeline, session_token
from app.interfaces.schemas import ERROR_RESPONSES, MessageResponse, ResponseModel
from app.shared.logging import log_auth_failure
from app.shared.security.rate_limiting import LimitClass

router = APIRouter(prefix="/auth", tags=["auth"])

sign_up_guard = GuardPipeline().rate_limit(LimitClass.AUTH).body(SignUpRequest)
login_guard = GuardPipeline().rate_limit(LimitClass.AUTH).body(LoginRequest)
session_guard = GuardPipeline().authenticated()


class CallerResponse(ResponseModel):
    """The caller resolved from the current session."""

    id: str
    email: str
    role: Role
    is_active: bool
    email_verified: bool


@router.post(
    "/signup",
    status_code=201,
    response_model=UserResponse,
    responses=ERROR_RESPONSES,
    summary="Create an account",
)
async def sign_up(
    context: GuardContext = Depends(sign_up_guard),
    use_case: SignUpUseCase = Depends(get_sign_up_use_case),
) -> UserResponse:
    """Register a USER or EMPLOYER account."""
    body: SignUpRequest = context.body
    user = await use_case.execute(
        SignUpCommand(email=body.email, password=body.password, role=Role(body.role))
    )
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=SessionResponse,
    responses=ERROR_RESPONSES,
    summary="Open a session",
)
async def log_in(
    request: Request,
    response: Response,
    context: GuardContext = Depends(login_guard),
    use_case: LoginUseCase = Depends(get_login_use_case),
    container: Container = Depends(get_container),
) -> SessionResponse:
    """Verify credentials, set the session cookie and return the token."""
    body: LoginRequest = context.body
    try:
        result = await use_case.execute(LoginCommand(email=body.email, password=body.password))
    except (InvalidCredentialsError, AccountDisabledError) as exc:
        log_auth_failure(context.request_id, request.url.path, exc.message, context.client_key)
        raise

    config = container.settings
    response.set_cookie(
        key=config.session_cookie_name,
        value=result.session.token,
        max_age=config.session_duration_days * 24 * 60 * 60,
        httponly=True,
        secure=config.environment == "production",
        samesite="lax",
        path="/",
    )
    return SessionResponse(
        message="Login successful",
        user=UserResponse.model_validate(result.user),
        token=result.session.token,
        expires_at=result.session.expires_at,
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
    summary="Close the current session",
)
async def log_out(
    request: Request,
    response: Response,
    context: GuardContext = Depends(session_guard),
    use_case: LogoutUseCase = Depends(get_logout_use_case),
    container: Container = Depends(get_container),
) -> MessageResponse:
    """Delete the session and clear its cookie."""
    cookie_name = container.settings.session_cookie_name
    await use_case.execute(session_token(request, cookie_name))
    response.delete_cookie(cookie_name, path="/")
    return MessageResponse(message="Logged out")


@router.get(
    "/me",
    response_model=CallerResponse,
    responses=ERROR_RESPONSES,
    summary="Current caller",
)
async def me(context: GuardContext = Depends(session_guard)) -> CallerResponse:
    """Return the caller behind the current session."""
    return CallerResponse.model_validate(context.require_caller())
