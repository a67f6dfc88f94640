# Authentication API routes: registration, cookie session login/logout, OTP password reset

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response, status

from todo_api.dependencies.auth import get_current_user_id
from todo_api.dependencies.services import get_auth_service, get_mailer
from todo_api.schemas import (
    ForgotPasswordRequest,
    LoginResponse,
    MessageResponse,
    ResetPasswordRequest,
    UserLogin,
    UserRegister,
)
from todo_api.services.auth_service import AuthService
from todo_api.services.mail_service import OtpMailer

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post(
    "/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED
)
async def register_user(
    user_data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new user. The password is stored as a bcrypt hash."""
    await auth_service.register(user_data.username, user_data.email, user_data.password)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login_user(
    user_data: UserLogin,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Authenticate the user and set the session cookie."""
    user, token = await auth_service.login(user_data.email, user_data.password)

    settings = request.app.state.settings
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="strict",
    )
    return LoginResponse(message="Login successful", user_name=user.username)


@router.post(
    "/logout",
    response_model=MessageResponse,
    dependencies=[Depends(get_current_user_id)],
)
async def logout_user(request: Request, response: Response):
    """Clear the session cookie. The token itself stays valid until it expires."""
    settings = request.app.state.settings
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="strict",
    )
    return MessageResponse(message="Logout successful")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    auth_service: AuthService = Depends(get_auth_service),
    mailer: OtpMailer = Depends(get_mailer),
):
    """Issue a reset code and email it once the response is sent."""
    otp = await auth_service.request_password_reset(payload.email)
    background_tasks.add_task(mailer.send_otp, payload.email, otp)
    return MessageResponse(message="OTP sent to email")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    await auth_service.reset_password(payload.email, payload.otp, payload.new_password)
    return MessageResponse(message="Password reset successful")
