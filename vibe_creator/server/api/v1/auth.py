"""
Authentication Endpoints.

Registration, login, refresh-token rotation, logout and the current user.
The refresh token travels only in an HttpOnly cookie; the access token is
returned in the body and sent back as ``Authorization: Bearer``.
"""

from typing import Optional

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from vibe_creator.core.logging_config import get_logger
from vibe_creator.core.models.io.auth import (
    AuthTokenData,
    LoginRequest,
    MeData,
    RegisterRequest,
    SubscriptionSummary,
    UserRead,
)
from vibe_creator.core.models.io.common import ApiResponse, MessageData
from vibe_creator.server.core.config import settings
from vibe_creator.server.core.rate_limit import AUTH_LIMIT, limiter
from vibe_creator.server.errors import UnauthorizedError
from vibe_creator.server.exception_handlers.app_handlers import error_response
from vibe_creator.server.services.auth import IssuedSession, clear_refresh_cookie, set_refresh_cookie
from vibe_creator.server.services.deps import (
    AuthServiceDep,
    CurrentSession,
    CurrentUser,
    PaymentServiceDep,
)

logger = get_logger(__name__)

router = APIRouter()


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _token_payload(issued: IssuedSession) -> ApiResponse[AuthTokenData]:
    return ApiResponse[AuthTokenData](
        data=AuthTokenData(
            user=UserRead.model_validate(issued.user),
            access_token=issued.session.token,
            expires_at=issued.session.expires_at,
        )
    )


@router.post(
    "/register",
    response_model=ApiResponse[AuthTokenData],
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account on the FREE tier and sign it in.",
    response_description="The new user and an access token; the refresh token is set as a cookie.",
    responses={
        400: {"description": "Invalid input or captcha rejected"},
        409: {"description": "Email already registered"},
        429: {"description": "Too many attempts from this address"},
    },
)
@limiter.limit(AUTH_LIMIT)
async def register(
    body: RegisterRequest, request: Request, response: Response, auth: AuthServiceDep
) -> ApiResponse[AuthTokenData]:
    issued = await auth.register(
        body, user_agent=request.headers.get("user-agent"), ip_address=_client_ip(request)
    )
    set_refresh_cookie(response, issued.session)
    return _token_payload(issued)


@router.post(
    "/login",
    response_model=ApiResponse[AuthTokenData],
    summary="Login",
    description="Sign in with email and password. Any other session of the user is ended.",
    response_description="The user and an access token; the refresh token is set as a cookie.",
    responses={
        401: {"description": "Invalid email or password"},
        429: {"description": "Too many attempts from this address"},
    },
)
@limiter.limit(AUTH_LIMIT)
async def login(
    body: LoginRequest, request: Request, response: Response, auth: AuthServiceDep
) -> ApiResponse[AuthTokenData]:
    issued = await auth.login(body, user_agent=request.headers.get("user-agent"), ip_address=_client_ip(request))
    set_refresh_cookie(response, issued.session)
    return _token_payload(issued)


@router.post(
    "/refresh",
    response_model=ApiResponse[AuthTokenData],
    summary="Refresh Tokens",
    description="Exchange the refresh-token cookie for a new access token. Both tokens are rotated.",
    response_description="The user and a new access token.",
    responses={
        400: {"description": "No refresh token cookie"},
        401: {"description": "Refresh token invalid or expired"},
    },
)
async def refresh(request: Request, response: Response, auth: AuthServiceDep):
    """
    Rotate the session tokens.

    An invalid refresh token also clears the cookie so the browser stops
    sending it.
    """
    token = request.cookies.get(settings.auth.refresh_cookie_name)
    try:
        issued = await auth.refresh(token)
    except UnauthorizedError as e:
        failure: JSONResponse = error_response(e.status_code, e.code.value, e.message)
        clear_refresh_cookie(failure)
        return failure
    set_refresh_cookie(response, issued.session)
    return _token_payload(issued)


@router.post(
    "/logout",
    response_model=ApiResponse[MessageData],
    summary="Logout",
    description="End the current session and clear the refresh-token cookie.",
    response_description="Confirmation message.",
)
async def logout(session: CurrentSession, response: Response, auth: AuthServiceDep) -> ApiResponse[MessageData]:
    await auth.logout(session)
    clear_refresh_cookie(response)
    return ApiResponse[MessageData](data=MessageData(message="Logged out"))


@router.get(
    "/me",
    response_model=ApiResponse[MeData],
    summary="Current User",
    description="Return the signed-in user with their subscription.",
    response_description="User and subscription summary.",
)
async def me(user: CurrentUser, payments: PaymentServiceDep) -> ApiResponse[MeData]:
    subscription = await payments.get_subscription(user.id)
    return ApiResponse[MeData](
        data=MeData(user=UserRead.model_validate(user), subscription=SubscriptionSummary.model_validate(subscription))
    )
