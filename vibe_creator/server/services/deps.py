"""
Request Dependencies.

Provides the database session, the authenticated user and per-request
service instances for API endpoints as ``Annotated`` aliases.
"""

from __future__ import annotations

from typing import Annotated, Callable, Optional, Tuple

from fastapi import Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.database import get_session, get_session_factory
from vibe_creator.core.database.entities import User, UserSession
from vibe_creator.server.errors import ForbiddenError, UnauthorizedError

from .admin import AdminService
from .auth import AuthService
from .export import ExportService
from .ffmpeg_processor import FFmpegProcessor, get_ffmpeg_processor
from .payment import PaymentService, XenditGateway, get_xendit_gateway
from .projects import ProjectService
from .prompts import PromptService
from .storage import LocalStorage, get_storage
from .turnstile import TurnstileVerifier, get_turnstile_verifier

SessionDep = Annotated[AsyncSession, Depends(get_session)]
SessionFactoryDep = Annotated[Callable[[], AsyncSession], Depends(get_session_factory)]
StorageDep = Annotated[LocalStorage, Depends(get_storage)]
ProcessorDep = Annotated[FFmpegProcessor, Depends(get_ffmpeg_processor)]


def get_bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_auth_service(
    session: SessionDep, captcha: Annotated[TurnstileVerifier, Depends(get_turnstile_verifier)]
) -> AuthService:
    return AuthService(session, captcha=captcha)


def get_payment_service(
    session: SessionDep, gateway: Annotated[XenditGateway, Depends(get_xendit_gateway)]
) -> PaymentService:
    return PaymentService(session, gateway=gateway)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PaymentServiceDep = Annotated[PaymentService, Depends(get_payment_service)]


def get_export_service(session: SessionDep, payments: PaymentServiceDep, storage: StorageDep) -> ExportService:
    return ExportService(session, payments=payments, storage=storage)


def get_admin_service(session: SessionDep, payments: PaymentServiceDep) -> AdminService:
    return AdminService(session, payments=payments)


def get_project_service(session: SessionDep, storage: StorageDep) -> ProjectService:
    return ProjectService(session, storage=storage)


def get_prompt_service(session: SessionDep) -> PromptService:
    return PromptService(session)


ExportServiceDep = Annotated[ExportService, Depends(get_export_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
PromptServiceDep = Annotated[PromptService, Depends(get_prompt_service)]


async def get_auth_context(request: Request, session: SessionDep) -> Optional[Tuple[User, UserSession]]:
    """Resolve the bearer token once per request; ``None`` when anonymous."""
    token = get_bearer_token(request)
    if token is None:
        return None
    return await AuthService(session).authenticate(token)


AuthContext = Annotated[Optional[Tuple[User, UserSession]], Depends(get_auth_context)]


async def get_current_session(context: AuthContext) -> UserSession:
    if context is None:
        raise UnauthorizedError()
    return context[1]


async def get_current_user(context: AuthContext) -> User:
    if context is None:
        raise UnauthorizedError()
    return context[0]


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentSession = Annotated[UserSession, Depends(get_current_session)]


async def get_admin_user(user: CurrentUser) -> User:
    if not user.is_admin:
        raise ForbiddenError()
    return user


AdminUser = Annotated[User, Depends(get_admin_user)]
