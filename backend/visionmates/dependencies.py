from __future__ import annotations

from http.cookies import CookieError, SimpleCookie
from typing import Annotated

from fastapi import Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from visionmates.config import Settings, get_settings
from visionmates.database import get_db
from visionmates.exceptions import ForbiddenError, UnauthorizedError, VisionMatesError
from visionmates.models.user import User
from visionmates.repositories.conversation_repository import ConversationRepository
from visionmates.repositories.participation_repository import ParticipationRepository
from visionmates.repositories.preference_repository import (
    ProjectHideRepository,
    ProjectLikeRepository,
)
from visionmates.repositories.project_repository import ProjectRepository
from visionmates.repositories.reaction_repository import ReactionRepository
from visionmates.repositories.skill_repository import SkillRepository
from visionmates.repositories.user_repository import UserRepository
from visionmates.services.auth_service import auth_service, is_allowed_domain
from visionmates.services.discovery_service import DiscoveryService
from visionmates.services.messaging_service import MessagingService
from visionmates.services.participation_service import ParticipationService
from visionmates.services.preference_service import PreferenceService
from visionmates.services.profile_service import ProfileService
from visionmates.services.project_service import ProjectService
from visionmates.services.reaction_service import ReactionService

AsyncDBSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


TOKEN_COOKIE_KEYS = (
    "better-auth.session_token",
    "better-auth.sessionToken",
    "session_token",
    "sessionToken",
)

DOMAIN_ERROR_MESSAGE = (
    "このアプリケーションは許可されたドメインのメールアドレスでのみご利用いただけます。\n\n"
    "This application is only available for allow-listed email domains."
)


def _extract_token_from_request(
    authorization: str | None = None,
    cookie: str | None = None,
    token_param: str | None = None,
) -> str | None:
    """Extract JWT token from Authorization header, cookie, or query parameter."""

    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    if token_param:
        return token_param

    if not cookie:
        return None

    try:
        jar = SimpleCookie()
        jar.load(cookie)
        cookies = {name: morsel.value for name, morsel in jar.items()}
    except CookieError:
        # Malformed cookie header - gracefully return None
        return None

    for key in TOKEN_COOKIE_KEYS:
        if key in cookies:
            return cookies[key]

    for name, value in cookies.items():
        normalized = name.lower()
        if "token" in normalized and ("session" in normalized or "better-auth" in normalized):
            return value

    return None


async def get_authenticated_user(
    request: Request,
    db: AsyncDBSession,
    authorization: Annotated[str | None, Header()] = None,
    token: Annotated[str | None, Query()] = None,
) -> User:
    """Resolve the caller from bearer token, cookie, or query parameter."""
    token_value = _extract_token_from_request(
        authorization=authorization,
        cookie=request.headers.get("cookie", ""),
        token_param=token,
    )
    if not token_value:
        raise UnauthorizedError(
            "Authentication required. Provide token via Authorization header, "
            "cookie, or query parameter."
        )
    return await auth_service.get_user_from_token(token_value, db)


async def get_current_user(
    user: Annotated[User, Depends(get_authenticated_user)],
    app_settings: AppSettings,
) -> User:
    """Authenticated caller that also passes the email-domain allow-list."""
    if app_settings.enforce_email_domain and not is_allowed_domain(
        user.email, app_settings.allowed_email_domains
    ):
        raise ForbiddenError(DOMAIN_ERROR_MESSAGE, code="DOMAIN_NOT_ALLOWED")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_current_user_optional(
    request: Request,
    db: AsyncDBSession,
    app_settings: AppSettings,
    authorization: Annotated[str | None, Header()] = None,
    token: Annotated[str | None, Query()] = None,
) -> User | None:
    """Like ``get_current_user`` but yields None instead of failing."""
    token_value = _extract_token_from_request(
        authorization=authorization,
        cookie=request.headers.get("cookie", ""),
        token_param=token,
    )
    if not token_value:
        return None

    try:
        user = await auth_service.get_user_from_token(token_value, db)
    except VisionMatesError:
        return None

    if app_settings.enforce_email_domain and not is_allowed_domain(
        user.email, app_settings.allowed_email_domains
    ):
        return None
    return user


OptionalUser = Annotated[User | None, Depends(get_current_user_optional)]


def get_user_repository(db: AsyncDBSession) -> UserRepository:
    return UserRepository(db)


def get_project_repository(db: AsyncDBSession) -> ProjectRepository:
    return ProjectRepository(db)


def get_participation_repository(db: AsyncDBSession) -> ParticipationRepository:
    return ParticipationRepository(db)


def get_reaction_repository(db: AsyncDBSession) -> ReactionRepository:
    return ReactionRepository(db)


def get_conversation_repository(db: AsyncDBSession) -> ConversationRepository:
    return ConversationRepository(db)


def get_skill_repository(db: AsyncDBSession) -> SkillRepository:
    return SkillRepository(db)


UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
ProjectRepositoryDep = Annotated[ProjectRepository, Depends(get_project_repository)]
ParticipationRepositoryDep = Annotated[
    ParticipationRepository, Depends(get_participation_repository)
]
ConversationRepositoryDep = Annotated[ConversationRepository, Depends(get_conversation_repository)]


def get_participation_service(
    repository: ParticipationRepositoryDep,
    project_repository: ProjectRepositoryDep,
) -> ParticipationService:
    return ParticipationService(repository=repository, project_repository=project_repository)


def get_reaction_service(
    repository: Annotated[ReactionRepository, Depends(get_reaction_repository)],
    project_repository: ProjectRepositoryDep,
    conversation_repository: ConversationRepositoryDep,
) -> ReactionService:
    return ReactionService(
        repository=repository,
        project_repository=project_repository,
        conversation_repository=conversation_repository,
    )


def get_discovery_service(
    project_repository: ProjectRepositoryDep,
    app_settings: AppSettings,
) -> DiscoveryService:
    return DiscoveryService(
        project_repository,
        default_limit=app_settings.discover_page_size,
        max_limit=app_settings.discover_max_page_size,
    )


def get_messaging_service(
    repository: ConversationRepositoryDep,
    user_repository: UserRepositoryDep,
    app_settings: AppSettings,
) -> MessagingService:
    return MessagingService(
        repository=repository,
        user_repository=user_repository,
        max_length=app_settings.message_max_length,
        message_limit=app_settings.conversation_message_limit,
    )


def get_preference_service(
    db: AsyncDBSession,
    project_repository: ProjectRepositoryDep,
    app_settings: AppSettings,
) -> PreferenceService:
    return PreferenceService(
        like_repository=ProjectLikeRepository(db),
        hide_repository=ProjectHideRepository(db),
        project_repository=project_repository,
        page_size=app_settings.liked_page_size,
        max_page_size=app_settings.discover_max_page_size,
    )


def get_project_service(
    repository: ProjectRepositoryDep,
    participation_repository: ParticipationRepositoryDep,
    user_repository: UserRepositoryDep,
) -> ProjectService:
    return ProjectService(
        repository=repository,
        participation_repository=participation_repository,
        user_repository=user_repository,
    )


def get_profile_service(
    user_repository: UserRepositoryDep,
    skill_repository: Annotated[SkillRepository, Depends(get_skill_repository)],
    project_repository: ProjectRepositoryDep,
) -> ProfileService:
    return ProfileService(
        user_repository=user_repository,
        skill_repository=skill_repository,
        project_repository=project_repository,
    )


ParticipationServiceDep = Annotated[ParticipationService, Depends(get_participation_service)]
ReactionServiceDep = Annotated[ReactionService, Depends(get_reaction_service)]
DiscoveryServiceDep = Annotated[DiscoveryService, Depends(get_discovery_service)]
MessagingServiceDep = Annotated[MessagingService, Depends(get_messaging_service)]
PreferenceServiceDep = Annotated[PreferenceService, Depends(get_preference_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
