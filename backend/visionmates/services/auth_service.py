from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import UTC, datetime

import jwt
from jwt import PyJWKClient
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from visionmates.config import settings
from visionmates.exceptions import UnauthorizedError
from visionmates.models.user import User

logger = logging.getLogger(__name__)


def is_allowed_domain(email: str | None, allowed_domains: Iterable[str]) -> bool:
    """True when the email's domain is an allowed domain or a subdomain of one."""
    if not email or "@" not in email:
        return False
    domain = email.rsplit("@", 1)[1].strip().lower()
    if not domain:
        return False
    for allowed in allowed_domains:
        allowed = allowed.strip().lower().lstrip(".")
        if domain == allowed or domain.endswith(f".{allowed}"):
            return True
    return False


class AuthService:
    """Verifies identity-provider tokens and keeps the users table in sync."""

    def __init__(
        self,
        secret_key: str,
        better_auth_url: str,
        better_auth_internal_url: str | None = None,
    ):
        self.secret_key = secret_key
        self.better_auth_url = better_auth_url.rstrip("/")
        internal_base_url = (better_auth_internal_url or better_auth_url).rstrip("/")
        # Initialize PyJWKClient for fetching JWKS
        self.jwks_client = PyJWKClient(
            f"{internal_base_url}/api/auth/jwks",
            cache_keys=True,
            max_cached_keys=16,
            lifespan=300,  # Cache for 5 minutes
        )

    async def verify_token(self, token: str) -> dict:
        """Verify JWT token and return payload."""
        return await asyncio.to_thread(self._verify_token_sync, token)

    def _verify_token_sync(self, token: str) -> dict:
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(token)
            issuer = self.better_auth_url
            return jwt.decode(
                token,
                signing_key.key,
                algorithms=["EdDSA"],
                audience=issuer,
                issuer=issuer,
            )
        except ExpiredSignatureError as exc:
            raise UnauthorizedError("Token has expired") from exc
        except (InvalidTokenError, PyJWKClientError) as exc:
            raise UnauthorizedError(f"Invalid token: {exc}") from exc

    async def get_user_from_token(self, token: str, db: AsyncSession) -> User:
        """Resolve the caller, creating the user on first sight and refreshing claims after."""
        payload = await self.verify_token(token)

        user_id = payload.get("userId") or payload.get("user_id") or payload.get("sub")
        if not user_id:
            raise UnauthorizedError("Token missing user ID")

        email = payload.get("email")
        first_name = payload.get("given_name") or payload.get("first_name") or payload.get("name")
        last_name = payload.get("family_name") or payload.get("last_name")
        image = payload.get("picture") or payload.get("image")

        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            if not email:
                raise UnauthorizedError("Token missing email")
            user = User(
                id=user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                profile_image_url=image,
            )
            db.add(user)
            logger.info("user created", extra={"user_id": user_id})
        else:
            user.email = email or user.email
            user.first_name = first_name or user.first_name
            user.last_name = last_name or user.last_name
            user.profile_image_url = image or user.profile_image_url
            user.updated_at = datetime.now(UTC)

        await db.commit()
        await db.refresh(user)
        return user


auth_service = AuthService(
    secret_key=settings.better_auth_secret,
    better_auth_url=settings.better_auth_url,
    better_auth_internal_url=settings.better_auth_internal_url,
)
