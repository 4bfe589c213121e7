from unittest.mock import AsyncMock, MagicMock

import pytest

from visionmates.config import Settings
from visionmates.dependencies import _extract_token_from_request, get_current_user_optional
from visionmates.exceptions import UnauthorizedError
from visionmates.services import auth_service as auth_module
from visionmates.services.auth_service import AuthService, is_allowed_domain


@pytest.fixture
def service():
    return AuthService(secret_key="test", better_auth_url="http://auth.test/")


@pytest.mark.parametrize(
    ("email", "allowed"),
    [
        ("student@aoyama.ac.jp", True),
        ("staff@aoyama.jp", True),
        ("lab@cs.aoyama.ac.jp", True),
        ("Student@AOYAMA.AC.JP", True),
        ("someone@gmail.com", False),
        ("spoof@notaoyama.jp", False),
        ("spoof@aoyama.jp.evil.com", False),
        ("no-at-sign", False),
        (None, False),
    ],
)
def test_is_allowed_domain(email, allowed):
    assert is_allowed_domain(email, ["aoyama.jp", "aoyama.ac.jp"]) is allowed


def test_extract_token_prefers_bearer_header():
    token = _extract_token_from_request(
        authorization="Bearer header-token",
        cookie="better-auth.session_token=cookie-token",
        token_param="query-token",
    )
    assert token == "header-token"


def test_extract_token_from_query_then_cookie():
    assert _extract_token_from_request(token_param="query-token") == "query-token"
    assert (
        _extract_token_from_request(cookie="theme=dark; better-auth.session_token=abc")
        == "abc"
    )
    assert _extract_token_from_request(cookie="my_session_token_v2=xyz") == "xyz"


def test_extract_token_missing_or_malformed():
    assert _extract_token_from_request() is None
    assert _extract_token_from_request(authorization="Basic abc") is None
    assert _extract_token_from_request(cookie="theme=dark") is None


@pytest.mark.asyncio
async def test_first_sight_creates_user(service, db_session):
    service.verify_token = AsyncMock(
        return_value={"sub": "u1", "email": "u1@aoyama.ac.jp", "given_name": "Yui"}
    )

    user = await service.get_user_from_token("token", db_session)

    assert user.id == "u1"
    assert user.email == "u1@aoyama.ac.jp"
    assert user.first_name == "Yui"


@pytest.mark.asyncio
async def test_known_user_claims_are_refreshed(service, db_session, make_user):
    await make_user("u1", first_name="Old")
    service.verify_token = AsyncMock(
        return_value={"userId": "u1", "given_name": "New", "picture": "https://img/new.png"}
    )

    user = await service.get_user_from_token("token", db_session)

    assert user.first_name == "New"
    assert user.profile_image_url == "https://img/new.png"
    assert user.email == "u1@aoyama.ac.jp"


@pytest.mark.asyncio
async def test_token_without_identity_is_rejected(service, db_session):
    service.verify_token = AsyncMock(return_value={"email": "x@aoyama.ac.jp"})
    with pytest.raises(UnauthorizedError):
        await service.get_user_from_token("token", db_session)

    service.verify_token = AsyncMock(return_value={"sub": "new-user"})
    with pytest.raises(UnauthorizedError):
        await service.get_user_from_token("token", db_session)


@pytest.mark.asyncio
async def test_optional_user_applies_domain_gate(monkeypatch, db_session, make_user):
    outsider = await make_user("mallory", email="mallory@gmail.com")
    member = await make_user("yui")
    request = MagicMock()
    request.headers = {}
    app_settings = Settings(enforce_email_domain=True, allowed_email_domains=["aoyama.ac.jp"])

    monkeypatch.setattr(
        auth_module.auth_service, "get_user_from_token", AsyncMock(return_value=outsider)
    )
    assert await get_current_user_optional(
        request, db_session, app_settings, authorization="Bearer t"
    ) is None

    monkeypatch.setattr(
        auth_module.auth_service, "get_user_from_token", AsyncMock(return_value=member)
    )
    assert await get_current_user_optional(
        request, db_session, app_settings, authorization="Bearer t"
    ) is member


@pytest.mark.asyncio
async def test_optional_user_gate_can_be_disabled(monkeypatch, db_session, make_user):
    outsider = await make_user("mallory", email="mallory@gmail.com")
    request = MagicMock()
    request.headers = {}
    monkeypatch.setattr(
        auth_module.auth_service, "get_user_from_token", AsyncMock(return_value=outsider)
    )

    user = await get_current_user_optional(
        request, db_session, Settings(enforce_email_domain=False), authorization="Bearer t"
    )

    assert user is outsider
