from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import visionmates.models  # noqa: F401  (registers every table)
from visionmates.database import Base
from visionmates.models.user import User
from visionmates.repositories.conversation_repository import ConversationRepository
from visionmates.repositories.participation_repository import ParticipationRepository
from visionmates.repositories.project_repository import ProjectRepository
from visionmates.repositories.reaction_repository import ReactionRepository
from visionmates.repositories.user_repository import UserRepository

BASE_TIME = datetime(2025, 4, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
async def db_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
    async with SessionLocal() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def make_user(db_session):
    async def _make_user(user_id: str, first_name: str | None = None, email: str | None = None):
        user = User(
            id=user_id,
            email=email or f"{user_id}@aoyama.ac.jp",
            first_name=first_name or user_id.capitalize(),
            profile_image_url=f"https://img.example/{user_id}.png",
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def project_repo(db_session):
    return ProjectRepository(db_session)


@pytest.fixture
def participation_repo(db_session):
    return ParticipationRepository(db_session)


@pytest.fixture
def reaction_repo(db_session):
    return ReactionRepository(db_session)


@pytest.fixture
def conversation_repo(db_session):
    return ConversationRepository(db_session)


@pytest.fixture
def user_repo(db_session):
    return UserRepository(db_session)


@pytest.fixture
def make_project(project_repo):
    counter = {"n": 0}

    async def _make_project(creator_id: str, title: str | None = None, created_at=None):
        counter["n"] += 1
        return await project_repo.create_project(
            creator_id=creator_id,
            title=title or f"Vision {counter['n']}",
            description="Build something together",
            created_at=created_at or BASE_TIME + timedelta(minutes=counter["n"]),
        )

    return _make_project
