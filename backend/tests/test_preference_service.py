from datetime import UTC, datetime, timedelta

import pytest

from visionmates.exceptions import InvalidArgumentError, ProjectNotFoundError
from visionmates.models.preference_db import ProjectLikeDB
from visionmates.models.reaction import ToggleAction
from visionmates.repositories.preference_repository import (
    ProjectHideRepository,
    ProjectLikeRepository,
)
from visionmates.services.preference_service import PreferenceService


@pytest.fixture
def service(db_session, project_repo):
    return PreferenceService(
        like_repository=ProjectLikeRepository(db_session),
        hide_repository=ProjectHideRepository(db_session),
        project_repository=project_repo,
        page_size=12,
        max_page_size=100,
    )


@pytest.fixture
async def project(make_user, make_project):
    await make_user("alice")
    await make_user("bob")
    return await make_project("alice")


@pytest.mark.asyncio
async def test_toggle_like_twice(service, project):
    first = await service.toggle_like("bob", project.id)
    assert first.action == ToggleAction.ADDED
    assert first.active is True
    assert await service.is_liked("bob", project.id)

    second = await service.toggle_like("bob", project.id)
    assert second.action == ToggleAction.REMOVED
    assert second.active is False
    assert not await service.is_liked("bob", project.id)


@pytest.mark.asyncio
async def test_like_and_hide_are_independent(service, project):
    await service.toggle_hide("bob", project.id)

    assert await service.is_hidden("bob", project.id)
    assert not await service.is_liked("bob", project.id)


@pytest.mark.asyncio
async def test_toggle_unknown_project(service):
    with pytest.raises(ProjectNotFoundError):
        await service.toggle_like("bob", "missing")


@pytest.mark.asyncio
async def test_liked_projects_paginate_newest_first(service, db_session, make_user, make_project):
    await make_user("alice")
    await make_user("bob")
    projects = [await make_project("alice") for _ in range(3)]
    base = datetime(2025, 5, 1, tzinfo=UTC)
    for i, project in enumerate(projects):
        db_session.add(
            ProjectLikeDB(user_id="bob", project_id=project.id, created_at=base + timedelta(hours=i))
        )
    await db_session.commit()

    first = await service.list_liked_projects("bob", limit=2)
    assert [like.project.id for like in first.likes] == [projects[2].id, projects[1].id]
    assert first.has_more is True

    second = await service.list_liked_projects("bob", limit=2, cursor_created_at=first.next_cursor)
    assert [like.project.id for like in second.likes] == [projects[0].id]
    assert second.has_more is False
    assert second.likes[0].project.creator.id == "alice"


@pytest.mark.asyncio
async def test_liked_projects_skip_inactive(service, project_repo, project):
    await service.toggle_like("bob", project.id)
    await project_repo.deactivate_project(project.id)

    page = await service.list_liked_projects("bob")

    assert page.likes == []


@pytest.mark.asyncio
async def test_liked_projects_limit_bounds(service):
    with pytest.raises(InvalidArgumentError):
        await service.list_liked_projects("bob", limit=0)
