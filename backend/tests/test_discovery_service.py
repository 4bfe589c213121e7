from datetime import datetime, timedelta, timezone

import pytest

from visionmates.exceptions import InvalidArgumentError
from visionmates.models.project import DiscoverCursor, ParticipationType
from visionmates.services.discovery_service import (
    DiscoveryService,
    build_cursor,
    normalize_timestamp,
)
from visionmates.services.participation_service import ParticipationService

BASE_TIME = datetime(2025, 4, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(project_repo):
    return DiscoveryService(project_repo, default_limit=12, max_limit=100)


async def _walk(service, limit):
    seen, cursor = [], None
    while True:
        page = await service.get_page(limit=limit, cursor=cursor)
        seen.extend(p.id for p in page.projects)
        if not page.has_more:
            return seen
        cursor = page.next_cursor


def test_normalize_timestamp():
    naive = datetime(2025, 4, 1, 9, 0)
    assert normalize_timestamp(naive) == datetime(2025, 4, 1, 9, 0, tzinfo=timezone.utc)

    tokyo = datetime(2025, 4, 1, 18, 0, tzinfo=timezone(timedelta(hours=9)))
    normalized = normalize_timestamp(tokyo)
    assert normalized.utcoffset() == timedelta(0)
    assert normalized.hour == 9


def test_build_cursor_requires_both_halves():
    assert build_cursor(None, None) is None
    assert build_cursor(BASE_TIME, "abc") == DiscoverCursor(last_created_at=BASE_TIME, last_id="abc")
    with pytest.raises(InvalidArgumentError):
        build_cursor(BASE_TIME, None)
    with pytest.raises(InvalidArgumentError):
        build_cursor(None, "abc")


@pytest.mark.asyncio
async def test_limit_bounds(service):
    with pytest.raises(InvalidArgumentError):
        await service.get_page(limit=0)
    with pytest.raises(InvalidArgumentError):
        await service.get_page(limit=101)


@pytest.mark.asyncio
async def test_empty_feed(service):
    page = await service.get_page()

    assert page.projects == []
    assert page.has_more is False
    assert page.next_cursor is None


@pytest.mark.asyncio
async def test_pages_newest_first_with_id_tie_break(service, make_user, project_repo):
    await make_user("alice")
    tied = BASE_TIME + timedelta(hours=1)
    for project_id in ("p-a", "p-c", "p-b"):
        await project_repo.create_project("alice", project_id, "desc", created_at=tied, project_id=project_id)
    await project_repo.create_project("alice", "old", "desc", created_at=BASE_TIME, project_id="p-z")

    page = await service.get_page(limit=12)

    assert [p.id for p in page.projects] == ["p-c", "p-b", "p-a", "p-z"]
    assert page.has_more is False


@pytest.mark.asyncio
async def test_walk_returns_every_project_exactly_once(service, make_user, project_repo):
    await make_user("alice")
    ids = []
    for i in range(7):
        # Pairs of projects share a timestamp
        created_at = BASE_TIME + timedelta(minutes=i // 2)
        project = await project_repo.create_project(
            "alice", f"Project {i}", "desc", created_at=created_at, project_id=f"p{i}"
        )
        ids.append(project.id)

    for limit in (1, 2, 3, 7, 10):
        seen = await _walk(service, limit)
        assert sorted(seen) == sorted(ids)
        assert len(seen) == len(set(seen))


@pytest.mark.asyncio
async def test_exact_multiple_reports_more_then_empty_page(service, make_user, make_project):
    await make_user("alice")
    for _ in range(4):
        await make_project("alice")

    first = await service.get_page(limit=2)
    second = await service.get_page(limit=2, cursor=first.next_cursor)
    third = await service.get_page(limit=2, cursor=second.next_cursor)

    assert first.has_more is True
    assert second.has_more is True
    assert third.projects == []
    assert third.has_more is False


@pytest.mark.asyncio
async def test_new_projects_do_not_shift_later_pages(service, make_user, project_repo):
    await make_user("alice")
    for i in range(4):
        await project_repo.create_project(
            "alice", f"P{i}", "desc", created_at=BASE_TIME + timedelta(minutes=i), project_id=f"p{i}"
        )

    first = await service.get_page(limit=2)
    await project_repo.create_project(
        "alice", "Fresh", "desc", created_at=BASE_TIME + timedelta(days=1), project_id="fresh"
    )
    second = await service.get_page(limit=2, cursor=first.next_cursor)

    assert [p.id for p in first.projects] == ["p3", "p2"]
    assert [p.id for p in second.projects] == ["p1", "p0"]


@pytest.mark.asyncio
async def test_aware_cursor_from_other_zone(service, make_user, project_repo):
    await make_user("alice")
    for i in range(3):
        await project_repo.create_project(
            "alice", f"P{i}", "desc", created_at=BASE_TIME + timedelta(minutes=i), project_id=f"p{i}"
        )
    tokyo = timezone(timedelta(hours=9))
    cursor = DiscoverCursor(
        last_created_at=(BASE_TIME + timedelta(minutes=2)).astimezone(tokyo), last_id="p2"
    )

    page = await service.get_page(limit=12, cursor=cursor)

    assert [p.id for p in page.projects] == ["p1", "p0"]


@pytest.mark.asyncio
async def test_inactive_projects_are_excluded(service, make_user, make_project, project_repo):
    await make_user("alice")
    visible = await make_project("alice")
    hidden = await make_project("alice")
    await project_repo.deactivate_project(hidden.id)

    page = await service.get_page()

    assert [p.id for p in page.projects] == [visible.id]


@pytest.mark.asyncio
async def test_feed_exposes_public_creator_and_participations(
    service, make_user, make_project, project_repo, participation_repo
):
    await make_user("alice", first_name="Alice")
    await make_user("bob")
    project = await make_project("alice")
    participation = ParticipationService(participation_repo, project_repo)
    await participation.set_participation(project.id, "bob", "raise_hand")

    page = await service.get_page()
    entry = page.projects[0]

    assert entry.creator.id == "alice"
    assert entry.creator.first_name == "Alice"
    assert "email" not in entry.creator.model_dump()
    assert [(p.type, p.user_id) for p in entry.participations] == [
        (ParticipationType.RAISE_HAND, "bob")
    ]
