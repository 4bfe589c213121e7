import pytest
from httpx import ASGITransport, AsyncClient

from visionmates.database import get_db
from visionmates.dependencies import get_authenticated_user, get_current_user_optional
from visionmates.exceptions import UnauthorizedError
from visionmates.main import create_app


class AuthState:
    user = None


@pytest.fixture
def auth():
    return AuthState()


@pytest.fixture
def app(db_session, auth):
    app = create_app()

    async def override_get_db():
        yield db_session

    async def override_authenticated_user():
        if auth.user is None:
            raise UnauthorizedError("Authentication required")
        return auth.user

    async def override_optional_user():
        return auth.user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_authenticated_user] = override_authenticated_user
    app.dependency_overrides[get_current_user_optional] = override_optional_user
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def users(make_user):
    return {name: await make_user(name) for name in ("alice", "bob", "carol")}


async def _create_project(client, auth, user, title="Campus radio"):
    auth.user = user
    response = await client.post("/api/projects", json={"title": title, "description": "On air"})
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_missing_token_is_401(db_session):
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/auth/user")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_domain_gate(client, auth, make_user):
    auth.user = await make_user("mallory", email="mallory@gmail.com")

    response = await client.get("/api/auth/user")

    assert response.status_code == 403
    assert response.json()["code"] == "DOMAIN_NOT_ALLOWED"


@pytest.mark.asyncio
async def test_auth_user_returns_camel_case_account(client, auth, users):
    auth.user = users["alice"]

    response = await client.get("/api/auth/user")

    body = response.json()
    assert response.status_code == 200
    assert body["email"] == "alice@aoyama.ac.jp"
    assert body["firstName"] == "Alice"


@pytest.mark.asyncio
async def test_participation_flow(client, auth, users):
    project = await _create_project(client, auth, users["alice"])
    url = f"/api/projects/{project['id']}/participate"
    auth.user = users["bob"]

    response = await client.post(url, json={"type": "watch"})
    assert response.status_code == 201
    assert response.json()["type"] == "watch"

    response = await client.post(url, json={"type": "commit"})
    assert response.status_code == 201

    summary = (await client.get(f"/api/projects/{project['id']}/participation")).json()
    assert summary == {
        "counts": {"watch": 0, "raise_hand": 0, "commit": 1},
        "userParticipation": "commit",
    }

    for _ in range(2):
        response = await client.request("DELETE", url, json={"type": "commit"})
        assert response.status_code == 204

    summary = (await client.get(f"/api/projects/{project['id']}/participation")).json()
    assert summary["counts"]["commit"] == 0
    assert summary["userParticipation"] is None


@pytest.mark.asyncio
async def test_participation_errors(client, auth, users):
    project = await _create_project(client, auth, users["alice"])
    url = f"/api/projects/{project['id']}/participate"

    response = await client.post(url, json={"type": "lurk"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid participation type"

    response = await client.post(url, json={})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request data"

    response = await client.post("/api/projects/missing/participate", json={"type": "watch"})
    assert response.status_code == 404

    auth.user = None
    response = await client.post(url, json={"type": "watch"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_strict_participation_conflict(client, auth, users):
    project = await _create_project(client, auth, users["alice"])
    url = f"/api/projects/{project['id']}/participate?strict=true"

    assert (await client.post(url, json={"type": "raise_hand"})).status_code == 201
    response = await client.post(url, json={"type": "raise_hand"})

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_discover_is_public_and_paginates(client, auth, users):
    created = [await _create_project(client, auth, users["alice"], f"P{i}") for i in range(3)]
    auth.user = None

    first = (await client.get("/api/projects/discover", params={"limit": 2})).json()
    assert first["hasMore"] is True
    assert first["projects"][0]["creator"] == {
        "id": "alice",
        "firstName": "Alice",
        "profileImageUrl": "https://img.example/alice.png",
    }

    cursor = first["nextCursor"]
    second = (
        await client.get(
            "/api/projects/discover",
            params={
                "limit": 2,
                "lastCreatedAt": cursor["lastCreatedAt"],
                "lastId": cursor["lastId"],
            },
        )
    ).json()
    seen = [p["id"] for p in first["projects"] + second["projects"]]
    assert sorted(seen) == sorted(p["id"] for p in created)
    assert second["hasMore"] is False


@pytest.mark.asyncio
async def test_discover_rejects_half_cursor(client):
    response = await client.get("/api/projects/discover", params={"lastId": "abc"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_reaction_toggle_and_status(client, auth, users):
    project = await _create_project(client, auth, users["alice"])
    auth.user = users["bob"]
    payload = {"targetId": project["id"], "targetType": "project"}

    first = await client.post("/api/reactions", json=payload)
    assert first.json() == {"action": "added", "count": 1, "userReacted": True}

    status = (await client.get(f"/api/reactions/project/{project['id']}")).json()
    assert status == {"count": 1, "userReacted": True}

    auth.user = None
    status = (await client.get(f"/api/reactions/project/{project['id']}")).json()
    assert status == {"count": 1, "userReacted": False}

    auth.user = users["bob"]
    second = await client.post("/api/reactions", json=payload)
    assert second.json() == {"action": "removed", "count": 0, "userReacted": False}


@pytest.mark.asyncio
async def test_reaction_errors(client, auth, users):
    auth.user = users["bob"]

    response = await client.post("/api/reactions", json={"targetId": "x", "targetType": "poll"})
    assert response.status_code == 400

    response = await client.post("/api/reactions", json={"targetId": "x", "targetType": "comment"})
    assert response.status_code == 404
    assert response.json()["message"] == "Comment not found"


@pytest.mark.asyncio
async def test_messaging_flow(client, auth, users):
    auth.user = users["alice"]
    response = await client.post("/api/messages", json={"recipientId": "bob", "content": "hi"})
    assert response.status_code == 201
    conversation_id = response.json()["conversationId"]

    auth.user = users["bob"]
    response = await client.post("/api/messages", json={"recipientId": "alice", "content": "hey"})
    assert response.json()["conversationId"] == conversation_id

    listed = (await client.get("/api/conversations")).json()
    assert len(listed) == 1
    assert listed[0]["messages"][0]["content"] == "hey"

    opened = (await client.get(f"/api/conversations/{conversation_id}")).json()
    assert [(m["content"], m["isRead"]) for m in opened["messages"]] == [
        ("hi", True),
        ("hey", False),
    ]

    auth.user = users["carol"]
    response = await client.get(f"/api/conversations/{conversation_id}")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_message_errors(client, auth, users):
    auth.user = users["alice"]

    response = await client.post("/api/messages", json={"recipientId": "alice", "content": "hi"})
    assert response.status_code == 400

    response = await client.post("/api/messages", json={"recipientId": "bob", "content": ""})
    assert response.status_code == 400

    response = await client.post("/api/messages", json={"recipientId": "ghost", "content": "hi"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_like_toggle_and_listing(client, auth, users):
    project = await _create_project(client, auth, users["alice"])
    auth.user = users["bob"]

    response = await client.post(f"/api/projects/{project['id']}/like")
    assert response.json() == {"action": "added", "active": True}

    page = (await client.get("/api/likes")).json()
    assert [like["project"]["id"] for like in page["likes"]] == [project["id"]]

    response = await client.post(f"/api/projects/{project['id']}/like")
    assert response.json() == {"action": "removed", "active": False}


@pytest.mark.asyncio
async def test_profile_and_skills(client, auth, users):
    auth.user = users["alice"]

    response = await client.put("/api/profile", json={"displayName": "Ali", "bio": "DJ"})
    assert response.status_code == 200
    assert response.json()["displayName"] == "Ali"

    response = await client.put("/api/profile/skills", json={"skill": "Python", "level": 4})
    assert response.status_code == 200

    auth.user = None
    profile = (await client.get("/api/profile/alice")).json()
    assert profile["bio"] == "DJ"
    assert "email" not in profile
    skills = (await client.get("/api/users/alice/skills")).json()
    assert [(s["skill"], s["level"]) for s in skills] == [("Python", 4)]


@pytest.mark.asyncio
async def test_project_edit_and_progress_are_creator_only(client, auth, users):
    project = await _create_project(client, auth, users["alice"])
    auth.user = users["bob"]

    response = await client.put(f"/api/projects/{project['id']}", json={"title": "Mine"})
    assert response.status_code == 403

    response = await client.post(
        f"/api/projects/{project['id']}/progress", json={"title": "W1", "content": "x"}
    )
    assert response.status_code == 403

    response = await client.post(f"/api/projects/{project['id']}/comments", json={"content": "Nice"})
    assert response.status_code == 201

    details = (await client.get(f"/api/projects/{project['id']}")).json()
    assert details["comments"][0]["user"]["firstName"] == "Bob"
