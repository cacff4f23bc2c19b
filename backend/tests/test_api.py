"""
DevFlow Backend — HTTP API Tests
==================================

What:  End-to-end through FastAPI routes with httpx.AsyncClient and a real
       SQLite database.

What we test:
    ✅ GET/POST /api/users with duplicate rejection (409 envelope)
    ✅ GET/POST /api/accounts with duplicate rejection
    ✅ Sign-up token authorizes question creation; no token → 401
    ✅ Malformed bodies render the validation envelope
    ✅ Health check and request ID header
    ✅ ApiClient against the in-process app
"""

import httpx
import pytest

from devflow.client import ApiClient


USER = {"name": "Ada", "username": "ada", "email": "ada@example.com"}
QUESTION = {
    "title": "How do I cancel a task?",
    "content": "I start an asyncio task and need to stop it cleanly.",
    "tags": ["python", "asyncio"],
}


class TestUsersApi:
    @pytest.mark.asyncio
    async def test_create_and_list(self, app_client):
        created = await app_client.post("/api/users", json=USER)
        listed = await app_client.get("/api/users")

        assert created.status_code == 201
        body = created.json()
        assert body["success"] is True
        assert body["data"]["username"] == "ada"
        assert listed.status_code == 200
        assert [u["username"] for u in listed.json()["data"]] == ["ada"]

    @pytest.mark.asyncio
    async def test_duplicate_email_is_409(self, app_client):
        await app_client.post("/api/users", json=USER)

        response = await app_client.post("/api/users", json={**USER, "username": "ada2"})

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "error": {"kind": "conflict", "message": "User already exists."},
        }

    @pytest.mark.asyncio
    async def test_invalid_body_field_errors(self, app_client):
        response = await app_client.post("/api/users", json={"name": "Ada"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["kind"] == "validation_error"
        assert {"username", "email"} <= set(error["details"])

    @pytest.mark.asyncio
    async def test_malformed_json(self, app_client):
        response = await app_client.post(
            "/api/users", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"]["kind"] == "validation_error"


class TestAccountsApi:
    @pytest.mark.asyncio
    async def test_duplicate_account_is_conflict(self, app_client):
        user = (await app_client.post("/api/users", json=USER)).json()["data"]
        account = {
            "user_id": user["id"],
            "name": "Ada",
            "provider": "github",
            "provider_account_id": "gh-1",
        }

        first = await app_client.post("/api/accounts", json=account)
        second = await app_client.post("/api/accounts", json=account)
        listed = await app_client.get("/api/accounts")

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"]["message"] == "An account with the same provider already exists"
        assert len(listed.json()["data"]) == 1


class TestAuthorizedRoutes:
    async def _sign_up(self, app_client):
        response = await app_client.post(
            "/api/auth/sign-up",
            json={
                "name": "Ada Lovelace",
                "username": "ada_l",
                "email": "ada@example.com",
                "password": "Analytical1!",
            },
        )
        assert response.status_code == 201
        return response.json()["data"]["access_token"]

    @pytest.mark.asyncio
    async def test_question_requires_token(self, app_client):
        response = await app_client.post("/api/questions", json=QUESTION)

        assert response.status_code == 401
        assert response.json()["error"]["kind"] == "unauthorized"
        listed = await app_client.get("/api/questions")
        assert listed.json()["data"] == {"questions": [], "is_next": False}

    @pytest.mark.asyncio
    async def test_question_vote_flow(self, app_client):
        token = await self._sign_up(app_client)
        headers = {"Authorization": f"Bearer {token}"}

        created = await app_client.post("/api/questions", json=QUESTION, headers=headers)
        question_id = created.json()["data"]["id"]
        vote = await app_client.post(
            "/api/votes",
            json={"target_id": question_id, "target_type": "question", "vote_type": "upvote"},
            headers=headers,
        )
        status = await app_client.get(
            "/api/votes/status",
            params={"target_id": question_id, "target_type": "question"},
            headers=headers,
        )
        detail = await app_client.get(f"/api/questions/{question_id}")

        assert created.status_code == 201
        assert [t["name"] for t in created.json()["data"]["tags"]] == ["python", "asyncio"]
        assert vote.json()["data"] == {"upvotes": 1, "downvotes": 0}
        assert status.json()["data"] == {"has_upvoted": True, "has_downvoted": False}
        assert detail.json()["data"]["upvotes"] == 1

    @pytest.mark.asyncio
    async def test_bad_token_is_anonymous(self, app_client):
        response = await app_client.post(
            "/api/questions", json=QUESTION, headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_question_is_404(self, app_client):
        response = await app_client.get("/api/questions/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "not_found"


class TestOperational:
    @pytest.mark.asyncio
    async def test_health(self, app_client):
        response = await app_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, app_client):
        response = await app_client.get("/api/users", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_api_client_through_app(self, app_client):
        from devflow.main import app

        client = ApiClient("http://test/api", transport=httpx.ASGITransport(app=app))

        created = await client.users.create(USER)
        listed = await client.users.get_all()

        assert created.success is True
        assert created.status == 201
        assert [u["username"] for u in listed.data] == ["ada"]

        fetched = await client.users.get_by_id(created.data["id"])
        assert fetched.success is True
        assert fetched.data["user"]["username"] == "ada"
        assert fetched.data["total_questions"] == 0
