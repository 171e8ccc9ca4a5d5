"""
Integration tests for account endpoints.
"""

import pytest
from httpx import AsyncClient
from jose import jwt
from sqlalchemy import func, select

from account_service.domain.models import User

pytestmark = pytest.mark.integration

SIGN_UP_PAYLOAD = {
    "fullName": "Jane Doe",
    "email": "jane@university.edu",
    "universityId": 20240117,
    "password": "correct-horse-battery",
    "universityCard": "/ids/jane-card.png",
}


class TestSignInEndpoint:
    """Test POST /api/v1/auth/sign-in endpoint."""

    @pytest.mark.asyncio
    async def test_sign_in_success_sets_session_cookie(self, client: AsyncClient, existing_user: User):
        response = await client.post(
            "/api/v1/auth/sign-in",
            json={"email": "existing@university.edu", "password": "existing-pass-123"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}

        token = response.cookies.get("session")
        assert token
        claims = jwt.decode(token, "test-secret-key", algorithms=["HS256"])
        assert claims["email"] == "existing@university.edu"

        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie

    @pytest.mark.asyncio
    async def test_sign_in_wrong_password(self, client: AsyncClient, existing_user: User):
        response = await client.post(
            "/api/v1/auth/sign-in",
            json={"email": "existing@university.edu", "password": "wrong"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": "CredentialsSignin"}
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_sign_in_missing_password(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/sign-in", json={"email": "a@b.edu"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_sign_in_rate_limited_redirects(self, client: AsyncClient, existing_user: User):
        headers = {"X-Forwarded-For": "203.0.113.9"}
        for _ in range(5):
            await client.post(
                "/api/v1/auth/sign-in",
                json={"email": "existing@university.edu", "password": "wrong"},
                headers=headers,
            )

        response = await client.post(
            "/api/v1/auth/sign-in",
            json={"email": "existing@university.edu", "password": "existing-pass-123"},
            headers=headers,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/too-fast"
        assert "set-cookie" not in response.headers


class TestSignUpEndpoint:
    """Test POST /api/v1/auth/sign-up endpoint."""

    @pytest.mark.asyncio
    async def test_sign_up_success(self, client: AsyncClient, test_db, workflow_transport):
        response = await client.post("/api/v1/auth/sign-up", json=SIGN_UP_PAYLOAD)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert response.cookies.get("session")

        count = (await test_db.execute(select(func.count()).select_from(User))).scalar_one()
        assert count == 1

        assert len(workflow_transport.requests) == 1
        assert workflow_transport.bodies[0] == {"email": "jane@university.edu", "fullName": "Jane Doe"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["x" * 80, "p\u00e4ssw\u00f6rd-\u00fcber-sicher"])
    async def test_sign_up_then_sign_in_with_long_or_non_ascii_password(
        self, client: AsyncClient, test_db, password
    ):
        payload = dict(SIGN_UP_PAYLOAD, password=password)

        response = await client.post("/api/v1/auth/sign-up", json=payload)

        assert response.status_code == 200
        assert response.json() == {"success": True}

        response = await client.post(
            "/api/v1/auth/sign-in",
            json={"email": "jane@university.edu", "password": password},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert response.cookies.get("session")

    @pytest.mark.asyncio
    async def test_sign_up_duplicate(self, client: AsyncClient, existing_user: User):
        payload = dict(SIGN_UP_PAYLOAD, email="existing@university.edu")

        response = await client.post("/api/v1/auth/sign-up", json=payload)

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": "User already exists"}

    @pytest.mark.asyncio
    async def test_sign_up_missing_university_card(self, client: AsyncClient, test_db):
        payload = dict(SIGN_UP_PAYLOAD, universityCard="")

        response = await client.post("/api/v1/auth/sign-up", json=payload)

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": "University details are required"}
        count = (await test_db.execute(select(func.count()).select_from(User))).scalar_one()
        assert count == 0

    @pytest.mark.asyncio
    async def test_sign_up_rate_limited_redirects(self, client: AsyncClient, test_db):
        headers = {"X-Forwarded-For": "203.0.113.10"}
        for i in range(5):
            await client.post(
                "/api/v1/auth/sign-in",
                json={"email": f"nobody{i}@university.edu", "password": "pw"},
                headers=headers,
            )

        response = await client.post("/api/v1/auth/sign-up", json=SIGN_UP_PAYLOAD, headers=headers)

        assert response.status_code == 303
        assert response.headers["location"] == "/too-fast"
        count = (await test_db.execute(select(func.count()).select_from(User))).scalar_one()
        assert count == 0


class TestServiceEndpoints:
    """Test informational endpoints."""

    @pytest.mark.asyncio
    async def test_too_fast_page(self, client: AsyncClient):
        response = await client.get("/too-fast")

        assert response.status_code == 429
        assert response.json()["error"] == "too_many_requests"

    @pytest.mark.asyncio
    async def test_root_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
