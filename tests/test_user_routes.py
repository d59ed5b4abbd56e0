"""
End-to-end tests for /user/register, /user/login and /user/isAuthorized.
"""

import time
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import delete, select

from auth.tokens import TokenIssuer, TokenVerifier, get_token_verifier
from conftest import TEST_SECRET, bearer, register
from database.models import User


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_token(self, client):
        resp = await client.post(
            "/user/register",
            json={"email": "express@gmail.com", "password": "express_password", "name": "express_user"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["auth"] is True
        assert body["token"]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client):
        await register(client)
        resp = await client.post(
            "/user/register",
            json={"email": "express@gmail.com", "password": "other_password", "name": "someone"},
        )
        assert resp.status_code == 409
        assert "already exists" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_password_stored_hashed(self, client, session_factory):
        await register(client, password="express_password")
        async with session_factory() as session:
            user = (await session.execute(select(User))).scalar_one()
        assert user.password_hash != "express_password"
        assert user.password_hash.startswith("$2b$")

    @pytest.mark.asyncio
    async def test_missing_fields(self, client):
        resp = await client.post("/user/register", json={"email": "express@gmail.com"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_hash_failure_stores_nothing(self, client, session_factory, monkeypatch):
        from auth import routes
        from auth.errors import PasswordHashError

        def _boom(password):
            raise PasswordHashError()

        monkeypatch.setattr(routes, "hash_password", _boom)
        resp = await client.post(
            "/user/register",
            json={"email": "express@gmail.com", "password": "express_password", "name": "express_user"},
        )
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal Server Error"}

        async with session_factory() as session:
            assert (await session.execute(select(User))).scalars().all() == []

    @pytest.mark.asyncio
    async def test_duplicate_caught_by_unique_index(self, client, session_factory):
        await register(client)
        with patch("auth.routes.get_user_by_email", new=AsyncMock(return_value=None)):
            resp = await client.post(
                "/user/register",
                json={"email": "express@gmail.com", "password": "other_password", "name": "someone"},
            )
        assert resp.status_code == 409
        assert resp.json()["detail"] == "A user with that email already exists."

        async with session_factory() as session:
            users = (await session.execute(select(User))).scalars().all()
        assert len(users) == 1
        assert users[0].display_name == "express_user"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, client):
        await register(client)
        resp = await client.post(
            "/user/login",
            json={"email": "express@gmail.com", "password": "express_password"},
        )
        assert resp.status_code == 201
        assert resp.json()["auth"] is True

    @pytest.mark.asyncio
    async def test_unknown_email(self, client):
        resp = await client.post(
            "/user/login",
            json={"email": "nobody@gmail.com", "password": "whatever"},
        )
        assert resp.status_code == 404
        assert resp.json()["auth"] is False

    @pytest.mark.asyncio
    async def test_wrong_password(self, client):
        await register(client)
        resp = await client.post(
            "/user/login",
            json={"email": "express@gmail.com", "password": "wrong_password"},
        )
        assert resp.status_code == 401
        body = resp.json()
        assert body["auth"] is False
        assert body["token"] is None

    @pytest.mark.asyncio
    async def test_password_beyond_72_bytes_rejected(self, client):
        stored = "a" * 72
        await register(client, password=stored)
        resp = await client.post(
            "/user/login",
            json={"email": "express@gmail.com", "password": stored + "WRONG"},
        )
        assert resp.status_code == 401

        resp = await client.post(
            "/user/login",
            json={"email": "express@gmail.com", "password": stored},
        )
        assert resp.status_code == 201


class TestIsAuthorized:
    @pytest.mark.asyncio
    async def test_register_then_authorized(self, client):
        token = await register(client)
        resp = await client.get("/user/isAuthorized", headers=bearer(token))
        assert resp.status_code == 200
        body = resp.json()
        assert body["email"] == "express@gmail.com"
        assert body["name"] == "express_user"
        assert "password" not in body
        assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_login_token_authorizes(self, client):
        await register(client)
        resp = await client.post(
            "/user/login",
            json={"email": "express@gmail.com", "password": "express_password"},
        )
        resp = await client.get("/user/isAuthorized", headers=bearer(resp.json()["token"]))
        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_no_token(self, client):
        resp = await client.get("/user/isAuthorized")
        assert resp.status_code == 401
        assert resp.json()["auth"] is False
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self, client):
        resp = await client.get("/user/isAuthorized", headers={"Authorization": "Basic abc"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token(self, client):
        resp = await client.get("/user/isAuthorized", headers=bearer("not-a-token"))
        assert resp.status_code == 401
        assert resp.json()["auth"] is False

    @pytest.mark.asyncio
    async def test_token_from_other_secret(self, client):
        token = TokenIssuer("some-other-secret-that-is-32-bytes").issue("whoever")
        resp = await client.get("/user/isAuthorized", headers=bearer(token))
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_token(self, app, client):
        token = await register(client)
        later = time.time() + 601
        app.dependency_overrides[get_token_verifier] = lambda: TokenVerifier(
            TEST_SECRET, clock=lambda: later
        )
        resp = await client.get("/user/isAuthorized", headers=bearer(token))
        assert resp.status_code == 401
        assert resp.json()["message"] == "Token has expired."

    @pytest.mark.asyncio
    async def test_deleted_account(self, client, session_factory):
        token = await register(client)
        async with session_factory() as session:
            await session.execute(delete(User))
            await session.commit()

        resp = await client.get("/user/isAuthorized", headers=bearer(token))
        assert resp.status_code == 404
        assert resp.json()["auth"] is False
