from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest
from httpx import AsyncClient
from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.auth.models import User
from parlour.auth.security import decode_access_token
from parlour.core.config import settings

from conftest import TEST_PASSWORD


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, super_admin) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "SuperAdmin@parlour.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()

    assert data["message"] == "Login successful"
    assert data["tokenType"] == "bearer"
    assert "issuedAt" in data
    assert data["user"]["email"] == "superadmin@parlour.com"
    assert data["user"]["role"] == "super_admin"
    UUID(data["user"]["id"])

    claims = decode_access_token(data["accessToken"])
    assert claims["sub"] == str(super_admin.id)
    assert claims["role"] == "super_admin"
    assert claims["iss"] == settings.jwt_issuer
    assert claims["aud"] == settings.jwt_audience


@pytest.mark.asyncio
async def test_login_rejects_bad_credentials(client: AsyncClient, admin) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "admin@parlour.com", "password": "wrong-password"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@parlour.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_oauth_form(client: AsyncClient, admin) -> None:
    response = await client.post(
        "/api/v1/auth/login-oauth",
        data={"username": "admin@parlour.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert decode_access_token(data["access_token"])["email"] == "admin@parlour.com"


@pytest.mark.asyncio
async def test_profile(client: AsyncClient, admin, admin_headers) -> None:
    response = await client.get("/api/v1/auth/profile", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["user"] == {
        "id": str(admin.id),
        "email": "admin@parlour.com",
        "name": "Administrator",
        "role": "admin",
    }

    response = await client.get("/api/v1/auth/profile")
    assert response.status_code == 401

    response = await client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_for_other_audience_is_rejected(client: AsyncClient, admin) -> None:
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": str(admin.id),
            "iss": settings.jwt_issuer,
            "aud": "someone-else",
            "iat": int(now.timestamp()),
            "exp": now + timedelta(minutes=5),
        },
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    response = await client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_register_by_super_admin(
    client: AsyncClient, db_session: AsyncSession, super_admin_headers
) -> None:
    payload = {
        "email": "Manager@parlour.com",
        "password": "StrongPass123",
        "name": "Front Desk Manager",
        "role": "admin",
    }
    response = await client.post("/api/v1/auth/register", json=payload, headers=super_admin_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User created successfully"
    assert data["user"]["email"] == "manager@parlour.com"
    assert data["user"]["role"] == "admin"

    result = await db_session.execute(select(User).where(User.email == "manager@parlour.com"))
    user = result.scalar_one_or_none()
    assert user is not None
    assert user.password_hash != payload["password"]

    response = await client.post("/api/v1/auth/register", json=payload, headers=super_admin_headers)
    assert response.status_code == 409
    assert response.json()["detail"] == "User already exists"

    login = await client.post(
        "/api/v1/auth/login",
        json={"email": "manager@parlour.com", "password": "StrongPass123"},
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_register_requires_super_admin(client: AsyncClient, admin_headers) -> None:
    payload = {
        "email": "intruder@parlour.com",
        "password": "StrongPass123",
        "name": "Intruder",
        "role": "super_admin",
    }
    response = await client.post("/api/v1/auth/register", json=payload, headers=admin_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Super admin access required"

    response = await client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_register_validation(client: AsyncClient, super_admin_headers) -> None:
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "short@parlour.com", "password": "short", "name": "Short", "role": "admin"},
        headers=super_admin_headers,
    )
    assert response.status_code == 422

    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "owner@parlour.com", "password": "StrongPass123", "name": "Owner", "role": "owner"},
        headers=super_admin_headers,
    )
    assert response.status_code == 422
