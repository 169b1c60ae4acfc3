"""Integration tests for signup, dev login and organization provisioning."""

import pytest
from fastapi import status
from sqlalchemy import func, select

import config
from auth.jwt import create_access_token
from models.organization import Organization
from models.profile import Profile
from models.user import User


@pytest.mark.asyncio
async def test_signup_provisions_organization_and_admin_profile(client, db_session):
    """Test: A new user owns exactly one new organization with an admin profile."""
    response = await client.post(
        "/api/v1/auth/signup",
        json={"email": "Founder@Example.com", "first_name": "Ada"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["access_token"]
    assert body["token_type"] == "bearer"
    assert body["profile"]["role"] == "admin"
    assert body["profile"]["email"] == "founder@example.com"

    profiles = (await db_session.execute(select(Profile))).scalars().all()
    assert len(profiles) == 1
    organizations = (await db_session.execute(select(Organization))).scalars().all()
    assert len(organizations) == 1
    assert organizations[0].name == "founder@example.com's Organization"
    assert profiles[0].organization_id == organizations[0].id

    # The issued token resolves to the new profile
    headers = {"Authorization": f"Bearer {body['access_token']}"}
    me = await client.get("/api/v1/profiles/me", headers=headers)
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["organization_id"] == str(organizations[0].id)


@pytest.mark.asyncio
async def test_signup_duplicate_email_returns_409(client, db_session):
    first = await client.post("/api/v1/auth/signup", json={"email": "dup@example.com"})
    assert first.status_code == status.HTTP_201_CREATED

    second = await client.post("/api/v1/auth/signup", json={"email": "DUP@example.com"})
    assert second.status_code == status.HTTP_409_CONFLICT

    count = await db_session.scalar(select(func.count()).select_from(User))
    assert count == 1


@pytest.mark.asyncio
async def test_signup_rejects_invalid_email(client):
    response = await client.post("/api/v1/auth/signup", json={"email": "not-an-email"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_dev_login_returns_token_for_existing_user(client, admin_a):
    response = await client.post("/api/v1/auth/dev-login", json={"email": "admin@org-a.com"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["profile"]["id"] == str(admin_a.id)


@pytest.mark.asyncio
async def test_dev_login_unknown_user_returns_404(client):
    response = await client.post("/api/v1/auth/dev-login", json={"email": "nobody@example.com"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_dev_login_disabled_in_production(client, admin_a, monkeypatch):
    monkeypatch.setattr(config.settings, "APP_ENV", "production")
    response = await client.post("/api/v1/auth/dev-login", json={"email": "admin@org-a.com"})
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client):
    response = await client.get("/api/v1/projects")
    assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)


@pytest.mark.asyncio
async def test_invalid_token_returns_401(client):
    response = await client.get("/api/v1/projects", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_user_without_profile_is_forbidden(client, db_session):
    user = User(email="loner@example.com")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)

    headers = {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}
    response = await client.get("/api/v1/projects", headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
