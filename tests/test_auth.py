from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.email_verification import EmailVerificationCode
from app.models.user import User


@pytest.mark.asyncio
async def test_register_success(client: AsyncClient):
    user_data = {
        "email": "NewUser@Example.com",
        "password": "securepassword123",
        "phone": "+2348098765432",
    }

    response = await client.post("/api/v1/auth/register", json=user_data)

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "newuser@example.com"
    assert data["phone"] == user_data["phone"]
    assert data["status"] == "active"
    assert data["email_verified"] is False
    assert data["is_admin"] is False
    assert "id" in data
    assert "created_at" in data
    assert "password" not in data
    assert "password_hash" not in data


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, registered_user: dict):
    user_data = {
        "email": registered_user["email"],
        "password": "anotherpassword123",
    }

    response = await client.post("/api/v1/auth/register", json=user_data)

    assert response.status_code == 409
    data = response.json()
    assert data["detail"] == "Email already registered"
    assert data["code"] == "RESOURCE_ALREADY_EXISTS"
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
async def test_register_duplicate_phone(client: AsyncClient, registered_user: dict):
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": "other@example.com",
            "password": "anotherpassword123",
            "phone": registered_user["phone"],
        },
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Phone number already registered"


@pytest.mark.asyncio
async def test_register_invalid_email(client: AsyncClient):
    user_data = {
        "email": "invalid-email",
        "password": "securepassword123",
    }

    response = await client.post("/api/v1/auth/register", json=user_data)

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_register_short_password(client: AsyncClient):
    user_data = {
        "email": "test@example.com",
        "password": "short",
    }

    response = await client.post("/api/v1/auth/register", json=user_data)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, registered_user: dict):
    response = await client.post(
        "/api/v1/auth/login",
        data={
            "username": registered_user["email"],
            "password": registered_user["password"],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, registered_user: dict):
    response = await client.post(
        "/api/v1/auth/login",
        data={
            "username": registered_user["email"],
            "password": "wrongpassword",
        },
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect email or password"
    assert response.json()["code"] == "AUTH_INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_nonexistent_user(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/login",
        data={
            "username": "nonexistent@example.com",
            "password": "somepassword123",
        },
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect email or password"


@pytest.mark.asyncio
async def test_login_suspended_user(
    client: AsyncClient, db_session: AsyncSession, registered_user: dict
):
    await db_session.execute(
        update(User).where(User.email == registered_user["email"]).values(status="suspended")
    )
    await db_session.commit()

    response = await client.post(
        "/api/v1/auth/login",
        data={
            "username": registered_user["email"],
            "password": registered_user["password"],
        },
    )

    assert response.status_code == 403
    assert response.json()["code"] == "AUTHZ_ACCOUNT_SUSPENDED"


@pytest.mark.asyncio
async def test_get_me_with_token(client: AsyncClient, registered_user: dict, auth_token: str):
    response = await client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == registered_user["email"]
    assert data["phone"] == registered_user["phone"]
    assert "id" in data
    assert "password" not in data


@pytest.mark.asyncio
async def test_get_me_banned_user(
    client: AsyncClient, db_session: AsyncSession, registered_user: dict, auth_token: str
):
    await db_session.execute(
        update(User).where(User.email == registered_user["email"]).values(status="banned")
    )
    await db_session.commit()

    response = await client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Your account has been banned"


@pytest.mark.asyncio
async def test_get_me_without_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json()["code"] == "AUTH_NOT_AUTHENTICATED"


@pytest.mark.asyncio
async def test_get_me_invalid_token(client: AsyncClient):
    response = await client.get(
        "/api/v1/auth/me",
        headers={"Authorization": "Bearer invalid-token"},
    )

    assert response.status_code == 401
    assert response.json()["code"] == "AUTH_TOKEN_INVALID"
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


# ============== Email Verification Tests ==============


@pytest.mark.asyncio
async def test_verify_email_with_issued_code(
    client: AsyncClient, auth_token: str, monkeypatch
):
    monkeypatch.setattr(settings, "EXPOSE_VERIFICATION_CODE", True)
    headers = {"Authorization": f"Bearer {auth_token}"}

    issued = await client.post("/api/v1/auth/email/send-code", headers=headers)
    assert issued.status_code == 200
    code = issued.json()["code"]
    assert len(code) == 6

    response = await client.post(
        "/api/v1/auth/email/verify", json={"code": code}, headers=headers
    )

    assert response.status_code == 200
    assert response.json()["email_verified"] is True

    again = await client.post("/api/v1/auth/email/send-code", headers=headers)
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_send_code_hides_code_by_default(client: AsyncClient, auth_token: str):
    response = await client.post(
        "/api/v1/auth/email/send-code", headers={"Authorization": f"Bearer {auth_token}"}
    )

    assert response.status_code == 200
    assert response.json()["code"] is None


@pytest.mark.asyncio
async def test_verify_email_wrong_code(client: AsyncClient, auth_token: str, monkeypatch):
    monkeypatch.setattr(settings, "EXPOSE_VERIFICATION_CODE", True)
    headers = {"Authorization": f"Bearer {auth_token}"}
    code = (await client.post("/api/v1/auth/email/send-code", headers=headers)).json()["code"]
    wrong = "000000" if code != "000000" else "111111"

    response = await client.post(
        "/api/v1/auth/email/verify", json={"code": wrong}, headers=headers
    )

    assert response.status_code == 422
    assert response.json()["field"] == "code"
    me = await client.get("/api/v1/auth/me", headers=headers)
    assert me.json()["email_verified"] is False


@pytest.mark.asyncio
async def test_verify_email_expired_code(
    client: AsyncClient, db_session: AsyncSession, auth_token: str, monkeypatch
):
    monkeypatch.setattr(settings, "EXPOSE_VERIFICATION_CODE", True)
    headers = {"Authorization": f"Bearer {auth_token}"}
    code = (await client.post("/api/v1/auth/email/send-code", headers=headers)).json()["code"]
    await db_session.execute(
        update(EmailVerificationCode).values(
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1)
        )
    )
    await db_session.commit()

    response = await client.post(
        "/api/v1/auth/email/verify", json={"code": code}, headers=headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_verify_email_code_is_single_use(
    client: AsyncClient, db_session: AsyncSession, auth_token: str, monkeypatch
):
    monkeypatch.setattr(settings, "EXPOSE_VERIFICATION_CODE", True)
    headers = {"Authorization": f"Bearer {auth_token}"}
    code = (await client.post("/api/v1/auth/email/send-code", headers=headers)).json()["code"]
    await client.post("/api/v1/auth/email/verify", json={"code": code}, headers=headers)
    await db_session.execute(update(User).values(email_verified=False))
    await db_session.commit()

    response = await client.post(
        "/api/v1/auth/email/verify", json={"code": code}, headers=headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_verify_email_rejects_malformed_code(client: AsyncClient, auth_token: str):
    response = await client.post(
        "/api/v1/auth/email/verify",
        json={"code": "12ab"},
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"
