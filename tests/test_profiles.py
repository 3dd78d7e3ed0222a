from datetime import date

import pytest
from httpx import AsyncClient

from app.models.profile import Profile
from app.services.profile_service import (
    calculate_age,
    calculate_completeness,
    calculate_zodiac_sign,
)


@pytest.fixture
def profile_data(profile_factory):
    return profile_factory("male")


@pytest.mark.asyncio
async def test_create_profile_success(
    client: AsyncClient, auth_token: str, profile_data: dict
):
    response = await client.post(
        "/api/v1/profiles/",
        json=profile_data,
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["gender"] == "male"
    assert data["first_name"] == profile_data["first_name"]
    assert data["age"] == calculate_age(date(1995, 6, 15))
    assert data["zodiac_sign"] == "Gemini"
    assert data["is_active"] is True
    assert data["like_count"] == 0
    # 10 of 13 completeness fields filled
    assert data["profile_completeness"] == 77
    assert "id" in data
    assert "user_id" in data
    assert "created_at" in data


@pytest.mark.asyncio
async def test_create_profile_keeps_explicit_zodiac(
    client: AsyncClient, auth_token: str, profile_factory
):
    response = await client.post(
        "/api/v1/profiles/",
        json=profile_factory("female", zodiac_sign="Leo"),
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 201
    assert response.json()["zodiac_sign"] == "Leo"


@pytest.mark.asyncio
async def test_create_profile_underage(client: AsyncClient, auth_token: str, profile_factory):
    today = date.today()
    response = await client.post(
        "/api/v1/profiles/",
        json=profile_factory("male", date_of_birth=date(today.year - 17, 1, 1).isoformat()),
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 422
    assert response.json()["field"] == "date_of_birth"


@pytest.mark.asyncio
async def test_create_profile_duplicate(
    client: AsyncClient, auth_token: str, profile_data: dict
):
    headers = {"Authorization": f"Bearer {auth_token}"}
    await client.post("/api/v1/profiles/", json=profile_data, headers=headers)

    response = await client.post("/api/v1/profiles/", json=profile_data, headers=headers)

    assert response.status_code == 409
    assert response.json()["detail"] == "Profile already exists"


@pytest.mark.asyncio
async def test_create_profile_invalid_gender(
    client: AsyncClient, auth_token: str, profile_factory
):
    response = await client.post(
        "/api/v1/profiles/",
        json=profile_factory("other"),
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_profile_unauthenticated(client: AsyncClient, profile_data: dict):
    response = await client.post("/api/v1/profiles/", json=profile_data)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_my_profile(client: AsyncClient, auth_token: str, profile_data: dict):
    headers = {"Authorization": f"Bearer {auth_token}"}
    await client.post("/api/v1/profiles/", json=profile_data, headers=headers)

    response = await client.get("/api/v1/profiles/me", headers=headers)

    assert response.status_code == 200
    assert response.json()["last_name"] == profile_data["last_name"]


@pytest.mark.asyncio
async def test_get_my_profile_not_found(client: AsyncClient, auth_token: str):
    response = await client.get(
        "/api/v1/profiles/me",
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 404
    assert response.json()["code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.asyncio
async def test_update_profile(client: AsyncClient, auth_token: str, profile_data: dict):
    headers = {"Authorization": f"Bearer {auth_token}"}
    await client.post("/api/v1/profiles/", json=profile_data, headers=headers)

    response = await client.patch(
        "/api/v1/profiles/me",
        json={
            "about_me": "Engineer who loves jollof",
            "height": "180cm",
            "work_status": "Employed",
        },
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["about_me"] == "Engineer who loves jollof"
    assert data["city"] == profile_data["city"]
    assert data["profile_completeness"] == 100


@pytest.mark.asyncio
async def test_update_profile_date_of_birth_recomputes_age_and_zodiac(
    client: AsyncClient, auth_token: str, profile_data: dict
):
    headers = {"Authorization": f"Bearer {auth_token}"}
    await client.post("/api/v1/profiles/", json=profile_data, headers=headers)

    response = await client.patch(
        "/api/v1/profiles/me",
        json={"date_of_birth": "1990-12-25"},
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["age"] == calculate_age(date(1990, 12, 25))
    assert data["zodiac_sign"] == "Capricorn"


@pytest.mark.asyncio
async def test_get_other_profile(client: AsyncClient, user_factory):
    viewer = await user_factory("male")
    other = await user_factory("female")

    response = await client.get(f"/api/v1/profiles/{other['id']}", headers=viewer["headers"])

    assert response.status_code == 200
    assert response.json()["user_id"] == other["id"]


@pytest.mark.asyncio
async def test_get_deactivated_profile_hidden_from_others(client: AsyncClient, user_factory):
    viewer = await user_factory("male")
    other = await user_factory("female")
    await client.patch("/api/v1/profiles/me", json={"is_active": False}, headers=other["headers"])

    response = await client.get(f"/api/v1/profiles/{other['id']}", headers=viewer["headers"])
    assert response.status_code == 404

    own = await client.get(f"/api/v1/profiles/{other['id']}", headers=other["headers"])
    assert own.status_code == 200


@pytest.mark.parametrize(
    "birth_date,expected",
    [
        (date(2000, 1, 19), "Capricorn"),
        (date(2000, 1, 20), "Aquarius"),
        (date(2000, 3, 21), "Aries"),
        (date(2000, 7, 22), "Cancer"),
        (date(2000, 7, 23), "Leo"),
        (date(2000, 12, 21), "Sagittarius"),
        (date(2000, 12, 22), "Capricorn"),
    ],
)
def test_calculate_zodiac_sign(birth_date: date, expected: str):
    assert calculate_zodiac_sign(birth_date) == expected


def test_calculate_age_before_and_after_birthday():
    assert calculate_age(date(1990, 6, 15), today=date(2020, 6, 14)) == 29
    assert calculate_age(date(1990, 6, 15), today=date(2020, 6, 15)) == 30


def test_calculate_completeness_empty_profile():
    assert calculate_completeness(Profile()) == 0
