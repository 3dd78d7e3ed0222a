"""Tests for likes and mutual matches."""

import asyncio
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.exceptions import ConflictError
from app.models.conversation import Conversation
from app.models.like import Like
from app.services import like_service


async def like(client: AsyncClient, liker: dict, liked: dict):
    return await client.post(
        "/api/v1/likes/", json={"liked_user_id": liked["id"]}, headers=liker["headers"]
    )


# ============== Send Like Tests ==============


@pytest.mark.asyncio
async def test_send_like(client: AsyncClient, user_factory, notifier):
    a = await user_factory("male")
    b = await user_factory("female")

    response = await like(client, a, b)

    assert response.status_code == 201
    data = response.json()
    assert data["is_mutual_match"] is False
    assert data["conversation_id"] is None
    assert data["like"]["liker_id"] == a["id"]
    assert data["like"]["is_mutual"] is False
    assert notifier.types_for(UUID(b["id"])) == ["NEW_LIKE"]

    profile = await client.get(f"/api/v1/profiles/{b['id']}", headers=a["headers"])
    assert profile.json()["like_count"] == 1


@pytest.mark.asyncio
async def test_reverse_like_creates_mutual_match(client: AsyncClient, user_factory, notifier):
    a = await user_factory("male")
    b = await user_factory("female")
    await like(client, a, b)

    response = await like(client, b, a)

    assert response.status_code == 201
    data = response.json()
    assert data["is_mutual_match"] is True
    assert data["conversation_id"] is not None
    assert data["like"]["is_mutual"] is True
    assert notifier.types_for(UUID(a["id"])) == ["MUTUAL_MATCH"]
    assert notifier.types_for(UUID(b["id"])) == ["NEW_LIKE", "MUTUAL_MATCH"]

    check = await client.get(f"/api/v1/likes/check/{b['id']}", headers=a["headers"])
    assert check.json() == {"has_liked": True, "is_mutual": True}


@pytest.mark.asyncio
async def test_like_twice_conflicts(client: AsyncClient, user_factory):
    a = await user_factory("male")
    b = await user_factory("female")
    await like(client, a, b)

    response = await like(client, a, b)

    assert response.status_code == 409
    assert response.json()["code"] == "RESOURCE_CONFLICT"


@pytest.mark.asyncio
async def test_like_self_rejected(client: AsyncClient, user_factory):
    a = await user_factory("male")

    response = await like(client, a, a)

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("has_profile", [False, True])
async def test_like_unavailable_user(client: AsyncClient, user_factory, has_profile: bool):
    a = await user_factory("male")
    if has_profile:
        b = await user_factory("female")
        await client.patch("/api/v1/profiles/me", json={"is_active": False}, headers=b["headers"])
    else:
        b = {"id": str(uuid4())}

    response = await like(client, a, b)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_concurrent_duplicate_like_is_rejected_by_index(
    db_session: AsyncSession, user_factory, monkeypatch
):
    """A like that passes the pre-check but loses the insert still fails cleanly."""
    a = UUID((await user_factory("male"))["id"])
    b = UUID((await user_factory("female"))["id"])
    await like_service.send_like(db_session, None, a, b)

    async def stale_lookup(db, liker_id, liked_user_id):
        return None

    monkeypatch.setattr(like_service, "_get_like", stale_lookup)

    with pytest.raises(ConflictError):
        await like_service.send_like(db_session, None, a, b)

    count = await db_session.execute(select(func.count(Like.id)))
    assert count.scalar() == 1


@pytest.mark.postgres
@pytest.mark.asyncio
async def test_opposite_likes_at_the_same_time_become_mutual(
    db_session: AsyncSession, user_factory, test_database_url: str
):
    """Two sessions like each other concurrently; the pair still ends up matched."""
    a = UUID((await user_factory("male"))["id"])
    b = UUID((await user_factory("female"))["id"])
    await db_session.commit()

    engine = create_async_engine(test_database_url, poolclass=NullPool)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_maker() as first, session_maker() as second:
            await asyncio.gather(
                like_service.send_like(first, None, a, b),
                like_service.send_like(second, None, b, a),
            )
    finally:
        await engine.dispose()

    likes = await db_session.execute(select(Like.is_mutual))
    assert sorted(likes.scalars().all()) == [True, True]
    conversations = await db_session.execute(select(func.count(Conversation.id)))
    assert conversations.scalar() == 1


# ============== Unlike Tests ==============


@pytest.mark.asyncio
async def test_unlike_reverts_mutual(client: AsyncClient, user_factory):
    a = await user_factory("male")
    b = await user_factory("female")
    await like(client, a, b)
    await like(client, b, a)

    response = await client.delete(f"/api/v1/likes/{b['id']}", headers=a["headers"])
    assert response.status_code == 204

    check = await client.get(f"/api/v1/likes/check/{a['id']}", headers=b["headers"])
    assert check.json() == {"has_liked": True, "is_mutual": False}

    # The conversation stays but is no longer treated as matched
    can_send = await client.get(f"/api/v1/messages/can-send/{a['id']}", headers=b["headers"])
    assert can_send.json()["is_mutual_match"] is False


@pytest.mark.asyncio
async def test_unlike_without_like(client: AsyncClient, user_factory):
    a = await user_factory("male")
    b = await user_factory("female")

    response = await client.delete(f"/api/v1/likes/{b['id']}", headers=a["headers"])

    assert response.status_code == 404


# ============== Listing Tests ==============


@pytest.mark.asyncio
async def test_like_listings_and_stats(client: AsyncClient, user_factory):
    a = await user_factory("male")
    b = await user_factory("female")
    c = await user_factory("female")
    await like(client, a, b)
    await like(client, a, c)
    await like(client, b, a)

    sent = await client.get("/api/v1/likes/sent", headers=a["headers"])
    assert sent.json()["total"] == 2
    assert {item["liked_user_id"] for item in sent.json()["likes"]} == {b["id"], c["id"]}
    assert sent.json()["likes"][0]["profile"]["first_name"] == "Ada"

    received = await client.get("/api/v1/likes/received", headers=a["headers"])
    assert received.json()["total"] == 1
    assert received.json()["likes"][0]["profile"]["user_id"] == b["id"]

    mutual = await client.get("/api/v1/likes/mutual", headers=a["headers"])
    assert [item["liked_user_id"] for item in mutual.json()["likes"]] == [b["id"]]

    stats = await client.get("/api/v1/likes/stats", headers=a["headers"])
    assert stats.json() == {"sent": 2, "received": 1, "mutual": 1}


@pytest.mark.asyncio
async def test_like_listing_pagination(client: AsyncClient, user_factory):
    a = await user_factory("male")
    for _ in range(3):
        await like(client, a, await user_factory("female"))

    response = await client.get("/api/v1/likes/sent?page=2&per_page=2", headers=a["headers"])

    data = response.json()
    assert data["total"] == 3
    assert data["page"] == 2
    assert len(data["likes"]) == 1
