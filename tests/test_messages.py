"""Tests for messaging, inbox and blocking."""

from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient


async def send(client: AsyncClient, sender: dict, receiver: dict, content: str = "Hello!"):
    return await client.post(
        "/api/v1/messages/send",
        json={"receiver_id": receiver["id"], "content": content},
        headers=sender["headers"],
    )


async def matched_pair(client: AsyncClient, user_factory) -> tuple[dict, dict]:
    a = await user_factory("male")
    b = await user_factory("female")
    await client.post("/api/v1/likes/", json={"liked_user_id": b["id"]}, headers=a["headers"])
    await client.post("/api/v1/likes/", json={"liked_user_id": a["id"]}, headers=b["headers"])
    return a, b


# ============== Send Tests ==============


@pytest.mark.asyncio
async def test_send_message_notifies_receiver(client: AsyncClient, user_factory, notifier):
    a = await user_factory("male")
    b = await user_factory("female")

    response = await send(client, a, b, "Hi Ada, how is Lagos?")

    assert response.status_code == 201
    message = response.json()["message"]
    assert message["sender_id"] == a["id"]
    assert message["receiver_id"] == b["id"]
    assert message["is_read"] is False

    assert notifier.types_for(UUID(b["id"])) == ["NEW_MESSAGE"]
    _, payload = notifier.events[-1]
    assert payload["event"] == "notification"
    assert payload["notification"]["body"] == "Hi Ada, how is Lagos?"
    assert payload["notification"]["title"] == "New message from Tunde"
    assert payload["notification"]["data"]["message_id"] == message["id"]


@pytest.mark.asyncio
async def test_send_message_preview_truncated(client: AsyncClient, user_factory, notifier):
    a = await user_factory("male")
    b = await user_factory("female")

    await send(client, a, b, "x" * 300)

    _, payload = notifier.events[-1]
    assert len(payload["notification"]["body"]) == 100


@pytest.mark.asyncio
async def test_send_message_to_self(client: AsyncClient, user_factory):
    a = await user_factory("male")

    response = await send(client, a, a)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_send_message_to_unknown_user(client: AsyncClient, user_factory):
    a = await user_factory("male")

    response = await send(client, a, {"id": str(uuid4())})

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   "])
async def test_send_blank_message(client: AsyncClient, user_factory, content: str):
    a = await user_factory("male")
    b = await user_factory("female")

    response = await send(client, a, b, content)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_send_message_survives_notifier_failure(client: AsyncClient, user_factory, notifier):
    async def broken_notify(user_id, payload):
        raise RuntimeError("socket gone")

    notifier.notify = broken_notify
    a = await user_factory("male")
    b = await user_factory("female")

    response = await send(client, a, b)

    assert response.status_code == 201


# ============== Inbox Tests ==============


@pytest.mark.asyncio
async def test_conversation_list_and_unread_counts(client: AsyncClient, user_factory):
    a, b = await matched_pair(client, user_factory)
    await send(client, a, b, "one")
    await send(client, a, b, "two")

    conversations = await client.get("/api/v1/messages/conversations", headers=b["headers"])
    summary = conversations.json()["conversations"][0]
    assert summary["other_user_id"] == a["id"]
    assert summary["unread_count"] == 2
    assert summary["last_message"]["content"] == "two"
    assert summary["other_profile"]["first_name"] == "Tunde"

    unread = await client.get("/api/v1/messages/unread/count", headers=b["headers"])
    assert unread.json() == {"total_unread": 2, "conversations": 1}

    sender_unread = await client.get("/api/v1/messages/unread/count", headers=a["headers"])
    assert sender_unread.json() == {"total_unread": 0, "conversations": 0}


@pytest.mark.asyncio
async def test_get_messages_chronological(client: AsyncClient, user_factory):
    a, b = await matched_pair(client, user_factory)
    for text in ("first", "second", "third"):
        response = await send(client, a, b, text)
    conversation_id = response.json()["conversation_id"]

    response = await client.get(
        f"/api/v1/messages/{conversation_id}?limit=2", headers=b["headers"]
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [m["content"] for m in data["messages"]] == ["second", "third"]


@pytest.mark.asyncio
async def test_get_messages_not_participant(client: AsyncClient, user_factory):
    a = await user_factory("male")
    b = await user_factory("female")
    outsider = await user_factory("female")
    conversation_id = (await send(client, a, b)).json()["conversation_id"]

    response = await client.get(f"/api/v1/messages/{conversation_id}", headers=outsider["headers"])

    assert response.status_code == 403
    assert response.json()["code"] == "AUTHZ_FORBIDDEN"


@pytest.mark.asyncio
async def test_get_messages_unknown_conversation(client: AsyncClient, user_factory):
    a = await user_factory("male")

    response = await client.get(f"/api/v1/messages/{uuid4()}", headers=a["headers"])

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_mark_read_resets_unread(client: AsyncClient, user_factory):
    a, b = await matched_pair(client, user_factory)
    await send(client, a, b, "one")
    conversation_id = (await send(client, a, b, "two")).json()["conversation_id"]

    response = await client.post(
        "/api/v1/messages/mark-read",
        json={"conversation_id": conversation_id},
        headers=b["headers"],
    )

    assert response.status_code == 200
    assert response.json() == {"marked_read": 2}

    unread = await client.get("/api/v1/messages/unread/count", headers=b["headers"])
    assert unread.json()["total_unread"] == 0

    messages = await client.get(f"/api/v1/messages/{conversation_id}", headers=b["headers"])
    assert all(m["is_read"] for m in messages.json()["messages"])


@pytest.mark.asyncio
async def test_mark_read_not_participant(client: AsyncClient, user_factory):
    a = await user_factory("male")
    b = await user_factory("female")
    outsider = await user_factory("male")
    conversation_id = (await send(client, a, b)).json()["conversation_id"]

    response = await client.post(
        "/api/v1/messages/mark-read",
        json={"conversation_id": conversation_id},
        headers=outsider["headers"],
    )

    assert response.status_code == 403


# ============== Delete / Search Tests ==============


@pytest.mark.asyncio
async def test_delete_own_message(client: AsyncClient, user_factory):
    a, b = await matched_pair(client, user_factory)
    message_id = (await send(client, a, b)).json()["message"]["id"]

    response = await client.delete(f"/api/v1/messages/{message_id}", headers=a["headers"])

    assert response.status_code == 204
    unread = await client.get("/api/v1/messages/unread/count", headers=b["headers"])
    assert unread.json()["total_unread"] == 0


@pytest.mark.asyncio
async def test_delete_someone_elses_message(client: AsyncClient, user_factory):
    a, b = await matched_pair(client, user_factory)
    message_id = (await send(client, a, b)).json()["message"]["id"]

    response = await client.delete(f"/api/v1/messages/{message_id}", headers=b["headers"])

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_search_messages(client: AsyncClient, user_factory):
    a, b = await matched_pair(client, user_factory)
    await send(client, a, b, "Dinner at 8?")
    await send(client, b, a, "Sounds great")
    await send(client, a, b, "100% sure")

    response = await client.get("/api/v1/messages/search?q=DINNER", headers=b["headers"])
    assert [m["content"] for m in response.json()] == ["Dinner at 8?"]

    percent = await client.get("/api/v1/messages/search?q=%25", headers=a["headers"])
    assert [m["content"] for m in percent.json()] == ["100% sure"]


# ============== Block Tests ==============


@pytest.mark.asyncio
async def test_block_prevents_messages_both_ways(client: AsyncClient, user_factory):
    a, b = await matched_pair(client, user_factory)

    block = await client.post(
        "/api/v1/messages/block", json={"user_id": b["id"]}, headers=a["headers"]
    )
    assert block.status_code == 201
    assert block.json()["blocked_user_id"] == b["id"]

    for sender, receiver in ((a, b), (b, a)):
        response = await send(client, sender, receiver)
        assert response.status_code == 403
        assert response.json()["code"] == "AUTHZ_FORBIDDEN"


@pytest.mark.asyncio
async def test_block_twice_conflicts(client: AsyncClient, user_factory):
    a = await user_factory("male")
    b = await user_factory("female")
    await client.post("/api/v1/messages/block", json={"user_id": b["id"]}, headers=a["headers"])

    response = await client.post(
        "/api/v1/messages/block", json={"user_id": b["id"]}, headers=a["headers"]
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_block_self_rejected(client: AsyncClient, user_factory):
    a = await user_factory("male")

    response = await client.post(
        "/api/v1/messages/block", json={"user_id": a["id"]}, headers=a["headers"]
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unblock_restores_messaging(client: AsyncClient, user_factory):
    a, b = await matched_pair(client, user_factory)
    await client.post("/api/v1/messages/block", json={"user_id": b["id"]}, headers=a["headers"])

    response = await client.delete(f"/api/v1/messages/block/{b['id']}", headers=a["headers"])
    assert response.status_code == 204

    assert (await send(client, a, b)).status_code == 201


@pytest.mark.asyncio
async def test_unblock_without_block(client: AsyncClient, user_factory):
    a = await user_factory("male")
    b = await user_factory("female")

    response = await client.delete(f"/api/v1/messages/block/{b['id']}", headers=a["headers"])

    assert response.status_code == 404
