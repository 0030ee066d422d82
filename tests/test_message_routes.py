import httpx

from alumni_network.main import create_app

from conftest import fake_verify_id_token, message_payload


async def test_send_returns_created_message(client, db):
    resp = await client.post("/api/messages/send", json=message_payload("A", "B", "hi"))

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["content"] == "hi"
    assert body["data"]["read"] is False
    assert await db["messages"].count_documents({}) == 1


async def test_send_missing_field_is_400_and_not_persisted(client, db):
    payload = message_payload("A", "B", "hi")
    del payload["receiverRole"]

    resp = await client.post("/api/messages/send", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Missing required fields"}
    assert await db["messages"].count_documents({}) == 0


async def test_send_non_object_body_is_400(client):
    resp = await client.post("/api/messages/send", content=b"not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False


async def test_conversations_route_is_not_shadowed_by_history(client):
    await client.post("/api/messages/send", json=message_payload("A", "B", "hi"))
    await client.post("/api/messages/send", json=message_payload("B", "A", "hello", "alumni", "student"))

    resp = await client.get("/api/messages/conversations/A")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert len(data) == 1
    assert data[0]["user"]["uid"] == "B"
    assert data[0]["lastMessage"]["content"] == "hello"
    assert data[0]["unreadCount"] == 1


async def test_history_and_mark_read(client):
    await client.post("/api/messages/send", json=message_payload("A", "B", "one"))
    await client.post("/api/messages/send", json=message_payload("A", "B", "two"))
    await client.post("/api/messages/send", json=message_payload("B", "A", "back", "alumni", "student"))

    history = (await client.get("/api/messages/A/B")).json()["data"]
    assert [m["content"] for m in history] == ["one", "two", "back"]

    resp = await client.put("/api/messages/mark-read/A/B")
    assert resp.status_code == 200
    assert resp.json()["count"] == 2

    conversations = (await client.get("/api/messages/conversations/B")).json()["data"]
    assert conversations[0]["unreadCount"] == 0
    # the reverse direction is untouched
    conversations = (await client.get("/api/messages/conversations/A")).json()["data"]
    assert conversations[0]["unreadCount"] == 1


async def test_store_failure_is_500_envelope(client, monkeypatch):
    from alumni_network.repositories.message_repository import MessageRepository

    async def boom(self, user_id, limit=None):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(MessageRepository, "find_for_participant", boom)

    resp = await client.get("/api/messages/conversations/A")

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "message": "Failed to fetch conversations",
        "error": "connection reset",
    }


async def test_test_routes_create_list_and_clear(client):
    resp = await client.post("/api/messages/create-test-message", json=message_payload("A", "B", "probe"))
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["savedMessage"]["content"] == "probe"
    assert data["senderMessagesCount"] == 1

    listing = (await client.get("/api/messages/all-messages")).json()
    assert listing["count"] == 1

    cleared = await client.delete("/api/messages/clear-all-messages")
    assert cleared.json()["message"] == "Deleted 1 messages from the database"
    assert (await client.get("/api/messages/all-messages")).json()["count"] == 0


async def test_create_test_message_validates(client):
    resp = await client.post("/api/messages/create-test-message", json={"senderId": "A"})
    assert resp.status_code == 400


async def test_test_routes_can_be_disabled(settings, store, push):
    app = create_app(
        settings.model_copy(update={"enable_test_routes": False}),
        store=store,
        verify_id_token=fake_verify_id_token,
        push=push,
    )
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.delete("/api/messages/clear-all-messages")
    assert resp.status_code in (404, 405)


async def test_root_lists_collections(client):
    await client.post("/api/messages/send", json=message_payload("A", "B", "hi"))

    resp = await client.get("/")

    assert resp.status_code == 200
    assert "messages" in resp.json()["collections"]
