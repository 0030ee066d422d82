import pytest

from alumni_network.repositories.notification_repository import NotificationRepository
from alumni_network.repositories.user_repository import UserRepository
from alumni_network.services.notification_service import NotificationService

from conftest import RecordingPush


class _StubUsers:

    def __init__(self, users, fail_listing=False) -> None:
        self._users = users
        self._fail_listing = fail_listing

    async def list_by_role(self, role):
        if self._fail_listing:
            raise RuntimeError("users collection unavailable")
        return [u for u in self._users if u.get("role") == role]

    async def list_all(self):
        return list(self._users)

    async def get_by_id(self, user_id):
        return next((u for u in self._users if u["_id"] == user_id), None)


async def _seed_users(db):
    students = []
    for name, token in (("s1", "fcm-s1"), ("s2", None)):
        result = await db["users"].insert_one({"firebaseUID": name, "name": name, "role": "student", "fcmToken": token})
        students.append(str(result.inserted_id))
    await db["users"].insert_one({"firebaseUID": "t1", "name": "t1", "role": "teacher"})
    return students


async def test_create_notification_requires_fields(db):
    service = NotificationService(NotificationRepository(db), UserRepository(db))

    with pytest.raises(ValueError):
        await service.create_notification("u1", "", "body", "course", "c1")
    assert await db["notifications"].count_documents({}) == 0


async def test_create_notification_defaults(db):
    service = NotificationService(NotificationRepository(db), UserRepository(db))

    notification = await service.create_notification("u1", "New course", "Enrol now", "course", "c1")

    assert notification["read"] is False
    assert notification["createdBy"] == "system"
    assert await service.get_unread_count("u1") == 1


async def test_fan_out_by_role_pushes_to_registered_devices(db):
    push = RecordingPush()
    service = NotificationService(NotificationRepository(db), UserRepository(db), push)
    students = await _seed_users(db)

    notifications = await service.notify_users_by_role("student", "Announcement", "Exam moved", "announcement", "a1", "t1")

    assert sorted(n["userId"] for n in notifications) == sorted(students)
    assert await db["notifications"].count_documents({}) == 2
    assert [p["token"] for p in push.sent] == ["fcm-s1"]
    assert push.sent[0]["data"] == {"type": "announcement", "itemId": "a1"}


async def test_fan_out_skips_failed_recipients(db):
    users = [{"_id": "u1", "role": "student"}, {"_id": "", "role": "student"}, {"_id": "u3", "role": "student"}]
    service = NotificationService(NotificationRepository(db), _StubUsers(users))

    notifications = await service.notify_users_by_role("student", "T", "M", "event", "e1")

    assert [n["userId"] for n in notifications] == ["u1", "u3"]


async def test_fan_out_listing_failure_returns_empty(db):
    service = NotificationService(NotificationRepository(db), _StubUsers([], fail_listing=True))

    assert await service.notify_users_by_role("student", "T", "M", "event", "e1") == []


async def test_push_failure_keeps_notification(db):
    users = [{"_id": "u1", "role": "alumni", "fcmToken": "tok"}]
    service = NotificationService(NotificationRepository(db), _StubUsers(users), RecordingPush(fail=True))

    notifications = await service.notify_all_users("T", "M", "job", "j1")

    assert len(notifications) == 1
    assert await db["notifications"].count_documents({"userId": "u1"}) == 1


async def test_notification_routes(client, db, auth_headers):
    service = NotificationService(NotificationRepository(db), UserRepository(db))
    first = await service.create_notification("me", "One", "first", "event", "e1")
    await service.create_notification("me", "Two", "second", "job", "j1")
    await service.create_notification("someone-else", "Other", "x", "job", "j2")
    headers = auth_headers("me")

    listing = (await client.get("/api/notifications", headers=headers)).json()
    assert [n["title"] for n in listing["notifications"]] == ["Two", "One"]

    assert (await client.get("/api/notifications/unread-count", headers=headers)).json()["count"] == 2

    marked = await client.put(f"/api/notifications/{first['_id']}/read", headers=headers)
    assert marked.json()["notification"]["read"] is True
    assert (await client.get("/api/notifications/unread-count", headers=headers)).json()["count"] == 1

    all_read = await client.put("/api/notifications/mark-all-read", headers=headers)
    assert all_read.json()["modified"] == 1

    deleted = await client.delete(f"/api/notifications/{first['_id']}", headers=headers)
    assert deleted.status_code == 200
    assert (await client.delete(f"/api/notifications/{first['_id']}", headers=headers)).status_code == 404

    cleared = await client.delete("/api/notifications", headers=headers)
    assert cleared.json()["deleted"] == 1
    assert await db["notifications"].count_documents({"userId": "someone-else"}) == 1


async def test_unknown_notification_id_is_404(client, auth_headers):
    resp = await client.put("/api/notifications/not-an-id/read", headers=auth_headers("me"))

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Notification not found"}


async def test_notification_routes_require_session(client):
    assert (await client.get("/api/notifications/unread-count")).status_code == 401


async def test_broadcast_to_students_route(client, db, push):
    await _seed_users(db)

    resp = await client.post(
        "/api/notifications/test-notifications/send-to-students",
        json={"title": "Hello", "message": "Welcome", "type": "system"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Successfully sent 2 notifications"
    assert all(n["itemId"] == "test" for n in body["notifications"])
    assert len(push.sent) == 1

    missing = await client.post("/api/notifications/test-notifications/send-to-students", json={"title": "x"})
    assert missing.status_code == 400


async def test_create_notification_rejects_unknown_type(db):
    service = NotificationService(NotificationRepository(db), UserRepository(db))

    with pytest.raises(ValueError, match="Invalid notification type"):
        await service.create_notification("u1", "Party", "Friday", "party", "p1")
    assert await db["notifications"].count_documents({}) == 0


async def test_broadcast_route_rejects_unknown_type(client, db):
    await _seed_users(db)

    resp = await client.post(
        "/api/notifications/test-notifications/send-to-students",
        json={"title": "Hello", "message": "Welcome", "type": "party"},
    )

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert await db["notifications"].count_documents({}) == 0


async def test_cannot_read_or_delete_another_users_notification(client, db, auth_headers):
    service = NotificationService(NotificationRepository(db), UserRepository(db))
    notification = await service.create_notification("alice", "Interview", "Tomorrow 10am", "job", "j1")
    mallory = auth_headers("mallory")

    marked = await client.put(f"/api/notifications/{notification['_id']}/read", headers=mallory)
    deleted = await client.delete(f"/api/notifications/{notification['_id']}", headers=mallory)

    assert marked.status_code == 404
    assert deleted.status_code == 404
    stored = await db["notifications"].find_one({"userId": "alice"})
    assert stored is not None
    assert stored["read"] is False
