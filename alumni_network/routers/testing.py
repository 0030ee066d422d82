"""Maintenance routes for exercising a deployment by hand.

Only mounted when ``ENABLE_TEST_ROUTES`` is on.
"""

import logging

from fastapi import APIRouter, Depends

from alumni_network.models.notification import NOTIFICATION_TYPES
from alumni_network.routers.messages import get_chat_service
from alumni_network.routers.notifications import get_notification_service
from alumni_network.schemas.message import SendMessageRequest
from alumni_network.schemas.notification import BroadcastNotificationRequest
from alumni_network.services.chat_service import ChatService
from alumni_network.services.notification_service import NotificationService
from alumni_network.utils.errors import error_response, server_error


logger = logging.getLogger(__name__)

messages_router = APIRouter(prefix="/api/messages", tags=["testing"])
notifications_router = APIRouter(prefix="/api/notifications", tags=["testing"])


@messages_router.post("/create-test-message", status_code=201)
async def create_test_message(body: SendMessageRequest, service: ChatService = Depends(get_chat_service)):
    try:
        result = await service.create_verified_message(body.model_dump())
    except ValueError as exc:
        return error_response(400, str(exc))
    except Exception as exc:
        logger.exception("Error creating test message")
        return server_error("Failed to create test message", exc)
    return {"success": True, "message": "Test message created and verified successfully", "data": result}


@messages_router.get("/all-messages")
async def all_messages(service: ChatService = Depends(get_chat_service)):
    try:
        messages = await service.list_all_messages()
    except Exception as exc:
        logger.exception("Error fetching all messages")
        return server_error("Failed to fetch messages", exc)
    return {"success": True, "count": len(messages), "data": messages}


@messages_router.delete("/clear-all-messages")
async def clear_all_messages(service: ChatService = Depends(get_chat_service)):
    try:
        deleted = await service.clear_all_messages()
    except Exception as exc:
        logger.exception("Error deleting messages")
        return server_error("Failed to delete messages", exc)
    return {"success": True, "message": f"Deleted {deleted} messages from the database"}


@notifications_router.post("/test-notifications/send-to-students")
async def send_to_students(body: BroadcastNotificationRequest, service: NotificationService = Depends(get_notification_service)):
    if not body.title or not body.message or not body.type:
        return error_response(400, "Missing required fields")
    if body.type not in NOTIFICATION_TYPES:
        return error_response(400, f"Invalid notification type: {body.type}")
    try:
        notifications = await service.notify_users_by_role(
            "student",
            body.title,
            body.message,
            body.type,
            body.itemId or "test",
            body.createdBy or "system",
        )
    except Exception as exc:
        logger.exception("Error sending notifications to students")
        return server_error("Failed to send notifications to students", exc)
    return {
        "success": True,
        "message": f"Successfully sent {len(notifications)} notifications",
        "notifications": notifications,
    }
