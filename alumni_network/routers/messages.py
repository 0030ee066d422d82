import logging

from fastapi import APIRouter, Depends

from alumni_network.database.connection import mongo_db_dependency
from alumni_network.repositories.message_repository import MessageRepository
from alumni_network.repositories.user_repository import UserRepository
from alumni_network.schemas.message import SendMessageRequest
from alumni_network.services.chat_service import ChatService
from alumni_network.utils.errors import error_response, server_error


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/messages", tags=["messages"])


def get_chat_service(db = Depends(mongo_db_dependency)) -> ChatService:
    return ChatService(MessageRepository(db), UserRepository(db))


# registered before the history route so "conversations" is never read as a user id
@router.get("/conversations/{user_id}")
async def list_conversations(user_id: str, service: ChatService = Depends(get_chat_service)):
    try:
        conversations = await service.list_conversations(user_id)
    except Exception as exc:
        logger.exception("Error fetching conversations for %s", user_id)
        return server_error("Failed to fetch conversations", exc)
    return {"success": True, "data": conversations}


@router.get("/{user_id}/{partner_id}")
async def get_history(user_id: str, partner_id: str, service: ChatService = Depends(get_chat_service)):
    try:
        messages = await service.get_history(user_id, partner_id)
    except Exception as exc:
        logger.exception("Error fetching chat history between %s and %s", user_id, partner_id)
        return server_error("Failed to fetch chat history", exc)
    return {"success": True, "data": messages}


@router.post("/send", status_code=201)
async def send_message(body: SendMessageRequest, service: ChatService = Depends(get_chat_service)):
    try:
        saved = await service.send_message(body.model_dump())
    except ValueError as exc:
        return error_response(400, str(exc))
    except Exception as exc:
        logger.exception("Error sending message")
        return server_error("Failed to send message", exc)
    return {"success": True, "message": "Message sent successfully", "data": saved}


@router.put("/mark-read/{sender_id}/{receiver_id}")
async def mark_read(sender_id: str, receiver_id: str, service: ChatService = Depends(get_chat_service)):
    try:
        count = await service.mark_read(sender_id, receiver_id)
    except Exception as exc:
        logger.exception("Error marking messages from %s to %s as read", sender_id, receiver_id)
        return server_error("Failed to mark messages as read", exc)
    return {"success": True, "message": "Messages marked as read", "count": count}
