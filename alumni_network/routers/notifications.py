import logging

from fastapi import APIRouter, Depends, Query

from alumni_network.database.connection import mongo_db_dependency
from alumni_network.repositories.notification_repository import NotificationRepository
from alumni_network.repositories.user_repository import UserRepository
from alumni_network.schemas.user import SessionUser
from alumni_network.services.notification_service import NotificationService
from alumni_network.utils.dependencies import get_current_user, get_push
from alumni_network.utils.errors import error_response, server_error


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def get_notification_service(db = Depends(mongo_db_dependency), push = Depends(get_push)) -> NotificationService:
    return NotificationService(NotificationRepository(db), UserRepository(db), push)


@router.get("")
async def list_notifications(
    limit: int = Query(50, ge=1, le=200),
    skip: int = Query(0, ge=0),
    current_user: SessionUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    try:
        notifications = await service.get_user_notifications(current_user.id, limit=limit, skip=skip)
    except Exception as exc:
        logger.exception("Error fetching notifications for %s", current_user.id)
        return server_error("Failed to fetch notifications", exc)
    return {"success": True, "notifications": notifications}


@router.get("/unread-count")
async def unread_count(current_user: SessionUser = Depends(get_current_user), service: NotificationService = Depends(get_notification_service)):
    try:
        count = await service.get_unread_count(current_user.id)
    except Exception as exc:
        logger.exception("Error fetching unread notification count for %s", current_user.id)
        return server_error("Failed to fetch unread notification count", exc)
    return {"success": True, "count": count}


@router.put("/mark-all-read")
async def mark_all_read(current_user: SessionUser = Depends(get_current_user), service: NotificationService = Depends(get_notification_service)):
    try:
        modified = await service.mark_all_as_read(current_user.id)
    except Exception as exc:
        logger.exception("Error marking all notifications as read for %s", current_user.id)
        return server_error("Failed to mark all notifications as read", exc)
    return {"success": True, "message": "All notifications marked as read", "modified": modified}


@router.put("/{notification_id}/read")
async def mark_read(notification_id: str, current_user: SessionUser = Depends(get_current_user), service: NotificationService = Depends(get_notification_service)):
    try:
        notification = await service.mark_as_read(notification_id, current_user.id)
    except Exception as exc:
        logger.exception("Error marking notification %s as read", notification_id)
        return server_error("Failed to mark notification as read", exc)
    if notification is None:
        return error_response(404, "Notification not found")
    return {"success": True, "notification": notification}


@router.delete("/{notification_id}")
async def delete_notification(notification_id: str, current_user: SessionUser = Depends(get_current_user), service: NotificationService = Depends(get_notification_service)):
    try:
        notification = await service.delete_notification(notification_id, current_user.id)
    except Exception as exc:
        logger.exception("Error deleting notification %s", notification_id)
        return server_error("Failed to delete notification", exc)
    if notification is None:
        return error_response(404, "Notification not found")
    return {"success": True, "message": "Notification deleted successfully"}


@router.delete("")
async def delete_all(current_user: SessionUser = Depends(get_current_user), service: NotificationService = Depends(get_notification_service)):
    try:
        deleted = await service.delete_all_for_user(current_user.id)
    except Exception as exc:
        logger.exception("Error deleting notifications for %s", current_user.id)
        return server_error("Failed to delete all notifications", exc)
    return {"success": True, "message": "All notifications deleted successfully", "deleted": deleted}
