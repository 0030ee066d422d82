import logging
from typing import Dict, Optional

from starlette.concurrency import run_in_threadpool


logger = logging.getLogger(__name__)


class NoopPush:

    enabled = False

    async def send(self, token: str, title: str, body: str, data: Optional[Dict[str, str]] = None) -> None:
        return


class FirebasePush:

    enabled = True

    def __init__(self, app) -> None:
        from firebase_admin import messaging

        self._messaging = messaging
        self._app = app

    async def send(self, token: str, title: str, body: str, data: Optional[Dict[str, str]] = None) -> None:
        if not token:
            return
        message = self._messaging.Message(
            token=token,
            notification=self._messaging.Notification(title=title, body=body),
            data={k: str(v) for k, v in (data or {}).items()},
        )
        # firebase_admin is sync
        message_id = await run_in_threadpool(self._messaging.send, message, app=self._app)
        logger.info("Push notification sent: %s", message_id)


def select_push(firebase_app) -> "NoopPush | FirebasePush":
    if firebase_app is None:
        return NoopPush()
    return FirebasePush(firebase_app)
