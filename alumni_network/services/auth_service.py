import logging
from typing import Any, Callable, Dict

from starlette.concurrency import run_in_threadpool

from alumni_network.config import Settings
from alumni_network.repositories.user_repository import UserRepository
from alumni_network.utils.errors import MissingTokenError, UserNotFoundError
from alumni_network.utils.security import create_access_token


logger = logging.getLogger(__name__)

IdTokenVerifier = Callable[[str], Dict[str, Any]]


def firebase_verify_id_token(id_token: str) -> Dict[str, Any]:
    from firebase_admin import auth

    return auth.verify_id_token(id_token)


class AuthService:
    """Exchanges a Firebase ID token for a short-lived session token."""

    def __init__(
        self,
        user_repository: UserRepository,
        settings: Settings,
        verify_id_token: IdTokenVerifier = firebase_verify_id_token,
    ) -> None:
        self.user_repository = user_repository
        self.settings = settings
        self.verify_id_token = verify_id_token

    async def login(self, id_token: str) -> str:
        """
        - Missing token -> MissingTokenError
        - Verify the token with the identity provider
        - Look up (never create) the local user by Firebase uid -> UserNotFoundError
        - Sign a session token carrying the local id and role
        """
        if not id_token:
            raise MissingTokenError("Missing Firebase token")

        decoded = await run_in_threadpool(self.verify_id_token, id_token)
        firebase_uid = decoded["uid"]

        user = await self.user_repository.get_by_firebase_uid(firebase_uid)
        if not user:
            logger.warning("No local user for Firebase uid %s", firebase_uid)
            raise UserNotFoundError(firebase_uid)

        token = create_access_token(
            {"id": user["_id"], "role": user.get("role")},
            self.settings.jwt_secret,
            algorithm=self.settings.jwt_algorithm,
            expires_minutes=self.settings.jwt_expire_minutes,
        )
        logger.info("Issued session token for user %s", user["_id"])
        return token
