import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError

from alumni_network.config import Settings
from alumni_network.schemas.user import SessionUser, TokenPayload
from alumni_network.utils.errors import ApiError
from alumni_network.utils.security import decode_access_token


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_push(request: Request):
    return request.app.state.push


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> SessionUser:
    if credentials is None or not credentials.credentials:
        raise ApiError(401, "Unauthorized: missing session token")
    try:
        payload = TokenPayload(**decode_access_token(credentials.credentials, settings.jwt_secret, settings.jwt_algorithm))
    except (JWTError, ValidationError) as exc:
        logger.warning("Rejected session token: %s", exc)
        raise ApiError(401, "Unauthorized: invalid or expired session token")
    return SessionUser(id=payload.id, role=payload.role)
