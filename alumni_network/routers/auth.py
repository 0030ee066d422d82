import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from alumni_network.config import Settings
from alumni_network.database.connection import mongo_db_dependency
from alumni_network.repositories.user_repository import UserRepository
from alumni_network.schemas.user import LoginRequest, Token
from alumni_network.services.auth_service import AuthService
from alumni_network.utils.dependencies import get_settings
from alumni_network.utils.errors import MissingTokenError, UserNotFoundError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_auth_service(request: Request, db = Depends(mongo_db_dependency), settings: Settings = Depends(get_settings)) -> AuthService:
    return AuthService(UserRepository(db), settings, request.app.state.verify_id_token)


@router.post("/login", response_model=Token)
async def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    try:
        token = await service.login(body.idToken)
    except MissingTokenError as exc:
        return JSONResponse(status_code=400, content={"message": str(exc)})
    except UserNotFoundError:
        return JSONResponse(status_code=404, content={"message": "User not found"})
    except Exception:
        # verification failures are not distinguished for the caller
        logger.exception("Error verifying Firebase token")
        return JSONResponse(status_code=500, content={"message": "Authentication failed"})
    return Token(token=token)
