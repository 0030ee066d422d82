import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from alumni_network.config import Settings
from alumni_network.database.connection import MongoStore
from alumni_network.database.registry import ensure_indexes
from alumni_network.routers.auth import router as auth_router
from alumni_network.routers.files import router as files_router
from alumni_network.routers.messages import router as messages_router
from alumni_network.routers.notifications import router as notifications_router
from alumni_network.routers.testing import messages_router as test_messages_router
from alumni_network.routers.testing import notifications_router as test_notifications_router
from alumni_network.services.auth_service import IdTokenVerifier, firebase_verify_id_token
from alumni_network.utils.errors import register_error_handlers
from alumni_network.utils.firebase import init_firebase
from alumni_network.utils.logging_config import configure_logging
from alumni_network.utils.notifications import NoopPush, select_push


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[MongoStore] = None,
    verify_id_token: Optional[IdTokenVerifier] = None,
    push=None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    store = store or MongoStore(settings)
    use_firebase = push is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):

        store.connect()
        if use_firebase:
            app.state.push = select_push(init_firebase(settings))
        await ensure_indexes(store.db)
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="Alumni Network API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.verify_id_token = verify_id_token or firebase_verify_id_token
    app.state.push = push or NoopPush()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(messages_router)
    app.include_router(files_router)
    app.include_router(notifications_router)
    if settings.enable_test_routes:
        app.include_router(test_messages_router)
        app.include_router(test_notifications_router)

    @app.get("/")
    async def root(request: Request):

        db = request.app.state.store.db
        collections = await db.list_collection_names()
        return {"message": "Connected to MongoDB!", "collections": collections}

    return app


app = create_app()
